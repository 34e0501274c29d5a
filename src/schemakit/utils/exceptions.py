class SchemaKitError(Exception):
    """
    Base exception for all schemakit errors
    """
    pass


class SchemaDefinitionError(SchemaKitError):
    """
    Raised when a schema file or payload cannot be turned into fields
    """
    pass


class TokenError(SchemaKitError):
    """
    Base exception for JWT failures
    """
    pass


class InvalidTokenError(TokenError):
    """
    Raised when a token cannot be decoded or verified
    """
    def __init__(self, message: str = "Invalid token"):
        super().__init__(message)


class ExpiredTokenError(TokenError):
    """
    Raised when a token's exp claim is in the past
    """
    def __init__(self, message: str = "Expired token"):
        super().__init__(message)
