import time
from typing import Any, Dict, Iterable, Mapping, Optional

from jose import jwt
from jose.exceptions import ExpiredSignatureError, JOSEError, JWTError

from schemakit.utils.exceptions import ExpiredTokenError, InvalidTokenError

TYPE_AUTH = "auth"
TYPE_SSO_REQUEST_TOKEN = "request_token"
TYPE_INVITATION = "invitation"
TYPE_RESET_PASSWORD = "reset_password"


def decode(
    token: str,
    key: str,
    algorithms: Iterable[str] = ("HS256",),
) -> Dict[str, Any]:
    """
    Verify and decode a token.

    Raises ExpiredTokenError for an expired token and InvalidTokenError
    for anything else that fails verification.
    """
    try:
        return jwt.decode(token, key, algorithms=list(algorithms))
    except ExpiredSignatureError as e:
        raise ExpiredTokenError() from e
    except JWTError as e:
        raise InvalidTokenError() from e


def encode(
    payload: Mapping[str, Any],
    key: str,
    alg: str = "HS256",
    key_id: Optional[str] = None,
    headers: Optional[Mapping[str, Any]] = None,
) -> str:
    extra_headers = dict(headers or {})
    if key_id is not None:
        extra_headers["kid"] = key_id

    return jwt.encode(dict(payload), key, algorithm=alg, headers=extra_headers or None)


def _split(token: Any) -> Optional[list]:
    if not isinstance(token, str):
        return None

    parts = token.split(".")
    if len(parts) != 3:
        return None
    return parts


def is_jwt(token: Any) -> bool:
    if _split(token) is None:
        return False

    try:
        header = jwt.get_unverified_header(token)
    except JOSEError:
        return False

    return header.get("typ") == "JWT"


def get_payload(token: Any) -> Optional[Dict[str, Any]]:
    """
    Claims of the token without verifying its signature.
    """
    if _split(token) is None:
        return None

    try:
        return jwt.get_unverified_claims(token)
    except JOSEError:
        return None


def has_payload_type(type_name: str, payload: Any) -> bool:
    return isinstance(payload, Mapping) and payload.get("type") == type_name


def has_expired(token: Any) -> Optional[bool]:
    """
    None when the token carries no numeric exp claim.
    """
    payload = get_payload(token)
    if not payload or "exp" not in payload:
        return None

    exp = payload["exp"]
    if isinstance(exp, bool) or not isinstance(exp, (int, float)):
        return None

    return time.time() >= exp
