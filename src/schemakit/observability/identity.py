from typing import Dict
from fastapi import Request

from schemakit.security.jwt_utils import get_payload


def extract_user_identity(request: Request, payload: Dict) -> str:
    """
    Extract user identity from:
    1. Proxy-authenticated user header
    2. JWT token (unverified claims)
    3. Payload
    4. Fallback to anonymous
    """

    user_email = request.headers.get("X-Authenticated-User-Email")
    if user_email:
        return user_email.split(":")[-1]

    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        claims = get_payload(auth_header.split(" ", 1)[1])
        if claims is not None:
            return claims.get("email") or claims.get("sub") or "unknown_user"

    if payload.get("user_id"):
        return payload["user_id"]

    return "anonymous"
