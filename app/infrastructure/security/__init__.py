"""Security: bearer token signing and decoding."""

from app.infrastructure.security.jwt import create_access_token, decode_principal_id

__all__ = [
    "create_access_token",
    "decode_principal_id",
]
