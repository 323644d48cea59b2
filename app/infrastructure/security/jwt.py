"""Bearer tokens that identify a principal.

The only claim the lifecycle API relies on is sub (the User id). Role
assignments are never put in the token; they are re-read from the store on
every request so a revoked or semester-expired role takes effect at once.
"""

from datetime import UTC, datetime, timedelta
from typing import Any

from jose import ExpiredSignatureError, JWTError, jwt

from app.core.config import get_settings


def create_access_token(
    principal_id: str,
    expires_delta: timedelta | None = None,
    extra_claims: dict[str, Any] | None = None,
) -> str:
    """Sign a token whose sub is principal_id.

    Args:
        principal_id: User id of the caller.
        expires_delta: TTL; defaults to settings.access_token_expire_minutes.
        extra_claims: Additional claims; sub and exp cannot be overridden.
            aud is set from settings.jwt_audience when configured.
    """
    settings = get_settings()
    ttl = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    claims = {
        **(extra_claims or {}),
        "sub": principal_id,
        "exp": datetime.now(UTC) + ttl,
    }
    if settings.jwt_audience:
        claims["aud"] = settings.jwt_audience
    return jwt.encode(
        claims, settings.secret_key.get_secret_value(), algorithm=settings.algorithm
    )


def decode_principal_id(token: str) -> str:
    """Return the sub claim of a valid token.

    The aud claim is verified only when settings.jwt_audience is configured;
    otherwise any aud the issuer added is ignored.

    Raises:
        ValueError: The token is malformed, badly signed, expired, or has
            no usable sub.
    """
    settings = get_settings()
    try:
        claims = jwt.decode(
            token,
            settings.secret_key.get_secret_value(),
            algorithms=[settings.algorithm],
            audience=settings.jwt_audience or None,
            options={
                "require_exp": True,
                "require_sub": True,
                "verify_aud": bool(settings.jwt_audience),
            },
        )
    except ExpiredSignatureError as e:
        raise ValueError("Token expired") from e
    except JWTError as e:
        raise ValueError(f"Invalid token: {e!s}") from e
    principal_id = claims.get("sub")
    if not isinstance(principal_id, str) or not principal_id:
        raise ValueError("Token has no principal")
    return principal_id
