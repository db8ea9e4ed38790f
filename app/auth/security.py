from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import jwt

from app.core.config import get_settings


def create_access_token(
    *, subject: Dict[str, Any], expires_minutes: Optional[int] = None
) -> str:
    """Issue a token the way the identity provider does. Used for local development and tests."""
    settings = get_settings()
    if expires_minutes is None:
        expires_minutes = settings.access_token_expire_minutes

    to_encode = subject.copy()
    expire = datetime.now(timezone.utc) + timedelta(minutes=expires_minutes)
    to_encode.update({"exp": expire})
    if settings.auth_jwt_audience and "aud" not in to_encode:
        to_encode["aud"] = settings.auth_jwt_audience
    if settings.auth_jwt_issuer and "iss" not in to_encode:
        to_encode["iss"] = settings.auth_jwt_issuer
    encoded_jwt = jwt.encode(
        to_encode, settings.auth_jwt_secret, algorithm=settings.auth_jwt_algorithm
    )
    return encoded_jwt


def decode_access_token(token: str) -> Dict[str, Any]:
    """Verify signature, expiry and (when configured) audience and issuer. Raises JWTError."""
    settings = get_settings()
    options = {"verify_aud": settings.auth_jwt_audience is not None}
    return jwt.decode(
        token,
        settings.auth_jwt_secret,
        algorithms=[settings.auth_jwt_algorithm],
        audience=settings.auth_jwt_audience,
        issuer=settings.auth_jwt_issuer,
        options=options,
    )
