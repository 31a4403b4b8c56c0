"""Authentication dependencies for protected routes."""

import hmac
import logging

import jwt
from fastapi import Depends, Header, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from portfolio_tracker.config import settings

logger = logging.getLogger(__name__)

security = HTTPBearer()


def decode_access_token(token: str) -> dict | None:
    """Decode and verify a JWT access token.

    Returns:
        Token payload or None if invalid or expired
    """
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except jwt.PyJWTError as e:
        logger.debug(f"Rejected access token: {e}")
        return None


def get_current_user_id(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> str:
    """
    Get the authenticated user's id from the bearer token.

    Usage:
        @router.get("/protected")
        def protected_route(user_id: str = Depends(get_current_user_id)):
            return {"user_id": user_id}
    """
    payload = decode_access_token(credentials.credentials)

    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has no subject",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return str(user_id)


def require_service_key(x_service_key: str | None = Header(None)) -> None:
    """Allow only scheduled jobs that present the configured service key."""
    if not settings.service_api_key:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service key is not configured",
        )
    if not x_service_key or not hmac.compare_digest(x_service_key, settings.service_api_key):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid service key",
        )
