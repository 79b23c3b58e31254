from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from agent_dashboard_service.config import settings
from agent_dashboard_service.logging_config import logger

# auto_error is off so that requests pass untouched while auth is disabled
bearer_scheme = HTTPBearer(auto_error=False, description="JWT bearer token")


def get_token_payload(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[Dict[str, Any]]:
    """
    Decode and validate the bearer JWT when authentication is enabled.

    Returns None when AUTH_ENABLED is off. The payload is also stored on
    ``request.state.token`` for use further down the request.
    """
    if not settings.AUTH_ENABLED:
        return None

    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if credentials is None or not settings.JWT_SECRET_KEY:
        raise credentials_exception

    options = {"verify_aud": settings.JWT_AUDIENCE is not None}
    try:
        payload = jwt.decode(
            credentials.credentials,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.JWT_AUDIENCE,
            issuer=settings.JWT_ISSUER,
            options=options,
        )
    except JWTError as e:
        logger.warning(f"JWT validation error: {e}")
        raise credentials_exception

    request.state.token = payload
    return payload


def get_tenant_id(
    payload: Optional[Dict[str, Any]] = Depends(get_token_payload),
) -> str:
    """Tenant of the request: the token's ``tenant_id`` claim, else the configured tenant."""
    if payload and payload.get("tenant_id"):
        return str(payload["tenant_id"])
    return settings.TENANT_ID
