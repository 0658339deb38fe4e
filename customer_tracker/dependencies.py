"""
Dependency functions for the HTTP API.

Resolves the shared repository and auth service from application state
and the authenticated caller from the bearer token. Once the token is
accepted, the request's table operations run under it.
"""

from typing import Any, Dict, Optional

from fastapi import Depends, Header, HTTPException, Request, status

from .auth_service import SupabaseAuthService
from .repositories.customer_repository import CustomerRepository
from .supabase_client import set_access_token


def get_token_from_header(authorization: Optional[str]) -> str:
    """
    Extract JWT token from Authorization header.

    Args:
        authorization: Authorization header value

    Returns:
        JWT token string

    Raises:
        HTTPException: If authorization header is missing or malformed
    """
    if not authorization:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization header format. Use: Bearer <token>",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return parts[1]


def get_customer_repository(request: Request) -> CustomerRepository:
    return request.app.state.customer_repository


def get_auth_service(request: Request) -> SupabaseAuthService:
    return request.app.state.auth_service


def get_bearer_token(authorization: Optional[str] = Header(None)) -> str:
    """Dependency returning the raw bearer token of the request."""
    return get_token_from_header(authorization)


async def get_current_user(
    token: str = Depends(get_bearer_token),
    auth_service: SupabaseAuthService = Depends(get_auth_service),
) -> Dict[str, Any]:
    """
    Dependency that resolves the caller from a Supabase access token.

    Raises:
        HTTPException: 401 if the token is missing or not accepted by Supabase
    """
    user = await auth_service.current_user(token)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    set_access_token(token)
    return user
