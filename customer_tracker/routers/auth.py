"""
Authentication endpoints.

Sign up, sign in, sign out and current-user lookup using Supabase Auth.
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, status

from ..auth_service import SupabaseAuthService
from ..dependencies import get_auth_service, get_bearer_token, get_current_user
from ..domain.exceptions import AuthError
from ..models import AuthResponse, MessageResponse, UserResponse, UserSignIn, UserSignUp

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _auth_http_error(e: AuthError) -> HTTPException:
    if e.code == "email_exists":
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message)
    if e.code == "invalid_credentials":
        return HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        )
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)


@router.post(
    "/signup",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register new user",
)
async def sign_up(
    user_data: UserSignUp,
    auth_service: SupabaseAuthService = Depends(get_auth_service),
):
    """
    Register a new user with email, password and display name.

    Raises:
        HTTPException: 409 if the email is taken, 400 on other failures
    """
    try:
        result = await auth_service.sign_up(
            email=user_data.email,
            password=user_data.password,
            full_name=user_data.full_name,
        )
    except AuthError as e:
        logger.error(f"Sign up failed: {e.message}")
        raise _auth_http_error(e)
    return AuthResponse(**result)


@router.post("/signin", response_model=AuthResponse, summary="Sign in user")
async def sign_in(
    credentials: UserSignIn,
    auth_service: SupabaseAuthService = Depends(get_auth_service),
):
    """
    Sign in a user with email and password.

    Raises:
        HTTPException: 401 on bad credentials, 400 on other failures
    """
    try:
        result = await auth_service.sign_in(
            email=credentials.email, password=credentials.password
        )
    except AuthError as e:
        logger.warning(f"Sign in failed: {e.message}")
        raise _auth_http_error(e)
    return AuthResponse(**result)


@router.post("/signout", response_model=MessageResponse, summary="Sign out user")
async def sign_out(
    token: str = Depends(get_bearer_token),
    _user: Dict[str, Any] = Depends(get_current_user),
    auth_service: SupabaseAuthService = Depends(get_auth_service),
):
    """Revoke the caller's session; other signed-in users are unaffected."""
    try:
        await auth_service.sign_out(token)
    except AuthError as e:
        raise _auth_http_error(e)
    return MessageResponse(message="Successfully signed out")


@router.get("/me", response_model=UserResponse, summary="Current user")
async def me(
    user: Dict[str, Any] = Depends(get_current_user),
    auth_service: SupabaseAuthService = Depends(get_auth_service),
):
    """Return the caller, preferring the profile's display name."""
    profile = await auth_service.get_profile(user["id"])
    if profile and profile.full_name:
        user = {**user, "full_name": profile.full_name}
    return UserResponse(**user)
