"""
Authentication service using Supabase Auth.

Provides sign up, sign in, sign out and current-user lookup. Independent
of the customer repository, which only ever receives a user id.

Auth calls go through the Supabase client; profile rows go through the
data service so they run as the calling user like every other table
operation.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from supabase import AsyncClient, AuthApiError

from .domain.entities import UserProfile, UserRole
from .domain.exceptions import AuthError
from .logging_config import get_logger
from .repositories.data_service import DataService
from .supabase_client import set_access_token

logger = get_logger(__name__)


def _user_payload(user: Any, full_name: Optional[str] = None) -> Dict[str, Any]:
    metadata = user.user_metadata or {}
    return {
        "id": user.id,
        "email": user.email,
        "full_name": full_name if full_name is not None else metadata.get("full_name"),
    }


def _session_payload(session: Any) -> Optional[Dict[str, Any]]:
    if not session:
        return None
    return {
        "access_token": session.access_token,
        "refresh_token": session.refresh_token,
        "expires_at": session.expires_at,
    }


class SupabaseAuthService:
    """
    Service class for Supabase authentication operations.

    Handles registration, login, logout and session lookup
    using the Supabase Auth API.
    """

    def __init__(
        self,
        client: AsyncClient,
        data_service: DataService,
        profiles_table: str = "user_profiles",
    ):
        """
        Initialize Supabase auth service.

        Args:
            client: Async Supabase client used for Auth calls
            data_service: Table access for user profiles
            profiles_table: Name of the user profiles table
        """
        self.supabase = client
        self.data_service = data_service
        self.profiles_table = profiles_table

    async def sign_up(
        self,
        email: str,
        password: str,
        full_name: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Register a new user using Supabase Auth.

        Args:
            email: User email address
            password: User password
            full_name: Display name stored on the profile

        Returns:
            Dictionary containing user data and session tokens (session is
            None when email confirmation is pending)

        Raises:
            AuthError: If registration fails
        """
        try:
            logger.info(f"Attempting to register user: {email}")

            response = await self.supabase.auth.sign_up(
                {
                    "email": email.lower(),
                    "password": password,
                    "options": {"data": {"full_name": full_name}},
                }
            )

            if not response.user:
                raise AuthError("User registration failed", "registration_failed")

            user = response.user
            logger.info(f"User registered successfully: {email} (id: {user.id})")

            if response.session:
                # The new user is the caller from here on
                set_access_token(response.session.access_token)

            try:
                now = datetime.now(timezone.utc).isoformat()
                await self.data_service.upsert_row(
                    self.profiles_table,
                    {
                        "id": user.id,
                        "full_name": full_name,
                        "role": UserRole.MEMBER.value,
                        "created_at": now,
                        "updated_at": now,
                    },
                    on_conflict="id",
                )
                logger.debug(f"User profile created for {user.id}")
            except Exception as e:
                # Registration stands even if the profile row could not be written
                logger.error(f"Failed to create user profile: {e}")

            return {
                "user": _user_payload(user, full_name),
                "session": _session_payload(response.session),
            }

        except AuthError:
            raise
        except AuthApiError as e:
            logger.error(f"Supabase auth error during sign up: {e.message}")
            message = e.message.lower()
            if "already registered" in message or "duplicate" in message:
                raise AuthError("Email already registered", "email_exists")
            raise AuthError(f"Registration failed: {e.message}", "supabase_error")
        except Exception as e:
            logger.error(f"Unexpected error during sign up: {e}")
            raise AuthError(f"Registration failed: {str(e)}", "internal_error")

    async def sign_in(self, email: str, password: str) -> Dict[str, Any]:
        """
        Authenticate user with Supabase Auth.

        Returns:
            Dictionary containing user data and session tokens

        Raises:
            AuthError: If authentication fails
        """
        try:
            logger.info(f"Attempting sign in: {email}")

            response = await self.supabase.auth.sign_in_with_password(
                {"email": email.lower(), "password": password}
            )

            if not response.user or not response.session:
                raise AuthError("Invalid email or password", "invalid_credentials")

            logger.info(f"User signed in successfully: {email} (id: {response.user.id})")
            return {
                "user": _user_payload(response.user),
                "session": _session_payload(response.session),
            }

        except AuthError:
            raise
        except AuthApiError as e:
            logger.warning(f"Supabase auth error during sign in: {e.message}")
            message = e.message.lower()
            if "invalid" in message or "credentials" in message:
                raise AuthError("Invalid email or password", "invalid_credentials")
            raise AuthError(f"Sign in failed: {e.message}", "supabase_error")
        except Exception as e:
            logger.error(f"Unexpected error during sign in: {e}")
            raise AuthError(f"Sign in failed: {str(e)}", "internal_error")

    async def sign_out(self, access_token: str) -> None:
        """
        Revoke the session that issued access_token.

        Only the caller's own session ends; other users are unaffected.

        Raises:
            AuthError: If sign out fails
        """
        try:
            await self.supabase.auth.admin.sign_out(access_token)
            logger.info("User signed out")
        except AuthApiError as e:
            logger.error(f"Supabase auth error during sign out: {e.message}")
            raise AuthError(f"Sign out failed: {e.message}", "supabase_error")
        except Exception as e:
            logger.error(f"Unexpected error during sign out: {e}")
            raise AuthError(f"Sign out failed: {str(e)}", "internal_error")

    async def current_user(
        self, access_token: Optional[str] = None
    ) -> Optional[Dict[str, Any]]:
        """
        Resolve the authenticated user.

        Args:
            access_token: JWT to validate

        Returns:
            User data or None when there is no valid session
        """
        try:
            response = await self.supabase.auth.get_user(access_token)
        except Exception as e:
            logger.warning(f"Could not resolve current user: {e}")
            return None

        if not response or not response.user:
            return None
        return _user_payload(response.user)

    async def get_profile(self, user_id: str) -> Optional[UserProfile]:
        """Fetch the user_profiles row for a user, or None if absent."""
        try:
            row = await self.data_service.get_row(self.profiles_table, user_id)
            if row is None:
                logger.warning(f"User profile not found for user {user_id}")
                return None
            return UserProfile.from_row(row)
        except Exception as e:
            logger.error(f"Error fetching profile for user {user_id}: {e}")
            return None
