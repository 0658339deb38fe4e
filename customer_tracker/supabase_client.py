"""
Supabase client configuration for the customer tracker.

Provides the lazily created async Supabase client used for Auth calls and
the request-scoped access token that table operations run under.

The Auth client never holds a user session: supabase-py rewrites the
Authorization header of a client's PostgREST sub-client whenever that
client signs a user in or out, so table operations do not go through it.
"""

from contextvars import ContextVar
from typing import Optional

from supabase import AsyncClient, AsyncClientOptions, acreate_client

from .config import settings
from .logging_config import get_logger

logger = get_logger(__name__)

# Access token of the caller whose request is being served
access_token_context: ContextVar[Optional[str]] = ContextVar("access_token", default=None)


class SupabaseConfig:
    """
    Supabase configuration class.

    Loads Supabase URL and anon key from settings.
    """

    def __init__(self) -> None:
        """Initialize Supabase configuration from settings."""
        self.url: str = settings.SUPABASE_URL
        self.key: str = settings.SUPABASE_ANON_KEY

        if not self.url or not self.key:
            logger.warning("Supabase credentials not fully configured")
            logger.debug(f"SUPABASE_URL: {'set' if self.url else 'not set'}")
            logger.debug(f"SUPABASE_ANON_KEY: {'set' if self.key else 'not set'}")

    @property
    def is_configured(self) -> bool:
        """Check if Supabase is properly configured."""
        return bool(self.url and self.key)

    @property
    def rest_url(self) -> str:
        """Base URL of the project's PostgREST API."""
        return f"{self.url.rstrip('/')}/rest/v1"


# Global configuration instance
config = SupabaseConfig()

# Global Supabase client instance
_supabase_client: Optional[AsyncClient] = None


async def get_supabase_client() -> AsyncClient:
    """
    Get or create the async Supabase client used for Auth.

    Sessions are neither persisted nor refreshed; every caller is
    identified by the access token it sends.

    Returns:
        Configured Supabase client

    Raises:
        ValueError: If Supabase is not properly configured
    """
    global _supabase_client

    if not config.is_configured:
        raise ValueError("Supabase not configured. Set SUPABASE_URL and SUPABASE_ANON_KEY")

    if _supabase_client is None:
        logger.info("Initializing Supabase client...")
        _supabase_client = await acreate_client(
            config.url,
            config.key,
            options=AsyncClientOptions(persist_session=False, auto_refresh_token=False),
        )
        logger.info("Supabase client initialized successfully")

    return _supabase_client


def reset_supabase_client() -> None:
    """Drop the cached client so the next call creates a fresh one."""
    global _supabase_client
    _supabase_client = None


def set_access_token(token: Optional[str]) -> None:
    """Run the rest of the current request's table operations as token's owner."""
    access_token_context.set(token)


def get_access_token() -> Optional[str]:
    """Access token of the current caller, or None outside a request."""
    return access_token_context.get()


def clear_access_token() -> None:
    access_token_context.set(None)
