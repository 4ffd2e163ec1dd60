"""
Supabase client factory with RLS enforcement.

This module provides Supabase clients that enforce Row Level Security (RLS).

SECURITY RULES:
1. NEVER use the service_role key for user operations
2. ALWAYS use the user's JWT token from Supabase Auth for the caller's own data
3. RLS policies enforce "users see/mutate only their own restaurants"
   and the friendship visibility rules
4. Clients are created per request
"""

import logging

from nomnom.config import settings
from supabase import Client, create_client

logger = logging.getLogger(__name__)


def get_supabase_client(access_token: str) -> Client:
    """
    Create an authenticated Supabase client for a specific user.

    All queries run as the user (auth.uid() = token 'sub'), so RLS scopes
    them to rows the user may see.

    Args:
        access_token: The user's JWT access token, as verified in
                      nomnom/auth/dependencies.py.

    Returns:
        An authenticated Supabase client that enforces RLS.

    Example:
        >>> client = get_supabase_client(auth_user.access_token)
        >>> client.table("restaurants").select("*").eq("user_id", auth_user.user_id).execute()
    """
    client: Client = create_client(
        supabase_url=settings.SUPABASE_URL,
        supabase_key=settings.SUPABASE_PUBLISHABLE_KEY
    )

    # The token's 'sub' claim becomes auth.uid() in RLS policies
    client.auth.set_session(access_token, access_token)

    logger.debug(
        "Created authenticated Supabase client with user token "
        "(RLS enforced)"
    )

    return client


def get_anon_supabase_client() -> Client:
    """
    Create a Supabase client for an anonymous visitor.

    Uses only the publishable key, so RLS exposes nothing beyond what is
    public (usernames and restaurants shared on public profiles).
    """
    client: Client = create_client(
        supabase_url=settings.SUPABASE_URL,
        supabase_key=settings.SUPABASE_PUBLISHABLE_KEY
    )

    logger.debug("Created anonymous Supabase client (RLS enforced)")

    return client
