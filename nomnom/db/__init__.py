"""
Database access layer for the NomNomNow backend.

All database operations MUST:
- Respect Row Level Security (RLS): user_id = auth.uid()
- Never bypass RLS
- Never define schemas, migrations or RLS policies here

Includes:
- Supabase client initialization (per-request, user-scoped or anonymous)
"""

from .client import get_anon_supabase_client, get_supabase_client

__all__ = ["get_supabase_client", "get_anon_supabase_client"]
