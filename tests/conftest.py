"""
Pytest configuration for NomNomNow backend tests.

Sets up test environment and global fixtures.
"""
import os
import pytest
from unittest.mock import MagicMock

# Disable config validation during tests
# This allows tests to run without requiring real environment variables
os.environ["VALIDATE_CONFIG"] = "false"

# Set test environment variables
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_PUBLISHABLE_KEY", "test-publishable-key")
os.environ.setdefault("GOOGLE_API_KEY", "test-google-api-key")
os.environ.setdefault("GOOGLE_PLACES_API_KEY", "test-places-api-key")

from fakes import FakeSupabase  # noqa: E402


@pytest.fixture
def supabase_client():
    """
    Mock Supabase client for tests that only check the calls made.
    Returns a MagicMock that simulates Supabase client behavior.
    """
    mock_client = MagicMock()
    return mock_client


@pytest.fixture
def fake_db():
    """In-memory Supabase fake with profiles, restaurants and friendships."""
    return FakeSupabase()
