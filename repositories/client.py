"""
Supabase client initialization.

This module contains *only* the connection setup. Repository modules call
`get_supabase()` to obtain the shared client; it is created on first use so
that importing the package does not require credentials.

Environment variables:
- SUPABASE_URL: Your Supabase project URL (required)
- SUPABASE_KEY: Your Supabase anon key; row access is governed by the signed-in user (required)
- DEALS_TABLE: Table holding deal rows (default: "deals")
- LOG_LEVEL: Logging level for entry points (default: "INFO")
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

# The dependency is `supabase` (supabase-py). If your editor can't resolve it,
# install it in your environment: `pip install supabase`.
from supabase import Client, create_client  # type: ignore[import-not-found]

# Load environment variables from the .env file at the project root
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DEFAULT_DEALS_TABLE: str = "deals"


def deals_table() -> str:
    return os.getenv("DEALS_TABLE") or DEFAULT_DEALS_TABLE


def log_level() -> str:
    return (os.getenv("LOG_LEVEL") or "INFO").upper()


@lru_cache(maxsize=1)
def get_supabase() -> Client:
    """
    Return the process-wide Supabase client.

    Raises:
        RuntimeError: if SUPABASE_URL or SUPABASE_KEY is not set.
    """

    supabase_url = os.getenv("SUPABASE_URL")
    supabase_key = os.getenv("SUPABASE_KEY")

    if not supabase_url:
        raise RuntimeError(
            "Missing environment variable: SUPABASE_URL. "
            "Set SUPABASE_URL to your Supabase project URL."
        )

    if not supabase_key:
        raise RuntimeError(
            "Missing environment variable: SUPABASE_KEY. "
            "Set SUPABASE_KEY to your Supabase API key."
        )

    return create_client(supabase_url, supabase_key)


__all__ = ["DEFAULT_DEALS_TABLE", "deals_table", "get_supabase", "log_level"]
