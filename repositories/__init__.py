"""Supabase-backed persistence and identity."""
