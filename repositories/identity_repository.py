"""
Identity repository (Supabase Auth).

Wraps the provider calls the session manager needs: looking up the currently
signed-in user and signing in with email and password.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Protocol, Union

from supabase import AuthError, Client  # type: ignore[import-not-found]

from domain.session import AuthFailure, Identity
from repositories.client import get_supabase

logger = logging.getLogger(__name__)


class IdentityProvider(Protocol):
    def get_current_identity(self) -> Optional[Identity]: ...

    def sign_in(self, email: str, password: str) -> Union[Identity, AuthFailure]: ...


def _user_to_identity(user: Any) -> Optional[Identity]:
    """Convert a Supabase Auth user object into an Identity."""

    if user is None:
        return None
    return Identity(user_id=str(user.id), email=getattr(user, "email", None))


class SupabaseIdentityProvider:
    def __init__(self, client: Optional[Client] = None) -> None:
        self._client = client if client is not None else get_supabase()

    def get_current_identity(self) -> Optional[Identity]:
        """
        Return the signed-in identity, or None.

        Supabase raises AuthSessionMissingError (an AuthError) when no session
        is stored; that is a signed-out state, not a failure.
        """

        try:
            response = self._client.auth.get_user()
        except AuthError as e:
            logger.debug("No current Supabase session: %s", e)
            return None
        return _user_to_identity(getattr(response, "user", None))

    def sign_in(self, email: str, password: str) -> Union[Identity, AuthFailure]:
        try:
            response = self._client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except AuthError as e:
            return AuthFailure(message=e.message or str(e))

        identity = _user_to_identity(getattr(response, "user", None))
        if identity is None:
            return AuthFailure(message="Sign-in returned no user")
        return identity


__all__ = ["IdentityProvider", "SupabaseIdentityProvider"]
