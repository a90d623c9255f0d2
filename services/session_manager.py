"""
Session manager: authentication state that gates the deal board.

Handles:
- Resolving the current session from the identity provider (LOADING -> SIGNED_IN/SIGNED_OUT)
- Email/password sign-in, notifying a listener so the board can load
- Gating: `require_identity()` raises when no one is signed in
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from domain.session import (
    AuthFailure,
    Identity,
    Session,
    SessionRequiredError,
    SignInResult,
)
from repositories.identity_repository import IdentityProvider

logger = logging.getLogger(__name__)

SignInListener = Callable[[Identity], None]


class SessionManager:
    def __init__(self, provider: IdentityProvider) -> None:
        self._provider = provider
        self._session = Session.loading()
        self._listeners: List[SignInListener] = []

    @property
    def session(self) -> Session:
        return self._session

    @property
    def identity(self) -> Optional[Identity]:
        return self._session.identity

    def on_sign_in(self, listener: SignInListener) -> None:
        """Register a callback invoked with the identity after each successful sign-in."""
        self._listeners.append(listener)

    def get_session(self) -> Session:
        """Ask the identity provider who is signed in and record the answer."""

        identity = self._provider.get_current_identity()
        self._session = Session.signed_in(identity) if identity else Session.signed_out()
        return self._session

    def sign_in(self, email: str, password: str) -> SignInResult:
        """
        Submit credentials to the identity provider.

        On failure the provider's message is returned and the state stays
        SIGNED_OUT (a failed attempt from LOADING also settles on SIGNED_OUT).
        """

        outcome = self._provider.sign_in(email, password)
        if isinstance(outcome, AuthFailure):
            logger.info("Sign-in failed for %s", email)
            if not self._session.is_signed_in:
                self._session = Session.signed_out()
            return SignInResult(error=outcome.message)

        self._session = Session.signed_in(outcome)
        logger.info("Signed in as %s", outcome.email or outcome.user_id)
        for listener in self._listeners:
            listener(outcome)
        return SignInResult(identity=outcome)

    def require_identity(self) -> Identity:
        identity = self._session.identity
        if identity is None:
            raise SessionRequiredError(f"Sign in required (session is {self._session.state.value})")
        return identity


__all__ = ["SessionManager", "SignInListener"]
