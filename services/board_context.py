"""
Application context for one board session.

Owns the session manager and the deal board. Created at session start and
closed at process exit; nothing about the session lives in module globals.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

from domain.deal import BoardResult
from domain.session import Identity, Session, SignInResult
from domain.stage import DEFAULT_REGISTRY, StageRegistry
from repositories.deal_repository import DealPersistence, SupabaseDealRepository
from repositories.identity_repository import IdentityProvider, SupabaseIdentityProvider
from services.deal_board import DealBoard
from services.session_manager import SessionManager

logger = logging.getLogger(__name__)


class BoardContext:
    """
    Wires sign-in to the initial board load.

    Lifecycle:
    - `start()` resolves the current session and loads the board when signed in
    - `sign_in()` loads (or reloads) the board after every successful sign-in
    - `board` is only reachable while signed in
    - `close()` drops board state

    The engine is single-threaded. Callers that may run on several threads
    (the API's threadpool handlers) must hold `lock` around every board
    read or mutation; `start`, `sign_in` and `close` take it themselves.
    """

    def __init__(
        self,
        identity_provider: IdentityProvider,
        persistence: DealPersistence,
        registry: StageRegistry = DEFAULT_REGISTRY,
    ) -> None:
        self.sessions = SessionManager(identity_provider)
        self._board = DealBoard(persistence, registry)
        self.last_load: Optional[BoardResult] = None
        self.lock = threading.RLock()
        self.sessions.on_sign_in(self._load_for)

    @classmethod
    def from_supabase(cls, registry: StageRegistry = DEFAULT_REGISTRY) -> "BoardContext":
        """Build a context backed by the shared Supabase client."""
        return cls(SupabaseIdentityProvider(), SupabaseDealRepository(), registry)

    @property
    def session(self) -> Session:
        return self.sessions.session

    @property
    def registry(self) -> StageRegistry:
        return self._board.registry

    @property
    def board(self) -> DealBoard:
        """
        The deal board for the signed-in user.

        Raises:
            SessionRequiredError: if no one is signed in
        """

        self.sessions.require_identity()
        return self._board

    def _load_for(self, identity: Identity) -> None:
        self.last_load = self._board.load()
        if not self.last_load.success:
            logger.warning(
                "Initial board load failed",
                extra={"user_id": identity.user_id, "error": self.last_load.error},
            )

    def start(self) -> Session:
        with self.lock:
            session = self.sessions.get_session()
            if session.identity is not None:
                self._load_for(session.identity)
            return session

    def sign_in(self, email: str, password: str) -> SignInResult:
        with self.lock:
            return self.sessions.sign_in(email, password)

    def close(self) -> None:
        with self.lock:
            self._board.clear()
            self.last_load = None


__all__ = ["BoardContext"]
