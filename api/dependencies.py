"""
Shared FastAPI dependencies.

The board is single-user: the process holds one BoardContext, created and
started on first request and closed on application shutdown. Handlers run in
FastAPI's threadpool, so they hold `context.lock` while touching the board.
"""

from __future__ import annotations

import threading
from typing import Optional

from fastapi import HTTPException

from domain.session import SessionRequiredError
from services.board_context import BoardContext
from services.deal_board import DealBoard

_context: Optional[BoardContext] = None
_context_lock = threading.Lock()


def get_context() -> BoardContext:
    global _context
    with _context_lock:
        if _context is None:
            context = BoardContext.from_supabase()
            context.start()
            _context = context
        return _context


def close_context() -> None:
    global _context
    with _context_lock:
        if _context is not None:
            _context.close()
            _context = None


def require_board(context: BoardContext) -> DealBoard:
    """Return the signed-in board or answer 401. Call with `context.lock` held."""

    try:
        return context.board
    except SessionRequiredError as e:
        raise HTTPException(status_code=401, detail=str(e))
