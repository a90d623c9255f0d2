"""
Domain: authentication session.

States: LOADING -> {SIGNED_OUT, SIGNED_IN}. SIGNED_OUT -> SIGNED_IN only through a
successful sign-in. There is no sign-out transition.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class SessionState(str, Enum):
    LOADING = "loading"
    SIGNED_OUT = "signed_out"
    SIGNED_IN = "signed_in"


class SessionRequiredError(Exception):
    """Raised when the deal board is accessed without a signed-in identity."""


@dataclass(frozen=True, slots=True)
class Identity:
    """Signed-in user as reported by the identity provider."""

    user_id: str
    email: Optional[str] = None


@dataclass(frozen=True, slots=True)
class AuthFailure:
    """Provider-defined sign-in failure. The message is shown to the user as-is."""

    message: str


@dataclass(frozen=True, slots=True)
class Session:
    state: SessionState
    identity: Optional[Identity] = None

    def __post_init__(self) -> None:
        if (self.state is SessionState.SIGNED_IN) != (self.identity is not None):
            raise ValueError("identity must be set exactly when state is SIGNED_IN")

    @classmethod
    def loading(cls) -> "Session":
        return cls(state=SessionState.LOADING)

    @classmethod
    def signed_out(cls) -> "Session":
        return cls(state=SessionState.SIGNED_OUT)

    @classmethod
    def signed_in(cls, identity: Identity) -> "Session":
        return cls(state=SessionState.SIGNED_IN, identity=identity)

    @property
    def is_signed_in(self) -> bool:
        return self.state is SessionState.SIGNED_IN


@dataclass(frozen=True, slots=True)
class SignInResult:
    """
    Result of a sign-in attempt.

    identity: the signed-in identity (None on failure)
    error: provider message (None on success)
    """

    identity: Optional[Identity] = None
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.identity is not None and self.error is None


__all__ = [
    "AuthFailure",
    "Identity",
    "Session",
    "SessionRequiredError",
    "SessionState",
    "SignInResult",
]
