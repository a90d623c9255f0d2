"""
Session API Endpoints.

Endpoints for reading the session state and signing in. A successful sign-in
loads the deal board.
"""

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_context
from api.models import SessionResponse, SignInRequest
from domain.session import Session
from services.board_context import BoardContext

router = APIRouter()


def _to_response(session: Session) -> SessionResponse:
    identity = session.identity
    return SessionResponse(
        state=session.state.value,
        user_id=identity.user_id if identity else None,
        email=identity.email if identity else None,
    )


@router.get(
    "/session",
    response_model=SessionResponse,
    summary="Current Session",
    description="Report whether a user is signed in. The frontend shows the login form when signed out."
)
def read_session(context: BoardContext = Depends(get_context)):
    return _to_response(context.session)


@router.post(
    "/session",
    response_model=SessionResponse,
    summary="Sign In",
    description="Sign in with email and password. On success the deal board is loaded."
)
def sign_in(request: SignInRequest, context: BoardContext = Depends(get_context)):
    """
    Sign in to the deal board.

    **Failure response (401):** the identity provider's message, e.g.
    `{"detail": "Invalid login credentials"}`. The session stays signed out.
    """
    result = context.sign_in(request.email, request.password)
    if not result.success:
        raise HTTPException(status_code=401, detail=result.error)
    return _to_response(context.session)
