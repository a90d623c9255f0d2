"""
Stages API Endpoints.

Read-only: stages are fixed at process start.
"""

from fastapi import APIRouter, Depends

from api.dependencies import get_context
from api.models import StageListResponse
from domain.stage import PARTNERS, SOURCERS
from services.board_context import BoardContext
from services.filter_view import stage_tabs

router = APIRouter()


@router.get(
    "/stages",
    response_model=StageListResponse,
    summary="List Stages",
    description="Pipeline stages in board order, the filter tabs, and the sourcer/partner rosters."
)
def list_stages(context: BoardContext = Depends(get_context)):
    registry = context.registry
    return StageListResponse.from_registry(
        registry,
        tabs=list(stage_tabs(registry)),
        sourcers=list(SOURCERS),
        partners=list(PARTNERS),
    )
