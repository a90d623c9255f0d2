"""
Deals API Endpoints.

Endpoints for reading the board and forwarding edits to the deal board
service. Every write goes to the database first; the board only changes when
the database accepts it, and a rejected write is reported as 502.
"""

from typing import Optional, Union

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from api.dependencies import get_context, require_board
from api.models import DealCreateRequest, DealFieldUpdateRequest, DealListResponse, DealResponse
from domain.deal import DealDraft, is_editable_field
from services.board_context import BoardContext
from services.deal_board import DealBoard
from services.filter_view import ALL_STAGES

router = APIRouter()


def _loaded_board(context: BoardContext) -> DealBoard:
    """Call with `context.lock` held."""
    board = require_board(context)
    if not board.is_loaded:
        raise HTTPException(
            status_code=503,
            detail="Deal board has not been loaded. Sign in again to retry the initial load."
        )
    return board


def _resolve_deal_id(board: DealBoard, raw_id: str) -> Optional[Union[int, str]]:
    """Match a path id against the board; ids are opaque, so compare their text form."""
    for deal in board.deals:
        if str(deal.id) == raw_id:
            return deal.id
    return None


@router.get(
    "/deals",
    response_model=DealListResponse,
    summary="List Deals",
    description="Deals in stage order, optionally limited to one stage tab."
)
def list_deals(
    stage: str = Query(ALL_STAGES, description="Stage tab to show, or 'All'"),
    context: BoardContext = Depends(get_context),
):
    """
    Return the board under the active stage tab.

    **Example usage:**
    - Whole board: `GET /api/v1/deals`
    - One stage: `GET /api/v1/deals?stage=Partner%20Call`
    """
    with context.lock:
        board = _loaded_board(context)
        deals = board.view(stage)
    items = [DealResponse.from_deal(deal) for deal in deals]
    return DealListResponse(items=items, total_count=len(items), active_stage=stage)


@router.post(
    "/deals",
    response_model=list[DealResponse],
    status_code=201,
    summary="Add Deal",
    description="Insert a new deal; the response carries the database-assigned id and last_updated."
)
def add_deal(request: DealCreateRequest, context: BoardContext = Depends(get_context)):
    draft = DealDraft(
        company=request.company,
        stage=request.stage,
        sourcer=request.sourcer,
        partner=request.partner,
        notes=request.notes,
    )
    with context.lock:
        board = _loaded_board(context)
        try:
            result = board.add_deal(draft)
        except Exception as e:
            raise HTTPException(status_code=500, detail=f"Failed to add deal: {str(e)}")

    if not result.success:
        raise HTTPException(status_code=502, detail=result.error)
    return [DealResponse.from_deal(deal) for deal in result.deals]


@router.patch(
    "/deals/{deal_id}",
    response_model=DealResponse,
    summary="Update Deal Field",
    description="Change a single field on a deal. Changing the stage moves the deal on the board."
)
def update_deal_field(
    deal_id: str,
    request: DealFieldUpdateRequest,
    context: BoardContext = Depends(get_context),
):
    if not is_editable_field(request.field):
        raise HTTPException(status_code=422, detail=f"Field is not editable: {request.field}")

    with context.lock:
        board = _loaded_board(context)
        resolved = _resolve_deal_id(board, deal_id)
        if resolved is None:
            raise HTTPException(status_code=404, detail=f"Deal not found: {deal_id}")

        try:
            result = board.update_field(resolved, request.field, request.value)
        except Exception as e:
            raise HTTPException(status_code=500, detail=f"Failed to update deal: {str(e)}")

    if not result.success:
        raise HTTPException(status_code=502, detail=result.error)
    return DealResponse.from_deal(result.deal)


@router.delete(
    "/deals/{deal_id}",
    status_code=204,
    response_class=Response,
    summary="Delete Deal",
)
def delete_deal(deal_id: str, context: BoardContext = Depends(get_context)):
    with context.lock:
        board = _loaded_board(context)
        resolved = _resolve_deal_id(board, deal_id)
        if resolved is None:
            raise HTTPException(status_code=404, detail=f"Deal not found: {deal_id}")

        try:
            result = board.delete_deal(resolved)
        except Exception as e:
            raise HTTPException(status_code=500, detail=f"Failed to delete deal: {str(e)}")

    if not result.success:
        raise HTTPException(status_code=502, detail=result.error)
    return Response(status_code=204)
