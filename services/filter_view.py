"""
Filter view for the deal board.

A pure projection: it never mutates or re-sorts its input, so the board's
stage ordering carries through unchanged.
"""

from __future__ import annotations

from typing import Iterable, Tuple

from domain.deal import Deal
from domain.stage import StageRegistry

ALL_STAGES: str = "All"


def filter_deals(deals: Iterable[Deal], active_stage: str = ALL_STAGES) -> Tuple[Deal, ...]:
    """
    Return the deals visible under the active stage tab.

    "All" returns every deal; any other value keeps only deals whose stage is
    exactly that value (an unknown tab therefore shows nothing).
    """

    if active_stage == ALL_STAGES:
        return tuple(deals)
    return tuple(deal for deal in deals if deal.stage == active_stage)


def stage_tabs(registry: StageRegistry) -> Tuple[str, ...]:
    """Tab order shown above the board: "All" followed by every stage."""
    return (ALL_STAGES, *registry.stages)


__all__ = ["ALL_STAGES", "filter_deals", "stage_tabs"]
