"""
Deal board service: the in-memory, stage-ordered view of deals.

Every mutation is write-through:
1. The remote call is attempted first.
2. Only if it succeeds is the local collection changed.
3. The collection is then re-sorted by stage position (stable).

A failed remote call leaves the collection exactly as it was. The failure is
logged and returned to the caller as a BoardResult; it is never dropped.

Ordering:
- Deals are ordered by `StageRegistry.index_of(deal.stage)`.
- Python's sort is stable, so deals in the same stage keep their prior order.
- Unknown stages have index -1 and sort before the first known stage.

Re-sorting the whole collection is O(n log n) per mutation, which is fine for a
board of tens to hundreds of deals.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional, Tuple

from domain.deal import BoardResult, Deal, DealDraft, DealId, is_editable_field, normalize_field_value
from domain.stage import DEFAULT_REGISTRY, StageRegistry
from repositories.deal_repository import DealPersistence
from services.filter_view import ALL_STAGES, filter_deals

logger = logging.getLogger(__name__)


class DealBoard:
    """
    Single source of truth for the deals shown on the board.

    Args:
        persistence: remote store the board writes through to
        registry: stage order used for sorting (default: the nine pipeline stages)
    """

    def __init__(self, persistence: DealPersistence, registry: StageRegistry = DEFAULT_REGISTRY) -> None:
        self._persistence = persistence
        self._registry = registry
        self._deals: List[Deal] = []
        self._loaded = False

    @property
    def registry(self) -> StageRegistry:
        return self._registry

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    @property
    def deals(self) -> Tuple[Deal, ...]:
        """Snapshot of the board in stage order."""
        return tuple(self._deals)

    def get(self, deal_id: DealId) -> Optional[Deal]:
        position = self._position(deal_id)
        return None if position is None else self._deals[position]

    def view(self, active_stage: str = ALL_STAGES) -> Tuple[Deal, ...]:
        return filter_deals(self._deals, active_stage)

    def _position(self, deal_id: DealId) -> Optional[int]:
        for i, deal in enumerate(self._deals):
            if deal.id == deal_id:
                return i
        return None

    def _sorted(self, deals: Iterable[Deal]) -> List[Deal]:
        return sorted(deals, key=lambda deal: self._registry.index_of(deal.stage))

    def _reject(self, operation: str, reason: str, **context: Any) -> BoardResult:
        logger.warning(
            "Deal board %s failed: %s",
            operation,
            reason,
            extra={"operation": operation, "error": reason, **context},
        )
        return BoardResult.failed(reason)

    def load(self) -> BoardResult:
        """
        Replace the board with every deal from the remote store.

        Called once per signed-in session, at sign-in time.
        """

        response = self._persistence.list()
        if not response.ok:
            return self._reject("load", response.error)

        deals = self._sorted(response.data)
        ids = [deal.id for deal in deals]
        if len(set(ids)) != len(ids):
            return self._reject("load", "Remote store returned duplicate deal ids")

        self._deals = deals
        self._loaded = True
        logger.info("Loaded %d deals", len(deals))
        return BoardResult.ok(tuple(deals))

    def add_deal(self, draft: DealDraft) -> BoardResult:
        """
        Persist a new deal and add the persisted record(s) to the board.

        The remote store assigns `id` and `last_updated`; nothing is added
        locally until those are known.
        """

        if not self._loaded:
            return self._reject("add", "Deal board has not been loaded", company=draft.company)

        response = self._persistence.insert(draft)
        if not response.ok:
            return self._reject("add", response.error, company=draft.company)
        if not response.data:
            return self._reject("add", "Insert returned no persisted deal", company=draft.company)

        deals = list(self._deals)
        for persisted in response.data:
            position = next((i for i, d in enumerate(deals) if d.id == persisted.id), None)
            if position is None:
                deals.append(persisted)
            else:
                logger.warning(
                    "Inserted deal id already on board; replacing local copy",
                    extra={"operation": "add", "deal_id": persisted.id},
                )
                deals[position] = persisted

        self._deals = self._sorted(deals)
        return BoardResult.ok(response.data)

    def update_field(self, deal_id: DealId, field: str, value: Any) -> BoardResult:
        """
        Patch a single field on a deal.

        On success only that field changes locally; a stage change moves the
        deal to its new position.
        """

        context = {"deal_id": deal_id, "field": field}
        if not self._loaded:
            return self._reject("update", "Deal board has not been loaded", **context)
        if not is_editable_field(field):
            return self._reject("update", f"Field is not editable: {field}", **context)

        position = self._position(deal_id)
        if position is None:
            return self._reject("update", f"Deal not found: {deal_id}", **context)

        value = normalize_field_value(value)
        response = self._persistence.update(deal_id, field, value)
        if not response.ok:
            return self._reject("update", response.error, **context)

        updated = self._deals[position].with_field(field, value)
        deals = list(self._deals)
        deals[position] = updated
        self._deals = self._sorted(deals)
        return BoardResult.ok((updated,))

    def delete_deal(self, deal_id: DealId) -> BoardResult:
        """Delete a deal remotely, then drop it from the board."""

        if not self._loaded:
            return self._reject("delete", "Deal board has not been loaded", deal_id=deal_id)

        position = self._position(deal_id)
        if position is None:
            return self._reject("delete", f"Deal not found: {deal_id}", deal_id=deal_id)

        logger.info("Deleting deal %s", deal_id)
        response = self._persistence.delete(deal_id)
        if not response.ok:
            return self._reject("delete", response.error, deal_id=deal_id)

        removed = self._deals[position]
        self._deals = [deal for deal in self._deals if deal.id != deal_id]
        return BoardResult.ok((removed,))

    def clear(self) -> None:
        """Drop all local state; the board must be loaded again before use."""
        self._deals = []
        self._loaded = False


__all__ = ["DealBoard"]
