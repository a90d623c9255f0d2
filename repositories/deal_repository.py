"""
Deal repository (persistence).

This module provides *only* record-level persistence for deals: list, insert,
single-field update and delete. No ordering or board rules belong here.

Failures are reported as tagged values (`RemoteResponse.error`), never raised,
so callers must check every response explicitly.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, List, Mapping, Optional, Protocol, Tuple

from postgrest.exceptions import APIError
from supabase import Client  # type: ignore[import-not-found]

from domain.deal import Deal, DealDraft, DealId
from domain.time import parse_utc_timestamp
from repositories.client import deals_table, get_supabase

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RemoteResponse:
    """
    Tagged result of a persistence call.

    data: deals returned by the call (list/insert); empty for update/delete
    error: failure reason, or None when the call succeeded
    """

    data: Tuple[Deal, ...] = field(default_factory=tuple)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failure(cls, reason: str) -> "RemoteResponse":
        return cls(error=reason)


class DealPersistence(Protocol):
    """Record-level operations the deal board needs from a remote store."""

    def list(self) -> RemoteResponse: ...

    def insert(self, draft: DealDraft) -> RemoteResponse: ...

    def update(self, deal_id: DealId, field: str, value: Any) -> RemoteResponse: ...

    def delete(self, deal_id: DealId) -> RemoteResponse: ...


def _row_to_deal(row: Mapping[str, Any]) -> Deal:
    """Convert a Supabase row into a domain Deal."""

    def get_text(key: str) -> str:
        value = row.get(key)
        return "" if value is None else str(value)

    return Deal(
        id=row["id"],
        company=get_text("company"),
        stage=get_text("stage"),
        sourcer=get_text("sourcer"),
        partner=get_text("partner"),
        notes=get_text("notes"),
        last_updated=parse_utc_timestamp(row.get("last_updated")),
    )


def _rows_to_deals(rows: List[Mapping[str, Any]]) -> Tuple[Deal, ...]:
    return tuple(_row_to_deal(row) for row in rows)


class SupabaseDealRepository:
    """
    DealPersistence backed by a Supabase table.

    Args:
        client: Supabase client; defaults to the shared client from `repositories.client`
        table: table name; defaults to DEALS_TABLE or "deals"
    """

    def __init__(self, client: Optional[Client] = None, table: Optional[str] = None) -> None:
        self._client = client if client is not None else get_supabase()
        self._table = table or deals_table()

    def _execute(
        self,
        operation: str,
        build: Callable[[], Any],
        *,
        parse_rows: bool = False,
    ) -> RemoteResponse:
        """Run a query builder and fold every failure mode into a tagged response."""

        try:
            response = build().execute()
        except APIError as e:
            return RemoteResponse.failure(f"Failed to {operation}: {e.message or e}")
        except Exception as e:
            logger.exception("Unexpected error during deal %s", operation)
            return RemoteResponse.failure(f"Failed to {operation}: {e}")

        error = getattr(response, "error", None)
        if error:
            return RemoteResponse.failure(f"Failed to {operation}: {error}")

        if not parse_rows:
            return RemoteResponse()

        rows = getattr(response, "data", None) or []
        try:
            return RemoteResponse(data=_rows_to_deals(rows))
        except (KeyError, TypeError, ValueError) as e:
            return RemoteResponse.failure(f"Failed to {operation}: malformed deal row ({e})")

    def list(self) -> RemoteResponse:
        return self._execute(
            "list deals",
            lambda: self._client.table(self._table).select("*"),
            parse_rows=True,
        )

    def insert(self, draft: DealDraft) -> RemoteResponse:
        # supabase-py returns the inserted rows, including id and last_updated
        return self._execute(
            "insert deal",
            lambda: self._client.table(self._table).insert([draft.to_payload()]),
            parse_rows=True,
        )

    def update(self, deal_id: DealId, field: str, value: Any) -> RemoteResponse:
        return self._execute(
            "update deal",
            lambda: self._client.table(self._table).update({field: value}).eq("id", deal_id),
        )

    def delete(self, deal_id: DealId) -> RemoteResponse:
        return self._execute(
            "delete deal",
            lambda: self._client.table(self._table).delete().eq("id", deal_id),
        )


__all__ = [
    "DealPersistence",
    "RemoteResponse",
    "SupabaseDealRepository",
]
