"""
Domain: Deal entity.

Contract excerpts implemented here:
- A Deal is identified by an opaque `id` assigned by the persistence service.
- `stage` determines the Deal's position on the board.
- `last_updated` is supplied by the persistence layer; it is never computed locally.
- Only company, stage, sourcer, partner and notes are editable; `id` never changes.

Deals are immutable values. A field edit produces a new Deal via `with_field`,
so a stored record can only change by being replaced.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

from .stage import DEFAULT_STAGES
from .time import require_utc_timestamp

DealId = Union[int, str]


class DealField(str, Enum):
    """Fields a user may edit inline on the board."""

    COMPANY = "company"
    STAGE = "stage"
    SOURCER = "sourcer"
    PARTNER = "partner"
    NOTES = "notes"


EDITABLE_FIELDS: frozenset[str] = frozenset(f.value for f in DealField)


def is_editable_field(name: str) -> bool:
    return name in EDITABLE_FIELDS


def normalize_field_value(value: Any) -> str:
    """Editable fields are text; an unset picker (None) is stored as ""."""
    return "" if value is None else str(value)


@dataclass(frozen=True, slots=True)
class Deal:
    """
    A persisted pipeline record.

    sourcer/partner are either "" (unset) or a roster name; the roster is not
    validated here.
    """

    id: DealId
    company: str
    stage: str
    sourcer: str = ""
    partner: str = ""
    notes: str = ""
    last_updated: Optional[datetime] = None

    def __post_init__(self) -> None:
        if self.last_updated is not None:
            require_utc_timestamp("last_updated", self.last_updated)

    def with_field(self, name: str, value: Any) -> "Deal":
        """Return a copy with one editable field replaced; all other fields untouched."""

        if not is_editable_field(name):
            raise ValueError(f"Field is not editable: {name!r}")
        return replace(self, **{name: normalize_field_value(value)})


@dataclass(frozen=True, slots=True)
class DealDraft:
    """
    A new deal as entered in the "New Deal" form, before it is persisted.

    Defaults mirror the form's initial state.
    """

    company: str = ""
    stage: str = DEFAULT_STAGES[0]
    sourcer: str = ""
    partner: str = ""
    notes: str = ""

    def to_payload(self) -> Dict[str, str]:
        return {
            "company": self.company,
            "stage": self.stage,
            "sourcer": self.sourcer,
            "partner": self.partner,
            "notes": self.notes,
        }


@dataclass(frozen=True, slots=True)
class BoardResult:
    """
    Outcome of a deal board operation.

    success: True if the remote call succeeded and the board reflects it
    deals: records added, changed or loaded by the operation (board order)
    error: reason for failure (None if success=True)
    """

    success: bool
    deals: Tuple[Deal, ...] = field(default_factory=tuple)
    error: Optional[str] = None

    @classmethod
    def ok(cls, deals: Tuple[Deal, ...] = ()) -> "BoardResult":
        return cls(success=True, deals=tuple(deals))

    @classmethod
    def failed(cls, reason: str) -> "BoardResult":
        return cls(success=False, error=reason)

    @property
    def deal(self) -> Optional[Deal]:
        """First affected deal, for single-record operations."""
        return self.deals[0] if self.deals else None


__all__ = [
    "BoardResult",
    "Deal",
    "DealDraft",
    "DealField",
    "DealId",
    "EDITABLE_FIELDS",
    "is_editable_field",
    "normalize_field_value",
]
