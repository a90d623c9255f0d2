"""
Domain: pipeline stages.

Contract excerpts implemented here:
- Stages form a fixed, ordered sequence; position in the sequence is the sort key.
- An unrecognized stage has index -1 and therefore sorts before every known stage.
- Stages are not user-editable; a registry is immutable once built.

Presentation categories group stages for the UI (colors live in the frontend).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, Mapping, Optional, Sequence, Tuple


class StageCategory(str, Enum):
    ACTIVE = "active"
    INVESTED = "invested"
    PARKED = "parked"
    REJECTED = "rejected"


DEFAULT_STAGES: Tuple[str, ...] = (
    "Inbound Deals",
    "Initial Call",
    "Deal Review",
    "Partner Call",
    "Memo",
    "IC",
    "Investment",
    "Freezer",
    "Dumpster",
)

DEFAULT_STAGE_CATEGORIES: Mapping[str, StageCategory] = {
    "Inbound Deals": StageCategory.ACTIVE,
    "Initial Call": StageCategory.ACTIVE,
    "Deal Review": StageCategory.ACTIVE,
    "Partner Call": StageCategory.ACTIVE,
    "Memo": StageCategory.ACTIVE,
    "IC": StageCategory.ACTIVE,
    "Investment": StageCategory.INVESTED,
    "Freezer": StageCategory.PARKED,
    "Dumpster": StageCategory.REJECTED,
}

# Rosters offered by the board's pickers. Not enforced on deals.
SOURCERS: Tuple[str, ...] = ("Tom", "Stephen", "Ben", "Jameson", "Intern")
PARTNERS: Tuple[str, ...] = ("Tom", "Stephen", "Ben")

UNKNOWN_STAGE_INDEX: int = -1


@dataclass(frozen=True, slots=True)
class StageRegistry:
    """
    Fixed, ordered set of pipeline stages.

    `index_of` is the comparator key used by the deal board. Duplicate names are
    rejected so that the first-match index is also the only match.
    """

    stages: Tuple[str, ...]
    categories: Mapping[str, StageCategory] = field(default_factory=dict)
    _positions: Dict[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        stages = tuple(self.stages)
        if not stages:
            raise ValueError("StageRegistry requires at least one stage")
        if len(set(stages)) != len(stages):
            raise ValueError("StageRegistry stages must be unique")
        unknown = set(self.categories) - set(stages)
        if unknown:
            raise ValueError(f"Categories reference unknown stages: {sorted(unknown)}")

        object.__setattr__(self, "stages", stages)
        object.__setattr__(self, "categories", dict(self.categories))
        object.__setattr__(self, "_positions", {name: i for i, name in enumerate(stages)})

    @classmethod
    def from_names(cls, names: Sequence[str]) -> "StageRegistry":
        return cls(stages=tuple(names))

    def index_of(self, stage: str) -> int:
        """Position of `stage` in the pipeline, or -1 when it is not a known stage."""

        return self._positions.get(stage, UNKNOWN_STAGE_INDEX)

    def category(self, stage: str) -> Optional[StageCategory]:
        return self.categories.get(stage)

    @property
    def first(self) -> str:
        return self.stages[0]

    def __contains__(self, stage: object) -> bool:
        return stage in self._positions

    def __iter__(self) -> Iterator[str]:
        return iter(self.stages)

    def __len__(self) -> int:
        return len(self.stages)


DEFAULT_REGISTRY = StageRegistry(stages=DEFAULT_STAGES, categories=DEFAULT_STAGE_CATEGORIES)


__all__ = [
    "DEFAULT_REGISTRY",
    "DEFAULT_STAGES",
    "PARTNERS",
    "SOURCERS",
    "StageCategory",
    "StageRegistry",
    "UNKNOWN_STAGE_INDEX",
]
