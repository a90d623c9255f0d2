"""
API Request and Response Models.

Pydantic models for validating API requests and serializing responses.
"""

from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, Field

from domain.deal import Deal
from domain.stage import DEFAULT_STAGES, StageRegistry


# ============================================================================
# Session Models
# ============================================================================

class SignInRequest(BaseModel):
    """Email/password credentials."""
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    class Config:
        json_schema_extra = {
            "example": {
                "email": "partner@example.com",
                "password": "correct horse battery staple"
            }
        }


class SessionResponse(BaseModel):
    """Current session state."""
    state: str  # "loading", "signed_out" or "signed_in"
    user_id: Optional[str] = None
    email: Optional[str] = None


# ============================================================================
# Stage Models
# ============================================================================

class StageResponse(BaseModel):
    name: str
    index: int
    category: Optional[str] = None


class StageListResponse(BaseModel):
    """Stage registry plus the rosters offered by the board's pickers."""
    stages: List[StageResponse]
    tabs: List[str]
    sourcers: List[str]
    partners: List[str]

    @classmethod
    def from_registry(
        cls,
        registry: StageRegistry,
        tabs: List[str],
        sourcers: List[str],
        partners: List[str],
    ) -> "StageListResponse":
        stages = []
        for index, name in enumerate(registry.stages):
            category = registry.category(name)
            stages.append(
                StageResponse(name=name, index=index, category=category.value if category else None)
            )
        return cls(stages=stages, tabs=tabs, sourcers=sourcers, partners=partners)


# ============================================================================
# Deal Models
# ============================================================================

class DealResponse(BaseModel):
    """Single deal as shown on the board."""
    id: Union[int, str]
    company: str
    stage: str
    sourcer: str
    partner: str
    notes: str
    last_updated: Optional[datetime] = None

    @classmethod
    def from_deal(cls, deal: Deal) -> "DealResponse":
        return cls(
            id=deal.id,
            company=deal.company,
            stage=deal.stage,
            sourcer=deal.sourcer,
            partner=deal.partner,
            notes=deal.notes,
            last_updated=deal.last_updated,
        )

    class Config:
        json_schema_extra = {
            "example": {
                "id": 9,
                "company": "Acme",
                "stage": "Initial Call",
                "sourcer": "Jameson",
                "partner": "Tom",
                "notes": "Warm intro via portfolio founder",
                "last_updated": "2025-01-01T12:00:00Z"
            }
        }


class DealListResponse(BaseModel):
    """Board contents under the active stage tab."""
    items: List[DealResponse]
    total_count: int
    active_stage: str


class DealCreateRequest(BaseModel):
    """New deal form. id and last_updated are assigned by the database."""
    company: str = ""
    stage: str = DEFAULT_STAGES[0]
    sourcer: str = ""
    partner: str = ""
    notes: str = ""

    class Config:
        json_schema_extra = {
            "example": {
                "company": "Acme",
                "stage": "Inbound Deals",
                "sourcer": "Intern",
                "partner": "",
                "notes": ""
            }
        }


class DealFieldUpdateRequest(BaseModel):
    """Inline edit of a single field."""
    field: str = Field(..., description="One of company, stage, sourcer, partner, notes")
    value: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "field": "stage",
                "value": "Partner Call"
            }
        }
