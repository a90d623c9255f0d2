"""
Pytest configuration and shared fakes.

Adds the project root to the Python path so that tests can import domain,
repositories, services and api, and provides in-memory stand-ins for the
remote deal store and the identity provider.
"""

from __future__ import annotations

import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Set, Tuple, Union

import pytest

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from domain.deal import Deal, DealDraft, DealId  # noqa: E402
from domain.session import AuthFailure, Identity  # noqa: E402
from domain.stage import StageRegistry  # noqa: E402
from repositories.deal_repository import RemoteResponse  # noqa: E402

PERSISTED_AT = datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeDealPersistence:
    """
    In-memory remote store.

    Add an operation name ("list", "insert", "update", "delete") to `failing`
    to make that call report an error.
    """

    def __init__(self, records: Tuple[Deal, ...] = (), next_id: int = 100) -> None:
        self.records: List[Deal] = list(records)
        self.next_id = next_id
        self.failing: Set[str] = set()
        self.calls: List[Tuple[Any, ...]] = []
        self.insert_returns_nothing = False
        # each stage listed here adds one more persisted row to every insert
        self.extra_insert_stages: List[str] = []

    def _failed(self, operation: str) -> Optional[RemoteResponse]:
        if operation in self.failing:
            return RemoteResponse.failure(f"Failed to {operation} deal: remote unavailable")
        return None

    def list(self) -> RemoteResponse:
        self.calls.append(("list",))
        return self._failed("list") or RemoteResponse(data=tuple(self.records))

    def insert(self, draft: DealDraft) -> RemoteResponse:
        self.calls.append(("insert", draft))
        failure = self._failed("insert")
        if failure:
            return failure
        if self.insert_returns_nothing:
            return RemoteResponse()
        persisted = []
        for stage in [draft.stage, *self.extra_insert_stages]:
            payload = {**draft.to_payload(), "stage": stage}
            persisted.append(Deal(id=self.next_id, last_updated=PERSISTED_AT, **payload))
            self.next_id += 1
        self.records.extend(persisted)
        return RemoteResponse(data=tuple(persisted))

    def update(self, deal_id: DealId, field: str, value: Any) -> RemoteResponse:
        self.calls.append(("update", deal_id, field, value))
        failure = self._failed("update")
        if failure:
            return failure
        self.records = [d.with_field(field, value) if d.id == deal_id else d for d in self.records]
        return RemoteResponse()

    def delete(self, deal_id: DealId) -> RemoteResponse:
        self.calls.append(("delete", deal_id))
        failure = self._failed("delete")
        if failure:
            return failure
        self.records = [d for d in self.records if d.id != deal_id]
        return RemoteResponse()


class FakeIdentityProvider:
    """Accepts exactly one email/password pair."""

    def __init__(
        self,
        current: Optional[Identity] = None,
        email: str = "partner@example.com",
        password: str = "secret",
    ) -> None:
        self.current = current
        self._email = email
        self._password = password
        self.sign_in_attempts: List[str] = []

    def get_current_identity(self) -> Optional[Identity]:
        return self.current

    def sign_in(self, email: str, password: str) -> Union[Identity, AuthFailure]:
        self.sign_in_attempts.append(email)
        if (email, password) != (self._email, self._password):
            return AuthFailure(message="Invalid login credentials")
        self.current = Identity(user_id="user-1", email=email)
        return self.current


@pytest.fixture
def make_deal() -> Callable[..., Deal]:
    def _make(deal_id: DealId, stage: str, company: Optional[str] = None, **fields: Any) -> Deal:
        values: Dict[str, Any] = {"last_updated": PERSISTED_AT}
        values.update(fields)
        return Deal(id=deal_id, company=company or f"Company {deal_id}", stage=stage, **values)

    return _make


@pytest.fixture
def abc_registry() -> StageRegistry:
    return StageRegistry.from_names(["A", "B", "C"])


@pytest.fixture
def persistence() -> FakeDealPersistence:
    return FakeDealPersistence()


@pytest.fixture
def identity_provider() -> FakeIdentityProvider:
    return FakeIdentityProvider()
