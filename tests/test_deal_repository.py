"""
Tests for `repositories/deal_repository.py` and `repositories/identity_repository.py`.

The Supabase client is replaced by a MagicMock so the query-builder chain can
be inspected without a database.

Covers:
- Rows map to Deals (null text -> "", timestamps -> UTC datetimes).
- Each operation issues the expected builder calls.
- APIError, response.error, unexpected exceptions and malformed rows all come
  back as tagged failures instead of raising.
- Sign-in errors become AuthFailure; a missing session is signed out.
"""

from __future__ import annotations

from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from postgrest.exceptions import APIError
from supabase import AuthError

from domain.deal import DealDraft
from domain.session import AuthFailure, Identity
from repositories.deal_repository import SupabaseDealRepository
from repositories.identity_repository import SupabaseIdentityProvider


def _response(data=None, error=None):
    return SimpleNamespace(data=data, error=error)


@pytest.fixture
def client() -> MagicMock:
    return MagicMock()


@pytest.fixture
def repo(client: MagicMock) -> SupabaseDealRepository:
    return SupabaseDealRepository(client=client, table="deals")


def test_list_maps_rows(client: MagicMock, repo: SupabaseDealRepository) -> None:
    client.table.return_value.select.return_value.execute.return_value = _response(
        data=[
            {
                "id": 1,
                "company": "Acme",
                "stage": "Memo",
                "sourcer": None,
                "partner": "Tom",
                "notes": None,
                "last_updated": "2025-02-01T10:00:00Z",
            }
        ]
    )

    response = repo.list()

    assert response.ok
    client.table.assert_called_with("deals")
    client.table.return_value.select.assert_called_once_with("*")
    (deal,) = response.data
    assert deal.id == 1
    assert deal.sourcer == "" and deal.notes == "" and deal.partner == "Tom"
    assert deal.last_updated == datetime(2025, 2, 1, 10, 0, 0, tzinfo=timezone.utc)


def test_list_row_without_timestamp(client: MagicMock, repo: SupabaseDealRepository) -> None:
    client.table.return_value.select.return_value.execute.return_value = _response(
        data=[{"id": "a1", "company": "Acme", "stage": "IC"}]
    )

    (deal,) = repo.list().data

    assert deal.id == "a1"
    assert deal.last_updated is None


def test_insert_sends_draft_and_returns_persisted(client: MagicMock, repo: SupabaseDealRepository) -> None:
    insert = client.table.return_value.insert
    insert.return_value.execute.return_value = _response(
        data=[{"id": 9, "company": "Acme", "stage": "Inbound Deals", "last_updated": "2025-02-01T10:00:00+00:00"}]
    )

    response = repo.insert(DealDraft(company="Acme"))

    insert.assert_called_once_with(
        [{"company": "Acme", "stage": "Inbound Deals", "sourcer": "", "partner": "", "notes": ""}]
    )
    assert response.ok
    assert response.data[0].id == 9


def test_insert_returns_every_persisted_row(client: MagicMock, repo: SupabaseDealRepository) -> None:
    client.table.return_value.insert.return_value.execute.return_value = _response(
        data=[
            {"id": 9, "company": "Acme", "stage": "Inbound Deals"},
            {"id": 10, "company": "Acme", "stage": "Memo"},
        ]
    )

    response = repo.insert(DealDraft(company="Acme"))

    assert response.ok
    assert [(d.id, d.stage) for d in response.data] == [(9, "Inbound Deals"), (10, "Memo")]


def test_update_patches_single_field(client: MagicMock, repo: SupabaseDealRepository) -> None:
    update = client.table.return_value.update
    update.return_value.eq.return_value.execute.return_value = _response(data=[])

    response = repo.update(4, "stage", "IC")

    update.assert_called_once_with({"stage": "IC"})
    update.return_value.eq.assert_called_once_with("id", 4)
    assert response.ok
    assert response.data == ()


def test_delete_filters_by_id(client: MagicMock, repo: SupabaseDealRepository) -> None:
    delete = client.table.return_value.delete
    delete.return_value.eq.return_value.execute.return_value = _response(data=[])

    assert repo.delete(5).ok
    delete.return_value.eq.assert_called_once_with("id", 5)


def test_api_error_is_tagged(client: MagicMock, repo: SupabaseDealRepository) -> None:
    client.table.return_value.delete.return_value.eq.return_value.execute.side_effect = APIError(
        {"message": "permission denied for table deals", "code": "42501"}
    )

    response = repo.delete(5)

    assert not response.ok
    assert "permission denied" in response.error


def test_response_error_is_tagged(client: MagicMock, repo: SupabaseDealRepository) -> None:
    client.table.return_value.select.return_value.execute.return_value = _response(error="boom")

    response = repo.list()

    assert not response.ok
    assert response.error == "Failed to list deals: boom"


def test_unexpected_exception_is_tagged(client: MagicMock, repo: SupabaseDealRepository) -> None:
    client.table.return_value.update.return_value.eq.return_value.execute.side_effect = ConnectionError("down")

    response = repo.update(1, "notes", "x")

    assert not response.ok
    assert "down" in response.error


def test_malformed_row_is_tagged(client: MagicMock, repo: SupabaseDealRepository) -> None:
    client.table.return_value.select.return_value.execute.return_value = _response(
        data=[{"company": "No id", "stage": "IC"}]
    )

    response = repo.list()

    assert not response.ok
    assert "malformed" in response.error


def test_current_identity(client: MagicMock) -> None:
    client.auth.get_user.return_value = SimpleNamespace(user=SimpleNamespace(id="u-1", email="tom@example.com"))

    identity = SupabaseIdentityProvider(client=client).get_current_identity()

    assert identity == Identity(user_id="u-1", email="tom@example.com")


def test_current_identity_without_session(client: MagicMock) -> None:
    provider = SupabaseIdentityProvider(client=client)

    client.auth.get_user.return_value = None
    assert provider.get_current_identity() is None

    client.auth.get_user.side_effect = AuthError("Auth session missing!", None)
    assert provider.get_current_identity() is None


def test_sign_in_success(client: MagicMock) -> None:
    client.auth.sign_in_with_password.return_value = SimpleNamespace(
        user=SimpleNamespace(id="u-2", email="ben@example.com"), session=object()
    )

    outcome = SupabaseIdentityProvider(client=client).sign_in("ben@example.com", "pw")

    client.auth.sign_in_with_password.assert_called_once_with({"email": "ben@example.com", "password": "pw"})
    assert outcome == Identity(user_id="u-2", email="ben@example.com")


def test_sign_in_failure(client: MagicMock) -> None:
    client.auth.sign_in_with_password.side_effect = AuthError("Invalid login credentials", None)

    outcome = SupabaseIdentityProvider(client=client).sign_in("ben@example.com", "bad")

    assert outcome == AuthFailure(message="Invalid login credentials")
