"""Tests for table service validation and page assembly."""

from typing import Any
from unittest.mock import AsyncMock

import pytest

from app.core.exceptions import BadRequestError, ValidationError
from app.features.data_platform.fields import Entity, SortDirection
from app.features.data_platform.repository import RecordRepository
from app.features.tables.service import TableService


@pytest.fixture
def repository(sample_users: list[dict[str, Any]]) -> RecordRepository:
    repo = RecordRepository()
    repo.fetch_records = AsyncMock(return_value=sample_users)  # type: ignore[method-assign]
    return repo


class TestResolveFilters:
    """Tests for predicate validation."""

    def test_filterable_predicates_pass(self) -> None:
        spec = TableService().resolve_filters(Entity.USERS, "a", {"role": "admin"})
        assert spec.search == "a"
        assert spec.predicates == {"role": "admin"}

    def test_rejects_non_filterable_predicate(self) -> None:
        """Category is an inventory filter, not a user filter."""
        with pytest.raises(BadRequestError) as exc_info:
            TableService().resolve_filters(Entity.USERS, "", {"category": "Peripherals"})

        assert exc_info.value.status_code == 400
        assert exc_info.value.details["fields"] == ["category"]

    def test_empty_predicates_are_not_validated(self) -> None:
        """Predicates that take no part in filtering are never rejected."""
        spec = TableService().resolve_filters(Entity.CUSTOMERS, "", {"category": ""})
        assert spec.active_predicates() == {}


class TestResolveSort:
    """Tests for sort field resolution."""

    def test_defaults_to_entity_sort(self) -> None:
        spec = TableService().resolve_sort(Entity.USERS)
        assert spec.field == "createdAt"
        assert spec.direction == SortDirection.DESC

    def test_explicit_field_defaults_ascending(self) -> None:
        spec = TableService().resolve_sort(Entity.INVENTORY, "stock")
        assert spec.direction == SortDirection.ASC

    def test_unknown_field_rejected(self) -> None:
        with pytest.raises(BadRequestError):
            TableService().resolve_sort(Entity.SALES, "firstName")


class TestResolvePage:
    """Tests for page size bounds."""

    def test_default_page_size(self) -> None:
        assert TableService().resolve_page().page_size == 10

    def test_page_size_above_maximum_rejected(self) -> None:
        with pytest.raises(ValidationError):
            TableService().resolve_page(1, 101)


class TestListPage:
    """Tests for the full page flow."""

    async def test_list_page(self, repository: RecordRepository) -> None:
        """Inactive users sorted by last name."""
        service = TableService(repository=repository)

        result = await service.list_page(
            db=None,  # type: ignore[arg-type]
            entity=Entity.USERS,
            predicates={"status": "inactive"},
            sort_by="lastName",
        )

        assert [record["lastName"] for record in result.items] == ["Hill", "Smith", "White"]
        assert result.total_items == 3
        repository.fetch_records.assert_awaited_once_with(  # type: ignore[attr-defined]
            None, Entity.USERS
        )
