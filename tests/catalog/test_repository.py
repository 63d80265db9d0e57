"""Tests for the in-memory variant repository."""

from decimal import Decimal

import pytest

from variant_engine.catalog import InMemoryVariantRepository, VariantDraft
from variant_engine.domain import AssignmentSet
from variant_engine.domain.exceptions import DuplicateVariantError, VariantNotFoundError


def draft(**assignments: str) -> VariantDraft:
    return VariantDraft(
        product_id="tee",
        price=Decimal("10.00"),
        assignments=AssignmentSet.from_dict(assignments),
        stock_quantity=3,
    )


class TestInMemoryVariantRepository:
    """Tests for InMemoryVariantRepository."""

    def test_create_assigns_increasing_sequence(self, repository) -> None:
        """Creation order is recorded on the variant."""
        first = repository.create_variant(draft(color="red"))
        second = repository.create_variant(draft(color="blue"))
        assert first.sequence < second.sequence
        assert repository.list_variants("tee") == [first, second]

    def test_list_variants_filters_by_product(self, repository) -> None:
        """Only the product's own variants are listed."""
        repository.create_variant(draft(color="red"))
        repository.create_variant(
            VariantDraft(product_id="mug", price=Decimal("5"))
        )
        assert len(repository.list_variants("tee")) == 1
        assert len(repository.list_variants("mug")) == 1

    def test_lists_reference_data_sorted(self, repository) -> None:
        """Attributes and values come back in sort order."""
        assert [a.id for a in repository.list_attributes()] == ["color", "size"]
        assert [v.id for v in repository.list_values()] == ["red", "s", "blue", "m", "l"]

    def test_find_by_assignments_ignores_order(self, repository) -> None:
        """Lookups match assignment sets, not their ordering."""
        created = repository.create_variant(draft(color="red", size="s"))
        found = repository.find_by_assignments(
            "tee", AssignmentSet.from_dict({"size": "s", "color": "red"})
        )
        assert found is created
        assert repository.find_by_assignments("mug", created.assignments) is None

    def test_duplicate_rejected(self, repository) -> None:
        """A second variant with the same assignments is refused."""
        repository.create_variant(draft(color="red"))
        with pytest.raises(DuplicateVariantError) as exc_info:
            repository.create_variant(draft(color="red"))
        assert exc_info.value.details["assignments"] == {"color": "red"}

    def test_duplicates_allowed_when_not_enforced(self) -> None:
        """Uniqueness can be switched off."""
        repository = InMemoryVariantRepository(enforce_unique=False)
        repository.create_variant(draft(color="red"))
        repository.create_variant(draft(color="red"))
        assert len(repository.list_variants("tee")) == 2

    def test_get_missing_raises_error(self, repository) -> None:
        """Unknown ids raise VariantNotFoundError."""
        with pytest.raises(VariantNotFoundError):
            repository.get_variant("missing")

    def test_save_unknown_raises_error(self, repository, make_variant) -> None:
        """Only stored variants can be saved."""
        with pytest.raises(VariantNotFoundError):
            repository.save_variant(make_variant("ghost", 1, color="red"))

    def test_delete(self, repository) -> None:
        """Deleted variants disappear."""
        created = repository.create_variant(draft(color="red"))
        assert repository.delete_variant(created.id) is created
        assert repository.list_variants("tee") == []
        with pytest.raises(VariantNotFoundError):
            repository.delete_variant(created.id)
