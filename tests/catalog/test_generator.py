"""Tests for the variant generator."""

from decimal import Decimal

import pytest

from variant_engine.catalog import (
    CombinationOutcome,
    InMemoryVariantRepository,
    VariantDraft,
    VariantGenerator,
    VariantPick,
    VariantTemplate,
    cartesian_combinations,
    group_picks,
)
from variant_engine.domain import AssignmentSet, Variant


class FailingRepository(InMemoryVariantRepository):
    """Repository that refuses to create variants for one value."""

    def __init__(self, failing_value: str) -> None:
        super().__init__(enforce_unique=True)
        self.failing_value = failing_value

    def create_variant(self, draft: VariantDraft) -> Variant:
        if any(a.value_id == self.failing_value for a in draft.assignments):
            raise RuntimeError("storage unavailable")
        return super().create_variant(draft)


@pytest.fixture
def template() -> VariantTemplate:
    return VariantTemplate(price=Decimal("19.99"), stock_quantity=5)


class TestGroupPicks:
    """Tests for grouping admin picks."""

    def test_groups_in_first_seen_order(self) -> None:
        """Attributes keep the order they were first picked in."""
        groups = group_picks([
            VariantPick("size", "m"),
            VariantPick("color", "red"),
            VariantPick("size", "l"),
        ])
        assert list(groups) == ["size", "color"]
        assert groups["size"] == ["m", "l"]

    def test_drops_incomplete_picks(self) -> None:
        """Half-filled rows are ignored."""
        groups = group_picks([
            VariantPick("color", None),
            VariantPick(None, "red"),
            VariantPick("size", "s"),
        ])
        assert groups == {"size": ["s"]}

    def test_dedupes_repeated_values(self) -> None:
        """A value picked twice yields one candidate."""
        groups = group_picks([VariantPick("color", "red"), VariantPick("color", "red")])
        assert groups == {"color": ["red"]}


class TestCartesianCombinations:
    """Tests for combination expansion."""

    def test_every_combination_once(self) -> None:
        """Two values times one value gives two combinations."""
        combos = cartesian_combinations({"color": ["red", "blue"], "size": ["m"]})
        assert combos == [
            AssignmentSet.from_dict({"color": "red", "size": "m"}),
            AssignmentSet.from_dict({"color": "blue", "size": "m"}),
        ]

    def test_product_of_group_sizes(self) -> None:
        """Combination count is the product of group sizes."""
        combos = cartesian_combinations(
            {"color": ["red", "blue"], "size": ["s", "m", "l"]}
        )
        assert len(combos) == 6
        assert len(set(combos)) == 6

    def test_last_group_varies_fastest(self) -> None:
        """Order is stable and predictable."""
        combos = cartesian_combinations({"color": ["red", "blue"], "size": ["s", "m"]})
        assert [c.as_dict() for c in combos][:2] == [
            {"color": "red", "size": "s"},
            {"color": "red", "size": "m"},
        ]

    def test_no_groups_yields_one_empty_combination(self) -> None:
        """A product without attributes still gets one variant."""
        assert cartesian_combinations({}) == [AssignmentSet()]


class TestVariantGenerator:
    """Tests for VariantGenerator.generate."""

    def test_creates_one_variant_per_combination(self, repository, template) -> None:
        """Every combination becomes a variant with the template fields."""
        report = VariantGenerator(repository).generate(
            "tee",
            [VariantPick("color", "red"), VariantPick("color", "blue"), VariantPick("size", "m")],
            template,
        )

        assert report.created_count == 2
        variants = repository.list_variants("tee")
        assert [v.assignments.as_dict() for v in variants] == [
            {"color": "red", "size": "m"},
            {"color": "blue", "size": "m"},
        ]
        assert all(v.price == Decimal("19.99") for v in variants)
        assert all(v.stock_quantity == 5 for v in variants)

    def test_empty_picks_create_single_variant(self, repository, template) -> None:
        """No picks gives one variant without assignments."""
        report = VariantGenerator(repository).generate("tee", [], template)
        assert report.created_count == 1
        assert len(repository.list_variants("tee")[0].assignments) == 0

    def test_existing_combination_reported(self, repository, template) -> None:
        """Running twice does not duplicate variants."""
        generator = VariantGenerator(repository)
        picks = [VariantPick("color", "red"), VariantPick("color", "blue")]
        generator.generate("tee", picks, template)

        report = generator.generate("tee", picks, template)

        assert report.created_count == 0
        assert report.duplicate_count == 2
        assert report.success_message() is None
        assert len(repository.list_variants("tee")) == 2

    def test_failure_does_not_stop_batch(self, template) -> None:
        """A failing combination is recorded and the rest are created."""
        repository = FailingRepository(failing_value="red")
        report = VariantGenerator(repository).generate(
            "tee",
            [VariantPick("color", "red"), VariantPick("color", "blue"), VariantPick("color", "green")],
            template,
        )

        assert report.created_count == 2
        assert report.failed_count == 1
        assert report.has_failures
        failed = report.results[0]
        assert failed.outcome is CombinationOutcome.FAILED
        assert isinstance(failed.error, RuntimeError)
        assert str(report.errors[0]) == "storage unavailable"
        assert len(repository.list_variants("tee")) == 2

    def test_success_message(self, repository, template) -> None:
        """The admin toast counts created variants."""
        report = VariantGenerator(repository).generate(
            "tee",
            [VariantPick("size", "s"), VariantPick("size", "m"), VariantPick("size", "l")],
            template,
        )
        assert report.success_message() == "Successfully added 3 variant(s)!"

    def test_template_images_copied(self, repository) -> None:
        """Every generated variant gets the template images."""
        template = VariantTemplate(price=Decimal("5"), image_urls=("a.jpg",))
        report = VariantGenerator(repository).generate(
            "tee", [VariantPick("color", "red")], template
        )
        assert report.created_variants[0].image_urls == ["a.jpg"]
