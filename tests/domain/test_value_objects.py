"""Tests for domain value objects."""

import pytest

from variant_engine.domain import Assignment, AssignmentSet, Selection
from variant_engine.domain.exceptions import (
    DuplicateAttributeError,
    InvalidAssignmentError,
    InvalidSelectionError,
)


class TestAssignment:
    """Tests for Assignment value object."""

    def test_equal_by_value(self) -> None:
        """Assignments with the same ids are equal."""
        assert Assignment("color", "red") == Assignment("color", "red")

    def test_missing_value_raises_error(self) -> None:
        """An assignment needs both ids."""
        with pytest.raises(InvalidAssignmentError):
            Assignment("color", "")

    def test_string_representation(self) -> None:
        """Assignment renders as attribute=value."""
        assert str(Assignment("size", "m")) == "size=m"


class TestAssignmentSet:
    """Tests for AssignmentSet value object."""

    def test_same_attribute_twice_raises_error(self) -> None:
        """A variant cannot be two values of the same attribute."""
        with pytest.raises(DuplicateAttributeError) as exc_info:
            AssignmentSet.of(Assignment("color", "red"), Assignment("color", "blue"))
        assert exc_info.value.details["attribute_id"] == "color"

    def test_equality_ignores_order(self) -> None:
        """Sets with the same pairs in different order are equal."""
        a = AssignmentSet.from_dict({"color": "red", "size": "s"})
        b = AssignmentSet.from_dict({"size": "s", "color": "red"})
        assert a == b
        assert hash(a) == hash(b)

    def test_different_values_not_equal(self) -> None:
        """Sets differing in one value are not equal."""
        a = AssignmentSet.from_dict({"color": "red", "size": "s"})
        b = AssignmentSet.from_dict({"color": "red", "size": "m"})
        assert a != b

    def test_empty_set(self) -> None:
        """The empty set has no attributes."""
        empty = AssignmentSet()
        assert len(empty) == 0
        assert empty == AssignmentSet.from_dict({})

    def test_contains_and_value_for(self) -> None:
        """Lookups answer per attribute."""
        s = AssignmentSet.from_dict({"color": "red", "size": "s"})
        assert s.contains("color", "red")
        assert not s.contains("color", "blue")
        assert s.value_for("size") == "s"
        assert s.value_for("material") is None

    def test_agreement_count_excludes_attribute(self) -> None:
        """Excluded attribute is not counted."""
        s = AssignmentSet.from_dict({"color": "blue", "size": "s"})
        selection = Selection.from_dict({"color": "red", "size": "s"})
        assert s.agreement_count(selection) == 1
        assert s.agreement_count(selection, exclude="size") == 0

    def test_satisfies(self) -> None:
        """A set satisfies a selection when it contains every entry."""
        s = AssignmentSet.from_dict({"color": "red", "size": "s"})
        assert s.satisfies(Selection.from_dict({"color": "red"}))
        assert s.satisfies(Selection.empty())
        assert not s.satisfies(Selection.from_dict({"color": "red", "size": "m"}))
        assert s.satisfies(
            Selection.from_dict({"color": "blue", "size": "s"}), exclude="color"
        )

    def test_as_dict(self) -> None:
        """Set converts to a plain mapping."""
        s = AssignmentSet.of(Assignment("color", "red"))
        assert s.as_dict() == {"color": "red"}


class TestSelection:
    """Tests for Selection value object."""

    def test_with_value_adds_entry(self) -> None:
        """A new attribute is appended."""
        selection = Selection.empty().with_value("color", "red")
        assert selection.as_dict() == {"color": "red"}

    def test_with_value_replaces_entry(self) -> None:
        """An existing attribute is replaced, not duplicated."""
        selection = Selection.from_dict({"color": "red", "size": "s"})
        updated = selection.with_value("size", "m")
        assert updated.as_dict() == {"color": "red", "size": "m"}
        assert len(updated) == 2

    def test_with_value_returns_new_selection(self) -> None:
        """Original selection is left unchanged."""
        selection = Selection.from_dict({"color": "red"})
        selection.with_value("color", "blue")
        assert selection.get("color") == "red"

    def test_with_empty_value_raises_error(self) -> None:
        """Empty ids are rejected."""
        with pytest.raises(InvalidSelectionError):
            Selection.empty().with_value("color", "")

    def test_from_dict_rejects_empty_ids(self) -> None:
        """Empty ids are rejected when building from a mapping."""
        with pytest.raises(InvalidSelectionError):
            Selection.from_dict({"": "red"})

    def test_merged_with_never_overwrites(self) -> None:
        """Merging only fills attributes not yet chosen."""
        selection = Selection.from_dict({"size": "m"})
        merged = selection.merged_with(
            [Assignment("size", "s"), Assignment("color", "red")]
        )
        assert merged.as_dict() == {"size": "m", "color": "red"}

    def test_equality_ignores_order(self) -> None:
        """Selections compare by content."""
        a = Selection.from_dict({"color": "red", "size": "s"})
        b = Selection.from_dict({"size": "s", "color": "red"})
        assert a == b

    def test_mapping_helpers(self) -> None:
        """Membership, iteration and truthiness follow the entries."""
        selection = Selection.from_dict({"color": "red"})
        assert "color" in selection
        assert "size" not in selection
        assert list(selection) == ["color"]
        assert selection
        assert not Selection.empty()

    def test_from_assignments(self) -> None:
        """A selection can pin exactly a variant's assignments."""
        s = AssignmentSet.from_dict({"color": "blue", "size": "m"})
        assert Selection.from_assignments(s).as_dict() == {"color": "blue", "size": "m"}
