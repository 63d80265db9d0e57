"""Value Objects for the catalog domain.

An ``Assignment`` pins one attribute to one value. Variants carry an
``AssignmentSet`` describing their position in the combinatorial space,
and shoppers build up a ``Selection`` of the same shape one click at a
time. Both are immutable; every change produces a new object.
"""

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Self

from variant_engine.domain.base import ValueObject
from variant_engine.domain.exceptions import (
    DuplicateAttributeError,
    InvalidAssignmentError,
    InvalidSelectionError,
)


# ============================================================================
# Assignment
# ============================================================================


@dataclass(frozen=True)
class Assignment(ValueObject):
    """A single ``(attribute_id, value_id)`` pair.

    Attributes:
        attribute_id: Attribute (axis of variation) being pinned.
        value_id: Attribute value chosen on that axis.
    """

    attribute_id: str
    value_id: str

    def __post_init__(self) -> None:
        """Validate that both ids are present."""
        if not self.attribute_id or not self.value_id:
            raise InvalidAssignmentError(self.attribute_id, self.value_id)

    def __str__(self) -> str:
        return f"{self.attribute_id}={self.value_id}"


def _check_unique_attributes(assignments: Iterable[Assignment]) -> None:
    seen: dict[str, str] = {}
    for assignment in assignments:
        previous = seen.get(assignment.attribute_id)
        if previous is not None:
            raise DuplicateAttributeError(
                assignment.attribute_id, [previous, assignment.value_id]
            )
        seen[assignment.attribute_id] = assignment.value_id


# ============================================================================
# Assignment Set
# ============================================================================


@dataclass(frozen=True)
class AssignmentSet(ValueObject):
    """The attribute values a variant is pinned to.

    At most one value per attribute. Order is kept for display but is
    irrelevant for equality: ``{Color: Red, Size: S}`` equals
    ``{Size: S, Color: Red}``.

    Attributes:
        items: Assignments in the order they were given.
    """

    items: tuple[Assignment, ...] = ()

    def __post_init__(self) -> None:
        """Reject a set that assigns the same attribute twice."""
        _check_unique_attributes(self.items)

    @classmethod
    def of(cls, *assignments: Assignment) -> Self:
        """Create a set from positional assignments."""
        return cls(items=tuple(assignments))

    @classmethod
    def from_dict(cls, mapping: Mapping[str, str]) -> Self:
        """Create a set from an ``attribute_id -> value_id`` mapping."""
        return cls(
            items=tuple(Assignment(attr_id, val_id) for attr_id, val_id in mapping.items())
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AssignmentSet):
            return NotImplemented
        return frozenset(self.items) == frozenset(other.items)

    def __hash__(self) -> int:
        return hash(frozenset(self.items))

    def __iter__(self) -> Iterator[Assignment]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    @property
    def attribute_ids(self) -> tuple[str, ...]:
        """Attribute ids in assignment order."""
        return tuple(a.attribute_id for a in self.items)

    def value_for(self, attribute_id: str) -> str | None:
        """Get the value pinned for an attribute, if any."""
        for assignment in self.items:
            if assignment.attribute_id == attribute_id:
                return assignment.value_id
        return None

    def contains(self, attribute_id: str, value_id: str) -> bool:
        """Check whether the exact pair is part of this set."""
        return self.value_for(attribute_id) == value_id

    def agreement_count(
        self,
        selection: "Selection",
        exclude: str | None = None,
    ) -> int:
        """Count selection entries this set agrees with.

        Args:
            selection: Selection to compare against.
            exclude: Attribute id to leave out of the comparison.

        Returns:
            Number of entries (other than ``exclude``) contained in the set.
        """
        return sum(
            1
            for attr_id, val_id in selection.items()
            if attr_id != exclude and self.contains(attr_id, val_id)
        )

    def satisfies(self, selection: "Selection", exclude: str | None = None) -> bool:
        """Check that every selection entry (except ``exclude``) is in this set."""
        return all(
            self.contains(attr_id, val_id)
            for attr_id, val_id in selection.items()
            if attr_id != exclude
        )

    def as_dict(self) -> dict[str, str]:
        """Convert to an ``attribute_id -> value_id`` dictionary."""
        return {a.attribute_id: a.value_id for a in self.items}


# ============================================================================
# Selection
# ============================================================================


@dataclass(frozen=True)
class Selection(ValueObject):
    """A shopper's in-progress attribute picks for one product page.

    Selections are never mutated in place. ``with_value`` and
    ``merged_with`` return new selections so a resolver can compare the
    proposed state with the committed one.

    Attributes:
        entries: Picks in the order they were made.
    """

    entries: tuple[Assignment, ...] = ()

    def __post_init__(self) -> None:
        """Reject a selection with two entries for one attribute."""
        _check_unique_attributes(self.entries)

    @classmethod
    def empty(cls) -> Self:
        """Create a selection with no picks."""
        return cls()

    @classmethod
    def from_dict(cls, mapping: Mapping[str, str]) -> Self:
        """Create a selection from an ``attribute_id -> value_id`` mapping.

        Raises:
            InvalidSelectionError: If any id is empty.
        """
        entries = []
        for attr_id, val_id in mapping.items():
            if not attr_id or not val_id:
                raise InvalidSelectionError(attr_id, val_id)
            entries.append(Assignment(attr_id, val_id))
        return cls(entries=tuple(entries))

    @classmethod
    def from_assignments(cls, assignments: AssignmentSet) -> Self:
        """Create a selection pinning exactly a variant's assignments."""
        return cls(entries=tuple(assignments))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Selection):
            return NotImplemented
        return frozenset(self.entries) == frozenset(other.entries)

    def __hash__(self) -> int:
        return hash(frozenset(self.entries))

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[str]:
        return (a.attribute_id for a in self.entries)

    def __contains__(self, attribute_id: object) -> bool:
        return any(a.attribute_id == attribute_id for a in self.entries)

    def __bool__(self) -> bool:
        return bool(self.entries)

    def get(self, attribute_id: str) -> str | None:
        """Get the value chosen for an attribute, if any."""
        for assignment in self.entries:
            if assignment.attribute_id == attribute_id:
                return assignment.value_id
        return None

    def items(self) -> Iterator[tuple[str, str]]:
        """Iterate ``(attribute_id, value_id)`` pairs."""
        return ((a.attribute_id, a.value_id) for a in self.entries)

    def with_value(self, attribute_id: str, value_id: str) -> "Selection":
        """Return a copy with one attribute's entry replaced or added.

        Raises:
            InvalidSelectionError: If either id is empty.
        """
        if not attribute_id or not value_id:
            raise InvalidSelectionError(attribute_id, value_id)

        replaced = False
        entries = []
        for assignment in self.entries:
            if assignment.attribute_id == attribute_id:
                entries.append(Assignment(attribute_id, value_id))
                replaced = True
            else:
                entries.append(assignment)
        if not replaced:
            entries.append(Assignment(attribute_id, value_id))
        return Selection(entries=tuple(entries))

    def merged_with(self, additions: Iterable[Assignment]) -> "Selection":
        """Return a copy with entries added for attributes not yet chosen.

        Existing picks are never overwritten.
        """
        entries = list(self.entries)
        chosen = {a.attribute_id for a in entries}
        for assignment in additions:
            if assignment.attribute_id not in chosen:
                entries.append(assignment)
                chosen.add(assignment.attribute_id)
        return Selection(entries=tuple(entries))

    def as_dict(self) -> dict[str, str]:
        """Convert to an ``attribute_id -> value_id`` dictionary."""
        return {a.attribute_id: a.value_id for a in self.entries}
