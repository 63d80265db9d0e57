"""Selection resolver for the storefront variant selector.

A shopper builds a selection one attribute at a time. After every click
the resolver decides what the selection becomes, whether it pins down a
single variant, and which of the remaining values are still worth
offering.

Picking a value that no variant combines with the rest of the current
selection triggers a smart switch: the resolver jumps to the variant that
carries the new value and keeps as many of the shopper's other picks as
the catalog allows.
"""

from dataclasses import dataclass
from enum import Enum

import structlog

from variant_engine.catalog.snapshot import CatalogSnapshot
from variant_engine.domain.entities import Attribute, AttributeValue, Variant
from variant_engine.domain.value_objects import Assignment, Selection

logger = structlog.get_logger()


class SelectionStrategy(str, Enum):
    """How a click was resolved."""

    EXACT_MATCH = "exact_match"
    SMART_SWITCH = "smart_switch"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class SelectionUpdate:
    """Result of applying one click.

    Attributes:
        selection: The committed selection.
        strategy: Which rule produced it.
    """

    selection: Selection
    strategy: SelectionStrategy


@dataclass(frozen=True)
class ValueChoice:
    """Display state of one value chip.

    Attributes:
        value: The attribute value.
        selected: Currently chosen.
        available: Some variant combines it with the other picks.
        out_of_stock: Available, but every such variant is sold out.
    """

    value: AttributeValue
    selected: bool
    available: bool
    out_of_stock: bool


@dataclass(frozen=True)
class AttributeChoices:
    """All value chips of one attribute, in display order."""

    attribute: Attribute
    choices: tuple[ValueChoice, ...]


@dataclass(frozen=True)
class SelectedOffer:
    """The variant a complete selection resolves to, with display labels.

    Attributes:
        variant: The matched variant.
        attribute_names: Attribute names joined by ", " (e.g. "Color, Size").
        value_names: Chosen values in the same order (e.g. "Red, M").
    """

    variant: Variant
    attribute_names: str
    value_names: str


class SelectionResolver:
    """Owns one shopper's selection for one product page.

    Every operation reads the current snapshot. When the catalog changes,
    call ``refresh`` with a new snapshot; the selection is kept.

    Example usage:
        resolver = SelectionResolver(snapshot)
        resolver.auto_fill_singletons()
        resolver.set_value("color", "blue")
        variant = resolver.resolve_variant()
    """

    def __init__(
        self,
        snapshot: CatalogSnapshot,
        selection: Selection | None = None,
    ) -> None:
        """Initialize resolver.

        Args:
            snapshot: Catalog model of the product.
            selection: Starting selection; empty when omitted.
        """
        self._snapshot = snapshot
        self._selection = selection or Selection.empty()

    @property
    def snapshot(self) -> CatalogSnapshot:
        return self._snapshot

    @property
    def selection(self) -> Selection:
        return self._selection

    # ------------------------------------------------------------------
    # Selection changes
    # ------------------------------------------------------------------

    def set_value(self, attribute_id: str, value_id: str) -> SelectionUpdate:
        """Apply a shopper's click and commit the resulting selection.

        Args:
            attribute_id: Attribute clicked.
            value_id: Value chosen.

        Returns:
            The committed selection and the strategy that produced it.
        """
        update = self.propose(attribute_id, value_id)
        self._selection = update.selection
        return update

    def propose(self, attribute_id: str, value_id: str) -> SelectionUpdate:
        """Compute what ``set_value`` would commit, without committing.

        The proposed selection is accepted as-is when some variant contains
        all its entries, even if attributes are still unpicked. Otherwise
        the variant carrying the new value that agrees with most of the
        other picks wins (first in scan order on ties) and the selection
        becomes exactly that variant's assignments. If no variant carries
        the new value at all, the selection collapses to the new pick.
        """
        current = self._selection
        proposed = current.with_value(attribute_id, value_id)

        if self.has_consistent_variant(proposed):
            logger.debug(
                "Selection accepted",
                product_id=self._snapshot.product_id,
                attribute_id=attribute_id,
                value_id=value_id,
                strategy=SelectionStrategy.EXACT_MATCH.value,
            )
            return SelectionUpdate(proposed, SelectionStrategy.EXACT_MATCH)

        candidates = [
            v for v in self._snapshot.variants
            if v.assignments.contains(attribute_id, value_id)
        ]

        if not candidates:
            logger.warning(
                "No variant carries the chosen value",
                product_id=self._snapshot.product_id,
                attribute_id=attribute_id,
                value_id=value_id,
                strategy=SelectionStrategy.FALLBACK.value,
            )
            return SelectionUpdate(
                Selection(entries=(Assignment(attribute_id, value_id),)),
                SelectionStrategy.FALLBACK,
            )

        best = candidates[0]
        best_score = -1
        for candidate in candidates:
            score = candidate.assignments.agreement_count(current, exclude=attribute_id)
            if score > best_score:
                best, best_score = candidate, score

        logger.debug(
            "Selection switched to closest variant",
            product_id=self._snapshot.product_id,
            attribute_id=attribute_id,
            value_id=value_id,
            variant_id=best.id,
            preserved=best_score,
            strategy=SelectionStrategy.SMART_SWITCH.value,
        )
        return SelectionUpdate(
            Selection.from_assignments(best.assignments),
            SelectionStrategy.SMART_SWITCH,
        )

    def auto_fill_singletons(self) -> list[Assignment]:
        """Pick every attribute that only has one value.

        Existing picks are never overwritten.

        Returns:
            The assignments that were added.
        """
        added = [
            a for a in self._snapshot.singleton_assignments()
            if a.attribute_id not in self._selection
        ]
        if added:
            self._selection = self._selection.merged_with(added)
        return added

    def refresh(self, snapshot: CatalogSnapshot) -> list[Assignment]:
        """Switch to a newer snapshot and auto-fill singletons once.

        Picks whose attribute or value no longer occurs in the new snapshot
        are dropped before the auto-fill.

        Returns:
            Assignments added by the auto-fill.
        """
        self._snapshot = snapshot
        kept = tuple(a for a in self._selection.entries if self._is_offered(a))
        if len(kept) != len(self._selection):
            logger.debug(
                "Stale picks dropped",
                product_id=snapshot.product_id,
                dropped=[
                    str(a) for a in self._selection.entries if not self._is_offered(a)
                ],
            )
            self._selection = Selection(entries=kept)
        return self.auto_fill_singletons()

    def _is_offered(self, assignment: Assignment) -> bool:
        options = self._snapshot.options_for(assignment.attribute_id)
        return options is not None and options.find_value(assignment.value_id) is not None

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def has_consistent_variant(self, selection: Selection) -> bool:
        """True if some variant contains every entry of ``selection``."""
        return any(v.assignments.satisfies(selection) for v in self._snapshot.variants)

    def is_complete(self, selection: Selection | None = None) -> bool:
        """True when every attribute of the product has a pick."""
        selection = self._selection if selection is None else selection
        return all(attr_id in selection for attr_id in self._snapshot.attribute_ids)

    def resolve_variant(self, selection: Selection | None = None) -> Variant | None:
        """Get the variant a complete selection points to.

        Only picks on the product's attributes take part in the match.

        Returns:
            The matched variant, or None when the selection is incomplete
            or the catalog has no variant for this combination.
        """
        selection = self._selection if selection is None else selection
        if self._snapshot.is_empty or not self.is_complete(selection):
            return None
        known = set(self._snapshot.attribute_ids)
        relevant = Selection(
            entries=tuple(a for a in selection.entries if a.attribute_id in known)
        )
        for variant in self._snapshot.variants:
            if variant.assignments.satisfies(relevant):
                return variant
        return None

    def _context_for(self, attribute_id: str) -> Selection:
        # Only picks on attributes displayed before this one constrain it.
        order = self._snapshot.attribute_ids
        if attribute_id not in order:
            earlier = set(order)
        else:
            earlier = set(order[: order.index(attribute_id)])
        return Selection(
            entries=tuple(a for a in self._selection.entries if a.attribute_id in earlier)
        )

    def _candidates_for(self, attribute_id: str, value_id: str) -> list[Variant]:
        context = self._context_for(attribute_id)
        return [
            v for v in self._snapshot.variants
            if v.assignments.contains(attribute_id, value_id)
            and v.assignments.satisfies(context)
        ]

    def is_value_available(self, attribute_id: str, value_id: str) -> bool:
        """True if some variant carries this value and the earlier picks.

        Picks on attributes displayed before ``attribute_id`` must match;
        the attribute itself and those after it are ignored, since a click
        there is resolved by ``set_value`` (switching if needed).
        """
        return bool(self._candidates_for(attribute_id, value_id))

    def is_value_out_of_stock(self, attribute_id: str, value_id: str) -> bool:
        """True if every variant reachable with this value is sold out.

        Returns False when no variant is reachable at all; check
        ``is_value_available`` for that case.
        """
        candidates = self._candidates_for(attribute_id, value_id)
        return bool(candidates) and all(v.is_sold_out for v in candidates)

    def choice_states(self) -> list[AttributeChoices]:
        """Display state of every value chip, attribute by attribute."""
        states = []
        for options in self._snapshot.attributes:
            chosen = self._selection.get(options.id)
            choices = []
            for value in options.values:
                available = self.is_value_available(options.id, value.id)
                choices.append(
                    ValueChoice(
                        value=value,
                        selected=value.id == chosen,
                        available=available,
                        out_of_stock=available
                        and self.is_value_out_of_stock(options.id, value.id),
                    )
                )
            states.append(AttributeChoices(attribute=options.attribute, choices=tuple(choices)))
        return states

    def current_offer(self) -> SelectedOffer | None:
        """Describe the resolved variant, or None if nothing is offered."""
        variant = self.resolve_variant()
        if variant is None:
            return None
        attributes = self._snapshot.attributes
        return SelectedOffer(
            variant=variant,
            attribute_names=", ".join(opt.name for opt in attributes),
            value_names=", ".join(
                self._snapshot.value_label(opt.id, self._selection.get(opt.id) or "")
                for opt in attributes
            ),
        )
