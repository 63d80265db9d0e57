"""Persistence collaborator for the variant engine.

The engine never talks to a database directly. It reads attributes, values
and variants through ``VariantRepository`` and sends individual create,
save and delete requests through it. Whatever a concrete repository raises
is passed on unmodified.

``InMemoryVariantRepository`` is the reference implementation used by
tests and by host applications that keep catalogs in memory.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field
from decimal import Decimal

from variant_engine.domain.entities import Attribute, AttributeValue, Variant
from variant_engine.domain.exceptions import DuplicateVariantError, VariantNotFoundError
from variant_engine.domain.value_objects import AssignmentSet
from variant_engine.infrastructure.config import settings


@dataclass(frozen=True)
class VariantDraft:
    """A request to create one variant.

    Attributes:
        product_id: Parent product.
        price: Unit price.
        assignments: Attribute values for the new variant.
        stock_quantity: Initial stock.
        is_available: Initial availability switch.
        image_urls: Initial images.
    """

    product_id: str
    price: Decimal
    assignments: AssignmentSet = field(default_factory=AssignmentSet)
    stock_quantity: int = 0
    is_available: bool = True
    image_urls: tuple[str, ...] = ()


class VariantRepository(ABC):
    """Interface the engine uses to read and write catalog data."""

    @abstractmethod
    def list_attributes(self) -> Sequence[Attribute]:
        """Get all attributes."""

    @abstractmethod
    def list_values(self) -> Sequence[AttributeValue]:
        """Get all attribute values."""

    @abstractmethod
    def list_variants(self, product_id: str) -> Sequence[Variant]:
        """Get a product's variants in creation order."""

    @abstractmethod
    def get_variant(self, variant_id: str) -> Variant:
        """Get a variant by id.

        Raises:
            VariantNotFoundError: If no such variant exists.
        """

    @abstractmethod
    def find_by_assignments(
        self,
        product_id: str,
        assignments: AssignmentSet,
    ) -> Variant | None:
        """Find a product variant with exactly these assignments."""

    @abstractmethod
    def create_variant(self, draft: VariantDraft) -> Variant:
        """Persist a new variant built from ``draft``."""

    @abstractmethod
    def save_variant(self, variant: Variant) -> Variant:
        """Persist field changes to an existing variant."""

    @abstractmethod
    def delete_variant(self, variant_id: str) -> Variant:
        """Delete a variant and return it.

        Raises:
            VariantNotFoundError: If no such variant exists.
        """


class InMemoryVariantRepository(VariantRepository):
    """In-memory repository for attributes, values and variants.

    Example usage:
        repo = InMemoryVariantRepository()
        repo.add_attribute(Attribute(id="color", name="Color"))
        repo.add_value(AttributeValue(id="red", attribute_id="color", value="Red"))
    """

    def __init__(self, enforce_unique: bool | None = None) -> None:
        """Initialize an empty repository.

        Args:
            enforce_unique: Reject a second variant with the same
                assignment set for one product. Defaults to the
                ``enforce_unique_variants`` setting.
        """
        if enforce_unique is None:
            enforce_unique = settings.enforce_unique_variants
        self.enforce_unique = enforce_unique
        self._attributes: dict[str, Attribute] = {}
        self._values: dict[str, AttributeValue] = {}
        self._variants: dict[str, Variant] = {}
        self._sequence = 0

    def add_attribute(self, attribute: Attribute) -> Attribute:
        """Add or replace an attribute."""
        self._attributes[attribute.id] = attribute
        return attribute

    def add_value(self, value: AttributeValue) -> AttributeValue:
        """Add or replace an attribute value."""
        self._values[value.id] = value
        return value

    def list_attributes(self) -> list[Attribute]:
        return sorted(self._attributes.values(), key=lambda a: a.sort_order)

    def list_values(self) -> list[AttributeValue]:
        return sorted(self._values.values(), key=lambda v: v.sort_order)

    def list_variants(self, product_id: str) -> list[Variant]:
        variants = [v for v in self._variants.values() if v.product_id == product_id]
        variants.sort(key=lambda v: v.sequence)
        return variants

    def get_variant(self, variant_id: str) -> Variant:
        variant = self._variants.get(variant_id)
        if variant is None:
            raise VariantNotFoundError(variant_id)
        return variant

    def find_by_assignments(
        self,
        product_id: str,
        assignments: AssignmentSet,
    ) -> Variant | None:
        for variant in self.list_variants(product_id):
            if variant.assignments == assignments:
                return variant
        return None

    def create_variant(self, draft: VariantDraft) -> Variant:
        existing = self.find_by_assignments(draft.product_id, draft.assignments)
        if self.enforce_unique and existing is not None:
            raise DuplicateVariantError(draft.product_id, draft.assignments.as_dict())

        self._sequence += 1
        variant = Variant.create(
            product_id=draft.product_id,
            price=draft.price,
            assignments=draft.assignments,
            stock_quantity=draft.stock_quantity,
            is_available=draft.is_available,
            image_urls=list(draft.image_urls),
            sequence=self._sequence,
        )
        self._variants[variant.id] = variant
        return variant

    def save_variant(self, variant: Variant) -> Variant:
        if variant.id not in self._variants:
            raise VariantNotFoundError(variant.id)
        self._variants[variant.id] = variant
        return variant

    def delete_variant(self, variant_id: str) -> Variant:
        variant = self._variants.pop(variant_id, None)
        if variant is None:
            raise VariantNotFoundError(variant_id)
        return variant
