"""Domain entities for the variant catalog.

Attributes and attribute values are administrator-managed reference data.
Variants are aggregates: each one is a purchasable configuration of a
product with its own price, stock and imagery.
"""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Self
from uuid import uuid4

from variant_engine.domain.base import AggregateRoot, Entity
from variant_engine.domain.events import VariantCreated, VariantDeleted, VariantUpdated
from variant_engine.domain.exceptions import (
    ImageLimitExceededError,
    InvalidPriceError,
    InvalidStockError,
)
from variant_engine.domain.value_objects import AssignmentSet

DEFAULT_MAX_IMAGES = 6
DEFAULT_LOW_STOCK_THRESHOLD = 10


def parse_price(value: Any) -> Decimal:
    """Convert a price to ``Decimal``.

    Raises:
        InvalidPriceError: If the value is negative or not a finite number.
    """
    try:
        price = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise InvalidPriceError(value) from None
    if not price.is_finite() or price < 0:
        raise InvalidPriceError(value)
    return price


# ============================================================================
# Attribute Entities
# ============================================================================


@dataclass(eq=False)
class Attribute(Entity[str]):
    """A named axis of product variation (e.g., Color).

    Attributes:
        id: Attribute identifier.
        name: Display name.
        sort_order: Display position; lower comes first.
        icon_url: Optional icon shown next to the name.
    """

    id: str
    name: str
    sort_order: int = 0
    icon_url: str | None = None


@dataclass(eq=False)
class AttributeValue(Entity[str]):
    """One concrete point on an attribute's axis (e.g., Red).

    Attributes:
        id: Value identifier.
        attribute_id: Attribute this value belongs to.
        value: Display text.
        sort_order: Display position within the attribute.
        icon_url: Optional swatch image.
    """

    id: str
    attribute_id: str
    value: str
    sort_order: int = 0
    icon_url: str | None = None


# ============================================================================
# Variant Aggregate
# ============================================================================


@dataclass(kw_only=True, eq=False)
class Variant(AggregateRoot[str]):
    """A purchasable configuration of a product.

    Attributes:
        id: Variant identifier.
        product_id: Parent product.
        price: Unit price, never negative.
        stock_quantity: Units on hand, never negative.
        is_available: Administrator switch; False hides stock from sale.
        image_urls: Images shown when this variant is selected.
        assignments: Attribute values pinning this variant.
        sequence: Creation order within the repository. Resolvers scan
            variants in ascending sequence.
    """

    id: str
    product_id: str
    price: Decimal
    stock_quantity: int = 0
    is_available: bool = True
    image_urls: list[str] = field(default_factory=list)
    assignments: AssignmentSet = field(default_factory=AssignmentSet)
    sequence: int = 0

    def __post_init__(self) -> None:
        """Validate price and stock."""
        self.price = parse_price(self.price)
        if self.stock_quantity < 0:
            raise InvalidStockError(self.stock_quantity)

    @classmethod
    def create(
        cls,
        product_id: str,
        price: Decimal,
        assignments: AssignmentSet,
        stock_quantity: int = 0,
        is_available: bool = True,
        image_urls: list[str] | None = None,
        sequence: int = 0,
        variant_id: str | None = None,
    ) -> Self:
        """Create a new variant and record ``VariantCreated``.

        Args:
            product_id: Parent product.
            price: Unit price.
            assignments: Attribute values for this variant.
            stock_quantity: Initial stock.
            is_available: Initial availability switch.
            image_urls: Initial images.
            sequence: Creation order assigned by the repository.
            variant_id: Explicit id; a UUID is generated when omitted.

        Returns:
            The new variant.
        """
        variant = cls(
            id=variant_id or str(uuid4()),
            product_id=product_id,
            price=price,
            stock_quantity=stock_quantity,
            is_available=is_available,
            image_urls=list(image_urls or []),
            assignments=assignments,
            sequence=sequence,
        )
        variant._record_event(
            VariantCreated(
                aggregate_id=variant.id,
                aggregate_type="Variant",
                variant_id=variant.id,
                product_id=product_id,
                assignments=assignments.as_dict(),
                price=str(variant.price),
                stock_quantity=stock_quantity,
            )
        )
        return variant

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------

    @property
    def is_sold_out(self) -> bool:
        """True when the variant cannot be bought right now."""
        return self.stock_quantity == 0 or not self.is_available

    def is_low_stock(self, threshold: int = DEFAULT_LOW_STOCK_THRESHOLD) -> bool:
        """True when a few units remain (``0 < stock <= threshold``)."""
        return 0 < self.stock_quantity <= threshold

    @property
    def has_images(self) -> bool:
        """True when the variant has its own images."""
        return bool(self.image_urls)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def update_price(self, price: Decimal | int | str) -> None:
        """Set a new price.

        Raises:
            InvalidPriceError: If price is negative or not a number.
        """
        self.price = parse_price(price)
        self._changed("price")

    def update_stock(self, quantity: int) -> None:
        """Set the stock quantity.

        Raises:
            InvalidStockError: If quantity is negative.
        """
        if quantity < 0:
            raise InvalidStockError(quantity)
        self.stock_quantity = quantity
        self._changed("stock_quantity")

    def set_availability(self, is_available: bool) -> None:
        """Switch the variant on or off for sale."""
        self.is_available = is_available
        self._changed("is_available")

    def add_image(self, url: str, limit: int = DEFAULT_MAX_IMAGES) -> bool:
        """Append an image unless it is already present.

        Args:
            url: Image URL.
            limit: Maximum images per variant.

        Returns:
            True if the image was added, False if it was already there.

        Raises:
            ImageLimitExceededError: If the variant is full.
        """
        if url in self.image_urls:
            return False
        if len(self.image_urls) >= limit:
            raise ImageLimitExceededError(self.id, limit)
        self.image_urls.append(url)
        self._changed("image_urls")
        return True

    def remove_image(self, index: int) -> str:
        """Remove the image at ``index`` and return its URL.

        Raises:
            IndexError: If there is no image at that position.
        """
        url = self.image_urls.pop(index)
        self._changed("image_urls")
        return url

    def replace_images(self, urls: list[str], limit: int = DEFAULT_MAX_IMAGES) -> None:
        """Replace all images, dropping duplicates while keeping order.

        Raises:
            ImageLimitExceededError: If more than ``limit`` distinct URLs are given.
        """
        unique = list(dict.fromkeys(urls))
        if len(unique) > limit:
            raise ImageLimitExceededError(self.id, limit)
        self.image_urls = unique
        self._changed("image_urls")

    def mark_deleted(self) -> None:
        """Record ``VariantDeleted``; the repository removes the row."""
        self._record_event(
            VariantDeleted(
                aggregate_id=self.id,
                aggregate_type="Variant",
                variant_id=self.id,
                product_id=self.product_id,
            )
        )

    def _changed(self, *fields: str) -> None:
        self._touch()
        self._record_event(
            VariantUpdated(
                aggregate_id=self.id,
                aggregate_type="Variant",
                variant_id=self.id,
                product_id=self.product_id,
                changed_fields=fields,
            )
        )
