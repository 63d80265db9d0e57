"""Domain events for the variant catalog.

Variants record an event for every lifecycle change. The catalog service
collects them after each save and logs them; a host application can
forward them to its own bus for cache invalidation or audit trails.
"""

from dataclasses import dataclass, field
from typing import Any, ClassVar

from variant_engine.domain.base import DomainEvent


# ============================================================================
# Variant Events
# ============================================================================


@dataclass(frozen=True)
class VariantCreated(DomainEvent):
    """Event raised when a new variant is created."""

    event_type: ClassVar[str] = "variant.created"

    variant_id: str = ""
    product_id: str = ""
    assignments: dict[str, str] = field(default_factory=dict)
    price: str = "0"
    stock_quantity: int = 0

    def _payload(self) -> dict[str, Any]:
        """Get event-specific payload."""
        return {
            "variant_id": self.variant_id,
            "product_id": self.product_id,
            "assignments": dict(self.assignments),
            "price": self.price,
            "stock_quantity": self.stock_quantity,
        }


@dataclass(frozen=True)
class VariantUpdated(DomainEvent):
    """Event raised when price, stock, availability or images change."""

    event_type: ClassVar[str] = "variant.updated"

    variant_id: str = ""
    product_id: str = ""
    changed_fields: tuple[str, ...] = ()

    def _payload(self) -> dict[str, Any]:
        """Get event-specific payload."""
        return {
            "variant_id": self.variant_id,
            "product_id": self.product_id,
            "changed_fields": list(self.changed_fields),
        }


@dataclass(frozen=True)
class VariantDeleted(DomainEvent):
    """Event raised when a variant is removed from its product."""

    event_type: ClassVar[str] = "variant.deleted"

    variant_id: str = ""
    product_id: str = ""

    def _payload(self) -> dict[str, Any]:
        """Get event-specific payload."""
        return {
            "variant_id": self.variant_id,
            "product_id": self.product_id,
        }


# ============================================================================
# Event Registry
# ============================================================================


EVENT_REGISTRY: dict[str, type[DomainEvent]] = {
    VariantCreated.event_type: VariantCreated,
    VariantUpdated.event_type: VariantUpdated,
    VariantDeleted.event_type: VariantDeleted,
}


def get_event_class(event_type: str) -> type[DomainEvent] | None:
    """Get event class by event type string.

    Args:
        event_type: Event type identifier (e.g., "variant.created").

    Returns:
        Event class if found, None otherwise.
    """
    return EVENT_REGISTRY.get(event_type)
