"""Domain layer - entities, value objects, domain events, exceptions.

- **Entities**: Attribute, AttributeValue, Variant
- **Value Objects**: Assignment, AssignmentSet, Selection
- **Domain Events**: VariantCreated, VariantUpdated, VariantDeleted
- **Exceptions**: Domain-specific errors and invariant violations

Example usage:
    from variant_engine.domain import Assignment, AssignmentSet, Variant

    variant = Variant.create(
        product_id="tee",
        price=Decimal("19.99"),
        assignments=AssignmentSet.of(
            Assignment("color", "red"),
            Assignment("size", "m"),
        ),
        stock_quantity=5,
    )
    variant.is_sold_out  # False
"""

# Base classes
from variant_engine.domain.base import AggregateRoot, DomainEvent, Entity, ValueObject

# Entities
from variant_engine.domain.entities import (
    DEFAULT_LOW_STOCK_THRESHOLD,
    DEFAULT_MAX_IMAGES,
    Attribute,
    AttributeValue,
    Variant,
    parse_price,
)

# Domain Events
from variant_engine.domain.events import (
    EVENT_REGISTRY,
    VariantCreated,
    VariantDeleted,
    VariantUpdated,
    get_event_class,
)

# Exceptions
from variant_engine.domain.exceptions import (
    DomainError,
    DuplicateAttributeError,
    DuplicateVariantError,
    ImageLimitExceededError,
    InvalidAssignmentError,
    InvalidPriceError,
    InvalidSelectionError,
    InvalidStockError,
    SelectionError,
    SharedImageSelectionError,
    VariantError,
    VariantNotFoundError,
)

# Value Objects
from variant_engine.domain.value_objects import Assignment, AssignmentSet, Selection

__all__ = [
    # Base classes
    "AggregateRoot",
    "DomainEvent",
    "Entity",
    "ValueObject",
    # Entities
    "Attribute",
    "AttributeValue",
    "Variant",
    "DEFAULT_LOW_STOCK_THRESHOLD",
    "DEFAULT_MAX_IMAGES",
    "parse_price",
    # Value Objects
    "Assignment",
    "AssignmentSet",
    "Selection",
    # Domain Events
    "VariantCreated",
    "VariantUpdated",
    "VariantDeleted",
    "EVENT_REGISTRY",
    "get_event_class",
    # Exceptions
    "DomainError",
    "VariantError",
    "InvalidAssignmentError",
    "DuplicateAttributeError",
    "InvalidPriceError",
    "InvalidStockError",
    "ImageLimitExceededError",
    "VariantNotFoundError",
    "DuplicateVariantError",
    "SharedImageSelectionError",
    "SelectionError",
    "InvalidSelectionError",
]
