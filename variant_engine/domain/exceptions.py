"""Domain exceptions.

Errors raised when a catalog invariant would be violated or an invalid
operation is attempted. Outcomes such as "no variant matches this
selection" or "this combination already exists" are ordinary results
and never raised.
"""

from typing import Any


class DomainError(Exception):
    """Base class for all domain exceptions.

    All domain errors inherit from this class so callers can catch
    engine errors separately from persistence errors.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize domain error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ============================================================================
# Variant Errors
# ============================================================================


class VariantError(DomainError):
    """Base class for variant-related errors."""

    pass


class InvalidAssignmentError(VariantError):
    """Raised when an assignment is missing its attribute or value id."""

    def __init__(self, attribute_id: str, value_id: str) -> None:
        super().__init__(
            f"Assignment needs both ids, got {attribute_id!r} -> {value_id!r}",
            details={"attribute_id": attribute_id, "value_id": value_id},
        )


class DuplicateAttributeError(VariantError):
    """Raised when an assignment set pins one attribute to two values."""

    def __init__(self, attribute_id: str, value_ids: list[str]) -> None:
        """Initialize duplicate attribute error.

        Args:
            attribute_id: Attribute that appears more than once.
            value_ids: The conflicting value ids.
        """
        super().__init__(
            f"Attribute {attribute_id} is assigned more than once: {value_ids}",
            details={"attribute_id": attribute_id, "value_ids": value_ids},
        )


class InvalidPriceError(VariantError):
    """Raised when a variant price is negative or not a number."""

    def __init__(self, price: Any) -> None:
        super().__init__(
            f"Invalid variant price: {price}",
            details={"price": str(price)},
        )


class InvalidStockError(VariantError):
    """Raised when a stock quantity is negative."""

    def __init__(self, quantity: int) -> None:
        super().__init__(
            f"Stock quantity cannot be negative: {quantity}",
            details={"quantity": quantity},
        )


class ImageLimitExceededError(VariantError):
    """Raised when a variant would hold more images than allowed."""

    def __init__(self, variant_id: str, limit: int) -> None:
        """Initialize image limit error.

        Args:
            variant_id: ID of the variant.
            limit: Maximum number of images per variant.
        """
        super().__init__(
            f"Variant {variant_id} cannot hold more than {limit} images",
            details={"variant_id": variant_id, "limit": limit},
        )


class VariantNotFoundError(VariantError):
    """Raised when a variant id is unknown to the repository."""

    def __init__(self, variant_id: str) -> None:
        super().__init__(
            f"Variant {variant_id} not found",
            details={"variant_id": variant_id},
        )


class DuplicateVariantError(VariantError):
    """Raised by a repository that rejects a second variant for one combination."""

    def __init__(self, product_id: str, assignments: dict[str, str]) -> None:
        """Initialize duplicate variant error.

        Args:
            product_id: Product the variant belongs to.
            assignments: The attribute -> value mapping that already exists.
        """
        super().__init__(
            f"Product {product_id} already has a variant for {assignments}",
            details={"product_id": product_id, "assignments": assignments},
        )


class SharedImageSelectionError(VariantError):
    """Raised when a shared image is applied to the wrong number of variants."""

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(
            f"Please select exactly {expected} variants (got {actual})",
            details={"expected": expected, "actual": actual},
        )


# ============================================================================
# Selection Errors
# ============================================================================


class SelectionError(DomainError):
    """Base class for selection-related errors."""

    pass


class InvalidSelectionError(SelectionError):
    """Raised when a selection entry has an empty attribute or value id."""

    def __init__(self, attribute_id: str, value_id: str) -> None:
        super().__init__(
            f"Invalid selection entry {attribute_id!r} -> {value_id!r}",
            details={"attribute_id": attribute_id, "value_id": value_id},
        )
