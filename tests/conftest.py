"""Shared fixtures for variant engine tests."""

from decimal import Decimal

import pytest

from variant_engine.catalog import (
    CatalogSnapshot,
    InMemoryVariantRepository,
    VariantCatalogService,
    build_snapshot,
)
from variant_engine.domain import Attribute, AssignmentSet, AttributeValue, Variant
from variant_engine.infrastructure.config import Settings


# ============================================================================
# Reference Data
# ============================================================================


COLOR = Attribute(id="color", name="Color", sort_order=0)
SIZE = Attribute(id="size", name="Size", sort_order=1)

VALUES = [
    AttributeValue(id="red", attribute_id="color", value="Red", sort_order=0),
    AttributeValue(id="blue", attribute_id="color", value="Blue", sort_order=1),
    AttributeValue(id="s", attribute_id="size", value="S", sort_order=0),
    AttributeValue(id="m", attribute_id="size", value="M", sort_order=1),
    AttributeValue(id="l", attribute_id="size", value="L", sort_order=2),
]


def variant(
    variant_id: str,
    sequence: int,
    stock: int = 5,
    available: bool = True,
    product_id: str = "tee",
    **assignments: str,
) -> Variant:
    """Create a variant pinned to the given attribute values."""
    return Variant(
        id=variant_id,
        product_id=product_id,
        price=Decimal("19.99"),
        stock_quantity=stock,
        is_available=available,
        assignments=AssignmentSet.from_dict(assignments),
        sequence=sequence,
    )


def snapshot_of(*variants: Variant) -> CatalogSnapshot:
    """Build a snapshot of the tee product over the reference data."""
    return build_snapshot("tee", variants, [COLOR, SIZE], VALUES)


# ============================================================================
# Snapshot Fixtures
# ============================================================================


@pytest.fixture
def make_variant():
    """Factory for variants pinned to keyword attribute values."""
    return variant


@pytest.fixture
def make_snapshot():
    """Factory for snapshots of the tee product over the reference data."""
    return snapshot_of


@pytest.fixture
def red_blue_snapshot() -> CatalogSnapshot:
    """Two variants with no shared value: Red/S and Blue/M."""
    return snapshot_of(
        variant("v-red-s", 1, color="red", size="s"),
        variant("v-blue-m", 2, color="blue", size="m"),
    )


@pytest.fixture
def red_sizes_snapshot() -> CatalogSnapshot:
    """Red in two sizes: Red/S and Red/M."""
    return snapshot_of(
        variant("v-red-s", 1, color="red", size="s"),
        variant("v-red-m", 2, color="red", size="m"),
    )


# ============================================================================
# Repository / Service Fixtures
# ============================================================================


@pytest.fixture
def repository() -> InMemoryVariantRepository:
    """Repository seeded with Color and Size attributes and their values."""
    repo = InMemoryVariantRepository()
    repo.add_attribute(COLOR)
    repo.add_attribute(SIZE)
    for value in VALUES:
        repo.add_value(value)
    return repo


@pytest.fixture
def config() -> Settings:
    """Settings with defaults, independent of the environment."""
    return Settings(
        max_images_per_variant=6,
        low_stock_threshold=10,
        shared_image_variant_count=2,
        enforce_unique_variants=True,
    )


@pytest.fixture
def service(
    repository: InMemoryVariantRepository,
    config: Settings,
) -> VariantCatalogService:
    """Catalog service over the seeded repository."""
    return VariantCatalogService(repository, config)
