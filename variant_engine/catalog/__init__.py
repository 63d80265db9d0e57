"""Variant Catalog Engine.

Generates variants from administrator picks and resolves shopper
selections against a product's variants.
"""

from variant_engine.catalog.generator import (
    CombinationOutcome,
    CombinationResult,
    GenerationReport,
    VariantGenerator,
    VariantPick,
    VariantTemplate,
    cartesian_combinations,
    group_picks,
)
from variant_engine.catalog.repository import (
    InMemoryVariantRepository,
    VariantDraft,
    VariantRepository,
)
from variant_engine.catalog.resolver import (
    AttributeChoices,
    SelectedOffer,
    SelectionResolver,
    SelectionStrategy,
    SelectionUpdate,
    ValueChoice,
)
from variant_engine.catalog.schemas import (
    GenerateVariantsRequest,
    VariantPickSchema,
    VariantTemplateSchema,
    VariantUpdateRequest,
)
from variant_engine.catalog.service import (
    OfferView,
    VariantCatalogService,
    VariantGroup,
    VariantRow,
)
from variant_engine.catalog.snapshot import AttributeOptions, CatalogSnapshot, build_snapshot

__all__ = [
    # Catalog model
    "AttributeOptions",
    "CatalogSnapshot",
    "build_snapshot",
    # Generator
    "CombinationOutcome",
    "CombinationResult",
    "GenerationReport",
    "VariantGenerator",
    "VariantPick",
    "VariantTemplate",
    "cartesian_combinations",
    "group_picks",
    # Resolver
    "AttributeChoices",
    "SelectedOffer",
    "SelectionResolver",
    "SelectionStrategy",
    "SelectionUpdate",
    "ValueChoice",
    # Repository
    "InMemoryVariantRepository",
    "VariantDraft",
    "VariantRepository",
    # Schemas
    "GenerateVariantsRequest",
    "VariantPickSchema",
    "VariantTemplateSchema",
    "VariantUpdateRequest",
    # Service
    "OfferView",
    "VariantCatalogService",
    "VariantGroup",
    "VariantRow",
]
