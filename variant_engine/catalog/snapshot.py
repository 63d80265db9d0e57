"""Catalog model for one product.

A snapshot is derived purely from a product's variant list: the attributes
that actually occur across the variants, and for each attribute the values
that actually occur. Nothing is cached between snapshots; when the variant
list changes, build a new one.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

import structlog

from variant_engine.domain.entities import Attribute, AttributeValue, Variant
from variant_engine.domain.value_objects import Assignment

logger = structlog.get_logger()


@dataclass(frozen=True)
class AttributeOptions:
    """An attribute together with the values its variants use.

    Attributes:
        attribute: The attribute.
        values: Distinct values in display order.
    """

    attribute: Attribute
    values: tuple[AttributeValue, ...]

    @property
    def id(self) -> str:
        return self.attribute.id

    @property
    def name(self) -> str:
        return self.attribute.name

    @property
    def value_ids(self) -> tuple[str, ...]:
        return tuple(v.id for v in self.values)

    @property
    def is_singleton(self) -> bool:
        """True when every variant shares the same value for this attribute."""
        return len(self.values) == 1

    def find_value(self, value_id: str) -> AttributeValue | None:
        for value in self.values:
            if value.id == value_id:
                return value
        return None


@dataclass(frozen=True)
class CatalogSnapshot:
    """Immutable view of one product's variants and their options.

    Attributes:
        product_id: Product the snapshot describes.
        variants: Variants in ascending creation order. This order is the
            scan order every resolver uses, so tie-breaks are reproducible.
        attributes: Attributes in display order, each with its values.
    """

    product_id: str
    variants: tuple[Variant, ...] = ()
    attributes: tuple[AttributeOptions, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.variants

    @property
    def attribute_ids(self) -> tuple[str, ...]:
        return tuple(opt.id for opt in self.attributes)

    def options_for(self, attribute_id: str) -> AttributeOptions | None:
        """Get an attribute's options, or None if no variant uses it."""
        for options in self.attributes:
            if options.id == attribute_id:
                return options
        return None

    def singleton_assignments(self) -> list[Assignment]:
        """Assignments for attributes that have exactly one value."""
        return [
            Assignment(opt.id, opt.values[0].id)
            for opt in self.attributes
            if opt.is_singleton
        ]

    def attribute_label(self, attribute_id: str) -> str:
        options = self.options_for(attribute_id)
        return options.name if options else attribute_id

    def value_label(self, attribute_id: str, value_id: str) -> str:
        options = self.options_for(attribute_id)
        value = options.find_value(value_id) if options else None
        return value.value if value else value_id

    def variant_by_id(self, variant_id: str) -> Variant | None:
        for variant in self.variants:
            if variant.id == variant_id:
                return variant
        return None


def _index(items: Iterable[Attribute] | Iterable[AttributeValue] | Mapping) -> dict:
    if isinstance(items, Mapping):
        return dict(items)
    return {item.id: item for item in items}


def build_snapshot(
    product_id: str,
    variants: Iterable[Variant],
    attributes: Iterable[Attribute] | Mapping[str, Attribute] = (),
    values: Iterable[AttributeValue] | Mapping[str, AttributeValue] = (),
) -> CatalogSnapshot:
    """Derive the catalog model for a product from its variants.

    Attributes are ordered by ``sort_order`` with ties broken by the order
    in which they were first seen while scanning the variants. Values are
    deduplicated by id and ordered the same way within their attribute.
    An assignment pointing at an attribute or value missing from the
    lookups gets a placeholder labelled with its id.

    Args:
        product_id: Product being described.
        variants: The product's variants.
        attributes: Attribute lookup (entities or id -> entity).
        values: Attribute value lookup (entities or id -> entity).

    Returns:
        The derived snapshot. An empty variant list yields no attributes.
    """
    attribute_index = _index(attributes)
    value_index = _index(values)

    ordered_variants = tuple(sorted(variants, key=lambda v: v.sequence))

    seen_attributes: dict[str, Attribute] = {}
    seen_values: dict[str, dict[str, AttributeValue]] = {}

    for variant in ordered_variants:
        for assignment in variant.assignments:
            attr_id = assignment.attribute_id
            if attr_id not in seen_attributes:
                attribute = attribute_index.get(attr_id)
                if attribute is None:
                    logger.warning(
                        "Variant references unknown attribute",
                        product_id=product_id,
                        variant_id=variant.id,
                        attribute_id=attr_id,
                    )
                    attribute = Attribute(id=attr_id, name=attr_id)
                seen_attributes[attr_id] = attribute
                seen_values[attr_id] = {}

            bucket = seen_values[attr_id]
            if assignment.value_id not in bucket:
                value = value_index.get(assignment.value_id)
                if value is None:
                    logger.warning(
                        "Variant references unknown attribute value",
                        product_id=product_id,
                        variant_id=variant.id,
                        attribute_id=attr_id,
                        value_id=assignment.value_id,
                    )
                    value = AttributeValue(
                        id=assignment.value_id,
                        attribute_id=attr_id,
                        value=assignment.value_id,
                    )
                bucket[assignment.value_id] = value

    # sorted() is stable, so dict insertion order breaks sort_order ties
    options = tuple(
        AttributeOptions(
            attribute=attribute,
            values=tuple(
                sorted(seen_values[attr_id].values(), key=lambda v: v.sort_order)
            ),
        )
        for attr_id, attribute in sorted(
            seen_attributes.items(), key=lambda item: item[1].sort_order
        )
    )

    return CatalogSnapshot(
        product_id=product_id,
        variants=ordered_variants,
        attributes=options,
    )
