"""Variant catalog service.

High-level entry point used by the admin variant editor and the storefront
product page. Combines the repository with the generator, the catalog
model and the selection resolver.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from decimal import Decimal

import structlog

from variant_engine.catalog.generator import GenerationReport, VariantGenerator
from variant_engine.catalog.repository import VariantRepository
from variant_engine.catalog.resolver import SelectionResolver
from variant_engine.catalog.schemas import GenerateVariantsRequest, VariantUpdateRequest
from variant_engine.catalog.snapshot import CatalogSnapshot, build_snapshot
from variant_engine.domain.entities import Variant, parse_price
from variant_engine.domain.exceptions import (
    ImageLimitExceededError,
    InvalidStockError,
    SharedImageSelectionError,
)
from variant_engine.domain.value_objects import Assignment, Selection
from variant_engine.infrastructure.config import Settings, settings

logger = structlog.get_logger()


@dataclass(frozen=True)
class VariantRow:
    """One line of the admin variant list.

    Attributes:
        variant: The variant.
        label: Non-grouping attributes as "Name: value" pairs, or "Standard".
    """

    variant: Variant
    label: str


@dataclass(frozen=True)
class VariantGroup:
    """Variants sharing the same value of the first attribute."""

    name: str
    rows: tuple[VariantRow, ...]


@dataclass(frozen=True)
class OfferView:
    """What the product page shows for the current selection.

    Attributes:
        variant: The matched variant, if any.
        price: Variant price, or the product's base price.
        stock_quantity: Variant stock, or the product's base stock.
        is_sold_out: Nothing can be bought right now.
        is_low_stock: Only a few units remain.
        image_urls: Variant images, or the product images.
        attribute_names: "Color, Size" for the matched variant.
        value_names: "Red, M" for the matched variant.
        requires_selection: The product has variants but none is matched,
            so adding to cart must be blocked.
    """

    variant: Variant | None
    price: Decimal
    stock_quantity: int
    is_sold_out: bool
    is_low_stock: bool
    image_urls: tuple[str, ...]
    attribute_names: str = ""
    value_names: str = ""
    requires_selection: bool = False


class VariantCatalogService:
    """Service for variant operations.

    Example usage:
        service = VariantCatalogService(InMemoryVariantRepository())

        report = service.generate_variants("tee", GenerateVariantsRequest(...))
        resolver = service.open_selector("tee")
        resolver.set_value("color", "red")
        offer = service.describe_offer(resolver, base_price=Decimal("19.99"))
    """

    def __init__(
        self,
        repository: VariantRepository,
        config: Settings | None = None,
    ) -> None:
        """Initialize service.

        Args:
            repository: Persistence collaborator.
            config: Engine settings; module defaults when omitted.
        """
        self.repository = repository
        self.config = config or settings
        self.generator = VariantGenerator(repository)

    # ------------------------------------------------------------------
    # Storefront
    # ------------------------------------------------------------------

    def load_snapshot(self, product_id: str) -> CatalogSnapshot:
        """Build the catalog model from the repository's current data."""
        return build_snapshot(
            product_id,
            self.repository.list_variants(product_id),
            self.repository.list_attributes(),
            self.repository.list_values(),
        )

    def open_selector(
        self,
        product_id: str,
        selection: Selection | None = None,
    ) -> SelectionResolver:
        """Create a resolver for a shopper's visit with singletons pre-picked."""
        resolver = SelectionResolver(self.load_snapshot(product_id), selection)
        resolver.auto_fill_singletons()
        return resolver

    def refresh_selector(self, resolver: SelectionResolver) -> list[Assignment]:
        """Point a resolver at fresh catalog data, keeping its selection."""
        return resolver.refresh(self.load_snapshot(resolver.snapshot.product_id))

    def describe_offer(
        self,
        resolver: SelectionResolver,
        base_price: Decimal,
        base_images: Sequence[str] = (),
        base_stock: int = 0,
    ) -> OfferView:
        """Summarise what the product page should show.

        Args:
            resolver: The shopper's resolver.
            base_price: Product price used when no variant is matched.
            base_images: Product images used when the variant has none.
            base_stock: Product stock used when no variant is matched.

        Returns:
            Offer view for rendering.
        """
        offer = resolver.current_offer()
        threshold = self.config.low_stock_threshold

        if offer is None:
            return OfferView(
                variant=None,
                price=base_price,
                stock_quantity=base_stock,
                is_sold_out=base_stock == 0,
                is_low_stock=0 < base_stock <= threshold,
                image_urls=tuple(base_images),
                requires_selection=not resolver.snapshot.is_empty,
            )

        variant = offer.variant
        return OfferView(
            variant=variant,
            price=variant.price,
            stock_quantity=variant.stock_quantity,
            is_sold_out=variant.is_sold_out,
            is_low_stock=variant.is_low_stock(threshold),
            image_urls=tuple(variant.image_urls or base_images),
            attribute_names=offer.attribute_names,
            value_names=offer.value_names,
        )

    # ------------------------------------------------------------------
    # Admin
    # ------------------------------------------------------------------

    def generate_variants(
        self,
        product_id: str,
        request: GenerateVariantsRequest,
    ) -> GenerationReport:
        """Create one variant per combination of the submitted picks."""
        report = self.generator.generate(
            product_id,
            request.domain_picks(),
            request.template.to_domain(),
        )
        for variant in report.created_variants:
            self._publish(variant)
        return report

    def update_variant(self, variant_id: str, update: VariantUpdateRequest) -> Variant:
        """Apply a partial update to one variant.

        Every field is checked before any is applied, so a rejected update
        leaves the variant untouched.

        Raises:
            VariantNotFoundError: If the variant does not exist.
            VariantError: If a new value violates a variant invariant.
        """
        variant = self.repository.get_variant(variant_id)
        limit = self.config.max_images_per_variant

        price = parse_price(update.price) if update.price is not None else None
        if update.stock_quantity is not None and update.stock_quantity < 0:
            raise InvalidStockError(update.stock_quantity)
        images = None
        if update.image_urls is not None:
            images = list(dict.fromkeys(update.image_urls))
            if len(images) > limit:
                raise ImageLimitExceededError(variant.id, limit)

        if price is not None:
            variant.update_price(price)
        if update.stock_quantity is not None:
            variant.update_stock(update.stock_quantity)
        if update.is_available is not None:
            variant.set_availability(update.is_available)
        if images is not None:
            variant.replace_images(images, limit)

        return self._save(variant)

    def delete_variant(self, variant_id: str) -> Variant:
        """Delete one variant."""
        variant = self.repository.get_variant(variant_id)
        variant.mark_deleted()
        self.repository.delete_variant(variant_id)
        self._publish(variant)
        return variant

    def add_image(self, variant_id: str, image_url: str) -> Variant:
        """Attach an image to one variant."""
        variant = self.repository.get_variant(variant_id)
        if variant.add_image(image_url, self.config.max_images_per_variant):
            return self._save(variant)
        return variant

    def remove_image(self, variant_id: str, index: int) -> Variant:
        """Remove the image at ``index`` from one variant."""
        variant = self.repository.get_variant(variant_id)
        variant.remove_image(index)
        return self._save(variant)

    def apply_shared_image(
        self,
        variant_ids: Iterable[str],
        image_url: str,
    ) -> list[Variant]:
        """Attach one uploaded image to a fixed number of variants at once.

        Variants already holding the image, or already full, are left alone.

        Returns:
            The variants that received the image.

        Raises:
            SharedImageSelectionError: If the wrong number of variants is given.
        """
        ids = list(dict.fromkeys(variant_ids))
        expected = self.config.shared_image_variant_count
        if len(ids) != expected:
            raise SharedImageSelectionError(expected, len(ids))

        limit = self.config.max_images_per_variant
        updated = []
        for variant in (self.repository.get_variant(vid) for vid in ids):
            if image_url in variant.image_urls:
                continue
            if len(variant.image_urls) >= limit:
                logger.warning(
                    "Variant image limit reached, shared image skipped",
                    variant_id=variant.id,
                    limit=limit,
                )
                continue
            variant.add_image(image_url, limit)
            updated.append(self._save(variant))
        return updated

    def has_variant_images(self, product_id: str) -> bool:
        """True if any variant of the product has its own images."""
        return any(v.has_images for v in self.repository.list_variants(product_id))

    def group_variants(self, product_id: str) -> list[VariantGroup]:
        """Group the admin variant list by the first attribute.

        Returns:
            Groups named "<Attribute>: <value>", plus "Other" for variants
            without that attribute. A product whose variants use no
            attributes gets a single "All Variants" group.
        """
        snapshot = self.load_snapshot(product_id)
        if snapshot.is_empty:
            return []

        if not snapshot.attributes:
            rows = tuple(VariantRow(v, "Standard") for v in snapshot.variants)
            return [VariantGroup(name="All Variants", rows=rows)]

        major = snapshot.attributes[0]
        grouped: dict[str, list[VariantRow]] = {}
        for variant in snapshot.variants:
            value_id = variant.assignments.value_for(major.id)
            if value_id is None:
                name = "Other"
            else:
                name = f"{major.name}: {snapshot.value_label(major.id, value_id)}"
            grouped.setdefault(name, []).append(
                VariantRow(variant, self._row_label(snapshot, variant, major.id))
            )

        return [VariantGroup(name=name, rows=tuple(rows)) for name, rows in grouped.items()]

    @staticmethod
    def _row_label(snapshot: CatalogSnapshot, variant: Variant, major_id: str) -> str:
        parts = [
            f"{opt.name}: {snapshot.value_label(opt.id, value_id)}"
            for opt in snapshot.attributes
            if opt.id != major_id
            and (value_id := variant.assignments.value_for(opt.id)) is not None
        ]
        return ", ".join(parts) or "Standard"

    def _save(self, variant: Variant) -> Variant:
        saved = self.repository.save_variant(variant)
        self._publish(variant)
        return saved

    def _publish(self, variant: Variant) -> None:
        for event in variant.collect_events():
            logger.info(
                "Variant event",
                event_type=event.event_type,
                variant_id=variant.id,
                product_id=variant.product_id,
            )
