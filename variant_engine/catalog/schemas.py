"""Admin form schemas for the variant editor.

Pydantic models validating what the admin UI submits before it reaches
the generator or the catalog service. Form inputs arrive as text, so
blank selects and blank stock fields are normalised here.

Image lists are checked against the ``max_images_per_variant`` setting.
A caller with its own settings passes
``context={"max_images_per_variant": n}`` to ``model_validate``.
"""

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from variant_engine.catalog.generator import VariantPick, VariantTemplate
from variant_engine.infrastructure.config import settings


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _parse_stock(value: Any) -> Any:
    # Blank or unparsable stock text counts as zero
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return 0
    return value


def _limit_images(urls: list[str] | None, info: ValidationInfo) -> list[str] | None:
    # Duplicates are dropped before counting against the configured limit
    if urls is None:
        return None
    context = info.context or {}
    limit = context.get("max_images_per_variant", settings.max_images_per_variant)
    unique = list(dict.fromkeys(urls))
    if len(unique) > limit:
        raise ValueError(f"A variant can hold at most {limit} images")
    return unique


# ============================================================================
# Generation Schemas
# ============================================================================


class VariantPickSchema(BaseModel):
    """One attribute/value row of the "add variant" form."""

    attribute_id: str | None = Field(default=None, description="Chosen attribute")
    attribute_value_id: str | None = Field(
        default=None, description="Chosen value of the attribute"
    )

    @field_validator("attribute_id", "attribute_value_id", mode="before")
    @classmethod
    def _normalize_blank(cls, value: Any) -> Any:
        return _blank_to_none(value)

    def to_domain(self) -> VariantPick:
        return VariantPick(attribute_id=self.attribute_id, value_id=self.attribute_value_id)


class VariantTemplateSchema(BaseModel):
    """Shared fields applied to every generated variant."""

    price: Decimal = Field(..., ge=0, description="Unit price")
    stock_quantity: int = Field(default=0, ge=0, description="Initial stock")
    is_available: bool = Field(default=True, description="Available for sale")
    image_urls: list[str] = Field(
        default_factory=list,
        description="Images shown when the variant is selected",
    )

    @field_validator("stock_quantity", mode="before")
    @classmethod
    def _parse_stock_text(cls, value: Any) -> Any:
        return _parse_stock(value)

    @field_validator("image_urls")
    @classmethod
    def _check_images(cls, urls: list[str] | None, info: ValidationInfo) -> list[str] | None:
        return _limit_images(urls, info)

    def to_domain(self) -> VariantTemplate:
        return VariantTemplate(
            price=self.price,
            stock_quantity=self.stock_quantity,
            is_available=self.is_available,
            image_urls=tuple(dict.fromkeys(self.image_urls)),
        )


class GenerateVariantsRequest(BaseModel):
    """Request to generate variants for every combination of the picks."""

    picks: list[VariantPickSchema] = Field(
        default_factory=list, description="Attribute/value rows, may repeat attributes"
    )
    template: VariantTemplateSchema = Field(..., description="Shared variant fields")

    def domain_picks(self) -> list[VariantPick]:
        return [pick.to_domain() for pick in self.picks]


# ============================================================================
# Update Schemas
# ============================================================================


class VariantUpdateRequest(BaseModel):
    """Partial update of a single variant from the variant list."""

    price: Decimal | None = Field(default=None, ge=0, description="New unit price")
    stock_quantity: int | None = Field(default=None, ge=0, description="New stock")
    is_available: bool | None = Field(default=None, description="Availability switch")
    image_urls: list[str] | None = Field(
        default=None,
        description="Replacement image list",
    )

    @field_validator("stock_quantity", mode="before")
    @classmethod
    def _parse_stock_text(cls, value: Any) -> Any:
        return _parse_stock(value)

    @field_validator("image_urls")
    @classmethod
    def _check_images(cls, urls: list[str] | None, info: ValidationInfo) -> list[str] | None:
        return _limit_images(urls, info)

    @property
    def is_empty(self) -> bool:
        return not self.model_dump(exclude_none=True)
