"""Variant generator for the admin variant editor.

Turns an administrator's attribute/value picks into one variant per
combination. Picking Color=[Red, Blue] and Size=[M] yields two variants,
Red/M and Blue/M, each created from the same price/stock/image template.

Combinations are created one at a time in a fixed order. Each creation is
an independent unit of work: a failure is recorded and the batch moves on.
"""

import itertools
from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

import structlog

from variant_engine.catalog.repository import VariantDraft, VariantRepository
from variant_engine.domain.entities import Variant
from variant_engine.domain.value_objects import Assignment, AssignmentSet

logger = structlog.get_logger()


# ============================================================================
# Inputs
# ============================================================================


@dataclass(frozen=True)
class VariantPick:
    """One row of the admin form: an attribute and a value for it.

    Either id may be missing when the administrator left a row half filled.

    Attributes:
        attribute_id: Chosen attribute.
        value_id: Chosen value of that attribute.
    """

    attribute_id: str | None
    value_id: str | None

    @property
    def is_complete(self) -> bool:
        return bool(self.attribute_id) and bool(self.value_id)


@dataclass(frozen=True)
class VariantTemplate:
    """Fields shared by every variant generated in one submission.

    Attributes:
        price: Unit price.
        stock_quantity: Initial stock.
        is_available: Initial availability switch.
        image_urls: Initial images.
    """

    price: Decimal
    stock_quantity: int = 0
    is_available: bool = True
    image_urls: tuple[str, ...] = ()

    def draft(self, product_id: str, assignments: AssignmentSet) -> VariantDraft:
        """Build a creation request for one combination."""
        return VariantDraft(
            product_id=product_id,
            price=self.price,
            assignments=assignments,
            stock_quantity=self.stock_quantity,
            is_available=self.is_available,
            image_urls=self.image_urls,
        )


# ============================================================================
# Combination helpers
# ============================================================================


def group_picks(picks: Iterable[VariantPick]) -> dict[str, list[str]]:
    """Group picks by attribute, keeping first-seen order.

    Picks missing either id are dropped. A value picked twice for the same
    attribute is kept once.

    Args:
        picks: Admin form rows in submission order.

    Returns:
        Ordered mapping of attribute id to candidate value ids.
    """
    groups: dict[str, list[str]] = {}
    for pick in picks:
        if not pick.is_complete:
            continue
        candidates = groups.setdefault(pick.attribute_id, [])
        if pick.value_id not in candidates:
            candidates.append(pick.value_id)
    return groups


def cartesian_combinations(groups: dict[str, list[str]]) -> list[AssignmentSet]:
    """Expand grouped picks into every combination.

    Combinations follow group order, with the last group varying fastest.
    No groups at all yields a single empty combination.

    Args:
        groups: Output of ``group_picks``.

    Returns:
        One assignment set per combination.
    """
    attribute_ids = list(groups)
    return [
        AssignmentSet(
            items=tuple(
                Assignment(attr_id, val_id)
                for attr_id, val_id in zip(attribute_ids, combo)
            )
        )
        for combo in itertools.product(*(groups[a] for a in attribute_ids))
    ]


# ============================================================================
# Results
# ============================================================================


class CombinationOutcome(str, Enum):
    """What happened to one combination."""

    CREATED = "created"
    ALREADY_EXISTS = "already_exists"
    FAILED = "failed"


@dataclass
class CombinationResult:
    """Outcome for a single combination.

    Attributes:
        assignments: The combination.
        outcome: Created, already existing, or failed.
        variant: The created variant, or the existing one for duplicates.
        error: The repository error, unmodified, when creation failed.
    """

    assignments: AssignmentSet
    outcome: CombinationOutcome
    variant: Variant | None = None
    error: Exception | None = None


@dataclass
class GenerationReport:
    """Summary of one generator run.

    Attributes:
        product_id: Product the variants were generated for.
        results: One entry per combination, in creation order.
    """

    product_id: str
    results: list[CombinationResult] = field(default_factory=list)

    def _count(self, outcome: CombinationOutcome) -> int:
        return sum(1 for r in self.results if r.outcome is outcome)

    @property
    def created_count(self) -> int:
        return self._count(CombinationOutcome.CREATED)

    @property
    def duplicate_count(self) -> int:
        return self._count(CombinationOutcome.ALREADY_EXISTS)

    @property
    def failed_count(self) -> int:
        return self._count(CombinationOutcome.FAILED)

    @property
    def has_failures(self) -> bool:
        return self.failed_count > 0

    @property
    def created_variants(self) -> list[Variant]:
        return [
            r.variant
            for r in self.results
            if r.outcome is CombinationOutcome.CREATED and r.variant is not None
        ]

    @property
    def errors(self) -> list[Exception]:
        return [r.error for r in self.results if r.error is not None]

    def success_message(self) -> str | None:
        """Toast text for the admin, or None when nothing was created."""
        if self.created_count == 0:
            return None
        return f"Successfully added {self.created_count} variant(s)!"


# ============================================================================
# Generator
# ============================================================================


class VariantGenerator:
    """Creates one variant per combination of picked attribute values.

    Example usage:
        generator = VariantGenerator(repository)
        report = generator.generate(
            "tee",
            [VariantPick("color", "red"), VariantPick("color", "blue")],
            VariantTemplate(price=Decimal("19.99"), stock_quantity=5),
        )
        report.created_count  # 2
    """

    def __init__(self, repository: VariantRepository) -> None:
        """Initialize generator.

        Args:
            repository: Persistence collaborator receiving creation requests.
        """
        self.repository = repository

    def generate(
        self,
        product_id: str,
        picks: Iterable[VariantPick],
        template: VariantTemplate,
    ) -> GenerationReport:
        """Create variants for every combination of the picks.

        A combination that already exists for the product is skipped and
        reported as ``ALREADY_EXISTS``. Repository errors are caught per
        combination and stored on the result.

        Args:
            product_id: Product receiving the variants.
            picks: Admin form rows.
            template: Shared price/stock/availability/images.

        Returns:
            Report with one result per combination.
        """
        combinations = cartesian_combinations(group_picks(picks))
        report = GenerationReport(product_id=product_id)

        logger.info(
            "Generating variants",
            product_id=product_id,
            combination_count=len(combinations),
        )

        for assignments in combinations:
            report.results.append(self._create_one(product_id, assignments, template))

        logger.info(
            "Variant generation finished",
            product_id=product_id,
            created=report.created_count,
            already_existing=report.duplicate_count,
            failed=report.failed_count,
        )
        return report

    def _create_one(
        self,
        product_id: str,
        assignments: AssignmentSet,
        template: VariantTemplate,
    ) -> CombinationResult:
        try:
            existing = self.repository.find_by_assignments(product_id, assignments)
            if existing is not None:
                logger.warning(
                    "Variant combination already exists",
                    product_id=product_id,
                    variant_id=existing.id,
                    assignments=assignments.as_dict(),
                )
                return CombinationResult(
                    assignments=assignments,
                    outcome=CombinationOutcome.ALREADY_EXISTS,
                    variant=existing,
                )

            variant = self.repository.create_variant(
                template.draft(product_id, assignments)
            )
        except Exception as e:
            logger.error(
                "Failed to create variant",
                product_id=product_id,
                assignments=assignments.as_dict(),
                error=str(e),
            )
            return CombinationResult(
                assignments=assignments,
                outcome=CombinationOutcome.FAILED,
                error=e,
            )

        return CombinationResult(
            assignments=assignments,
            outcome=CombinationOutcome.CREATED,
            variant=variant,
        )
