"""
Activity Profile Generator
==========================

Derives the processing activities of an organization by composing
pre-authored activity templates.

Selection:
- Base templates are always included
- Further templates are added by guard conditions on the organization
  (industry keyword, size thresholds, technology and compliance flags)

Each selected template is enriched with a risk level and a review flag
using the same cascade and scorer primitives as profile classification,
applied per template. Output is de-duplicated by name and sorted by name.

Version: 0.1.0
"""

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Generic, TypeVar

from services.classification.services.cascade import CascadingClassifier
from services.classification.services.scoring import WeightedScorer
from shared.logging import get_logger


logger = get_logger(__name__)

OrgT = TypeVar("OrgT")


@dataclass(frozen=True)
class ActivityTemplate:
    """Art. 30 processing record bundle."""

    name: str
    purpose: str
    legal_basis: str
    data_categories: tuple[str, ...]
    data_subject_categories: tuple[str, ...]
    recipients: tuple[str, ...]
    retention_period: str
    technical_measures: tuple[str, ...]
    organizational_measures: tuple[str, ...]

    # Template risk flags
    third_country_transfer: bool = False
    involves_ai: bool = False
    automated_decisions: bool = False
    systematic_monitoring: bool = False
    special_categories: bool = False

    comments: str | None = None

    # Set by enrichment
    risk_level: Enum | None = None
    review_required: bool = False

    def flags(self) -> dict[str, bool]:
        return {
            "third_country_transfer": self.third_country_transfer,
            "involves_ai": self.involves_ai,
            "automated_decisions": self.automated_decisions,
            "systematic_monitoring": self.systematic_monitoring,
            "special_categories": self.special_categories,
        }


@dataclass(frozen=True)
class TemplateEntry(Generic[OrgT]):
    """Catalogue entry: guard plus template factory."""

    guard: Callable[[OrgT], bool]
    build: Callable[[OrgT], ActivityTemplate]


@dataclass(frozen=True)
class TemplateEnrichment:
    """Primitives and threshold used to enrich templates."""

    classifier: CascadingClassifier[Any]
    scorer: WeightedScorer
    review_threshold: float
    review_tiers: frozenset[Enum] = field(default_factory=frozenset)

    def apply(self, template: ActivityTemplate) -> ActivityTemplate:
        flags = template.flags()
        outcome = self.classifier.classify(flags)
        score = self.scorer.score(flags, {}, outcome.tier)
        return replace(
            template,
            risk_level=outcome.tier,
            review_required=score >= self.review_threshold or outcome.tier in self.review_tiers,
        )


class ActivityProfileGenerator(Generic[OrgT]):
    """
    Template-based activity catalogue generator.

    Example:
        >>> generator = ActivityProfileGenerator(CATALOGUE, TEMPLATE_ENRICHMENT)
        >>> activities = generator.generate(organization)
    """

    def __init__(
        self,
        catalogue: Sequence[TemplateEntry[OrgT]],
        enrichment: TemplateEnrichment,
    ) -> None:
        self.catalogue = tuple(catalogue)
        self.enrichment = enrichment

    def select(self, organization: OrgT) -> list[ActivityTemplate]:
        """Templates whose guard holds, de-duplicated by name, sorted by name."""
        selected: dict[str, ActivityTemplate] = {}
        for entry in self.catalogue:
            if entry.guard(organization):
                template = entry.build(organization)
                selected.setdefault(template.name, template)
        return [selected[name] for name in sorted(selected)]

    def generate(self, organization: OrgT) -> list[ActivityTemplate]:
        """
        Select and enrich the activity templates for an organization.

        Args:
            organization: Organization profile

        Returns:
            Enriched templates ordered by name
        """
        activities = [self.enrichment.apply(t) for t in self.select(organization)]

        logger.info(
            "activities_generated",
            count=len(activities),
            review_required=sum(1 for a in activities if a.review_required),
        )

        return activities


def summarize_risk_levels(activities: Sequence[ActivityTemplate]) -> Mapping[str, int]:
    """Count activities per enriched risk level."""
    counts: dict[str, int] = {}
    for activity in activities:
        if activity.risk_level is not None:
            key = activity.risk_level.value
            counts[key] = counts.get(key, 0) + 1
    return counts
