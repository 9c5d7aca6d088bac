"""
Domain Engine
=============

Composition of criterion set, cascade, scorer and report policy for a
single classification domain.

Control flow:
    profile -> flags -> cascade (tier) -> scorer (score) -> report policy

Version: 0.1.0
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

from services.classification.services.cascade import CascadingClassifier
from services.classification.services.criteria import CriterionSet
from services.classification.services.report import ClassificationReport, ReportPolicy
from services.classification.services.scoring import WeightedScorer
from shared.logging import get_logger


logger = get_logger(__name__)


class ClassifiableProfile(Protocol):
    """What the engine needs from a domain profile."""

    @property
    def subject(self) -> str: ...

    def flags(self) -> Mapping[str, bool]: ...

    def scale_values(self) -> Mapping[str, float]: ...


@dataclass(frozen=True)
class DomainEngine:
    """Stateless classifier for one domain."""

    domain: str
    criteria: CriterionSet
    classifier: CascadingClassifier[Any]
    scorer: WeightedScorer
    policy: ReportPolicy
    critical_tiers: frozenset[Enum] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        # Criterion actions must reference configured criteria
        for key in self.policy.criterion_actions:
            self.criteria.get(key)

    def classify(self, profile: ClassifiableProfile) -> ClassificationReport:
        """
        Classify a validated profile.

        Args:
            profile: Domain profile

        Returns:
            ClassificationReport with tier, score and recommendations
        """
        flags = profile.flags()
        outcome = self.classifier.classify(flags)
        score = self.scorer.score(flags, profile.scale_values(), outcome.tier)

        report = self.policy.build(
            domain=self.domain,
            outcome=outcome,
            score=score,
            flags=flags,
            subject=profile.subject,
        )

        logger.info(
            "profile_classified",
            domain=self.domain,
            subject=profile.subject,
            tier=outcome.tier.value,
            score=score,
            triggered=list(outcome.triggered),
        )

        return report

    def is_critical(self, tier: Enum) -> bool:
        return tier in self.critical_tiers
