"""
Classification Report
=====================

Immutable result of one classification plus the per-domain policy table
used to assemble it.

Nothing in this module recomputes tier or score. It combines the cascade
outcome and the score with static lookups keyed by tier.

Version: 0.1.0
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any

from services.classification.services.cascade import CascadeOutcome
from services.classification.services.errors import CriterionConfigurationError


def _unique(items: Iterable[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(items))


@dataclass(frozen=True)
class ClassificationReport:
    """Tier, score and explanation for one classified profile."""

    domain: str
    tier: Enum
    score: float
    triggered_criteria: tuple[str, ...]
    recommended_actions: tuple[str, ...]
    next_review_interval_months: int
    estimated_effort_days: int
    subject: str = ""
    # Domain-specific values derived from tier and flags
    details: Mapping[str, Any] = field(default_factory=dict)

    def with_recommendations(self, recommendations: Iterable[str]) -> "ClassificationReport":
        """
        Return a copy with a replaced recommendation list.

        Tier, score and triggered criteria are carried over unchanged.
        """
        return replace(self, recommended_actions=tuple(recommendations))

    def with_details(self, **details: Any) -> "ClassificationReport":
        """Return a copy with extra derived values merged into `details`."""
        return replace(self, details={**self.details, **details})

    def to_dict(self) -> dict[str, Any]:
        return {
            "domain": self.domain,
            "subject": self.subject,
            "tier": self.tier.value,
            "score": self.score,
            "triggered_criteria": list(self.triggered_criteria),
            "recommended_actions": list(self.recommended_actions),
            "next_review_interval_months": self.next_review_interval_months,
            "estimated_effort_days": self.estimated_effort_days,
            "details": dict(self.details),
        }


@dataclass(frozen=True)
class TierPolicy:
    """Everything that is looked up by tier."""

    review_months: int
    effort_days: int
    actions: tuple[str, ...]


@dataclass(frozen=True)
class ReportPolicy:
    """
    Consolidated lookup tables for one domain.

    Attributes:
        tiers: Tier -> review interval, effort estimate and base actions
        criterion_actions: Criterion key -> actions appended when that flag is true
    """

    tiers: Mapping[Enum, TierPolicy]
    criterion_actions: Mapping[str, tuple[str, ...]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.tiers:
            raise CriterionConfigurationError("Report policy has no tiers")
        tier_type = type(next(iter(self.tiers)))
        missing = [tier.value for tier in tier_type if tier not in self.tiers]
        if missing:
            raise CriterionConfigurationError(f"Report policy missing tiers: {missing}")
        object.__setattr__(self, "tiers", MappingProxyType(dict(self.tiers)))
        object.__setattr__(
            self, "criterion_actions", MappingProxyType(dict(self.criterion_actions))
        )

    def for_tier(self, tier: Enum) -> TierPolicy:
        return self.tiers[tier]

    def build(
        self,
        domain: str,
        outcome: CascadeOutcome[Any],
        score: float,
        flags: Mapping[str, bool],
        subject: str = "",
    ) -> ClassificationReport:
        """
        Assemble a report from already computed values.

        Args:
            domain: Domain key
            outcome: Cascade outcome (tier and triggered keys)
            score: Score from the weighted scorer
            flags: Profile flags, used to select criterion-specific actions
            subject: Name of the classified activity or system

        Returns:
            ClassificationReport
        """
        policy = self.for_tier(outcome.tier)

        actions = list(policy.actions)
        for key, extra in self.criterion_actions.items():
            if flags.get(key):
                actions.extend(extra)

        return ClassificationReport(
            domain=domain,
            tier=outcome.tier,
            score=score,
            triggered_criteria=outcome.triggered,
            recommended_actions=_unique(actions),
            next_review_interval_months=policy.review_months,
            estimated_effort_days=policy.effort_days,
            subject=subject,
        )
