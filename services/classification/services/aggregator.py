"""
Compliance Aggregator
=====================

Rolls independent classification reports into one organization-level
summary.

- Overall score: weighted average of report scores using per-domain
  weights (data protection 60%, AI 40% by default), normalized by the
  weights actually present
- Critical issues: de-duplicated labels of the criteria that put a
  report into a critical tier
- Priority actions: top actions ranked by severity-weighted trigger count

Version: 0.1.0
"""

from collections import Counter
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from services.classification.services.engine import DomainEngine
from services.classification.services.enhancement import ENHANCEMENT_SEPARATOR
from services.classification.services.errors import (
    CriterionConfigurationError,
    EmptyReportSetError,
    UnknownDomainError,
)
from services.classification.services.report import ClassificationReport
from services.classification.services.scoring import SCORE_PRECISION
from shared.logging import get_logger


logger = get_logger(__name__)


@dataclass(frozen=True)
class OrganizationReport:
    """Organization-level compliance summary."""

    overall_score: float
    report_count: int
    domain_scores: dict[str, float] = field(default_factory=dict)
    tier_counts: dict[str, int] = field(default_factory=dict)
    critical_issues: tuple[str, ...] = ()
    priority_actions: tuple[str, ...] = ()


class ComplianceAggregator:
    """
    Combines N classification reports.

    Example:
        >>> aggregator = ComplianceAggregator(engines, {"activity": 0.6, "ai-system": 0.4})
        >>> summary = aggregator.aggregate([activity_report, ai_report])
        >>> summary.overall_score
    """

    def __init__(
        self,
        engines: Mapping[str, DomainEngine],
        domain_weights: Mapping[str, float],
        priority_cap: int = 10,
        top_actions: int = 3,
    ) -> None:
        """
        Initialize the aggregator.

        Args:
            engines: Domain key -> engine (criteria and critical tiers)
            domain_weights: Domain key -> weight, must cover every engine
            priority_cap: Upper bound on one report's action priority
            top_actions: Number of actions in the priority list
        """
        missing = [domain for domain in engines if domain not in domain_weights]
        if missing:
            raise CriterionConfigurationError(f"No aggregation weight for domains: {missing}")
        if any(weight <= 0 for weight in domain_weights.values()):
            raise CriterionConfigurationError("Aggregation weights must be positive")

        self.engines = dict(engines)
        self.domain_weights = dict(domain_weights)
        self.priority_cap = priority_cap
        self.top_actions = top_actions

    def _engine(self, report: ClassificationReport) -> DomainEngine:
        try:
            return self.engines[report.domain]
        except KeyError:
            raise UnknownDomainError(report.domain) from None

    def _priority(self, report: ClassificationReport) -> int:
        """Severity-weighted trigger count, capped."""
        criteria = self._engine(report).criteria
        total = sum(criteria.get(key).kind.severity for key in report.triggered_criteria)
        return min(total, self.priority_cap)

    def aggregate(self, reports: Sequence[ClassificationReport]) -> OrganizationReport:
        """
        Aggregate reports into an organization summary.

        Args:
            reports: Classification reports from any registered domains

        Returns:
            OrganizationReport

        Raises:
            EmptyReportSetError: If no reports are given
            UnknownDomainError: If a report's domain is not registered
        """
        if not reports:
            raise EmptyReportSetError("Cannot aggregate an empty report set")

        weighted_sum = 0.0
        weight_total = 0.0
        per_domain: dict[str, list[float]] = {}
        tier_counts: Counter[str] = Counter()
        critical: dict[str, None] = {}
        action_priority: dict[str, int] = {}

        for report in reports:
            engine = self._engine(report)
            weight = self.domain_weights[report.domain]

            weighted_sum += report.score * weight
            weight_total += weight
            per_domain.setdefault(report.domain, []).append(report.score)
            tier_counts[f"{report.domain}:{report.tier.value}"] += 1

            if engine.is_critical(report.tier):
                for key in report.triggered_criteria:
                    critical.setdefault(engine.criteria.label_of(key), None)

            priority = self._priority(report)
            for action in report.recommended_actions:
                if action == ENHANCEMENT_SEPARATOR:
                    continue
                action_priority[action] = action_priority.get(action, 0) + priority

        # sorted() is stable, so ties keep first-appearance order
        ranked = sorted(action_priority.items(), key=lambda item: item[1], reverse=True)
        priority_actions = tuple(action for action, _ in ranked[: self.top_actions])

        overall = round(weighted_sum / weight_total, SCORE_PRECISION)

        logger.info(
            "reports_aggregated",
            report_count=len(reports),
            overall_score=overall,
            critical_issues=len(critical),
        )

        return OrganizationReport(
            overall_score=overall,
            report_count=len(reports),
            domain_scores={
                domain: round(sum(scores) / len(scores), SCORE_PRECISION)
                for domain, scores in per_domain.items()
            },
            tier_counts=dict(tier_counts),
            critical_issues=tuple(critical),
            priority_actions=priority_actions,
        )
