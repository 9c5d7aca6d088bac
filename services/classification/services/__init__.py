"""
Classification Engine
=====================

Rule-based compliance classification primitives shared by all domains.

Components:
- CriterionSet: weighted criteria per domain
- CascadingClassifier: severity-ordered, first-match tier selection
- WeightedScorer: sum-and-clamp risk score
- ReportPolicy / ClassificationReport: per-tier lookups and the result
- ActivityProfileGenerator: template-based activity catalogue
- ComplianceAggregator: organization-level summary
- ReportEnhancer: optional LLM enhancement

Version: 0.1.0
"""

from services.classification.services.aggregator import (
    ComplianceAggregator,
    OrganizationReport,
)
from services.classification.services.cascade import (
    CascadeOutcome,
    CascadingClassifier,
    TierRule,
    Trigger,
    keyword_signal,
)
from services.classification.services.criteria import (
    Criterion,
    CriterionKind,
    CriterionSet,
)
from services.classification.services.engine import DomainEngine
from services.classification.services.enhancement import (
    ENHANCEMENT_SEPARATOR,
    LLMRecommendationSource,
    RecommendationSource,
    ReportEnhancer,
    parse_recommendations,
)
from services.classification.services.errors import (
    ClassificationError,
    CriterionConfigurationError,
    EmptyReportSetError,
    EnhancementUnavailableError,
    ProfileValidationError,
    UnknownCriterionError,
    UnknownDomainError,
)
from services.classification.services.generator import (
    ActivityProfileGenerator,
    ActivityTemplate,
    TemplateEnrichment,
    TemplateEntry,
)
from services.classification.services.report import (
    ClassificationReport,
    ReportPolicy,
    TierPolicy,
)
from services.classification.services.scoring import (
    ScaleFactor,
    ScoreBreakdown,
    WeightedScorer,
)


__all__ = [
    # Criteria
    "Criterion",
    "CriterionKind",
    "CriterionSet",
    # Cascade
    "CascadeOutcome",
    "CascadingClassifier",
    "TierRule",
    "Trigger",
    "keyword_signal",
    # Scoring
    "ScaleFactor",
    "ScoreBreakdown",
    "WeightedScorer",
    # Report
    "ClassificationReport",
    "ReportPolicy",
    "TierPolicy",
    "DomainEngine",
    # Generator
    "ActivityProfileGenerator",
    "ActivityTemplate",
    "TemplateEnrichment",
    "TemplateEntry",
    # Aggregation
    "ComplianceAggregator",
    "OrganizationReport",
    # Enhancement
    "ENHANCEMENT_SEPARATOR",
    "LLMRecommendationSource",
    "RecommendationSource",
    "ReportEnhancer",
    "parse_recommendations",
    # Errors
    "ClassificationError",
    "CriterionConfigurationError",
    "EmptyReportSetError",
    "EnhancementUnavailableError",
    "ProfileValidationError",
    "UnknownCriterionError",
    "UnknownDomainError",
]
