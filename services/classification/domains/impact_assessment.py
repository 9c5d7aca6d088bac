"""
Impact Assessment Domain
========================

Decides whether a processing operation requires a data protection impact
assessment (GDPR Art. 35) and scores its residual risk.

The tier follows qualitative combinations of criteria (Art. 35(3) and
the supervisory authorities' "two or more criteria" rule). The score is
computed independently and is a softer indicator.

Version: 0.1.0
"""

from collections.abc import Mapping
from enum import Enum

from services.classification.domains.ai_system import POLICY as AI_POLICY
from services.classification.domains.ai_system import AIRiskTier
from services.classification.models.impact_assessment import ImpactAssessmentProfile
from services.classification.services.cascade import (
    CascadingClassifier,
    TierRule,
    Trigger,
    keyword_signal,
)
from services.classification.services.criteria import Criterion, CriterionKind, CriterionSet
from services.classification.services.engine import DomainEngine
from services.classification.services.report import (
    ClassificationReport,
    ReportPolicy,
    TierPolicy,
)
from services.classification.services.scoring import ScaleFactor, WeightedScorer


DOMAIN = "impact-assessment"


class ImpactAssessmentTier(str, Enum):
    """Whether a DPIA is mandatory, most severe first."""

    REQUIRED = "required"
    NOT_REQUIRED = "not_required"


CRITERIA = CriterionSet(
    DOMAIN,
    [
        Criterion("special_categories", 0.3, CriterionKind.HIGH, "Special categories of personal data (Art. 9)"),
        Criterion("automated_decision_making", 0.25, CriterionKind.HIGH, "Automated decision making with legal effect"),
        Criterion("vulnerable_groups", 0.25, CriterionKind.HIGH, "Vulnerable data subjects"),
        Criterion("systematic_monitoring", 0.2, CriterionKind.HIGH, "Systematic monitoring"),
        Criterion("prevents_rights_exercise", 0.2, CriterionKind.HIGH, "Prevents data subjects from exercising rights"),
        Criterion("large_scale", 0.15, CriterionKind.SCALE, "Large-scale processing"),
        Criterion("innovative_technology", 0.15, CriterionKind.LIMITED, "Innovative technology"),
        Criterion("data_matching", 0.1, CriterionKind.LIMITED, "Matching or combining datasets"),
        Criterion("third_country_transfer", 0.1, CriterionKind.LIMITED, "Transfer to third countries"),
        Criterion("ai_processing", 0.1, CriterionKind.LIMITED, "AI-based processing"),
    ],
)

# Criteria listed by supervisory authorities; two or more usually require a DPIA
SUPERVISORY_CRITERIA = (
    "special_categories",
    "automated_decision_making",
    "systematic_monitoring",
    "vulnerable_groups",
    "large_scale",
    "data_matching",
    "innovative_technology",
    "prevents_rights_exercise",
)

RULES: tuple[TierRule[ImpactAssessmentTier], ...] = (
    TierRule(
        ImpactAssessmentTier.REQUIRED,
        (
            Trigger(
                all_of=("special_categories",),
                any_of=("systematic_monitoring", "automated_decision_making"),
                name="sensitive_profiling",
            ),
            Trigger(
                all_of=("vulnerable_groups", "automated_decision_making"),
                name="vulnerable_subjects",
            ),
            Trigger(
                all_of=("ai_processing",),
                any_of=("automated_decision_making", "systematic_monitoring"),
                name="ai_decisions",
            ),
            Trigger(any_of=SUPERVISORY_CRITERIA, min_any=2, name="two_or_more_criteria"),
        ),
    ),
)

SCALE_FACTORS = (
    ScaleFactor("data_subjects", 100_000, 0.1, "more_than_100k_subjects"),
    ScaleFactor("duration_months", 60, 0.05, "longer_than_5_years"),
)

POLICY = ReportPolicy(
    tiers={
        ImpactAssessmentTier.REQUIRED: TierPolicy(
            review_months=6,
            effort_days=10,
            actions=(
                "Carry out a data protection impact assessment before processing starts (Art. 35)",
                "Involve the data protection officer (Art. 35(2))",
                "Consult the supervisory authority if high residual risk remains (Art. 36)",
                "Apply privacy by design and by default (Art. 25)",
                "Minimise data before every processing step",
            ),
        ),
        ImpactAssessmentTier.NOT_REQUIRED: TierPolicy(
            review_months=12,
            effort_days=2,
            actions=(
                "Document why no impact assessment is required",
                "Apply privacy by design and by default (Art. 25)",
                "Ensure transparent information of data subjects (Art. 13, 14)",
            ),
        ),
    },
    criterion_actions={
        "special_categories": (
            "Establish explicit consent or another Art. 9(2) exemption for special categories",
            "Strengthen technical and organisational measures for sensitive data",
        ),
        "automated_decision_making": (
            "Implement human review and intervention for automated decisions",
            "Monitor models for algorithmic bias and audit them regularly",
        ),
        "systematic_monitoring": (
            "Verify necessity and proportionality of the monitoring",
            "Offer data subjects an opt-out where possible",
        ),
        "vulnerable_groups": (
            "Implement specific safeguards for vulnerable groups",
            "Add age verification and consent management for minors",
        ),
        "third_country_transfer": (
            "Use standard contractual clauses with supplementary measures",
            "Carry out a transfer impact assessment",
        ),
        "innovative_technology": (
            "Run a pilot phase with a limited dataset",
        ),
        "ai_processing": (
            "Classify the AI system under the EU AI Act",
            "Use explainable models for decisions affecting individuals",
        ),
    },
)


# =============================================================================
# Derived Obligations
# =============================================================================

# Residual score from which the supervisory authority must be consulted (Art. 36)
AUTHORITY_CONSULTATION_SCORE = 0.9
REASSESSMENT_SCORE = 0.5

# Purposes that usually rest on Art. 6(1)(f) and need a documented balancing test
LEGITIMATE_INTEREST_KEYWORDS = (
    "legitimate interest",
    "berechtigtes interesse",
    "marketing",
    "analys",
    "analyt",
)


def authority_consultation_required(score: float, flags: Mapping[str, bool]) -> bool:
    """Prior consultation under Art. 36 for high residual risk."""
    return (
        score >= AUTHORITY_CONSULTATION_SCORE
        or (flags["special_categories"] and flags["systematic_monitoring"])
        or (flags["vulnerable_groups"] and flags["automated_decision_making"])
    )


def balance_of_interests_required(profile: ImpactAssessmentProfile) -> bool:
    """Whether any purpose suggests legitimate interest as the legal basis."""
    return any(keyword_signal(purpose, LEGITIMATE_INTEREST_KEYWORDS) for purpose in profile.purposes)


def reassessment_recommended(score: float, profile: ImpactAssessmentProfile) -> bool:
    return score >= REASSESSMENT_SCORE or profile.innovative_technology or profile.uses_ai


def estimate_ai_act_tier(profile: ImpactAssessmentProfile) -> AIRiskTier | None:
    """
    Rough EU AI Act tier for the AI part of a processing operation.

    This is an estimate from the DPIA flags only. A full classification
    needs an AI system profile.

    Returns:
        Estimated tier, or None when no AI technology is involved
    """
    if not profile.uses_ai:
        return None
    if profile.special_categories or profile.vulnerable_groups:
        return AIRiskTier.HIGH
    if profile.automated_decision_making and profile.systematic_monitoring:
        return AIRiskTier.HIGH
    if profile.automated_decision_making or profile.systematic_monitoring:
        return AIRiskTier.LIMITED
    return AIRiskTier.MINIMAL


ENGINE = DomainEngine(
    domain=DOMAIN,
    criteria=CRITERIA,
    classifier=CascadingClassifier(CRITERIA, RULES, fallback=ImpactAssessmentTier.NOT_REQUIRED),
    scorer=WeightedScorer(CRITERIA, SCALE_FACTORS),
    policy=POLICY,
    critical_tiers=frozenset({ImpactAssessmentTier.REQUIRED}),
)


def classify_impact_assessment(profile: ImpactAssessmentProfile) -> ClassificationReport:
    """
    Decide whether a DPIA is required for a processing operation.

    Args:
        profile: Validated processing profile

    Returns:
        ClassificationReport with consultation, balancing, reassessment and
        the embedded AI Act estimate in `details`
    """
    report = ENGINE.classify(profile)
    flags = profile.flags()

    ai_tier = estimate_ai_act_tier(profile) if profile.include_ai_act_assessment else None
    ai_measures = AI_POLICY.for_tier(ai_tier).actions if ai_tier is not None else ()

    return report.with_details(
        authority_consultation_required=authority_consultation_required(report.score, flags),
        balance_of_interests_required=balance_of_interests_required(profile),
        reassessment_recommended=reassessment_recommended(report.score, profile),
        ai_act_assessment_performed=ai_tier is not None,
        ai_act_tier_estimate=ai_tier.value if ai_tier is not None else None,
        ai_act_measures=ai_measures,
    )


DEMO_PROFILES = {
    "default": ImpactAssessmentProfile(
        processing_name="AI-based customer segmentation",
        processing_description=(
            "Automated analysis of customer data for segmentation in personalised "
            "marketing campaigns using machine learning algorithms"
        ),
        data_types=("Customer data", "Purchase behaviour", "Demographic data", "Preferences"),
        purposes=("Marketing optimisation", "Personalisation", "Customer analysis"),
        technologies=("Machine Learning", "Data analytics", "CRM system"),
        data_subjects=("Customers", "Prospects", "Website visitors"),
        automated_decision_making=True,
        large_scale=True,
        data_matching=True,
        innovative_technology=True,
        estimated_data_subjects=50_000,
        processing_duration_months=12,
        demo_mode=True,
    ),
    "minimal": ImpactAssessmentProfile(
        processing_name="Test processing",
        processing_description="Minimal check without risk indicators",
        data_types=("Customer data",),
        purposes=("Testing",),
        technologies=("Standard software",),
        data_subjects=("Customers",),
        estimated_data_subjects=100,
        demo_mode=True,
    ),
    "high-risk": ImpactAssessmentProfile(
        processing_name="Biometric employee monitoring",
        processing_description="Face recognition for access control and time tracking",
        data_types=("Biometric data", "Working time data", "Location data"),
        purposes=("Access control", "Time tracking", "Security monitoring"),
        technologies=("Face recognition", "AI algorithm", "Surveillance cameras"),
        data_subjects=("Employees", "Visitors"),
        special_categories=True,
        systematic_monitoring=True,
        automated_decision_making=True,
        large_scale=True,
        innovative_technology=True,
        estimated_data_subjects=500,
        processing_duration_months=60,
        demo_mode=True,
    ),
}
