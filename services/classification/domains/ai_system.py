"""
AI System Domain
================

EU AI Act risk tiering.

Tiers (most severe first):
- UNACCEPTABLE: prohibited practices (Art. 5)
- HIGH: Annex III areas and safety components (Art. 6)
- LIMITED: transparency obligations (Art. 50)
- MINIMAL: everything else

Version: 0.1.0
"""

import re
from collections.abc import Mapping
from dataclasses import replace
from enum import Enum

from services.classification.models.ai_system import AISystemProfile
from services.classification.services.cascade import CascadingClassifier, TierRule, Trigger
from services.classification.services.criteria import Criterion, CriterionKind, CriterionSet
from services.classification.services.engine import DomainEngine
from services.classification.services.report import (
    ClassificationReport,
    ReportPolicy,
    TierPolicy,
)
from services.classification.services.scoring import ScaleFactor, WeightedScorer


DOMAIN = "ai-system"


class AIRiskTier(str, Enum):
    """EU AI Act risk tiers, most severe first."""

    UNACCEPTABLE = "unacceptable"
    HIGH = "high"
    LIMITED = "limited"
    MINIMAL = "minimal"


# =============================================================================
# Criteria
# =============================================================================

CRITERIA = CriterionSet(
    DOMAIN,
    [
        # Weak signals derived from free text
        Criterion("manipulative_techniques", 0.1, CriterionKind.PROHIBITS, "Subliminal or manipulative techniques"),
        Criterion("social_scoring", 0.1, CriterionKind.PROHIBITS, "Social scoring"),
        Criterion("synthetic_content", 0.1, CriterionKind.LIMITED, "Generated or manipulated content"),
        # Biometrics
        Criterion("biometric_data", 0.3, CriterionKind.HIGH, "Biometric identification"),
        Criterion("emotion_recognition", 0.3, CriterionKind.HIGH, "Emotion recognition or biometric categorisation"),
        # Annex III areas
        Criterion("critical_infrastructure", 0.3, CriterionKind.HIGH, "Critical infrastructure"),
        Criterion("automated_decision_making", 0.2, CriterionKind.HIGH, "Automated decision making"),
        Criterion("employment_context", 0.2, CriterionKind.HIGH, "Employment and worker management"),
        Criterion("essential_services", 0.2, CriterionKind.HIGH, "Access to essential services"),
        Criterion("law_enforcement", 0.2, CriterionKind.HIGH, "Law enforcement"),
        Criterion("justice_and_democracy", 0.2, CriterionKind.HIGH, "Administration of justice and democratic processes"),
        Criterion("migration_asylum_border", 0.2, CriterionKind.HIGH, "Migration, asylum and border control"),
        Criterion("safety_components", 0.2, CriterionKind.HIGH, "Safety component of a regulated product"),
        Criterion("education_context", 0.1, CriterionKind.HIGH, "Education and vocational training"),
        Criterion("credit_scoring", 0.1, CriterionKind.HIGH, "Creditworthiness assessment"),
        Criterion("insurance_risk_assessment", 0.1, CriterionKind.HIGH, "Life and health insurance pricing"),
        Criterion("emergency_services", 0.1, CriterionKind.HIGH, "Emergency call triage and dispatch"),
        Criterion("minors_data", 0.1, CriterionKind.HIGH, "Data of minors"),
        # Transparency and scale
        Criterion("user_interaction", 0.1, CriterionKind.LIMITED, "Direct interaction with natural persons"),
        Criterion("public_spaces", 0.1, CriterionKind.SCALE, "Use in publicly accessible spaces"),
        Criterion("large_scale", 0.1, CriterionKind.SCALE, "Large-scale deployment"),
    ],
)


# =============================================================================
# Cascade
# =============================================================================

RULES: tuple[TierRule[AIRiskTier], ...] = (
    TierRule(
        AIRiskTier.UNACCEPTABLE,
        (
            Trigger(all_of=("manipulative_techniques",), name="subliminal_techniques"),
            Trigger(
                all_of=("minors_data",),
                any_of=("emotion_recognition", "biometric_data"),
                name="exploitation_of_minors",
            ),
            Trigger(
                all_of=("social_scoring",),
                any_of=("justice_and_democracy", "essential_services"),
                name="social_scoring",
            ),
            Trigger(
                all_of=("biometric_data", "law_enforcement", "public_spaces"),
                name="realtime_remote_biometric_identification",
            ),
        ),
    ),
    TierRule(
        AIRiskTier.HIGH,
        (
            Trigger(any_of=("biometric_data", "emotion_recognition"), name="biometrics"),
            Trigger(all_of=("critical_infrastructure",), name="critical_infrastructure"),
            Trigger(all_of=("education_context", "automated_decision_making"), name="education"),
            Trigger(all_of=("employment_context", "automated_decision_making"), name="employment"),
            Trigger(
                all_of=("essential_services",),
                any_of=("credit_scoring", "insurance_risk_assessment", "emergency_services"),
                name="essential_services",
            ),
            Trigger(
                all_of=("law_enforcement", "biometric_data"),
                none_of=("public_spaces",),
                name="law_enforcement",
            ),
            Trigger(
                all_of=("migration_asylum_border",),
                any_of=("biometric_data", "automated_decision_making"),
                name="migration",
            ),
            Trigger(all_of=("justice_and_democracy", "automated_decision_making"), name="justice"),
            Trigger(all_of=("safety_components",), name="safety_components"),
        ),
    ),
    TierRule(
        AIRiskTier.LIMITED,
        (
            Trigger(all_of=("user_interaction",), name="user_interaction"),
            Trigger(all_of=("synthetic_content",), name="synthetic_content"),
        ),
    ),
)

SCALE_FACTORS = (
    ScaleFactor("affected_persons", 100_000, 0.1, "more_than_100k_persons"),
    ScaleFactor("affected_persons", 1_000_000, 0.1, "more_than_1m_persons"),
)


# =============================================================================
# Report Policy
# =============================================================================

POLICY = ReportPolicy(
    tiers={
        AIRiskTier.UNACCEPTABLE: TierPolicy(
            review_months=3,
            effort_days=90,
            actions=(
                "Do not place the system on the market or put it into service (Art. 5)",
                "Stop all development work on the prohibited functionality",
                "Develop alternative, compliant approaches",
                "Obtain legal advice on permissible alternatives",
            ),
        ),
        AIRiskTier.HIGH: TierPolicy(
            review_months=6,
            effort_days=45,
            actions=(
                "Complete a conformity assessment before placing on the market",
                "Affix CE marking after successful conformity assessment",
                "Prepare technical documentation (Annex IV)",
                "Implement a risk management system (Art. 9)",
                "Ensure effective human oversight (Art. 14)",
                "Establish post-market monitoring and serious incident reporting",
            ),
        ),
        AIRiskTier.LIMITED: TierPolicy(
            review_months=12,
            effort_days=10,
            actions=(
                "Fulfil transparency obligations (Art. 50)",
                "Inform users that they are interacting with an AI system",
                "Make automated decisions recognisable to affected persons",
            ),
        ),
        AIRiskTier.MINIMAL: TierPolicy(
            review_months=24,
            effort_days=2,
            actions=(
                "No specific EU AI Act obligations apply",
                "Consider voluntary codes of conduct",
                "Follow best practices for responsible AI",
            ),
        ),
    },
    criterion_actions={
        "biometric_data": (
            "Carry out a data protection impact assessment for biometric processing (Art. 35 GDPR)",
        ),
        "emotion_recognition": (
            "Inform affected persons explicitly about emotion recognition and offer an opt-out",
        ),
        "automated_decision_making": (
            "Provide human review of automated decisions (Art. 22 GDPR)",
        ),
        "employment_context": (
            "Involve the works council before deployment in the workplace",
        ),
        "minors_data": (
            "Apply enhanced safeguards for the data of minors",
        ),
        "critical_infrastructure": (
            "Align the system with critical infrastructure security requirements",
        ),
    },
)

GERMAN_STANDARDS_ACTIONS = (
    "Follow the federal data protection commissioner's guidance on AI systems",
    "Coordinate with the competent German supervisory authority",
)


# =============================================================================
# Derived Obligations
# =============================================================================


def _category(name: str, *weights: tuple[str, float]) -> WeightedScorer:
    """Scorer over a subset of the domain criteria with category weights."""
    return WeightedScorer(
        CriterionSet(
            f"{DOMAIN}/{name}",
            [replace(CRITERIA.get(key), weight=weight) for key, weight in weights],
        )
    )


CATEGORY_SCORERS = {
    "biometric": _category(
        "biometric",
        ("biometric_data", 0.5),
        ("emotion_recognition", 0.4),
        ("public_spaces", 0.3),
    ),
    "automation": _category(
        "automation",
        ("automated_decision_making", 0.4),
        ("employment_context", 0.3),
        ("essential_services", 0.3),
    ),
    "transparency": _category(
        "transparency",
        ("user_interaction", 0.3),
        ("automated_decision_making", 0.2),
        ("large_scale", 0.1),
    ),
    "discrimination": _category(
        "discrimination",
        ("employment_context", 0.3),
        ("education_context", 0.3),
        ("essential_services", 0.2),
        ("automated_decision_making", 0.2),
    ),
    "infrastructure": _category(
        "infrastructure",
        ("critical_infrastructure", 0.5),
        ("emergency_services", 0.4),
        ("safety_components", 0.3),
    ),
}

TIER_ARTICLES = {
    AIRiskTier.UNACCEPTABLE: ("Art. 5 - Prohibited AI practices",),
    AIRiskTier.HIGH: (
        "Art. 6 - Classification rules for high-risk AI systems",
        "Art. 9-15 - Requirements for high-risk AI systems",
        "Art. 14 - Human oversight",
        "Art. 17 - Quality management system",
        "Art. 43 - Conformity assessment",
        "Art. 48 - CE marking",
        "Art. 72 - Post-market monitoring",
        "Annex III - High-risk areas",
    ),
    AIRiskTier.LIMITED: ("Art. 50 - Transparency obligations",),
    AIRiskTier.MINIMAL: ("Art. 95 - Voluntary codes of conduct",),
}

CRITERION_ARTICLES = {
    "emotion_recognition": "Art. 50(3) - Informing persons exposed to emotion recognition",
    "synthetic_content": "Art. 50(2) - Marking of synthetic content",
    "safety_components": "Annex I - Union harmonisation legislation",
}

# Application domain keyword prefixes and the notes they add, first match wins
INDUSTRY_NOTES: tuple[tuple[tuple[str, ...], tuple[str, ...]], ...] = (
    (
        ("commerce", "retail"),
        (
            "E-commerce: watch for unfair commercial practices",
            "Consumer protection: be transparent about price differentiation",
            "Marketing: respect the limits of behavioural targeting",
        ),
    ),
    (
        ("health", "medical", "gesundheit"),
        (
            "Healthcare: check the Medical Device Regulation",
            "Patient safety: heightened duty of care",
            "Data protection: special categories under Art. 9 GDPR",
        ),
    ),
    (
        ("financ", "bank", "credit", "finanz"),
        (
            "Finance: BaFin supervision and MaRisk apply",
            "Credit scoring: ensure transparency and fairness",
            "Anti-discrimination: check compliance with the AGG",
        ),
    ),
    (
        ("human resources", "hr", "recruit", "personnel"),
        (
            "Employment law: works council co-determination under the BetrVG",
            "Recruiting: selection procedures must comply with the AGG",
            "Monitoring: a proportionality assessment is mandatory",
        ),
    ),
)

DEFAULT_INDUSTRY_NOTES = (
    "Check sector-specific compliance requirements",
    "Consult the competent sector supervisory authorities",
)


def _matches_domain(application_domain: str, prefixes: tuple[str, ...]) -> bool:
    lowered = application_domain.lower()
    return any(re.search(rf"\b{re.escape(prefix)}", lowered) for prefix in prefixes)


def industry_notes(application_domain: str) -> tuple[str, ...]:
    """Sector notes for the application domain of an AI system."""
    for prefixes, notes in INDUSTRY_NOTES:
        if _matches_domain(application_domain, prefixes):
            return notes
    return DEFAULT_INDUSTRY_NOTES


def category_scores(flags: Mapping[str, bool]) -> dict[str, float]:
    """Sub-score per risk category, each clamped to 1.0."""
    return {
        name: scorer.score({key: flags[key] for key in scorer.criteria.keys()}, {})
        for name, scorer in CATEGORY_SCORERS.items()
    }


def relevant_articles(tier: AIRiskTier, flags: Mapping[str, bool]) -> tuple[str, ...]:
    """AI Act provisions that apply to the tier and the flagged criteria."""
    articles = list(TIER_ARTICLES[tier])
    articles.extend(article for key, article in CRITERION_ARTICLES.items() if flags.get(key))
    return tuple(dict.fromkeys(articles))


def obligations(tier: AIRiskTier, flags: Mapping[str, bool]) -> dict[str, bool]:
    """Headline obligations derived from the tier."""
    return {
        "prohibited_practice": tier == AIRiskTier.UNACCEPTABLE,
        "ce_marking_required": tier == AIRiskTier.HIGH,
        "conformity_assessment_required": tier == AIRiskTier.HIGH,
        "transparency_obligations_required": (
            tier in (AIRiskTier.HIGH, AIRiskTier.LIMITED) or flags["user_interaction"]
        ),
    }


ENGINE = DomainEngine(
    domain=DOMAIN,
    criteria=CRITERIA,
    classifier=CascadingClassifier(CRITERIA, RULES, fallback=AIRiskTier.MINIMAL),
    scorer=WeightedScorer(CRITERIA, SCALE_FACTORS, short_circuit_tier=AIRiskTier.UNACCEPTABLE),
    policy=POLICY,
    critical_tiers=frozenset({AIRiskTier.UNACCEPTABLE, AIRiskTier.HIGH}),
)


def classify_ai_system(profile: AISystemProfile) -> ClassificationReport:
    """
    Classify an AI system under the EU AI Act.

    Args:
        profile: Validated AI system profile

    Returns:
        ClassificationReport with obligations, category scores, relevant
        articles and industry notes in `details`
    """
    report = ENGINE.classify(profile)
    tier = AIRiskTier(report.tier)
    flags = profile.flags()

    if profile.german_standards and report.tier != AIRiskTier.MINIMAL:
        report = report.with_recommendations(
            dict.fromkeys((*report.recommended_actions, *GERMAN_STANDARDS_ACTIONS))
        )

    return report.with_details(
        **obligations(tier, flags),
        category_scores=category_scores(flags),
        relevant_articles=relevant_articles(tier, flags),
        industry_notes=industry_notes(profile.application_domain),
    )


# =============================================================================
# Demo Profiles
# =============================================================================

DEMO_PROFILES = {
    "default": AISystemProfile(
        system_name="E-Commerce Recommendation Engine",
        system_type="Recommendation System",
        application_domain="E-Commerce",
        system_description=(
            "Machine learning based product recommendations derived from browsing "
            "behaviour, purchase history and demographic preferences"
        ),
        data_types=("Purchase behaviour", "Preferences", "Demographic data", "Browsing behaviour"),
        user_interaction=True,
        automated_decision_making=True,
        large_scale=True,
        estimated_affected_persons=50_000,
        geographic_scope="EU",
        demo_mode=True,
    ),
    "high-risk": AISystemProfile(
        system_name="Biometric Employee Monitoring",
        system_type="Biometric Identification System",
        application_domain="Human Resources",
        system_description="Face recognition for access control and continuous workplace monitoring",
        data_types=("Biometric data", "Face images", "Emotion data", "Location data"),
        user_interaction=True,
        automated_decision_making=True,
        biometric_data=True,
        emotion_recognition=True,
        employment_context=True,
        estimated_affected_persons=500,
        demo_mode=True,
    ),
    "prohibited": AISystemProfile(
        system_name="Social Credit Scoring System",
        system_type="Social Scoring System",
        application_domain="Public Administration",
        system_description=(
            "Rates citizens by social behaviour and financial situation to decide "
            "access to public services"
        ),
        data_types=("Social data", "Financial data", "Behavioural data"),
        automated_decision_making=True,
        essential_services=True,
        justice_and_democracy=True,
        large_scale=True,
        estimated_affected_persons=1_000_000,
        demo_mode=True,
    ),
}
