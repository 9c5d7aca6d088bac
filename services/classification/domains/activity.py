"""
Processing Activity Domain
==========================

Organization-level risk of the GDPR Art. 30 record of processing
activities, plus the template catalogue used to generate that record.

Tiers (most severe first): HIGH, MEDIUM, LOW.

Version: 0.1.0
"""

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from services.classification.models.activity import ENTERPRISE_EMPLOYEES, OrganizationProfile
from services.classification.services.cascade import CascadingClassifier, TierRule, Trigger
from services.classification.services.criteria import Criterion, CriterionKind, CriterionSet
from services.classification.services.engine import DomainEngine
from services.classification.services.generator import (
    ActivityProfileGenerator,
    ActivityTemplate,
    TemplateEnrichment,
)
from services.classification.services.report import (
    ClassificationReport,
    ReportPolicy,
    TierPolicy,
)
from services.classification.services.scoring import ScaleFactor, WeightedScorer
from services.classification.domains.activity_catalogue import CATALOGUE
from shared.logging import get_logger


logger = get_logger(__name__)

DOMAIN = "activity"

# Organizations with a core data processing activity need a DPO from this size
DPO_THRESHOLD = 20


class ActivityRiskTier(str, Enum):
    """Risk tiers for organizations and activity templates, most severe first."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


# =============================================================================
# Organization Classification
# =============================================================================

CRITERIA = CriterionSet(
    DOMAIN,
    [
        Criterion("special_categories", 0.3, CriterionKind.HIGH, "Special categories of personal data"),
        Criterion("third_country_transfer", 0.2, CriterionKind.LIMITED, "Transfers to third countries"),
        Criterion("automated_decision_making", 0.2, CriterionKind.HIGH, "Automated decision making"),
        Criterion("vulnerable_groups", 0.2, CriterionKind.HIGH, "Vulnerable data subjects"),
        Criterion("systematic_monitoring", 0.2, CriterionKind.HIGH, "Systematic monitoring"),
        Criterion("ai_processing", 0.1, CriterionKind.LIMITED, "AI-based processing"),
        Criterion("large_workforce", 0.1, CriterionKind.SCALE, "More than 1,000 employees"),
    ],
)

RULES: tuple[TierRule[ActivityRiskTier], ...] = (
    TierRule(
        ActivityRiskTier.HIGH,
        (
            Trigger(all_of=("special_categories",), name="special_categories"),
            Trigger(all_of=("systematic_monitoring",), name="systematic_monitoring"),
            Trigger(all_of=("vulnerable_groups",), name="vulnerable_groups"),
            Trigger(all_of=("ai_processing", "automated_decision_making"), name="ai_decisions"),
            Trigger(all_of=("large_workforce",), name="large_workforce"),
        ),
    ),
    TierRule(
        ActivityRiskTier.MEDIUM,
        (
            Trigger(
                any_of=("third_country_transfer", "automated_decision_making", "ai_processing"),
                name="elevated_processing",
            ),
        ),
    ),
)

SCALE_FACTORS = (ScaleFactor("employee_count", ENTERPRISE_EMPLOYEES, 0.1, "enterprise_size"),)

POLICY = ReportPolicy(
    tiers={
        ActivityRiskTier.HIGH: TierPolicy(
            review_months=6,
            effort_days=15,
            actions=(
                "Maintain a complete record of processing activities (Art. 30)",
                "Carry out impact assessments for high-risk activities (Art. 35)",
                "Review technical and organisational measures every six months",
            ),
        ),
        ActivityRiskTier.MEDIUM: TierPolicy(
            review_months=12,
            effort_days=8,
            actions=(
                "Maintain a complete record of processing activities (Art. 30)",
                "Check whether individual activities need an impact assessment",
            ),
        ),
        ActivityRiskTier.LOW: TierPolicy(
            review_months=24,
            effort_days=3,
            actions=(
                "Maintain a complete record of processing activities (Art. 30)",
            ),
        ),
    },
    criterion_actions={
        "special_categories": ("Document the Art. 9(2) exemption for special categories",),
        "third_country_transfer": (
            "Carry out a transfer impact assessment for all third-country transfers",
        ),
        "automated_decision_making": ("Document safeguards for automated decisions (Art. 22)",),
        "ai_processing": ("Classify every AI system under the EU AI Act",),
    },
)

ENGINE = DomainEngine(
    domain=DOMAIN,
    criteria=CRITERIA,
    classifier=CascadingClassifier(CRITERIA, RULES, fallback=ActivityRiskTier.LOW),
    scorer=WeightedScorer(CRITERIA, SCALE_FACTORS),
    policy=POLICY,
    critical_tiers=frozenset({ActivityRiskTier.HIGH}),
)


def classify_activity(profile: OrganizationProfile) -> ClassificationReport:
    """
    Classify the processing risk of an organization.

    Args:
        profile: Validated organization profile

    Returns:
        ClassificationReport
    """
    report = ENGINE.classify(profile)

    if profile.employee_count >= DPO_THRESHOLD and not profile.has_data_protection_officer:
        report = report.with_recommendations(
            (*report.recommended_actions, "Appoint a data protection officer (Art. 37 GDPR, § 38 BDSG)")
        )

    return report


# =============================================================================
# Template Enrichment
# =============================================================================

TEMPLATE_CRITERIA = CriterionSet(
    "activity-template",
    [
        Criterion("special_categories", 0.4, CriterionKind.HIGH, "Special categories of personal data"),
        Criterion("third_country_transfer", 0.3, CriterionKind.LIMITED, "Third-country transfer"),
        Criterion("automated_decisions", 0.3, CriterionKind.HIGH, "Automated decisions"),
        Criterion("systematic_monitoring", 0.3, CriterionKind.HIGH, "Systematic monitoring"),
        Criterion("involves_ai", 0.2, CriterionKind.LIMITED, "AI-based processing"),
    ],
)

TEMPLATE_RULES: tuple[TierRule[ActivityRiskTier], ...] = (
    TierRule(
        ActivityRiskTier.HIGH,
        (
            Trigger(all_of=("special_categories",), name="special_categories"),
            Trigger(all_of=("involves_ai", "automated_decisions"), name="ai_decisions"),
        ),
    ),
    TierRule(
        ActivityRiskTier.MEDIUM,
        (
            Trigger(
                any_of=("third_country_transfer", "involves_ai", "systematic_monitoring"),
                name="elevated_processing",
            ),
        ),
    ),
)

TEMPLATE_ENRICHMENT = TemplateEnrichment(
    classifier=CascadingClassifier(TEMPLATE_CRITERIA, TEMPLATE_RULES, fallback=ActivityRiskTier.LOW),
    scorer=WeightedScorer(TEMPLATE_CRITERIA),
    review_threshold=0.3,
    review_tiers=frozenset({ActivityRiskTier.HIGH}),
)

GENERATOR: ActivityProfileGenerator[OrganizationProfile] = ActivityProfileGenerator(
    CATALOGUE,
    TEMPLATE_ENRICHMENT,
)


def generate_activities(profile: OrganizationProfile) -> list[ActivityTemplate]:
    """Generate the enriched activity catalogue for an organization."""
    return GENERATOR.generate(profile)


# =============================================================================
# Catalogue Quality
# =============================================================================

_LEGAL_BASIS_MARKERS = ("Art. 6", "Art. 9", "BDSG", "§ 26", "BetrVG")


def _has_content(items: Sequence[str]) -> bool:
    return any(item.strip() for item in items)


def completeness_score(activities: Sequence[ActivityTemplate]) -> float:
    """
    Art. 30 completeness of a catalogue, 0-100 with one decimal.

    Per activity:
    - 60 points for mandatory fields
    - 30 points for technical and organisational measures
    - 10 points for quality criteria
    """
    if not activities:
        return 0.0

    total = 0.0
    for activity in activities:
        points = 0.0

        # Mandatory fields
        points += 10 if activity.name.strip() else 0
        points += 10 if activity.purpose.strip() else 0
        points += 10 if activity.legal_basis.strip() else 0
        points += 10 if _has_content(activity.data_categories) else 0
        points += 10 if activity.retention_period.strip() else 0
        points += 10 if _has_content(activity.data_subject_categories) else 0

        # Technical and organisational measures
        points += 15 if _has_content(activity.technical_measures) else 0
        points += 15 if _has_content(activity.organizational_measures) else 0

        # Quality
        points += 3 if _has_content(activity.recipients) else 0
        points += 3 if any(m in activity.legal_basis for m in _LEGAL_BASIS_MARKERS) else 0
        if activity.third_country_transfer and activity.comments and "scc" in activity.comments.lower():
            points += 2
        points += 2 if activity.risk_level is not None else 0

        total += points

    return round(total / len(activities), 1)


def catalogue_recommendations(
    profile: OrganizationProfile,
    activities: Sequence[ActivityTemplate],
) -> list[str]:
    """Follow-up actions derived from the generated catalogue."""
    recommendations: list[str] = []

    transfers = sum(1 for a in activities if a.third_country_transfer)
    if transfers:
        recommendations.append(
            f"Verify adequacy decisions or standard contractual clauses for {transfers} third-country transfers"
        )

    reviews = sum(1 for a in activities if a.review_required)
    if reviews:
        recommendations.append(f"Review {reviews} processing activities for impact assessment needs")

    high = sum(1 for a in activities if a.risk_level == ActivityRiskTier.HIGH)
    if high:
        recommendations.append(
            f"{high} high-risk processing activities identified, implement additional safeguards"
        )

    if profile.employee_count >= DPO_THRESHOLD and not profile.has_data_protection_officer:
        recommendations.append("Appoint a data protection officer")

    if profile.uses_ai_processing:
        recommendations.append("Run an EU AI Act classification for every AI system")
        recommendations.append("Prepare an impact assessment for automated decision making")

    if profile.has_third_country_transfer:
        recommendations.append("Carry out transfer impact assessments for all third-country transfers")

    recommendations.append("Review the record of processing activities every six months")
    recommendations.append("Train employees on the documented processing activities")

    return recommendations


# =============================================================================
# Legal Basis And Retention
# =============================================================================

_VALID_LEGAL_BASIS_MARKERS = (
    "Art. 6",
    "Art. 9",
    "legitimate interest",
    "consent",
    "contract",
    "legal obligation",
    "BDSG",
    "§ 26",
    "BetrVG",
    "SGB",
)
_EMPLOYEE_MARKERS = ("employee", "personnel", "payroll")
_TAX_RETENTION_MARKERS = ("employee", "payroll", "invoice", "financ", "accounting")
_UNLIMITED_RETENTION_MARKERS = ("indefinite", "permanent", "unlimited", "unbegrenzt")
_RETENTION_UNITS = ("year", "month", "week", "day")

# German commercial and tax law retention period (§ 147 AO, § 257 HGB)
TAX_RETENTION = "10 years"


@dataclass(frozen=True)
class LegalFinding:
    """One legal-basis or retention issue in a generated activity."""

    activity: str
    issue: str
    message: str


def _contains_any(text: str, markers: Sequence[str]) -> bool:
    lowered = text.lower()
    return any(marker.lower() in lowered for marker in markers)


def validate_legal_compliance(activities: Sequence[ActivityTemplate]) -> list[LegalFinding]:
    """
    Check legal bases and retention periods against German practice.

    Checks per activity:
    - the legal basis cites GDPR or a German special law
    - employee processing references § 26 BDSG
    - retention is neither unlimited nor without a time unit
    - payroll and financial records keep the 10 year tax retention

    Args:
        activities: Generated or hand-written activity templates

    Returns:
        Findings in activity order, empty when everything checks out
    """
    findings: list[LegalFinding] = []

    for activity in activities:
        name = activity.name
        basis = activity.legal_basis.strip()
        retention = activity.retention_period.strip()

        if not basis or not _contains_any(basis, _VALID_LEGAL_BASIS_MARKERS):
            findings.append(
                LegalFinding(name, "invalid_legal_basis", "Cite a legal basis under Art. 6 or Art. 9 GDPR")
            )
        elif _contains_any(name, _EMPLOYEE_MARKERS) and not _contains_any(basis, ("BDSG", "§ 26")):
            findings.append(
                LegalFinding(name, "missing_bdsg_reference", "Reference § 26 BDSG for employee data")
            )

        if _contains_any(retention, _UNLIMITED_RETENTION_MARKERS):
            findings.append(
                LegalFinding(
                    name,
                    "unlimited_retention",
                    "Unlimited retention conflicts with storage limitation (Art. 5(1)(e) GDPR)",
                )
            )
        elif not _contains_any(retention, _RETENTION_UNITS):
            findings.append(
                LegalFinding(name, "unspecific_retention", "Define a concrete retention period")
            )

        if _contains_any(name, _TAX_RETENTION_MARKERS) and TAX_RETENTION not in retention:
            findings.append(
                LegalFinding(
                    name,
                    "tax_retention",
                    f"Keep tax-relevant records for {TAX_RETENTION} (§ 147 AO, § 257 HGB)",
                )
            )

    for finding in findings:
        logger.info("legal_finding", activity=finding.activity, issue=finding.issue)

    return findings


DEMO_PROFILES = {
    "default": OrganizationProfile(
        company_name="Mustermann Software GmbH",
        industry="Software services",
        employee_count=120,
        data_categories=(
            "Customer data",
            "Employee data",
            "Project data",
            "Invoice data",
            "Support data",
            "Analytics data",
        ),
        uses_ai_processing=True,
        has_data_protection_officer=True,
        has_works_council=True,
        demo_mode=True,
    ),
    "minimal": OrganizationProfile(
        company_name="Test GmbH",
        industry="Software services",
        employee_count=10,
        data_categories=("Customer data", "Employee data"),
        demo_mode=True,
    ),
}
