"""
API Models
==========

Request and response models for the classification HTTP layer.
All payloads use camelCase on the wire.

Version: 0.1.0
"""

from typing import Any

from pydantic import Field
from pydantic.alias_generators import to_camel

from services.classification.models.activity import OrganizationProfile
from services.classification.models.ai_system import AISystemProfile
from services.classification.models.base import CamelModel
from services.classification.models.impact_assessment import ImpactAssessmentProfile
from services.classification.services.aggregator import OrganizationReport
from services.classification.services.generator import ActivityTemplate
from services.classification.services.report import ClassificationReport


class ClassificationReportResponse(CamelModel):
    """Classification result for one profile."""

    domain: str
    subject: str = ""
    tier: str
    score: float = Field(..., ge=0.0, le=1.0)
    triggered_criteria: list[str]
    recommended_actions: list[str]
    next_review_interval_months: int
    estimated_effort_days: int
    details: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_report(cls, report: ClassificationReport) -> "ClassificationReportResponse":
        return cls(
            domain=report.domain,
            subject=report.subject,
            tier=report.tier.value,
            score=report.score,
            triggered_criteria=list(report.triggered_criteria),
            recommended_actions=list(report.recommended_actions),
            next_review_interval_months=report.next_review_interval_months,
            estimated_effort_days=report.estimated_effort_days,
            details={to_camel(key): value for key, value in report.details.items()},
        )


class ActivityTemplateResponse(CamelModel):
    """One processing activity of the generated catalogue."""

    name: str
    purpose: str
    legal_basis: str
    data_categories: list[str]
    data_subject_categories: list[str]
    recipients: list[str]
    retention_period: str
    technical_measures: list[str]
    organizational_measures: list[str]
    third_country_transfer: bool
    risk_level: str | None
    review_required: bool
    comments: str | None = None

    @classmethod
    def from_template(cls, template: ActivityTemplate) -> "ActivityTemplateResponse":
        return cls(
            name=template.name,
            purpose=template.purpose,
            legal_basis=template.legal_basis,
            data_categories=list(template.data_categories),
            data_subject_categories=list(template.data_subject_categories),
            recipients=list(template.recipients),
            retention_period=template.retention_period,
            technical_measures=list(template.technical_measures),
            organizational_measures=list(template.organizational_measures),
            third_country_transfer=template.third_country_transfer,
            risk_level=template.risk_level.value if template.risk_level else None,
            review_required=template.review_required,
            comments=template.comments,
        )


class LegalFindingResponse(CamelModel):
    """Legal-basis or retention issue in one activity."""

    activity: str
    issue: str
    message: str


class ActivityCatalogueResponse(CamelModel):
    """Generated record of processing activities."""

    company_name: str
    industry: str
    total_activities: int
    completeness_score: float
    risk_levels: dict[str, int]
    activities: list[ActivityTemplateResponse]
    recommendations: list[str]
    legal_findings: list[LegalFindingResponse] = Field(default_factory=list)


class SummaryRequest(CamelModel):
    """Profiles to classify and roll into one organization summary."""

    activity: OrganizationProfile | None = None
    impact_assessments: list[ImpactAssessmentProfile] = Field(default_factory=list)
    ai_systems: list[AISystemProfile] = Field(default_factory=list)


class OrganizationReportResponse(CamelModel):
    """Organization-level compliance summary."""

    overall_score: float
    report_count: int
    domain_scores: dict[str, float]
    tier_counts: dict[str, int]
    critical_issues: list[str]
    priority_actions: list[str]
    reports: list[ClassificationReportResponse]

    @classmethod
    def from_summary(
        cls,
        summary: OrganizationReport,
        reports: list[ClassificationReport],
    ) -> "OrganizationReportResponse":
        return cls(
            overall_score=summary.overall_score,
            report_count=summary.report_count,
            domain_scores=summary.domain_scores,
            tier_counts=summary.tier_counts,
            critical_issues=list(summary.critical_issues),
            priority_actions=list(summary.priority_actions),
            reports=[ClassificationReportResponse.from_report(r) for r in reports],
        )
