"""
Classification Routes
=====================

API endpoints for profile classification, demo reports and the
activity catalogue.

Version: 0.1.0
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status

from services.classification.domains import (
    activity,
    classify_profile,
    demo_report,
    get_domain,
    parse_profile,
)
from services.classification.models import (
    ActivityCatalogueResponse,
    ActivityTemplateResponse,
    ClassificationReportResponse,
    LegalFindingResponse,
    OrganizationProfile,
)
from services.classification.services import (
    ClassificationReport,
    LLMRecommendationSource,
    ReportEnhancer,
)
from services.classification.services.generator import summarize_risk_levels
from shared.config import settings
from shared.logging import get_logger


logger = get_logger(__name__)

router = APIRouter()


# =============================================================================
# Dependencies
# =============================================================================


def get_report_enhancer() -> ReportEnhancer | None:
    """Report enhancer when LLM enhancement is enabled."""
    if not settings.enhancement.enabled:
        return None
    return ReportEnhancer(
        LLMRecommendationSource(),
        timeout_seconds=settings.enhancement.timeout_seconds,
    )


async def _maybe_enhance(
    report: ClassificationReport,
    profile: Any,
    enhancer: ReportEnhancer | None,
) -> ClassificationReport:
    if enhancer is None or getattr(profile, "demo_mode", False):
        return report
    return await enhancer.enhance(report)


# =============================================================================
# Routes
# =============================================================================


@router.post("/activity/catalogue", response_model=ActivityCatalogueResponse)
async def generate_catalogue(profile: OrganizationProfile) -> ActivityCatalogueResponse:
    """
    Generate the record of processing activities for an organization.

    Selects and enriches activity templates, scores the catalogue's
    Art. 30 completeness and checks legal bases and retention periods.
    """
    activities = activity.generate_activities(profile)
    findings = activity.validate_legal_compliance(activities)

    logger.info(
        "catalogue_generated",
        company=profile.company_name,
        activities=len(activities),
    )

    return ActivityCatalogueResponse(
        company_name=profile.company_name,
        industry=profile.industry,
        total_activities=len(activities),
        completeness_score=activity.completeness_score(activities),
        risk_levels=dict(summarize_risk_levels(activities)),
        activities=[ActivityTemplateResponse.from_template(a) for a in activities],
        recommendations=activity.catalogue_recommendations(profile, activities),
        legal_findings=[
            LegalFindingResponse(activity=f.activity, issue=f.issue, message=f.message) for f in findings
        ],
    )


@router.post("/{domain}", response_model=ClassificationReportResponse)
async def classify(
    domain: str,
    payload: dict[str, Any] = Body(..., description="Domain profile (camelCase)"),
    enhancer: ReportEnhancer | None = Depends(get_report_enhancer),
) -> ClassificationReportResponse:
    """
    Classify a profile for the given domain.

    Domains: activity, impact-assessment, ai-system.
    Returns 422 for malformed profiles and 404 for unknown domains.
    """
    profile = parse_profile(domain, payload)
    report = classify_profile(domain, profile)
    report = await _maybe_enhance(report, profile, enhancer)

    return ClassificationReportResponse.from_report(report)


@router.get("/{domain}/demo", response_model=ClassificationReportResponse)
async def classify_demo(
    domain: str,
    variant: str = Query(default="default", description="Demo profile variant"),
) -> ClassificationReportResponse:
    """Classify a fixed demonstration profile."""
    handler = get_domain(domain)
    if variant not in handler.demo_profiles:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown demo variant '{variant}', available: {sorted(handler.demo_profiles)}",
        )

    return ClassificationReportResponse.from_report(demo_report(domain, variant))
