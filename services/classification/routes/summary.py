"""
Summary Routes
==============

Organization-level compliance summary over many profiles.

Version: 0.1.0
"""

from fastapi import APIRouter

from services.classification.domains import activity, ai_system, build_aggregator, impact_assessment
from services.classification.models import OrganizationReportResponse, SummaryRequest
from services.classification.services import ClassificationReport
from shared.logging import get_logger


logger = get_logger(__name__)

router = APIRouter()


@router.post("", response_model=OrganizationReportResponse)
async def summarize(request: SummaryRequest) -> OrganizationReportResponse:
    """
    Classify all given profiles and aggregate them.

    Returns 422 when no profile is given.
    """
    reports: list[ClassificationReport] = []

    if request.activity is not None:
        reports.append(activity.classify_activity(request.activity))
    reports.extend(impact_assessment.classify_impact_assessment(p) for p in request.impact_assessments)
    reports.extend(ai_system.classify_ai_system(p) for p in request.ai_systems)

    summary = build_aggregator().aggregate(reports)

    return OrganizationReportResponse.from_summary(summary, reports)
