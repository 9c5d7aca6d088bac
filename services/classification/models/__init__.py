"""
Classification Models
=====================

Pydantic models for profiles (input) and API responses (output).

Version: 0.1.0
"""

from services.classification.models.activity import OrganizationProfile
from services.classification.models.ai_system import AISystemProfile
from services.classification.models.impact_assessment import ImpactAssessmentProfile
from services.classification.models.responses import (
    ActivityCatalogueResponse,
    ActivityTemplateResponse,
    ClassificationReportResponse,
    LegalFindingResponse,
    OrganizationReportResponse,
    SummaryRequest,
)

__all__ = [
    # Profiles
    "AISystemProfile",
    "ImpactAssessmentProfile",
    "OrganizationProfile",
    # API
    "ActivityCatalogueResponse",
    "ActivityTemplateResponse",
    "ClassificationReportResponse",
    "LegalFindingResponse",
    "OrganizationReportResponse",
    "SummaryRequest",
]
