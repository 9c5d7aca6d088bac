"""
Impact Assessment Profile
=========================

Input model for the GDPR Art. 35 data protection impact assessment check.

Version: 0.1.0
"""

from pydantic import AliasChoices, Field

from services.classification.models.base import NonBlankStr, ProfileModel
from services.classification.services.cascade import keyword_signal


AI_TECHNOLOGY_KEYWORDS = (
    "ki",
    "ai",
    "machine learning",
    "künstliche intelligenz",
    "algorithmus",
    "neural",
    "deep learning",
)

# Above this many data subjects processing counts as large scale
LARGE_SCALE_SUBJECTS = 10_000


class ImpactAssessmentProfile(ProfileModel):
    """Structured description of a processing operation."""

    processing_name: NonBlankStr = Field(..., max_length=200)
    processing_description: NonBlankStr = Field(..., max_length=2000)
    data_types: tuple[NonBlankStr, ...] = Field(..., min_length=1)
    purposes: tuple[NonBlankStr, ...] = Field(..., min_length=1)
    technologies: tuple[NonBlankStr, ...] = Field(..., min_length=1)
    data_subjects: tuple[NonBlankStr, ...] = Field(..., min_length=1)

    special_categories: bool = False
    third_country_transfer: bool = False
    automated_decision_making: bool = False
    systematic_monitoring: bool = False
    vulnerable_groups: bool = False
    large_scale: bool = False
    data_matching: bool = False
    innovative_technology: bool = False
    prevents_rights_exercise: bool = False

    estimated_data_subjects: int = Field(default=1000, ge=1, le=100_000_000)
    processing_duration_months: int = Field(default=12, ge=1, le=1200)
    include_ai_act_assessment: bool = Field(
        default=True,
        validation_alias=AliasChoices(
            "includeAIActAssessment", "includeAiActAssessment", "include_ai_act_assessment"
        ),
    )

    additional_info: str | None = Field(default=None, max_length=1000)
    demo_mode: bool = False

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "processingName": "ML customer segmentation",
                    "processingDescription": "Automated segmentation of customer data",
                    "dataTypes": ["Customer data", "Purchase behaviour"],
                    "purposes": ["Marketing optimisation"],
                    "technologies": ["Machine Learning", "CRM"],
                    "dataSubjects": ["Customers"],
                    "automatedDecisionMaking": True,
                    "dataMatching": True,
                    "estimatedDataSubjects": 50000,
                }
            ]
        }
    }

    @property
    def subject(self) -> str:
        return self.processing_name

    @property
    def uses_ai(self) -> bool:
        """Whether any listed technology looks like AI processing."""
        return any(keyword_signal(t, AI_TECHNOLOGY_KEYWORDS) for t in self.technologies)

    def flags(self) -> dict[str, bool]:
        return {
            "special_categories": self.special_categories,
            "automated_decision_making": self.automated_decision_making,
            "systematic_monitoring": self.systematic_monitoring,
            "vulnerable_groups": self.vulnerable_groups,
            "large_scale": self.large_scale or self.estimated_data_subjects > LARGE_SCALE_SUBJECTS,
            "innovative_technology": self.innovative_technology,
            "data_matching": self.data_matching,
            "prevents_rights_exercise": self.prevents_rights_exercise,
            "third_country_transfer": self.third_country_transfer,
            "ai_processing": self.uses_ai,
        }

    def scale_values(self) -> dict[str, float]:
        return {
            "data_subjects": float(self.estimated_data_subjects),
            "duration_months": float(self.processing_duration_months),
        }
