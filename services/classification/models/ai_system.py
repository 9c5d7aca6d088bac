"""
AI System Profile
=================

Input model for EU AI Act risk classification.

Version: 0.1.0
"""

from pydantic import Field

from services.classification.models.base import NonBlankStr, ProfileModel
from services.classification.services.cascade import keyword_signal


# Weak signals over free text (Art. 5 prohibited practices, Art. 50 synthetic content)
MANIPULATION_KEYWORDS = ("subliminal", "manipulation", "unterbewusst")
SOCIAL_SCORING_KEYWORDS = ("social scoring",)
SYNTHETIC_CONTENT_KEYWORDS = ("generation", "content", "deepfake")


class AISystemProfile(ProfileModel):
    """Structured description of an AI system."""

    system_name: NonBlankStr = Field(..., max_length=200, description="System name")
    system_type: NonBlankStr = Field(..., description="System type, e.g. 'Recommendation System'")
    application_domain: NonBlankStr = Field(..., description="Business domain of use")
    system_description: str = Field(default="", max_length=2000)
    data_types: tuple[NonBlankStr, ...] = Field(..., min_length=1)

    # Transparency
    user_interaction: bool = False
    automated_decision_making: bool = False

    # Biometrics
    biometric_data: bool = False
    emotion_recognition: bool = False

    # Annex III areas
    critical_infrastructure: bool = False
    education_context: bool = False
    employment_context: bool = False
    essential_services: bool = False
    law_enforcement: bool = False
    migration_asylum_border: bool = Field(default=False, alias="migrationAsylBorder")
    justice_and_democracy: bool = False
    credit_scoring: bool = False
    insurance_risk_assessment: bool = False
    emergency_services: bool = False
    safety_components: bool = False

    # Affected persons and context
    minors_data: bool = False
    public_spaces: bool = False
    large_scale: bool = False
    estimated_affected_persons: int = Field(default=1000, ge=1, le=1_000_000_000)
    geographic_scope: str = "NATIONAL"

    additional_info: str | None = Field(default=None, max_length=1000)
    demo_mode: bool = False
    german_standards: bool = True

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "systemName": "E-Commerce Recommendation Engine",
                    "systemType": "Recommendation System",
                    "applicationDomain": "E-Commerce",
                    "dataTypes": ["Purchase history", "Preferences"],
                    "userInteraction": True,
                    "automatedDecisionMaking": True,
                    "largeScale": True,
                    "estimatedAffectedPersons": 50000,
                }
            ]
        }
    }

    @property
    def subject(self) -> str:
        return self.system_name

    @property
    def free_text(self) -> str:
        return " ".join((self.system_name, self.system_type, self.system_description))

    def flags(self) -> dict[str, bool]:
        """Criterion flags, including keyword-derived weak signals."""
        return {
            "manipulative_techniques": keyword_signal(self.system_description, MANIPULATION_KEYWORDS),
            "social_scoring": keyword_signal(self.free_text, SOCIAL_SCORING_KEYWORDS),
            "synthetic_content": keyword_signal(self.system_type, SYNTHETIC_CONTENT_KEYWORDS),
            "user_interaction": self.user_interaction,
            "automated_decision_making": self.automated_decision_making,
            "biometric_data": self.biometric_data,
            "emotion_recognition": self.emotion_recognition,
            "critical_infrastructure": self.critical_infrastructure,
            "education_context": self.education_context,
            "employment_context": self.employment_context,
            "essential_services": self.essential_services,
            "law_enforcement": self.law_enforcement,
            "migration_asylum_border": self.migration_asylum_border,
            "justice_and_democracy": self.justice_and_democracy,
            "credit_scoring": self.credit_scoring,
            "insurance_risk_assessment": self.insurance_risk_assessment,
            "emergency_services": self.emergency_services,
            "safety_components": self.safety_components,
            "minors_data": self.minors_data,
            "public_spaces": self.public_spaces,
            "large_scale": self.large_scale,
        }

    def scale_values(self) -> dict[str, float]:
        return {"affected_persons": float(self.estimated_affected_persons)}
