"""
Organization Profile
====================

Input model for the GDPR Art. 30 processing-activity classification and
the activity catalogue generator.

Version: 0.1.0
"""

from pydantic import AliasChoices, Field

from services.classification.models.base import NonBlankStr, ProfileModel


# Employee count above which the workforce itself is a risk indicator
LARGE_WORKFORCE = 1000
ENTERPRISE_EMPLOYEES = 250


class OrganizationProfile(ProfileModel):
    """Structured description of an organization."""

    company_name: NonBlankStr = Field(..., max_length=200)
    industry: NonBlankStr = Field(..., max_length=100)
    employee_count: int = Field(..., ge=1, le=50_000)
    data_categories: tuple[NonBlankStr, ...] = Field(..., min_length=1)

    has_customer_data: bool = True
    has_employee_data: bool = True
    uses_ai_processing: bool = Field(
        default=False,
        validation_alias=AliasChoices("usesAIProcessing", "usesAiProcessing", "uses_ai_processing"),
    )
    has_special_categories: bool = False
    has_third_country_transfer: bool = False
    has_automated_decision_making: bool = False
    has_vulnerable_groups: bool = False
    has_systematic_monitoring: bool = False
    has_data_protection_officer: bool = False
    has_works_council: bool = False

    additional_info: str | None = Field(default=None, max_length=1000)
    demo_mode: bool = False

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "companyName": "Mustermann Software GmbH",
                    "industry": "Software services",
                    "employeeCount": 120,
                    "dataCategories": ["Customer data", "Employee data"],
                    "usesAIProcessing": True,
                    "hasDataProtectionOfficer": True,
                }
            ]
        }
    }

    @property
    def subject(self) -> str:
        return self.company_name

    def flags(self) -> dict[str, bool]:
        return {
            "special_categories": self.has_special_categories,
            "third_country_transfer": self.has_third_country_transfer,
            "automated_decision_making": self.has_automated_decision_making,
            "vulnerable_groups": self.has_vulnerable_groups,
            "systematic_monitoring": self.has_systematic_monitoring,
            "ai_processing": self.uses_ai_processing,
            "large_workforce": self.employee_count > LARGE_WORKFORCE,
        }

    def scale_values(self) -> dict[str, float]:
        return {"employee_count": float(self.employee_count)}
