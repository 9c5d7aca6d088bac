"""
Processing Activity Classification Tests
========================================

Tests for the organization-level Art. 30 risk classification.

Version: 0.1.0
"""

from typing import Any

import pytest

from services.classification.domains.activity import (
    DEMO_PROFILES,
    ActivityRiskTier,
    classify_activity,
)
from services.classification.models import OrganizationProfile


def make_organization(**overrides: Any) -> OrganizationProfile:
    """Organization profile with every risk flag false unless overridden."""
    data: dict[str, Any] = {
        "company_name": "Test GmbH",
        "industry": "Retail",
        "employee_count": 10,
        "data_categories": ("Customer data",),
    }
    data.update(overrides)
    return OrganizationProfile(**data)


class TestActivityClassification:
    """Tests for the organization tiers."""

    def test_low(self) -> None:
        report = classify_activity(make_organization())

        assert report.tier == ActivityRiskTier.LOW
        assert report.score == 0.0
        assert report.next_review_interval_months == 24
        assert report.estimated_effort_days == 3

    @pytest.mark.parametrize(
        "flags",
        [
            {"has_special_categories": True},
            {"has_systematic_monitoring": True},
            {"has_vulnerable_groups": True},
            {"uses_ai_processing": True, "has_automated_decision_making": True},
            {"employee_count": 1500},
        ],
    )
    def test_high(self, flags: dict[str, Any]) -> None:
        report = classify_activity(make_organization(**flags))

        assert report.tier == ActivityRiskTier.HIGH
        assert report.next_review_interval_months == 6
        assert report.estimated_effort_days == 15

    @pytest.mark.parametrize(
        "flags",
        [
            {"has_third_country_transfer": True},
            {"has_automated_decision_making": True},
            {"uses_ai_processing": True},
        ],
    )
    def test_medium(self, flags: dict[str, Any]) -> None:
        report = classify_activity(make_organization(**flags))

        assert report.tier == ActivityRiskTier.MEDIUM
        assert report.next_review_interval_months == 12

    def test_large_workforce_score(self) -> None:
        report = classify_activity(make_organization(employee_count=1500))

        # large_workforce + enterprise size
        assert report.score == 0.2
        assert report.triggered_criteria == ("large_workforce",)

    def test_dpo_recommended_from_twenty_employees(self) -> None:
        without_dpo = classify_activity(make_organization(employee_count=25))
        with_dpo = classify_activity(
            make_organization(employee_count=25, has_data_protection_officer=True)
        )
        small = classify_activity(make_organization(employee_count=19))

        dpo_action = "Appoint a data protection officer (Art. 37 GDPR, § 38 BDSG)"
        assert dpo_action in without_dpo.recommended_actions
        assert dpo_action not in with_dpo.recommended_actions
        assert dpo_action not in small.recommended_actions

    def test_ai_alias(self) -> None:
        profile = OrganizationProfile.model_validate(
            {
                "companyName": "KI Labs GmbH",
                "industry": "Software",
                "employeeCount": 30,
                "dataCategories": ["Customer data"],
                "usesAIProcessing": True,
            }
        )

        assert profile.uses_ai_processing
        assert profile.flags()["ai_processing"]

    def test_employee_count_bounds(self) -> None:
        with pytest.raises(ValueError):
            make_organization(employee_count=0)


class TestDemoProfiles:
    """Tests for the demonstration profiles."""

    def test_default(self) -> None:
        report = classify_activity(DEMO_PROFILES["default"])

        assert report.tier == ActivityRiskTier.MEDIUM
        assert report.triggered_criteria == ("ai_processing",)
        assert report.score == 0.1
        assert "Classify every AI system under the EU AI Act" in report.recommended_actions

    def test_minimal(self) -> None:
        report = classify_activity(DEMO_PROFILES["minimal"])

        assert report.tier == ActivityRiskTier.LOW
        assert report.score == 0.0
