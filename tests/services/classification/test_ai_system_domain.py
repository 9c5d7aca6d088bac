"""
AI System Classification Tests
==============================

Tests for EU AI Act risk tiering.

Version: 0.1.0
"""

from typing import Any

import pytest

from services.classification.domains.ai_system import (
    CRITERIA,
    DEMO_PROFILES,
    GERMAN_STANDARDS_ACTIONS,
    RULES,
    AIRiskTier,
    classify_ai_system,
)
from services.classification.models import AISystemProfile


def make_profile(**overrides: Any) -> AISystemProfile:
    """AI system profile with every flag false unless overridden."""
    data: dict[str, Any] = {
        "system_name": "Test System",
        "system_type": "Classifier",
        "application_domain": "Testing",
        "data_types": ("Test data",),
        "estimated_affected_persons": 100,
    }
    data.update(overrides)
    return AISystemProfile(**data)


# =============================================================================
# Scenarios
# =============================================================================


class TestScenarios:
    """Reference scenarios."""

    def test_realtime_biometric_identification_is_prohibited(self) -> None:
        report = classify_ai_system(
            make_profile(biometric_data=True, law_enforcement=True, public_spaces=True)
        )

        assert report.tier == AIRiskTier.UNACCEPTABLE
        assert report.score == 1.0
        assert report.triggered_criteria == ("biometric_data", "law_enforcement", "public_spaces")
        assert report.next_review_interval_months == 3
        assert report.estimated_effort_days == 90

    def test_employment_with_automated_decisions_is_high(self) -> None:
        report = classify_ai_system(
            make_profile(employment_context=True, automated_decision_making=True)
        )

        assert report.tier == AIRiskTier.HIGH
        assert report.score == 0.4
        assert set(report.triggered_criteria) == {"employment_context", "automated_decision_making"}
        assert report.next_review_interval_months == 6
        assert "Involve the works council before deployment in the workplace" in report.recommended_actions

    def test_user_interaction_only_is_limited(self) -> None:
        report = classify_ai_system(make_profile(user_interaction=True))

        assert report.tier == AIRiskTier.LIMITED
        assert report.score == 0.1
        assert report.triggered_criteria == ("user_interaction",)

    def test_nothing_set_is_minimal(self) -> None:
        report = classify_ai_system(make_profile())

        assert report.tier == AIRiskTier.MINIMAL
        assert 0.0 <= report.score <= 0.05
        assert report.triggered_criteria == ()
        assert report.next_review_interval_months == 24
        assert report.estimated_effort_days == 2


# =============================================================================
# Cascade Rules
# =============================================================================


class TestCascadeRules:
    """Tests for individual tier triggers."""

    @pytest.mark.parametrize(
        "flags",
        [
            {"minors_data": True, "emotion_recognition": True},
            {"minors_data": True, "biometric_data": True},
            {"essential_services": True, "system_type": "Social Scoring System"},
            {"justice_and_democracy": True, "system_description": "Citizen social scoring"},
        ],
    )
    def test_unacceptable_triggers(self, flags: dict[str, Any]) -> None:
        report = classify_ai_system(make_profile(**flags))

        assert report.tier == AIRiskTier.UNACCEPTABLE
        assert report.score == 1.0

    def test_manipulative_description_is_prohibited(self) -> None:
        report = classify_ai_system(
            make_profile(system_description="Uses subliminal cues to steer purchases")
        )

        assert report.tier == AIRiskTier.UNACCEPTABLE
        assert report.triggered_criteria == ("manipulative_techniques",)

    def test_social_scoring_without_context_is_not_prohibited(self) -> None:
        report = classify_ai_system(make_profile(system_type="Social Scoring System"))

        assert report.tier == AIRiskTier.MINIMAL
        assert report.score == 0.1

    def test_keyword_mention_is_a_weak_signal(self) -> None:
        report = classify_ai_system(
            make_profile(system_description="Summarises literature critical of social scoring")
        )

        assert report.tier == AIRiskTier.MINIMAL
        assert report.score == 0.1
        assert report.triggered_criteria == ()

    @pytest.mark.parametrize(
        "flags",
        [
            {"biometric_data": True},
            {"emotion_recognition": True},
            {"critical_infrastructure": True},
            {"education_context": True, "automated_decision_making": True},
            {"essential_services": True, "credit_scoring": True},
            {"essential_services": True, "insurance_risk_assessment": True},
            {"essential_services": True, "emergency_services": True},
            {"law_enforcement": True, "biometric_data": True},
            {"migration_asylum_border": True, "automated_decision_making": True},
            {"justice_and_democracy": True, "automated_decision_making": True},
            {"safety_components": True},
        ],
    )
    def test_high_triggers(self, flags: dict[str, Any]) -> None:
        assert classify_ai_system(make_profile(**flags)).tier == AIRiskTier.HIGH

    @pytest.mark.parametrize(
        "flags",
        [
            {"education_context": True},
            {"employment_context": True},
            {"essential_services": True},
            {"automated_decision_making": True},
            {"migration_asylum_border": True},
        ],
    )
    def test_context_without_trigger_is_not_high(self, flags: dict[str, Any]) -> None:
        assert classify_ai_system(make_profile(**flags)).tier == AIRiskTier.MINIMAL

    def test_synthetic_content_is_limited(self) -> None:
        report = classify_ai_system(make_profile(system_type="Deepfake Video Generation"))

        assert report.tier == AIRiskTier.LIMITED
        assert report.triggered_criteria == ("synthetic_content",)

    def test_every_rule_key_has_a_weight(self) -> None:
        for rule in RULES:
            for trigger in rule.triggers:
                for key in trigger.keys():
                    assert CRITERIA.weight_of(key) > 0


# =============================================================================
# Properties
# =============================================================================


class TestProperties:
    """Invariants that hold for every profile."""

    def test_deterministic(self) -> None:
        profile = DEMO_PROFILES["high-risk"]

        assert classify_ai_system(profile) == classify_ai_system(profile)

    def test_score_clamped_without_short_circuit(self) -> None:
        report = classify_ai_system(DEMO_PROFILES["high-risk"])

        assert report.tier == AIRiskTier.HIGH
        assert report.score == 1.0

    def test_scale_bonus(self) -> None:
        small = classify_ai_system(make_profile(user_interaction=True, estimated_affected_persons=100_000))
        large = classify_ai_system(make_profile(user_interaction=True, estimated_affected_persons=2_000_000))

        assert small.score == 0.1
        assert large.score == 0.3

    def test_german_standards_actions(self) -> None:
        with_standards = classify_ai_system(make_profile(user_interaction=True))
        without = classify_ai_system(make_profile(user_interaction=True, german_standards=False))

        for action in GERMAN_STANDARDS_ACTIONS:
            assert action in with_standards.recommended_actions
            assert action not in without.recommended_actions

    def test_german_standards_skipped_for_minimal(self) -> None:
        report = classify_ai_system(make_profile())

        assert not set(GERMAN_STANDARDS_ACTIONS) & set(report.recommended_actions)


class TestDemoProfiles:
    """Tests for the demonstration profiles."""

    def test_default(self) -> None:
        report = classify_ai_system(DEMO_PROFILES["default"])

        assert report.tier == AIRiskTier.LIMITED
        assert report.score == 0.4
        assert report.subject == "E-Commerce Recommendation Engine"

    def test_prohibited(self) -> None:
        report = classify_ai_system(DEMO_PROFILES["prohibited"])

        assert report.tier == AIRiskTier.UNACCEPTABLE
        assert "social_scoring" in report.triggered_criteria


class TestDerivedObligations:
    """Tests for obligations, category scores, articles and notes."""

    def test_prohibited_obligations(self) -> None:
        details = classify_ai_system(DEMO_PROFILES["prohibited"]).details

        assert details["prohibited_practice"] is True
        assert details["ce_marking_required"] is False
        assert details["conformity_assessment_required"] is False
        assert details["transparency_obligations_required"] is False
        assert details["relevant_articles"] == ("Art. 5 - Prohibited AI practices",)

    def test_high_risk_obligations(self) -> None:
        details = classify_ai_system(DEMO_PROFILES["high-risk"]).details

        assert details["prohibited_practice"] is False
        assert details["ce_marking_required"] is True
        assert details["conformity_assessment_required"] is True
        assert details["transparency_obligations_required"] is True
        assert "Art. 43 - Conformity assessment" in details["relevant_articles"]
        assert details["relevant_articles"][-1].startswith("Art. 50(3)")

    def test_user_interaction_requires_transparency_at_minimal(self) -> None:
        report = classify_ai_system(make_profile(user_interaction=True))
        assert report.details["transparency_obligations_required"] is True

        report = classify_ai_system(make_profile())
        assert report.tier == AIRiskTier.MINIMAL
        assert report.details["transparency_obligations_required"] is False
        assert report.details["relevant_articles"] == ("Art. 95 - Voluntary codes of conduct",)

    def test_category_scores(self) -> None:
        details = classify_ai_system(DEMO_PROFILES["high-risk"]).details

        assert details["category_scores"] == {
            "biometric": 0.9,
            "automation": 0.7,
            "transparency": 0.5,
            "discrimination": 0.5,
            "infrastructure": 0.0,
        }

    def test_category_scores_clamped(self) -> None:
        report = classify_ai_system(
            make_profile(critical_infrastructure=True, emergency_services=True, safety_components=True)
        )

        assert report.details["category_scores"]["infrastructure"] == 1.0

    def test_category_scores_do_not_change_overall_score(self) -> None:
        report = classify_ai_system(DEMO_PROFILES["default"])

        assert report.score == 0.4
        assert report.details["category_scores"]["transparency"] == 0.6

    @pytest.mark.parametrize(
        ("application_domain", "first_note"),
        [
            ("E-Commerce", "E-commerce: watch for unfair commercial practices"),
            ("Healthcare", "Healthcare: check the Medical Device Regulation"),
            ("Financial services", "Finance: BaFin supervision and MaRisk apply"),
            ("HR analytics", "Employment law: works council co-determination under the BetrVG"),
            ("Three-tier logistics", "Check sector-specific compliance requirements"),
        ],
    )
    def test_industry_notes(self, application_domain: str, first_note: str) -> None:
        report = classify_ai_system(make_profile(application_domain=application_domain))

        assert report.details["industry_notes"][0] == first_note

    def test_details_survive_german_standards(self) -> None:
        report = classify_ai_system(DEMO_PROFILES["default"])

        assert GERMAN_STANDARDS_ACTIONS[0] in report.recommended_actions
        assert report.details["industry_notes"][0].startswith("E-commerce")


class TestProfileModel:
    """Tests for wire-format parsing."""

    def test_camel_case_aliases(self) -> None:
        profile = AISystemProfile.model_validate(
            {
                "systemName": "Border Check",
                "systemType": "Identification",
                "applicationDomain": "Border control",
                "dataTypes": ["Passport data"],
                "migrationAsylBorder": True,
                "biometricData": True,
            }
        )

        assert profile.migration_asylum_border
        assert profile.flags()["migration_asylum_border"]

    def test_blank_name_rejected(self) -> None:
        with pytest.raises(ValueError):
            make_profile(system_name="   ")

    def test_profile_is_immutable(self) -> None:
        profile = make_profile()

        with pytest.raises(ValueError):
            profile.biometric_data = True  # type: ignore[misc]
