"""
Report Enhancement Tests
========================

Tests for optional LLM recommendations with graceful fallback.

Version: 0.1.0
"""

import asyncio

import pytest

from services.classification.domains.ai_system import DEMO_PROFILES, classify_ai_system
from services.classification.services import (
    ENHANCEMENT_SEPARATOR,
    ClassificationReport,
    EnhancementUnavailableError,
    LLMRecommendationSource,
    ReportEnhancer,
    parse_recommendations,
)
from services.classification.services.enhancement import build_prompt


# =============================================================================
# Fakes
# =============================================================================


class StaticSource:
    """Returns fixed recommendations."""

    def __init__(self, recommendations: list[str]) -> None:
        self.recommendations = recommendations
        self.calls = 0

    async def enhance(self, report: ClassificationReport) -> list[str]:
        self.calls += 1
        return self.recommendations


class FailingSource:
    """Always unavailable."""

    async def enhance(self, report: ClassificationReport) -> list[str]:
        raise EnhancementUnavailableError("model offline")


class BrokenSource:
    """Raises a transport error it does not wrap."""

    async def enhance(self, report: ClassificationReport) -> list[str]:
        raise ConnectionError("network down")


class SlowSource:
    """Never answers within the timeout."""

    async def enhance(self, report: ClassificationReport) -> list[str]:
        await asyncio.sleep(5)
        return ["Too late to be useful here"]


class FakeProvider:
    """Minimal stand-in for an LLM provider."""

    def __init__(self, text: str = "", error: Exception | None = None) -> None:
        self.text = text
        self.error = error
        self.prompts: list[str] = []

    async def generate_text(self, prompt: str, system_prompt: str | None = None) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.text


@pytest.fixture
def report() -> ClassificationReport:
    """Report for the high-risk AI demo."""
    return classify_ai_system(DEMO_PROFILES["high-risk"])


# =============================================================================
# ReportEnhancer
# =============================================================================


class TestReportEnhancer:
    """Tests for timeout and fallback behaviour."""

    @pytest.mark.asyncio
    async def test_appends_after_separator(self, report: ClassificationReport) -> None:
        enhancer = ReportEnhancer(StaticSource(["Audit the face matching model for bias"]))

        enhanced = await enhancer.enhance(report)

        assert enhanced.recommended_actions == (
            *report.recommended_actions,
            ENHANCEMENT_SEPARATOR,
            "Audit the face matching model for bias",
        )
        assert enhanced.tier == report.tier
        assert enhanced.score == report.score
        assert enhanced.triggered_criteria == report.triggered_criteria

    @pytest.mark.asyncio
    async def test_unavailable_returns_original(self, report: ClassificationReport) -> None:
        enhanced = await ReportEnhancer(FailingSource()).enhance(report)

        assert enhanced is report

    @pytest.mark.asyncio
    async def test_timeout_returns_original(self, report: ClassificationReport) -> None:
        enhanced = await ReportEnhancer(SlowSource(), timeout_seconds=0.01).enhance(report)

        assert enhanced is report

    @pytest.mark.asyncio
    async def test_unwrapped_error_returns_original(self, report: ClassificationReport) -> None:
        enhanced = await ReportEnhancer(BrokenSource()).enhance(report)

        assert enhanced is report

    @pytest.mark.asyncio
    async def test_empty_result_returns_original(self, report: ClassificationReport) -> None:
        enhanced = await ReportEnhancer(StaticSource([])).enhance(report)

        assert enhanced is report


# =============================================================================
# LLMRecommendationSource
# =============================================================================


class TestLLMRecommendationSource:
    """Tests for the provider-backed source."""

    @pytest.mark.asyncio
    async def test_parses_provider_output(self, report: ClassificationReport) -> None:
        provider = FakeProvider("Suggestions:\n- Document the legal basis for biometric matching\n- short\n")
        source = LLMRecommendationSource(provider)  # type: ignore[arg-type]

        recommendations = await source.enhance(report)

        assert recommendations == ["Document the legal basis for biometric matching"]
        assert "Biometric Employee Monitoring" in provider.prompts[0]

    @pytest.mark.asyncio
    async def test_provider_error_is_unavailable(self, report: ClassificationReport) -> None:
        source = LLMRecommendationSource(FakeProvider(error=ConnectionError("refused")))  # type: ignore[arg-type]

        with pytest.raises(EnhancementUnavailableError, match="ConnectionError"):
            await source.enhance(report)

    @pytest.mark.asyncio
    async def test_unusable_output_is_unavailable(self, report: ClassificationReport) -> None:
        source = LLMRecommendationSource(FakeProvider("I cannot help with that."))  # type: ignore[arg-type]

        with pytest.raises(EnhancementUnavailableError):
            await source.enhance(report)

    @pytest.mark.asyncio
    async def test_end_to_end_fallback(self, report: ClassificationReport) -> None:
        source = LLMRecommendationSource(FakeProvider(error=TimeoutError()))  # type: ignore[arg-type]

        enhanced = await ReportEnhancer(source).enhance(report)

        assert enhanced is report


# =============================================================================
# Parsing
# =============================================================================


class TestParseRecommendations:
    """Tests for extracting recommendations from model output."""

    def test_bullets_and_numbers(self) -> None:
        text = (
            "Here are some measures:\n"
            "- Carry out a fundamental rights impact assessment\n"
            "• Register the system in the EU database\n"
            "3. Define escalation paths for human reviewers\n"
            "Plain prose line that is long enough but not a bullet\n"
        )

        assert parse_recommendations(text) == [
            "Carry out a fundamental rights impact assessment",
            "Register the system in the EU database",
            "Define escalation paths for human reviewers",
        ]

    def test_length_bounds(self) -> None:
        text = "- too short\n- " + "x" * 300 + "\n- Exactly long enough item\n"

        assert parse_recommendations(text) == ["Exactly long enough item"]

    def test_empty(self) -> None:
        assert parse_recommendations("") == []


def test_prompt_contains_report_context(report: ClassificationReport) -> None:
    prompt = build_prompt(report)

    assert "EU AI Act risk classification" in prompt
    assert "Risk tier: high" in prompt
    assert "biometric_data" in prompt
