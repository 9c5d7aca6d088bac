"""
Report Enhancement
==================

Optional, best-effort enrichment of a report with LLM-generated
recommendations.

One attempt, bounded by a timeout. Any failure (timeout, network error,
unusable response) degrades to the template-only report and is logged
at debug level. Enhancement never changes tier, score or triggered
criteria.

Version: 0.1.0
"""

import asyncio
import re
from typing import Protocol

from services.classification.services.errors import EnhancementUnavailableError
from services.classification.services.report import ClassificationReport
from shared.llm import LLMProvider, get_llm_provider
from shared.logging import get_logger


logger = get_logger(__name__)

ENHANCEMENT_SEPARATOR = "--- AI-enhanced recommendations ---"

MIN_RECOMMENDATION_LENGTH = 15
MAX_RECOMMENDATION_LENGTH = 300

_BULLET = re.compile(r"^(?:[-•]|\d+\.)")
_BULLET_PREFIX = re.compile(r"^[-•\d.]+\s*")

SYSTEM_PROMPT = (
    "You are a European data protection and AI regulation expert. "
    "You refine compliance recommendations for GDPR (Art. 30, Art. 35) "
    "and the EU AI Act. Be specific and practical."
)

_REGULATION = {
    "activity": "GDPR Art. 30 record of processing activities",
    "impact-assessment": "GDPR Art. 35 data protection impact assessment",
    "ai-system": "EU AI Act risk classification",
}


class RecommendationSource(Protocol):
    """Collaborator that produces additional recommendations."""

    async def enhance(self, report: ClassificationReport) -> list[str]:
        """
        Generate additional recommendations for a report.

        Raises:
            EnhancementUnavailableError: If nothing usable could be produced
        """
        ...


def parse_recommendations(text: str) -> list[str]:
    """
    Extract bullet or numbered lines from free-form model output.

    Args:
        text: Raw model output

    Returns:
        Recommendations between 15 and 300 characters, in order
    """
    recommendations: list[str] = []
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not _BULLET.match(line):
            continue
        recommendation = _BULLET_PREFIX.sub("", line, count=1).strip()
        if MIN_RECOMMENDATION_LENGTH < len(recommendation) < MAX_RECOMMENDATION_LENGTH:
            recommendations.append(recommendation)
    return recommendations


def build_prompt(report: ClassificationReport) -> str:
    """Build the enhancement prompt for a report."""
    triggered = "\n- ".join(report.triggered_criteria) or "none"
    actions = "\n- ".join(report.recommended_actions) or "none"
    return (
        f"Context: {_REGULATION.get(report.domain, report.domain)}\n"
        f"Subject: {report.subject or 'unnamed'}\n"
        f"Risk tier: {report.tier.value}\n"
        f"Risk score: {report.score:.2f}\n\n"
        f"Triggered criteria:\n- {triggered}\n\n"
        f"Current recommended actions:\n- {actions}\n\n"
        "Suggest 3-5 additional, specific measures as a bulleted list. "
        "Reference concrete articles and supervisory authority guidance where relevant."
    )


class LLMRecommendationSource:
    """Recommendation source backed by the configured LLM provider."""

    def __init__(self, provider: LLMProvider | None = None) -> None:
        self._provider = provider

    async def enhance(self, report: ClassificationReport) -> list[str]:
        try:
            provider = self._provider or get_llm_provider()
            text = await provider.generate_text(build_prompt(report), system_prompt=SYSTEM_PROMPT)
        except Exception as e:
            raise EnhancementUnavailableError(f"{type(e).__name__}: {e}") from e

        recommendations = parse_recommendations(text)
        if not recommendations:
            raise EnhancementUnavailableError("Model response contained no usable recommendations")
        return recommendations


class ReportEnhancer:
    """
    Wraps a recommendation source with a timeout and graceful fallback.

    Example:
        >>> enhancer = ReportEnhancer(LLMRecommendationSource(), timeout_seconds=30)
        >>> report = await enhancer.enhance(report)
    """

    def __init__(self, source: RecommendationSource, timeout_seconds: float = 30.0) -> None:
        self.source = source
        self.timeout_seconds = timeout_seconds

    async def enhance(self, report: ClassificationReport) -> ClassificationReport:
        """
        Append generated recommendations after a separator line.

        Returns:
            Enhanced copy of the report, or the original report on any failure
        """
        try:
            async with asyncio.timeout(self.timeout_seconds):
                extra = await self.source.enhance(report)
        except Exception as e:
            # Best effort: any source failure falls back to the base report
            logger.debug(
                "enhancement_unavailable",
                domain=report.domain,
                error=str(e) or type(e).__name__,
                error_type=type(e).__name__,
            )
            return report

        if not extra:
            return report

        logger.info("report_enhanced", domain=report.domain, added=len(extra))
        return report.with_recommendations(
            [*report.recommended_actions, ENHANCEMENT_SEPARATOR, *extra]
        )
