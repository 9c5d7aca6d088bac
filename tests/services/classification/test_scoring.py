"""
Weighted Scorer Tests
=====================

Tests for sum-and-clamp scoring.

Version: 0.1.0
"""

from enum import Enum

import pytest

from services.classification.services.criteria import Criterion, CriterionKind, CriterionSet
from services.classification.services.errors import (
    CriterionConfigurationError,
    UnknownCriterionError,
)
from services.classification.services.scoring import ScaleFactor, WeightedScorer


class Tier(str, Enum):
    PROHIBITED = "prohibited"
    OTHER = "other"


CRITERIA = CriterionSet(
    "test",
    [
        Criterion("a", 0.6, CriterionKind.HIGH, "A"),
        Criterion("b", 0.5, CriterionKind.HIGH, "B"),
        Criterion("c", 0.1, CriterionKind.LIMITED, "C"),
    ],
)


@pytest.fixture
def scorer() -> WeightedScorer:
    """Scorer with two scale breakpoints."""
    return WeightedScorer(
        CRITERIA,
        [
            ScaleFactor("persons", 100_000, 0.1, "over_100k"),
            ScaleFactor("persons", 1_000_000, 0.1, "over_1m"),
        ],
        short_circuit_tier=Tier.PROHIBITED,
    )


class TestWeightedScorer:
    """Tests for score computation."""

    def test_sum_of_true_flags(self, scorer: WeightedScorer) -> None:
        score = scorer.score({"a": False, "b": False, "c": True}, {"persons": 10})

        assert score == 0.1

    def test_all_false_is_zero(self, scorer: WeightedScorer) -> None:
        assert scorer.score({"a": False, "b": False, "c": False}, {"persons": 10}) == 0.0

    def test_clamped_to_one(self, scorer: WeightedScorer) -> None:
        breakdown = scorer.breakdown({"a": True, "b": True, "c": True}, {"persons": 2_000_000})

        assert breakdown.score == 1.0
        assert breakdown.clamped
        assert breakdown.raw_total > 1.0

    def test_breakpoints_are_strict(self, scorer: WeightedScorer) -> None:
        flags = {"a": False, "b": False, "c": False}

        assert scorer.score(flags, {"persons": 100_000}) == 0.0
        assert scorer.score(flags, {"persons": 100_001}) == 0.1
        assert scorer.score(flags, {"persons": 1_000_001}) == 0.2

    def test_short_circuit_tier(self, scorer: WeightedScorer) -> None:
        breakdown = scorer.breakdown({"a": False, "b": False, "c": False}, {"persons": 1}, Tier.PROHIBITED)

        assert breakdown.score == 1.0
        assert breakdown.short_circuited

    def test_other_tier_is_not_short_circuited(self, scorer: WeightedScorer) -> None:
        assert scorer.score({"a": False, "b": False, "c": True}, {"persons": 1}, Tier.OTHER) == 0.1

    def test_contributions(self, scorer: WeightedScorer) -> None:
        breakdown = scorer.breakdown({"a": True, "b": False, "c": False}, {"persons": 200_000})

        assert breakdown.contributions == (("a", 0.6), ("over_100k", 0.1))

    def test_score_is_rounded(self, scorer: WeightedScorer) -> None:
        assert scorer.score({"a": True, "b": False, "c": True}, {"persons": 1}) == 0.7

    def test_unknown_flag_is_an_error(self, scorer: WeightedScorer) -> None:
        with pytest.raises(UnknownCriterionError):
            scorer.score({"unknown": True}, {"persons": 1})

    def test_missing_scale_value_is_an_error(self, scorer: WeightedScorer) -> None:
        with pytest.raises(CriterionConfigurationError):
            scorer.score({"a": True}, {})

    def test_invalid_bonus_rejected(self) -> None:
        with pytest.raises(CriterionConfigurationError):
            WeightedScorer(CRITERIA, [ScaleFactor("persons", 1, 0.0)])
