"""
Weighted Scorer
===============

Continuous risk score in [0, 1].

Algorithm:
1. Sum the weight of every true criterion flag
2. Add scale-factor bonuses (population size, duration)
3. Clamp to 1.0 (saturating, not normalizing)

If the cascade already produced the domain's most severe tier the
scorer returns 1.0 without summing. Tier and score are otherwise
computed independently of each other.

Version: 0.1.0
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum

from services.classification.services.criteria import CriterionSet
from services.classification.services.errors import CriterionConfigurationError


MAX_SCORE = 1.0
SCORE_PRECISION = 4


@dataclass(frozen=True)
class ScaleFactor:
    """Bonus added when a scalar profile value exceeds a breakpoint."""

    field: str
    threshold: float
    bonus: float
    label: str = ""

    def applies(self, values: Mapping[str, float]) -> bool:
        """Strictly-greater-than breakpoint on the named scalar."""
        try:
            return values[self.field] > self.threshold
        except KeyError:
            raise CriterionConfigurationError(
                f"Scale factor references missing value '{self.field}'"
            ) from None


@dataclass(frozen=True)
class ScoreBreakdown:
    """Score with the individual contributions that produced it."""

    score: float
    raw_total: float
    contributions: tuple[tuple[str, float], ...] = ()
    short_circuited: bool = False

    @property
    def clamped(self) -> bool:
        return self.raw_total > MAX_SCORE


class WeightedScorer:
    """
    Sum-and-clamp scorer over a criterion set.

    Example:
        >>> scorer = WeightedScorer(criteria, [ScaleFactor("affected_persons", 100_000, 0.1)])
        >>> scorer.score({"biometric_data": True}, {"affected_persons": 500})
        0.3
    """

    def __init__(
        self,
        criteria: CriterionSet,
        scale_factors: Sequence[ScaleFactor] = (),
        short_circuit_tier: Enum | None = None,
    ) -> None:
        """
        Initialize the scorer.

        Args:
            criteria: Weight table for the domain
            scale_factors: Magnitude-driven bonuses
            short_circuit_tier: Tier that forces the maximum score
        """
        for factor in scale_factors:
            if not 0.0 < factor.bonus <= MAX_SCORE:
                raise CriterionConfigurationError(
                    f"Scale bonus for '{factor.field}' must be in (0, 1], got {factor.bonus}"
                )
        self.criteria = criteria
        self.scale_factors = tuple(scale_factors)
        self.short_circuit_tier = short_circuit_tier

    def breakdown(
        self,
        flags: Mapping[str, bool],
        values: Mapping[str, float],
        tier: Enum | None = None,
    ) -> ScoreBreakdown:
        """
        Compute the score and its contributions.

        Args:
            flags: Criterion key to boolean value
            values: Scalar profile values referenced by scale factors
            tier: Tier from the cascade, if already known

        Returns:
            ScoreBreakdown

        Raises:
            UnknownCriterionError: If a true flag has no configured weight
        """
        if self.short_circuit_tier is not None and tier == self.short_circuit_tier:
            return ScoreBreakdown(
                score=MAX_SCORE,
                raw_total=MAX_SCORE,
                short_circuited=True,
            )

        contributions: list[tuple[str, float]] = []
        for key, value in flags.items():
            if value:
                contributions.append((key, self.criteria.weight_of(key)))

        for factor in self.scale_factors:
            if factor.applies(values):
                contributions.append((factor.label or factor.field, factor.bonus))

        total = sum(weight for _, weight in contributions)

        return ScoreBreakdown(
            score=round(min(total, MAX_SCORE), SCORE_PRECISION),
            raw_total=total,
            contributions=tuple(contributions),
        )

    def score(
        self,
        flags: Mapping[str, bool],
        values: Mapping[str, float],
        tier: Enum | None = None,
    ) -> float:
        """Compute the clamped score only."""
        return self.breakdown(flags, values, tier).score
