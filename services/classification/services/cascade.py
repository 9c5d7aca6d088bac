"""
Cascading Classifier
====================

Determines the tier of a profile by testing tier predicates from most
to least severe and returning the first match.

A tier predicate is a set of triggers with OR semantics: any single
trigger is sufficient. A trigger is a conjunction over boolean
criterion flags. Lower tiers are only reached once every higher tier
has been ruled out, so exactly one tier is returned per profile.

Free-text keyword matching lives in `keyword_signal` and is consumed as
an ordinary derived flag. It is a weak signal and deliberately shallow.

Version: 0.1.0
"""

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, TypeVar

from services.classification.services.criteria import CriterionSet
from services.classification.services.errors import (
    CriterionConfigurationError,
    UnknownCriterionError,
)
from shared.logging import get_logger


logger = get_logger(__name__)

TierT = TypeVar("TierT", bound=Enum)


def keyword_signal(text: str | None, keywords: Iterable[str]) -> bool:
    """
    Case-insensitive substring match of any keyword in free text.

    Args:
        text: Free-text description (may be empty)
        keywords: Lower-case keywords

    Returns:
        True if any keyword occurs in the text
    """
    if not text:
        return False
    lowered = text.lower()
    return any(keyword in lowered for keyword in keywords)


def _flag(flags: Mapping[str, bool], key: str, domain: str) -> bool:
    try:
        return bool(flags[key])
    except KeyError:
        raise UnknownCriterionError(key, domain) from None


# =============================================================================
# Rule Definitions
# =============================================================================


@dataclass(frozen=True)
class Trigger:
    """
    One sufficient condition for a tier.

    Fires when every key in `all_of` is true, at least `min_any` keys of
    `any_of` are true (ignored when `any_of` is empty) and every key in
    `none_of` is false.
    """

    all_of: tuple[str, ...] = ()
    any_of: tuple[str, ...] = ()
    none_of: tuple[str, ...] = ()
    min_any: int = 1
    name: str = ""

    def keys(self) -> tuple[str, ...]:
        return (*self.all_of, *self.any_of, *self.none_of)

    def evaluate(self, flags: Mapping[str, bool], domain: str) -> tuple[str, ...] | None:
        """
        Evaluate the trigger.

        Returns:
            The true keys that made the trigger fire, or None if it did not fire
        """
        if not all(_flag(flags, key, domain) for key in self.all_of):
            return None
        if any(_flag(flags, key, domain) for key in self.none_of):
            return None

        matched_any = tuple(key for key in self.any_of if _flag(flags, key, domain))
        if self.any_of and len(matched_any) < self.min_any:
            return None

        return (*self.all_of, *matched_any)


@dataclass(frozen=True)
class TierRule(Generic[TierT]):
    """Tier paired with the triggers that select it."""

    tier: TierT
    triggers: tuple[Trigger, ...]

    def evaluate(self, flags: Mapping[str, bool], domain: str) -> tuple[str, ...] | None:
        """
        Evaluate all triggers with OR semantics.

        Returns:
            Ordered, de-duplicated contributing keys of every fired trigger,
            or None if no trigger fired
        """
        fired = False
        contributing: dict[str, None] = {}
        for trigger in self.triggers:
            keys = trigger.evaluate(flags, domain)
            if keys is None:
                continue
            fired = True
            contributing.update(dict.fromkeys(keys))
        return tuple(contributing) if fired else None


@dataclass(frozen=True)
class CascadeOutcome(Generic[TierT]):
    """Matched tier plus the criterion keys that put the profile there."""

    tier: TierT
    triggered: tuple[str, ...] = field(default_factory=tuple)


# =============================================================================
# Classifier
# =============================================================================


class CascadingClassifier(Generic[TierT]):
    """
    Severity-ordered, first-match tier classifier.

    Example:
        >>> classifier = CascadingClassifier(criteria, rules, fallback=AIRiskTier.MINIMAL)
        >>> outcome = classifier.classify(profile.flags())
        >>> outcome.tier, outcome.triggered
    """

    def __init__(
        self,
        criteria: CriterionSet,
        rules: Sequence[TierRule[TierT]],
        fallback: TierT,
    ) -> None:
        """
        Initialize and validate the cascade.

        Args:
            criteria: Criterion set every trigger key must belong to
            rules: Tier rules, most severe first
            fallback: Least severe tier, returned when nothing matches

        Raises:
            UnknownCriterionError: If a trigger references an unknown key
            CriterionConfigurationError: If rules are not in severity order
        """
        self.criteria = criteria
        self.rules = tuple(rules)
        self.fallback = fallback

        for rule in self.rules:
            if not rule.triggers:
                raise CriterionConfigurationError(f"Tier '{rule.tier.value}' has no triggers")
            for trigger in rule.triggers:
                for key in trigger.keys():
                    criteria.get(key)

        # Enum declaration order is severity order (most severe first)
        order = list(type(fallback))
        positions = [order.index(rule.tier) for rule in self.rules]
        positions.append(order.index(fallback))
        if positions != sorted(positions) or len(set(positions)) != len(positions):
            raise CriterionConfigurationError(
                f"Rules for '{criteria.domain}' must be ordered from most to least severe"
            )

    def classify(self, flags: Mapping[str, bool]) -> CascadeOutcome[TierT]:
        """
        Return the first tier whose predicate holds.

        Args:
            flags: Criterion key to boolean value for the profile

        Returns:
            CascadeOutcome with the matched tier and contributing keys
        """
        for rule in self.rules:
            triggered = rule.evaluate(flags, self.criteria.domain)
            if triggered is not None:
                logger.debug(
                    "cascade_matched",
                    domain=self.criteria.domain,
                    tier=rule.tier.value,
                    triggered=list(triggered),
                )
                return CascadeOutcome(tier=rule.tier, triggered=triggered)

        return CascadeOutcome(tier=self.fallback)
