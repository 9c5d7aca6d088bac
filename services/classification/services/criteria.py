"""
Criterion Set
=============

Static table of weighted criteria for one classification domain.

Each domain owns an independent set. The same concept (e.g. large scale)
carries a different weight per regulation, so sets are never shared.

Version: 0.1.0
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType

from services.classification.services.errors import (
    CriterionConfigurationError,
    UnknownCriterionError,
)


class CriterionKind(str, Enum):
    """Which tier family a criterion primarily feeds."""

    PROHIBITS = "prohibits"
    HIGH = "high"
    LIMITED = "limited"
    SCALE = "scale"

    @property
    def severity(self) -> int:
        """Severity weight used when ranking actions."""
        return _SEVERITY[self]


_SEVERITY = {
    CriterionKind.PROHIBITS: 4,
    CriterionKind.HIGH: 3,
    CriterionKind.LIMITED: 2,
    CriterionKind.SCALE: 1,
}


@dataclass(frozen=True)
class Criterion:
    """A single weighted boolean risk factor."""

    key: str
    weight: float
    kind: CriterionKind
    label: str


class CriterionSet:
    """
    Immutable weight table for one domain.

    Example:
        >>> criteria = CriterionSet("ai-system", [
        ...     Criterion("biometric_data", 0.3, CriterionKind.HIGH, "Biometric data"),
        ... ])
        >>> criteria.weight_of("biometric_data")
        0.3
    """

    def __init__(self, domain: str, criteria: Iterable[Criterion]) -> None:
        """
        Build and validate the set.

        Args:
            domain: Domain key the set belongs to
            criteria: Criterion definitions

        Raises:
            CriterionConfigurationError: On duplicate keys or weights outside (0, 1]
        """
        table: dict[str, Criterion] = {}
        for criterion in criteria:
            if criterion.key in table:
                raise CriterionConfigurationError(
                    f"Duplicate criterion '{criterion.key}' in domain '{domain}'"
                )
            if not 0.0 < criterion.weight <= 1.0:
                raise CriterionConfigurationError(
                    f"Weight of '{criterion.key}' must be in (0, 1], got {criterion.weight}"
                )
            table[criterion.key] = criterion

        if not table:
            raise CriterionConfigurationError(f"Criterion set for '{domain}' is empty")

        self.domain = domain
        self._criteria = MappingProxyType(table)

    def get(self, key: str) -> Criterion:
        """
        Look up a criterion.

        Raises:
            UnknownCriterionError: If the key is not configured
        """
        try:
            return self._criteria[key]
        except KeyError:
            raise UnknownCriterionError(key, self.domain) from None

    def weight_of(self, key: str) -> float:
        """
        Return the configured weight for a criterion key.

        Never defaults to 0; a missing key is a configuration bug.

        Raises:
            UnknownCriterionError: If the key is not configured
        """
        return self.get(key).weight

    def label_of(self, key: str) -> str:
        return self.get(key).label

    def keys(self) -> tuple[str, ...]:
        return tuple(self._criteria)

    def __contains__(self, key: object) -> bool:
        return key in self._criteria

    def __iter__(self) -> Iterator[Criterion]:
        return iter(self._criteria.values())

    def __len__(self) -> int:
        return len(self._criteria)

    def __repr__(self) -> str:
        return f"CriterionSet(domain={self.domain!r}, criteria={len(self)})"
