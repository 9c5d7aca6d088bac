"""
Criterion Set Tests
===================

Tests for weighted criterion tables.

Version: 0.1.0
"""

import pytest

from services.classification.services.criteria import Criterion, CriterionKind, CriterionSet
from services.classification.services.errors import (
    ClassificationError,
    CriterionConfigurationError,
    UnknownCriterionError,
)


@pytest.fixture
def criteria() -> CriterionSet:
    """Small criterion set."""
    return CriterionSet(
        "test",
        [
            Criterion("biometric_data", 0.3, CriterionKind.HIGH, "Biometric data"),
            Criterion("user_interaction", 0.1, CriterionKind.LIMITED, "User interaction"),
        ],
    )


class TestCriterionSet:
    """Tests for lookups and validation."""

    def test_weight_lookup(self, criteria: CriterionSet) -> None:
        assert criteria.weight_of("biometric_data") == 0.3
        assert criteria.label_of("user_interaction") == "User interaction"

    def test_unknown_key_is_an_error(self, criteria: CriterionSet) -> None:
        """A missing key never defaults to weight 0."""
        with pytest.raises(UnknownCriterionError) as exc_info:
            criteria.weight_of("social_scoring")

        assert exc_info.value.key == "social_scoring"
        assert exc_info.value.domain == "test"
        assert "social_scoring" in str(exc_info.value)

    def test_unknown_criterion_error_hierarchy(self) -> None:
        error = UnknownCriterionError("x", "test")

        assert isinstance(error, KeyError)
        assert isinstance(error, ClassificationError)

    def test_container_protocol(self, criteria: CriterionSet) -> None:
        assert "biometric_data" in criteria
        assert "missing" not in criteria
        assert len(criteria) == 2
        assert criteria.keys() == ("biometric_data", "user_interaction")
        assert [c.key for c in criteria] == ["biometric_data", "user_interaction"]

    def test_duplicate_key_rejected(self) -> None:
        with pytest.raises(CriterionConfigurationError, match="Duplicate"):
            CriterionSet(
                "test",
                [
                    Criterion("a", 0.1, CriterionKind.HIGH, "A"),
                    Criterion("a", 0.2, CriterionKind.HIGH, "A again"),
                ],
            )

    @pytest.mark.parametrize("weight", [0.0, -0.1, 1.5])
    def test_weight_out_of_range_rejected(self, weight: float) -> None:
        with pytest.raises(CriterionConfigurationError):
            CriterionSet("test", [Criterion("a", weight, CriterionKind.HIGH, "A")])

    def test_empty_set_rejected(self) -> None:
        with pytest.raises(CriterionConfigurationError, match="empty"):
            CriterionSet("test", [])


class TestCriterionKind:
    """Tests for severity ordering."""

    def test_severity_order(self) -> None:
        severities = [kind.severity for kind in CriterionKind]

        assert severities == sorted(severities, reverse=True)
        assert CriterionKind.PROHIBITS.severity == 4
        assert CriterionKind.SCALE.severity == 1
