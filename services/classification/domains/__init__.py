"""
Classification Domains
======================

Registry of the supported classification domains.

- activity: GDPR Art. 30 processing activities
- impact-assessment: GDPR Art. 35 DPIA requirement
- ai-system: EU AI Act risk tier

Version: 0.1.0
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ValidationError

from services.classification.domains import activity, ai_system, impact_assessment
from services.classification.models import (
    AISystemProfile,
    ImpactAssessmentProfile,
    OrganizationProfile,
)
from services.classification.services import (
    ClassificationReport,
    ComplianceAggregator,
    DomainEngine,
    ProfileValidationError,
    UnknownDomainError,
)
from shared.config import settings


@dataclass(frozen=True)
class DomainHandler:
    """Everything the HTTP layer needs for one domain."""

    key: str
    profile_model: type[BaseModel]
    engine: DomainEngine
    classify: Callable[[Any], ClassificationReport]
    demo_profiles: Mapping[str, BaseModel]


DOMAINS: dict[str, DomainHandler] = {
    activity.DOMAIN: DomainHandler(
        key=activity.DOMAIN,
        profile_model=OrganizationProfile,
        engine=activity.ENGINE,
        classify=activity.classify_activity,
        demo_profiles=activity.DEMO_PROFILES,
    ),
    impact_assessment.DOMAIN: DomainHandler(
        key=impact_assessment.DOMAIN,
        profile_model=ImpactAssessmentProfile,
        engine=impact_assessment.ENGINE,
        classify=impact_assessment.classify_impact_assessment,
        demo_profiles=impact_assessment.DEMO_PROFILES,
    ),
    ai_system.DOMAIN: DomainHandler(
        key=ai_system.DOMAIN,
        profile_model=AISystemProfile,
        engine=ai_system.ENGINE,
        classify=ai_system.classify_ai_system,
        demo_profiles=ai_system.DEMO_PROFILES,
    ),
}


def get_domain(key: str) -> DomainHandler:
    """
    Look up a registered domain.

    Raises:
        UnknownDomainError: If the key is not registered
    """
    try:
        return DOMAINS[key]
    except KeyError:
        raise UnknownDomainError(key) from None


def parse_profile(domain: str, data: Mapping[str, Any]) -> BaseModel:
    """
    Validate raw profile data for a domain.

    Args:
        domain: Domain key
        data: Raw (camelCase or snake_case) profile data

    Returns:
        Validated profile model

    Raises:
        UnknownDomainError: If the domain is not registered
        ProfileValidationError: If the data is malformed
    """
    handler = get_domain(domain)
    try:
        return handler.profile_model.model_validate(data)
    except ValidationError as e:
        raise ProfileValidationError(
            f"Invalid {domain} profile",
            errors=e.errors(include_url=False, include_context=False),
        ) from e


def classify_profile(domain: str, profile: BaseModel) -> ClassificationReport:
    """Classify a validated profile with the domain's classifier."""
    return get_domain(domain).classify(profile)


def demo_report(domain: str, variant: str = "default") -> ClassificationReport:
    """
    Classify one of the domain's fixed demonstration profiles.

    Raises:
        UnknownDomainError: If the domain is not registered
        KeyError: If the variant does not exist
    """
    handler = get_domain(domain)
    return handler.classify(handler.demo_profiles[variant])


def build_aggregator() -> ComplianceAggregator:
    """Aggregator over all registered domains using configured weights."""
    aggregation = settings.aggregation
    return ComplianceAggregator(
        engines={key: handler.engine for key, handler in DOMAINS.items()},
        domain_weights={
            activity.DOMAIN: aggregation.gdpr_weight,
            impact_assessment.DOMAIN: aggregation.gdpr_weight,
            ai_system.DOMAIN: aggregation.ai_weight,
        },
        priority_cap=aggregation.priority_cap,
    )


__all__ = [
    "DOMAINS",
    "DomainHandler",
    "build_aggregator",
    "classify_profile",
    "demo_report",
    "get_domain",
    "parse_profile",
]
