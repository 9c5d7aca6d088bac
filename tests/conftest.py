"""
Test Configuration
==================

Pytest fixtures for compliance classifier tests.
"""

import os
from collections.abc import AsyncGenerator
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Set test environment
os.environ["ENVIRONMENT"] = "testing"
os.environ["ENHANCEMENT_ENABLED"] = "false"


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """Use asyncio backend for async tests."""
    return "asyncio"


@pytest_asyncio.fixture
async def classification_client() -> AsyncGenerator[AsyncClient, None]:
    """Create test client for the Classification Service."""
    from services.classification.main import app

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client


@pytest.fixture
def sample_ai_system_data() -> dict[str, Any]:
    """Sample AI system profile in wire format."""
    return {
        "systemName": "Applicant Screening",
        "systemType": "Ranking System",
        "applicationDomain": "Human Resources",
        "systemDescription": "Ranks incoming job applications",
        "dataTypes": ["CV data", "Assessment results"],
        "employmentContext": True,
        "automatedDecisionMaking": True,
        "estimatedAffectedPersons": 2000,
    }


@pytest.fixture
def sample_impact_assessment_data() -> dict[str, Any]:
    """Sample processing profile in wire format."""
    return {
        "processingName": "Patient portal",
        "processingDescription": "Online appointment booking with health questionnaire",
        "dataTypes": ["Health data", "Contact data"],
        "purposes": ["Appointment booking"],
        "technologies": ["Web application"],
        "dataSubjects": ["Patients"],
        "specialCategories": True,
        "systematicMonitoring": False,
        "automatedDecisionMaking": True,
        "estimatedDataSubjects": 5000,
    }


@pytest.fixture
def sample_organization_data() -> dict[str, Any]:
    """Sample organization profile in wire format."""
    return {
        "companyName": "Beispiel Consulting GmbH",
        "industry": "Consulting",
        "employeeCount": 60,
        "dataCategories": ["Customer data", "Employee data"],
        "hasThirdCountryTransfer": True,
        "hasDataProtectionOfficer": False,
    }
