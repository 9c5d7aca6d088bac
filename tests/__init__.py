"""
Compliance Classifier Test Suite
================================

Test organization:
- tests/unit/                      - Shared library tests (settings, LLM providers)
- tests/services/classification/  - Engine, domain and API tests

Run tests:
    pytest                          # All tests
    pytest tests/unit               # Unit tests only
    pytest --cov=services          # With coverage
"""
