"""
Compliance Classifier Services
==============================

Services:
- classification: Rule-based GDPR and EU AI Act classification
"""

__all__ = [
    "classification",
]
