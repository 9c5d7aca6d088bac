"""
Classification Routes
=====================

API route handlers for the Classification Service.
"""

from services.classification.routes import classify, summary


__all__ = ["classify", "summary"]
