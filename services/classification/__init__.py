"""
Classification Service
======================

Rule-based compliance classification service.

Features:
- GDPR Art. 30 processing activity risk and activity catalogue generation
- GDPR Art. 35 impact assessment requirement
- EU AI Act risk tiering
- Organization-level compliance summary
- Optional LLM-enhanced recommendations

Port: 8010
"""

__version__ = "0.1.0"
