"""
AI analysis integration.

Responsibilities:
- Manage Groq API configuration and credentials.
- Identify a dish from a photo (vision model) or a text description.
- Normalize the model's JSON reply into an ``AnalyzedDish``.
- Report every failure as a single ``AnalysisFailed`` error.
"""
