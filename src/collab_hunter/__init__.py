"""
Collab Hunter

Co-branding research missions run against a generative search service, with
tolerant extraction, schema validation and durable notebooks of findings.
"""

__version__ = "1.0.0"
