"""Agentic Readiness — classify OpenAPI specs for AI agent consumption."""

__version__ = "0.1.0"
