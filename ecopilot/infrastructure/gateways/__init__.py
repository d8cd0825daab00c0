"""
Gateways package - Infrastructure Layer

HTTP clients for external services.
"""

from ecopilot.infrastructure.gateways.gemini_gateway import GeminiGateway

__all__ = ["GeminiGateway"]
