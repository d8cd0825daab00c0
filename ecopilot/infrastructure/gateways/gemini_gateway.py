"""
Infrastructure Gateway - Gemini Implementation

Text generation through the Gemini ``generateContent`` REST endpoint. Used
by the decision engine as its AI backend.
"""

from typing import Any, Dict, Optional

import httpx
import structlog

from ecopilot.domain.entities.errors import DecisionBackendError

logger = structlog.get_logger(__name__)

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com"
DEFAULT_MODEL = "gemini-3-flash-preview"


class GeminiGateway:
    """Implementation of the decision backend using the Gemini REST API."""

    def __init__(
        self,
        api_key: Optional[str],
        model: str = DEFAULT_MODEL,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the Gemini gateway.

        Args:
            api_key: Gemini API key; an empty key leaves the gateway unconfigured
            model: Model name used in the request path
            base_url: API root (e.g., "https://generativelanguage.googleapis.com")
            timeout: Request timeout in seconds
            transport: Optional httpx transport, mainly for tests
        """
        self.api_key = api_key or ""
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @property
    def model_name(self) -> str:
        return self.model

    def is_configured(self) -> bool:
        return bool(self.api_key.strip())

    async def generate(self, prompt: str) -> str:
        """Send ``prompt`` and return the first candidate's text."""
        if not self.is_configured():
            raise DecisionBackendError("Gemini API key is not configured")

        url = f"{self.base_url}/v1beta/models/{self.model}:generateContent"
        body = {"contents": [{"parts": [{"text": prompt}]}]}

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.post(
                    url,
                    params={"key": self.api_key},
                    json=body,
                    headers={"Content-Type": "application/json"},
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(
                "Gemini HTTP error",
                status_code=e.response.status_code,
                model=self.model,
            )
            raise DecisionBackendError(
                f"Gemini HTTP error {e.response.status_code}",
                {"status_code": e.response.status_code},
            ) from e
        except httpx.RequestError as e:
            logger.error("Gemini request error", error=str(e), model=self.model)
            raise DecisionBackendError(f"Gemini request failed: {str(e)}") from e
        except ValueError as e:
            raise DecisionBackendError(f"Gemini returned non-JSON body: {str(e)}") from e

        return self._extract_text(data)

    @staticmethod
    def _extract_text(data: Dict[str, Any]) -> str:
        try:
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError) as e:
            raise DecisionBackendError("Gemini response has no candidate text") from e
        if not isinstance(text, str) or not text.strip():
            raise DecisionBackendError("Gemini response text is empty")
        return text
