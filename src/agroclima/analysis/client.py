"""HTTP client for the Gemini generative-text API."""

import asyncio
import logging
from typing import Optional

import httpx

from agroclima.config import (
    GEMINI_API_KEY, GEMINI_BASE_URL, GEMINI_MODEL, REQUEST_TIMEOUT_SECONDS
)
from agroclima.errors import AnalysisProviderError, ConfigurationError

logger = logging.getLogger(__name__)


class GeminiClient:
    """Async client for the Gemini ``generateContent`` endpoint."""

    def __init__(
        self,
        api_key: str = GEMINI_API_KEY,
        model: str = GEMINI_MODEL,
        base_url: str = GEMINI_BASE_URL,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """Initialize the Gemini client.

        Args:
            api_key: Gemini API key
            model: Model name, e.g. "gemini-2.0-flash"
            base_url: API base URL
            timeout: Upper bound in seconds for the whole request
            transport: Optional httpx transport (used to fake the provider)
        """
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.client = httpx.AsyncClient(timeout=timeout, transport=transport)

    def ensure_configured(self) -> None:
        """Fail fast when the API key is missing.

        Raises:
            ConfigurationError: If no API key is configured
        """
        if not self.api_key:
            logger.error("GEMINI_API_KEY is not set")
            raise ConfigurationError("AI provider API key is not configured")

    async def generate(self, prompt: str) -> str:
        """Send a prompt and return the text of the first candidate.

        Args:
            prompt: Instruction text

        Returns:
            Reply text, expected to contain a JSON object

        Raises:
            ConfigurationError: If no API key is configured
            AnalysisProviderError: On timeout, non-success status or an empty reply
        """
        self.ensure_configured()

        url = f"{self.base_url}/models/{self.model}:generateContent"
        payload = {"contents": [{"parts": [{"text": prompt}]}]}
        headers = {"x-goog-api-key": self.api_key}

        logger.info(f"Requesting analysis from {self.model} ({len(prompt)} prompt chars)")

        try:
            response = await asyncio.wait_for(
                self.client.post(url, json=payload, headers=headers),
                timeout=self.timeout
            )
            response.raise_for_status()
            result = response.json()

        except (httpx.TimeoutException, asyncio.TimeoutError) as e:
            logger.error(f"AI provider timed out after {self.timeout}s")
            raise AnalysisProviderError("AI provider request timed out") from e
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.error(f"HTTP error from AI provider: {status} - {e.response.text[:200]}")
            raise AnalysisProviderError(f"AI provider returned {status}", status_code=status) from e
        except httpx.RequestError as e:
            logger.error(f"Request error to AI provider: {type(e).__name__}")
            raise AnalysisProviderError("AI provider request failed") from e
        except ValueError as e:
            logger.error(f"AI provider returned a non-JSON body: {e}")
            raise AnalysisProviderError("AI provider returned an invalid body") from e

        try:
            text = result["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError) as e:
            logger.error(f"AI provider reply has no candidate text: {str(result)[:200]}")
            raise AnalysisProviderError("AI provider reply has no candidate text") from e

        return text

    async def aclose(self):
        """Close the async HTTP client."""
        await self.client.aclose()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.aclose()
