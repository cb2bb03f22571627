"""HTTP client for the Visual Crossing weather API."""

import asyncio
import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from agroclima.config import (
    VISUAL_CROSSING_API_KEY, VISUAL_CROSSING_BASE_URL, REQUEST_TIMEOUT_SECONDS
)
from agroclima.errors import ConfigurationError, WeatherProviderError
from agroclima.weather.models import WeatherForecast

logger = logging.getLogger(__name__)


class VisualCrossingClient:
    """Async client for fetching daily forecasts from the Visual Crossing Timeline API."""

    def __init__(
        self,
        api_key: str = VISUAL_CROSSING_API_KEY,
        base_url: str = VISUAL_CROSSING_BASE_URL,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """Initialize the weather client.

        Args:
            api_key: Visual Crossing API key
            base_url: Base URL of the timeline endpoint
            timeout: Upper bound in seconds for the whole request
            transport: Optional httpx transport (used to fake the provider)
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def get_forecast(self, lat: float, lon: float) -> WeatherForecast:
        """Fetch the multi-day forecast for given coordinates.

        Args:
            lat: Latitude in decimal degrees
            lon: Longitude in decimal degrees

        Returns:
            Parsed forecast with resolved address and daily entries

        Raises:
            ConfigurationError: If no API key is configured
            WeatherProviderError: On timeout, non-success status or invalid body
        """
        if not self.api_key:
            logger.error("VISUAL_CROSSING_API_KEY is not set")
            raise ConfigurationError("Weather provider API key is not configured")

        url = f"{self.base_url}/{lat},{lon}"
        params = {"unitGroup": "metric", "contentType": "json", "key": self.api_key}

        logger.info(f"Fetching forecast for lat={lat}, lon={lon}")

        try:
            response = await asyncio.wait_for(self.client.get(url, params=params), timeout=self.timeout)
            response.raise_for_status()
            data = response.json()

        except (httpx.TimeoutException, asyncio.TimeoutError) as e:
            logger.error(f"Weather provider timed out after {self.timeout}s for lat={lat}, lon={lon}")
            raise WeatherProviderError("Weather provider request timed out") from e
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.error(f"HTTP error from weather provider: {status} - {e.response.text[:200]}")
            raise WeatherProviderError(f"Weather provider returned {status}", status_code=status) from e
        except httpx.RequestError as e:
            logger.error(f"Request error to weather provider: {type(e).__name__}")
            raise WeatherProviderError("Weather provider request failed") from e
        except ValueError as e:
            logger.error(f"Weather provider returned a non-JSON body: {e}")
            raise WeatherProviderError("Weather provider returned an invalid body") from e

        try:
            forecast = WeatherForecast.model_validate(data)
        except ValidationError as e:
            logger.error(f"Invalid weather provider response format: {e}")
            raise WeatherProviderError("Weather provider returned an unexpected format") from e

        logger.info(f"Fetched {len(forecast.days)} forecast days for '{forecast.resolved_address}'")
        return forecast

    async def aclose(self):
        """Close the async HTTP client."""
        await self.client.aclose()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.aclose()
