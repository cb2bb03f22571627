"""Prediction orchestrator: store + weather + generative-text provider."""

import asyncio
import logging

from agroclima.analysis.client import GeminiClient
from agroclima.analysis.extraction import parse_analysis
from agroclima.analysis.models import CropCommentary, PredictionAnalysis
from agroclima.analysis.prompts import build_crop_commentary_prompt, build_prediction_prompt
from agroclima.catalog.repository import CatalogRepository
from agroclima.config import FORECAST_DAYS
from agroclima.errors import NotFoundError
from agroclima.prediction.models import CropInfoResponse, PredictionResponse
from agroclima.weather.client import VisualCrossingClient

logger = logging.getLogger(__name__)


class PredictionService:
    """Builds AI-annotated forecasts for a crop at a location.

    Holds no state between calls: every call goes to the store and to the
    providers again.
    """

    def __init__(
        self,
        catalog: CatalogRepository,
        weather_client: VisualCrossingClient,
        analysis_client: GeminiClient
    ):
        """Initialize the prediction service.

        Args:
            catalog: Repository used to load the crop row
            weather_client: Weather provider client
            analysis_client: Generative-text provider client
        """
        self.catalog = catalog
        self.weather_client = weather_client
        self.analysis_client = analysis_client

    async def predict(self, lat: float, lon: float, crop_id: int) -> PredictionResponse:
        """Get the 15-day forecast and a risk analysis for a crop.

        The crop lookup and the forecast request run concurrently. A missing
        crop wins over a weather failure and stops the flow before the AI call.

        Args:
            lat: Latitude in decimal degrees
            lon: Longitude in decimal degrees
            crop_id: Crop id

        Returns:
            PredictionResponse with location, forecast, analysis and crop

        Raises:
            NotFoundError: If the crop does not exist
            UpstreamError: If the store or a provider fails, or the reply is unusable
        """
        self.analysis_client.ensure_configured()

        crop, forecast = await asyncio.gather(
            self.catalog.get_crop(crop_id),
            self.weather_client.get_forecast(lat, lon),
            return_exceptions=True
        )

        if isinstance(crop, BaseException):
            raise crop
        if crop is None:
            raise NotFoundError(f"Crop {crop_id} not found")
        if isinstance(forecast, BaseException):
            raise forecast

        days = forecast.days[:FORECAST_DAYS]
        logger.info(f"Building analysis for crop '{crop.name}' at ({lat}, {lon}) with {len(days)} days")

        prompt = build_prediction_prompt(lat, lon, crop, days)
        reply = await self.analysis_client.generate(prompt)
        analysis = parse_analysis(reply, PredictionAnalysis)

        return PredictionResponse(
            location=forecast.resolved_address,
            forecast=days,
            analysis=analysis,
            crop=crop
        )

    async def crop_info(self, crop_id: int) -> CropInfoResponse:
        """Get a crop row with AI climate commentary.

        Args:
            crop_id: Crop id

        Returns:
            CropInfoResponse with the crop and its commentary

        Raises:
            NotFoundError: If the crop does not exist
            UpstreamError: If the store or the AI provider fails, or the reply is unusable
        """
        crop = await self.catalog.get_crop(crop_id)
        if crop is None:
            raise NotFoundError(f"Crop {crop_id} not found")

        reply = await self.analysis_client.generate(build_crop_commentary_prompt(crop))
        commentary = parse_analysis(reply, CropCommentary)

        return CropInfoResponse(crop=crop, analysis=commentary)
