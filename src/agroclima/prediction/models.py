"""Request and response models for the prediction endpoints."""

from typing import Any, List, Optional

from pydantic import BaseModel, Field, model_validator

from agroclima.analysis.models import CropCommentary, PredictionAnalysis
from agroclima.catalog.models import Crop
from agroclima.weather.models import ForecastDay

CROP_ID_KEYS = ("cropId", "sementeId", "crop_id")


class PredictionRequest(BaseModel):
    """Body of a prediction request.

    Fields are optional at the schema level so a missing one can be answered
    with the service's own 400 message. The crop id is read from the first
    non-null of ``cropId``, ``sementeId`` and ``crop_id``.
    """
    lat: Optional[float] = Field(None, ge=-90, le=90, description="Latitude in decimal degrees")
    lon: Optional[float] = Field(None, ge=-180, le=180, description="Longitude in decimal degrees")
    crop_id: Optional[int] = Field(None, description="Crop id")

    @model_validator(mode="before")
    @classmethod
    def pick_crop_id(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        crop_id = next(
            (data[key] for key in CROP_ID_KEYS if data.get(key) is not None),
            None
        )
        fields = {k: v for k, v in data.items() if k not in CROP_ID_KEYS}
        return {**fields, "crop_id": crop_id}

    def is_complete(self) -> bool:
        return self.lat is not None and self.lon is not None and self.crop_id is not None


class PredictionResponse(BaseModel):
    """Forecast, analysis and crop merged into one response."""
    location: str = Field(..., description="Location label resolved by the weather provider")
    forecast: List[ForecastDay] = Field(..., description="Daily forecast, first FORECAST_DAYS days (15 by default)")
    analysis: PredictionAnalysis
    crop: Crop


class CropInfoResponse(BaseModel):
    """Crop row plus AI climate commentary."""
    crop: Crop
    analysis: CropCommentary
