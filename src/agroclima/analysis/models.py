"""Data models for AI-generated analyses."""

from enum import Enum
from typing import List

from pydantic import BaseModel, Field


class Severity(str, Enum):
    """Ordinal risk label."""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class PlantingWindow(BaseModel):
    """Recommended planting window within the forecast horizon."""
    recommendation: str = Field(..., description="Recommendation text")
    start_date: str = Field(..., description="Window start in YYYY-MM-DD format")
    end_date: str = Field(..., description="Window end in YYYY-MM-DD format")


class Risk(BaseModel):
    """Single climate risk entry."""
    name: str
    description: str
    severity: Severity


class PredictionAnalysis(BaseModel):
    """Agronomic risk analysis for a crop at a location."""
    climate_analysis: str = Field(..., description="Forecast compared with the crop's ideal climate")
    planting_window: PlantingWindow
    risks: List[Risk] = Field(..., description="Main climate risks, at most three")
    practical_suggestion: str = Field(..., description="Actionable climate-resilience suggestion")
    overall_summary: str = Field(..., description="One or two sentence conclusion")


class CropCommentary(BaseModel):
    """General climate commentary for a crop."""
    climate_impact: str = Field(..., description="Impact of growing the crop on the climate")
    vulnerabilities: List[str] = Field(..., description="How climate change affects production")
    sustainable_practices: List[str] = Field(..., description="Sustainable farming practices")
