"""Data models for the reference catalog (states, municipalities, crops, prices)."""

import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class State(BaseModel):
    """Brazilian state."""
    id: int = Field(..., description="IBGE state code")
    name: str = Field(..., description="State name")
    abbreviation: str = Field(..., description="Two-letter state abbreviation")


class Municipality(BaseModel):
    """Municipality with its reference coordinates."""
    id: int = Field(..., description="IBGE municipality code")
    name: str = Field(..., description="Municipality name")
    latitude: float = Field(..., ge=-90, le=90, description="Latitude in decimal degrees")
    longitude: float = Field(..., ge=-180, le=180, description="Longitude in decimal degrees")


class CropSummary(BaseModel):
    """Crop entry used to fill selection lists."""
    id: int
    name: str


class Crop(BaseModel):
    """Full crop row."""
    id: int = Field(..., description="Crop id")
    name: str = Field(..., description="Common name")
    scientific_name: Optional[str] = Field(None, description="Scientific name")
    description: Optional[str] = Field(None, description="Short description")
    ideal_climate: Optional[str] = Field(None, description="Ideal climate for the crop")
    ideal_soil: Optional[str] = Field(None, description="Ideal soil for the crop")
    fertilizers: Optional[str] = Field(None, description="Fertilizer notes")
    icon_class: Optional[str] = Field(None, description="Icon CSS class used by the frontend")


class PriceQuote(BaseModel):
    """Price of a bag of the crop on a given day."""
    date: datetime.date
    price: float = Field(..., description="Price in BRL")


class PriceHistory(BaseModel):
    """Price time series for one crop."""
    crop_id: int
    crop_name: str
    prices: List[PriceQuote] = Field(default_factory=list, description="Quotes ordered by date")
