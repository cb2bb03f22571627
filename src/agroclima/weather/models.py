"""Data models for the weather provider."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ForecastDay(BaseModel):
    """One day of a Visual Crossing timeline forecast.

    Validation reads the provider's keys; serialization uses the field names.
    """
    model_config = ConfigDict(populate_by_name=True)

    date: str = Field(..., validation_alias="datetime", description="Date in YYYY-MM-DD format")
    datetime_epoch: Optional[int] = Field(None, validation_alias="datetimeEpoch", description="Day start as Unix time")
    temp_max: Optional[float] = Field(None, validation_alias="tempmax", description="Maximum temperature in Celsius")
    temp_min: Optional[float] = Field(None, validation_alias="tempmin", description="Minimum temperature in Celsius")
    temp: Optional[float] = Field(None, description="Mean temperature in Celsius")
    precip: Optional[float] = Field(None, description="Precipitation in mm")
    precip_prob: Optional[float] = Field(None, validation_alias="precipprob", description="Precipitation probability (%)")
    humidity: Optional[float] = Field(None, description="Relative humidity (%)")
    wind_speed: Optional[float] = Field(None, validation_alias="windspeed", description="Max wind speed in km/h")
    conditions: Optional[str] = Field(None, description="Short text description")
    icon: Optional[str] = Field(None, description="Provider icon id")


class WeatherForecast(BaseModel):
    """Raw-ish response from the Visual Crossing Timeline API."""
    model_config = ConfigDict(populate_by_name=True)

    resolved_address: str = Field(..., validation_alias="resolvedAddress", description="Location label resolved by the provider")
    latitude: Optional[float] = Field(None, description="Latitude used by the provider")
    longitude: Optional[float] = Field(None, description="Longitude used by the provider")
    timezone: Optional[str] = Field(None, description="Timezone identifier")
    days: List[ForecastDay] = Field(..., description="Daily forecasts")
