"""Configuration settings for the AgroClima prediction service."""

import os
from typing import Final
from urllib.parse import quote_plus

from dotenv import load_dotenv

load_dotenv()

SERVICE_NAME: Final[str] = "AgroClima Preditivo"
SERVICE_VERSION: Final[str] = "0.1.0"

# Server configuration
HOST: str = os.getenv("HOST", "0.0.0.0")
PORT: int = int(os.getenv("PORT", "3000"))
DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

# Database configuration
DB_HOST: str = os.getenv("DB_HOST", "localhost")
DB_PORT: int = int(os.getenv("DB_PORT", "3306"))
DB_USER: str = os.getenv("DB_USER", "root")
DB_PASSWORD: str = os.getenv("DB_PASSWORD", "")
DB_DATABASE: str = os.getenv("DB_DATABASE", "agroclima")
DATABASE_URL: str = os.getenv(
    "DATABASE_URL",
    f"mysql+aiomysql://{DB_USER}:{quote_plus(DB_PASSWORD)}@{DB_HOST}:{DB_PORT}/{DB_DATABASE}"
)
DB_POOL_SIZE: int = int(os.getenv("DB_POOL_SIZE", "10"))  # Hard ceiling, no overflow

# Outbound API configuration
REQUEST_TIMEOUT_SECONDS: float = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "15"))
FORECAST_DAYS: int = int(os.getenv("FORECAST_DAYS", "15"))

VISUAL_CROSSING_API_KEY: str = os.getenv("VISUAL_CROSSING_API_KEY", "")
VISUAL_CROSSING_BASE_URL: str = os.getenv(
    "VISUAL_CROSSING_BASE_URL",
    "https://weather.visualcrossing.com/VisualCrossingWebServices/rest/services/timeline"
)

GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
GEMINI_BASE_URL: str = os.getenv("GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta")

# Rate limiting configuration
REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379")
RATE_LIMIT_REQUESTS_PER_SECOND: int = int(os.getenv("RATE_LIMIT_REQUESTS_PER_SECOND", "20"))
RATE_LIMIT_REDIS_KEY_PREFIX: str = os.getenv("RATE_LIMIT_REDIS_KEY_PREFIX", "agroclima:rate_limit")
RATE_LIMIT_ENABLED: bool = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
