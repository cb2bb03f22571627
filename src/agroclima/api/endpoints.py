"""API endpoints for the AgroClima prediction service."""

import logging
from typing import AsyncIterator, List

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncEngine

from agroclima.analysis.client import GeminiClient
from agroclima.catalog.models import Crop, CropSummary, Municipality, PriceHistory, State
from agroclima.catalog.repository import CatalogRepository
from agroclima.config import SERVICE_NAME, SERVICE_VERSION
from agroclima.errors import NotFoundError, UpstreamError
from agroclima.prediction.models import CropInfoResponse, PredictionRequest, PredictionResponse
from agroclima.prediction.service import PredictionService
from agroclima.weather.client import VisualCrossingClient

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Erro interno do servidor"
CROP_INFO_ERROR_MESSAGE = "Erro interno do servidor ao gerar análise da cultura."
PREDICTION_ERROR_MESSAGE = "Erro interno do servidor ao processar a análise."
CROP_NOT_FOUND_MESSAGE = "Cultura não encontrada."
SEED_NOT_FOUND_MESSAGE = "Semente não encontrada."
MISSING_PREDICTION_FIELDS_MESSAGE = "Latitude, longitude e ID da semente são obrigatórios."

router = APIRouter(prefix="/api", tags=["agroclima"])


def get_engine(request: Request) -> AsyncEngine:
    """Dependency returning the engine owned by the application."""
    return request.app.state.engine


def get_catalog_repository(engine: AsyncEngine = Depends(get_engine)) -> CatalogRepository:
    """Dependency to get a catalog repository over the shared pool."""
    return CatalogRepository(engine)


async def get_weather_client() -> AsyncIterator[VisualCrossingClient]:
    """Dependency yielding a weather client closed after the request."""
    async with VisualCrossingClient() as client:
        yield client


async def get_analysis_client() -> AsyncIterator[GeminiClient]:
    """Dependency yielding an AI client closed after the request."""
    async with GeminiClient() as client:
        yield client


def get_prediction_service(
    catalog: CatalogRepository = Depends(get_catalog_repository),
    weather_client: VisualCrossingClient = Depends(get_weather_client),
    analysis_client: GeminiClient = Depends(get_analysis_client)
) -> PredictionService:
    """Dependency to get a prediction service instance."""
    return PredictionService(catalog, weather_client, analysis_client)


@router.get("/estados", response_model=List[State])
async def list_states(catalog: CatalogRepository = Depends(get_catalog_repository)) -> List[State]:
    """List all Brazilian states ordered by name."""
    try:
        return await catalog.list_states()
    except Exception as e:
        logger.error(f"GET /api/estados failed: {e}")
        raise HTTPException(status_code=500, detail=INTERNAL_ERROR_MESSAGE)


@router.get("/municipios/{estado_id}", response_model=List[Municipality])
async def list_municipalities(
    estado_id: int,
    catalog: CatalogRepository = Depends(get_catalog_repository)
) -> List[Municipality]:
    """List the municipalities of a state ordered by name.

    Args:
        estado_id: IBGE state code

    Returns:
        Municipalities with coordinates; empty list for an unknown state
    """
    try:
        return await catalog.list_municipalities(estado_id)
    except Exception as e:
        logger.error(f"GET /api/municipios/{estado_id} failed: {e}")
        raise HTTPException(status_code=500, detail=INTERNAL_ERROR_MESSAGE)


@router.get("/sementes", response_model=List[CropSummary])
async def list_crops(catalog: CatalogRepository = Depends(get_catalog_repository)) -> List[CropSummary]:
    """List all crops (id and name) ordered by name."""
    try:
        return await catalog.list_crops()
    except Exception as e:
        logger.error(f"GET /api/sementes failed: {e}")
        raise HTTPException(status_code=500, detail=INTERNAL_ERROR_MESSAGE)


@router.get("/semente/{crop_id}", response_model=Crop)
async def get_crop(crop_id: int, catalog: CatalogRepository = Depends(get_catalog_repository)) -> Crop:
    """Get the full row of a crop."""
    try:
        crop = await catalog.get_crop(crop_id)
    except Exception as e:
        logger.error(f"GET /api/semente/{crop_id} failed: {e}")
        raise HTTPException(status_code=500, detail=INTERNAL_ERROR_MESSAGE)

    if crop is None:
        raise HTTPException(status_code=404, detail=SEED_NOT_FOUND_MESSAGE)
    return crop


@router.get("/cultura-info/{crop_id}", response_model=CropInfoResponse)
async def get_crop_info(
    crop_id: int,
    service: PredictionService = Depends(get_prediction_service)
) -> CropInfoResponse:
    """Get a crop row together with an AI climate-impact commentary.

    Args:
        crop_id: Crop id

    Returns:
        Crop row and commentary

    Raises:
        HTTPException: 404 if the crop does not exist, 500 on any upstream failure
    """
    try:
        return await service.crop_info(crop_id)

    except NotFoundError as e:
        logger.info(f"GET /api/cultura-info/{crop_id}: {e}")
        raise HTTPException(status_code=404, detail=CROP_NOT_FOUND_MESSAGE)

    except UpstreamError as e:
        logger.error(
            f"GET /api/cultura-info/{crop_id} failed: {type(e).__name__}: {e} "
            f"(upstream status: {e.status_code})"
        )
        raise HTTPException(status_code=500, detail=CROP_INFO_ERROR_MESSAGE)

    except Exception as e:
        logger.exception(f"Unexpected error in GET /api/cultura-info/{crop_id}: {e}")
        raise HTTPException(status_code=500, detail=CROP_INFO_ERROR_MESSAGE)


@router.post("/predicao", response_model=PredictionResponse)
async def create_prediction(
    payload: PredictionRequest,
    service: PredictionService = Depends(get_prediction_service)
) -> PredictionResponse:
    """Get a 15-day forecast annotated with an AI agronomic risk analysis.

    Args:
        payload: Coordinates and crop id

    Returns:
        Resolved location, forecast, analysis and crop row

    Raises:
        HTTPException: 400 on missing fields, 404 if the crop does not exist,
            500 on any upstream failure
    """
    if not payload.is_complete():
        raise HTTPException(status_code=400, detail=MISSING_PREDICTION_FIELDS_MESSAGE)

    try:
        prediction = await service.predict(payload.lat, payload.lon, payload.crop_id)
        logger.info(f"Prediction ready for crop {payload.crop_id} with {len(prediction.forecast)} days")
        return prediction

    except NotFoundError as e:
        logger.info(f"POST /api/predicao: {e}")
        raise HTTPException(status_code=404, detail=SEED_NOT_FOUND_MESSAGE)

    except UpstreamError as e:
        logger.error(
            f"POST /api/predicao failed: {type(e).__name__}: {e} "
            f"(upstream status: {e.status_code})"
        )
        raise HTTPException(status_code=500, detail=PREDICTION_ERROR_MESSAGE)

    except Exception as e:
        logger.exception(f"Unexpected error in POST /api/predicao: {e}")
        raise HTTPException(status_code=500, detail=PREDICTION_ERROR_MESSAGE)


@router.get("/cotacoes/{crop_id}", response_model=PriceHistory)
async def get_price_history(
    crop_id: int,
    catalog: CatalogRepository = Depends(get_catalog_repository)
) -> PriceHistory:
    """Get the bag price series of a crop ordered by date."""
    try:
        history = await catalog.get_price_history(crop_id)
    except Exception as e:
        logger.error(f"GET /api/cotacoes/{crop_id} failed: {e}")
        raise HTTPException(status_code=500, detail=INTERNAL_ERROR_MESSAGE)

    if history is None:
        raise HTTPException(status_code=404, detail=CROP_NOT_FOUND_MESSAGE)
    return history


@router.get("/health")
async def health_check() -> dict:
    """Health check endpoint.

    Returns:
        Health status response
    """
    return {"status": "healthy", "service": "agroclima"}


@router.get("")
async def get_service_info() -> dict:
    """Get service information and the available routes."""
    return {
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "docs": "/docs",
        "routes": [
            "/api/estados",
            "/api/municipios/{estado_id}",
            "/api/sementes",
            "/api/semente/{id}",
            "/api/cultura-info/{id}",
            "/api/predicao",
            "/api/cotacoes/{id}",
            "/api/health",
        ],
        "data_sources": ["Visual Crossing Weather", "Google Gemini"]
    }
