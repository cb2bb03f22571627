"""Read-only queries over the reference catalog."""

import logging
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from agroclima.catalog.models import (
    Crop, CropSummary, Municipality, PriceHistory, PriceQuote, State
)
from agroclima.errors import StoreError

logger = logging.getLogger(__name__)

STATES_SQL = text(
    "SELECT codigo_uf AS id, nome AS name, uf AS abbreviation "
    "FROM estados ORDER BY nome"
)
MUNICIPALITIES_SQL = text(
    "SELECT codigo_ibge AS id, nome AS name, latitude, longitude "
    "FROM municipios WHERE codigo_uf = :state_id ORDER BY nome"
)
CROPS_SQL = text("SELECT id, nome AS name FROM sementes ORDER BY nome")
CROP_SQL = text(
    "SELECT id, nome AS name, nome_cientifico AS scientific_name, descricao AS description, "
    "clima_ideal AS ideal_climate, solo_ideal AS ideal_soil, fertilizantes AS fertilizers, "
    "classe_icone AS icon_class "
    "FROM sementes WHERE id = :crop_id"
)
PRICES_SQL = text(
    "SELECT data AS date, preco AS price "
    "FROM cotacoes WHERE semente_id = :crop_id ORDER BY data"
)


class CatalogRepository:
    """Queries states, municipalities, crops and crop prices.

    The engine (and therefore the connection pool) is owned by the
    application; the repository only borrows a connection per query.
    """

    def __init__(self, engine: AsyncEngine):
        """Initialize the repository.

        Args:
            engine: Async engine owning the connection pool
        """
        self.engine = engine

    async def _fetch_all(self, statement, params: Optional[Dict[str, Any]] = None) -> List[Mapping[str, Any]]:
        """Run a read query and return its rows as mappings.

        Raises:
            StoreError: If the store is unreachable or the query fails
        """
        try:
            async with self.engine.connect() as conn:
                result = await conn.execute(statement, params or {})
                return list(result.mappings().all())
        except SQLAlchemyError as e:
            logger.error(f"Store query failed: {e}")
            raise StoreError(f"Store query failed: {e}") from e
        except OSError as e:
            logger.error(f"Store unreachable: {e}")
            raise StoreError(f"Store unreachable: {e}") from e

    async def list_states(self) -> List[State]:
        """Get all states ordered by name."""
        rows = await self._fetch_all(STATES_SQL)
        return [State(**row) for row in rows]

    async def list_municipalities(self, state_id: int) -> List[Municipality]:
        """Get the municipalities of a state ordered by name.

        Args:
            state_id: IBGE state code

        Returns:
            Municipalities of the state; empty for an unknown state
        """
        rows = await self._fetch_all(MUNICIPALITIES_SQL, {"state_id": state_id})
        logger.debug(f"Found {len(rows)} municipalities for state {state_id}")
        return [Municipality(**row) for row in rows]

    async def list_crops(self) -> List[CropSummary]:
        """Get id and name of every crop ordered by name."""
        rows = await self._fetch_all(CROPS_SQL)
        return [CropSummary(**row) for row in rows]

    async def get_crop(self, crop_id: int) -> Optional[Crop]:
        """Get a crop row by id.

        Args:
            crop_id: Crop id

        Returns:
            Crop if found, None otherwise
        """
        rows = await self._fetch_all(CROP_SQL, {"crop_id": crop_id})
        if not rows:
            logger.info(f"Crop {crop_id} not found")
            return None
        return Crop(**rows[0])

    async def get_price_history(self, crop_id: int) -> Optional[PriceHistory]:
        """Get the price series of a crop ordered by date.

        Args:
            crop_id: Crop id

        Returns:
            PriceHistory (possibly with no quotes), or None if the crop does not exist
        """
        crop = await self.get_crop(crop_id)
        if crop is None:
            return None

        rows = await self._fetch_all(PRICES_SQL, {"crop_id": crop_id})
        return PriceHistory(
            crop_id=crop.id,
            crop_name=crop.name,
            prices=[PriceQuote(**row) for row in rows]
        )
