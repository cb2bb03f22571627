"""Tests for the catalog repository, the engine factory and the app lifespan."""

import pytest
from fastapi.testclient import TestClient

import agroclima.main
from agroclima.catalog.database import create_engine
from agroclima.catalog.repository import CatalogRepository
from agroclima.errors import StoreError


class TestCatalogRepository:

    @pytest.mark.asyncio
    async def test_pool_is_capped(self, store_path):
        engine = create_engine(f"sqlite+aiosqlite:///{store_path}", pool_size=3)
        try:
            assert engine.pool.size() == 3
            states = await CatalogRepository(engine).list_states()
        finally:
            await engine.dispose()

        assert [s.abbreviation for s in states] == ["MG", "PR", "SP"]

    @pytest.mark.asyncio
    async def test_get_crop(self, catalog_engine):
        repository = CatalogRepository(catalog_engine)

        crop = await repository.get_crop(3)
        missing = await repository.get_crop(404)

        assert crop.name == "Milho"
        assert crop.ideal_soil == "Argiloso fértil"
        assert missing is None

    @pytest.mark.asyncio
    async def test_price_history_for_unknown_crop(self, catalog_engine):
        assert await CatalogRepository(catalog_engine).get_price_history(404) is None

    @pytest.mark.asyncio
    async def test_store_error_wraps_driver_error(self, tmp_path):
        engine = create_engine(f"sqlite+aiosqlite:///{tmp_path}/nope/db.sqlite")
        try:
            with pytest.raises(StoreError):
                await CatalogRepository(engine).list_crops()
        finally:
            await engine.dispose()


class TestLifespan:

    def test_engine_owned_by_app(self, monkeypatch, store_path):
        engines = []

        def sqlite_engine():
            engine = create_engine(f"sqlite+aiosqlite:///{store_path}", pool_size=2)
            engines.append(engine)
            return engine

        monkeypatch.setattr(agroclima.main, "create_engine", sqlite_engine)

        app = agroclima.main.create_app()
        with TestClient(app) as client:
            assert app.state.engine is engines[0]
            response = client.get("/api/sementes")

        assert response.status_code == 200
        assert [c["name"] for c in response.json()] == ["Café", "Milho", "Soja"]
        assert len(engines) == 1
