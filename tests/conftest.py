"""
pytest configuration for the AgroClima test suite.

Provides a seeded SQLite store and fake weather / AI providers built on
httpx.MockTransport, each counting the requests it receives.
"""

import os

# Must be set before agroclima.config is imported
os.environ["RATE_LIMIT_ENABLED"] = "false"

import json
import sqlite3
from datetime import date, timedelta
from typing import Callable, List

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import NullPool

from agroclima.analysis.client import GeminiClient
from agroclima.api.endpoints import get_analysis_client, get_engine, get_weather_client
from agroclima.main import create_app
from agroclima.weather.client import VisualCrossingClient

SCHEMA = """
CREATE TABLE estados (codigo_uf INTEGER PRIMARY KEY, nome TEXT NOT NULL, uf TEXT NOT NULL);
CREATE TABLE municipios (
    codigo_ibge INTEGER PRIMARY KEY, nome TEXT NOT NULL,
    latitude REAL NOT NULL, longitude REAL NOT NULL, codigo_uf INTEGER NOT NULL
);
CREATE TABLE sementes (
    id INTEGER PRIMARY KEY, nome TEXT NOT NULL, nome_cientifico TEXT, descricao TEXT,
    clima_ideal TEXT, solo_ideal TEXT, fertilizantes TEXT, classe_icone TEXT
);
CREATE TABLE cotacoes (id INTEGER PRIMARY KEY, semente_id INTEGER NOT NULL, data TEXT NOT NULL, preco REAL NOT NULL);
"""

STATES = [
    (41, "Paraná", "PR"),
    (35, "São Paulo", "SP"),
    (31, "Minas Gerais", "MG"),
]

MUNICIPALITIES = [
    (4113700, "Londrina", -23.3045, -51.1696, 41),
    (4106902, "Curitiba", -25.4284, -49.2733, 41),
    (4104808, "Cascavel", -24.9555, -53.4552, 41),
    (3509502, "Campinas", -22.9099, -47.0626, 35),
]

CROPS = [
    (7, "Soja", "Glycine max", "Leguminosa rica em proteína.", "tropical",
     "Latossolo bem drenado", "NPK 0-20-20", "fa-seedling"),
    (3, "Milho", "Zea mays", "Cereal de ciclo curto.", "tropical a subtropical",
     "Argiloso fértil", "NPK 8-28-16", "fa-wheat-awn"),
    (12, "Café", "Coffea arabica", "Cultura perene.", "tropical de altitude",
     "Latossolo profundo", "NPK 20-05-20", "fa-mug-hot"),
]

PRICES = [
    (1, 7, "2025-09-03", 131.4),
    (2, 7, "2025-09-01", 128.9),
    (3, 7, "2025-09-02", 130.2),
    (4, 3, "2025-09-01", 61.5),
]

PREDICTION_ANALYSIS = {
    "climate_analysis": "Temperaturas dentro da faixa ideal para a soja.",
    "planting_window": {
        "recommendation": "Plantar após as chuvas do dia 5.",
        "start_date": "2025-10-05",
        "end_date": "2025-10-10",
    },
    "risks": [
        {"name": "Estresse hídrico", "description": "Poucas chuvas no fim do período.", "severity": "Medium"},
        {"name": "Calor excessivo", "description": "Máximas acima de 32 °C.", "severity": "Low"},
    ],
    "practical_suggestion": "Usar plantio direto para conservar a umidade do solo.",
    "overall_summary": "Condições favoráveis com atenção à irrigação.",
}

CROP_COMMENTARY = {
    "climate_impact": "A soja fixa nitrogênio e reduz o uso de fertilizantes.",
    "vulnerabilities": ["Secas prolongadas", "Ondas de calor na floração"],
    "sustainable_practices": ["Plantio direto", "Rotação com milho"],
}


def visual_crossing_payload(days: int = 15) -> dict:
    """Build a Visual Crossing timeline response with the given number of days."""
    start = date(2025, 10, 1)
    return {
        "resolvedAddress": "Londrina, PR, Brasil",
        "latitude": -23.3045,
        "longitude": -51.1696,
        "timezone": "America/Sao_Paulo",
        "days": [
            {
                "datetime": (start + timedelta(days=i)).isoformat(),
                "datetimeEpoch": 1759287600 + i * 86400,
                "tempmax": 29.0 + i % 4,
                "tempmin": 17.5,
                "temp": 23.1,
                "precip": 2.5 * (i % 3),
                "precipprob": 45.0,
                "humidity": 71.2,
                "windspeed": 14.4,
                "conditions": "Parcialmente nublado",
                "icon": "partly-cloudy-day",
            }
            for i in range(days)
        ],
    }


def gemini_payload(text: str) -> dict:
    """Build a Gemini generateContent response carrying the given text."""
    return {"candidates": [{"content": {"parts": [{"text": text}], "role": "model"}}]}


class ProviderStub:
    """httpx.MockTransport handler that records every request it answers."""

    def __init__(self, responder: Callable[[httpx.Request], httpx.Response]):
        self.responder = responder
        self.calls: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        return self.responder(request)

    @property
    def call_count(self) -> int:
        return len(self.calls)

    def respond_with(self, responder: Callable[[httpx.Request], httpx.Response]) -> None:
        self.responder = responder


@pytest.fixture
def store_path(tmp_path):
    """Path of a seeded SQLite store."""
    path = tmp_path / "agroclima.sqlite"
    conn = sqlite3.connect(path)
    try:
        conn.executescript(SCHEMA)
        conn.executemany("INSERT INTO estados VALUES (?, ?, ?)", STATES)
        conn.executemany("INSERT INTO municipios VALUES (?, ?, ?, ?, ?)", MUNICIPALITIES)
        conn.executemany("INSERT INTO sementes VALUES (?, ?, ?, ?, ?, ?, ?, ?)", CROPS)
        conn.executemany("INSERT INTO cotacoes VALUES (?, ?, ?, ?)", PRICES)
        conn.commit()
    finally:
        conn.close()
    return path


@pytest.fixture
def catalog_engine(store_path):
    """Async engine over the seeded store; NullPool keeps connections per event loop."""
    return create_async_engine(f"sqlite+aiosqlite:///{store_path}", poolclass=NullPool)


@pytest.fixture
def weather_provider():
    """Fake weather provider answering 15 days of forecast."""
    return ProviderStub(lambda request: httpx.Response(200, json=visual_crossing_payload()))


@pytest.fixture
def ai_provider():
    """Fake Gemini provider answering a well-formed analysis wrapped in prose."""
    text = "Aqui está a análise:\n```json\n" + json.dumps(PREDICTION_ANALYSIS, ensure_ascii=False) + "\n```"
    return ProviderStub(lambda request: httpx.Response(200, json=gemini_payload(text)))


@pytest.fixture
def app(catalog_engine, weather_provider, ai_provider):
    """Application with the store and both providers replaced by fakes."""
    application = create_app()

    async def weather_client():
        transport = httpx.MockTransport(weather_provider)
        async with VisualCrossingClient(api_key="test-weather-key", transport=transport) as client:
            yield client

    async def analysis_client():
        transport = httpx.MockTransport(ai_provider)
        async with GeminiClient(api_key="test-gemini-key", transport=transport) as client:
            yield client

    application.dependency_overrides[get_engine] = lambda: catalog_engine
    application.dependency_overrides[get_weather_client] = weather_client
    application.dependency_overrides[get_analysis_client] = analysis_client
    return application


@pytest.fixture
def client(app):
    """Test client; the lifespan (and its MySQL engine) is not started."""
    return TestClient(app)
