"""Prompt builders for the generative-text provider.

Prompts are written in Portuguese for Brazilian farmers; the JSON keys they
mandate match the models in ``agroclima.analysis.models``.
"""

import json
from typing import List

from agroclima.catalog.models import Crop
from agroclima.config import FORECAST_DAYS
from agroclima.weather.models import ForecastDay

PREDICTION_PROMPT_TEMPLATE = """
Você é um engenheiro agrônomo especialista em análise de risco climático, focado na ODS 13.
Sua tarefa é fornecer uma análise profissional e concisa para um agricultor, baseada na previsão do tempo.

**Localização:** Latitude {lat}, Longitude {lon}.
**Cultura Selecionada:** {crop_name}.
**Requisitos da Cultura:**
- Clima Ideal: {ideal_climate}
- Solo Ideal (Referência): {ideal_soil}

**Dados de Previsão do Tempo (Próximos {days} Dias):**
{forecast_json}

**Sua Análise Deve Conter:**
1. **Análise das Condições Climáticas:** Compare a previsão do tempo com o clima ideal para a cultura. Destaque os períodos favoráveis e desfavoráveis.
2. **Recomendação de Plantio:** Com base na previsão de chuva e temperatura, identifique a melhor "janela de plantio" nos próximos {days} dias.
3. **Análise de Risco Climático:** Identifique até 3 riscos principais (ex: estresse hídrico, risco de geada, calor excessivo, erosão por chuvas intensas). Atribua um nível de severidade usando exatamente um destes rótulos: "Low", "Medium" ou "High".
4. **Sugestão Prática (ODS 13):** Forneça uma sugestão acionável focada em resiliência climática.
5. **Resumo Geral:** Uma conclusão curta (1-2 frases).

**Formato da Resposta (Obrigatório):**
Responda APENAS com um objeto JSON válido, com textos em português.
{{
  "climate_analysis": "texto da análise",
  "planting_window": {{ "recommendation": "texto", "start_date": "YYYY-MM-DD", "end_date": "YYYY-MM-DD" }},
  "risks": [ {{ "name": "Nome", "description": "Descrição", "severity": "Low|Medium|High" }} ],
  "practical_suggestion": "texto da sugestão",
  "overall_summary": "texto do resumo"
}}
"""

CROP_COMMENTARY_PROMPT_TEMPLATE = """
Você é um especialista em agronomia e sustentabilidade, focado na ODS 13 (Ação Contra a Mudança Global do Clima).
Analise a cultura de "{crop_name}" e gere um resumo conciso para um agricultor.

**Informações da Cultura:**
- Descrição: {description}
- Solo Ideal: {ideal_soil}

**Sua Análise Deve Conter (em formato JSON):**
1. **climate_impact:** Um parágrafo curto sobre o impacto geral do cultivo de {crop_name} no clima.
2. **vulnerabilities:** Liste em 2 ou 3 itens como as mudanças climáticas afetam a produção de {crop_name}.
3. **sustainable_practices:** Liste em 2 ou 3 itens práticas agrícolas sustentáveis para o cultivo de {crop_name}.

**Formato da Resposta (Obrigatório):**
Responda APENAS com um objeto JSON válido, com textos em português.
{{
  "climate_impact": "texto",
  "vulnerabilities": ["ponto 1", "ponto 2"],
  "sustainable_practices": ["ponto 1", "ponto 2"]
}}
"""


def summarize_forecast(days: List[ForecastDay]) -> str:
    """Serialize the first forecast days into the compact JSON the prompt embeds."""
    summary = [
        {
            "date": day.date,
            "temp_max": day.temp_max,
            "temp_min": day.temp_min,
            "precip_mm": day.precip,
        }
        for day in days[:FORECAST_DAYS]
    ]
    return json.dumps(summary, ensure_ascii=False)


def build_prediction_prompt(lat: float, lon: float, crop: Crop, days: List[ForecastDay]) -> str:
    """Build the risk-analysis instruction for a crop and a forecast.

    Args:
        lat: Latitude in decimal degrees
        lon: Longitude in decimal degrees
        crop: Selected crop
        days: Forecast days (only the first FORECAST_DAYS are embedded)

    Returns:
        Prompt text
    """
    return PREDICTION_PROMPT_TEMPLATE.format(
        lat=lat,
        lon=lon,
        crop_name=crop.name,
        ideal_climate=crop.ideal_climate or "não informado",
        ideal_soil=crop.ideal_soil or "não informado",
        days=FORECAST_DAYS,
        forecast_json=summarize_forecast(days),
    )


def build_crop_commentary_prompt(crop: Crop) -> str:
    """Build the climate-commentary instruction for a crop."""
    return CROP_COMMENTARY_PROMPT_TEMPLATE.format(
        crop_name=crop.name,
        description=crop.description or "não informada",
        ideal_soil=crop.ideal_soil or "não informado",
    )
