"""Tests for best-effort JSON extraction from AI replies."""

import json

import pytest

from agroclima.analysis.extraction import extract_json_object, parse_analysis
from agroclima.analysis.models import CropCommentary, PredictionAnalysis, Severity
from agroclima.errors import AnalysisParseError, UpstreamError
from tests.conftest import CROP_COMMENTARY, PREDICTION_ANALYSIS


class TestExtractJsonObject:

    def test_object_surrounded_by_prose(self):
        assert extract_json_object('Here is the result: {"a":1} done') == {"a": 1}

    def test_markdown_fence(self):
        assert extract_json_object('```json\n{"a": {"b": [1, 2]}}\n```') == {"a": {"b": [1, 2]}}

    def test_uses_first_open_and_last_close_brace(self):
        text = 'x {"outer": {"inner": "}"}} y'
        assert extract_json_object(text) == {"outer": {"inner": "}"}}

    @pytest.mark.parametrize("text", [
        "no braces at all",
        "",
        "only a closing } brace",
        "only an opening { brace",
        "} reversed {",
    ])
    def test_no_object(self, text):
        with pytest.raises(AnalysisParseError):
            extract_json_object(text)

    def test_two_objects_are_not_split(self):
        with pytest.raises(AnalysisParseError):
            extract_json_object('{"a": 1} and {"b": 2}')

    def test_malformed_json(self):
        with pytest.raises(AnalysisParseError):
            extract_json_object("{'a': 1,}")

    def test_parse_error_is_an_upstream_error(self):
        assert issubclass(AnalysisParseError, UpstreamError)


class TestParseAnalysis:

    def test_prediction_analysis(self):
        analysis = parse_analysis("Resultado: " + json.dumps(PREDICTION_ANALYSIS), PredictionAnalysis)

        assert analysis.planting_window.end_date == "2025-10-10"
        assert analysis.risks[0].severity is Severity.MEDIUM
        assert analysis.risks[1].severity is Severity.LOW

    def test_crop_commentary(self):
        commentary = parse_analysis(json.dumps(CROP_COMMENTARY), CropCommentary)

        assert commentary.sustainable_practices == ["Plantio direto", "Rotação com milho"]

    def test_schema_mismatch(self):
        with pytest.raises(AnalysisParseError):
            parse_analysis('{"climate_analysis": "ok"}', PredictionAnalysis)
