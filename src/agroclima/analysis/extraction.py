"""Best-effort structured extraction of JSON objects from free-text AI replies."""

import json
import logging
from typing import Any, Dict, Type, TypeVar

from pydantic import BaseModel, ValidationError

from agroclima.errors import AnalysisParseError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def extract_json_object(text: str) -> Dict[str, Any]:
    """Extract the JSON object embedded in a model reply.

    The candidate is the substring from the first ``{`` to the last ``}``
    (inclusive). Surrounding prose or markdown fences are discarded; nothing
    else is repaired.

    Args:
        text: Raw reply from the generative-text provider

    Returns:
        The parsed JSON object

    Raises:
        AnalysisParseError: If no braces are found or the candidate is not a JSON object
    """
    start = text.find("{")
    end = text.rfind("}")

    if start == -1 or end == -1 or end < start:
        logger.error(f"No JSON object found in AI reply: {text[:200]!r}")
        raise AnalysisParseError("AI reply does not contain a JSON object")

    candidate = text[start:end + 1].strip()

    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse JSON from AI reply: {e}")
        raise AnalysisParseError(f"AI reply JSON is malformed: {e}") from e

    if not isinstance(parsed, dict):
        raise AnalysisParseError("AI reply JSON is not an object")

    return parsed


def parse_analysis(text: str, model: Type[ModelT]) -> ModelT:
    """Extract the JSON object from a reply and validate it against a schema.

    Args:
        text: Raw reply from the generative-text provider
        model: Pydantic model the object must satisfy

    Returns:
        Validated model instance

    Raises:
        AnalysisParseError: If extraction or validation fails
    """
    data = extract_json_object(text)
    try:
        return model.model_validate(data)
    except ValidationError as e:
        logger.error(f"AI reply does not match {model.__name__}: {e}")
        raise AnalysisParseError(f"AI reply does not match {model.__name__}") from e
