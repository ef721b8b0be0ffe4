"""
Best-effort Thiele-Small parameter extraction through the Anthropic API.

The result is a sparse mapping: any subset of fs, qts and vas may be
present, and the user fills in the rest by hand.
"""

import json
import math
import re
from typing import Dict

from backend.ai.prompts import PARAMETER_EXTRACTION_SYSTEM, build_extraction_messages
from engine.inputs import parse_number

DEFAULT_MODEL = "claude-sonnet-4-5-20250929"

EXTRACTED_FIELDS = ("fs", "qts", "vas")

# First flat JSON object in the reply; models sometimes add prose or code fences
_JSON_OBJECT = re.compile(r"\{[^}]+\}")


class ExtractionError(Exception):
    """The model reply did not contain usable parameters."""


def parse_extraction_response(content: str) -> Dict[str, float]:
    """
    Pull fs/qts/vas out of a model reply.

    Unknown keys are dropped, as are values that are not positive numbers.

    Raises:
        ExtractionError: if the reply holds no JSON object.
    """
    match = _JSON_OBJECT.search(content or "")
    if not match:
        raise ExtractionError("No valid parameters found")

    try:
        data = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise ExtractionError(f"Parameter block is not valid JSON: {e.msg}")

    params = {}
    for key in EXTRACTED_FIELDS:
        value = parse_number(data.get(key))
        if value is not None and math.isfinite(value) and value > 0:
            params[key] = value
    return params


def extract_parameters(text: str, client, model: str = DEFAULT_MODEL) -> Dict[str, float]:
    """Ask the model for the parameters in ``text`` and parse its reply."""
    response = client.messages.create(
        model=model,
        max_tokens=500,
        system=PARAMETER_EXTRACTION_SYSTEM,
        messages=build_extraction_messages(text),
    )
    if not response.content:
        raise ExtractionError("Empty response from model")
    return parse_extraction_response(response.content[0].text.strip())
