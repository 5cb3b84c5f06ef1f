"""Locating and parsing the extraction payload in a vision model response."""

import json
import logging
from typing import Optional

from pydantic import ValidationError

from ..exceptions import ExtractionError
from ..models.schema import ExtractionPayload

logger = logging.getLogger(__name__)


def find_json_object(text: str) -> Optional[str]:
    """
    Return the first balanced {...} substring of text, or None.

    Braces inside JSON string literals are ignored. A '{' that never
    balances is skipped and the scan resumes at the next one.
    """
    start = text.find('{')
    while start != -1:
        end = _balanced_end(text, start)
        if end is not None:
            return text[start:end + 1]
        start = text.find('{', start + 1)

    return None


def _balanced_end(text: str, start: int) -> Optional[int]:
    """Index of the '}' closing the '{' at start, or None."""
    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == '\\':
                escaped = True
            elif char == '"':
                in_string = False
        elif char == '"':
            in_string = True
        elif char == '{':
            depth += 1
        elif char == '}':
            depth -= 1
            if depth == 0:
                return index

    return None


def parse_extraction_payload(text: str) -> ExtractionPayload:
    """
    Parse the vision model's response text into an ExtractionPayload.

    Raises:
        ExtractionError: If no JSON object is found or it is malformed
    """
    candidate = find_json_object(text or '')
    if candidate is None:
        raise ExtractionError("Could not parse extraction result: no JSON object in response")

    try:
        data = json.loads(candidate)
    except json.JSONDecodeError as e:
        raise ExtractionError(f"Could not parse extraction result: {e}", original_error=e)

    try:
        payload = ExtractionPayload.model_validate(data)
    except ValidationError as e:
        raise ExtractionError(f"Extraction result does not match expected structure: {e}", original_error=e)

    logger.info(
        f"Parsed extraction payload: page type {payload.page_type.value}, "
        f"{len(payload.entries)} entries"
    )
    return payload
