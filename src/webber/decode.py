"""JSON decoding for the array-returning variants."""

from __future__ import annotations

import json

from webber.exceptions import DecodeError
from webber.models import JSONArray


def decode_json_array(text: str) -> JSONArray:
    """Parse *text* and require a top-level JSON array.

    Raises:
        DecodeError: If *text* is not valid JSON, or decodes to an object
            or scalar.
    """
    try:
        value = json.loads(text)
    except (json.JSONDecodeError, TypeError) as exc:
        raise DecodeError(f"Invalid JSON: {exc}") from exc
    if not isinstance(value, list):
        raise DecodeError(
            f"Expected a JSON array at the top level, got {type(value).__name__}"
        )
    return value
