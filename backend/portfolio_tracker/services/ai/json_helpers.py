"""Helpers for pulling JSON out of free-form model output."""

import json
import re
import unicodedata
from typing import Any

_TRAILING_COMMA = re.compile(r",(\s*[}\]])")
_decoder = json.JSONDecoder()


def clean_control_chars(s: str) -> str:
    return "".join(ch for ch in s if ch == "\n" or unicodedata.category(ch)[0] != "C")


def _first_array(text: str) -> list[Any] | None:
    start = text.find("[")
    while start != -1:
        try:
            parsed, _ = _decoder.raw_decode(text, start)
        except json.JSONDecodeError:
            start = text.find("[", start + 1)
            continue
        return parsed
    return None


def extract_json_array(text: str) -> list[Any]:
    """Return the first JSON array embedded in ``text``.

    Tolerates markdown code fences and prose around the array, control
    characters and trailing commas. Bracketed prose before or after the
    array is skipped.

    Raises:
        ValueError: If no JSON array can be parsed
    """
    cleaned = clean_control_chars(text)
    if "[" not in cleaned:
        raise ValueError("No JSON array found in response")

    parsed = _first_array(cleaned)
    if parsed is None:
        parsed = _first_array(_TRAILING_COMMA.sub(r"\1", cleaned))
    if parsed is None:
        raise ValueError("No parseable JSON array in response")
    return parsed
