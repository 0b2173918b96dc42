from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

from .errors import ParseError

logger = logging.getLogger(__name__)

_decoder = json.JSONDecoder()


def _loads_object(text: str) -> Optional[Dict[str, Any]]:
    try:
        value = json.loads(text)
    except (ValueError, RecursionError):
        return None
    return value if isinstance(value, dict) else None


def _scan_for_object(text: str) -> Optional[Dict[str, Any]]:
    """
    Try raw_decode at every "{" in order; the decoder tracks strings and
    nesting, so braces inside string values do not confuse it.
    """
    start = text.find("{")
    while start != -1:
        try:
            value, _ = _decoder.raw_decode(text, start)
        except ValueError:
            value = None
        except RecursionError:
            # stop instead of re-decoding the same nesting from every later "{"
            logger.warning("Model output nests too deeply to decode.")
            return None
        if isinstance(value, dict):
            return value
        start = text.find("{", start + 1)
    return None


def extract_json_object(raw_text: Optional[str]) -> Dict[str, Any]:
    """
    Pull one JSON object out of a model answer.

    Order of attempts:
      1) the whole text
      2) the greedy span from the first "{" to the last "}"
      3) a bracket-aware scan for the first decodable object

    Raises ParseError if none of them yields an object.
    """
    text = raw_text or ""

    parsed = _loads_object(text)
    if parsed is not None:
        return parsed

    # Greedy: first "{" to last "}". A heuristic, not a parser; it breaks when
    # prose after the body contains a stray "}".
    first, last = text.find("{"), text.rfind("}")
    if first != -1 and last > first:
        parsed = _loads_object(text[first : last + 1])
        if parsed is not None:
            logger.info("Model output was not bare JSON; recovered enclosed object.")
            return parsed

    parsed = _scan_for_object(text)
    if parsed is not None:
        logger.warning("Greedy extraction failed; recovered object by scanning.")
        return parsed

    preview = text[:80].replace("\n", " ")
    raise ParseError(f"Invalid response format from AI model (starts with: {preview!r})")
