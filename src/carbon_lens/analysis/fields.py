"""
Declarative field validation.

Each field the model may send is described by a FieldRule: its kind, its
valid range and its fallback. apply_rules() walks a raw mapping with a rule
table and never raises; every value it had to replace is logged at DEBUG as
a field repair.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Callable, Dict, Literal, Mapping, Optional, Sequence, Union
from urllib.parse import urlsplit

logger = logging.getLogger(__name__)

FieldKind = Literal["number", "text", "url", "optional_text"]

PLACEHOLDER_DOMAINS = ("example.com", "example.org", "example.net", "placeholder.com")

Default = Union[Any, Callable[[], Any]]


@dataclass(frozen=True)
class FieldRule:
    name: str
    kind: FieldKind
    default: Default = None
    lo: float = 0.0
    hi: float = math.inf

    def fallback(self) -> Any:
        return self.default() if callable(self.default) else self.default


def coerce_number(value: Any) -> float:
    """
    Best-effort conversion to float. Anything that is not a finite number
    (None, junk strings, containers, NaN, +/-inf) comes back as NaN.
    """
    if isinstance(value, bool):
        num = float(value)
    elif isinstance(value, (int, float, str)):
        try:
            num = float(value.strip() if isinstance(value, str) else value)
        except (OverflowError, ValueError):
            # ints beyond float range, junk strings
            return math.nan
    else:
        return math.nan

    if not math.isfinite(num):
        return math.nan
    return num


def clamp_number(value: Any, lo: float = 0.0, hi: float = math.inf) -> float:
    """Coerce then clamp to [lo, hi]; not-a-number falls back to lo."""
    num = coerce_number(value)
    if math.isnan(num):
        return lo
    return min(hi, max(lo, num))


def coerce_text(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value if value.strip() else None
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        try:
            return str(value)
        except ValueError:
            # exceeds the interpreter's int-to-str digit limit
            return None
    if isinstance(value, float) and math.isfinite(value):
        return str(int(value)) if value.is_integer() else str(value)
    return None


def validate_url(value: Any) -> Optional[str]:
    """
    Return the URL if it parses as http(s) with a host that is not a
    placeholder domain, otherwise None.
    """
    if not isinstance(value, str) or not value.strip():
        return None
    url = value.strip()
    try:
        parts = urlsplit(url)
        host = parts.hostname
    except ValueError:
        return None
    if parts.scheme not in ("http", "https") or not host:
        return None
    for domain in PLACEHOLDER_DOMAINS:
        if host == domain or host.endswith("." + domain):
            return None
    return url


def _apply_rule(rule: FieldRule, raw: Mapping[str, Any]) -> tuple:
    """Returns (value, repaired)."""
    value = raw.get(rule.name)

    if rule.kind == "number":
        num = coerce_number(value)
        if math.isnan(num):
            return rule.lo, True
        clamped = min(rule.hi, max(rule.lo, num))
        return clamped, clamped != num or not isinstance(value, (int, float))

    if rule.kind == "text":
        text = coerce_text(value)
        if text is None:
            return rule.fallback(), True
        return text, text != value

    if rule.kind == "url":
        url = validate_url(value)
        return url, url is None and value is not None

    if rule.kind == "optional_text":
        # strings pass through untouched; only non-text shapes are dropped
        if isinstance(value, str):
            return value, False
        text = coerce_text(value)
        return text, text is None and value is not None

    raise ValueError(f"Unknown field kind: {rule.kind}")


def apply_rules(
    raw: Mapping[str, Any],
    rules: Sequence[FieldRule],
    *,
    path: str = "",
) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for rule in rules:
        value, repaired = _apply_rule(rule, raw)
        if repaired:
            logger.debug(
                "Field repaired: %s%s %r -> %r", path, rule.name, raw.get(rule.name), value
            )
        out[rule.name] = value
    return out
