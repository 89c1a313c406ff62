"""Engagement count normalization ("1.2K" -> 1200)."""

from __future__ import annotations

from decimal import ROUND_FLOOR, Decimal, InvalidOperation
import re

_COUNT_RE = re.compile(r"^([\d.]+)([KMB])?$")
_MULTIPLIERS = {
    None: Decimal(1),
    "K": Decimal(1_000),
    "M": Decimal(1_000_000),
    "B": Decimal(1_000_000_000),
}


def parse_count(text: str | None) -> int:
    """Parse a visible count label; unparseable or empty labels count as zero."""
    if not text:
        return 0
    cleaned = text.strip().upper().replace(",", "")
    match = _COUNT_RE.fullmatch(cleaned)
    if match is None:
        return 0
    try:
        number = Decimal(match.group(1))
    except InvalidOperation:
        return 0
    value = number * _MULTIPLIERS[match.group(2)]
    return int(value.to_integral_value(rounding=ROUND_FLOOR))
