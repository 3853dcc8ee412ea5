"""
Locale/format converters.

Every helper here is total: malformed input maps to a defined fallback
("" or None) instead of raising.
"""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Optional

_NON_DIGITS = re.compile(r"\D+")
_PERSON_DOCUMENT_LENGTH = 11
_ENTITY_DOCUMENT_LENGTH = 14
# to_int gives up past 19 integer digits
_MAX_INT_EXPONENT = 18


def as_str(value: Any) -> str:
    return "" if value is None else str(value)


def digits_only(value: Any) -> str:
    return _NON_DIGITS.sub("", as_str(value))


def to_decimal(value: Any) -> Optional[Decimal]:
    """Parse dot-decimal or comma-decimal input ("1.234,56", "159.77", 12).

    When a comma is present every dot is a thousands separator. Returns None
    for anything unparsable.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        value = repr(value)

    text = as_str(value).strip().replace(" ", "")
    if not text:
        return None
    if "," in text:
        text = text.replace(".", "").replace(",", ".")

    try:
        number = Decimal(text)
    except (InvalidOperation, ValueError):
        return None
    return number if number.is_finite() else None


def quantize(value: Decimal, places: int) -> Optional[Decimal]:
    """Round half-up to `places`; None when the result does not fit the decimal context."""
    try:
        return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return None


def format_fixed(value: Any, places: int) -> str:
    """Render with exactly `places` fractional digits and a dot separator."""
    number = to_decimal(value)
    if number is None:
        return ""
    fixed = quantize(number, places)
    return "" if fixed is None else f"{fixed:f}"


def pad_document(value: Any) -> str:
    """Short-form person documents (11 digits) become 14-digit entity form."""
    digits = digits_only(value)
    if len(digits) == _PERSON_DOCUMENT_LENGTH:
        return digits.zfill(_ENTITY_DOCUMENT_LENGTH)
    return digits


def to_int(value: Any) -> Optional[int]:
    number = to_decimal(value)
    if number is None or number.adjusted() > _MAX_INT_EXPONENT:
        return None
    return int(number)
