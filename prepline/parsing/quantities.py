"""
Quantity handling: text normalization, extraction and cooking-friendly formatting.

Amounts are parsed with Fraction so "1/3" survives the trip to a float and
back to "1/3" without drifting.
"""

import re
from fractions import Fraction
from typing import Optional

from .models import Unit

UNICODE_FRACTIONS = {
    "½": "1/2",
    "¼": "1/4",
    "¾": "3/4",
    "⅓": "1/3",
    "⅔": "2/3",
    "⅛": "1/8",
    "⅜": "3/8",
    "⅝": "5/8",
    "⅞": "7/8",
}

# (numerator, denominator) pairs a cook can actually measure
COMMON_FRACTIONS = [(1, 8), (1, 4), (1, 3), (3, 8), (1, 2), (5, 8), (2, 3), (3, 4), (7, 8)]
FRACTION_TOLERANCE = 0.02

_UNICODE_RE = re.compile(r"(\d)?\s*([" + "".join(UNICODE_FRACTIONS) + r"])")
# "21/2" is a whole number glued to a one-over fraction: 2 1/2
_GLUED_MIXED_RE = re.compile(r"(?<![\d/.])(\d)(1/\d+)(?![\d/])")
_DIGIT_LETTER_RE = re.compile(r"(\d)([a-zA-Z])")

_NUMBER = r"(?:\d+\s+\d+/\d+|\d+/\d+|\d+(?:\.\d+)?|\.\d+)"
QUANTITY_RE = re.compile(
    rf"^(?P<qty>{_NUMBER})(?:\s*(?:-|–|—|\bto\b)\s*(?P<upper>{_NUMBER}))?(?=\s|$|[^\w/.])"
)


def normalize_quantity_text(text: str) -> str:
    """
    Canonicalize how amounts are written before anything tries to read them.

    The glued mixed fraction is handled before the digit/letter split, since
    splitting first would leave "21/2" looking like twenty-one halves.
    """
    if not text:
        return ""

    s = text.strip().replace("⁄", "/")
    s = _UNICODE_RE.sub(
        lambda m: f"{m.group(1)} {UNICODE_FRACTIONS[m.group(2)]}" if m.group(1) else UNICODE_FRACTIONS[m.group(2)],
        s,
    )
    s = _GLUED_MIXED_RE.sub(r"\1 \2", s)
    s = _DIGIT_LETTER_RE.sub(r"\1 \2", s)
    return re.sub(r"\s+", " ", s).strip()


def parse_number(token: str) -> Optional[Fraction]:
    """Integer, decimal, "a/b" or "a b/c". Returns None when unreadable."""
    token = (token or "").strip()
    if not token:
        return None
    try:
        parts = token.split()
        if len(parts) == 2:
            return Fraction(parts[0]) + Fraction(parts[1])
        return Fraction(token)
    except (ValueError, ZeroDivisionError):
        return None


def extract_quantity(text: str) -> tuple[Optional[float], str]:
    """
    Read a leading amount off already-normalized text.

    Ranges ("2-3", "2 to 3") resolve to their lower bound. Returns the
    amount (or None) and the text that follows it.
    """
    if not text:
        return None, ""

    m = QUANTITY_RE.match(text)
    if not m:
        return None, text.strip()

    rest = text[m.end():].strip()
    value = parse_number(m.group("qty"))
    if value is None:
        return None, rest
    return float(value), rest


def _snap_fraction(remainder: float) -> Optional[str]:
    for num, den in COMMON_FRACTIONS:
        if abs(remainder - num / den) <= FRACTION_TOLERANCE:
            return f"{num}/{den}"
    return None


def format_quantity(value: Optional[float]) -> str:
    """
    Whole numbers stay whole, near-misses snap to a cooking fraction
    ("0.333" -> "1/3", "2.5" -> "2 1/2"), anything else gets two decimals.
    """
    if value is None:
        return ""
    if abs(value - round(value)) < 1e-9:
        return str(int(round(value)))

    whole = int(value)
    remainder = value - whole
    fraction = _snap_fraction(remainder)
    if fraction:
        return f"{whole} {fraction}" if whole else fraction
    if whole and (remainder < FRACTION_TOLERANCE or remainder > 1 - FRACTION_TOLERANCE):
        return str(int(round(value)))

    return f"{value:.2f}".rstrip("0").rstrip(".")


def is_common_fraction(value: Optional[float]) -> bool:
    """True when the amount renders as a whole number or a measurable cooking fraction."""
    if value is None or value < 1 / 8 - FRACTION_TOLERANCE:
        return False
    remainder = value - int(value)
    if remainder < 1e-9 or (int(value) and remainder > 1 - FRACTION_TOLERANCE):
        return True
    return _snap_fraction(remainder) is not None


def unit_label(unit: Optional[Unit], quantity: Optional[float]) -> str:
    if unit is None:
        return ""
    if quantity is None or quantity <= 1:
        return unit.name
    return unit.plural


def format_amount(quantity: Optional[float], unit: Optional[Unit]) -> str:
    """"2 cups", "1/2 cup", "3" or "" for an amount-less ingredient."""
    return " ".join(p for p in (format_quantity(quantity), unit_label(unit, quantity)) if p)
