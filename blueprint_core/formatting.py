"""Number formatting shared by messages, SVG paths and DXF output.

Fixed-point values round half away from zero on the exact binary value, and
plain numbers print in shortest round-trip form without a trailing ".0".
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal


def to_fixed(value: float, digits: int) -> str:
    """Fixed-point text with ``digits`` decimals."""
    if not math.isfinite(value):
        raise ValueError(f"Cannot format non-finite value {value!r}")
    quantum = Decimal(1).scaleb(-digits)
    if value == 0:
        # -0.0 prints unsigned
        return format(Decimal(0).quantize(quantum), "f")
    return format(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP), "f")


def js_number(value: float) -> str:
    """Shortest round-trip text for a number: 10 -> '10', 0.5 -> '0.5'."""
    if not math.isfinite(value):
        raise ValueError(f"Cannot format non-finite value {value!r}")
    if value == 0:
        return "0"
    if float(value).is_integer() and abs(value) < 1e21:
        return str(int(value))
    text = repr(float(value))
    if "e" in text and abs(value) >= 1e-6:
        text = format(Decimal(text), "f")
    return text


__all__ = ["to_fixed", "js_number"]
