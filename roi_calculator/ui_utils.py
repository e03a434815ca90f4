from __future__ import annotations

import math

import numpy as np


def _missing(x) -> bool:
    return x is None or (isinstance(x, float) and np.isnan(x))


def fmt_money(x: float, force_decimals: bool = False) -> str:
    """$1,234.56 below $1,000 (or when forced), whole dollars above."""
    if _missing(x):
        return "—"
    if math.isinf(x):
        return "N/A"
    if x != 0 and abs(x) < 0.01:
        return "$0.01"
    decimals = 2 if (force_decimals or x < 1000) else 0
    sign = "-" if x < 0 else ""
    return f"{sign}${abs(x):,.{decimals}f}"


def fmt_pct(x: float) -> str:
    # x is already a percentage (3.25 -> "3.3%")
    if _missing(x):
        return "—"
    if math.isinf(x):
        return "N/A"
    return f"{x:.1f}%"


def fmt_num(x: float) -> str:
    if _missing(x):
        return "—"
    return f"{x:,.0f}"


def fmt_roas(x: float) -> str:
    if _missing(x) or math.isinf(x):
        return "N/A"
    return f"{x:.2f}:1"


def fmt_roi(x: float) -> str:
    if _missing(x) or math.isinf(x):
        return "N/A"
    return f"{x:.1f}%"


def color_text(text: str, color: str) -> str:
    # Streamlit markdown colour directive
    if color not in ("green", "orange", "red"):
        return text
    return f":{color}[{text}]"
