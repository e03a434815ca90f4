from __future__ import annotations

import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Optional


MAX_WEEKS = 52
MAX_LIFT = 25.0


class ParamField(str, Enum):
    BUDGET = "budget"
    STORES = "stores"
    BASELINE_ANNUAL_SALES = "baseline_annual_sales"
    WEEKS = "weeks"
    LIFT_MIN = "lift_min"
    LIFT_MAX = "lift_max"


class LockTarget(str, Enum):
    BUDGET = "budget"
    STORES = "stores"
    AD_SPEND_PER_STORE_WEEK = "ad_spend_per_store_week"


LIFT_FIELDS = frozenset({ParamField.LIFT_MIN, ParamField.LIFT_MAX})


@dataclass
class CampaignParameters:
    budget: float = 50_000.0
    stores: int = 100
    baseline_annual_sales: float = 1_000_000.0
    weeks: int = 8
    lift_min: float = 3.5
    lift_max: float = 7.0
    last_edited: Optional[ParamField] = None

    def copy(self) -> "CampaignParameters":
        return replace(self)

    def as_dict(self) -> dict:
        return {
            "budget": self.budget,
            "stores": self.stores,
            "baseline_annual_sales": self.baseline_annual_sales,
            "weeks": self.weeks,
            "lift_min": self.lift_min,
            "lift_max": self.lift_max,
        }


def round_half_up(x: float) -> int:
    # round() is banker's rounding; store counts round .5 upwards
    return int(math.floor(x + 0.5))


def coerce_number(raw: Any) -> float:
    """Parse a raw widget value; anything unparseable or non-finite becomes 0."""
    if raw is None or isinstance(raw, bool):
        return 0.0
    if isinstance(raw, str):
        raw = raw.replace("$", "").replace(",", "").replace("%", "").strip()
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(value):
        return 0.0
    return value


def clamp_edit(
    field: ParamField,
    raw: Any,
    params: CampaignParameters,
    max_weeks: int = MAX_WEEKS,
    max_lift: float = MAX_LIFT,
) -> float:
    """Clamp a raw edit into the field's legal range.

    Lift bounds are clamped against the current counterpart so that
    lift_min <= lift_max holds after every edit.
    """
    value = coerce_number(raw)

    if field in (ParamField.BUDGET, ParamField.BASELINE_ANNUAL_SALES):
        return max(0.0, value)
    if field is ParamField.STORES:
        return max(1, round_half_up(value))
    if field is ParamField.WEEKS:
        return min(max(1, round_half_up(value)), max_weeks)
    if field is ParamField.LIFT_MIN:
        return min(max(0.0, value), params.lift_max)
    if field is ParamField.LIFT_MAX:
        return min(max(params.lift_min, value), max_lift)
    raise ValueError(f"Unknown parameter field: {field!r}")
