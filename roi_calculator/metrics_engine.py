"""
Campaign metrics engine.

Pure functions from a CampaignParameters snapshot to DerivedMetrics. Nothing in
here raises for degenerate inputs: zero budgets and zero baselines come back as
positive infinity and the presentation layer renders them as "N/A".
"""
from __future__ import annotations

import math
from dataclasses import dataclass

from roi_calculator.parameters import CampaignParameters

WEEKS_PER_YEAR = 52
INF = float("inf")

REALISTIC = "Realistic"
AMBITIOUS = "Ambitious"

PROFITABLE = "Profitable"
AT_RISK = "At-Risk"
UNPROFITABLE = "Unprofitable"
INDETERMINATE = "Indeterminate"


@dataclass(frozen=True)
class FeedbackThresholds:
    realistic_max_lift: float = 15.0
    # $/store/week spend tiers, informational only
    very_low: float = 5.0
    low: float = 15.0
    medium: float = 30.0
    high: float = 50.0


DEFAULT_THRESHOLDS = FeedbackThresholds()


@dataclass(frozen=True)
class IntensityFeedback:
    label: str
    icon: str
    color: str
    message: str
    realism: str
    profitability: str
    spend_level: str


@dataclass(frozen=True)
class DerivedMetrics:
    budget: float
    stores: int
    weeks: int
    lift_min: float
    lift_max: float
    weekly_baseline_all: float
    expected_campaign_sales: float
    expected_sales_per_store_per_week: float
    baseline_sales_per_store_per_week: float
    total_ad_spend_per_store: float
    ad_spend_per_store_week: float
    incremental_sales_min: float
    incremental_sales_max: float
    weekly_incremental_sales_min: float
    weekly_incremental_sales_max: float
    roas_ratio: float
    roi_percent: float
    break_even_lift_percent: float
    intensity_feedback: IntensityFeedback


# (realism, profitability) -> (label, color, message template)
_FEEDBACK_MATRIX = {
    (REALISTIC, PROFITABLE): (
        "Profitable / Realistic Target",
        "green",
        "Break-even requires {be}% lift. Your target range ({lift_range}) clears it "
        "even at the lower bound and stays within a realistic lift (<= {cap}%). "
        "This plan is well positioned to cover its ad spend.",
    ),
    (REALISTIC, AT_RISK): (
        "At-Risk / Realistic Target",
        "orange",
        "Break-even requires {be}% lift, which sits inside your target range "
        "({lift_range}). The campaign only pays back if results land in the upper "
        "part of the range; consider trimming budget or extending reach.",
    ),
    (REALISTIC, UNPROFITABLE): (
        "Unprofitable / Realistic Target",
        "red",
        "Break-even requires {be}% lift, above your whole target range "
        "({lift_range}). At this spend the campaign is unlikely to cover its cost; "
        "reduce ad spend per store per week or add stores.",
    ),
    (AMBITIOUS, PROFITABLE): (
        "Profitable / Ambitious Target",
        "orange",
        "Break-even requires {be}% lift and your range ({lift_range}) clears it, "
        "but the upper target is ambitious (> {cap}%). Plan against the lower bound.",
    ),
    (AMBITIOUS, AT_RISK): (
        "At-Risk / Ambitious Target",
        "orange",
        "Break-even requires {be}% lift, inside your target range ({lift_range}). "
        "Paying back depends on reaching an ambitious upper target (> {cap}%).",
    ),
    (AMBITIOUS, UNPROFITABLE): (
        "Unprofitable / Ambitious Target",
        "red",
        "Break-even requires {be}% lift, above even an ambitious target range "
        "({lift_range}). The campaign is very unlikely to cover its ad spend; "
        "strongly consider optimizing budget, stores or weeks.",
    ),
}


def classify_realism(lift_max: float, thresholds: FeedbackThresholds = DEFAULT_THRESHOLDS) -> str:
    return REALISTIC if lift_max <= thresholds.realistic_max_lift else AMBITIOUS


def classify_profitability(lift_min: float, lift_max: float, break_even_lift_percent: float) -> str:
    if math.isinf(break_even_lift_percent):
        return INDETERMINATE
    if lift_min >= break_even_lift_percent:
        return PROFITABLE
    if break_even_lift_percent <= lift_max:
        return AT_RISK
    return UNPROFITABLE


def classify_spend_level(asw: float, thresholds: FeedbackThresholds = DEFAULT_THRESHOLDS) -> str:
    if asw < thresholds.very_low:
        return "Very Low"
    if asw < thresholds.low:
        return "Low"
    if asw < thresholds.medium:
        return "Optimal"
    if asw < thresholds.high:
        return "High"
    return "Very High"


def classify_feedback(
    asw: float,
    break_even_lift_percent: float,
    lift_min: float,
    lift_max: float,
    thresholds: FeedbackThresholds = DEFAULT_THRESHOLDS,
) -> IntensityFeedback:
    """Map target realism x profitability to a label, colour and message.

    The spend tier is reported alongside but never changes the label or colour.
    """
    realism = classify_realism(lift_max, thresholds)
    profitability = classify_profitability(lift_min, lift_max, break_even_lift_percent)
    spend_level = classify_spend_level(asw, thresholds)
    lift_range = f"{lift_min:.1f}%-{lift_max:.1f}%"

    if profitability == INDETERMINATE:
        label = f"Indeterminate / {realism} Target"
        color = "orange"
        message = (
            f"Break-even lift cannot be computed without baseline sales. "
            f"Enter baseline annual sales to evaluate your target range ({lift_range})."
        )
    else:
        label, color, template = _FEEDBACK_MATRIX[(realism, profitability)]
        message = template.format(
            be=f"{break_even_lift_percent:.1f}",
            lift_range=lift_range,
            cap=f"{thresholds.realistic_max_lift:.0f}",
        )

    return IntensityFeedback(
        label=label,
        icon="✅" if color == "green" else "⚠️",
        color=color,
        message=message,
        realism=realism,
        profitability=profitability,
        spend_level=spend_level,
    )


def compute_metrics(
    params: CampaignParameters,
    thresholds: FeedbackThresholds = DEFAULT_THRESHOLDS,
) -> DerivedMetrics:
    """Recompute every derived metric from the full parameter set."""
    stores = max(1, int(params.stores or 1))
    weeks = max(1, int(params.weeks or 1))
    budget = max(0.0, float(params.budget or 0.0))
    baseline = max(0.0, float(params.baseline_annual_sales or 0.0))

    weekly_baseline_all = baseline / WEEKS_PER_YEAR
    expected_campaign_sales = weekly_baseline_all * weeks
    baseline_per_store_week = weekly_baseline_all / stores
    total_ad_spend_per_store = budget / stores
    asw = total_ad_spend_per_store / weeks

    incremental_min = (params.lift_min / 100) * expected_campaign_sales
    incremental_max = (params.lift_max / 100) * expected_campaign_sales

    roas_ratio = incremental_max / budget if budget > 0 else INF
    roi_percent = (incremental_max - budget) / budget * 100 if budget > 0 else INF
    break_even = asw / baseline_per_store_week * 100 if baseline_per_store_week > 0 else INF

    return DerivedMetrics(
        budget=budget,
        stores=stores,
        weeks=weeks,
        lift_min=params.lift_min,
        lift_max=params.lift_max,
        weekly_baseline_all=weekly_baseline_all,
        expected_campaign_sales=expected_campaign_sales,
        expected_sales_per_store_per_week=baseline_per_store_week,
        baseline_sales_per_store_per_week=baseline_per_store_week,
        total_ad_spend_per_store=total_ad_spend_per_store,
        ad_spend_per_store_week=asw,
        incremental_sales_min=incremental_min,
        incremental_sales_max=incremental_max,
        weekly_incremental_sales_min=incremental_min / weeks,
        weekly_incremental_sales_max=incremental_max / weeks,
        roas_ratio=roas_ratio,
        roi_percent=roi_percent,
        break_even_lift_percent=break_even,
        intensity_feedback=classify_feedback(asw, break_even, params.lift_min, params.lift_max, thresholds),
    )
