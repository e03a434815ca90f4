"""
Sensitivity tables built on the metrics engine.

Neither function touches a session: each works on a copy of the parameters.
"""
from __future__ import annotations

from typing import Iterable, Optional

import numpy as np
import pandas as pd

from roi_calculator.constraints import LockSet, resolve_constraints
from roi_calculator.metrics_engine import DEFAULT_THRESHOLDS, FeedbackThresholds, compute_metrics
from roi_calculator.parameters import MAX_LIFT, CampaignParameters, ParamField


def lift_sensitivity(
    params: CampaignParameters,
    step: float = 0.5,
    max_lift: float = MAX_LIFT,
    thresholds: FeedbackThresholds = DEFAULT_THRESHOLDS,
) -> pd.DataFrame:
    """ROI/ROAS at each lift % from 0 to max_lift, holding everything else fixed."""
    m = compute_metrics(params, thresholds)
    lifts = np.round(np.arange(0.0, max_lift + step / 2, step), 4)

    incremental = lifts / 100 * m.expected_campaign_sales
    if m.budget > 0:
        roas = incremental / m.budget
        roi = (incremental - m.budget) / m.budget * 100
    else:
        roas = np.full_like(lifts, np.inf)
        roi = np.full_like(lifts, np.inf)

    return pd.DataFrame({
        "lift_pct": lifts,
        "incremental_sales": incremental,
        "roas_ratio": roas,
        "roi_percent": roi,
        "profitable": lifts >= m.break_even_lift_percent,
    })


def weeks_sensitivity(
    params: CampaignParameters,
    weeks_grid: Iterable[int],
    locked_asw: Optional[float] = None,
    thresholds: FeedbackThresholds = DEFAULT_THRESHOLDS,
) -> pd.DataFrame:
    """Metrics per campaign length.

    With locked_asw, stores are re-derived per row the way a weeks edit does
    when ASW is pinned; otherwise budget and stores stay fixed and ASW floats.
    """
    rows = []
    for weeks in weeks_grid:
        p = params.copy()
        p.weeks = max(1, int(weeks))
        if locked_asw is not None:
            locks = LockSet()
            locks.lock_asw(locked_asw)
            p.last_edited = ParamField.WEEKS
            override = resolve_constraints(p, locks, locked_asw)
            if override is not None:
                setattr(p, override.field.value, override.value)
            p.last_edited = None
        m = compute_metrics(p, thresholds)
        rows.append({
            "weeks": m.weeks,
            "stores": m.stores,
            "budget": m.budget,
            "ad_spend_per_store_week": m.ad_spend_per_store_week,
            "break_even_lift_percent": m.break_even_lift_percent,
            "roi_percent": m.roi_percent,
            "label": m.intensity_feedback.label,
        })
    return pd.DataFrame(rows, columns=[
        "weeks", "stores", "budget", "ad_spend_per_store_week",
        "break_even_lift_percent", "roi_percent", "label",
    ])
