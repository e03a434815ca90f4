from __future__ import annotations

import sys
from pathlib import Path
import streamlit as st

# Make imports stable regardless of where Streamlit is launched
PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

from roi_calculator.parameters import LIFT_FIELDS, LockTarget, ParamField  # noqa: E402
from roi_calculator.session_access import WIDGET_KEYS, field_locked, get_session, get_settings, sync_widgets  # noqa: E402
from roi_calculator.ui_utils import color_text, fmt_money, fmt_num, fmt_pct, fmt_roas, fmt_roi  # noqa: E402

LOCK_KEYS = {
    LockTarget.BUDGET: "lock_budget",
    LockTarget.STORES: "lock_stores",
    LockTarget.AD_SPEND_PER_STORE_WEEK: "lock_asw",
}


st.set_page_config(
    page_title="Retail Media ROI Calculator",
    layout="wide",
)

settings = get_settings()
if settings is None:
    st.stop()

session = get_session(settings)


def _on_edit(field: ParamField) -> None:
    value = st.session_state[WIDGET_KEYS[field]]
    if field in LIFT_FIELDS:
        session.submit_edit(field, value)
    else:
        session.apply_edit(field, value)
    sync_widgets(session)


def _on_lock(target: LockTarget) -> None:
    session.set_lock(target, st.session_state[LOCK_KEYS[target]])
    # rejected locks leave the set unchanged; reflect that in the checkbox
    st.session_state[LOCK_KEYS[target]] = target in session.locks


# Streamlit sliders commit on release, so pending lift edits are flushed on
# every rerun; the quiescence window only applies to programmatic callers
if session.flush_pending() is not None:
    sync_widgets(session)
for target, key in LOCK_KEYS.items():
    st.session_state[key] = target in session.locks

st.title("Estimate Your Retail Campaign ROI")
st.caption("Budget | Stores | Weeks | Lift range -> spend intensity, break-even and ROI")

left, right = st.columns([2, 1])

with left:
    c1, c2 = st.columns(2)
    with c1:
        st.markdown("### Campaign Parameters")
        st.number_input(
            "Total Campaign Budget ($)", min_value=0.0, step=1000.0,
            disabled=field_locked(session, ParamField.BUDGET),
            key=WIDGET_KEYS[ParamField.BUDGET], on_change=_on_edit, args=(ParamField.BUDGET,),
        )
        st.checkbox(
            "Lock budget", key=LOCK_KEYS[LockTarget.BUDGET],
            disabled=not session.can_lock(LockTarget.BUDGET),
            on_change=_on_lock, args=(LockTarget.BUDGET,),
        )
        st.number_input(
            "Number of Target Test Stores", min_value=1, step=1,
            disabled=field_locked(session, ParamField.STORES),
            key=WIDGET_KEYS[ParamField.STORES], on_change=_on_edit, args=(ParamField.STORES,),
        )
        st.checkbox(
            "Lock stores", key=LOCK_KEYS[LockTarget.STORES],
            disabled=not session.can_lock(LockTarget.STORES),
            on_change=_on_lock, args=(LockTarget.STORES,),
        )
        st.number_input(
            "Baseline Annual Sales ($)", min_value=0.0, step=10000.0,
            key=WIDGET_KEYS[ParamField.BASELINE_ANNUAL_SALES],
            on_change=_on_edit, args=(ParamField.BASELINE_ANNUAL_SALES,),
        )
    with c2:
        st.markdown("### Campaign Details")
        st.number_input(
            "Number of Weeks for Campaign", min_value=1, max_value=settings.max_weeks, step=1,
            key=WIDGET_KEYS[ParamField.WEEKS], on_change=_on_edit, args=(ParamField.WEEKS,),
        )
        st.slider(
            "Expected Sales Lift % (Lower Bound)", min_value=0.0, max_value=settings.max_lift, step=0.1,
            key=WIDGET_KEYS[ParamField.LIFT_MIN], on_change=_on_edit, args=(ParamField.LIFT_MIN,),
        )
        st.slider(
            "Expected Sales Lift % (Upper Bound)", min_value=0.0, max_value=settings.max_lift, step=0.1,
            key=WIDGET_KEYS[ParamField.LIFT_MAX], on_change=_on_edit, args=(ParamField.LIFT_MAX,),
        )

    snap = session.get_snapshot()
    m = snap.metrics
    fb = m.intensity_feedback

    st.markdown("---")
    a1, a2 = st.columns([3, 1])
    with a1:
        st.metric("Ad Spend per Store per Week", fmt_money(m.ad_spend_per_store_week))
        st.markdown(f"{fb.icon} {color_text(fb.label, fb.color)} · spend level: {fb.spend_level}")
        st.caption(fb.message)
    with a2:
        st.checkbox(
            "Lock ad spend / store / week", key=LOCK_KEYS[LockTarget.AD_SPEND_PER_STORE_WEEK],
            disabled=not session.can_lock(LockTarget.AD_SPEND_PER_STORE_WEEK),
            on_change=_on_lock, args=(LockTarget.AD_SPEND_PER_STORE_WEEK,),
        )
        if snap.locked_asw_value is not None:
            st.caption(f"Pinned at {fmt_money(snap.locked_asw_value, force_decimals=True)}")
        if snap.last_override is not None:
            st.info(f"{snap.last_override.field.value.replace('_', ' ').title()} auto-adjusted to keep ASW fixed.")

with right:
    st.markdown("### Results")
    totals, weekly = st.tabs(["Totals", "Weekly"])
    lift_note = f"Based on +{m.lift_min:.1f}% to +{m.lift_max:.1f}% lift"

    with totals:
        st.metric("Expected Campaign Sales", fmt_money(m.expected_campaign_sales))
        st.metric(
            "Expected Incremental Sales",
            f"{fmt_money(m.incremental_sales_min)} - {fmt_money(m.incremental_sales_max)}",
        )
        st.caption(lift_note)
        st.metric("Baseline Sales per Store per Week", fmt_money(m.expected_sales_per_store_per_week))
        st.metric("Total Ad Spend per Store", fmt_money(m.total_ad_spend_per_store))

    with weekly:
        st.metric("Expected Weekly Campaign Sales", fmt_money(m.weekly_baseline_all))
        st.metric(
            "Expected Weekly Incremental Sales",
            f"{fmt_money(m.weekly_incremental_sales_min)} - {fmt_money(m.weekly_incremental_sales_max)}",
        )
        st.caption(lift_note)
        st.metric("Weekly Ad Spend per Store", fmt_money(m.ad_spend_per_store_week))

    r1, r2, r3 = st.columns(3)
    r1.metric("ROI", fmt_roi(m.roi_percent))
    r2.metric("ROAS", fmt_roas(m.roas_ratio))
    r3.metric("Break-even lift", fmt_pct(m.break_even_lift_percent))
    st.caption(f"ROI/ROAS based on your maximum lift input of +{m.lift_max:.1f}% across {fmt_num(m.stores)} stores.")
    st.caption(
        "Actual results may vary based on execution, market conditions, and other factors. "
        "ROI calculated as (Incremental Sales - Campaign Budget) / Campaign Budget."
    )
