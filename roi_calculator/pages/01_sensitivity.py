from __future__ import annotations

import streamlit as st

from roi_calculator.scenarios import lift_sensitivity, weeks_sensitivity
from roi_calculator.session_access import get_session, get_settings
from roi_calculator.ui_utils import fmt_money, fmt_num, fmt_pct, fmt_roas, fmt_roi

st.title("Sensitivity")

settings = get_settings()
if settings is None:
    st.stop()

session = get_session(settings)
session.flush_pending()
snap = session.get_snapshot()
m = snap.metrics

c1, c2, c3, c4 = st.columns(4)
c1.metric("Budget", fmt_money(m.budget))
c2.metric("Stores", fmt_num(m.stores))
c3.metric("Weeks", fmt_num(m.weeks))
c4.metric("Break-even lift", fmt_pct(m.break_even_lift_percent))

st.markdown("### ROI by sales lift")
lift = lift_sensitivity(snap.parameters, step=settings.lift_step, max_lift=settings.max_lift, thresholds=settings.thresholds)
st.line_chart(lift[["lift_pct", "roi_percent"]].set_index("lift_pct"))

show = lift.copy()
show["incremental_sales"] = show["incremental_sales"].map(fmt_money)
show["roas_ratio"] = show["roas_ratio"].map(fmt_roas)
show["roi_percent"] = show["roi_percent"].map(fmt_roi)
st.dataframe(show, use_container_width=True)

st.markdown("### Campaign length")
if snap.locked_asw_value is not None:
    st.caption(
        f"Ad spend per store per week is locked at {fmt_money(snap.locked_asw_value, force_decimals=True)}: "
        "stores are re-derived for each length."
    )
else:
    st.caption("Budget and stores held fixed; ad spend per store per week floats with length.")

weeks = weeks_sensitivity(snap.parameters, settings.weeks_grid, locked_asw=snap.locked_asw_value, thresholds=settings.thresholds)
st.bar_chart(weeks[["weeks", "break_even_lift_percent"]].set_index("weeks"))

show = weeks.copy()
show["budget"] = show["budget"].map(fmt_money)
show["ad_spend_per_store_week"] = show["ad_spend_per_store_week"].map(fmt_money)
show["break_even_lift_percent"] = show["break_even_lift_percent"].map(fmt_pct)
show["roi_percent"] = show["roi_percent"].map(fmt_roi)
st.dataframe(show, use_container_width=True)
