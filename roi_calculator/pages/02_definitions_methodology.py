from __future__ import annotations

import streamlit as st

st.title("Definitions & Methodology")

st.markdown(
    r"""
### Key definitions
- **Baseline annual sales** = sales of the promoted product across all target stores without the campaign
- **ASW (ad spend per store per week)** = budget / stores / weeks
- **Lift range** = the lower and upper sales lift % you expect the campaign to drive

### Formulas
- **Weekly baseline = baseline annual sales / 52**
- **Expected campaign sales = weekly baseline × weeks**
- **Incremental sales = lift % × expected campaign sales**
- **ROAS = incremental sales (upper lift) / budget**
- **ROI = (incremental sales (upper lift) − budget) / budget**
- **Break-even lift = ASW / baseline sales per store per week**

### Feedback
- **Realistic** target: upper lift ≤ 15%; otherwise **Ambitious**
- **Profitable**: lower lift ≥ break-even · **At-Risk**: break-even inside the range · **Unprofitable**: break-even above the range

### Locking
Budget = ASW × stores × weeks. Lock up to two of budget, stores and ASW.
With ASW locked, editing weeks or budget re-derives stores, and editing stores re-derives budget,
unless the field that would move is itself locked.
"""
)

st.info("Zero budget or zero baseline makes ROI, ROAS or break-even undefined; these show as N/A.")
