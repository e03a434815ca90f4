from __future__ import annotations

import logging
from typing import Optional

import streamlit as st

from roi_calculator.parameters import LockTarget, ParamField
from roi_calculator.session import CalculatorSession
from roi_calculator.settings import CalculatorSettings, load_settings

SESSION_KEY = "roi_session"

WIDGET_KEYS = {
    ParamField.BUDGET: "in_budget",
    ParamField.STORES: "in_stores",
    ParamField.BASELINE_ANNUAL_SALES: "in_baseline",
    ParamField.WEEKS: "in_weeks",
    ParamField.LIFT_MIN: "in_lift_min",
    ParamField.LIFT_MAX: "in_lift_max",
}

# inputs that double as lock targets
LOCKABLE_FIELDS = {
    ParamField.BUDGET: LockTarget.BUDGET,
    ParamField.STORES: LockTarget.STORES,
}


def _config_hint(err: Exception) -> str:
    return (
        f"Calculator settings could not be loaded: {err}\n\n"
        "Check config/settings.yaml in the project root, then rerun:\n"
        "streamlit run roi_calculator/app.py\n"
    )


@st.cache_data(show_spinner=False)
def get_settings() -> Optional[CalculatorSettings]:
    try:
        settings = load_settings()
    except (FileNotFoundError, ValueError) as e:
        st.error(_config_hint(e))
        return None
    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    return settings


def get_session(settings: CalculatorSettings) -> CalculatorSession:
    """One CalculatorSession per browser session, kept in st.session_state."""
    if SESSION_KEY not in st.session_state:
        st.session_state[SESSION_KEY] = settings.new_session()
        sync_widgets(st.session_state[SESSION_KEY])
    return st.session_state[SESSION_KEY]


def sync_widgets(session: CalculatorSession) -> None:
    # Must run before the widgets are instantiated in a script run
    p = session.parameters
    for field, key in WIDGET_KEYS.items():
        st.session_state[key] = getattr(p, field.value)


def field_locked(session: CalculatorSession, field: ParamField) -> bool:
    """Locked inputs are read-only in the UI."""
    target = LOCKABLE_FIELDS.get(ParamField(field))
    return target is not None and target in session.locks
