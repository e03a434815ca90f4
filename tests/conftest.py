"""
Pytest fixtures for the ROI calculator tests.
"""

import pytest

from roi_calculator.parameters import CampaignParameters
from roi_calculator.session import CalculatorSession


class FakeClock:
    """Manually advanced monotonic clock for coalescing tests."""

    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# =============================================================================
# PARAMETER FIXTURES
# =============================================================================

@pytest.fixture
def scenario_params() -> CampaignParameters:
    """Reference campaign: $50k across 1,000 stores for 8 weeks."""
    return CampaignParameters(
        budget=50_000.0,
        stores=1000,
        baseline_annual_sales=10_000_000.0,
        weeks=8,
        lift_min=3.5,
        lift_max=7.0,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_session(scenario_params, clock):
    """Build a session over the reference campaign with the given locks."""
    def _make(locked=(), window_seconds=0.15, **overrides):
        params = scenario_params.copy()
        for name, value in overrides.items():
            setattr(params, name, value)
        return CalculatorSession(
            parameters=params,
            locked=locked,
            coalesce_window_seconds=window_seconds,
            clock=clock,
        )
    return _make
