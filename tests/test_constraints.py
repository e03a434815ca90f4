"""
Tests for LockSet and resolve_constraints().
"""

import pytest

from roi_calculator.constraints import LockSet, Override, resolve_constraints
from roi_calculator.parameters import LockTarget, ParamField


def _edited(params, field, **values):
    for name, value in values.items():
        setattr(params, name, value)
    params.last_edited = field
    return params


# =============================================================================
# LOCK SET
# =============================================================================

class TestLockSet:
    """Tests for the at-most-two lock invariant."""

    def test_third_lock_rejected(self):
        locks = LockSet([LockTarget.BUDGET, LockTarget.STORES])
        assert locks.lock_asw(6.25) is False
        assert len(locks) == 2
        assert not locks.asw_locked
        assert locks.locked_asw_value is None

    def test_third_plain_lock_rejected(self):
        locks = LockSet([LockTarget.BUDGET])
        assert locks.lock_asw(6.25)
        assert locks.lock(LockTarget.STORES) is False
        assert locks.targets == {LockTarget.BUDGET, LockTarget.AD_SPEND_PER_STORE_WEEK}

    def test_asw_lock_captures_value(self):
        locks = LockSet()
        locks.lock_asw(6.25)
        assert locks.locked_asw_value == 6.25
        # relocking does not recapture
        locks.lock_asw(9.0)
        assert locks.locked_asw_value == 6.25

    def test_unlock_asw_clears_value(self):
        locks = LockSet()
        locks.lock_asw(6.25)
        locks.unlock(LockTarget.AD_SPEND_PER_STORE_WEEK)
        assert locks.locked_asw_value is None
        assert not locks.asw_locked

    def test_accepts_string_targets(self):
        locks = LockSet(["budget"])
        assert "budget" in locks
        assert LockTarget.BUDGET in locks

    def test_asw_target_requires_value(self):
        with pytest.raises(ValueError):
            LockSet([LockTarget.AD_SPEND_PER_STORE_WEEK])

    def test_asw_target_with_value(self):
        locks = LockSet([LockTarget.AD_SPEND_PER_STORE_WEEK], locked_asw_value=6.25)
        assert locks.asw_locked
        assert locks.locked_asw_value == 6.25

    def test_plain_lock_refuses_asw(self):
        with pytest.raises(ValueError):
            LockSet().lock(LockTarget.AD_SPEND_PER_STORE_WEEK)


# =============================================================================
# RESOLVER
# =============================================================================

class TestResolveConstraints:
    """Decision table for the single-hop override."""

    def test_no_override_when_asw_floats(self, scenario_params):
        p = _edited(scenario_params, ParamField.WEEKS, weeks=16)
        assert resolve_constraints(p, LockSet(), 3.125) is None

    def test_no_override_without_edit(self, scenario_params):
        locks = LockSet()
        locks.lock_asw(6.25)
        assert resolve_constraints(scenario_params, locks, 6.25) is None

    def test_weeks_edit_drives_stores(self, scenario_params):
        locks = LockSet()
        locks.lock_asw(6.25)
        p = _edited(scenario_params, ParamField.WEEKS, weeks=16)
        assert resolve_constraints(p, locks, 6.25) == Override(ParamField.STORES, 500)

    def test_weeks_edit_with_budget_locked_still_drives_stores(self, scenario_params):
        locks = LockSet([LockTarget.BUDGET])
        locks.lock_asw(6.25)
        p = _edited(scenario_params, ParamField.WEEKS, weeks=4)
        assert resolve_constraints(p, locks, 6.25) == Override(ParamField.STORES, 2000)

    def test_weeks_edit_with_stores_locked_drives_budget(self, scenario_params):
        locks = LockSet([LockTarget.STORES])
        locks.lock_asw(6.25)
        p = _edited(scenario_params, ParamField.WEEKS, weeks=10)
        assert resolve_constraints(p, locks, 6.25) == Override(ParamField.BUDGET, 62_500.0)

    def test_budget_edit_drives_stores(self, scenario_params):
        locks = LockSet()
        locks.lock_asw(6.25)
        p = _edited(scenario_params, ParamField.BUDGET, budget=25_000)
        assert resolve_constraints(p, locks, 6.25) == Override(ParamField.STORES, 500)

    def test_budget_edit_with_stores_locked_is_left_alone(self, scenario_params):
        locks = LockSet([LockTarget.STORES])
        locks.lock_asw(6.25)
        p = _edited(scenario_params, ParamField.BUDGET, budget=25_000)
        assert resolve_constraints(p, locks, 6.25) is None

    def test_stores_edit_drives_budget(self, scenario_params):
        locks = LockSet()
        locks.lock_asw(6.25)
        p = _edited(scenario_params, ParamField.STORES, stores=333)
        assert resolve_constraints(p, locks, 6.25) == Override(ParamField.BUDGET, 16_650.0)

    def test_stores_edit_with_budget_locked_is_left_alone(self, scenario_params):
        locks = LockSet([LockTarget.BUDGET])
        locks.lock_asw(6.25)
        p = _edited(scenario_params, ParamField.STORES, stores=333)
        assert resolve_constraints(p, locks, 6.25) is None

    def test_unchanged_value_is_not_an_override(self, scenario_params):
        locks = LockSet()
        locks.lock_asw(6.25)
        p = _edited(scenario_params, ParamField.BUDGET, budget=50_000)
        assert resolve_constraints(p, locks, 6.25) is None

    def test_stores_floor_at_one(self, scenario_params):
        locks = LockSet()
        locks.lock_asw(6.25)
        p = _edited(scenario_params, ParamField.BUDGET, budget=10)
        assert resolve_constraints(p, locks, 6.25) == Override(ParamField.STORES, 1)

    def test_stores_round_half_up(self, scenario_params):
        locks = LockSet()
        locks.lock_asw(10.0)
        # 1000 / (10 * 8) = 12.5 stores
        p = _edited(scenario_params, ParamField.BUDGET, budget=1000.0, weeks=8)
        assert resolve_constraints(p, locks, 10.0) == Override(ParamField.STORES, 13)

    def test_zero_pinned_asw_skips_stores(self, scenario_params):
        locks = LockSet()
        locks.lock_asw(0.0)
        p = _edited(scenario_params, ParamField.WEEKS, weeks=16)
        assert resolve_constraints(p, locks, 0.0) is None

    def test_non_coupled_edits_ignored(self, scenario_params):
        locks = LockSet()
        locks.lock_asw(6.25)
        for field in (ParamField.LIFT_MIN, ParamField.LIFT_MAX, ParamField.BASELINE_ANNUAL_SALES):
            p = _edited(scenario_params.copy(), field)
            assert resolve_constraints(p, locks, 6.25) is None
