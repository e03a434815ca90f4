"""
Tests for YAML settings loading.
"""

from pathlib import Path

import pytest
import yaml

from roi_calculator.parameters import LockTarget
from roi_calculator.settings import CalculatorSettings, load_settings


def _write(tmp_path: Path, cfg: dict) -> Path:
    p = tmp_path / "settings.yaml"
    p.write_text(yaml.safe_dump(cfg), encoding="utf-8")
    return p


class TestLoadSettings:

    def test_shipped_config_loads(self):
        s = load_settings()
        assert s.defaults.budget == 50_000
        assert s.defaults.stores == 100
        assert s.locked == (LockTarget.BUDGET, LockTarget.STORES)
        assert s.max_weeks == 52
        assert s.thresholds.realistic_max_lift == 15.0
        assert s.lift_window_ms == 150

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_settings(tmp_path / "nope.yaml")

    def test_empty_file_uses_defaults(self, tmp_path):
        p = tmp_path / "settings.yaml"
        p.write_text("", encoding="utf-8")
        s = load_settings(p)
        assert s.defaults.weeks == 8
        assert s.weeks_grid == (4, 8, 12, 16, 26, 52)

    def test_unknown_lock_rejected(self, tmp_path):
        with pytest.raises(ValueError):
            load_settings(_write(tmp_path, {"defaults": {"locked": ["weeks"]}}))

    def test_three_locks_rejected(self, tmp_path):
        cfg = {"defaults": {"locked": ["budget", "stores", "ad_spend_per_store_week"]}}
        with pytest.raises(ValueError):
            load_settings(_write(tmp_path, cfg))

    def test_inverted_lift_range_rejected(self, tmp_path):
        with pytest.raises(ValueError):
            load_settings(_write(tmp_path, {"defaults": {"lift_min": 9, "lift_max": 3}}))

    def test_window_out_of_range(self, tmp_path):
        with pytest.raises(ValueError):
            load_settings(_write(tmp_path, {"coalescing": {"lift_window_ms": 5000}}))

    def test_output_dir_relative_to_project_root(self, tmp_path):
        s = CalculatorSettings.from_config(tmp_path, {"output": {"marts_dir": "out/marts"}})
        assert s.paths.marts_dir == tmp_path / "out" / "marts"
        s.paths.ensure()
        assert s.paths.marts_dir.is_dir()


class TestNewSession:

    def test_session_uses_configured_defaults(self, tmp_path):
        cfg = {
            "defaults": {"budget": 20_000, "stores": 50, "locked": ["ad_spend_per_store_week"]},
            "coalescing": {"lift_window_ms": 0},
        }
        session = load_settings(_write(tmp_path, cfg)).new_session()
        snap = session.get_snapshot()
        assert snap.parameters.budget == 20_000
        assert snap.lock_set == {LockTarget.AD_SPEND_PER_STORE_WEEK}
        assert snap.locked_asw_value == pytest.approx(20_000 / 50 / 8)
        assert session.submit_edit("lift_max", 9.0).parameters.lift_max == 9.0
