from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

import yaml

from roi_calculator.metrics_engine import FeedbackThresholds
from roi_calculator.parameters import MAX_LIFT, MAX_WEEKS, CampaignParameters, LockTarget
from roi_calculator.session import CalculatorSession


def _project_root_from_this_file(this_file: Path) -> Path:
    # roi_calculator/settings.py -> project root is parent of "roi_calculator"
    return this_file.resolve().parents[1]


def _load_settings(project_root: Path, cfg_path: Optional[Path] = None) -> dict:
    cfg_path = cfg_path or project_root / "config" / "settings.yaml"
    if not cfg_path.exists():
        raise FileNotFoundError(f"Missing config file: {cfg_path}")
    with cfg_path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


@dataclass(frozen=True)
class Paths:
    project_root: Path
    marts_dir: Path

    @staticmethod
    def from_config(project_root: Path, cfg: dict) -> "Paths":
        out = cfg.get("output", {})
        return Paths(project_root, project_root / out.get("marts_dir", "data/marts"))

    def ensure(self) -> None:
        self.marts_dir.mkdir(parents=True, exist_ok=True)


@dataclass(frozen=True)
class CalculatorSettings:
    defaults: CampaignParameters
    locked: Tuple[LockTarget, ...]
    thresholds: FeedbackThresholds
    max_weeks: int
    max_lift: float
    lift_window_ms: int
    log_level: str
    lift_step: float
    weeks_grid: Tuple[int, ...]
    paths: Paths

    @staticmethod
    def from_config(project_root: Path, cfg: dict) -> "CalculatorSettings":
        limits = cfg.get("limits", {})
        max_weeks = int(limits.get("max_weeks", MAX_WEEKS))
        max_lift = float(limits.get("max_lift", MAX_LIFT))

        d = cfg.get("defaults", {})
        defaults = CampaignParameters(
            budget=float(d.get("budget", 50_000)),
            stores=int(d.get("stores", 100)),
            baseline_annual_sales=float(d.get("baseline_annual_sales", 1_000_000)),
            weeks=int(d.get("weeks", 8)),
            lift_min=float(d.get("lift_min", 3.5)),
            lift_max=float(d.get("lift_max", 7.0)),
        )
        _validate_defaults(defaults, max_weeks, max_lift)

        try:
            locked = tuple(LockTarget(name) for name in d.get("locked", ["budget", "stores"]))
        except ValueError as e:
            raise ValueError(f"Invalid lock in defaults.locked: {e}") from e
        if len(set(locked)) > 2:
            raise ValueError("defaults.locked may name at most two of budget, stores, ad_spend_per_store_week")

        fb = cfg.get("feedback", {})
        tiers = fb.get("spend_tiers", {})
        thresholds = FeedbackThresholds(
            realistic_max_lift=float(fb.get("realistic_max_lift", 15.0)),
            very_low=float(tiers.get("very_low", 5)),
            low=float(tiers.get("low", 15)),
            medium=float(tiers.get("medium", 30)),
            high=float(tiers.get("high", 50)),
        )

        window_ms = int(cfg.get("coalescing", {}).get("lift_window_ms", 150))
        if not 0 <= window_ms <= 1000:
            raise ValueError(f"coalescing.lift_window_ms out of range: {window_ms}")

        sc = cfg.get("scenarios", {})
        return CalculatorSettings(
            defaults=defaults,
            locked=locked,
            thresholds=thresholds,
            max_weeks=max_weeks,
            max_lift=max_lift,
            lift_window_ms=window_ms,
            log_level=str(cfg.get("logging", {}).get("level", "INFO")).upper(),
            lift_step=float(sc.get("lift_step", 0.5)),
            weeks_grid=tuple(int(w) for w in sc.get("weeks", [4, 8, 12, 16, 26, 52])),
            paths=Paths.from_config(project_root, cfg),
        )

    def new_session(self) -> CalculatorSession:
        return CalculatorSession(
            parameters=self.defaults,
            locked=self.locked,
            thresholds=self.thresholds,
            max_weeks=self.max_weeks,
            max_lift=self.max_lift,
            coalesce_window_seconds=self.lift_window_ms / 1000,
        )


def _validate_defaults(p: CampaignParameters, max_weeks: int, max_lift: float) -> None:
    if p.budget < 0 or p.baseline_annual_sales < 0:
        raise ValueError("defaults.budget and defaults.baseline_annual_sales must be >= 0")
    if p.stores < 1:
        raise ValueError("defaults.stores must be >= 1")
    if not 1 <= p.weeks <= max_weeks:
        raise ValueError(f"defaults.weeks must be within [1, {max_weeks}]")
    if not 0 <= p.lift_min <= p.lift_max <= max_lift:
        raise ValueError(f"defaults lift range must satisfy 0 <= lift_min <= lift_max <= {max_lift}")


def load_settings(cfg_path: Optional[Path] = None) -> CalculatorSettings:
    project_root = _project_root_from_this_file(Path(__file__))
    cfg = _load_settings(project_root, cfg_path)
    return CalculatorSettings.from_config(project_root, cfg)
