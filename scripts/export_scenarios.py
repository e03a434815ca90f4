from __future__ import annotations

from pathlib import Path
import sys


def _project_root_from_this_file(this_file: Path) -> Path:
    # scripts/export_scenarios.py -> project root is parent of "scripts"
    return this_file.resolve().parents[1]


def main() -> None:
    project_root = _project_root_from_this_file(Path(__file__))

    # Ensure imports work regardless of where you run the command from
    sys.path.insert(0, str(project_root))

    from roi_calculator.scenarios import lift_sensitivity, weeks_sensitivity
    from roi_calculator.settings import load_settings

    settings = load_settings()
    paths = settings.paths
    paths.ensure()

    session = settings.new_session()
    params = session.get_snapshot().parameters

    lift = lift_sensitivity(params, step=settings.lift_step, max_lift=settings.max_lift, thresholds=settings.thresholds)
    weeks = weeks_sensitivity(params, settings.weeks_grid, thresholds=settings.thresholds)

    lift_path = paths.marts_dir / "scenario_lift_sensitivity.csv"
    weeks_path = paths.marts_dir / "scenario_weeks_sensitivity.csv"
    lift.to_csv(lift_path, index=False)
    weeks.to_csv(weeks_path, index=False)

    print("✅ Scenario tables written:")
    print(f"- {lift_path}")
    print(f"- {weeks_path}")
    print("Next:")
    print("  streamlit run roi_calculator/app.py")


if __name__ == "__main__":
    main()
