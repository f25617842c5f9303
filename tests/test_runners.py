"""Tests for scenario runners and the command-line interface."""

import csv

import numpy as np
import pytest
import yaml

from foundry_sim.cli import main
from foundry_sim.config.enums import ThermalIntegrator
from foundry_sim.core.alloy import QualityTier
from foundry_sim.runners import (
    OutputConfig,
    Scenario,
    TickHistoryTracker,
    load_scenario,
    run_scenario,
)


def scenario_dict(**overrides):
    data = {
        "name": "iron_copper",
        "dt": 0.02,
        "duration": 20.0,
        "config": {"thermal": {"integrator": "exact"}},
        "setpoint_schedule": [{"time": 0.0, "setpoint": 800}],
        "commits": [
            {"material": "copper", "volume": 0.5, "time": 2.0},
            {"material": "iron", "volume": 0.7},
        ],
        "pour": {"selection": {"iron": 0.6, "copper": 0.4}, "auto_balance": True, "cast": "ingot"},
        "output": {"verbosity": 0},
    }
    data.update(overrides)
    return data


@pytest.fixture
def scenario_file(tmp_path):
    path = tmp_path / "iron_copper.yaml"
    path.write_text(yaml.safe_dump(scenario_dict()))
    return path


def quiet_output(tmp_path, figures=False):
    return OutputConfig(output_dir=tmp_path / "out", enable_figures=figures, verbosity=0)


class TestScenario:
    """Loading scenario definitions."""

    def test_load(self, scenario_file):
        scenario = load_scenario(scenario_file)

        assert scenario.name == "iron_copper"
        assert scenario.n_ticks == 1000
        assert scenario.config.thermal.integrator is ThermalIntegrator.EXACT
        # Commits are sorted by time
        assert [c.material for c in scenario.commits] == ["iron", "copper"]
        assert scenario.pour.cast == "ingot"

    def test_name_defaults_to_file_stem(self, tmp_path):
        data = scenario_dict()
        del data["name"]
        path = tmp_path / "gold_rush.yaml"
        path.write_text(yaml.safe_dump(data))

        assert load_scenario(path).name == "gold_rush"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_scenario(tmp_path / "nope.yaml")

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ValueError, match="mapping"):
            load_scenario(path)

    def test_malformed_commit(self):
        with pytest.raises(ValueError, match="Malformed"):
            Scenario.from_dict(scenario_dict(commits=[{"material": "iron"}]))

    @pytest.mark.parametrize("dt", [0.0, -0.02])
    def test_invalid_dt(self, dt):
        with pytest.raises(ValueError, match="dt"):
            Scenario(dt=dt)

    def test_materials_file_relative_to_scenario(self, tmp_path):
        scenario = Scenario.from_dict(scenario_dict(materials_file="metals.yaml"), base_dir=tmp_path)
        assert scenario.materials_file == tmp_path / "metals.yaml"

    def test_unknown_cast(self):
        with pytest.raises(ValueError, match="anvil"):
            Scenario.from_dict(scenario_dict(pour={"selection": {"iron": 1.0}, "cast": "anvil"}))

    def test_malformed_pour_selection(self):
        with pytest.raises(ValueError, match="selection"):
            Scenario.from_dict(scenario_dict(pour={"selection": {"iron": None}}))


class TestOutputConfig:
    def test_null_sections_use_defaults(self):
        data = {"output": {"history_csv": None, "summary_csv": None, "figures": {"heating_curve": None}}}

        output = OutputConfig.from_dict(data)

        assert output.enable_history_csv
        assert output.enable_summary_csv
        assert output.enable_heating_curve_figure

    def test_null_output(self):
        assert OutputConfig.from_dict({"output": None}).verbosity == 1

    def test_disabled_sections(self):
        data = {"output": {"history_csv": {"enabled": False}, "figures": {"enabled": False}}}

        output = OutputConfig.from_dict(data)

        assert not output.enable_history_csv
        assert output.enable_summary_csv
        assert not output.enable_figures


class TestTracker:
    def test_record_interval(self, crucible):
        tracker = TickHistoryTracker(record_interval=5)
        crucible.commit("iron", 0.5)

        for i in range(12):
            crucible.tick(0.02)
            tracker.record(i, crucible)

        # ticks 0, 5, 10
        assert len(tracker) == 3
        assert tracker.record(11, crucible, force=True)
        assert len(tracker) == 4

    def test_series_nan_padded(self, crucible):
        tracker = TickHistoryTracker()
        tracker.record(0, crucible)
        portion = crucible.commit("iron", 0.5)
        tracker.record(1, crucible)

        series = tracker.series(portion.portion_id)

        assert np.isnan(series.temperature[0])
        assert series.temperature[1] == crucible.ambient
        assert series.melt_time(tracker.times) is None

    def test_unknown_series(self):
        with pytest.raises(KeyError):
            TickHistoryTracker().series("missing")


class TestRunScenario:
    """End-to-end scenario runs."""

    def test_melt_balance_pour(self, scenario_file, tmp_path):
        result = run_scenario(scenario_file, output_config=quiet_output(tmp_path))

        assert result.pour_report
        assert result.alloy.name == "Iron-Copper Alloy"
        assert result.alloy.tier is QualityTier.COMMON
        assert result.crucible.fill_volume == pytest.approx(0.2)
        assert result.crucible.elapsed == pytest.approx(20.0)

        melt_times = result.melt_times()
        assert len(melt_times) == 2
        assert all(t is not None and 5.0 < t < 15.0 for t in melt_times.values())

    def test_outputs_written(self, scenario_file, tmp_path):
        result = run_scenario(scenario_file, output_config=quiet_output(tmp_path))

        assert set(result.output_files) == {"history_csv", "summary_csv"}
        with open(result.output_files["history_csv"], newline="") as f:
            rows = list(csv.DictReader(f))
        assert {row["material"] for row in rows} == {"iron", "copper"}
        assert rows[-1]["phase"] == "liquid"
        # Fill is recorded before the pour: 1.2 L committed, all of it molten
        assert float(rows[-1]["fill_L"]) == pytest.approx(1.2)
        assert float(rows[-1]["liquid_fill_fraction"]) == pytest.approx(1.2 / 5.0)
        assert float(rows[0]["liquid_fill_fraction"]) == 0.0

        summary = result.output_files["summary_csv"].read_text()
        assert "Iron-Copper Alloy" in summary
        assert "Peak Liquid Fill" in summary

    def test_heating_curve_figure(self, scenario_file, tmp_path):
        result = run_scenario(scenario_file, output_config=quiet_output(tmp_path, figures=True))

        figure = result.output_files["heating_curve"]
        assert figure.exists()
        assert figure.stat().st_size > 0

    def test_no_outputs(self, scenario_file, tmp_path):
        output = OutputConfig(
            output_dir=tmp_path / "out",
            enable_history_csv=False,
            enable_summary_csv=False,
            enable_figures=False,
            verbosity=0,
        )

        result = run_scenario(scenario_file, output_config=output)

        assert result.output_files == {}
        assert not (tmp_path / "out").exists()

    def test_rejected_pour(self, tmp_path):
        scenario = Scenario.from_dict(scenario_dict(pour={"selection": {"iron": 0.5}}))

        result = run_scenario(scenario, output_config=quiet_output(tmp_path))

        assert not result.pour_report
        assert result.pour_report.reason.value == "target_mismatch"
        assert result.alloy is None
        assert result.to_dict()["alloy"] is None

    def test_to_dict(self, scenario_file, tmp_path):
        data = run_scenario(scenario_file, output_config=quiet_output(tmp_path)).to_dict()

        assert data["name"] == "iron_copper"
        assert data["pour_accepted"] is True
        assert data["alloy"]["tier"] == "Common"
        assert data["melted"]["iron"] == pytest.approx(0.1)

    def test_verbose_banner(self, scenario_file, tmp_path, capsys):
        output = quiet_output(tmp_path)
        output.verbosity = 1

        run_scenario(scenario_file, output_config=output)

        out = capsys.readouterr().out
        assert "CRUCIBLE SCENARIO: iron_copper" in out
        assert "Iron -> liquid" in out


class TestCli:
    def test_info(self, capsys):
        assert main(["info"]) == 0
        out = capsys.readouterr().out
        assert "iron" in out
        assert "Medium Blade" in out

    def test_run(self, scenario_file, tmp_path):
        out_dir = tmp_path / "cli_out"
        code = main(["run", str(scenario_file), "--output-dir", str(out_dir), "--no-figures", "-q"])

        assert code == 0
        assert (out_dir / "tick_history.csv").exists()
        assert not (out_dir / "heating_curve.png").exists()

    def test_run_missing_scenario(self, tmp_path):
        assert main(["run", str(tmp_path / "missing.yaml"), "-q"]) == 1

    def test_run_unknown_cast(self, tmp_path):
        path = tmp_path / "bad_cast.yaml"
        path.write_text(yaml.safe_dump(scenario_dict(pour={"selection": {"iron": 1.0}, "cast": "anvil"})))

        assert main(["run", str(path), "--output-dir", str(tmp_path / "o"), "--no-figures", "-q"]) == 1

    def test_run_rejected_pour(self, tmp_path):
        path = tmp_path / "bad_pour.yaml"
        path.write_text(yaml.safe_dump(scenario_dict(pour={"selection": {"iron": 0.5}})))

        code = main(["run", str(path), "--output-dir", str(tmp_path / "o"), "--no-figures", "-q"])

        assert code == 2
