"""Output configuration management.

This module provides centralized configuration for toggling scenario output
files on/off via the ``output`` section of a scenario YAML file.
"""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class OutputConfig:
    """Toggle switches for every scenario output.

    Outputs are only generated if their corresponding flag is enabled.
    """

    output_dir: Path = field(default_factory=lambda: Path("output"))

    enable_history_csv: bool = True
    enable_summary_csv: bool = True

    # Figures
    enable_figures: bool = True
    enable_heating_curve_figure: bool = True
    figure_format: str = "png"
    figure_dpi: int = 150

    # Record every Nth tick in the history
    record_interval: int = 1

    # Console output
    verbosity: int = 1

    @classmethod
    def from_dict(cls, config: dict) -> "OutputConfig":
        """Create OutputConfig from a scenario dictionary.

        Args:
            config: Scenario dictionary (only its ``output`` section is read)

        Returns:
            OutputConfig instance
        """
        output_cfg = config.get("output") or {}
        figures = output_cfg.get("figures") or {}

        return cls(
            output_dir=Path(output_cfg.get("directory", "output")),
            enable_history_csv=(output_cfg.get("history_csv") or {}).get("enabled", True),
            enable_summary_csv=(output_cfg.get("summary_csv") or {}).get("enabled", True),
            enable_figures=figures.get("enabled", True),
            enable_heating_curve_figure=(figures.get("heating_curve") or {}).get("enabled", True),
            figure_format=figures.get("format", "png"),
            figure_dpi=figures.get("dpi", 150),
            record_interval=max(1, int(output_cfg.get("record_interval", 1))),
            verbosity=output_cfg.get("verbosity", 1),
        )

    def history_csv_path(self) -> Path:
        return self.output_dir / "tick_history.csv"

    def summary_csv_path(self) -> Path:
        return self.output_dir / "scenario_summary.csv"

    def heating_curve_figure_path(self) -> Path:
        return self.output_dir / f"heating_curve.{self.figure_format}"


def load_output_config(config: dict) -> OutputConfig:
    """Load output configuration from a scenario dictionary."""
    return OutputConfig.from_dict(config)
