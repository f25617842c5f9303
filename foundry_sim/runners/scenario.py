"""Scenario definitions for scripted crucible runs.

A scenario is a YAML file describing what goes into the crucible and when,
how the furnace dial moves, how long to simulate, and what to pour at the
end.

Example scenario:
    name: iron_copper
    dt: 0.02
    duration: 60.0
    config:
      crucible: {capacity: 5.0}
      phase: {melt_hysteresis: 10.0}
    setpoint_schedule:
      - {time: 0.0, setpoint: 900}
      - {time: 45.0, setpoint: 200}
    commits:
      - {material: iron, volume: 0.6}
      - {material: copper, volume: 0.4, time: 2.0}
    pour:
      selection: {iron: 0.6, copper: 0.4}
      auto_balance: true
      cast: ingot
    output:
      directory: output/iron_copper
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from foundry_sim.config.simulation_config import FoundryConfig
from foundry_sim.crucible.casts import default_catalogue


@dataclass
class CommitEvent:
    """Commit volume liters of material at time seconds."""

    material: str
    volume: float
    time: float = 0.0


@dataclass
class SetpointEvent:
    """Turn the furnace dial to setpoint at time seconds."""

    time: float
    setpoint: float


@dataclass
class PourRequest:
    """Pour issued once the scenario has run for its full duration.

    Attributes:
        selection: Material id -> liters
        auto_balance: Balance the selection against the melted composition
            before pouring
        target: Pour volume; None means the configured target volume
        cast: Cast id; overrides target with the cast's volume

    """

    selection: dict[str, float] = field(default_factory=dict)
    auto_balance: bool = False
    target: float | None = None
    cast: str | None = None

    def __post_init__(self):
        if self.cast is not None and self.cast not in default_catalogue():
            available = ", ".join(c.cast_id for c in default_catalogue())
            raise ValueError(f"Unknown cast '{self.cast}'. Available: {available}")


@dataclass
class Scenario:
    """A scripted crucible run."""

    name: str = "scenario"
    config: FoundryConfig = field(default_factory=FoundryConfig)
    dt: float = 0.02
    duration: float = 30.0
    commits: list[CommitEvent] = field(default_factory=list)
    setpoint_schedule: list[SetpointEvent] = field(default_factory=list)
    pour: PourRequest | None = None
    materials_file: Path | None = None
    raw: dict = field(default_factory=dict, repr=False)

    def __post_init__(self):
        if not math.isfinite(self.dt) or self.dt <= 0:
            raise ValueError(f"dt must be positive, got {self.dt}")
        if not math.isfinite(self.duration) or self.duration < 0:
            raise ValueError(f"duration must be non-negative, got {self.duration}")

        self.commits.sort(key=lambda e: e.time)
        self.setpoint_schedule.sort(key=lambda e: e.time)

    @property
    def n_ticks(self) -> int:
        return int(round(self.duration / self.dt))

    @classmethod
    def from_dict(cls, data: dict, base_dir: Path | None = None) -> "Scenario":
        """Build a scenario from a parsed YAML dictionary.

        Args:
            data: Scenario dictionary
            base_dir: Directory relative paths (materials_file) resolve against

        Raises:
            ValueError: If a required field is missing or malformed

        """
        try:
            commits = [
                CommitEvent(
                    material=str(entry["material"]),
                    volume=float(entry["volume"]),
                    time=float(entry.get("time", 0.0)),
                )
                for entry in data.get("commits", []) or []
            ]
            schedule = [
                SetpointEvent(time=float(entry.get("time", 0.0)), setpoint=float(entry["setpoint"]))
                for entry in data.get("setpoint_schedule", []) or []
            ]
        except (KeyError, TypeError) as e:
            raise ValueError(f"Malformed scenario entry: {e}") from e

        pour = None
        pour_data = data.get("pour")
        if pour_data:
            target = pour_data.get("target")
            try:
                selection = {str(k): float(v) for k, v in (pour_data.get("selection") or {}).items()}
            except TypeError as e:
                raise ValueError(f"Malformed pour selection: {e}") from e
            pour = PourRequest(
                selection=selection,
                auto_balance=bool(pour_data.get("auto_balance", False)),
                target=float(target) if target is not None else None,
                cast=pour_data.get("cast"),
            )

        materials_file = data.get("materials_file")
        if materials_file is not None:
            materials_file = Path(materials_file)
            if base_dir is not None and not materials_file.is_absolute():
                materials_file = base_dir / materials_file

        return cls(
            name=data.get("name", "scenario"),
            config=FoundryConfig.from_dict(data.get("config", {}) or {}),
            dt=float(data.get("dt", 0.02)),
            duration=float(data.get("duration", 30.0)),
            commits=commits,
            setpoint_schedule=schedule,
            pour=pour,
            materials_file=materials_file,
            raw=data,
        )


def load_scenario(path: str | Path) -> Scenario:
    """Load a scenario from a YAML file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the YAML is not a mapping or is malformed

    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Scenario not found: {path}")

    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Scenario file must contain a mapping: {path}")

    data.setdefault("name", path.stem)
    return Scenario.from_dict(data, base_dir=path.parent)
