"""Material descriptor for the crucible simulation.

A Material is an immutable bundle of physical constants: five quality
stats, melting point, melt duration, heat sensitivity and a display colour.
Materials are owned by a MaterialRegistry and shared by reference with every
portion that contains them.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from foundry_sim.config.defaults import STAT_MAX, STAT_MIN, STAT_NAMES


@dataclass(frozen=True)
class MetalStats:
    """Five quality stats, each in [0, 100].

    Attributes:
        workability: Ease of shaping
        sharpenability: Edge retention
        toughness: Resistance to fracture
        density: Weight
        arcana: Magical affinity

    """

    workability: float = 0.0
    sharpenability: float = 0.0
    toughness: float = 0.0
    density: float = 0.0
    arcana: float = 0.0

    def __post_init__(self):
        """Validate stat ranges."""
        for name in STAT_NAMES:
            value = getattr(self, name)
            if not (STAT_MIN <= value <= STAT_MAX):
                raise ValueError(
                    f"Stat '{name}' must be in [{STAT_MIN}, {STAT_MAX}]: {value}",
                )

    def as_array(self) -> np.ndarray:
        """Return stats as a float64 vector in STAT_NAMES order."""
        return np.array([getattr(self, name) for name in STAT_NAMES], dtype=np.float64)

    @classmethod
    def from_array(cls, values) -> "MetalStats":
        """Build stats from a vector in STAT_NAMES order, clamped to [0, 100]."""
        clipped = np.clip(np.asarray(values, dtype=np.float64), STAT_MIN, STAT_MAX)
        return cls(**{name: float(v) for name, v in zip(STAT_NAMES, clipped)})

    def to_dict(self) -> dict:
        return {name: getattr(self, name) for name in STAT_NAMES}

    @classmethod
    def from_dict(cls, data: dict) -> "MetalStats":
        return cls(**{name: float(data.get(name, 0.0)) for name in STAT_NAMES})


@dataclass(frozen=True)
class Material:
    """Immutable material definition.

    Required Attributes:
        id: Stable registry key; also the deterministic ordering key
        name: Display name, used in alloy names
        stats: Quality stats
        melting_point: Nominal phase-change temperature [degC]
        melt_duration: Seconds above the melt threshold needed to melt
        heat_sensitivity: Multiplier on the crucible heat-rate base (>= 0)

    Optional Attributes:
        burn_point: Temperature at which the metal burns [degC]
        base_color: RGBA bytes for display; never interpreted by the core
    """

    id: str
    name: str
    stats: MetalStats
    melting_point: float
    melt_duration: float
    heat_sensitivity: float = 1.0
    burn_point: float | None = None
    base_color: tuple[int, int, int, int] = (255, 255, 255, 255)

    def __post_init__(self):
        """Validate material constants."""
        if not self.id:
            raise ValueError("Material id must be non-empty")

        if not self.name:
            raise ValueError(f"Material '{self.id}': name must be non-empty")

        if not math.isfinite(self.melting_point):
            raise ValueError(
                f"Material '{self.id}': melting point must be finite: {self.melting_point}",
            )

        if self.melt_duration <= 0:
            raise ValueError(
                f"Material '{self.id}': melt duration must be positive: {self.melt_duration}",
            )

        if self.heat_sensitivity < 0:
            raise ValueError(
                f"Material '{self.id}': heat sensitivity must be >= 0: {self.heat_sensitivity}",
            )

        if self.burn_point is not None and self.burn_point < self.melting_point:
            raise ValueError(
                f"Material '{self.id}': burn point ({self.burn_point}) below "
                f"melting point ({self.melting_point})",
            )

        if len(self.base_color) != 4:
            raise ValueError(f"Material '{self.id}': base_color must be RGBA")

    def to_dict(self) -> dict:
        """Convert descriptor to dictionary for serialization."""
        data = {
            "id": self.id,
            "name": self.name,
            "stats": self.stats.to_dict(),
            "melting_point": self.melting_point,
            "melt_duration": self.melt_duration,
            "heat_sensitivity": self.heat_sensitivity,
            "base_color": list(self.base_color),
        }

        if self.burn_point is not None:
            data["burn_point"] = self.burn_point

        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Material":
        """Create descriptor from dictionary.

        Args:
            data: Dictionary representation (see data/materials.yaml)

        Returns:
            Material instance

        """
        burn_point = data.get("burn_point")
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", data["id"])),
            stats=MetalStats.from_dict(data.get("stats", {})),
            melting_point=float(data["melting_point"]),
            melt_duration=float(data["melt_duration"]),
            heat_sensitivity=float(data.get("heat_sensitivity", 1.0)),
            burn_point=float(burn_point) if burn_point is not None else None,
            base_color=tuple(int(c) for c in data.get("base_color", (255, 255, 255, 255))),
        )
