"""Data trackers for scenario runs.

- TickHistoryTracker: time series of the setpoint and of every portion's
  temperature, phase and progress accumulators
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass
class PortionSeries:
    """Recorded history of one portion.

    Arrays are aligned with TickHistoryTracker.times; samples taken while the
    portion was not in the crucible are NaN.
    """

    portion_id: str
    material_id: str
    melting_point: float
    temperature: np.ndarray
    melt_progress: np.ndarray
    solidify_progress: np.ndarray
    liquid: np.ndarray

    def melt_time(self, times: np.ndarray) -> float | None:
        """Time of the first sample at which the portion was liquid."""
        hits = np.flatnonzero(self.liquid == 1.0)
        if hits.size == 0:
            return None
        return float(times[hits[0]])


class TickHistoryTracker:
    """Record crucible state every record_interval ticks.

    Example:
        >>> tracker = TickHistoryTracker(record_interval=5)
        >>> for i in range(n_ticks):
        ...     crucible.tick(dt)
        ...     tracker.record(i, crucible)
        >>> tracker.times, tracker.setpoints
    """

    def __init__(self, record_interval: int = 1):
        self.record_interval = max(1, int(record_interval))
        self._times: list[float] = []
        self._setpoints: list[float] = []
        self._fill: list[float] = []
        self._liquid_fill: list[float] = []
        # portion_id -> metadata, and portion_id -> list of (sample, T, melt, solid, liquid)
        self._meta: dict[str, tuple[str, float]] = {}
        self._samples: dict[str, list[tuple[int, float, float, float, float]]] = {}

    def __len__(self) -> int:
        return len(self._times)

    def record(self, tick_idx: int, crucible, force: bool = False) -> bool:
        """Record one sample if tick_idx falls on the interval.

        Returns:
            True if a sample was recorded
        """
        if not force and tick_idx % self.record_interval != 0:
            return False

        sample = len(self._times)
        self._times.append(crucible.elapsed)
        self._setpoints.append(crucible.setpoint)
        self._fill.append(crucible.fill_volume)
        self._liquid_fill.append(crucible.liquid_fill_fraction())

        for portion in crucible.portions:
            pid = portion.portion_id
            if pid not in self._meta:
                self._meta[pid] = (portion.material.id, portion.material.melting_point)
                self._samples[pid] = []
            self._samples[pid].append((
                sample,
                portion.temperature,
                portion.melt_progress,
                portion.solidify_progress,
                1.0 if portion.is_liquid else 0.0,
            ))
        return True

    @property
    def times(self) -> np.ndarray:
        return np.asarray(self._times, dtype=np.float64)

    @property
    def setpoints(self) -> np.ndarray:
        return np.asarray(self._setpoints, dtype=np.float64)

    @property
    def fill_volumes(self) -> np.ndarray:
        return np.asarray(self._fill, dtype=np.float64)

    @property
    def liquid_fill_fractions(self) -> np.ndarray:
        return np.asarray(self._liquid_fill, dtype=np.float64)

    @property
    def portion_ids(self) -> list[str]:
        return list(self._meta)

    def series(self, portion_id: str) -> PortionSeries:
        """History of one portion, NaN-padded to the full sample grid.

        Raises:
            KeyError: If the portion was never recorded
        """
        if portion_id not in self._meta:
            raise KeyError(f"No history for portion '{portion_id}'")

        n = len(self._times)
        columns = np.full((4, n), np.nan, dtype=np.float64)
        for sample, temp, melt, solid, liquid in self._samples[portion_id]:
            columns[:, sample] = (temp, melt, solid, liquid)

        material_id, melting_point = self._meta[portion_id]
        return PortionSeries(
            portion_id=portion_id,
            material_id=material_id,
            melting_point=melting_point,
            temperature=columns[0],
            melt_progress=columns[1],
            solidify_progress=columns[2],
            liquid=columns[3],
        )

    def all_series(self) -> list[PortionSeries]:
        return [self.series(pid) for pid in self._meta]
