"""Portion state and the external-object lifecycle interface.

A Portion is a discrete quantity of one material inside the crucible with
its own thermal and phase state. It may carry an opaque handle to an
external physical representation (a sprite, a physics body). The core
never inspects the handle; it only passes it to an ObjectLifecycle when the
portion melts or solidifies.

Import Policy:
    from foundry_sim.core.portion import Phase, Portion, ObjectLifecycle

DO NOT use: from foundry_sim.core.portion import *
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

from foundry_sim.core.thermal import cool_toward
from foundry_sim.materials.descriptor import Material


class Phase(Enum):
    """Physical phase of a portion."""
    SOLID = "solid"
    LIQUID = "liquid"


class ObjectLifecycle(Protocol):
    """Capability implemented by the collaborator that owns external objects.

    on_melt: hide or destroy the solid representation
    on_solidify: restore or respawn it
    """

    def on_melt(self, handle: Any) -> None: ...

    def on_solidify(self, handle: Any) -> None: ...


class NullLifecycle:
    """Lifecycle that ignores every callback."""

    def on_melt(self, handle: Any) -> None:
        pass

    def on_solidify(self, handle: Any) -> None:
        pass


def _new_portion_id() -> str:
    return uuid.uuid4().hex


@dataclass
class Portion:
    """Discrete quantity of one material in the crucible.

    Attributes:
        material: Shared reference to a registry material
        volume: Liters (>= 0)
        temperature: Current temperature [degC]
        melt_progress: Seconds of sustained heat above the melt threshold
        solidify_progress: Seconds of sustained cold below the solidify threshold
        phase: SOLID or LIQUID
        handle: Opaque external-object handle, owned by the collaborator
        portion_id: Stable identity for removal requests

    """

    material: Material
    volume: float
    temperature: float
    melt_progress: float = 0.0
    solidify_progress: float = 0.0
    phase: Phase = Phase.SOLID
    handle: Any = None
    portion_id: str = field(default_factory=_new_portion_id)

    @property
    def is_liquid(self) -> bool:
        return self.phase is Phase.LIQUID

    @property
    def is_active(self) -> bool:
        """True while the portion still holds volume and takes part in ticks."""
        return self.volume > 0.0

    def snapshot(self) -> "ThermalSnapshot":
        """Capture thermal state, e.g. before the portion leaves the crucible."""
        return ThermalSnapshot(
            temperature=self.temperature,
            melt_progress=self.melt_progress,
            solidify_progress=self.solidify_progress,
        )


@dataclass(frozen=True)
class ThermalSnapshot:
    """Thermal state carried by a portion while it is outside a crucible.

    Attributes:
        temperature: Temperature when taken out [degC]
        melt_progress: Accumulated melt progress [s]
        solidify_progress: Accumulated solidify progress [s]

    """

    temperature: float
    melt_progress: float = 0.0
    solidify_progress: float = 0.0

    def cooled(self, dt: float, ambient: float, rate: float) -> "ThermalSnapshot":
        """Return the snapshot after dt seconds of cooling toward ambient.

        Progress accumulators are kept; only the temperature changes.
        """
        return ThermalSnapshot(
            temperature=cool_toward(self.temperature, ambient, rate, dt),
            melt_progress=self.melt_progress,
            solidify_progress=self.solidify_progress,
        )
