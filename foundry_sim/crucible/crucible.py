"""Crucible: the public surface of the foundry simulation.

The crucible owns an ordered list of portions and wires together the
per-tick simulation (thermal, then phase) and the on-demand operations
(composition, balancing, pouring).

Gameplay operations never raise. A rejected commit, pour or removal returns
a falsy value and leaves the crucible unchanged. Exceptions are reserved for
construction-time programming and data errors (invalid config, missing
registry).

The host must serialize tick, commit, pour and remove onto one thread.

Import Policy:
    from foundry_sim.crucible.crucible import Crucible, create_crucible

DO NOT use: from foundry_sim.crucible.crucible import *
"""

from __future__ import annotations

import logging
import math
from typing import Any, Mapping

from foundry_sim.config.defaults import CAPACITY_TOLERANCE
from foundry_sim.config.simulation_config import FoundryConfig, create_default_config
from foundry_sim.config.validation import validate_config
from foundry_sim.core.alloy import Alloy, make_alloy
from foundry_sim.core.balancer import balance_to_target
from foundry_sim.core.composition import (
    is_volume,
    liquid_fill_fraction,
    melted_composition,
    total_volume,
)
from foundry_sim.core.phase import PhaseTransitionMachine
from foundry_sim.core.portion import (
    ObjectLifecycle,
    Phase,
    Portion,
    ThermalSnapshot,
)
from foundry_sim.core.pour import PourExecutor, PourReport
from foundry_sim.core.thermal import ThermalSimulator
from foundry_sim.crucible.casts import get_cast
from foundry_sim.materials.descriptor import Material
from foundry_sim.materials.registry import MaterialRegistry, create_default_registry

logger = logging.getLogger(__name__)


class Crucible:
    """Container of material portions heated toward a furnace setpoint.

    Example:
        >>> crucible = create_crucible()
        >>> crucible.setpoint = 700.0
        >>> crucible.commit("iron", 0.6)
        >>> crucible.commit("copper", 0.4)
        >>> for _ in range(1500):
        ...     crucible.tick(0.02)
        >>> alloy = crucible.pour(crucible.balance_to_target({}))

    """

    def __init__(
        self,
        registry: MaterialRegistry,
        config: FoundryConfig | None = None,
        lifecycle: ObjectLifecycle | None = None,
    ):
        """Initialize an empty crucible.

        Args:
            registry: Materials this crucible accepts
            config: Simulation configuration. If None, uses defaults.
            lifecycle: Collaborator notified when portions with a handle
                melt or solidify

        Raises:
            ValueError: If registry is None
            ConfigurationError: If config validation fails

        """
        if registry is None:
            raise ValueError("Crucible requires a MaterialRegistry")

        if config is None:
            config = create_default_config()
        validate_config(config, raise_on_error=True)

        self.registry = registry
        self.config = config

        self.thermal = ThermalSimulator(config.thermal)
        self.phase_machine = PhaseTransitionMachine(config.phase, lifecycle)
        self.pour_executor = PourExecutor(config.pour.epsilon)

        self._portions: list[Portion] = []
        self._setpoint = self._clamp_setpoint(config.crucible.initial_setpoint)
        self.elapsed = 0.0

    def __repr__(self) -> str:
        return (
            f"Crucible(fill={self.fill_volume:.3f}/{self.capacity:.3f} L, "
            f"setpoint={self._setpoint:.1f} C, portions={len(self._portions)})"
        )

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def capacity(self) -> float:
        return self.config.crucible.capacity

    @property
    def ambient(self) -> float:
        return self.config.crucible.ambient_temp

    @property
    def fill_volume(self) -> float:
        """Total volume of every portion, solid or liquid (liters)."""
        return total_volume(self._portions)

    @property
    def portions(self) -> tuple[Portion, ...]:
        """Portions in commit order. Read-only view."""
        return tuple(self._portions)

    @property
    def setpoint(self) -> float:
        return self._setpoint

    @setpoint.setter
    def setpoint(self, value: float) -> None:
        if value is None or math.isnan(value):
            return
        self._setpoint = self._clamp_setpoint(value)

    def _clamp_setpoint(self, value: float) -> float:
        low = self.config.crucible.setpoint_min
        high = self.config.crucible.setpoint_max
        return min(high, max(low, float(value)))

    # ------------------------------------------------------------------
    # Container mutations
    # ------------------------------------------------------------------

    def commit(
        self,
        material: Material | str,
        volume: float,
        handle: Any = None,
        thermal_state: ThermalSnapshot | None = None,
    ) -> Portion | None:
        """Add a solid portion to the crucible.

        Args:
            material: Registered Material or its id
            volume: Liters to add (> 0)
            handle: Opaque external-object handle passed to lifecycle callbacks
            thermal_state: Saved state of a portion that was taken out
                earlier. If None, the portion starts at ambient. Its
                temperature is clamped into the band between ambient and
                the current setpoint.

        Returns:
            The new Portion, or None if rejected (unknown material,
            non-positive volume, capacity exceeded)

        """
        resolved = self.registry.resolve(material)
        if resolved is None:
            logger.debug(f"Commit rejected: unknown material {material!r}")
            return None

        if not is_volume(volume) or volume <= 0.0:
            logger.debug(f"Commit rejected: invalid volume {volume!r} of {resolved.name}")
            return None

        if self.fill_volume + volume > self.capacity + CAPACITY_TOLERANCE:
            logger.warning(
                f"Crucible is full ({self.fill_volume:.3f}/{self.capacity:.3f} L). "
                f"Cannot add {volume:.3f} L of {resolved.name}."
            )
            return None

        portion = Portion(material=resolved, volume=float(volume), temperature=self.ambient, handle=handle)
        if thermal_state is not None:
            low, high = sorted((self.ambient, self._setpoint))
            portion.temperature = min(high, max(low, thermal_state.temperature))
            portion.melt_progress = thermal_state.melt_progress
            portion.solidify_progress = thermal_state.solidify_progress

        self._portions.append(portion)
        return portion

    def remove(self, portion_id: str) -> ThermalSnapshot | None:
        """Take a solid portion back out of the crucible.

        Liquid portions cannot be picked up.

        Returns:
            The portion's thermal state, or None if there is no solid
            portion with that id

        """
        for index, portion in enumerate(self._portions):
            if portion.portion_id != portion_id:
                continue
            if portion.phase is not Phase.SOLID:
                logger.debug(f"Remove rejected: portion {portion_id[:8]} is liquid")
                return None
            del self._portions[index]
            return portion.snapshot()

        logger.debug(f"Remove rejected: no portion {portion_id[:8]}")
        return None

    def cool_snapshot(self, snapshot: ThermalSnapshot, dt: float) -> ThermalSnapshot:
        """Cool a removed portion's state for dt seconds outside the crucible.

        Uses the configured outside cooling rate toward this crucible's ambient.
        """
        return snapshot.cooled(dt, self.ambient, self.config.thermal.outside_cooling_rate)

    def tick(self, dt: float) -> list[Portion]:
        """Advance the simulation by dt seconds.

        Thermal update first, then phase transitions.

        Returns:
            Portions that changed phase during this tick

        """
        if dt is None or not math.isfinite(dt) or dt <= 0.0:
            return []

        self.thermal.step(self._portions, self._setpoint, self.ambient, dt)
        changed = self.phase_machine.step(self._portions, dt)
        self.elapsed += dt
        return changed

    def reset(self) -> None:
        """Empty the crucible and restore the initial setpoint."""
        self._portions.clear()
        self._setpoint = self._clamp_setpoint(self.config.crucible.initial_setpoint)
        self.elapsed = 0.0

    # ------------------------------------------------------------------
    # Read-only queries
    # ------------------------------------------------------------------

    def melted_composition(self) -> dict[Material, float]:
        return melted_composition(self._portions)

    def liquid_fill_fraction(self) -> float:
        return liquid_fill_fraction(self._portions, self.capacity)

    def balance_to_target(
        self,
        request: Mapping[Material | str, float] | None,
        target: float | None = None,
    ) -> dict[Material, float]:
        """Balance a selection against the melted composition. Does not mutate.

        Args:
            request: Material (or id) -> liters the caller would like
            target: Pour volume; defaults to the configured target volume

        Returns:
            Material -> liters, see balance_to_target()

        """
        if target is None:
            target = self.config.pour.target_volume
        return balance_to_target(
            self._resolve_keys(request),
            self.melted_composition(),
            step=self.config.pour.step,
            target=target,
            epsilon=self.config.pour.epsilon,
        )

    # ------------------------------------------------------------------
    # Pouring
    # ------------------------------------------------------------------

    def try_pour(
        self,
        selection: Mapping[Material | str, float] | None,
        target: float | None = None,
    ) -> PourReport:
        """Pour and return the full report (accepted flag, reason, drained)."""
        if target is None:
            target = self.config.pour.target_volume
        return self.pour_executor.execute(self._portions, self._resolve_keys(selection), target)

    def pour(
        self,
        selection: Mapping[Material | str, float] | None,
        target: float | None = None,
    ) -> Alloy | None:
        """Pour exactly target liters of the selected liquids.

        All-or-nothing: on rejection the crucible is unchanged.

        Returns:
            The poured Alloy, or None if rejected

        """
        report = self.try_pour(selection, target)
        if not report:
            return None

        alloy = make_alloy(report.drained)
        logger.info(
            f"Poured {report.drained_total:.3f} L of {alloy.name} "
            f"(score {alloy.score:.1f}, {alloy.tier.label})"
        )
        return alloy

    def pour_cast(
        self,
        selection: Mapping[Material | str, float] | None,
        cast_id: str,
    ) -> Alloy | None:
        """Pour into a cast; its volume is the target.

        Raises:
            KeyError: If cast_id is not in the catalogue

        """
        return self.pour(selection, target=get_cast(cast_id).volume)

    def _resolve_keys(self, selection) -> dict:
        # Unknown ids map to None so the pour is rejected rather than ignored
        resolved: dict = {}
        for key, liters in (selection or {}).items():
            material = self.registry.resolve(key)
            if material not in resolved:
                resolved[material] = liters
            elif is_volume(liters) and is_volume(resolved[material]):
                resolved[material] += liters
            else:
                # A bad duplicate poisons the entry
                resolved[material] = None
        return resolved


def create_crucible(
    registry: MaterialRegistry | None = None,
    config: FoundryConfig | None = None,
    lifecycle: ObjectLifecycle | None = None,
    **kwargs,
) -> Crucible:
    """Create a crucible (convenience function).

    Args:
        registry: Materials; if None, the standard metals
        config: Simulation configuration
        lifecycle: External-object lifecycle collaborator
        **kwargs: Override specific config parameters (e.g., capacity=8.0)

    Returns:
        Initialized Crucible

    Example:
        >>> crucible = create_crucible(capacity=3.0, melt_hysteresis=5.0)

    """
    if registry is None:
        registry = create_default_registry()

    if config is None and kwargs:
        from foundry_sim.config import create_validated_config
        config = create_validated_config(**kwargs)

    return Crucible(registry, config=config, lifecycle=lifecycle)
