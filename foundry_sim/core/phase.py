"""Phase transition state machine (SOLID <-> LIQUID) with hysteresis.

Melting:
    While T >= melting_point + melt_hysteresis, melt progress accrues at 1 s/s
    and solidify progress is reset. Otherwise melt progress leaks away at
    progress_decay_rate s/s. The portion melts once melt progress reaches
    melt_duration * global_melt_scale.

Solidifying:
    Symmetric, with T <= melting_point - solidify_hysteresis and the
    solidify scale.

Leaking instead of resetting means a portion hovering at the threshold does
not flicker between phases; it needs sustained time on one side.

Import Policy:
    from foundry_sim.core.phase import PhaseTransitionMachine

DO NOT use: from foundry_sim.core.phase import *
"""

from __future__ import annotations

import logging
from typing import Sequence

from foundry_sim.config.defaults import MIN_TRANSITION_SECONDS
from foundry_sim.config.simulation_config import PhaseConfig
from foundry_sim.core.portion import NullLifecycle, ObjectLifecycle, Phase, Portion

logger = logging.getLogger(__name__)


def required_seconds(melt_duration: float, scale: float) -> float:
    """Seconds of sustained heat (or cold) needed for one transition."""
    return max(MIN_TRANSITION_SECONDS, melt_duration * scale)


class PhaseTransitionMachine:
    """Drives per-portion melt/solidify transitions.

    Args:
        config: Phase configuration (hysteresis, scales, decay)
        lifecycle: Collaborator notified when a portion with a handle
            melts or solidifies

    """

    def __init__(
        self,
        config: PhaseConfig | None = None,
        lifecycle: ObjectLifecycle | None = None,
    ):
        self.config = config or PhaseConfig()
        self.lifecycle = lifecycle or NullLifecycle()

    def melt_threshold(self, portion: Portion) -> float:
        return portion.material.melting_point + self.config.melt_hysteresis

    def solidify_threshold(self, portion: Portion) -> float:
        return portion.material.melting_point - self.config.solidify_hysteresis

    def melt_required(self, portion: Portion) -> float:
        return required_seconds(portion.material.melt_duration, self.config.global_melt_scale)

    def solidify_required(self, portion: Portion) -> float:
        return required_seconds(
            portion.material.melt_duration, self.config.effective_solidify_scale,
        )

    def step(self, portions: Sequence[Portion], dt: float) -> list[Portion]:
        """Advance every active portion's phase state by dt seconds.

        Args:
            portions: Portions to update in place
            dt: Elapsed time [s]; non-positive values are a no-op

        Returns:
            Portions that changed phase during this step

        """
        if dt <= 0:
            return []

        changed = []
        for portion in portions:
            if not portion.is_active:
                continue
            if self.advance(portion, dt):
                changed.append(portion)
        return changed

    def advance(self, portion: Portion, dt: float) -> bool:
        """Advance one portion. Returns True if it changed phase."""
        if portion.phase is Phase.SOLID:
            return self._advance_solid(portion, dt)
        return self._advance_liquid(portion, dt)

    def _decay(self, progress: float, dt: float) -> float:
        return max(0.0, progress - dt * self.config.progress_decay_rate)

    def _advance_solid(self, portion: Portion, dt: float) -> bool:
        if portion.temperature < self.melt_threshold(portion):
            portion.melt_progress = self._decay(portion.melt_progress, dt)
            return False

        portion.melt_progress += dt
        portion.solidify_progress = 0.0

        if portion.melt_progress < self.melt_required(portion):
            return False

        portion.melt_progress = 0.0
        if portion.handle is not None:
            self.lifecycle.on_melt(portion.handle)
        portion.phase = Phase.LIQUID

        logger.debug(
            f"{portion.material.name} portion {portion.portion_id[:8]} melted "
            f"at {portion.temperature:.1f} C ({portion.volume:.3f} L)"
        )
        return True

    def _advance_liquid(self, portion: Portion, dt: float) -> bool:
        if portion.temperature > self.solidify_threshold(portion):
            portion.solidify_progress = self._decay(portion.solidify_progress, dt)
            return False

        portion.solidify_progress += dt
        portion.melt_progress = 0.0

        if portion.solidify_progress < self.solidify_required(portion):
            return False

        portion.solidify_progress = 0.0
        if portion.handle is not None:
            self.lifecycle.on_solidify(portion.handle)
        portion.phase = Phase.SOLID

        logger.debug(
            f"{portion.material.name} portion {portion.portion_id[:8]} solidified "
            f"at {portion.temperature:.1f} C ({portion.volume:.3f} L)"
        )
        return True
