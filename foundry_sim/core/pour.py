"""Pour executor: validate a selection, then drain liquid portions.

A pour is all-or-nothing. Validation reads the melted composition of the
same portion list that is later drained, so once a selection passes the
drain cannot fail. A rejected pour leaves every portion untouched.

Import Policy:
    from foundry_sim.core.pour import PourExecutor, PourReport, PourRejection

DO NOT use: from foundry_sim.core.pour import *
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, MutableSequence

from foundry_sim.config.defaults import DEFAULT_EPSILON, RESIDUAL_VOLUME
from foundry_sim.core.composition import is_volume, melted_composition
from foundry_sim.core.portion import Portion
from foundry_sim.materials.descriptor import Material

logger = logging.getLogger(__name__)


class PourRejection(Enum):
    """Reason a pour was refused."""
    EMPTY_SELECTION = "empty_selection"
    INVALID_ENTRY = "invalid_entry"
    UNKNOWN_MATERIAL = "unknown_material"
    TARGET_MISMATCH = "target_mismatch"
    INSUFFICIENT_LIQUID = "insufficient_liquid"


@dataclass
class PourReport:
    """Outcome of one pour attempt.

    Attributes:
        accepted: True if the portions were drained
        reason: Why the pour was refused (None when accepted)
        drained: Material -> liters actually removed
        melted_before: Total liquid volume before the pour (liters)
        melted_after: Total liquid volume after the pour (liters)

    """

    accepted: bool
    reason: PourRejection | None = None
    drained: dict[Material, float] = field(default_factory=dict)
    melted_before: float = 0.0
    melted_after: float = 0.0

    def __bool__(self) -> bool:
        return self.accepted

    @property
    def drained_total(self) -> float:
        return sum(self.drained.values())


class PourExecutor:
    """Validates and executes pours against a list of portions.

    Args:
        epsilon: Tolerance on the selection sum and on availability (liters)

    """

    def __init__(self, epsilon: float = DEFAULT_EPSILON):
        self.epsilon = epsilon

    def validate(
        self,
        portions: MutableSequence[Portion],
        selection: Mapping[Material | None, float],
        target: float,
    ) -> tuple[PourRejection | None, dict[Material, float]]:
        """Check a selection without touching the portions.

        Returns:
            (reason, cleaned selection); reason is None if the pour may go ahead

        """
        cleaned: dict[Material, float] = {}
        for material, liters in (selection or {}).items():
            if not is_volume(liters) or liters < 0.0:
                return PourRejection.INVALID_ENTRY, {}
            if liters == 0.0:
                continue
            if material is None:
                return PourRejection.UNKNOWN_MATERIAL, {}
            cleaned[material] = cleaned.get(material, 0.0) + float(liters)

        if not cleaned:
            return PourRejection.EMPTY_SELECTION, {}

        if abs(sum(cleaned.values()) - target) > self.epsilon:
            return PourRejection.TARGET_MISMATCH, {}

        available = melted_composition(portions)
        for material, liters in cleaned.items():
            if liters > available.get(material, 0.0) + self.epsilon:
                return PourRejection.INSUFFICIENT_LIQUID, {}

        return None, cleaned

    def execute(
        self,
        portions: MutableSequence[Portion],
        selection: Mapping[Material | None, float],
        target: float,
    ) -> PourReport:
        """Drain exactly the selected liquid volumes, or nothing at all.

        Liquid portions are drained in container order. Portions left at or
        below RESIDUAL_VOLUME are removed from the list.

        Args:
            portions: Crucible portion list, mutated in place on success
            selection: Material -> liters to pour
            target: Volume the selection must sum to (liters)

        Returns:
            PourReport; falsy when rejected

        """
        before = sum(melted_composition(portions).values())

        reason, cleaned = self.validate(portions, selection, target)
        if reason is not None:
            logger.debug(f"Pour of {target:.3f} L rejected: {reason.value}")
            return PourReport(accepted=False, reason=reason, melted_before=before, melted_after=before)

        drained: dict[Material, float] = {}
        for material, liters in cleaned.items():
            remaining = liters
            for portion in portions:
                if remaining <= 0.0:
                    break
                if portion.material != material or not portion.is_liquid or portion.volume <= 0.0:
                    continue
                take = min(portion.volume, remaining)
                portion.volume -= take
                remaining -= take
            drained[material] = liters - max(0.0, remaining)

        for index in range(len(portions) - 1, -1, -1):
            portion = portions[index]
            if portion.is_liquid and portion.volume <= RESIDUAL_VOLUME:
                portion.volume = 0.0
                del portions[index]

        after = sum(melted_composition(portions).values())
        return PourReport(accepted=True, drained=drained, melted_before=before, melted_after=after)
