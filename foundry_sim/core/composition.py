"""Composition aggregation over crucible portions.

All functions here are pure and cheap enough to call every frame for a
live preview.
"""

from __future__ import annotations

import math
import numbers
from typing import Iterable

from foundry_sim.core.portion import Portion
from foundry_sim.materials.descriptor import Material


def is_volume(value) -> bool:
    """True for a finite real number of liters; bools do not count."""
    return isinstance(value, numbers.Real) and not isinstance(value, bool) and math.isfinite(value)


def melted_composition(portions: Iterable[Portion]) -> dict[Material, float]:
    """Material -> total liquid volume.

    Only LIQUID portions with positive volume and a material count.
    Keys appear in first-encountered container order.
    """
    composition: dict[Material, float] = {}
    for portion in portions:
        if portion.material is None or not portion.is_liquid:
            continue
        if portion.volume <= 0.0:
            continue
        composition[portion.material] = composition.get(portion.material, 0.0) + portion.volume
    return composition


def melted_total(portions: Iterable[Portion]) -> float:
    return sum(melted_composition(portions).values())


def total_volume(portions: Iterable[Portion]) -> float:
    """Volume of every portion, solid or liquid."""
    return sum(p.volume for p in portions if p.volume > 0.0)


def liquid_fill_fraction(portions: Iterable[Portion], capacity: float) -> float:
    """Molten volume as a fraction of capacity, clamped to [0, 1]."""
    if capacity <= 0.0:
        return 0.0
    return min(1.0, max(0.0, melted_total(portions) / capacity))
