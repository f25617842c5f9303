"""Volume balancer: adjust a multi-material selection to an exact target volume.

The balancer is read-only. It never touches portions; it works on a
Material -> liters availability map (normally the melted composition) and
returns a new Material -> liters selection.

Algorithm:
    1. Clamp each request to [0, availability] and snap it to the nearest
       step (floor-snap when nearest would overshoot availability).
    2. If nothing usable was requested, seed greedily from the largest
       availabilities, floor-snapped so the seed never overshoots.
    3. Under target: fill one step per material per round. Selected
       materials (by id) are filled until none can take another step;
       only then the rest, by descending availability. If no whole step
       fits any more, top up with the exact remainder.
    4. Over target: trim one step per material per round, largest first.
       If no whole step can be removed any more, trim the exact excess.
    5. Clamp, snap, and put any residual within epsilon on the largest
       entry that can take it.

If the total availability is below the target, the result sums to the total
availability; volume is never invented.

Import Policy:
    from foundry_sim.core.balancer import balance_to_target

DO NOT use: from foundry_sim.core.balancer import *
"""

from __future__ import annotations

import logging
import math
from typing import Mapping

from foundry_sim.config.defaults import (
    DEFAULT_EPSILON,
    DEFAULT_STEP,
    DEFAULT_TARGET_VOLUME,
    MIN_STEP,
)
from foundry_sim.core.composition import is_volume
from foundry_sim.materials.descriptor import Material

logger = logging.getLogger(__name__)

# Relative slack when converting a volume into a whole number of steps,
# so 0.3 / 0.1 counts as 3 steps and not 2.
_STEP_SLACK = 1e-9

# Entries at or below this volume are dropped from the result
_NEGLIGIBLE = 1e-12


def effective_step(step: float) -> float:
    """Step actually used by the balancer. Non-positive steps become MIN_STEP."""
    if step is None or not math.isfinite(step):
        return MIN_STEP
    return max(MIN_STEP, step)


def snap_nearest(value: float, step: float) -> float:
    return round(value / step) * step


def snap_floor(value: float, step: float) -> float:
    """Largest step multiple not above value."""
    if value <= 0.0:
        return 0.0
    return min(value, math.floor(value / step + _STEP_SLACK) * step)


def _clean_availability(availability: Mapping[Material, float] | None) -> dict[Material, float]:
    clean = {}
    for material, liters in (availability or {}).items():
        if material is None or not is_volume(liters):
            continue
        if liters > 0.0:
            clean[material] = float(liters)
    return clean


def _clamp_and_snap(value: float, available: float, step: float) -> float:
    value = min(max(0.0, value), available)
    snapped = snap_nearest(value, step)
    if snapped > available:
        snapped = snap_floor(available, step)
    return max(0.0, snapped)


def _fits(amount: float, step: float) -> bool:
    """True when amount holds at least one whole step."""
    return amount >= step * (1.0 - _STEP_SLACK)


def _fill_order(
    selected: list[Material],
    availability: Mapping[Material, float],
) -> list[list[Material]]:
    """Fill tiers: selected materials by id, then the others by descending availability."""
    chosen = set(selected)
    rest = sorted(
        (m for m in availability if m not in chosen),
        key=lambda m: (-availability[m], m.id),
    )
    return [sorted(selected, key=lambda m: m.id), rest]


def _seed(
    availability: Mapping[Material, float],
    step: float,
    target: float,
    epsilon: float,
) -> dict[Material, float]:
    seeded: dict[Material, float] = {}
    total = 0.0
    for material in sorted(availability, key=lambda m: (-availability[m], m.id)):
        remaining = target - total
        if remaining <= epsilon:
            break
        take = snap_floor(min(availability[material], remaining), step)
        if take > 0.0:
            seeded[material] = take
            total += take
    return seeded


def _fill(
    current: dict[Material, float],
    tiers: list[list[Material]],
    availability: Mapping[Material, float],
    step: float,
    target: float,
    epsilon: float,
) -> None:
    max_rounds = int(math.ceil(target / step)) + len(availability) + 1

    # Whole steps, round-robin within a tier; a tier is exhausted before the next
    for tier in tiers:
        for _ in range(max_rounds):
            progressed = False
            for material in tier:
                deficit = target - sum(current.values())
                if deficit <= epsilon:
                    return
                headroom = availability[material] - current.get(material, 0.0)
                if _fits(headroom, step) and _fits(deficit, step):
                    current[material] = current.get(material, 0.0) + step
                    progressed = True
            if not progressed:
                break

    # No whole step fits: top up with the exact remainder
    for material in [m for tier in tiers for m in tier]:
        deficit = target - sum(current.values())
        if deficit <= epsilon:
            return
        headroom = availability[material] - current.get(material, 0.0)
        if headroom > _NEGLIGIBLE:
            current[material] = current.get(material, 0.0) + min(headroom, deficit)


def _trim(
    current: dict[Material, float],
    step: float,
    target: float,
    epsilon: float,
) -> None:
    max_rounds = int(math.ceil(sum(current.values()) / step)) + len(current) + 1

    for _ in range(max_rounds):
        progressed = False
        for material in sorted(current, key=lambda m: (-current[m], m.id)):
            excess = sum(current.values()) - target
            if excess <= epsilon:
                return
            if _fits(current[material], step) and _fits(excess, step):
                current[material] = max(0.0, current[material] - step)
                progressed = True
        if not progressed:
            break

    # No whole step can go: trim the exact excess
    for material in sorted(current, key=lambda m: (-current[m], m.id)):
        excess = sum(current.values()) - target
        if excess <= epsilon:
            return
        current[material] = max(0.0, current[material] - min(current[material], excess))


def _finalize(
    current: dict[Material, float],
    availability: Mapping[Material, float],
    step: float,
    target: float,
    epsilon: float,
) -> dict[Material, float]:
    clamped = {
        material: min(current[material], availability[material])
        for material in sorted(current, key=lambda m: m.id)
    }
    snapped = {}
    for material, value in clamped.items():
        nearest = min(snap_nearest(value, step), availability[material])
        snapped[material] = nearest if abs(value - nearest) <= epsilon else value
    # Snapping several entries must not drift the total by more than epsilon
    if abs(sum(snapped.values()) - sum(clamped.values())) > epsilon:
        snapped = clamped

    result = {m: v for m, v in snapped.items() if v > _NEGLIGIBLE}

    residual = target - sum(result.values())
    if result and 0.0 < abs(residual) <= epsilon:
        for material in sorted(result, key=lambda m: (-result[m], m.id)):
            adjusted = result[material] + residual
            if 0.0 <= adjusted <= availability[material]:
                result[material] = adjusted
                break
    return result


def balance_to_target(
    request: Mapping[Material, float] | None,
    availability: Mapping[Material, float] | None,
    step: float = DEFAULT_STEP,
    target: float = DEFAULT_TARGET_VOLUME,
    epsilon: float = DEFAULT_EPSILON,
) -> dict[Material, float]:
    """Balance a requested selection so it sums to target.

    Args:
        request: Material -> liters the caller would like (may be empty)
        availability: Material -> liters that can be drawn
        step: Quantization step (liters); floored at MIN_STEP
        target: Volume the result should sum to (liters)
        epsilon: Tolerance on sums and step multiples (liters)

    Returns:
        Material -> liters in id order. Each entry is at most its
        availability. Sums to target within epsilon when enough is
        available, otherwise to the total availability.

    """
    available = _clean_availability(availability)
    if not available or target is None or not math.isfinite(target) or target <= 0.0:
        return {}

    step = effective_step(step)
    epsilon = max(0.0, epsilon)

    current: dict[Material, float] = {}
    for material, liters in (request or {}).items():
        if material not in available or not is_volume(liters):
            continue
        value = _clamp_and_snap(liters, available[material], step)
        if value > 0.0:
            current[material] = value

    if sum(current.values()) <= epsilon:
        current = _seed(available, step, target, epsilon)

    total = sum(current.values())
    if total < target - epsilon:
        tiers = _fill_order(list(current), available)
        _fill(current, tiers, available, step, target, epsilon)
    elif total > target + epsilon:
        _trim(current, step, target, epsilon)

    result = _finalize(current, available, step, target, epsilon)

    shortfall = target - sum(result.values())
    if shortfall > epsilon:
        logger.debug(
            f"Balancer reached {sum(result.values()):.4f} of {target:.4f} L; "
            f"only {sum(available.values()):.4f} L available"
        )
    return result
