"""Alloy composition engine.

Pipeline (make_alloy):
    liters (Material -> L) -> normalize -> combine stats -> score -> tier
    -> auto-name -> Alloy

Scoring weights (sum = 1.0):
    workability 0.28, toughness 0.28, sharpenability 0.24,
    density 0.10, arcana 0.10

Ordering:
    Every iteration over materials goes through ordered_materials(), which
    sorts by Material.id. Auto-naming ties therefore resolve first-by-id.

Import Policy:
    from foundry_sim.core.alloy import Alloy, QualityTier, make_alloy

DO NOT use: from foundry_sim.core.alloy import *
"""

from __future__ import annotations

import math
from bisect import bisect_right
from dataclasses import dataclass, field
from enum import IntEnum
from types import MappingProxyType
from typing import Iterable, Mapping

import numpy as np

from foundry_sim.config.defaults import (
    DOMINANT_PROPORTION,
    PAIR_PROPORTION,
    SCORE_WEIGHTS,
    STAT_MAX,
    STAT_MIN,
    STAT_NAMES,
    TIER_THRESHOLDS,
)
from foundry_sim.materials.descriptor import Material, MetalStats

MIXED_ALLOY_NAME = "Mixed Alloy"

_SCORE_WEIGHTS = np.array(SCORE_WEIGHTS, dtype=np.float64)


class QualityTier(IntEnum):
    """Quality label derived from the hidden score. Ordered worst to best."""
    SCRAP = 0
    POOR = 1
    COMMON = 2
    DECENT = 3
    FINE = 4
    SUPERIOR = 5
    REFINED = 6
    EXALTED = 7
    MYTHIC = 8

    @property
    def label(self) -> str:
        return self.name.capitalize()


@dataclass(frozen=True)
class Alloy:
    """Finished alloy. Immutable once constructed.

    Attributes:
        name: Auto-generated name
        stats: Proportion-weighted stats, each clamped to [0, 100]
        score: Weighted quality score in [0, 100]
        tier: Quality tier for the score
        composition: Material -> proportion, summing to 1

    """

    name: str
    stats: MetalStats
    score: float
    tier: QualityTier
    composition: Mapping[Material, float] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "composition", MappingProxyType(dict(self.composition)))

    def rounded_stats(self) -> dict[str, int]:
        """Stats rounded to the integers shown to the player."""
        return {name: int(round(getattr(self.stats, name))) for name in STAT_NAMES}

    def proportion_of(self, material: Material) -> float:
        return self.composition.get(material, 0.0)


def ordered_materials(materials: Iterable[Material]) -> list[Material]:
    """Deterministic material order: ascending id."""
    return sorted((m for m in materials if m is not None), key=lambda m: m.id)


# =============================================================================
# Pipeline stages
# =============================================================================

def normalize(liters: Mapping[Material, float] | None) -> dict[Material, float]:
    """Convert volumes to proportions.

    Entries with a missing material or a non-positive volume are dropped.
    Empty input or a non-positive total gives an empty result.

    Args:
        liters: Material -> volume

    Returns:
        Material -> proportion in (0, 1], in id order, summing to 1
    """
    if not liters:
        return {}

    positive = {
        m: float(v) for m, v in liters.items()
        if m is not None and v is not None and math.isfinite(v) and v > 0.0
    }
    total = sum(positive.values())
    if total <= 0.0:
        return {}

    return {m: positive[m] / total for m in ordered_materials(positive)}


def combine_stats(normalized: Mapping[Material, float] | None) -> MetalStats:
    """Proportion-weighted average of material stats, clamped to [0, 100]."""
    combined = np.zeros(len(STAT_NAMES), dtype=np.float64)
    if not normalized:
        return MetalStats()

    for material in ordered_materials(normalized):
        combined += normalized[material] * material.stats.as_array()

    return MetalStats.from_array(combined)


def compute_score(stats: MetalStats) -> float:
    """Weighted quality score, clamped to [0, 100]."""
    score = float(np.dot(stats.as_array(), _SCORE_WEIGHTS))
    return min(STAT_MAX, max(STAT_MIN, score))


def score_to_tier(score: float) -> QualityTier:
    """Map a score to its tier. Thresholds are lower-inclusive.

    <10 Scrap, <25 Poor, <40 Common, <55 Decent, <68 Fine, <78 Superior,
    <86 Refined, <93 Exalted, else Mythic.
    """
    if not math.isfinite(score):
        return QualityTier.SCRAP
    return QualityTier(bisect_right(TIER_THRESHOLDS, score))


def auto_name(normalized: Mapping[Material, float] | None) -> str:
    """Name an alloy from its two largest proportions.

    - top proportion >= 0.70: "{Top} Alloy"
    - top two both >= 0.30:   "{Top}-{Second} Alloy"
    - otherwise:              "Mixed Alloy"

    Materials are visited in id order and a later material must be strictly
    larger to displace an earlier one, so equal proportions resolve
    first-by-id.
    """
    if not normalized:
        return MIXED_ALLOY_NAME

    top_a: Material | None = None
    top_b: Material | None = None
    a = b = -1.0

    for material in ordered_materials(normalized):
        value = normalized[material]
        if value > a:
            top_b, b = top_a, a
            top_a, a = material, value
        elif value > b:
            top_b, b = material, value

    if top_a is not None and a >= DOMINANT_PROPORTION:
        return f"{top_a.name} Alloy"

    if top_a is not None and top_b is not None and a >= PAIR_PROPORTION and b >= PAIR_PROPORTION:
        return f"{top_a.name}-{top_b.name} Alloy"

    return MIXED_ALLOY_NAME


def make_alloy(liters: Mapping[Material, float] | None) -> Alloy:
    """Run the full pipeline on a Material -> volume request."""
    normalized = normalize(liters)
    stats = combine_stats(normalized)
    score = compute_score(stats)
    return Alloy(
        name=auto_name(normalized),
        stats=stats,
        score=score,
        tier=score_to_tier(score),
        composition=normalized,
    )
