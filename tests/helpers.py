"""Builders shared by the foundry_sim test modules."""

from foundry_sim.core.portion import Phase, Portion
from foundry_sim.materials.descriptor import Material, MetalStats


def make_material(material_id, name=None, melting_point=600.0, melt_duration=4.0,
                  heat_sensitivity=1.0, **stats):
    """Build a test material with stats defaulting to 50."""
    values = {k: 50.0 for k in ("workability", "sharpenability", "toughness", "density", "arcana")}
    values.update(stats)
    return Material(
        id=material_id,
        name=name or material_id.capitalize(),
        stats=MetalStats(**values),
        melting_point=melting_point,
        melt_duration=melt_duration,
        heat_sensitivity=heat_sensitivity,
    )


def liquid(material, volume, temperature=700.0):
    """A liquid portion of material."""
    return Portion(material=material, volume=volume, temperature=temperature, phase=Phase.LIQUID)


def solid(material, volume, temperature=20.0):
    """A solid portion of material."""
    return Portion(material=material, volume=volume, temperature=temperature)


def melt_all(crucible):
    """Force every portion in a crucible to LIQUID without ticking."""
    for portion in crucible.portions:
        portion.phase = Phase.LIQUID


class RecordingLifecycle:
    """Lifecycle collaborator that records every callback."""

    def __init__(self):
        self.events = []

    def on_melt(self, handle):
        self.events.append(("melt", handle))

    def on_solidify(self, handle):
        self.events.append(("solidify", handle))
