"""Material system.

Module structure:
    descriptor: Material and MetalStats value classes
    registry: MaterialRegistry and the standard-metal factory

Example usage:
    >>> from foundry_sim.materials import create_default_registry
    >>> registry = create_default_registry()
    >>> iron = registry.get_material("iron")
    >>> print(iron.melting_point, iron.melt_duration)
    600.0 4.0
    >>> registry.list_materials()
    ['iron', 'copper', 'silver', 'mithril', 'adamantite', 'gold']
"""

from .descriptor import Material, MetalStats
from .registry import MaterialRegistry, create_default_registry, default_materials_path

__all__ = [
    # Descriptor classes
    "Material",
    "MetalStats",
    # Registry
    "MaterialRegistry",
    "create_default_registry",
    "default_materials_path",
]
