"""Crucible container and cast catalogue.

Example usage:
    >>> from foundry_sim.crucible import create_crucible
    >>> crucible = create_crucible()
    >>> crucible.capacity
    5.0
"""

from foundry_sim.crucible.casts import CastCatalogue, CastDefinition, get_cast, list_casts
from foundry_sim.crucible.crucible import Crucible, create_crucible

__all__ = [
    "Crucible",
    "create_crucible",
    "CastCatalogue",
    "CastDefinition",
    "get_cast",
    "list_casts",
]
