"""Cast moulds.

Each cast has a fixed volume, which is the exact target of a pour into it.
The standard catalogue ships as data/casts.yaml and is loaded once, on
first use.

Import Policy:
    from foundry_sim.crucible.casts import CastCatalogue, get_cast, list_casts

DO NOT use: from foundry_sim.crucible.casts import *
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator

import yaml


@dataclass(frozen=True)
class CastDefinition:
    """A cast mould.

    Attributes:
        cast_id: Catalogue key (e.g. "ingot")
        display_name: Name shown to the player
        volume: Liters needed to fill the cast

    """

    cast_id: str
    display_name: str
    volume: float

    def __post_init__(self):
        if not self.cast_id:
            raise ValueError("cast_id must be non-empty")
        if not math.isfinite(self.volume) or self.volume <= 0:
            raise ValueError(f"{self.cast_id}: volume must be positive, got {self.volume}")

    @classmethod
    def from_dict(cls, cast_id: str, data: dict) -> "CastDefinition":
        if not isinstance(data, dict) or "volume" not in data:
            raise ValueError(f"{cast_id}: cast entry needs a 'volume'")
        volume = data["volume"]
        if isinstance(volume, bool) or not isinstance(volume, (int, float)):
            raise ValueError(f"{cast_id}: volume must be a number, got {volume!r}")
        return cls(
            cast_id=cast_id,
            display_name=str(data.get("display_name", cast_id)),
            volume=float(volume),
        )


class CastCatalogue:
    """Ordered, read-only set of cast moulds keyed by id."""

    def __init__(self, casts: Iterable[CastDefinition] = ()):
        self._casts: dict[str, CastDefinition] = {}
        for cast in casts:
            if cast.cast_id in self._casts:
                raise ValueError(f"Duplicate cast id '{cast.cast_id}'")
            self._casts[cast.cast_id] = cast

    def __contains__(self, cast_id: object) -> bool:
        return cast_id in self._casts

    def __iter__(self) -> Iterator[CastDefinition]:
        return iter(self._casts.values())

    def __len__(self) -> int:
        return len(self._casts)

    def get_cast(self, cast_id: str) -> CastDefinition:
        """Look up a cast by id.

        Raises:
            KeyError: If the cast is not in the catalogue

        """
        if cast_id not in self._casts:
            available = ", ".join(self._casts)
            raise KeyError(f"Cast '{cast_id}' not found. Available: {available}")
        return self._casts[cast_id]

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> "CastCatalogue":
        """Load casts from a YAML file.

        Expected format:
            casts:
              ingot:
                display_name: Ingot
                volume: 1.0

        Unlike the materials file, a bad entry fails the whole load.

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If the YAML format or an entry is invalid

        """
        path = Path(yaml_path)
        if not path.exists():
            raise FileNotFoundError(f"Cast catalogue not found: {yaml_path}")

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)

        if not isinstance(data, dict) or not isinstance(data.get("casts"), dict):
            raise ValueError("YAML must contain a 'casts' mapping")

        return cls(CastDefinition.from_dict(str(cast_id), entry) for cast_id, entry in data["casts"].items())


def default_casts_path() -> Path:
    """Path of the packaged standard cast catalogue."""
    return Path(__file__).parent.parent / "data" / "casts.yaml"


_DEFAULT_CATALOGUE: CastCatalogue | None = None


def default_catalogue() -> CastCatalogue:
    """The standard catalogue, loaded on first call."""
    global _DEFAULT_CATALOGUE
    if _DEFAULT_CATALOGUE is None:
        _DEFAULT_CATALOGUE = CastCatalogue.from_yaml(default_casts_path())
    return _DEFAULT_CATALOGUE


def list_casts() -> list[CastDefinition]:
    """All standard casts in catalogue order."""
    return list(default_catalogue())


def get_cast(cast_id: str) -> CastDefinition:
    """Look up a standard cast by id. Raises KeyError if unknown."""
    return default_catalogue().get_cast(cast_id)
