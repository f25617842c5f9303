"""Material registry.

The registry is an immutable value built once (usually from YAML) and
passed into every Crucible that uses it. There is no process-global
registry; callers that want the standard metals use create_default_registry().
"""

from __future__ import annotations

import warnings
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Iterator

import yaml

from .descriptor import Material


class MaterialRegistry:
    """Immutable lookup of material definitions by id.

    Runtime API:
        - get_material(id) -> Material (raises KeyError)
        - lookup(id) -> Material | None
        - list_materials() -> list[str]
        - with_material(material) -> MaterialRegistry

    Validation:
        - Material constants (Material.__post_init__)
        - Duplicate ids (warned; later definition wins)
    """

    def __init__(self, materials: Iterable[Material] = ()):
        """Initialize material registry.

        Args:
            materials: Material definitions, in the order they should be listed

        """
        table: dict[str, Material] = {}
        for material in materials:
            if material.id in table:
                warnings.warn(
                    f"Material '{material.id}' already registered. Overwriting.",
                    UserWarning,
                    stacklevel=2,
                )
            table[material.id] = material
        self._materials = MappingProxyType(table)

    def __contains__(self, item) -> bool:
        if isinstance(item, Material):
            return self._materials.get(item.id) == item
        return item in self._materials

    def __iter__(self) -> Iterator[Material]:
        return iter(self._materials.values())

    def __len__(self) -> int:
        return len(self._materials)

    def __repr__(self) -> str:
        return f"MaterialRegistry({self.list_materials()!r})"

    def get_material(self, material_id: str) -> Material:
        """Get material by id.

        Args:
            material_id: Material identifier

        Returns:
            Material instance

        Raises:
            KeyError: If material not found

        """
        if material_id not in self._materials:
            available = ", ".join(self.list_materials())
            raise KeyError(
                f"Material '{material_id}' not found. Available: {available}",
            )

        return self._materials[material_id]

    def lookup(self, material_id: str) -> Material | None:
        """Get material by id, or None when unknown."""
        return self._materials.get(material_id)

    def resolve(self, material) -> Material | None:
        """Resolve a Material or an id to a registered Material.

        Returns None for None, unknown ids, and Material values that differ
        from the registered definition with the same id.
        """
        if isinstance(material, Material):
            return material if material in self else None
        if isinstance(material, str):
            return self.lookup(material)
        return None

    def list_materials(self) -> list[str]:
        """List all registered material ids, in registration order."""
        return list(self._materials.keys())

    def with_material(self, material: Material) -> "MaterialRegistry":
        """Return a new registry with material added (or replaced)."""
        return MaterialRegistry([*self._materials.values(), material])

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> "MaterialRegistry":
        """Load materials from YAML file.

        Expected format:
            materials:
              - id: iron
                name: Iron
                stats: {workability: 40, sharpenability: 30, toughness: 40,
                        density: 45, arcana: 10}
                melting_point: 600
                melt_duration: 4.0
                heat_sensitivity: 1.0
                base_color: [120, 120, 130, 255]

        Entries that fail validation are skipped with a warning.

        Args:
            yaml_path: Path to YAML file

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If YAML format is invalid

        """
        path = Path(yaml_path)
        if not path.exists():
            raise FileNotFoundError(f"Material config not found: {yaml_path}")

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)

        if not isinstance(data, dict) or "materials" not in data:
            raise ValueError("YAML must contain 'materials' key")

        materials = []
        for mat_data in data["materials"]:
            try:
                materials.append(Material.from_dict(mat_data))
            except (KeyError, TypeError, ValueError) as e:
                warnings.warn(
                    f"Failed to load material '{mat_data.get('id', 'unknown')}': {e}",
                    UserWarning,
                    stacklevel=2,
                )

        return cls(materials)

    def save_to_yaml(self, yaml_path: str | Path) -> None:
        """Save all registered materials to YAML file."""
        data = {
            "materials": [mat.to_dict() for mat in self._materials.values()],
        }

        path = Path(yaml_path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w", encoding="utf-8") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

    def validate_all(self) -> list[str]:
        """Cross-check registered materials.

        Returns:
            List of validation error messages (empty if all valid)

        """
        errors = []

        names = {}
        for material_id, mat in self._materials.items():
            if material_id != mat.id:
                errors.append(f"{material_id}: key does not match id '{mat.id}'")
            if mat.name in names:
                errors.append(
                    f"{material_id}: display name '{mat.name}' also used by '{names[mat.name]}'",
                )
            names.setdefault(mat.name, material_id)

        return errors


def default_materials_path() -> Path:
    """Path of the packaged standard materials file."""
    return Path(__file__).parent.parent / "data" / "materials.yaml"


def create_default_registry() -> MaterialRegistry:
    """Build a registry of the standard metals.

    Returns:
        MaterialRegistry with Iron, Copper, Silver, Mithril, Adamantite, Gold

    """
    return MaterialRegistry.from_yaml(default_materials_path())
