"""Tests for material descriptors and the material registry."""

import warnings

import numpy as np
import pytest
import yaml
from numpy.testing import assert_allclose

from foundry_sim.materials.descriptor import Material, MetalStats
from foundry_sim.materials.registry import MaterialRegistry, create_default_registry

from tests.helpers import make_material


class TestMetalStats:
    """Tests for the five-stat value class."""

    def test_as_array_order(self):
        """Vector order is workability, sharpenability, toughness, density, arcana."""
        stats = MetalStats(workability=1, sharpenability=2, toughness=3, density=4, arcana=5)
        assert_allclose(stats.as_array(), [1, 2, 3, 4, 5])

    def test_out_of_range_rejected(self):
        with pytest.raises(ValueError, match="toughness"):
            MetalStats(toughness=101.0)
        with pytest.raises(ValueError):
            MetalStats(arcana=-0.1)

    def test_from_array_clamps(self):
        stats = MetalStats.from_array(np.array([-5.0, 50.0, 150.0, 0.0, 100.0]))
        assert stats.workability == 0.0
        assert stats.toughness == 100.0
        assert stats.sharpenability == pytest.approx(50.0)

    def test_from_dict_missing_keys_default_to_zero(self):
        stats = MetalStats.from_dict({"workability": 40})
        assert stats.workability == 40.0
        assert stats.arcana == 0.0


class TestMaterial:
    """Tests for Material validation."""

    def test_valid_material(self):
        m = make_material("tin", melting_point=232.0, melt_duration=2.0)
        assert m.id == "tin"
        assert m.name == "Tin"
        assert m.base_color == (255, 255, 255, 255)

    def test_materials_are_hashable_and_equal_by_value(self):
        a = make_material("tin")
        b = make_material("tin")
        assert a == b
        assert len({a, b}) == 1

    def test_non_positive_duration_rejected(self):
        with pytest.raises(ValueError, match="melt duration"):
            make_material("tin", melt_duration=0.0)

    def test_negative_sensitivity_rejected(self):
        with pytest.raises(ValueError, match="heat sensitivity"):
            make_material("tin", heat_sensitivity=-1.0)

    def test_non_finite_melting_point_rejected(self):
        with pytest.raises(ValueError, match="melting point"):
            make_material("tin", melting_point=float("nan"))

    def test_burn_point_below_melting_point_rejected(self):
        with pytest.raises(ValueError, match="burn point"):
            Material(
                id="tin", name="Tin", stats=MetalStats(),
                melting_point=500.0, melt_duration=1.0, burn_point=400.0,
            )

    def test_empty_id_rejected(self):
        with pytest.raises(ValueError):
            make_material("")

    def test_dict_round_trip(self, iron):
        assert Material.from_dict(iron.to_dict()) == iron


class TestMaterialRegistry:
    """Tests for registry lookup and loading."""

    def test_default_registry_contents(self, registry):
        assert registry.list_materials() == [
            "iron", "copper", "silver", "mithril", "adamantite", "gold",
        ]
        assert len(registry) == 6

    def test_default_iron_constants(self, iron):
        assert iron.name == "Iron"
        assert iron.melting_point == 600.0
        assert iron.melt_duration == 4.0
        assert iron.heat_sensitivity == 1.0
        assert_allclose(iron.stats.as_array(), [40, 30, 40, 45, 10])

    def test_get_material_unknown_raises(self, registry):
        with pytest.raises(KeyError, match="unobtainium"):
            registry.get_material("unobtainium")

    def test_lookup_unknown_returns_none(self, registry):
        assert registry.lookup("unobtainium") is None

    def test_resolve(self, registry, iron):
        assert registry.resolve("iron") is iron
        assert registry.resolve(iron) is iron
        assert registry.resolve(None) is None
        assert registry.resolve(make_material("iron")) is None  # same id, different definition

    def test_contains(self, registry, iron):
        assert "iron" in registry
        assert iron in registry
        assert "tin" not in registry

    def test_registry_is_immutable(self, registry):
        with pytest.raises(TypeError):
            registry._materials["tin"] = make_material("tin")

    def test_with_material_returns_new_registry(self, registry):
        tin = make_material("tin")
        extended = registry.with_material(tin)
        assert "tin" in extended
        assert "tin" not in registry

    def test_duplicate_id_warns(self):
        with pytest.warns(UserWarning, match="already registered"):
            MaterialRegistry([make_material("tin"), make_material("tin", melt_duration=2.0)])

    def test_from_yaml_skips_bad_entries(self, tmp_path):
        path = tmp_path / "materials.yaml"
        path.write_text(yaml.safe_dump({
            "materials": [
                {"id": "tin", "name": "Tin", "melting_point": 232, "melt_duration": 2.0,
                 "stats": {"workability": 70}},
                {"id": "bad", "name": "Bad", "melting_point": 100, "melt_duration": -1.0},
            ],
        }))

        with pytest.warns(UserWarning, match="bad"):
            loaded = MaterialRegistry.from_yaml(path)

        assert loaded.list_materials() == ["tin"]
        assert loaded.get_material("tin").stats.workability == 70.0

    def test_from_yaml_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            MaterialRegistry.from_yaml(tmp_path / "missing.yaml")

    def test_from_yaml_without_materials_key(self, tmp_path):
        path = tmp_path / "materials.yaml"
        path.write_text("metals: []\n")
        with pytest.raises(ValueError, match="materials"):
            MaterialRegistry.from_yaml(path)

    def test_save_and_reload(self, registry, tmp_path):
        path = tmp_path / "out" / "materials.yaml"
        registry.save_to_yaml(path)

        with warnings.catch_warnings():
            warnings.simplefilter("error")
            reloaded = MaterialRegistry.from_yaml(path)

        assert list(reloaded) == list(registry)

    def test_default_registry_validates(self):
        assert create_default_registry().validate_all() == []
