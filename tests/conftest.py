"""Pytest configuration and shared fixtures for foundry_sim tests."""

import pytest

from foundry_sim.config.simulation_config import FoundryConfig
from foundry_sim.crucible.crucible import Crucible
from foundry_sim.materials.registry import MaterialRegistry, create_default_registry

from tests.helpers import RecordingLifecycle, make_material


# Fixtures for materials


@pytest.fixture
def registry():
    """Standard metals registry."""
    return create_default_registry()


@pytest.fixture
def iron(registry):
    return registry.get_material("iron")


@pytest.fixture
def copper(registry):
    return registry.get_material("copper")


@pytest.fixture
def gold(registry):
    return registry.get_material("gold")


@pytest.fixture
def alpha():
    """Test material A (id 'alpha')."""
    return make_material("alpha", workability=80.0, toughness=20.0)


@pytest.fixture
def beta():
    """Test material B (id 'beta')."""
    return make_material("beta", workability=20.0, toughness=80.0)


@pytest.fixture
def gamma():
    """Test material C (id 'gamma')."""
    return make_material("gamma", arcana=90.0)


@pytest.fixture
def test_registry(alpha, beta, gamma):
    return MaterialRegistry([alpha, beta, gamma])


# Fixtures for crucibles


@pytest.fixture
def config():
    """Default configuration."""
    return FoundryConfig()


@pytest.fixture
def crucible(registry, config):
    """Empty crucible with the standard metals."""
    return Crucible(registry, config=config)


@pytest.fixture
def test_crucible(test_registry, config):
    """Empty crucible with the alpha/beta/gamma test materials."""
    return Crucible(test_registry, config=config)


@pytest.fixture
def lifecycle():
    return RecordingLifecycle()
