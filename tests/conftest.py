"""Shared fixtures for the crystal tests."""

import numpy as np
import pytest

from edges import EdgeDeriver
from particle import Particle
from particle_store import ParticleStore
from population import PopulationManager
from settings import CrystalConfig, Region


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def region():
    return Region(center=(0.0, 0.0), distance=100.0, padding=5.0)


@pytest.fixture
def store():
    return ParticleStore()


@pytest.fixture
def manager(store, region, rng):
    return PopulationManager(store, region, rng, speed=1.0)


@pytest.fixture
def deriver():
    return EdgeDeriver(lambda: (200, 100, 50))


@pytest.fixture
def place(store):
    """Inserts a particle at an exact position and returns it."""
    def _place(x, y, direction=(1, 1), speed=1.0):
        particle = Particle(store.next_id(), (x, y), direction, speed)
        store.insert(particle)
        return particle
    return _place


@pytest.fixture
def config():
    return CrystalConfig(particle_number=25, particle_speed=1.0, link_radius=120.0, distance=100.0)
