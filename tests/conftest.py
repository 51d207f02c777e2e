"""
Gemeinsame Fixtures: deterministische Noise-Stubs, kleine Welt-Konfigurationen, Qt-Application
"""

import numpy as np
import pytest
from PyQt5.QtCore import QCoreApplication

from terrain_streamer.core.noise_iteration import IterationSet, NoiseIteration
from terrain_streamer.core.terrain_streamer import TerrainStreamingOrchestrator
from terrain_streamer.core.tile_grid import TileGrid
from terrain_streamer.host.config.world_config import BudgetConfig, WorldConfig


class FlatNoise:
    """Konstante Noise-Quelle, zählt jede ausgewertete Zelle"""

    def __init__(self, value=1.0):
        self.value = value
        self.calls = 0

    def sample(self, x, y):
        self.calls += 1
        return self.value

    def sample_array(self, xs, ys):
        self.calls += int(np.size(xs))
        return np.full(np.shape(xs), self.value, dtype=np.float64)


class RecordingNoise(FlatNoise):
    """Merkt sich die angefragten Noise-Koordinaten"""

    def __init__(self, value=1.0):
        super().__init__(value)
        self.coordinates = []

    def sample(self, x, y):
        self.coordinates.append((x, y))
        return super().sample(x, y)


class Entity:
    """Verfolgtes Objekt mit Attribut position"""

    def __init__(self, position=(0.0, 0.0, 0.0)):
        self.position = position


@pytest.fixture(scope="session")
def qapp():
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


@pytest.fixture
def flat_noise():
    return FlatNoise()


@pytest.fixture
def small_world():
    """Tiles mit Größe 100, 9 Samples High-Res, 5 Samples Low-Res, kein High-Res-Ring"""
    return WorldConfig.from_defaults(map_size=100.0, resolution=9, distant_resolution=5, high_res_rings=0)


@pytest.fixture
def single_iteration():
    return IterationSet([NoiseIteration(name="Base", depth=20)])


@pytest.fixture
def make_orchestrator(small_world, single_iteration, flat_noise):
    def factory(tile_count=9, tracked=None, committed=None, **budget_overrides):
        budget_params = {"base_budget": 10000, "adaptive": False}
        budget_params.update(budget_overrides)
        budget_config = BudgetConfig.from_defaults(**budget_params)
        grid = TileGrid.create(tile_count, small_world.map_size)
        on_commit = committed.append if committed is not None else None
        return TerrainStreamingOrchestrator(grid, small_world, budget_config, single_iteration,
                                            tracked=tracked, noise_source=flat_noise,
                                            on_tile_committed=on_commit)
    return factory
