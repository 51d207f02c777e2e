"""
Path: core/__init__.py

Funktionsweise: Core-Module Initialisierung für den Terrain-Streamer
Aufgabe: Stellt Synthese-, Build- und Streaming-Klassen für den Host zur Verfügung
"""

# Noise Model
from .noise_iteration import (
    DepthCurve,
    NoiseIteration,
    IterationSet
)
from .noise_source import SimplexNoiseSource
from .height_synthesizer import HeightSynthesizer

# Budgeted Builds
from .heightfield_builder import (
    BudgetState,
    HeightfieldBuildTask,
    BudgetedHeightfieldBuilder
)
from .budget_controller import (
    FrameTimeSmoother,
    AdaptiveBudgetController
)

# Grid, Paging, LOD
from .grid_pager import GridPager, PagingDecision
from .lod_resolver import LODLevel, LODResolver
from .tile_grid import Tile, TileGrid, ObserverState

# Orchestrator
from .terrain_streamer import (
    StreamerState,
    TileBuildSnapshot,
    StreamingPass,
    TerrainStreamingOrchestrator
)

__all__ = [
    # Noise
    'DepthCurve',
    'NoiseIteration',
    'IterationSet',
    'SimplexNoiseSource',
    'HeightSynthesizer',

    # Builds
    'BudgetState',
    'HeightfieldBuildTask',
    'BudgetedHeightfieldBuilder',
    'FrameTimeSmoother',
    'AdaptiveBudgetController',

    # Grid
    'GridPager',
    'PagingDecision',
    'LODLevel',
    'LODResolver',
    'Tile',
    'TileGrid',
    'ObserverState',

    # Orchestrator
    'StreamerState',
    'TileBuildSnapshot',
    'StreamingPass',
    'TerrainStreamingOrchestrator'
]
