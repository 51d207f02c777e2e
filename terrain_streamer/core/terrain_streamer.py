"""
Path: terrain_streamer/core/terrain_streamer.py

TERRAIN STREAMING ORCHESTRATOR - PAGING, LOD UND BUDGETIERTE BUILDS
====================================================================

OVERVIEW:
Hält ein festes N×N Tile-Grid um den Beobachter zentriert. Pro Scheduling-Turn
werden Tiles per GridPager versetzt, per LODResolver klassifiziert und bei Bedarf
über BudgetedHeightfieldBuilder neu berechnet, ohne das Frame-Budget zu sprengen.

STATE MACHINE:
IDLE → STREAMING (ein Durchlauf über alle Tiles, evtl. über viele Turns) → IDLE

PER-TURN ABLAUF (update):
1. Wechsel des verfolgten Objekts → generate_all()
2. Kein aktiver Pass → neuen Pass starten
   Aktiver Pass → Budget adaptiv anpassen (falls aktiviert)
3. Aktiven Pass fortsetzen bis Budget erschöpft oder Pass fertig

ORDERING:
- Budgetiert: Tiles strikt in Index-Reihenfolge, höchstens ein Build gleichzeitig
- generate_all(): Grid neu auslegen, alle Tiles ohne Budget in einem Aufruf neu berechnen
- Tile-Identität wird beim Build-Start per Wert erfasst (Index, Position, LOD, Revision);
  wurde das Tile zwischenzeitlich neu committed, wird das Ergebnis verworfen

INTEGRATION:
- Host liefert Tiles und das verfolgte Objekt (Attribut position)
- on_tile_committed(tile) informiert den Host über neue Heightmaps
"""

import functools
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional, Sequence, Tuple, Union

import numpy as np

from terrain_streamer.core.budget_controller import AdaptiveBudgetController, FrameTimeSmoother
from terrain_streamer.core.grid_pager import GridPager
from terrain_streamer.core.height_synthesizer import HeightSynthesizer
from terrain_streamer.core.heightfield_builder import (
    BudgetedHeightfieldBuilder,
    BudgetState,
    HeightfieldBuildTask,
)
from terrain_streamer.core.lod_resolver import LODLevel, LODResolver
from terrain_streamer.core.noise_iteration import IterationSet
from terrain_streamer.core.tile_grid import ObserverState, Tile, TileGrid
from terrain_streamer.host.config.world_config import BudgetConfig, WorldConfig
from terrain_streamer.host.utils.error_handler import host_handler, scheduling_handler
from terrain_streamer.host.utils.performance_utils import PerformanceMonitor

Position = Tuple[float, float, float]


class StreamerState(Enum):
    IDLE = "idle"
    STREAMING = "streaming"


@dataclass(frozen=True)
class TileBuildSnapshot:
    """Tile-Identität zum Zeitpunkt des Build-Starts"""
    index: int
    position: Position
    lod: LODLevel
    revision: int
    height_scale: float


class StreamingPass:
    """
    Funktionsweise: Ein Durchlauf über alle verwalteten Tiles in Index-Reihenfolge
    Aufgabe: Fortsetzbarer Cursor (nächster Tile-Index, aktive Build-Task)
    """

    def __init__(self, orchestrator: "TerrainStreamingOrchestrator", update_all: bool, use_budget: bool):
        self.orchestrator = orchestrator
        self.update_all = update_all
        self.use_budget = use_budget
        self.next_index = 0
        self.active_task: Optional[HeightfieldBuildTask] = None
        self.builds_started = 0
        self.finished = False

    def advance(self) -> bool:
        """
        Funktionsweise: Arbeitet Tiles ab bis das Budget erschöpft ist oder alle Tiles geprüft sind
        Returns: bool - True wenn der Pass abgeschlossen ist
        """
        budget_state = self.orchestrator.budget_state if self.use_budget else None
        tiles = self.orchestrator.grid.managed_tiles

        while True:
            if self.active_task is not None:
                if not self.active_task.step(budget_state):
                    return False
                self.active_task = None

            if self.next_index >= len(tiles):
                self.finished = True
                return True

            tile = tiles[self.next_index]
            self.next_index += 1
            task = self.orchestrator.plan_tile(tile, force=self.update_all, use_budget=self.use_budget)
            if task is not None:
                self.active_task = task
                self.builds_started += 1


class TerrainStreamingOrchestrator:
    """
    Funktionsweise: Top-Level Loop des Terrain-Streamings
    Aufgabe: Koordiniert Pager, LODResolver, Builder und AdaptiveBudgetController pro Turn
    Methoden: start(), update(), generate_all(), plan_tile(), stats()
    """

    def __init__(self, tiles: Union[TileGrid, Sequence[Tile]], world_config: WorldConfig,
                 budget_config: BudgetConfig, iterations: IterationSet, tracked: Any = None,
                 noise_source=None, on_tile_committed: Optional[Callable[[Tile], None]] = None):
        """
        Parameter: tiles - TileGrid oder Liste von Tiles des Hosts
        Parameter: world_config, budget_config - Konfiguration
        Parameter: iterations - Octave-Liste
        Parameter: tracked - Objekt mit Attribut position (None = Ursprung)
        Parameter: noise_source - Optionale Noise-Quelle für den HeightSynthesizer
        Parameter: on_tile_committed - Callback nach jedem Commit
        """
        self.logger = logging.getLogger(self.__class__.__name__)
        self.world_config = world_config
        self.budget_config = budget_config
        self.iterations = iterations
        self.on_tile_committed = on_tile_committed

        if isinstance(tiles, TileGrid):
            self.grid = tiles
        else:
            self.grid = TileGrid(tiles, world_config.map_size)

        self.synthesizer = HeightSynthesizer(world_config, iterations, noise_source)
        self.builder = BudgetedHeightfieldBuilder(self.synthesizer)
        self.pager = GridPager()
        self.lod_resolver = LODResolver()
        self.controller = AdaptiveBudgetController(budget_config)
        self.smoother = FrameTimeSmoother()
        self.performance_monitor = PerformanceMonitor()

        self.budget_state = BudgetState(budget=budget_config.base_budget)
        self.observer = ObserverState(tracked)

        self.state = StreamerState.IDLE
        self.active_pass: Optional[StreamingPass] = None
        self.turns = 0
        self.passes_completed = 0
        self.full_regenerations = 0
        self.tiles_rebuilt = 0
        self.results_discarded = 0

    # =========================================================================
    # HOST INTERFACE
    # =========================================================================

    @property
    def tracked(self):
        return self.observer.tracked

    @tracked.setter
    def tracked(self, value):
        self.observer.tracked = value

    @property
    def is_streaming(self) -> bool:
        return self.state is StreamerState.STREAMING

    def start(self):
        """Initiale Generierung, sobald ein verfolgtes Objekt gesetzt ist"""
        self.observer.consume_change()
        if self.observer.tracked is not None:
            self.generate_all()

    @scheduling_handler("streaming_update")
    def update(self, frame_time: Optional[float] = None):
        """
        Funktionsweise: Ein Scheduling-Turn (vom Host pro Frame aufgerufen)
        Parameter: frame_time - Gemessene Dauer des letzten Frames in Sekunden
        """
        self.turns += 1
        self.budget_state.evaluated_this_turn = 0
        if frame_time is not None:
            self.smoother.add_sample(frame_time)

        if self.observer.consume_change():
            self.logger.debug("Tracked entity changed, regenerating all tiles")
            self.generate_all()

        if self.active_pass is None:
            self._begin_pass()
        elif self.budget_config.adaptive and self.smoother.smoothed is not None:
            self.controller.adjust(self.budget_state, self.smoother.smoothed)

        if self.active_pass.advance():
            self._finish_pass()

    @scheduling_handler("generate_all")
    def generate_all(self):
        """
        Funktionsweise: Alle Tiles sofort und ohne Budget neu erzeugen
        Aufgabe: Grid neu auslegen, danach erzwungener Rebuild jedes verwalteten Tiles
        """
        self.performance_monitor.start_timing("generate_all")
        self.grid.layout()
        full_pass = StreamingPass(self, update_all=True, use_budget=False)
        full_pass.advance()
        self.full_regenerations += 1
        elapsed = self.performance_monitor.end_timing("generate_all")
        self.logger.info(f"Generated all terrains ({full_pass.builds_started} tiles, {elapsed:.2f}s)")

    # =========================================================================
    # PASS HANDLING
    # =========================================================================

    def _begin_pass(self):
        self.active_pass = StreamingPass(self, update_all=False, use_budget=self.budget_config.use_budget)
        self.state = StreamerState.STREAMING
        self.performance_monitor.start_timing("streaming_pass")

    def _finish_pass(self):
        builds = self.active_pass.builds_started
        self.active_pass = None
        self.state = StreamerState.IDLE
        self.passes_completed += 1
        elapsed = self.performance_monitor.end_timing("streaming_pass")
        if builds:
            self.logger.debug(f"Streaming pass finished: {builds} tile(s) rebuilt in {elapsed:.2f}s, "
                              f"budget={self.budget_state.budget}")

    def plan_tile(self, tile: Tile, force: bool = False,
                  use_budget: bool = True) -> Optional[HeightfieldBuildTask]:
        """
        Funktionsweise: Paging- und LOD-Entscheidung für ein Tile gegen die aktuelle Beobachter-Position
        Aufgabe: Verschiebt das Tile sofort, startet bei Bedarf einen Build
        Returns: HeightfieldBuildTask oder None wenn kein Rebuild nötig
        """
        config = self.world_config
        observer_position = self.observer.position

        decision = self.pager.decide(tile.position, observer_position,
                                     config.map_size, self.grid.tiles_per_side)
        if decision.moved:
            self.logger.debug(f"Tile {tile.index} paged {tile.position} -> {decision.new_position}")
            tile.position = decision.new_position

        needs_low_res = self.lod_resolver.decide(tile.position, observer_position,
                                                 config.map_size, config.high_res_rings)
        lod_changed = self.lod_resolver.needs_rebuild(tile.lod, needs_low_res)

        if not (force or decision.moved or lod_changed):
            return None

        lod = self.lod_resolver.level_for(needs_low_res)
        resolution = config.distant_resolution if lod is LODLevel.LOW else config.resolution
        if lod_changed and tile.lod is not None:
            self.logger.debug(f"Tile {tile.index} LOD {tile.lod.value} -> {lod.value}")

        snapshot = TileBuildSnapshot(
            index=tile.index,
            position=tile.position,
            lod=lod,
            revision=tile.revision,
            height_scale=config.map_depth(self.iterations.total_depth)
        )
        return self.builder.start(tile.position, resolution, use_budget,
                                  on_complete=functools.partial(self._commit, snapshot))

    def _commit(self, snapshot: TileBuildSnapshot, heights: np.ndarray):
        tile = self.grid.tiles[snapshot.index]
        if tile.revision != snapshot.revision:
            self.results_discarded += 1
            self.logger.debug(f"Discarding stale build for tile {snapshot.index} "
                              f"(revision {snapshot.revision} != {tile.revision})")
            return

        tile.commit(heights, snapshot.lod, snapshot.height_scale)
        self.tiles_rebuilt += 1
        self._notify_host(tile)

    @host_handler("tile_committed")
    def _notify_host(self, tile: Tile):
        if self.on_tile_committed is not None:
            self.on_tile_committed(tile)

    # =========================================================================
    # DIAGNOSTICS
    # =========================================================================

    def stats(self) -> Dict[str, Any]:
        """Return: dict mit Pass-, Tile- und Budget-Zählern"""
        return {
            "state": self.state.value,
            "turns": self.turns,
            "passes_completed": self.passes_completed,
            "full_regenerations": self.full_regenerations,
            "tiles_rebuilt": self.tiles_rebuilt,
            "results_discarded": self.results_discarded,
            "suspensions": self.budget_state.suspensions,
            "budget": self.budget_state.budget,
            "managed_tiles": len(self.grid.managed_tiles),
            "unmanaged_tiles": len(self.grid.unmanaged_tiles)
        }
