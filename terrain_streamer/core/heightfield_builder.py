"""
Path: terrain_streamer/core/heightfield_builder.py

Funktionsweise: Budgetierte, fortsetzbare Heightmap-Berechnung für einzelne Tiles
- BudgetState hält Budget, Zähler der Zellen im aktuellen Scheduling-Turn und Suspension-Count
- HeightfieldBuildTask ist ein expliziter Zustand (Iteration, x, y, teilgefülltes Array)
- step() rechnet Zellen in Reihenfolge Iteration → x → y und suspendiert am Budget
- Fortsetzung exakt an der Unterbrechungsstelle, ohne Verlust oder Doppelberechnung
- BudgetedHeightfieldBuilder startet Tasks und bietet build() für den unbudgetierten Durchlauf

Budget-Regel:
- Jede berechnete Zelle erhöht evaluated_this_turn
- Erreicht der Zähler das Budget (>=), wird zurückgesetzt und die Task gibt die Kontrolle ab.
  Abweichend von einem Vergleich mit > rechnet ein Turn damit höchstens budget Zellen.
- Unbudgetierte Tasks berühren den gemeinsamen Zähler nicht
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

import numpy as np

from terrain_streamer.core.height_synthesizer import HeightSynthesizer
from terrain_streamer.core.noise_iteration import NoiseIteration
from terrain_streamer.host.config.value_default import WORLD, ConfigurationError
from terrain_streamer.host.utils.error_handler import memory_critical_handler, scheduling_handler

Position = Tuple[float, float, float]


@dataclass
class BudgetState:
    """Budget pro Scheduling-Turn und Zähler der bereits berechneten Zellen"""
    budget: int
    evaluated_this_turn: int = 0
    suspensions: int = 0

    def register_cells(self, count: int):
        self.evaluated_this_turn += count

    def remaining(self) -> int:
        return max(0, self.budget - self.evaluated_this_turn)

    def exhausted(self) -> bool:
        """Budget erreicht (>=), nicht erst überschritten"""
        return self.evaluated_this_turn >= self.budget

    def suspend(self):
        """Reset des Zählers beim Abgeben der Kontrolle"""
        self.evaluated_this_turn = 0
        self.suspensions += 1


class HeightfieldBuildTask:
    """
    Funktionsweise: Fortsetzbare Berechnung einer resolution×resolution Heightmap
    Aufgabe: Expliziter Cursor statt Coroutine, damit ein Test-Harness Schritt für Schritt ticken kann
    Attribute: iteration_index, x, y, heights, turns, finished
    total_depth wird beim Start aus denselben Iterationen wie die Octave-Liste gebildet,
    spätere Änderungen am IterationSet betreffen erst die nächste Task.
    """

    def __init__(self, synthesizer: HeightSynthesizer, iterations: List[NoiseIteration],
                 tile_world_position: Position, resolution: int, use_budget: bool,
                 on_complete: Optional[Callable[[np.ndarray], None]] = None):
        self.synthesizer = synthesizer
        self.iterations = iterations
        self.total_depth = sum(iteration.depth for iteration in iterations)
        self.tile_world_position = tuple(tile_world_position)
        self.resolution = resolution
        self.use_budget = use_budget
        self.on_complete = on_complete

        self.heights = np.zeros((resolution, resolution), dtype=np.float64)
        self.iteration_index = 0
        self.x = 0
        self.y = 0
        self.turns = 0
        self.cells_evaluated = 0
        self.finished = False
        self.result: Optional[np.ndarray] = None

    @property
    def total_cells(self) -> int:
        return len(self.iterations) * self.resolution * self.resolution

    @property
    def progress(self) -> float:
        if self.total_cells == 0:
            return 1.0
        return self.cells_evaluated / self.total_cells

    @scheduling_handler("heightfield_step")
    def step(self, budget_state: Optional[BudgetState] = None) -> bool:
        """
        Funktionsweise: Rechnet bis zum Budget-Limit oder bis zum Ende weiter
        Parameter: budget_state - Gemeinsamer Budget-Zustand (nur bei use_budget nötig)
        Returns: bool - True wenn fertig, False wenn suspendiert
        """
        if self.finished:
            return True

        budgeted = self.use_budget and budget_state is not None
        self.turns += 1
        resolution = self.resolution

        while self.iteration_index < len(self.iterations):
            iteration = self.iterations[self.iteration_index]

            while self.x < resolution:
                while self.y < resolution:
                    count = resolution - self.y
                    if budgeted:
                        count = min(count, budget_state.remaining())

                    if count > 0:
                        ys = np.arange(self.y, self.y + count)
                        self.heights[self.x, self.y:self.y + count] += self.synthesizer.heights_for_cells(
                            self.x, ys, resolution, self.tile_world_position, iteration,
                            total_depth=self.total_depth)
                        self.y += count
                        self.cells_evaluated += count
                        if budgeted:
                            budget_state.register_cells(count)

                    if budgeted and budget_state.exhausted() and not self._at_end():
                        budget_state.suspend()
                        return False

                self.y = 0
                self.x += 1

            self.x = 0
            self.iteration_index += 1

        self._complete()
        return True

    def _at_end(self) -> bool:
        """Cursor steht hinter der letzten Zelle der letzten Iteration"""
        if self.y < self.resolution:
            return False
        if self.x < self.resolution - 1:
            return False
        return self.iteration_index >= len(self.iterations) - 1

    def run_to_completion(self) -> np.ndarray:
        """Unbudgetierter Durchlauf in einem Aufruf"""
        while not self.step(None):
            pass
        return self.result

    def _complete(self):
        self.finished = True
        self.result = self.heights
        if self.on_complete is not None:
            self.on_complete(self.result)


class BudgetedHeightfieldBuilder:
    """
    Funktionsweise: Startet Heightmap-Berechnungen für Tiles
    Aufgabe: Validiert Resolution, erzeugt HeightfieldBuildTask mit Snapshot der aktiven Iterationen
    Methoden: start(), build()
    """

    def __init__(self, synthesizer: HeightSynthesizer):
        self.synthesizer = synthesizer
        self.logger = logging.getLogger(self.__class__.__name__)

    def start(self, tile_world_position: Position, resolution: int, use_budget: bool = True,
              on_complete: Optional[Callable[[np.ndarray], None]] = None) -> HeightfieldBuildTask:
        """
        Funktionsweise: Erstellt eine neue Build-Task ohne bereits zu rechnen
        Parameter: tile_world_position - (x, y, z), resolution - Samples pro Achse
        Parameter: use_budget - False für einen Durchlauf ohne Suspension
        Parameter: on_complete - Callback mit dem fertigen Array
        Returns: HeightfieldBuildTask
        """
        if resolution < WORLD.RESOLUTIONMIN:
            raise ConfigurationError(
                f"Resolution {resolution} too small, need at least {WORLD.RESOLUTIONMIN} samples per axis")

        iterations = self.synthesizer.iterations.enabled()
        self.logger.debug(f"Build started at {tuple(tile_world_position)} "
                          f"(resolution={resolution}, iterations={len(iterations)}, budgeted={use_budget})")
        return self._create_task(iterations, tile_world_position, resolution, use_budget, on_complete)

    @memory_critical_handler("heightmap_allocation")
    def _create_task(self, iterations, tile_world_position, resolution, use_budget, on_complete):
        return HeightfieldBuildTask(self.synthesizer, iterations, tile_world_position,
                                    resolution, use_budget, on_complete)

    def build(self, tile_world_position: Position, resolution: int) -> np.ndarray:
        """Komplette Heightmap ohne Budget (für 'alles jetzt generieren')"""
        task = self.start(tile_world_position, resolution, use_budget=False)
        return task.run_to_completion()
