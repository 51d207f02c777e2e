"""
    Path: terrain_streamer/host/managers/frame_driver.py

    FRAME DRIVER - PER-FRAME SCHEDULER FÜR DEN TERRAIN-STREAMER
    ============================================================

    OVERVIEW:
    Qt-seitiger Host für TerrainStreamingOrchestrator. Ein QTimer ruft einmal pro
    Frame update() auf, misst die echte Frame-Zeit und leitet Commits als Signale
    an Renderer/UI weiter.

    SIGNAL ARCHITECTURE:
    Driver → Renderer/UI:
    - tile_committed(tile_index: int, resolution: int)
    - pass_completed(passes_completed: int)
    - budget_changed(budget: int)
    - regeneration_completed()

    UI → Driver:
    - request_generate_all() (debounced, z.B. "Generate terrain" Button)
    - generate_all_now() (synchron)

    THREADING:
    Alle Aufrufe des Orchestrators laufen über einen QMutex, damit Budget-Wert und
    Zellen-Zähler auch bei Aufrufen aus anderen Threads nur seriell verändert werden.
"""

import logging
import time
from typing import Optional

from PyQt5.QtCore import QMutex, QMutexLocker, QObject, QTimer, pyqtSignal, pyqtSlot

from terrain_streamer.core.terrain_streamer import TerrainStreamingOrchestrator
from terrain_streamer.core.tile_grid import Tile


class DebounceTimer(QObject):
    """
    Funktionsweise: Debouncing für UI-Events
    - Verhindert mehrfaches "alles neu generieren" bei schnell wiederholten Klicks
    - Wartet bis keine weiteren Anfragen mehr kommen
    """

    triggered = pyqtSignal()

    def __init__(self, delay_ms=300):
        """
        Args:
            delay_ms (int): Wartezeit in Millisekunden
        """
        super().__init__()
        self.delay_ms = delay_ms
        self.timer = QTimer()
        self.timer.setSingleShot(True)
        self.timer.timeout.connect(self.triggered.emit)

    def trigger(self):
        """Stoppt vorherigen Timer und startet neu mit delay_ms"""
        self.timer.stop()
        self.timer.start(self.delay_ms)

    def stop(self):
        self.timer.stop()

    def is_pending(self) -> bool:
        return self.timer.isActive()


class FrameDriver(QObject):
    """
    Funktionsweise: Treibt den Orchestrator im Takt eines QTimers
    Aufgabe: Frame-Zeit messen, update() aufrufen, Änderungen als Signale melden
    """

    tile_committed = pyqtSignal(int, int)
    pass_completed = pyqtSignal(int)
    budget_changed = pyqtSignal(int)
    regeneration_completed = pyqtSignal()

    def __init__(self, orchestrator: TerrainStreamingOrchestrator, interval_ms: Optional[int] = None,
                 debounce_ms: int = 300):
        """
        Parameter: orchestrator - Der zu treibende TerrainStreamingOrchestrator
        Parameter: interval_ms - Timer-Intervall, Default aus target_fps
        Parameter: debounce_ms - Wartezeit für request_generate_all()
        """
        super().__init__()
        self.logger = logging.getLogger(self.__class__.__name__)
        self.orchestrator = orchestrator
        self.mutex = QMutex()

        if interval_ms is None:
            interval_ms = max(1, int(1000 / orchestrator.budget_config.target_fps))
        self.interval_ms = interval_ms

        self.frame_timer = QTimer()
        self.frame_timer.setInterval(self.interval_ms)
        self.frame_timer.timeout.connect(self.on_frame)

        self.regenerate_debounce = DebounceTimer(debounce_ms)
        self.regenerate_debounce.triggered.connect(self.generate_all_now)

        self._previous_commit_callback = orchestrator.on_tile_committed
        orchestrator.on_tile_committed = self._on_tile_committed

        self._last_frame_time: Optional[float] = None
        self._last_budget = orchestrator.budget_state.budget
        self._last_passes = orchestrator.passes_completed
        self.frames = 0

    def start(self):
        """Initiale Generierung und Start des Frame-Timers"""
        with QMutexLocker(self.mutex):
            self.orchestrator.start()
        self._last_frame_time = None
        self.frame_timer.start()
        self.logger.info(f"Frame driver started ({self.interval_ms} ms per frame)")

    def stop(self):
        self.frame_timer.stop()
        self.regenerate_debounce.stop()
        self.logger.info(f"Frame driver stopped after {self.frames} frames")

    def is_running(self) -> bool:
        return self.frame_timer.isActive()

    @pyqtSlot()
    def on_frame(self):
        """
        Funktionsweise: Ein Frame: Frame-Zeit messen und Orchestrator-Turn ausführen
        Aufgabe: Erster Frame nach dem Start liefert keine Frame-Zeit
        """
        now = time.perf_counter()
        frame_time = None if self._last_frame_time is None else now - self._last_frame_time
        self._last_frame_time = now
        self.step(frame_time)

    def step(self, frame_time: Optional[float] = None):
        """Ein Turn mit vorgegebener Frame-Zeit (auch für Tests ohne Event-Loop)"""
        with QMutexLocker(self.mutex):
            self.orchestrator.update(frame_time)
        self.frames += 1
        self._emit_changes()

    @pyqtSlot()
    def request_generate_all(self):
        """Debounced Anfrage für komplette Neugenerierung"""
        self.regenerate_debounce.trigger()

    @pyqtSlot()
    def generate_all_now(self):
        with QMutexLocker(self.mutex):
            self.orchestrator.generate_all()
        self.regeneration_completed.emit()

    def _on_tile_committed(self, tile: Tile):
        if self._previous_commit_callback is not None:
            self._previous_commit_callback(tile)
        self.tile_committed.emit(tile.index, tile.resolution)

    def _emit_changes(self):
        budget = self.orchestrator.budget_state.budget
        if budget != self._last_budget:
            self._last_budget = budget
            self.budget_changed.emit(budget)

        passes = self.orchestrator.passes_completed
        if passes != self._last_passes:
            self._last_passes = passes
            self.pass_completed.emit(passes)
