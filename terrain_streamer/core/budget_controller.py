"""
Path: terrain_streamer/core/budget_controller.py

Funktionsweise: Adaptive Regelung des Zellen-Budgets pro Frame
- FrameTimeSmoother glättet gemessene Frame-Zeiten (exponentieller Mittelwert)
- AdaptiveBudgetController erhöht das Budget um adjust_step solange FPS > target_fps,
  sonst Reduktion um adjust_step bis min_budget
- Nach oben unbegrenzt, nach unten auf den Floor geklemmt
"""

import logging
from typing import Optional

from terrain_streamer.core.heightfield_builder import BudgetState
from terrain_streamer.host.config.world_config import BudgetConfig


class FrameTimeSmoother:
    """Exponentiell geglättete Frame-Zeit, erster Messwert wird direkt übernommen"""

    def __init__(self, smoothing: float = 0.2):
        self.smoothing = smoothing
        self.smoothed: Optional[float] = None

    def add_sample(self, frame_time: float) -> float:
        if self.smoothed is None:
            self.smoothed = frame_time
        else:
            self.smoothed += (frame_time - self.smoothed) * self.smoothing
        return self.smoothed

    def reset(self):
        self.smoothed = None


class AdaptiveBudgetController:
    """
    Funktionsweise: Passt BudgetState.budget einmal pro Scheduling-Turn an
    Aufgabe: Hält die gemessene Framerate über target_fps
    """

    def __init__(self, config: BudgetConfig):
        self.config = config
        self.logger = logging.getLogger(self.__class__.__name__)

    def estimated_fps(self, smoothed_frame_time: float) -> float:
        if smoothed_frame_time <= 0:
            return float("inf")
        return 1.0 / smoothed_frame_time

    def adjust(self, budget_state: BudgetState, smoothed_frame_time: float) -> int:
        """
        Funktionsweise: Ein Regelschritt
        Parameter: budget_state - wird verändert, smoothed_frame_time - Sekunden pro Frame
        Returns: int - neues Budget
        """
        fps = self.estimated_fps(smoothed_frame_time)
        if fps > self.config.target_fps:
            budget_state.budget += self.config.adjust_step
        else:
            budget_state.budget -= self.config.adjust_step
            if budget_state.budget < self.config.min_budget:
                budget_state.budget = self.config.min_budget
        return budget_state.budget
