"""
Path: terrain_streamer/host/utils/performance_utils.py

Performance Utilities für den Terrain-Streamer
Zeitmessung von Passes, Regenerierungen und Exports
"""

import logging
import time
from functools import wraps


class PerformanceMonitor:
    """
    Funktionsweise: Überwacht Laufzeiten benannter Operationen
    - Misst Pass- und Regenerierungs-Zeiten (auch über mehrere Frames hinweg)
    - Warnt einmalig bei langsamen Operationen
    """

    def __init__(self, slow_threshold=2.0):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.slow_threshold = slow_threshold
        self.start_times = {}
        self.last_durations = {}
        self.performance_warnings = set()

    def start_timing(self, operation_name):
        """Startet Zeitmessung für Operation"""
        self.start_times[operation_name] = time.perf_counter()

    def end_timing(self, operation_name):
        """
        Funktionsweise: Beendet Zeitmessung und loggt Ergebnis
        Args:
            operation_name (str): Name der Operation
        Returns:
            float: Verstrichene Zeit in Sekunden (0 wenn nie gestartet)
        """
        if operation_name not in self.start_times:
            return 0.0

        elapsed = time.perf_counter() - self.start_times.pop(operation_name)
        self.last_durations[operation_name] = elapsed

        if elapsed > self.slow_threshold and operation_name not in self.performance_warnings:
            self.logger.warning(f"Langsame Operation: {operation_name} dauerte {elapsed:.2f}s")
            self.performance_warnings.add(operation_name)
        elif elapsed < self.slow_threshold / 4:
            self.performance_warnings.discard(operation_name)

        return elapsed


def performance_tracked(operation_name=None):
    """
    Funktionsweise: Decorator für Performance-Tracking von Methoden
    Args:
        operation_name (str): Name für Tracking (default: Klasse.Methode)
    """

    def decorator(func):
        @wraps(func)
        def wrapper(self, *args, **kwargs):
            if not hasattr(self, '_performance_monitor'):
                self._performance_monitor = PerformanceMonitor()

            op_name = operation_name or f"{self.__class__.__name__}.{func.__name__}"

            self._performance_monitor.start_timing(op_name)
            try:
                return func(self, *args, **kwargs)
            finally:
                self._performance_monitor.end_timing(op_name)

        return wrapper

    return decorator
