"""
Path: terrain_streamer/host/utils/error_handler.py

Funktionsweise: Zentrale Error-Behandlung für alle Terrain-Streamer Komponenten
- Paralleles Error Handling ohne Unterdrückung von Exceptions (Decorators loggen und re-raisen)
- Konfigurierbares Logging (Konsole, Datei, beide)
- Spezialisierte Handler für Synthese, Scheduling, Konfiguration, Host-Anbindung und Export
- Ein/Aus-Schalter für flexibles Error-Management
- Automatische Error-Statistiken mit Rate-Limiting

Kategorien:
1. SYNTHESIS - Höhenberechnung, Noise-Sampling, Depth-Curves
2. SCHEDULING - Budgetierte Builds, Streaming-Passes, Frame-Driver
3. CONFIGURATION - WorldConfig/BudgetConfig, Iterationen
4. HOST - Commit-Callbacks und Tracking-Entity
5. EXPORT - PNG/NumPy Export
6. MEMORY - MemoryError bei großen Heightmaps (niemals rate-limited)
"""

import datetime
import functools
import gc
import logging
import traceback
from typing import Any, Callable, Dict

import psutil

# =============================================================================
# GLOBALE KONFIGURATION - HIER EIN/AUSSCHALTEN
# =============================================================================

# Hauptschalter - True = Error Handler aktiv
ERROR_HANDLER_ENABLED = True

# Ausgabe-Konfiguration
ERROR_OUTPUT_CONSOLE = True
ERROR_OUTPUT_FILE = False
ERROR_LOG_FILE = "terrain_streamer_errors.log"

ERROR_CATEGORIES = {
    "synthesis": True,
    "scheduling": True,
    "configuration": True,
    "host": True,
    "export": True,
    "memory": True
}

ERROR_LOG_LEVEL = "DEBUG"
SHOW_FULL_TRACEBACK = True
SHOW_FUNCTION_ARGS = False

# Performance-Optimierung
MAX_ERRORS_PER_FUNCTION = 10
ERROR_RATE_LIMITING = True


class ErrorStatistics:
    """
    Funktionsweise: Sammelt und verwaltet Error-Statistiken
    Aufgabe: Zählt Errors pro Kategorie/Funktion, merkt sich kritische Errors
    """

    def __init__(self):
        self.total_errors = 0
        self.errors_by_category = {cat: 0 for cat in ERROR_CATEGORIES.keys()}
        self.errors_by_function = {}
        self.critical_errors = []

    def record_error(self, category: str, function_name: str, error_type: str, severity: str) -> bool:
        """
        Funktionsweise: Protokolliert Error und entscheidet über Logging
        Returns: bool - False wenn Rate-Limit für diese Funktion erreicht
        Besonderheit: MemoryErrors werden niemals rate-limited
        """
        self.total_errors += 1
        self.errors_by_category[category] = self.errors_by_category.get(category, 0) + 1
        self.errors_by_function[function_name] = self.errors_by_function.get(function_name, 0) + 1

        if severity == "CRITICAL":
            self.critical_errors.append({
                'function': function_name,
                'error_type': error_type,
                'timestamp': datetime.datetime.now(),
                'category': category
            })

        if error_type == "MemoryError":
            return True

        if ERROR_RATE_LIMITING and self.errors_by_function[function_name] > MAX_ERRORS_PER_FUNCTION:
            return False

        return True


class TerrainStreamerErrorHandler:
    """
    Funktionsweise: Zentrale Error-Handler Klasse
    Aufgabe: Koordiniert alle Error-Handling Operationen mit Kategorie-Support
    """

    def __init__(self):
        self.logger = logging.getLogger('TerrainStreamerErrorHandler')
        self.statistics = ErrorStatistics()

        if ERROR_HANDLER_ENABLED:
            self._setup_logging()

    def _setup_logging(self):
        """Multi-Handler Setup mit Kategorie-Formatierung"""
        self.logger.setLevel(getattr(logging, ERROR_LOG_LEVEL))

        if self.logger.handlers:
            self.logger.handlers.clear()

        formatter = logging.Formatter(
            '%(asctime)s | %(levelname)s | [%(category)s] %(funcName)s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        if ERROR_OUTPUT_CONSOLE:
            console_handler = logging.StreamHandler()
            console_handler.setFormatter(formatter)
            self.logger.addHandler(console_handler)

        if ERROR_OUTPUT_FILE:
            file_handler = logging.FileHandler(ERROR_LOG_FILE, encoding='utf-8')
            file_handler.setFormatter(formatter)
            self.logger.addHandler(file_handler)

    def handle_error(self, category: str, func_name: str, error: Exception,
                     operation: str, args: tuple, kwargs: dict):
        """
        Funktionsweise: Gemeinsamer Handler für alle Kategorien
        Parameter: category - Schlüssel aus ERROR_CATEGORIES
        Parameter: operation - Beschreibung der fehlgeschlagenen Operation
        """
        if not self._should_handle_category(category):
            return

        severity = self._determine_severity(error, category)

        if not self.statistics.record_error(category, func_name, type(error).__name__, severity):
            return

        error_msg = f"{category.upper()} ERROR"
        error_msg += f"\nOperation: {operation}"
        error_msg += f"\nFunction: {func_name}"
        error_msg += f"\nError: {type(error).__name__}: {str(error)}"

        if category == "memory":
            error_msg += self._get_memory_diagnostics()
            error_msg += self._get_gc_diagnostics()

        if SHOW_FUNCTION_ARGS and (args or kwargs):
            error_msg += f"\nParameters: args={args}, kwargs={kwargs}"

        if SHOW_FULL_TRACEBACK:
            error_msg += f"\n\nTraceback:\n{traceback.format_exc()}"

        extra = {'category': category.upper()}
        if severity == "CRITICAL":
            self.logger.critical(error_msg, extra=extra)
        elif category == "configuration":
            self.logger.warning(error_msg, extra=extra)
        else:
            self.logger.error(error_msg, extra=extra)

    def _should_handle_category(self, category: str) -> bool:
        return ERROR_HANDLER_ENABLED and ERROR_CATEGORIES.get(category, False)

    def _determine_severity(self, error: Exception, category: str) -> str:
        if isinstance(error, MemoryError) or category == "memory":
            return "CRITICAL"
        if isinstance(error, (ValueError, TypeError)):
            return "ERROR"
        return "WARNING"

    def _get_memory_diagnostics(self) -> str:
        """
        Funktionsweise: Sammelt System- und Prozess-Memory für Memory-Error Analyse
        Return: Formatierter String
        """
        try:
            memory = psutil.virtual_memory()
            process = psutil.Process()

            diagnostics = "\n--- MEMORY DIAGNOSTICS ---"
            diagnostics += f"\nSystem RAM Available: {memory.available / (1024 ** 3):.2f} GB"
            diagnostics += f"\nSystem RAM Used: {memory.percent:.1f}%"

            process_memory = process.memory_info()
            diagnostics += f"\nProcess Memory RSS: {process_memory.rss / (1024 ** 2):.2f} MB"

            if memory.percent > 90:
                diagnostics += "\nCRITICAL: System memory usage > 90%"

            return diagnostics

        except psutil.Error as e:
            return f"\nMemory Diagnostics Error: {type(e).__name__}: {str(e)}"

    def _get_gc_diagnostics(self) -> str:
        diagnostics = "\n--- GARBAGE COLLECTION DIAGNOSTICS ---"
        diagnostics += f"\nGC Generation Counts: {gc.get_count()}"
        uncollectable = len(gc.garbage)
        if uncollectable > 0:
            diagnostics += f"\nCRITICAL: {uncollectable} uncollectable objects detected"
        return diagnostics

    def get_statistics_summary(self) -> Dict[str, Any]:
        """Return: Dict mit allen Error-Statistiken"""
        return {
            'total_errors': self.statistics.total_errors,
            'errors_by_category': dict(self.statistics.errors_by_category),
            'errors_by_function': dict(self.statistics.errors_by_function),
            'critical_errors': len(self.statistics.critical_errors)
        }


# =============================================================================
# GLOBALE ERROR HANDLER INSTANZ
# =============================================================================

_error_handler = TerrainStreamerErrorHandler()


# =============================================================================
# DECORATOR FUNKTIONEN (Kategorisiert)
# =============================================================================

def _category_handler(category: str, operation: str):
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            if not ERROR_HANDLER_ENABLED:
                return func(*args, **kwargs)
            try:
                return func(*args, **kwargs)
            except MemoryError as e:
                _error_handler.handle_error("memory", func.__name__, e, operation, args, kwargs)
                raise
            except Exception as e:
                _error_handler.handle_error(category, func.__name__, e, operation, args, kwargs)
                raise

        return wrapper

    return decorator


def synthesis_handler(operation: str = "height_synthesis"):
    """Decorator für Höhen-/Noise-Berechnung"""
    return _category_handler("synthesis", operation)


def scheduling_handler(operation: str = "scheduling"):
    """Decorator für budgetierte Builds und Streaming-Passes"""
    return _category_handler("scheduling", operation)


def configuration_handler(operation: str = "configuration"):
    """Decorator für Konfigurations-Validierung"""
    return _category_handler("configuration", operation)


def host_handler(operation: str = "host_callback"):
    """Decorator für Host-Callbacks (Commit, Tracking)"""
    return _category_handler("host", operation)


def export_handler(operation: str = "export"):
    """Decorator für Export-Operationen"""
    return _category_handler("export", operation)


def memory_critical_handler(operation: str = "memory_operation"):
    """
    Funktionsweise: Decorator für Memory-kritische Funktionen (große Heightmap-Allokationen)
    Verwendung: @memory_critical_handler("heightmap_allocation")
    """
    return _category_handler("memory", operation)


# =============================================================================
# UTILITY FUNKTIONEN
# =============================================================================

def toggle_error_handler(enabled: bool):
    """Ein/Ausschalten des Error Handlers"""
    global ERROR_HANDLER_ENABLED
    ERROR_HANDLER_ENABLED = enabled
    _error_handler.logger.info(f"Error Handler {'aktiviert' if enabled else 'deaktiviert'}",
                               extra={'category': 'CONFIG'})


def toggle_error_category(category: str, enabled: bool):
    """Ein/Ausschalten einzelner Error-Kategorien"""
    if category in ERROR_CATEGORIES:
        ERROR_CATEGORIES[category] = enabled


def get_error_statistics():
    """Gibt aktuelle Error-Statistiken zurück"""
    return _error_handler.get_statistics_summary()
