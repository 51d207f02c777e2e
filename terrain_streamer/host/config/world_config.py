"""
Path: terrain_streamer/host/config/world_config.py

Funktionsweise: Typisierte, unveränderliche Konfigurations-Objekte
- WorldConfig: Welt-Konstanten (Scale, Tile-Größe, Resolutionen, Offsets)
- BudgetConfig: Frame-Budget und Adaptive-Regelung
- from_defaults() lädt Werte aus value_default.py und überschreibt sie mit Keyword-Argumenten
- Validierung beim Erstellen, Fehler als ConfigurationError
"""

import logging
from dataclasses import asdict, dataclass

from terrain_streamer.host.config.value_default import (
    BUDGET,
    WORLD,
    ConfigurationError,
    get_defaults,
    validate_parameter_set,
)
from terrain_streamer.host.utils.error_handler import configuration_handler

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorldConfig:
    """Globale Welt-Konstanten, nach dem Setup unveränderlich"""
    world_scale: float = WORLD.WORLD_SCALE["default"]
    depth_divider: float = WORLD.DEPTH_DIVIDER["default"]
    map_size: float = WORLD.MAP_SIZE["default"]
    resolution: int = WORLD.RESOLUTION["default"]
    distant_resolution: int = WORLD.DISTANT_RESOLUTION["default"]
    high_res_rings: int = WORLD.HIGH_RES_RINGS["default"]
    world_offset_x: float = WORLD.WORLD_OFFSET_X["default"]
    world_offset_y: float = WORLD.WORLD_OFFSET_Y["default"]
    seed: int = WORLD.SEED["default"]

    def __post_init__(self):
        if self.world_scale <= 0:
            raise ConfigurationError("world_scale must be positive")
        if self.depth_divider <= 0:
            raise ConfigurationError("depth_divider must be positive")
        if self.map_size <= 0:
            raise ConfigurationError("map_size must be positive")
        if self.high_res_rings < 0:
            raise ConfigurationError("high_res_rings must not be negative")
        if min(self.resolution, self.distant_resolution) < WORLD.RESOLUTIONMIN:
            raise ConfigurationError(
                f"resolution and distant_resolution need at least {WORLD.RESOLUTIONMIN} samples per axis")

        is_valid, warnings, errors = validate_parameter_set("world", asdict(self))
        for warning in warnings:
            logger.warning(warning)
        if not is_valid:
            raise ConfigurationError("; ".join(errors))

    @classmethod
    @configuration_handler("world_config")
    def from_defaults(cls, **overrides) -> "WorldConfig":
        params = get_defaults("world")
        params.update(overrides)
        return cls(**params)

    def map_depth(self, total_depth: int) -> float:
        """
        Funktionsweise: Vertikale Weltgröße eines Tiles
        Aufgabe: Normalisierte Höhen [0,1] werden damit in Weltkoordinaten skaliert
        """
        return total_depth * self.world_scale / self.depth_divider


@dataclass(frozen=True)
class BudgetConfig:
    """Frame-Budget Einstellungen (Basis-Budget, Adaptive-Regelung, Floor)"""
    use_budget: bool = BUDGET.USE_BUDGET["default"]
    base_budget: int = BUDGET.BASE_BUDGET["default"]
    adaptive: bool = BUDGET.ADAPTIVE["default"]
    target_fps: float = BUDGET.TARGET_FPS["default"]
    adjust_step: int = BUDGET.ADJUST_STEP["default"]
    min_budget: int = BUDGET.MIN_BUDGET["default"]

    def __post_init__(self):
        if self.base_budget < 1:
            raise ConfigurationError("base_budget must be at least 1")
        if self.min_budget < 1:
            raise ConfigurationError("min_budget must be at least 1")
        if self.adjust_step < 0:
            raise ConfigurationError("adjust_step must not be negative")
        if self.target_fps <= 0:
            raise ConfigurationError("target_fps must be positive")

        _, warnings, _ = validate_parameter_set("budget", asdict(self))
        for warning in warnings:
            logger.warning(warning)

    @classmethod
    @configuration_handler("budget_config")
    def from_defaults(cls, **overrides) -> "BudgetConfig":
        params = get_defaults("budget")
        params.update(overrides)
        return cls(**params)
