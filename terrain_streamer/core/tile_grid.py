"""
Path: terrain_streamer/core/tile_grid.py

Funktionsweise: Tiles, quadratisches Grid und Beobachter-Zustand
- Tile: Weltposition, LOD, Resolution, Heightmap, Revision
- TileGrid: N×N Anordnung (N = floor(sqrt(Anzahl))), Slot (x, y) ↔ Index x*N + y
- Tiles jenseits von N² sind nicht verwaltet (weder platziert noch gestreamt)
- ObserverState: verfolgtes Objekt, erkennt nur Wechsel der Referenz

Tile-Lebenszyklus:
- Einmal vom Host erzeugt, danach nur verschoben und mit neuen Arrays befüllt, nie zerstört
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple

import numpy as np

from terrain_streamer.core.lod_resolver import LODLevel

Position = Tuple[float, float, float]

ORIGIN: Position = (0.0, 0.0, 0.0)


@dataclass
class Tile:
    """Eine Einheit des Terrain-Grids, gehört dem Host, wird vom Streamer befüllt"""
    index: int
    position: Position = ORIGIN
    lod: Optional[LODLevel] = None
    resolution: int = 0
    heights: Optional[np.ndarray] = None
    height_scale: float = 0.0
    revision: int = 0

    def commit(self, heights: np.ndarray, lod: LODLevel, height_scale: float):
        """
        Funktionsweise: Ersetzt Heightmap und Metadaten in einem Schritt
        Aufgabe: Host sieht nie einen Zwischenstand, nur das alte oder das neue Array
        """
        self.heights = heights
        self.resolution = heights.shape[0]
        self.lod = lod
        self.height_scale = height_scale
        self.revision += 1

    def world_heights(self) -> Optional[np.ndarray]:
        """Heightmap in Weltkoordinaten (normalisierte Höhe * height_scale)"""
        if self.heights is None:
            return None
        return self.heights * self.height_scale


class TileGrid:
    """
    Funktionsweise: Feste N×N Anordnung der Tiles um den Ursprung
    Aufgabe: Initiale Platzierung, Zuordnung Slot ↔ Index, verwaltete vs. unverwaltete Tiles
    """

    def __init__(self, tiles: Sequence[Tile], tile_size: float):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.tiles: List[Tile] = list(tiles)
        self.tile_size = tile_size
        self.tiles_per_side = int(math.isqrt(len(self.tiles)))

        unmanaged = len(self.tiles) - self.tiles_per_side ** 2
        if unmanaged > 0:
            self.logger.warning(f"{len(self.tiles)} tiles is not a perfect square, "
                                f"{unmanaged} tile(s) stay unmanaged")

    @classmethod
    def create(cls, tile_count: int, tile_size: float) -> "TileGrid":
        """Erzeugt tile_count leere Tiles (Ersatz für das Duplizieren im Host)"""
        return cls([Tile(index=i) for i in range(tile_count)], tile_size)

    @property
    def managed_tiles(self) -> List[Tile]:
        return self.tiles[:self.tiles_per_side ** 2]

    @property
    def unmanaged_tiles(self) -> List[Tile]:
        return self.tiles[self.tiles_per_side ** 2:]

    def slot_of(self, index: int) -> Tuple[int, int]:
        return divmod(index, self.tiles_per_side)

    def index_of(self, slot_x: int, slot_y: int) -> int:
        return slot_x * self.tiles_per_side + slot_y

    def initial_position(self, slot_x: int, slot_y: int) -> Position:
        half = self.tiles_per_side // 2
        return ((slot_x - half) * self.tile_size, 0.0, (slot_y - half) * self.tile_size)

    def layout(self):
        """Setzt alle verwalteten Tiles auf ihre zentrierte Grid-Position"""
        for x in range(self.tiles_per_side):
            for y in range(self.tiles_per_side):
                self.tiles[self.index_of(x, y)].position = self.initial_position(x, y)
        self.logger.debug(f"Laid out {self.tiles_per_side}x{self.tiles_per_side} grid")

    def __len__(self):
        return len(self.tiles)


class ObserverState:
    """
    Funktionsweise: Verfolgtes Objekt (mit Attribut position) und zuletzt gesehene Referenz
    Aufgabe: Erkennt Wechsel des Objekts, Bewegung wird jeden Frame live gelesen
    """

    def __init__(self, tracked: Any = None):
        self.tracked = tracked
        self.last_tracked = None

    @property
    def position(self) -> Position:
        """Fehlendes Objekt zählt als Beobachter im Ursprung"""
        if self.tracked is None:
            return ORIGIN
        x, y, z = self.tracked.position
        return (float(x), float(y), float(z))

    def consume_change(self) -> bool:
        """True genau einmal nach jedem Wechsel der Referenz"""
        if self.tracked is not self.last_tracked:
            self.last_tracked = self.tracked
            return True
        return False
