"""
Path: terrain_streamer/core/grid_pager.py

Funktionsweise: Entscheidet, ob ein Tile um eine Grid-Breite versetzt werden muss
- Pro Achse (x, z) unabhängig: Abstand Beobachter ↔ Tile-Mitte
- Überschreitet der Abstand die halbe Grid-Breite plus 1% Tile-Größe, springt das Tile
  um tile_size * tiles_per_side auf die gegenüberliegende Seite
- Die 1%-Toleranz verhindert Pendeln an der Grenze
"""

from dataclasses import dataclass
from typing import Tuple

Position = Tuple[float, float, float]

PAGING_EPSILON = 0.01


@dataclass(frozen=True)
class PagingDecision:
    new_position: Position
    moved: bool


def _sign(value: float) -> float:
    return 1.0 if value >= 0 else -1.0


class GridPager:
    """Reine Berechnung, kein Zustand"""

    @staticmethod
    def max_distance(tile_size: float, tiles_per_side: int) -> float:
        return tile_size * (tiles_per_side / 2.0) + tile_size * PAGING_EPSILON

    @staticmethod
    def axis_distances(tile_position: Position, observer_position: Position,
                       tile_size: float) -> Tuple[float, float]:
        """Vorzeichenbehaftete Abstände (x, z) vom Beobachter zur Tile-Mitte"""
        distance_x = observer_position[0] - (tile_position[0] + tile_size * 0.5)
        distance_z = observer_position[2] - (tile_position[2] + tile_size * 0.5)
        return distance_x, distance_z

    def decide(self, tile_position: Position, observer_position: Position,
               tile_size: float, tiles_per_side: int) -> PagingDecision:
        """
        Funktionsweise: Berechnet neue Tile-Position nach höchstens einem Sprung pro Achse
        Parameter: tile_position, observer_position - (x, y, z)
        Parameter: tile_size - Weltgröße eines Tiles, tiles_per_side - N des N×N Grids
        Returns: PagingDecision(new_position, moved)
        """
        limit = self.max_distance(tile_size, tiles_per_side)
        jump = tile_size * tiles_per_side
        x, y, z = tile_position
        moved = False

        distance_x, distance_z = self.axis_distances(tile_position, observer_position, tile_size)

        if abs(distance_x) > limit:
            x += _sign(distance_x) * jump
            moved = True

        if abs(distance_z) > limit:
            z += _sign(distance_z) * jump
            moved = True

        return PagingDecision((x, y, z), moved)
