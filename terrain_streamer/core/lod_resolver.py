"""
Path: terrain_streamer/core/lod_resolver.py

Funktionsweise: Level-of-Detail Entscheidung pro Tile
- Quadratischer High-Res-Halo von (2*rings + 1) Tiles um den Beobachter
- Außerhalb des Halos: distant_resolution, innerhalb: resolution
- Rebuild wenn gespeicherte LOD des Tiles von der Entscheidung abweicht
"""

from enum import Enum
from typing import Optional, Tuple

from terrain_streamer.core.grid_pager import GridPager

Position = Tuple[float, float, float]


class LODLevel(Enum):
    HIGH = "high"
    LOW = "low"


class LODResolver:
    """Stufenfunktion des Abstands mit einer Grenze bei tile_size * (2*rings + 1) / 2"""

    @staticmethod
    def high_res_distance(tile_size: float, high_res_rings: int) -> float:
        return tile_size * ((high_res_rings * 2.0 + 1.0) / 2.0)

    def decide(self, tile_position: Position, observer_position: Position,
               tile_size: float, high_res_rings: int) -> bool:
        """
        Funktionsweise: Prüft ob ein Tile (nach dem Paging) niedrig aufgelöst sein soll
        Returns: bool - True für Low-Res
        """
        limit = self.high_res_distance(tile_size, high_res_rings)
        distance_x, distance_z = GridPager.axis_distances(tile_position, observer_position, tile_size)
        return abs(distance_x) > limit or abs(distance_z) > limit

    @staticmethod
    def level_for(needs_low_res: bool) -> LODLevel:
        return LODLevel.LOW if needs_low_res else LODLevel.HIGH

    def needs_rebuild(self, current_lod: Optional[LODLevel], needs_low_res: bool) -> bool:
        """Noch nie gebaute Tiles (current_lod None) gelten immer als abweichend"""
        return current_lod is not self.level_for(needs_low_res)
