"""
Path: terrain_streamer/core/height_synthesizer.py

Funktionsweise: Multi-Octave Höhenberechnung für einzelne Heightmap-Zellen
- Mappt Zell-Index auf welt-ausgerichtete Noise-Koordinaten
- Tile-Weltposition fließt gekreuzt ein (Welt-z → Noise-x, Welt-x → Noise-y)
- Distortion/Scale/Rarity skalieren die Koordinaten pro Octave
- Depth-Curve remappt den rohen Noise-Wert mit Rarity-Verschiebung
- Normalisierung über depth / total_depth, Summe über alle aktiven Octaves

Parameter Input:
- cell_x, cell_y, resolution, tile_world_position, NoiseIteration
- WorldConfig (world_scale, map_size, world_offset_x/y)

Output:
- float bzw. numpy.ndarray mit normalisierter Höhe (Summe der Gewichte = 1)
"""

import logging
from typing import Optional, Sequence, Tuple

import numpy as np

from terrain_streamer.core.noise_iteration import IterationSet, NoiseIteration
from terrain_streamer.core.noise_source import SimplexNoiseSource
from terrain_streamer.host.config.world_config import WorldConfig
from terrain_streamer.host.utils.error_handler import synthesis_handler

Position = Tuple[float, float, float]


class HeightSynthesizer:
    """
    Funktionsweise: Reine Funktion (Zelle, Weltposition, Iteration) → Höhenbeitrag
    Aufgabe: Deterministische Höhenwerte für gegebene Noise-Quelle und Iterationen
    Methoden: height(), cell_height(), heights_for_cells()
    """

    def __init__(self, world_config: WorldConfig, iterations: IterationSet, noise_source=None):
        """
        Parameter: world_config - Welt-Konstanten
        Parameter: iterations - Geordnete Octave-Liste mit total_depth
        Parameter: noise_source - Objekt mit sample()/sample_array(), Default: SimplexNoiseSource(seed)
        """
        self.world_config = world_config
        self.iterations = iterations
        self.noise_source = noise_source if noise_source is not None else SimplexNoiseSource(world_config.seed)
        self.logger = logging.getLogger(self.__class__.__name__)

    def _noise_coordinates(self, cell_x, cell_y, resolution: int,
                           tile_world_position: Position, iteration: NoiseIteration):
        config = self.world_config
        extent = config.map_size / config.world_scale
        step = 1.0 / (resolution - 1)

        # Welt-z verschiebt Noise-x, Welt-x verschiebt Noise-y
        world_offset_x = tile_world_position[2] / config.world_scale
        world_offset_y = tile_world_position[0] / config.world_scale

        x_coord = cell_x * step * extent + iteration.offset_x + config.world_offset_x + world_offset_x
        y_coord = cell_y * step * extent + iteration.offset_y + config.world_offset_y + world_offset_y
        x_coord = x_coord * (iteration.distortion_x / iteration.scale / iteration.rarity)
        y_coord = y_coord * (iteration.distortion_y / iteration.scale / iteration.rarity)
        return x_coord, y_coord

    def _remap(self, raw, iteration: NoiseIteration, total_depth: int):
        rarity = iteration.rarity
        curve_input = raw * rarity - (1.0 - 1.0 / rarity) * rarity
        return iteration.depth_curve(curve_input) * (iteration.depth / total_depth)

    def _total_depth(self, total_depth: Optional[int]) -> int:
        return self.iterations.total_depth if total_depth is None else total_depth

    def height(self, cell_x: int, cell_y: int, resolution: int,
               tile_world_position: Position, iteration: NoiseIteration,
               total_depth: Optional[int] = None) -> float:
        """
        Funktionsweise: Höhenbeitrag einer Octave an einer Zelle
        Parameter: cell_x, cell_y - Zell-Index, resolution - Samples pro Achse
        Parameter: tile_world_position - (x, y, z) der Tile-Ecke, iteration - Octave
        Parameter: total_depth - Normalisierungs-Nenner, Default: aktueller Wert des IterationSet
        Returns: float - normalisierter Beitrag, 0.0 bei total_depth == 0
        """
        total_depth = self._total_depth(total_depth)
        if total_depth == 0:
            return 0.0
        x_coord, y_coord = self._noise_coordinates(cell_x, cell_y, resolution,
                                                   tile_world_position, iteration)
        raw = self.noise_source.sample(x_coord, y_coord)
        return float(self._remap(raw, iteration, total_depth))

    def cell_height(self, cell_x: int, cell_y: int, resolution: int,
                    tile_world_position: Position) -> float:
        """Summe aller aktiven Octaves an einer Zelle, in Listen-Reihenfolge"""
        total = 0.0
        for iteration in self.iterations.enabled():
            total += self.height(cell_x, cell_y, resolution, tile_world_position, iteration)
        return total

    @synthesis_handler("heights_for_cells")
    def heights_for_cells(self, cell_x: int, cell_ys: Sequence[int], resolution: int,
                          tile_world_position: Position, iteration: NoiseIteration,
                          total_depth: Optional[int] = None) -> np.ndarray:
        """
        Funktionsweise: Vektorisierte Variante von height() für einen Zeilen-Abschnitt
        Aufgabe: Ein Zell-Lauf mit festem x und aufeinanderfolgenden y, identische Werte wie height()
        Parameter: cell_x (int), cell_ys (Sequenz von y-Indizes)
        Parameter: total_depth - Nenner aus dem Snapshot einer laufenden Build-Task
        Returns: numpy.ndarray mit einem Beitrag pro y
        """
        cell_ys = np.asarray(cell_ys, dtype=np.float64)
        total_depth = self._total_depth(total_depth)
        if total_depth == 0:
            return np.zeros(cell_ys.shape, dtype=np.float64)

        x_coord, y_coords = self._noise_coordinates(float(cell_x), cell_ys, resolution,
                                                    tile_world_position, iteration)
        x_coords = np.full(y_coords.shape, x_coord, dtype=np.float64)
        raw = self.noise_source.sample_array(x_coords, y_coords)
        return np.asarray(self._remap(raw, iteration, total_depth), dtype=np.float64)
