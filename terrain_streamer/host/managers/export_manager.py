"""
Path: terrain_streamer/host/managers/export_manager.py

Funktionsweise: Export der gestreamten Heightmaps als Mosaik
Aufgabe: Alle verwalteten Tiles nach Weltposition zusammensetzen und als PNG oder NumPy-Datei speichern
Features: Resampling unterschiedlicher LOD-Auflösungen, Start-/Ende-Signale pro Export-Job
"""

import logging
import os
import time
from typing import Optional, Sequence

import numpy as np
from PyQt5.QtCore import QObject, pyqtSignal
from scipy.ndimage import zoom

from terrain_streamer.core.tile_grid import Tile
from terrain_streamer.host.utils.error_handler import export_handler
from terrain_streamer.host.utils.performance_utils import performance_tracked


def resample_heights(heights: np.ndarray, resolution: int) -> np.ndarray:
    """Bilineares Resampling auf resolution×resolution (Ecken bleiben erhalten)"""
    if heights.shape[0] == resolution:
        return heights
    return zoom(heights, resolution / heights.shape[0], order=1, grid_mode=False)


def build_mosaic(tiles: Sequence[Tile], tile_size: float) -> np.ndarray:
    """
    Funktionsweise: Setzt die Heightmaps aller gebauten Tiles nach Weltposition zusammen
    Aufgabe: Zeilen folgen Welt-z, Spalten Welt-x (erste Array-Achse eines Tiles läuft entlang z)
    Parameter: tiles - Tiles mit Heightmap, tile_size - Weltgröße eines Tiles
    Returns: numpy.ndarray in Weltkoordinaten-Höhen, nicht gebaute Bereiche als NaN
    """
    built = [tile for tile in tiles if tile.heights is not None]
    if not built:
        raise ValueError("No built tiles to export")

    resolution = max(tile.resolution for tile in built)
    block = resolution - 1

    min_x = min(tile.position[0] for tile in built)
    min_z = min(tile.position[2] for tile in built)
    columns = {tile.index: int(round((tile.position[0] - min_x) / tile_size)) for tile in built}
    rows = {tile.index: int(round((tile.position[2] - min_z) / tile_size)) for tile in built}

    mosaic = np.full(((max(rows.values()) + 1) * block + 1, (max(columns.values()) + 1) * block + 1),
                     np.nan, dtype=np.float64)

    for tile in built:
        heights = resample_heights(tile.world_heights(), resolution)
        row = rows[tile.index] * block
        column = columns[tile.index] * block
        mosaic[row:row + resolution, column:column + resolution] = heights

    return mosaic


class HeightfieldExportManager(QObject):
    """
    Funktionsweise: Export-Funktionalität für Tile-Mosaike
    Aufgabe: PNG (matplotlib) und .npy (NumPy) Export mit Progress-Signalen
    """

    export_started = pyqtSignal(str, str)        # (job_id, format)
    export_completed = pyqtSignal(str, bool)     # (job_id, success)
    export_error = pyqtSignal(str, str)          # (job_id, error_message)

    def __init__(self, tile_size: float):
        super().__init__()
        self.tile_size = tile_size
        self.export_formats = ["png", "npy"]
        self.logger = logging.getLogger(__name__)

    @export_handler("export_mosaic")
    def export(self, tiles: Sequence[Tile], output_file: str, job_id: Optional[str] = None) -> str:
        """
        Funktionsweise: Format anhand der Dateiendung wählen und exportieren
        Return: job_id
        """
        extension = os.path.splitext(output_file)[1].lstrip(".").lower()
        if extension not in self.export_formats:
            raise ValueError(f"Unsupported export format: {extension}")

        mosaic = build_mosaic(tiles, self.tile_size)
        if extension == "png":
            return self.export_mosaic_as_png(mosaic, output_file, job_id=job_id)
        return self.export_mosaic_as_numpy(mosaic, output_file, job_id=job_id)

    @performance_tracked()
    def export_mosaic_as_png(self, mosaic: np.ndarray, output_file: str,
                             colormap: str = 'terrain', job_id: Optional[str] = None) -> str:
        """
        Funktionsweise: Exportiert Mosaik als PNG mit Colorbar
        Parameter: mosaic, output_file, colormap, job_id
        Return: job_id
        """
        if job_id is None:
            job_id = f"png_export_{int(time.time())}"

        self.export_started.emit(job_id, "png")

        try:
            import matplotlib
            matplotlib.use("Agg")
            import matplotlib.pyplot as plt

            fig, ax = plt.subplots(figsize=(8, 8), dpi=100)
            im = ax.imshow(mosaic, cmap=colormap, origin='lower')
            plt.colorbar(im, ax=ax, shrink=0.8, label="height")
            ax.set_title(os.path.basename(output_file).replace('.png', ''))
            ax.set_xlabel("world x")
            ax.set_ylabel("world z")

            plt.savefig(output_file, bbox_inches='tight', facecolor='white', edgecolor='none')
            plt.close(fig)

        except (OSError, ValueError) as e:
            error_msg = f"PNG export failed: {e}"
            self.logger.error(error_msg)
            self.export_error.emit(job_id, error_msg)
            self.export_completed.emit(job_id, False)
            raise

        self.export_completed.emit(job_id, True)
        self.logger.info(f"PNG export completed: {output_file}")
        return job_id

    @performance_tracked()
    def export_mosaic_as_numpy(self, mosaic: np.ndarray, output_file: str,
                               job_id: Optional[str] = None) -> str:
        """Verlustfreier Export als .npy"""
        if job_id is None:
            job_id = f"npy_export_{int(time.time())}"

        self.export_started.emit(job_id, "npy")

        try:
            np.save(output_file, mosaic)
        except OSError as e:
            error_msg = f"NumPy export failed: {e}"
            self.logger.error(error_msg)
            self.export_error.emit(job_id, error_msg)
            self.export_completed.emit(job_id, False)
            raise

        self.export_completed.emit(job_id, True)
        self.logger.info(f"NumPy export completed: {output_file}")
        return job_id
