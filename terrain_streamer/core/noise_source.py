"""
Path: terrain_streamer/core/noise_source.py

Funktionsweise: Glatte 2D-Noise-Quelle mit Wertebereich [0, 1]
- SimplexNoiseSource kapselt OpenSimplex und bildet [-1, 1] auf [0, 1] ab
- sample() für Einzelwerte, sample_array() für zusammenhängende Zellbereiche
- Jede Quelle mit diesem Interface kann an HeightSynthesizer übergeben werden (z.B. Test-Stubs)
"""

import logging

import numpy as np
from opensimplex import OpenSimplex


class SimplexNoiseSource:
    """
    Funktionsweise: Erzeugt OpenSimplex-Noise im Bereich [0, 1]
    Aufgabe: Basis-Noise-Funktion für HeightSynthesizer, reproduzierbar über Seed
    Methoden: sample(), sample_array()
    """

    def __init__(self, seed: int = 0):
        """
        Parameter: seed (int) - Seed für reproduzierbaren Noise
        """
        self.seed = seed
        self.generator = OpenSimplex(seed=seed)
        self.logger = logging.getLogger(self.__class__.__name__)

    def sample(self, x: float, y: float) -> float:
        """Einzelner Noise-Wert an (x, y), geklemmt auf [0, 1]"""
        value = (self.generator.noise2(x, y) + 1.0) * 0.5
        return min(1.0, max(0.0, value))

    def sample_array(self, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
        """
        Funktionsweise: Punktweise Noise-Berechnung für gleich lange Koordinaten-Arrays
        Parameter: xs, ys - Koordinaten gleicher Form
        Returns: numpy.ndarray - Noise-Werte in [0, 1], gleiche Form wie xs
        """
        flat_x = np.ravel(xs)
        flat_y = np.ravel(ys)
        flat_result = np.empty(flat_x.shape, dtype=np.float64)

        for i in range(len(flat_x)):
            flat_result[i] = self.generator.noise2(flat_x[i], flat_y[i])

        flat_result = np.clip((flat_result + 1.0) * 0.5, 0.0, 1.0)
        return flat_result.reshape(np.shape(xs))
