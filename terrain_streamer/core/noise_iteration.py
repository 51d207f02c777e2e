"""
Path: terrain_streamer/core/noise_iteration.py

Funktionsweise: Datenmodell für Noise-Iterationen (Octaves) mit Depth-Curve
- NoiseIteration speichert alle Parameter einer Octave (Offset, Scale, Rarity, Distortion, Depth)
- DepthCurve bildet rohe Noise-Werte über Keyframes auf Höhenwerte ab (Cubic-Hermite mit PCHIP-Tangenten)
- IterationSet hält die geordnete Liste und berechnet total_depth bei jeder Änderung neu

Parameter Input:
- Keyframes (time, value[, tangent]) für DepthCurve
- Octave-Parameter aus host/config/value_default.py (ITERATION)

Output:
- total_depth als Normalisierungs-Nenner für HeightSynthesizer
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

import numpy as np
from scipy.interpolate import CubicHermiteSpline, PchipInterpolator

from terrain_streamer.host.config.value_default import ITERATION, ConfigurationError


Keyframe = Tuple[float, float]


class DepthCurve:
    """
    Funktionsweise: Keyframe-basierte Remapping-Kurve für normalisierte Höhenwerte
    Aufgabe: Ersetzt eine editierbare Animationskurve, ausgewertet per Cubic-Hermite-Interpolation
    Außerhalb des Key-Bereichs wird auf den ersten/letzten Key geklemmt.
    """

    def __init__(self, keys: Sequence[Keyframe] = ((0.0, 0.0), (1.0, 1.0)),
                 tangents: Optional[Sequence[float]] = None):
        """
        Parameter: keys - Liste von (time, value) Paaren, mindestens ein Key
        Parameter: tangents - Optionale Steigung pro Key, fehlende Werte werden per PCHIP ergänzt
        """
        if len(keys) == 0:
            raise ConfigurationError("DepthCurve needs at least one key")

        ordered = sorted(keys, key=lambda key: key[0])
        self.times = np.array([key[0] for key in ordered], dtype=np.float64)
        self.values = np.array([key[1] for key in ordered], dtype=np.float64)

        if np.any(np.diff(self.times) <= 0):
            raise ConfigurationError("DepthCurve key times must be unique")

        self._spline = None
        if len(self.times) >= 2:
            slopes = PchipInterpolator(self.times, self.values).derivative()(self.times)
            if tangents is not None:
                if len(tangents) != len(self.times):
                    raise ConfigurationError("DepthCurve needs one tangent per key")
                slopes = np.array(tangents, dtype=np.float64)
            self._spline = CubicHermiteSpline(self.times, self.values, slopes)

    @classmethod
    def linear(cls) -> "DepthCurve":
        """Identitäts-Kurve 0→0, 1→1"""
        return cls(((0.0, 0.0), (1.0, 1.0)), tangents=(1.0, 1.0))

    @classmethod
    def constant(cls, value: float) -> "DepthCurve":
        return cls(((0.0, value),))

    def __call__(self, t):
        """
        Funktionsweise: Wertet die Kurve an t aus (Skalar oder Array)
        Returns: float bzw. numpy.ndarray gleicher Form
        """
        if self._spline is None:
            if np.isscalar(t):
                return float(self.values[0])
            return np.full(np.shape(t), self.values[0], dtype=np.float64)

        clamped = np.clip(t, self.times[0], self.times[-1])
        result = self._spline(clamped)
        if np.isscalar(t):
            return float(result)
        return result

    def __repr__(self):
        keys = ", ".join(f"({t:g}, {v:g})" for t, v in zip(self.times, self.values))
        return f"DepthCurve([{keys}])"


def _default_value(name):
    return getattr(ITERATION, name)["default"]


@dataclass(frozen=True)
class NoiseIteration:
    """Parameter einer Noise-Octave. Unveränderlich, Änderungen laufen über IterationSet.update()"""
    name: str = "Iteration"
    enabled: bool = True
    depth: int = _default_value("DEPTH")
    scale: float = _default_value("SCALE")
    rarity: float = _default_value("RARITY")
    offset_x: float = _default_value("OFFSET_X")
    offset_y: float = _default_value("OFFSET_Y")
    distortion_x: float = _default_value("DISTORTION_X")
    distortion_y: float = _default_value("DISTORTION_Y")
    depth_curve: DepthCurve = field(default_factory=DepthCurve.linear)

    def validate(self):
        """
        Funktionsweise: Prüft Divisoren der Koordinaten-Transformation
        Aufgabe: scale und rarity stehen im Nenner und dürfen nicht 0 sein
        """
        if self.scale == 0:
            raise ConfigurationError(f"Iteration '{self.name}': scale must not be 0")
        if self.rarity == 0:
            raise ConfigurationError(f"Iteration '{self.name}': rarity must not be 0")
        if self.depth < 0:
            raise ConfigurationError(f"Iteration '{self.name}': depth must not be negative")


class IterationSet:
    """
    Funktionsweise: Geordnete Liste von NoiseIterations mit gecachtem total_depth
    Aufgabe: Normalisierungs-Nenner wird bei jeder Änderung neu berechnet,
             Auswertung immer in Listen-Reihenfolge
    """

    def __init__(self, iterations: Iterable[NoiseIteration] = ()):
        self.logger = logging.getLogger(self.__class__.__name__)
        self._iterations: List[NoiseIteration] = []
        self._total_depth = 0
        for iteration in iterations:
            iteration.validate()
            self._iterations.append(iteration)
        self._recalculate_total_depth()

    def _recalculate_total_depth(self):
        self._total_depth = sum(it.depth for it in self._iterations if it.enabled)
        self.logger.debug(f"Total depth recalculated: {self._total_depth}")

    @property
    def total_depth(self) -> int:
        return self._total_depth

    def enabled(self) -> List[NoiseIteration]:
        """Aktive Iterationen in Listen-Reihenfolge"""
        return [it for it in self._iterations if it.enabled]

    def add(self, iteration: NoiseIteration):
        iteration.validate()
        self._iterations.append(iteration)
        self._recalculate_total_depth()

    def remove(self, index: int) -> NoiseIteration:
        removed = self._iterations.pop(index)
        self._recalculate_total_depth()
        return removed

    def set_enabled(self, index: int, enabled: bool):
        self.update(index, enabled=enabled)

    def update(self, index: int, **changes):
        """
        Funktionsweise: Ersetzt eine Iteration durch eine Kopie mit geänderten Feldern
        Parameter: index (int), **changes - Feldname → neuer Wert
        """
        updated = replace(self._iterations[index], **changes)
        updated.validate()
        self._iterations[index] = updated
        self._recalculate_total_depth()

    def __len__(self):
        return len(self._iterations)

    def __iter__(self) -> Iterator[NoiseIteration]:
        return iter(self._iterations)

    def __getitem__(self, index) -> NoiseIteration:
        return self._iterations[index]
