"""
Path: terrain_streamer/__init__.py

Terrain Streamer: Unendliches, gekacheltes Heightfield um einen bewegten Beobachter
- core: Noise-Synthese, budgetierte Builds, Paging, LOD, Orchestrator
- host: Konfiguration, Qt Frame-Driver, Export, Fehlerbehandlung
"""

__version__ = "1.0.0"
__author__ = "Map Generator Team"
