"""
Path: host/managers/__init__.py

Qt-Manager: FrameDriver (Per-Frame Scheduling) und HeightfieldExportManager (PNG/NumPy Export)
"""

from .frame_driver import DebounceTimer, FrameDriver
from .export_manager import HeightfieldExportManager, build_mosaic, resample_heights

__all__ = [
    'DebounceTimer',
    'FrameDriver',
    'HeightfieldExportManager',
    'build_mosaic',
    'resample_heights'
]
