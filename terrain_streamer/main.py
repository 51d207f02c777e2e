#!/usr/bin/env python3
"""
Path: terrain_streamer/main.py

Terrain Streamer Headless Application
=====================================

Runs the streaming engine inside a Qt event loop without a window: an observer
walks across the world, the FrameDriver ticks the orchestrator once per frame
and tiles are paged and rebuilt under the adaptive cell budget. After the
configured number of frames the tile mosaic can be exported as PNG or .npy.

Architecture:
- TerrainStreamerApp owns configuration, tiles, orchestrator and FrameDriver
- WalkingObserver stands in for the host's camera/player
- HeightfieldExportManager writes the final preview
"""

import argparse
import logging
import sys

import colorlog
from PyQt5.QtCore import QCoreApplication, QObject, QTimer

from terrain_streamer.core.noise_iteration import DepthCurve, IterationSet, NoiseIteration
from terrain_streamer.core.terrain_streamer import TerrainStreamingOrchestrator
from terrain_streamer.core.tile_grid import TileGrid
from terrain_streamer.host.config.value_default import ConfigurationError
from terrain_streamer.host.config.world_config import BudgetConfig, WorldConfig
from terrain_streamer.host.managers.export_manager import HeightfieldExportManager
from terrain_streamer.host.managers.frame_driver import FrameDriver


class WalkingObserver:
    """Observer moving with constant velocity along x/z every frame"""

    def __init__(self, speed_x=0.0, speed_z=0.0):
        self.position = (0.0, 0.0, 0.0)
        self.speed_x = speed_x
        self.speed_z = speed_z

    def advance(self):
        x, y, z = self.position
        self.position = (x + self.speed_x, y, z + self.speed_z)


def default_iterations():
    """Three octaves: continents, hills and rare peaks"""
    return IterationSet([
        NoiseIteration(name="Continents", depth=40, scale=40.0, rarity=1.0,
                       offset_x=100.0, offset_y=100.0),
        NoiseIteration(name="Hills", depth=15, scale=8.0, rarity=1.0,
                       offset_x=350.0, offset_y=-120.0, distortion_x=1.3),
        NoiseIteration(name="Peaks", depth=25, scale=12.0, rarity=2.0,
                       offset_x=-40.0, offset_y=910.0,
                       depth_curve=DepthCurve(((0.0, 0.0), (0.6, 0.1), (1.0, 1.0)))),
    ])


class TerrainStreamerApp(QObject):
    """
    Central application controller for the headless streamer
    ========================================================

    Builds the tile grid and the orchestrator from the parsed command line,
    drives them with a FrameDriver and shuts the event loop down after the
    requested number of frames.
    """

    def __init__(self, args):
        super().__init__()
        self.logger = logging.getLogger(__name__)
        self.args = args

        self.world_config = WorldConfig.from_defaults(
            map_size=args.map_size,
            resolution=args.resolution,
            distant_resolution=args.distant_resolution,
            high_res_rings=args.rings,
            seed=args.seed
        )
        self.budget_config = BudgetConfig.from_defaults(
            use_budget=not args.no_budget,
            base_budget=args.budget,
            adaptive=not args.no_adaptive,
            target_fps=args.fps
        )

        self.observer = WalkingObserver(speed_x=args.speed, speed_z=args.speed / 2.0)
        self.grid = TileGrid.create(args.tiles, self.world_config.map_size)
        self.orchestrator = TerrainStreamingOrchestrator(
            self.grid, self.world_config, self.budget_config, default_iterations(),
            tracked=self.observer
        )
        self.driver = FrameDriver(self.orchestrator)
        self.driver.pass_completed.connect(self._on_pass_completed)
        self.driver.budget_changed.connect(self._on_budget_changed)

        self.walk_timer = QTimer()
        self.walk_timer.setInterval(self.driver.interval_ms)
        self.walk_timer.timeout.connect(self._on_walk)

    def run(self):
        self.logger.info(f"Streaming {self.args.tiles} tiles for {self.args.frames} frames")
        self.driver.start()
        self.walk_timer.start()

    def _on_walk(self):
        self.observer.advance()
        if self.driver.frames >= self.args.frames:
            self.finish()

    def _on_pass_completed(self, passes):
        self.logger.debug(f"Pass {passes} completed, observer at {self.observer.position}")

    def _on_budget_changed(self, budget):
        self.logger.debug(f"Cell budget now {budget}")

    def finish(self):
        """Stop timers, log statistics, write the optional preview and quit"""
        self.walk_timer.stop()
        self.driver.stop()

        stats = self.orchestrator.stats()
        self.logger.info("Streaming statistics: " +
                         ", ".join(f"{key}={value}" for key, value in stats.items()))

        if self.args.export:
            exporter = HeightfieldExportManager(self.world_config.map_size)
            exporter.export(self.grid.managed_tiles, self.args.export)

        QCoreApplication.quit()


def setup_logging(verbose=False):
    """Coloured console logging for the whole application"""
    handler = colorlog.StreamHandler()
    handler.setFormatter(colorlog.ColoredFormatter(
        '%(log_color)s%(levelname)-8s%(reset)s %(blue)s%(name)s%(reset)s: %(message)s',
        log_colors={
            'DEBUG': 'cyan',
            'INFO': 'green',
            'WARNING': 'yellow',
            'ERROR': 'red',
            'CRITICAL': 'red,bg_white',
        }
    ))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.DEBUG if verbose else logging.INFO)


def build_parser():
    parser = argparse.ArgumentParser(description="Stream a tiled noise heightfield around a walking observer")
    parser.add_argument("--tiles", type=int, default=9, help="number of tiles (largest square is used)")
    parser.add_argument("--map-size", type=float, default=10000.0, help="world size of one tile")
    parser.add_argument("--resolution", type=int, default=65, help="high-res samples per axis")
    parser.add_argument("--distant-resolution", type=int, default=17, help="low-res samples per axis")
    parser.add_argument("--rings", type=int, default=0, help="high-res rings around the observer")
    parser.add_argument("--seed", type=int, default=0, help="noise seed")
    parser.add_argument("--budget", type=int, default=10000, help="base cell budget per frame")
    parser.add_argument("--fps", type=float, default=60.0, help="target frame rate")
    parser.add_argument("--no-budget", action="store_true", help="compute every pass in one frame")
    parser.add_argument("--no-adaptive", action="store_true", help="keep the budget fixed")
    parser.add_argument("--speed", type=float, default=250.0, help="observer speed per frame along x")
    parser.add_argument("--frames", type=int, default=600, help="frames to run before exiting")
    parser.add_argument("--export", default=None, help="write the tile mosaic to this .png or .npy file")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def main(argv=None):
    """
    Application entry point
    =======================

    Parses arguments, creates QCoreApplication and TerrainStreamerApp and
    runs the event loop until the requested number of frames is reached.
    """
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])
    app.setApplicationName("TerrainStreamer")

    try:
        streamer_app = TerrainStreamerApp(args)
    except ConfigurationError as e:
        logging.getLogger(__name__).error(f"Invalid configuration: {e}")
        return 2

    streamer_app.run()
    return app.exec_()


if __name__ == '__main__':
    sys.exit(main())
