#!/usr/bin/env python3
# Copyright (c) 2025-2026 Luc Vincent. All Rights Reserved.
"""
GlobalTime - Main Application.
Wires configuration, the clock model, the tick source and the pygame window.
"""

import argparse
from datetime import datetime
import logging
import os
import signal
import sys
import threading
import time
from pathlib import Path
from typing import Optional

# Initialize logging early
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)
logger = logging.getLogger(__name__)

FALLBACK_TIMEZONE = "UTC"


def setup_file_logging(log_dir: str) -> None:
    """Set up file logging in addition to console."""
    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    file_handler = logging.FileHandler(log_path / 'globaltime.log')
    file_handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    ))
    logging.getLogger().addHandler(file_handler)


def build_model(config, timezone_override: Optional[str] = None):
    """
    Create a clock model from configuration.

    Falls back to UTC when the configured timezone is not recognized.

    Args:
        config: GlobalTimeConfig instance.
        timezone_override: Timezone that takes precedence over the config.

    Returns:
        ClockFaceModel with hands and timezone applied.
    """
    from .clock.model import ClockFaceModel, Hand, InvalidTimezone

    hands = tuple(
        Hand(
            name,
            length_ratio=hand_cfg.length_ratio,
            width=hand_cfg.width,
            color=list(hand_cfg.color),
        )
        for name, hand_cfg in (
            ('hour', config.hands.hour),
            ('minute', config.hands.minute),
            ('second', config.hands.second),
        )
    )
    model = ClockFaceModel(hands=hands)

    tz = timezone_override or config.clock.timezone
    try:
        model.set_timezone(tz)
    except InvalidTimezone as e:
        logger.warning(f"{e}, falling back to {FALLBACK_TIMEZONE}")
        model.set_timezone(FALLBACK_TIMEZONE)

    return model


def face_diameter(width: int, height: int, caption: bool) -> int:
    """Largest face that fits the window with a margin and optional caption."""
    margin = max(8, min(width, height) // 20)
    available_height = height - (height // 10 if caption else 0)
    return max(16, min(width, available_height) - 2 * margin)


def snapshot(config, path: str, now: Optional[datetime] = None,
             diameter: Optional[int] = None,
             timezone_override: Optional[str] = None) -> str:
    """
    Render a single clock face to an image file without opening a window.

    Args:
        config: GlobalTimeConfig instance.
        path: Output image path (format from extension, e.g. .png).
        now: Instant to render. Defaults to the current time.
        diameter: Face diameter in pixels. Defaults to fit the window size.
        timezone_override: Timezone that takes precedence over the config.

    Returns:
        Path the image was written to.
    """
    import pygame
    from .clock.face import ClockFace
    from .clock.ticker import utc_now

    model = build_model(config, timezone_override)
    model.tick(now or utc_now())

    if diameter is None:
        diameter = face_diameter(config.display.width, config.display.height, False)

    face = ClockFace(model, config.face)
    surface = face.render(diameter)

    directory = os.path.dirname(os.path.abspath(path))
    os.makedirs(directory, exist_ok=True)
    pygame.image.save(surface, path)
    logger.info(f"Saved {model.timezone_name} clock snapshot to {path}")
    return path


class GlobalTime:
    """Main GlobalTime application."""

    def __init__(self, config_path: Optional[str] = None,
                 timezone_override: Optional[str] = None):
        """
        Initialize GlobalTime.

        Args:
            config_path: Path to configuration file.
            timezone_override: Timezone to show instead of the configured one.
        """
        self.config_path = config_path
        self.timezone_override = timezone_override
        self.config = None
        self.model = None
        self.ticker = None
        self.face = None

        self._window = None
        self._renderer = None
        self._running = False
        self._shutdown_event = threading.Event()
        self._needs_redraw = threading.Event()
        self._last_time = None

        # Set up signal handlers
        signal.signal(signal.SIGINT, self._signal_handler)
        signal.signal(signal.SIGTERM, self._signal_handler)

    def _signal_handler(self, signum, frame):
        """Handle shutdown signals."""
        logger.info(f"Received signal {signum}, initiating shutdown...")
        self.stop()

    def _load_config(self) -> bool:
        """Load configuration."""
        from .config import VALID_LOG_LEVELS, load_config, validate_config

        try:
            self.config = load_config(self.config_path)

            errors = validate_config(self.config)
            if errors:
                for error in errors:
                    logger.warning(f"Config warning: {error}")

            level = str(self.config.logging.level).upper()
            if level in VALID_LOG_LEVELS and logging.getLogger().level != logging.DEBUG:
                logging.getLogger().setLevel(level)

            logger.info(f"Configuration loaded from: {self.config.config_path or 'defaults'}")
            return True

        except Exception as e:
            logger.error(f"Failed to load configuration: {e}")
            return False

    def _init_clock(self) -> bool:
        """Create the model and tick source."""
        from .clock.ticker import TickSource

        try:
            self.model = build_model(self.config, self.timezone_override)
            self.ticker = TickSource(
                self._on_tick,
                interval_seconds=self.config.clock.refresh_interval_seconds
            )
            logger.info(
                f"Clock initialized: {self.model.timezone_name}, "
                f"ticking every {self.ticker.interval}s"
            )
            return True

        except Exception as e:
            logger.error(f"Failed to initialize clock: {e}")
            return False

    def _init_display(self) -> bool:
        """Open the window and hardware-accelerated renderer."""
        import pygame
        import pygame._sdl2 as sdl2
        from .clock.face import ClockFace

        try:
            pygame.init()
            display_cfg = self.config.display

            self._window = sdl2.Window(
                display_cfg.title,
                size=(display_cfg.width, display_cfg.height),
                fullscreen=not display_cfg.windowed
            )
            self.screen_width, self.screen_height = self._window.size
            self._renderer = sdl2.Renderer(self._window, accelerated=True, vsync=True)
            self.face = ClockFace(self.model, self.config.face)

            logger.info(f"Display initialized: {self.screen_width}x{self.screen_height}")
            return True

        except Exception as e:
            logger.error(f"Failed to initialize display: {e}")
            return False

    def _on_tick(self, now: datetime) -> None:
        """Tick callback; runs on the tick thread."""
        current = self.model.tick(now)
        if current != self._last_time:
            self._last_time = current
            self._needs_redraw.set()

    def cycle_timezone(self, step: int) -> str:
        """
        Switch to the next or previous timezone in clock.timezones.

        Args:
            step: +1 for next, -1 for previous.

        Returns:
            Name of the timezone now shown.
        """
        from .clock.model import InvalidTimezone
        from .clock.ticker import utc_now

        zones = self.config.clock.timezones
        if not zones or not isinstance(zones, list):
            return self.model.timezone_name

        current = self.model.timezone_name
        if current in zones:
            index = zones.index(current)
        else:
            # Not in the list: start from the first (or last) entry
            index = -1 if step > 0 else 0
        # Skip entries that do not resolve, trying each at most once
        for _ in range(len(zones)):
            index = (index + step) % len(zones)
            try:
                self.model.set_timezone(zones[index])
                break
            except InvalidTimezone as e:
                logger.warning(f"Skipping timezone: {e}")
        else:
            return current

        self._on_tick(utc_now())
        self._needs_redraw.set()
        return self.model.timezone_name

    def run(self) -> int:
        """
        Run the main application loop.

        Returns:
            Exit code (0 for success).
        """
        logger.info("Starting GlobalTime...")

        if not self._load_config():
            return 1

        log_dir = self.config.logging.log_dir or os.environ.get('GLOBALTIME_LOG_DIR')
        if log_dir:
            try:
                setup_file_logging(log_dir)
            except Exception as e:
                logger.warning(f"Could not set up file logging: {e}")

        if not self._init_clock():
            return 1

        if not self._init_display():
            return 1

        self.ticker.start()
        self._running = True
        logger.info("GlobalTime started successfully")

        try:
            self._main_loop()
        except Exception as e:
            logger.error(f"Main loop error: {e}")
            return 1
        finally:
            self._cleanup()

        return 0

    def _main_loop(self) -> None:
        """Main application loop."""
        while self._running and not self._shutdown_event.is_set():
            try:
                if not self.handle_events():
                    logger.info("Display quit requested")
                    break

                if self._needs_redraw.is_set():
                    self._needs_redraw.clear()
                    self._render()
                    self._renderer.present()
                else:
                    time.sleep(0.05)

            except Exception as e:
                logger.error(f"Error in main loop: {e}")
                time.sleep(1)

    def _render(self) -> None:
        """Draw the clock face (and caption) centered in the window."""
        import pygame._sdl2 as sdl2

        display_cfg = self.config.display
        show_caption = self.config.clock.show_caption

        self._renderer.draw_color = tuple(display_cfg.background_color) + (255,)
        self._renderer.clear()

        diameter = face_diameter(self.screen_width, self.screen_height, show_caption)
        face_surface = self.face.render(diameter)

        caption_surface = None
        total_height = diameter
        if show_caption:
            caption_surface = self.face.render_caption(
                self.model.timezone_name.replace('_', ' '),
                max(12, self.screen_height // 24)
            )
            total_height += 12 + caption_surface.get_height()

        x = (self.screen_width - diameter) // 2
        y = (self.screen_height - total_height) // 2
        self._draw_surface(sdl2, face_surface, x, y)

        if caption_surface:
            cx = (self.screen_width - caption_surface.get_width()) // 2
            self._draw_surface(sdl2, caption_surface, cx, y + diameter + 12)

    def _draw_surface(self, sdl2, surface, x: int, y: int) -> None:
        texture = sdl2.Texture.from_surface(self._renderer, surface)
        texture.blend_mode = 1  # Enable alpha blending
        texture.draw(dstrect=(x, y, surface.get_width(), surface.get_height()))

    def handle_events(self) -> bool:
        """
        Process pygame events.

        Returns:
            True to continue running, False to quit.
        """
        import pygame

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                return False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    return False
                elif event.key == pygame.K_RIGHT:
                    self.cycle_timezone(1)
                elif event.key == pygame.K_LEFT:
                    self.cycle_timezone(-1)
            elif event.type == pygame.WINDOWEXPOSED:
                self._needs_redraw.set()

        return True

    def stop(self) -> None:
        """Stop the application."""
        logger.info("Stopping GlobalTime...")
        self._running = False
        self._shutdown_event.set()

    def _cleanup(self) -> None:
        """Clean up resources."""
        logger.info("Cleaning up...")

        if self.ticker:
            try:
                self.ticker.stop()
            except Exception as e:
                logger.error(f"Error stopping tick source: {e}")

        if self._window is not None:
            import pygame
            self._renderer = None
            self._window = None
            pygame.quit()

        logger.info("GlobalTime stopped")


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="GlobalTime - Analog World Clock",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument(
        '-c', '--config',
        default=os.environ.get('GLOBALTIME_CONFIG'),
        help='Path to configuration file'
    )

    parser.add_argument(
        '-t', '--timezone',
        help='IANA timezone to show (e.g. Europe/Paris), overrides the config'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose logging'
    )

    parser.add_argument(
        '--snapshot',
        metavar='PATH',
        help='Render one frame to an image file and exit'
    )

    parser.add_argument(
        '--list-timezones',
        action='store_true',
        help='List available timezone names and exit'
    )

    parser.add_argument(
        '--version',
        action='store_true',
        help='Show version and exit'
    )

    args = parser.parse_args()

    if args.version:
        from . import __version__
        print(f"GlobalTime {__version__}")
        return 0

    if args.list_timezones:
        from zoneinfo import available_timezones
        for name in sorted(available_timezones()):
            print(name)
        return 0

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    if args.timezone:
        from .clock.model import InvalidTimezone, resolve_timezone
        try:
            resolve_timezone(args.timezone)
        except InvalidTimezone as e:
            print(f"Error: {e}")
            return 2

    if args.snapshot:
        from .config import load_config
        try:
            snapshot(load_config(args.config), args.snapshot,
                     timezone_override=args.timezone)
        except Exception as e:
            logger.error(f"Snapshot failed: {e}")
            return 1
        return 0

    app = GlobalTime(config_path=args.config, timezone_override=args.timezone)
    return app.run()


if __name__ == "__main__":
    sys.exit(main())
