# Copyright (c) 2025-2026 Luc Vincent. All Rights Reserved.
"""Analog clock face drawn with pygame from a ClockFaceModel."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, TYPE_CHECKING

import pygame

from .model import ClockFaceModel, Point

if TYPE_CHECKING:
    from ..config import FaceConfig

logger = logging.getLogger(__name__)


@dataclass
class FaceGeometry:
    """Everything render() places on the face, in surface coordinates."""
    center: Point
    radius: float
    hand_endpoints: Dict[str, Point]
    numeral_positions: List[Tuple[int, Point]]
    numeral_distance: float


class ClockFace:
    """Draws the clock face, numerals and hands onto a pygame surface.

    Elements are drawn back to front: face, border, numerals, minute hand,
    hour hand, hub, second hand, second hub.
    """

    HUB_RADIUS = 6
    SECOND_HUB_RADIUS = 3

    def __init__(self, model: ClockFaceModel, face_config: FaceConfig):
        """Initialize the clock face.

        Args:
            model: Model supplying the hand values and geometry.
            face_config: Colors, border and numeral settings.
        """
        self._model = model
        self._config = face_config
        self._font_cache: dict = {}

    def get_font(self, size: int) -> pygame.font.Font:
        """Get a cached pygame font.

        Args:
            size: Font size in pixels.

        Returns:
            pygame.font.Font instance.
        """
        if size not in self._font_cache:
            if not pygame.font.get_init():
                pygame.font.init()
            self._font_cache[size] = pygame.font.SysFont(None, size)
        return self._font_cache[size]

    @staticmethod
    def digit_font_size(diameter: int) -> int:
        """Numeral font size, growing with the face."""
        return int(8 + diameter / 50)

    def numeral_distance(self, radius: float, line_height: float) -> float:
        """Distance from the center to the middle of each numeral."""
        return radius - line_height / 4 - self._config.digit_offset - line_height / 2

    def geometry(self, diameter: int, line_height: Optional[float] = None) -> FaceGeometry:
        """
        Compute the face layout without drawing anything.

        Args:
            diameter: Face diameter in pixels.
            line_height: Numeral line height. Defaults to the font size.

        Returns:
            FaceGeometry for the current model state.
        """
        radius = diameter / 2
        center = Point(radius, radius)
        if line_height is None:
            line_height = self.digit_font_size(diameter)
        distance = self.numeral_distance(radius, line_height)
        return FaceGeometry(
            center=center,
            radius=radius,
            hand_endpoints=self._model.hand_endpoints(center, radius),
            numeral_positions=self._model.numeral_positions(center, distance),
            numeral_distance=distance,
        )

    def render(self, diameter: int) -> pygame.Surface:
        """
        Render the clock face.

        Args:
            diameter: Face diameter in pixels.

        Returns:
            pygame.Surface of size (diameter, diameter) with alpha.
        """
        cfg = self._config
        surface = pygame.Surface((diameter, diameter), pygame.SRCALPHA)

        font = self.get_font(self.digit_font_size(diameter))
        geo = self.geometry(diameter, line_height=font.get_linesize())
        center = (int(round(geo.center.x)), int(round(geo.center.y)))
        radius = diameter // 2

        # Face and border
        pygame.draw.circle(surface, cfg.background_color, center, radius)
        if cfg.border_width > 0:
            border_rect = pygame.Rect(0, 0, diameter, diameter)
            pygame.draw.ellipse(surface, cfg.border_color, border_rect, cfg.border_width)

        # Numerals, centered on their positions
        for numeral, pos in geo.numeral_positions:
            text = font.render(str(numeral), True, cfg.digit_color)
            surface.blit(text, (
                int(pos.x - text.get_width() / 2),
                int(pos.y - text.get_height() / 2)
            ))

        hour, minute, second = self._model.hands
        ends = geo.hand_endpoints

        self._draw_hand(surface, center, ends['minute'], minute.color, minute.width)
        self._draw_hand(surface, center, ends['hour'], hour.color, hour.width)
        pygame.draw.circle(surface, hour.color, center, self.HUB_RADIUS)

        self._draw_hand(surface, center, ends['second'], second.color, second.width)
        pygame.draw.circle(surface, second.color, center, self.SECOND_HUB_RADIUS)

        return surface

    def render_caption(self, text: str, size: int) -> pygame.Surface:
        """Render a caption line (e.g. the timezone name)."""
        font = self.get_font(size)
        return font.render(text, True, self._config.caption_color)

    def _draw_hand(
        self,
        surface: pygame.Surface,
        center: Tuple[int, int],
        end: Point,
        color,
        width: int
    ) -> None:
        end_pos = (int(round(end.x)), int(round(end.y)))
        pygame.draw.line(surface, color, center, end_pos, width)
