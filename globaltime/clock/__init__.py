# Copyright (c) 2025-2026 Luc Vincent. All Rights Reserved.
"""Clock model, tick source and face renderer."""

from .model import (
    ClockError,
    ClockFaceModel,
    Hand,
    HandAngles,
    InvalidTimezone,
    NoTimezoneConfigured,
    Point,
    TimeTriple,
)
from .ticker import TickSource

__all__ = [
    'ClockError',
    'ClockFaceModel',
    'Hand',
    'HandAngles',
    'InvalidTimezone',
    'NoTimezoneConfigured',
    'Point',
    'TimeTriple',
    'TickSource',
]
