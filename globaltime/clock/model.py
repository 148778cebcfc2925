# Copyright (c) 2025-2026 Luc Vincent. All Rights Reserved.
"""
Clock face model.

Converts an instant into hour/minute/second hand values for a timezone and
projects the resulting angles onto a circle. Has no dependency on any
drawing toolkit so it can be driven by any tick source and consumed by any
drawing surface.

Angles are in radians with 0 at the top of the face and clockwise positive,
assuming a y-down coordinate system (screen coordinates).
"""

import logging
import math
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone as dt_timezone, tzinfo
from typing import Dict, List, NamedTuple, Optional, Tuple, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

TWO_PI = 2.0 * math.pi
QUARTER_TURN = math.pi / 2.0

Instant = Union[datetime, int, float]


class ClockError(Exception):
    """Base class for clock model errors."""


class InvalidTimezone(ClockError, ValueError):
    """Raised when a timezone identifier is not recognized."""

    def __init__(self, identifier):
        self.identifier = identifier
        super().__init__(f"Unknown timezone: {identifier!r}")


class NoTimezoneConfigured(ClockError, RuntimeError):
    """Raised when the model is ticked before a timezone was set."""

    def __init__(self):
        super().__init__("No timezone configured; call set_timezone() first")


class Point(NamedTuple):
    x: float
    y: float


class TimeTriple(NamedTuple):
    """Wall-clock values sampled from a single instant."""
    hour: int
    minute: int
    second: int


class HandAngles(NamedTuple):
    hour: float
    minute: float
    second: float


@dataclass
class Hand:
    """One clock hand.

    length_ratio is relative to the face radius: length = radius / ratio,
    so a larger ratio gives a shorter hand.
    """
    name: str
    length_ratio: float
    width: int = 1
    color: List[int] = field(default_factory=lambda: [255, 255, 255])
    value: int = 0

    def length_for(self, radius: float) -> float:
        """Get the hand length in pixels for a face of the given radius."""
        return radius / self.length_ratio


def default_hands() -> Tuple[Hand, Hand, Hand]:
    """Return the default (hour, minute, second) hands."""
    return (
        Hand("hour", length_ratio=2.3, width=4, color=[255, 255, 255]),
        Hand("minute", length_ratio=1.6, width=3, color=[255, 255, 255]),
        Hand("second", length_ratio=1.2, width=1, color=[255, 0, 0]),
    )


def second_angle(value: float) -> float:
    """Angle of the second hand for a value in 0..59."""
    return value / 60.0 * TWO_PI - QUARTER_TURN


def minute_angle(value: float) -> float:
    """Angle of the minute hand for a value in 0..59."""
    return value / 60.0 * TWO_PI - QUARTER_TURN


def hour_angle(hour: float, minute: float = 0) -> float:
    """Angle of the hour hand.

    The hour hand creeps between hour marks as the minutes advance, so
    11:59 sits just short of 12 rather than jumping on the hour.

    Args:
        hour: Hour of day (0-23, folded onto 0-11).
        minute: Minute of hour (0-59).

    Returns:
        Angle in radians.
    """
    total_hours = hour % 12 + minute / 60.0
    return total_hours / 12.0 * TWO_PI - QUARTER_TURN


def hand_endpoint(angle: float, center: Tuple[float, float], hand_length: float) -> Point:
    """Project an angle onto a circle of radius hand_length around center."""
    return Point(
        center[0] + hand_length * math.cos(angle),
        center[1] + hand_length * math.sin(angle),
    )


def numeral_position(i: int, center: Tuple[float, float], distance: float) -> Point:
    """Position of numeral i (1-12) on the face.

    12 lands at the top and numerals proceed clockwise. The y term is
    negated because screen y grows downward; dropping the sign mirrors the
    dial vertically.

    Args:
        i: Numeral, 1 through 12.
        center: Face center (x, y).
        distance: Distance from the center to the numeral's center.

    Returns:
        Point where the numeral should be centered.
    """
    theta = math.radians((i + 3) * 30)
    return Point(
        center[0] + distance * math.cos(theta + math.pi),
        center[1] - distance * math.sin(theta),
    )


def resolve_timezone(tz: Union[str, tzinfo]) -> tzinfo:
    """
    Resolve a timezone identifier.

    Args:
        tz: IANA identifier (e.g. "America/New_York") or a tzinfo instance.

    Returns:
        tzinfo for the identifier.

    Raises:
        InvalidTimezone: If the identifier is unknown or malformed.
    """
    if isinstance(tz, tzinfo):
        return tz
    if not isinstance(tz, str) or not tz.strip():
        raise InvalidTimezone(tz)
    try:
        return ZoneInfo(tz.strip())
    except (ZoneInfoNotFoundError, ValueError, OSError) as e:
        raise InvalidTimezone(tz) from e


def timezone_name(tz: tzinfo) -> str:
    """Get a display name for a tzinfo."""
    key = getattr(tz, "key", None)
    if key:
        return key
    return str(tz)


def to_utc(now: Instant) -> datetime:
    """Normalize an instant to an aware UTC datetime.

    Naive datetimes are taken to already be in UTC.
    """
    if isinstance(now, datetime):
        if now.tzinfo is None:
            return now.replace(tzinfo=dt_timezone.utc)
        return now.astimezone(dt_timezone.utc)
    return datetime.fromtimestamp(now, tz=dt_timezone.utc)


class ClockFaceModel:
    """
    Hour/minute/second state for one clock face.

    The three hand values are always written together from a single
    instant, and read back as a snapshot, under one lock. A tick source on
    a background thread can therefore feed the model while another thread
    renders it without ever observing a mix of two instants.
    """

    def __init__(
        self,
        timezone: Optional[Union[str, tzinfo]] = None,
        hands: Optional[Tuple[Hand, Hand, Hand]] = None
    ):
        """
        Initialize the model.

        Args:
            timezone: Optional IANA identifier or tzinfo.
            hands: Optional (hour, minute, second) hands; defaults are used
                when omitted.
        """
        self._lock = threading.Lock()
        self._timezone: Optional[tzinfo] = None
        self.hour_hand, self.minute_hand, self.second_hand = hands or default_hands()

        if timezone is not None:
            self.set_timezone(timezone)

    @property
    def hands(self) -> Tuple[Hand, Hand, Hand]:
        return (self.hour_hand, self.minute_hand, self.second_hand)

    @property
    def timezone(self) -> Optional[tzinfo]:
        return self._timezone

    @property
    def timezone_name(self) -> Optional[str]:
        if self._timezone is None:
            return None
        return timezone_name(self._timezone)

    def set_timezone(self, tz: Union[str, tzinfo]) -> None:
        """
        Set the timezone used by subsequent ticks.

        Raises:
            InvalidTimezone: If tz is not a recognized timezone. The
                previously configured timezone is kept.
        """
        resolved = resolve_timezone(tz)
        with self._lock:
            self._timezone = resolved
        logger.info(f"Clock timezone set to {timezone_name(resolved)}")

    def tick(self, now: Instant) -> TimeTriple:
        """
        Resample the hand values from an instant.

        Args:
            now: Current instant as a datetime or POSIX timestamp.

        Returns:
            The new (hour, minute, second) values.

        Raises:
            NoTimezoneConfigured: If no timezone has been set.
        """
        utc_now = to_utc(now)
        with self._lock:
            if self._timezone is None:
                raise NoTimezoneConfigured()
            local = utc_now.astimezone(self._timezone)
            self.hour_hand.value = local.hour
            self.minute_hand.value = local.minute
            self.second_hand.value = local.second
            return TimeTriple(local.hour, local.minute, local.second)

    def time(self) -> TimeTriple:
        """Get a consistent snapshot of the current hand values."""
        with self._lock:
            return TimeTriple(
                self.hour_hand.value,
                self.minute_hand.value,
                self.second_hand.value,
            )

    def hand_angles(self) -> HandAngles:
        """Get the hour, minute and second hand angles in radians."""
        hour, minute, second = self.time()
        return HandAngles(
            hour=hour_angle(hour, minute),
            minute=minute_angle(minute),
            second=second_angle(second),
        )

    def hand_endpoint(
        self,
        angle: float,
        center: Tuple[float, float],
        hand_length: float
    ) -> Point:
        return hand_endpoint(angle, center, hand_length)

    def numeral_position(
        self,
        i: int,
        center: Tuple[float, float],
        distance: float
    ) -> Point:
        return numeral_position(i, center, distance)

    def hand_endpoints(self, center: Tuple[float, float], radius: float) -> Dict[str, Point]:
        """
        Get the endpoint of every hand for a face of the given radius.

        Returns:
            Dict mapping hand name ('hour', 'minute', 'second') to Point.
        """
        angles = self.hand_angles()
        return {
            hand.name: hand_endpoint(angle, center, hand.length_for(radius))
            for hand, angle in zip(self.hands, angles)
        }

    def numeral_positions(
        self,
        center: Tuple[float, float],
        distance: float
    ) -> List[Tuple[int, Point]]:
        """Get (numeral, position) pairs for 1 through 12."""
        return [(i, numeral_position(i, center, distance)) for i in range(1, 13)]
