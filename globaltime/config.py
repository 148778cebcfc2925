# Copyright (c) 2025-2026 Luc Vincent. All Rights Reserved.
"""
Configuration management for GlobalTime.
Handles loading, validation, and defaults for all settings.
"""

import os
import yaml
from typing import Any, Dict, List, Optional
from dataclasses import dataclass, field
import logging

logger = logging.getLogger(__name__)

# Default paths
DEFAULT_CONFIG_PATHS = [
    "/etc/globaltime/config.yaml",
    os.path.expanduser("~/.config/globaltime/config.yaml"),
    "./config.yaml",
]

VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


@dataclass
class ClockConfig:
    """Clock settings."""
    timezone: str = "UTC"
    # Cycled with the left/right arrow keys
    timezones: List[str] = field(default_factory=lambda: [
        "UTC",
        "America/Los_Angeles",
        "America/New_York",
        "Europe/London",
        "Europe/Berlin",
        "Asia/Tokyo",
        "Australia/Sydney",
    ])
    refresh_interval_seconds: float = 1.0
    show_caption: bool = True


@dataclass
class HandConfig:
    """Settings for a single hand. Length is radius / length_ratio."""
    length_ratio: float = 1.6
    width: int = 3
    color: List[int] = field(default_factory=lambda: [255, 255, 255])


@dataclass
class HandsConfig:
    """Hour, minute and second hand settings."""
    hour: HandConfig = field(default_factory=lambda: HandConfig(
        length_ratio=2.3, width=4
    ))
    minute: HandConfig = field(default_factory=lambda: HandConfig(
        length_ratio=1.6, width=3
    ))
    second: HandConfig = field(default_factory=lambda: HandConfig(
        length_ratio=1.2, width=1, color=[255, 0, 0]
    ))


@dataclass
class FaceConfig:
    """Clock face styling."""
    background_color: List[int] = field(default_factory=lambda: [0, 0, 0])
    border_color: List[int] = field(default_factory=lambda: [255, 255, 255])
    border_width: int = 2
    digit_color: List[int] = field(default_factory=lambda: [255, 255, 255])
    digit_offset: int = 4
    caption_color: List[int] = field(default_factory=lambda: [200, 200, 200])


@dataclass
class DisplayConfig:
    """Window settings."""
    width: int = 480
    height: int = 520
    windowed: bool = True
    title: str = "Global Time"
    background_color: List[int] = field(default_factory=lambda: [24, 24, 24])


@dataclass
class LoggingConfig:
    """Logging settings."""
    level: str = "INFO"
    log_dir: Optional[str] = None


@dataclass
class GlobalTimeConfig:
    """Main configuration class."""
    clock: ClockConfig = field(default_factory=ClockConfig)
    hands: HandsConfig = field(default_factory=HandsConfig)
    face: FaceConfig = field(default_factory=FaceConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Runtime state (not persisted)
    config_path: Optional[str] = None


def _dict_to_dataclass(data: Dict[str, Any], cls: type) -> Any:
    """Convert a dictionary to a dataclass instance, handling nested dataclasses."""
    if not isinstance(data, dict):
        return cls()

    defaults = cls()
    kwargs = {}

    for key, value in data.items():
        if key not in cls.__dataclass_fields__:
            continue

        # Nested dataclasses: merge over the field's own default so
        # per-field defaults (e.g. the second hand's color) survive
        default_value = getattr(defaults, key)
        if hasattr(default_value, '__dataclass_fields__'):
            if not isinstance(value, dict):
                logger.warning(f"Ignoring malformed '{key}' section in config")
                continue
            merged = config_to_dict(default_value)
            merged.update(value)
            kwargs[key] = _dict_to_dataclass(merged, type(default_value))
        else:
            kwargs[key] = value

    return cls(**kwargs)


def load_config(config_path: Optional[str] = None) -> GlobalTimeConfig:
    """
    Load configuration from a YAML file.

    Args:
        config_path: Path to config file. If None, searches default locations.

    Returns:
        GlobalTimeConfig instance with loaded or default values.
    """
    # Find config file
    if config_path:
        paths_to_try = [config_path]
    else:
        paths_to_try = DEFAULT_CONFIG_PATHS

    config_data = {}
    found_path = None

    for path in paths_to_try:
        expanded_path = os.path.expanduser(path)
        if os.path.exists(expanded_path):
            try:
                with open(expanded_path, 'r') as f:
                    config_data = yaml.safe_load(f) or {}
                found_path = expanded_path
                logger.info(f"Loaded config from {expanded_path}")
                break
            except Exception as e:
                logger.warning(f"Failed to load config from {expanded_path}: {e}")

    if not found_path:
        logger.info("No config file found, using defaults")

    if not isinstance(config_data, dict):
        logger.warning("Config file does not contain a mapping, using defaults")
        config_data = {}

    config = GlobalTimeConfig(
        clock=_dict_to_dataclass(config_data.get('clock'), ClockConfig),
        hands=_dict_to_dataclass(config_data.get('hands'), HandsConfig),
        face=_dict_to_dataclass(config_data.get('face'), FaceConfig),
        display=_dict_to_dataclass(config_data.get('display'), DisplayConfig),
        logging=_dict_to_dataclass(config_data.get('logging'), LoggingConfig),
        config_path=found_path,
    )

    if config.logging.log_dir:
        config.logging.log_dir = os.path.expanduser(config.logging.log_dir)

    return config


def save_config(config: GlobalTimeConfig, config_path: Optional[str] = None) -> str:
    """
    Save configuration to a YAML file.

    Args:
        config: Configuration to save.
        config_path: Path to save to. If None, uses config.config_path or default.

    Returns:
        Path where config was saved.
    """
    if config_path is None:
        config_path = config.config_path or DEFAULT_CONFIG_PATHS[1]

    config_path = os.path.expanduser(config_path)

    # Ensure directory exists
    directory = os.path.dirname(config_path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    data = config_to_dict(config)

    with open(config_path, 'w') as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False)

    logger.info(f"Saved config to {config_path}")
    return config_path


def config_to_dict(config: Any) -> Dict[str, Any]:
    """Convert config to dictionary for serialization."""
    def dataclass_to_dict(obj: Any) -> Any:
        if hasattr(obj, '__dataclass_fields__'):
            result = {}
            for field_name in obj.__dataclass_fields__:
                if field_name == 'config_path':
                    continue  # Skip runtime state
                value = getattr(obj, field_name)
                result[field_name] = dataclass_to_dict(value)
            return result
        elif isinstance(obj, list):
            return [dataclass_to_dict(item) for item in obj]
        elif isinstance(obj, dict):
            return {k: dataclass_to_dict(v) for k, v in obj.items()}
        else:
            return obj

    return dataclass_to_dict(config)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_color(value: Any) -> bool:
    return (
        isinstance(value, (list, tuple)) and
        len(value) == 3 and
        all(isinstance(c, int) and 0 <= c <= 255 for c in value)
    )


def validate_config(config: GlobalTimeConfig) -> List[str]:
    """
    Validate configuration and return list of errors.

    Returns:
        List of error messages. Empty if valid.
    """
    from .clock.model import InvalidTimezone, resolve_timezone

    errors = []

    # Check clock settings
    try:
        resolve_timezone(config.clock.timezone)
    except InvalidTimezone:
        errors.append(f"Unknown timezone: {config.clock.timezone!r}")

    if not isinstance(config.clock.timezones, list):
        errors.append("clock.timezones must be a list of timezone names")
    else:
        for tz in config.clock.timezones:
            try:
                resolve_timezone(tz)
            except InvalidTimezone:
                errors.append(f"Unknown timezone in clock.timezones: {tz!r}")

    interval = config.clock.refresh_interval_seconds
    if not _is_number(interval) or interval <= 0:
        errors.append("clock.refresh_interval_seconds must be positive")

    # Check hands
    for name in ('hour', 'minute', 'second'):
        hand = getattr(config.hands, name)
        if not _is_number(hand.length_ratio) or hand.length_ratio <= 0:
            errors.append(f"{name} hand length_ratio must be positive")
        if not isinstance(hand.width, int) or hand.width < 1:
            errors.append(f"{name} hand width must be at least 1")
        if not _is_color(hand.color):
            errors.append(f"{name} hand color must be [R, G, B] with values 0-255")

    # Check face
    for name in ('background_color', 'border_color', 'digit_color', 'caption_color'):
        if not _is_color(getattr(config.face, name)):
            errors.append(f"face.{name} must be [R, G, B] with values 0-255")

    if not isinstance(config.face.border_width, int) or config.face.border_width < 0:
        errors.append("face.border_width must not be negative")

    # Check display
    if not all(isinstance(v, int) and v >= 1
               for v in (config.display.width, config.display.height)):
        errors.append("Display width and height must be positive")

    if not _is_color(config.display.background_color):
        errors.append("display.background_color must be [R, G, B] with values 0-255")

    # Check logging
    if str(config.logging.level).upper() not in VALID_LOG_LEVELS:
        errors.append(f"Logging level must be one of: {VALID_LOG_LEVELS}")

    return errors
