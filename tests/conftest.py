# Copyright (c) 2025-2026 Luc Vincent. All Rights Reserved.
"""
Pytest configuration and shared fixtures for GlobalTime tests.
"""

import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path

import pytest

# pygame must never try to open a real window or audio device in tests
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def new_year_utc():
    """2024-01-01T00:00:00 UTC."""
    return datetime(2024, 1, 1, 0, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def half_past_noon_utc():
    """2024-01-01T12:30:45 UTC."""
    return datetime(2024, 1, 1, 12, 30, 45, tzinfo=timezone.utc)


@pytest.fixture
def sample_config_dict():
    """Return a minimal valid config dictionary."""
    return {
        "clock": {
            "timezone": "Europe/Berlin",
            "timezones": ["UTC", "Europe/Berlin", "Asia/Tokyo"],
            "refresh_interval_seconds": 1.0,
            "show_caption": True
        },
        "hands": {
            "hour": {"length_ratio": 2.3, "width": 4, "color": [255, 255, 255]},
            "minute": {"length_ratio": 1.6, "width": 3, "color": [255, 255, 255]},
            "second": {"length_ratio": 1.2, "width": 1, "color": [255, 0, 0]}
        },
        "face": {
            "background_color": [0, 0, 0],
            "border_color": [255, 255, 255],
            "border_width": 2,
            "digit_color": [255, 255, 255],
            "digit_offset": 4,
            "caption_color": [200, 200, 200]
        },
        "display": {
            "width": 320,
            "height": 360,
            "windowed": True,
            "title": "Global Time Test",
            "background_color": [24, 24, 24]
        },
        "logging": {
            "level": "INFO",
            "log_dir": None
        }
    }


@pytest.fixture
def sample_config_yaml(temp_dir, sample_config_dict):
    """Create a temporary config.yaml file."""
    import yaml
    config_path = temp_dir / "config.yaml"
    with open(config_path, 'w') as f:
        yaml.dump(sample_config_dict, f)
    return config_path
