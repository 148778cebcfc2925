# Copyright (c) 2025-2026 Luc Vincent. All Rights Reserved.
# GlobalTime - Analog World Clock
"""
GlobalTime draws an analog clock face for any IANA timezone in a pygame
window, refreshed once per second.
"""

__version__ = "1.0.0"
__author__ = "GlobalTime"
