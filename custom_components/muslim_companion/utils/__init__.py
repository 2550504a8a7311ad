# File: utils/__init__.py
"""Pure Python utilities for Muslim Companion.

This module contains pure Python functions with ZERO Home Assistant dependencies.
All functions here can be unit tested without Home Assistant mocking.

⚠️ UTILS PURITY: NO `homeassistant.*` imports allowed in this module.

Submodules:
    - clock_utils: "HH:MM" parsing, wrapping clock arithmetic, countdown display
    - dt_utils: Local date/time helpers, lenient date parsing
    - math_utils: Percentages, clamping and weighted scores

Usage:
    from . import clock_utils
    from .math_utils import calculate_percentage
"""

from . import clock_utils, dt_utils, math_utils

__all__ = ["clock_utils", "dt_utils", "math_utils"]
