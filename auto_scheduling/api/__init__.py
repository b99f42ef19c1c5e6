"""
Auto Scheduling API

Structure:
    api/
    ├── __init__.py       # This file
    ├── slots.py          # Slot search entry points
    └── shared/           # Shared utilities
        ├── __init__.py
        └── validators.py # Input validators

Usage:
    slots = await get_available_slots(task, "2026-01-20", "2026-01-27",
                                      settings_provider, conflict_source,
                                      task_repository)
"""

from . import shared
from .slots import SlotSearchError, get_available_slots, get_best_slot

__all__ = [
    "shared",
    "SlotSearchError",
    "get_available_slots",
    "get_best_slot",
]
