"""
Scheduling Services Module

This module provides the core business logic for auto-scheduling tasks:
- Date arithmetic in the viewer timezone (date_utils.py)
- Slot, task and conflict records (models.py)
- Auto-schedule settings (settings.py)
- Slot scoring (slot_scorer.py)
- Slot search and ranking (slot_manager.py)
"""
