"""Auto-scheduling of tasks into free work-calendar slots."""

__version__ = "0.1.0"
