"""
In-Memory Providers

Implementations of the provider interfaces backed by plain lists.
Used to embed the scheduler without a database or calendar API, and by
the test suite.
"""

import logging
from typing import Dict, Iterable, List, Optional

from auto_scheduling.scheduling.models import CalendarEvent, Conflict, Task, TimeSlot
from auto_scheduling.scheduling.settings import AutoScheduleSettings

from .base import (
	BatchConflictResult,
	ConflictSource,
	SettingsProvider,
	SlotQuery,
	TaskRepository,
)

logger = logging.getLogger(__name__)


class InMemoryConflictSource(ConflictSource):
	"""Conflict source over a fixed list of calendar events."""

	def __init__(self, events: Optional[Iterable[CalendarEvent]] = None):
		self._events: Dict[str, List[CalendarEvent]] = {}
		self.batch_calls = 0
		self.single_calls = 0
		for event in events or []:
			self.add_event(event)

	def add_event(self, event: CalendarEvent) -> None:
		self._events.setdefault(event.calendar_id, []).append(event)

	def _overlapping(
		self,
		slot: TimeSlot,
		calendar_ids: List[str],
		task_id: Optional[str] = None
	) -> List[Conflict]:
		conflicts = []
		for calendar_id in calendar_ids:
			for event in self._events.get(calendar_id, []):
				# La ubicación existente de la misma tarea no es conflicto
				if task_id is not None and event.task_id == task_id:
					continue
				# Overlap: start < slot.end AND end > slot.start
				if event.start < slot.end and event.end > slot.start:
					conflicts.append(event.to_conflict())

		conflicts.sort(key=lambda c: (c.start, c.end))
		return conflicts

	async def find_conflicts(self, slot: TimeSlot, calendar_ids: List[str]) -> List[Conflict]:
		self.single_calls += 1
		return self._overlapping(slot, calendar_ids)

	async def find_batch_conflicts(
		self,
		queries: List[SlotQuery],
		calendar_ids: List[str],
		task_id: Optional[str] = None
	) -> List[BatchConflictResult]:
		self.batch_calls += 1
		logger.debug("Batch conflict check: %s slots, %s calendars", len(queries), len(calendar_ids))

		return [
			BatchConflictResult(
				slot=query.slot,
				conflicts=self._overlapping(query.slot, calendar_ids, query.task_id or task_id),
			)
			for query in queries
		]


class NullConflictSource(ConflictSource):
	"""Never reports conflicts."""

	async def find_conflicts(self, slot: TimeSlot, calendar_ids: List[str]) -> List[Conflict]:
		return []

	async def find_batch_conflicts(
		self,
		queries: List[SlotQuery],
		calendar_ids: List[str],
		task_id: Optional[str] = None
	) -> List[BatchConflictResult]:
		return [BatchConflictResult(slot=query.slot) for query in queries]


class InMemoryTaskRepository(TaskRepository):
	"""Task store over a list of Task records."""

	def __init__(self, tasks: Optional[Iterable[Task]] = None):
		self.tasks: List[Task] = list(tasks or [])
		self.calls = 0

	def add(self, task: Task) -> None:
		self.tasks.append(task)

	async def find_auto_scheduled_tasks(self) -> List[Task]:
		self.calls += 1
		return [task for task in self.tasks if task.is_placed()]


class StaticSettingsProvider(SettingsProvider):
	"""Returns fixed settings and timezone."""

	def __init__(self, settings: Optional[AutoScheduleSettings] = None, time_zone: str = "UTC"):
		self.settings = settings or AutoScheduleSettings()
		self.time_zone = time_zone

	async def get_settings(self) -> AutoScheduleSettings:
		return self.settings

	async def get_time_zone(self) -> str:
		return self.time_zone
