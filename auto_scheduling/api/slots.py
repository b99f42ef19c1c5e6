"""
Slot Search Endpoints

Entry points used by the task-scheduling workflow to ask for ranked free
slots. Inputs are validated and local dates are converted to a UTC range
in the viewer's timezone before the slot manager runs.

A failed calendar check raises SlotSearchError; "no free time" is an
empty list.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Union

from auto_scheduling.providers.base import (
	CollaboratorError,
	ConflictSource,
	SettingsProvider,
	TaskRepository,
)
from auto_scheduling.scheduling.date_utils import local_day_bounds, now_utc
from auto_scheduling.scheduling.models import Task
from auto_scheduling.scheduling.slot_manager import TimeSlotManager

from .shared import (
	ValidationError,
	validate_date,
	validate_record_id,
	validate_time_zone,
)

logger = logging.getLogger(__name__)


class SlotSearchError(Exception):
	"""The calendar or task store could not be checked; no slots were computed."""
	pass


async def get_available_slots(
	task: Union[Task, Dict[str, Any]],
	from_date: str,
	to_date: str,
	settings_provider: SettingsProvider,
	conflict_source: ConflictSource,
	task_repository: TaskRepository,
	limit: Optional[int] = None,
	clock: Optional[Callable[[], datetime]] = None
) -> List[Dict[str, Any]]:
	"""
	Obtiene slots disponibles y rankeados para una tarea.

	Args:
		task: Task o registro de tarea (dict)
		from_date: fecha inicial local (YYYY-MM-DD)
		to_date: fecha final local (YYYY-MM-DD), inclusive
		settings_provider: settings + zona horaria del usuario
		conflict_source: calendarios externos
		task_repository: store de tareas
		limit: máximo de slots a devolver
		clock: "ahora" inyectable (UTC)

	Returns:
		list[dict]: [
			{
				"start": "2026-01-15T14:00:00+00:00",
				"end": "2026-01-15T14:30:00+00:00",
				"duration_minutes": 30,
				"score": -3,
				"conflicts": [],
				"energy_level": None,
				"is_within_work_hours": True,
				"has_buffer_time": True
			},
			...
		]

	Raises:
		ValidationError: si los inputs son inválidos
		SlotSearchError: si un colaborador falló
	"""
	if isinstance(task, dict):
		if task.get("id") is None:
			raise ValidationError("task id is required")
		task = Task.from_record(task)
	validate_record_id(task.id, "task id")

	start_day = validate_date(from_date, "from_date")
	end_day = validate_date(to_date, "to_date")
	if end_day < start_day:
		raise ValidationError("to_date must be on or after from_date")

	if limit is not None and (isinstance(limit, bool) or not isinstance(limit, int) or limit < 1):
		raise ValidationError("limit must be a positive integer")

	try:
		settings = await settings_provider.get_settings()
		time_zone = await settings_provider.get_time_zone()
	except Exception as e:
		logger.error(f"Could not load auto-schedule settings: {e}")
		raise SlotSearchError("Could not load your scheduling settings") from e

	time_zone = validate_time_zone(time_zone)

	start_utc, _ = local_day_bounds(start_day, time_zone)
	_, end_utc = local_day_bounds(end_day, time_zone)

	manager = TimeSlotManager(
		settings,
		conflict_source,
		task_repository,
		time_zone=time_zone,
		clock=clock or now_utc,
	)

	try:
		slots = await manager.find_available_slots(task, start_utc, end_utc)
	except CollaboratorError as e:
		logger.error(f"Slot search failed for task {task.id}: {e}")
		raise SlotSearchError("Could not check your calendar") from e

	if limit is not None:
		slots = slots[:limit]

	return [slot.to_dict() for slot in slots]


async def get_best_slot(
	task: Union[Task, Dict[str, Any]],
	from_date: str,
	to_date: str,
	settings_provider: SettingsProvider,
	conflict_source: ConflictSource,
	task_repository: TaskRepository,
	clock: Optional[Callable[[], datetime]] = None
) -> Optional[Dict[str, Any]]:
	"""Slot mejor rankeado, o None si no hay disponibilidad."""
	slots = await get_available_slots(
		task,
		from_date,
		to_date,
		settings_provider,
		conflict_source,
		task_repository,
		limit=1,
		clock=clock,
	)
	return slots[0] if slots else None
