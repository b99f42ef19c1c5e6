"""
Time Slot Manager

Finds and ranks free slots for a task:
1. Refresh the snapshot of already-scheduled tasks
2. Generate candidate slots over the date range
3. Filter by work days / work hours (viewer timezone)
4. Remove slots with calendar conflicts (one batched query)
5. Tag buffer feasibility
6. Score and sort (descending, stable)
"""

import logging
from datetime import datetime
from typing import Callable, Dict, List, Optional

from auto_scheduling.providers.base import (
	CollaboratorError,
	ConflictSource,
	ConflictSourceError,
	SettingsProvider,
	SlotQuery,
	TaskRepository,
	TaskRepositoryError,
)

from .date_utils import (
	add_days,
	add_minutes,
	get_day,
	get_timezone,
	is_same_day,
	now_utc,
	round_date_up,
	set_time_of_day,
	to_zoned_time,
)
from .models import Conflict, Task, TimeSlot
from .settings import AutoScheduleSettings
from .slot_scorer import ScheduledTaskSnapshot, SlotScorer

logger = logging.getLogger(__name__)


# Margen mínimo entre "ahora" y el primer slot del día actual
MINIMUM_BUFFER_MINUTES = 15
SLOT_INTERVAL_MINUTES = 30


class TimeSlotManager:
	"""
	Orquestador de búsqueda de slots.

	Args:
		settings: configuración de auto-agenda
		conflict_source: calendarios externos (consultas en batch)
		task_repository: store de tareas ya agendadas
		time_zone: zona IANA del usuario
		scorer: SlotScorer (uno nuevo por defecto)
		clock: callable que devuelve "ahora" en UTC
	"""

	def __init__(
		self,
		settings: AutoScheduleSettings,
		conflict_source: ConflictSource,
		task_repository: TaskRepository,
		time_zone: str = "UTC",
		scorer: Optional[SlotScorer] = None,
		clock: Callable[[], datetime] = now_utc
	):
		self.settings = settings
		self.conflict_source = conflict_source
		self.task_repository = task_repository
		self.time_zone = get_timezone(time_zone)
		self.clock = clock
		self.slot_scorer = scorer or SlotScorer(clock=clock)

	@classmethod
	async def from_provider(
		cls,
		settings_provider: SettingsProvider,
		conflict_source: ConflictSource,
		task_repository: TaskRepository,
		**kwargs
	) -> "TimeSlotManager":
		"""Crea un manager leyendo settings y zona horaria del provider."""
		settings = await settings_provider.get_settings()
		time_zone = await settings_provider.get_time_zone()
		return cls(settings, conflict_source, task_repository, time_zone=time_zone, **kwargs)

	async def update_scheduled_tasks(self) -> ScheduledTaskSnapshot:
		"""
		Relee las tareas auto-agendadas y actualiza el snapshot del scorer.

		Raises:
			TaskRepositoryError: si el store de tareas falla
		"""
		try:
			scheduled_tasks = await self.task_repository.find_auto_scheduled_tasks()
		except CollaboratorError:
			logger.error("Task repository failed while refreshing scheduled tasks")
			raise
		except Exception as e:
			logger.error(f"Task repository failed while refreshing scheduled tasks: {e}")
			raise TaskRepositoryError(str(e)) from e

		# Sólo tareas con inicio, fin y proyecto
		scheduled_tasks = [task for task in scheduled_tasks if task.is_placed()]
		return self.slot_scorer.update_scheduled_tasks(scheduled_tasks)

	async def find_available_slots(
		self,
		task: Task,
		start_date: datetime,
		end_date: datetime
	) -> List[TimeSlot]:
		"""
		Busca slots disponibles para `task` entre start_date y end_date (UTC).

		Returns:
			list[TimeSlot]: ordenados por score descendente (vacío si no hay)

		Raises:
			TaskRepositoryError: si falla el refresh de tareas
			ConflictSourceError: si falla la consulta de conflictos
		"""
		# Siempre con el snapshot más reciente
		snapshot = await self.update_scheduled_tasks()

		if not self.settings.is_schedulable():
			logger.warning(
				f"Settings cannot produce slots (hours {self.settings.work_hour_start}-"
				f"{self.settings.work_hour_end}, days {self.settings.work_days!r})"
			)
			return []

		# 1. Generar slots potenciales
		potential_slots = self.generate_potential_slots(task.effective_duration, start_date, end_date)
		self._log_stage("Generated potential slots", task, potential_slots)

		# 2. Filtrar por horario laboral
		work_hour_slots = self.filter_by_work_hours(potential_slots)
		self._log_stage("After work hours filter", task, work_hour_slots)

		# 3. Quitar conflictos de calendario
		available_slots = await self.remove_conflicts(work_hour_slots, task)
		self._log_stage("After conflict removal", task, available_slots)

		# 4. Marcar buffers
		slots_with_buffer = self.apply_buffer_times(available_slots)

		# 5. Score
		scored_slots = self.score_slots(slots_with_buffer, task, snapshot)

		# 6. Ordenar
		sorted_slots = self.sort_by_score(scored_slots)
		self._log_stage("Final sorted slots", task, sorted_slots)

		return sorted_slots

	async def is_slot_available(self, slot: TimeSlot) -> bool:
		"""
		True si el slot está en horario laboral y no tiene conflictos.

		Raises:
			ConflictSourceError: si falla la consulta de conflictos
		"""
		if not self.is_within_work_hours(slot):
			return False

		conflicts = await self.find_calendar_conflicts(slot)
		return len(conflicts) == 0

	def calculate_buffer_times(self, slot: TimeSlot) -> Dict[str, TimeSlot]:
		"""
		Ventanas de buffer antes y después del slot.

		Returns:
			dict: {
				"before_buffer": TimeSlot,  # [start - buffer, start)
				"after_buffer": TimeSlot    # [end, end + buffer)
			}
		"""
		# Un buffer negativo se trata como 0
		buffer_minutes = max(0, self.settings.buffer_minutes)

		before_buffer = TimeSlot(start=add_minutes(slot.start, -buffer_minutes), end=slot.start)
		before_buffer.is_within_work_hours = self.is_within_work_hours(before_buffer)

		after_buffer = TimeSlot(start=slot.end, end=add_minutes(slot.end, buffer_minutes))
		after_buffer.is_within_work_hours = self.is_within_work_hours(after_buffer)

		return {
			"before_buffer": before_buffer,
			"after_buffer": after_buffer,
		}

	def generate_potential_slots(
		self,
		duration: int,
		start_date: datetime,
		end_date: datetime
	) -> List[TimeSlot]:
		"""
		Genera slots candidatos de `duration` minutos.

		Primer día (hoy):
			- Empieza en max(start_date, ahora) + 15 min
			- Si eso pasa del fin de horario laboral, salta al día
			  siguiente a la hora de inicio laboral
		Días futuros:
			- Empieza a la hora de inicio laboral

		El inicio y el fin se redondean hacia arriba a la media hora; los
		slots avanzan de `duration` en `duration` hasta el fin (exclusivo).
		"""
		slots = []

		# Convertir a zona local
		local_start = to_zoned_time(start_date, self.time_zone)
		local_end = to_zoned_time(end_date, self.time_zone)
		local_now = to_zoned_time(self.clock(), self.time_zone)

		if is_same_day(local_start, local_now):
			# question: ¿el margen mínimo se aplica al inicio o al fin del slot?
			local_current_start = add_minutes(max(local_start, local_now), MINIMUM_BUFFER_MINUTES)

			if local_current_start.hour >= self.settings.work_hour_end:
				local_current_start = add_days(
					set_time_of_day(local_current_start, self.settings.work_hour_start, 0),
					1
				)
		else:
			local_current_start = set_time_of_day(local_start, self.settings.work_hour_start, 0)

		local_current_start = round_date_up(local_current_start, SLOT_INTERVAL_MINUTES)
		local_end = round_date_up(local_end, SLOT_INTERVAL_MINUTES)

		while local_current_start < local_end:
			slot_end = add_minutes(local_current_start, duration)
			slots.append(TimeSlot(start=local_current_start, end=slot_end))
			local_current_start = slot_end

		return slots

	def filter_by_work_hours(self, slots: List[TimeSlot]) -> List[TimeSlot]:
		"""Descarta slots fuera de horario laboral; marca los que quedan."""
		filtered_slots = []
		for slot in slots:
			if self.is_within_work_hours(slot):
				slot.is_within_work_hours = True
				filtered_slots.append(slot)
		return filtered_slots

	def is_within_work_hours(self, slot: TimeSlot) -> bool:
		"""
		Día laboral y start_hour >= inicio, end_hour <= fin, start_hour < fin
		(horas en zona local).
		"""
		local_start = to_zoned_time(slot.start, self.time_zone)
		local_end = to_zoned_time(slot.end, self.time_zone)

		if get_day(local_start) not in self.settings.parsed_work_days():
			return False

		start_hour = local_start.hour
		end_hour = local_end.hour

		return (
			start_hour >= self.settings.work_hour_start
			and end_hour <= self.settings.work_hour_end
			and start_hour < self.settings.work_hour_end
		)

	async def find_calendar_conflicts(self, slot: TimeSlot) -> List[Conflict]:
		"""Conflictos de un solo slot; sin calendarios seleccionados no consulta."""
		selected_calendars = self.settings.parsed_selected_calendars()
		if not selected_calendars:
			return []

		try:
			return await self.conflict_source.find_conflicts(slot, selected_calendars)
		except CollaboratorError:
			logger.error("Conflict source failed for single slot check")
			raise
		except Exception as e:
			logger.error(f"Conflict source failed for single slot check: {e}")
			raise ConflictSourceError(str(e)) from e

	async def remove_conflicts(self, slots: List[TimeSlot], task: Task) -> List[TimeSlot]:
		"""
		Quita los slots con conflictos usando una sola consulta en batch.

		Los slots descartados guardan sus conflictos en `slot.conflicts`.
		"""
		selected_calendars = self.settings.parsed_selected_calendars()
		if not selected_calendars or not slots:
			return list(slots)

		slots_to_check = [SlotQuery(slot=slot, task_id=task.id) for slot in slots]

		try:
			batch_results = await self.conflict_source.find_batch_conflicts(
				slots_to_check,
				selected_calendars,
				task.id
			)
		except CollaboratorError:
			logger.error(f"Batch conflict check failed for task {task.id}")
			raise
		except Exception as e:
			logger.error(f"Batch conflict check failed for task {task.id}: {e}")
			raise ConflictSourceError(str(e)) from e

		if len(batch_results) != len(slots_to_check):
			logger.error(
				f"Batch conflict check returned {len(batch_results)} results "
				f"for {len(slots_to_check)} slots (task {task.id})"
			)
			raise ConflictSourceError("Batch conflict results do not match the requested slots")

		available_slots = []
		for result in batch_results:
			if not result.conflicts:
				available_slots.append(result.slot)
			else:
				result.slot.conflicts = list(result.conflicts)

		return available_slots

	# TODO: los buffers sólo se marcan; falta reservar el tiempo (evitar
	# agendar dentro del buffer de otra tarea) y revisar conflictos en ellos
	def apply_buffer_times(self, slots: List[TimeSlot]) -> List[TimeSlot]:
		"""has_buffer_time = ambos buffers dentro de horario laboral."""
		for slot in slots:
			buffers = self.calculate_buffer_times(slot)
			slot.has_buffer_time = (
				buffers["before_buffer"].is_within_work_hours
				and buffers["after_buffer"].is_within_work_hours
			)
		return slots

	def score_slots(
		self,
		slots: List[TimeSlot],
		task: Task,
		snapshot: ScheduledTaskSnapshot
	) -> List[TimeSlot]:
		now = self.clock()
		for slot in slots:
			score = self.slot_scorer.score_slot(slot, task, snapshot=snapshot, now=now)
			slot.score = score["total"]
		return slots

	@staticmethod
	def sort_by_score(slots: List[TimeSlot]) -> List[TimeSlot]:
		# sorted() es estable: empates quedan en orden cronológico
		return sorted(slots, key=lambda slot: slot.score, reverse=True)

	@staticmethod
	def _log_stage(stage: str, task: Task, slots: List[TimeSlot]) -> None:
		logger.debug(
			"%s: task=%s first_slot=%s total=%s",
			stage,
			task.id,
			slots[0].start.isoformat() if slots else None,
			len(slots),
		)
