"""
Base Providers

Defines the interfaces the slot manager depends on:
- ConflictSource: busy intervals from the user's calendars
- TaskRepository: tasks already placed on the calendar
- SettingsProvider: auto-schedule settings and viewer timezone
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional

from auto_scheduling.scheduling.models import Conflict, Task, TimeSlot
from auto_scheduling.scheduling.settings import AutoScheduleSettings


@dataclass
class SlotQuery:
	"""Un slot a verificar dentro de un batch."""

	slot: TimeSlot
	task_id: Optional[str] = None


@dataclass
class BatchConflictResult:
	"""Resultado de un slot del batch (paralelo a la lista de entrada)."""

	slot: TimeSlot
	conflicts: List[Conflict] = field(default_factory=list)


class ConflictSource(ABC):
	"""
	Interfaz base para fuentes de eventos ocupados.

	Todas las implementaciones deben soportar consultas en batch: una sola
	llamada para todos los slots candidatos.
	"""

	@abstractmethod
	async def find_conflicts(self, slot: TimeSlot, calendar_ids: List[str]) -> List[Conflict]:
		"""
		Busca eventos de `calendar_ids` que se solapan con `slot`.

		Returns:
			list[Conflict]: ordenados por inicio (vacío = libre)

		Raises:
			ConflictSourceError: si el calendario no está disponible
		"""
		pass

	@abstractmethod
	async def find_batch_conflicts(
		self,
		queries: List[SlotQuery],
		calendar_ids: List[str],
		task_id: Optional[str] = None
	) -> List[BatchConflictResult]:
		"""
		Verifica muchos slots en una sola llamada.

		Args:
			queries: slots a verificar
			calendar_ids: calendarios seleccionados
			task_id: tarea que se está agendando; su propia ubicación
				existente no cuenta como conflicto

		Returns:
			list[BatchConflictResult]: uno por query, en el mismo orden

		Raises:
			ConflictSourceError: si el calendario no está disponible
		"""
		pass


class TaskRepository(ABC):
	"""Read access to the task store."""

	@abstractmethod
	async def find_auto_scheduled_tasks(self) -> List[Task]:
		"""
		Tareas auto-agendadas con scheduled_start, scheduled_end y project_id.

		Raises:
			TaskRepositoryError: si el store no está disponible
		"""
		pass


class SettingsProvider(ABC):
	"""Read access to the user's settings."""

	@abstractmethod
	async def get_settings(self) -> AutoScheduleSettings:
		pass

	@abstractmethod
	async def get_time_zone(self) -> str:
		"""Nombre IANA de la zona del usuario (ej. "America/Bogota")."""
		pass


class CollaboratorError(Exception):
	"""Error de un colaborador externo (calendario, store de tareas, settings)."""
	pass


class ConflictSourceError(CollaboratorError):
	"""El calendario no pudo consultarse."""
	pass


class TaskRepositoryError(CollaboratorError):
	"""Las tareas agendadas no pudieron leerse."""
	pass


class SettingsProviderError(CollaboratorError):
	"""Los settings no pudieron leerse."""
	pass
