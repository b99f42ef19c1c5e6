"""
Slot Scorer

Assigns a desirability score to a candidate slot.

The baseline prefers earlier slots: score = -(whole hours from now until
slot start). Optional heuristics over the snapshot of already-placed
tasks are weighted by ScoringWeights and are off by default.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Dict, Iterable, Optional, Tuple

from .date_utils import difference_in_hours, now_utc
from .models import Task, TimeSlot


@dataclass(frozen=True)
class ScheduledTaskSnapshot:
	"""Tareas ya ubicadas en el calendario, congeladas para un pase de scoring."""

	tasks: Tuple[Task, ...] = ()

	def __len__(self) -> int:
		return len(self.tasks)

	def others(self, task: Task) -> Tuple[Task, ...]:
		"""Todas las tareas del snapshot excepto `task`."""
		return tuple(t for t in self.tasks if t.id != task.id)


EMPTY_SNAPSHOT = ScheduledTaskSnapshot()


@dataclass(frozen=True)
class ScoringWeights:
	"""
	Pesos de las heurísticas opcionales.

	Con los valores por defecto (0.0) el total es sólo el score base.
	"""

	project_proximity: float = 0.0
	overlap_penalty: float = 0.0
	proximity_window_minutes: int = 60


class SlotScorer:
	"""
	Calcula el score de un slot para una tarea.

	Mantiene un snapshot de tareas agendadas con ciclo de vida
	{stale, fresh}: update_scheduled_tasks lo deja fresh, mark_stale lo
	invalida tras cambios en el store.
	"""

	def __init__(
		self,
		weights: Optional[ScoringWeights] = None,
		clock: Callable[[], datetime] = now_utc
	):
		self.weights = weights or ScoringWeights()
		self.clock = clock
		self._snapshot = EMPTY_SNAPSHOT
		self._stale = True

	@property
	def is_stale(self) -> bool:
		return self._stale

	@property
	def snapshot(self) -> ScheduledTaskSnapshot:
		return self._snapshot

	def mark_stale(self) -> None:
		self._stale = True

	def update_scheduled_tasks(self, tasks: Iterable[Task]) -> ScheduledTaskSnapshot:
		"""Reemplaza el snapshot de tareas agendadas y lo devuelve."""
		self._snapshot = ScheduledTaskSnapshot(tasks=tuple(tasks))
		self._stale = False
		return self._snapshot

	def score_slot(
		self,
		slot: TimeSlot,
		task: Task,
		snapshot: Optional[ScheduledTaskSnapshot] = None,
		now: Optional[datetime] = None
	) -> Dict[str, float]:
		"""
		Calcula el score compuesto de un slot.

		Args:
			slot: slot candidato
			task: tarea a agendar
			snapshot: tareas ya agendadas (por defecto el snapshot guardado)
			now: instante de referencia (por defecto el reloj del scorer)

		Returns:
			dict: {
				"total": float,
				"base": float,
				"project_proximity": float,
				"overlap_penalty": float
			}
		"""
		if snapshot is None:
			snapshot = self._snapshot
		if now is None:
			now = self.clock()

		base = self.calculate_base_score(slot, now)
		others = snapshot.others(task)

		proximity = 0.0
		if self.weights.project_proximity:
			proximity = self.weights.project_proximity * self._count_same_project_nearby(slot, task, others)

		penalty = 0.0
		if self.weights.overlap_penalty:
			penalty = self.weights.overlap_penalty * self._count_overlapping(slot, others)

		return {
			"total": base + proximity - penalty,
			"base": base,
			"project_proximity": proximity,
			"overlap_penalty": penalty,
		}

	@staticmethod
	def calculate_base_score(slot: TimeSlot, now: datetime) -> float:
		# Más temprano = mejor
		return -difference_in_hours(slot.start, now)

	def _count_same_project_nearby(self, slot: TimeSlot, task: Task, others: Tuple[Task, ...]) -> int:
		if task.project_id is None:
			return 0

		window = timedelta(minutes=self.weights.proximity_window_minutes)
		count = 0
		for other in others:
			if other.project_id != task.project_id:
				continue
			if slot.overlaps(other.scheduled_start - window, other.scheduled_end + window):
				count += 1
		return count

	@staticmethod
	def _count_overlapping(slot: TimeSlot, others: Tuple[Task, ...]) -> int:
		return sum(1 for other in others if slot.overlaps(other.scheduled_start, other.scheduled_end))
