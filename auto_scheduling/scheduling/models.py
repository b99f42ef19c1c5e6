"""
Scheduling Models

Plain records shared by the scheduling services and the providers:
- TimeSlot: candidate/evaluated interval
- Conflict: busy interval overlapping a slot
- Task: read-only view of a task record
- CalendarEvent: busy interval held by a calendar
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from .date_utils import to_utc


DEFAULT_TASK_DURATION = 30


def _coerce_datetime(value: Any) -> Optional[datetime]:
	"""Acepta datetime o string ISO-8601 (con 'Z'); None si está vacío."""
	if not value:
		return None
	if isinstance(value, str):
		value = datetime.fromisoformat(value.replace("Z", "+00:00"))
	return to_utc(value)


@dataclass
class Conflict:
	"""Evento ocupado que se solapa con un slot."""

	start: datetime
	end: datetime
	calendar_id: str
	event_id: Optional[str] = None
	title: str = ""

	def to_dict(self) -> Dict[str, Any]:
		return {
			"start": self.start.isoformat(),
			"end": self.end.isoformat(),
			"calendar_id": self.calendar_id,
			"event_id": self.event_id,
			"title": self.title,
		}


@dataclass
class TimeSlot:
	"""
	Intervalo candidato para colocar una tarea.

	start/end se guardan siempre en UTC. is_within_work_hours y
	has_buffer_time los calcula el pipeline, nunca el caller.
	"""

	start: datetime
	end: datetime
	score: float = 0
	conflicts: List[Conflict] = field(default_factory=list)
	energy_level: Optional[str] = None
	is_within_work_hours: bool = False
	has_buffer_time: bool = False

	def __post_init__(self):
		self.start = to_utc(self.start)
		self.end = to_utc(self.end)
		# Ventanas de buffer de 0 minutos son válidas (start == end)
		if self.end < self.start:
			raise ValueError(f"TimeSlot end {self.end} is before start {self.start}")

	@property
	def duration_minutes(self) -> int:
		return int((self.end - self.start).total_seconds() / 60)

	@property
	def is_available(self) -> bool:
		return not self.conflicts and self.is_within_work_hours

	def overlaps(self, start: datetime, end: datetime) -> bool:
		return self.start < end and start < self.end

	def to_dict(self) -> Dict[str, Any]:
		return {
			"start": self.start.isoformat(),
			"end": self.end.isoformat(),
			"duration_minutes": self.duration_minutes,
			"score": self.score,
			"conflicts": [conflict.to_dict() for conflict in self.conflicts],
			"energy_level": self.energy_level,
			"is_within_work_hours": self.is_within_work_hours,
			"has_buffer_time": self.has_buffer_time,
		}


@dataclass
class CalendarEvent:
	"""A busy interval on one calendar."""

	id: str
	calendar_id: str
	start: datetime
	end: datetime
	title: str = ""
	# Set when the event is the existing placement of a task
	task_id: Optional[str] = None

	def __post_init__(self):
		self.start = to_utc(self.start)
		self.end = to_utc(self.end)

	def to_conflict(self) -> Conflict:
		return Conflict(
			start=self.start,
			end=self.end,
			calendar_id=self.calendar_id,
			event_id=self.id,
			title=self.title,
		)


@dataclass(frozen=True)
class Task:
	"""
	Read-only view of a task record.

	duration is in minutes and may be missing or invalid; use
	effective_duration when generating slots.
	"""

	id: str
	title: str = ""
	duration: Optional[int] = None
	project_id: Optional[str] = None
	scheduled_start: Optional[datetime] = None
	scheduled_end: Optional[datetime] = None
	is_auto_scheduled: bool = False

	def __post_init__(self):
		# frozen: los límites se normalizan a UTC vía object.__setattr__
		object.__setattr__(self, "scheduled_start", _coerce_datetime(self.scheduled_start))
		object.__setattr__(self, "scheduled_end", _coerce_datetime(self.scheduled_end))

	@property
	def effective_duration(self) -> int:
		duration = self.duration
		if isinstance(duration, bool) or not isinstance(duration, int) or duration <= 0:
			return DEFAULT_TASK_DURATION
		return duration

	def is_placed(self) -> bool:
		"""Auto-scheduled task with both bounds and a project."""
		return (
			self.is_auto_scheduled
			and self.scheduled_start is not None
			and self.scheduled_end is not None
			and self.project_id is not None
		)

	@classmethod
	def from_record(cls, record: Dict[str, Any]) -> "Task":
		"""
		Construye un Task desde un registro almacenado.

		Acepta claves camelCase (scheduledStart) o snake_case (scheduled_start).
		"""

		def pick(snake: str, camel: str, default=None):
			if snake in record:
				return record[snake]
			return record.get(camel, default)

		return cls(
			id=str(record["id"]),
			title=record.get("title") or "",
			duration=pick("duration", "duration"),
			project_id=pick("project_id", "projectId"),
			scheduled_start=pick("scheduled_start", "scheduledStart"),
			scheduled_end=pick("scheduled_end", "scheduledEnd"),
			is_auto_scheduled=bool(pick("is_auto_scheduled", "isAutoScheduled", False)),
		)
