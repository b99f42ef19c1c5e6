"""
Auto Schedule Settings

Work-hour, work-day, buffer and calendar-selection configuration read by
the slot manager. Stored values arrive encoded (JSON arrays or
comma-separated strings); decoding never raises, malformed values
degrade to an empty selection.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Union

logger = logging.getLogger(__name__)


DEFAULT_WORK_HOUR_START = 9
DEFAULT_WORK_HOUR_END = 17
# 0 = domingo ... 6 = sábado
DEFAULT_WORK_DAYS = [1, 2, 3, 4, 5]
DEFAULT_BUFFER_MINUTES = 0

Encoded = Union[str, Iterable, None]


def _decode_list(value: Encoded, field_name: str) -> List[Any]:
	"""
	Decodifica un valor almacenado a lista.

	Formatos aceptados:
		- lista/tupla/set ya decodificados
		- string JSON: "[1, 2, 3]"
		- string separado por comas: "1,2,3"

	Cualquier otro valor se registra como warning y se devuelve [].
	"""
	if value is None:
		return []

	if isinstance(value, (list, tuple, set, frozenset)):
		return list(value)

	if isinstance(value, str):
		text = value.strip()
		if not text:
			return []

		if text.startswith("["):
			try:
				decoded = json.loads(text)
			except ValueError:
				logger.warning("Could not decode %s %r, using empty list", field_name, value)
				return []
			if isinstance(decoded, list):
				return decoded
			logger.warning("Decoded %s is not a list: %r", field_name, value)
			return []

		return [part.strip() for part in text.split(",") if part.strip()]

	logger.warning("Unsupported %s encoding %r, using empty list", field_name, type(value).__name__)
	return []


def parse_work_days(value: Encoded) -> List[int]:
	"""
	Devuelve los días laborales como enteros 0-6 (0 = domingo).

	Entradas fuera de rango o no numéricas invalidan todo el valor: se
	trata como "sin días laborales".
	"""
	days = []
	for item in _decode_list(value, "work_days"):
		try:
			day = int(item)
		except (TypeError, ValueError):
			logger.warning("Invalid work day %r in %r, ignoring work days", item, value)
			return []
		if isinstance(item, bool) or day < 0 or day > 6:
			logger.warning("Work day %r out of range in %r, ignoring work days", item, value)
			return []
		if day not in days:
			days.append(day)
	return sorted(days)


def parse_selected_calendars(value: Encoded) -> List[str]:
	"""Devuelve los ids de calendario seleccionados, sin vacíos ni duplicados."""
	calendars = []
	for item in _decode_list(value, "selected_calendars"):
		if item is None or isinstance(item, (dict, list)):
			logger.warning("Invalid calendar id %r in %r, ignoring selection", item, value)
			return []
		calendar_id = str(item).strip()
		if calendar_id and calendar_id not in calendars:
			calendars.append(calendar_id)
	return calendars


@dataclass
class AutoScheduleSettings:
	"""
	Configuración de auto-agenda del usuario.

	work_hour_start/work_hour_end: horas locales, rango [start, end)
	work_days: conjunto codificado de días 0-6
	buffer_minutes: margen antes/después de cada slot
	selected_calendars: lista codificada de calendarios a revisar
	"""

	work_hour_start: int = DEFAULT_WORK_HOUR_START
	work_hour_end: int = DEFAULT_WORK_HOUR_END
	work_days: Encoded = field(default_factory=lambda: list(DEFAULT_WORK_DAYS))
	buffer_minutes: int = DEFAULT_BUFFER_MINUTES
	selected_calendars: Encoded = field(default_factory=list)

	def parsed_work_days(self) -> List[int]:
		return parse_work_days(self.work_days)

	def parsed_selected_calendars(self) -> List[str]:
		return parse_selected_calendars(self.selected_calendars)

	def is_schedulable(self) -> bool:
		"""
		False cuando la configuración no puede producir ningún slot:
		horas fuera de 0-24 o invertidas, buffer negativo o sin días laborales.
		"""
		return (
			_is_hour(self.work_hour_start)
			and _is_hour(self.work_hour_end)
			and self.work_hour_start < self.work_hour_end
			and _is_int(self.buffer_minutes)
			and self.buffer_minutes >= 0
			and bool(self.parsed_work_days())
		)

	@classmethod
	def from_record(cls, record: Dict[str, Any]) -> "AutoScheduleSettings":
		"""
		Construye settings desde un registro almacenado (camelCase o snake_case).
		Claves ausentes toman el valor por defecto.
		"""

		def pick(snake: str, camel: str, default):
			if snake in record:
				return record[snake]
			return record.get(camel, default)

		work_hour_start = _to_int(pick("work_hour_start", "workHourStart", DEFAULT_WORK_HOUR_START), DEFAULT_WORK_HOUR_START)
		work_hour_end = _to_int(pick("work_hour_end", "workHourEnd", DEFAULT_WORK_HOUR_END), DEFAULT_WORK_HOUR_END)

		# Se conservan para que is_schedulable() devuelva False
		for name, hour in (("work_hour_start", work_hour_start), ("work_hour_end", work_hour_end)):
			if not _is_hour(hour):
				logger.warning("%s %r outside 0-24, settings cannot produce slots", name, hour)

		return cls(
			work_hour_start=work_hour_start,
			work_hour_end=work_hour_end,
			work_days=pick("work_days", "workDays", list(DEFAULT_WORK_DAYS)),
			buffer_minutes=max(0, _to_int(pick("buffer_minutes", "bufferMinutes", DEFAULT_BUFFER_MINUTES), DEFAULT_BUFFER_MINUTES)),
			selected_calendars=pick("selected_calendars", "selectedCalendars", []),
		)


def _is_int(value: Any) -> bool:
	return isinstance(value, int) and not isinstance(value, bool)


def _is_hour(value: Any) -> bool:
	return _is_int(value) and 0 <= value <= 24


def _to_int(value: Any, default: int) -> int:
	try:
		return int(value)
	except (TypeError, ValueError):
		logger.warning("Invalid integer setting %r, using %s", value, default)
		return default
