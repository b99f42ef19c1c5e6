"""
Date Utilities

Timezone-aware date arithmetic used by the scheduling services:
- Zone conversion (UTC <-> viewer timezone)
- Ceiling to half-hour boundaries
- Minute/day offsets and time-of-day setters
- Weekday extraction

All scheduling logic goes through these helpers so that no module does
ad hoc date math.
"""

import math
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Tuple, Union

import pytz


TimezoneLike = Union[str, tzinfo]


def get_timezone(tz: TimezoneLike) -> tzinfo:
	"""
	Resuelve un nombre IANA (o tzinfo) a un objeto tzinfo de pytz.

	Raises:
		pytz.UnknownTimeZoneError: si el nombre no existe
	"""
	if isinstance(tz, str):
		return pytz.timezone(tz)
	return tz


def now_utc() -> datetime:
	"""Instante actual en UTC (aware)."""
	return datetime.now(pytz.UTC)


def _ensure_aware(dt: datetime) -> datetime:
	# Naive datetimes se interpretan como UTC
	if dt.tzinfo is None:
		return pytz.UTC.localize(dt)
	return dt


def _localize(naive: datetime, tz: tzinfo) -> datetime:
	"""Asigna la zona a un datetime naive respetando DST."""
	if hasattr(tz, "localize"):
		return tz.localize(naive)
	return naive.replace(tzinfo=tz)


def _zone_of(dt: datetime) -> tzinfo:
	"""
	Devuelve la zona "completa" de un datetime.

	Con pytz, dt.tzinfo queda fijado a un offset concreto; para operar en
	wall-clock hay que recuperar la zona original por nombre.
	"""
	zone_name = getattr(dt.tzinfo, "zone", None)
	if zone_name:
		return pytz.timezone(zone_name)
	return dt.tzinfo


def _normalize(dt: datetime) -> datetime:
	if hasattr(dt.tzinfo, "normalize"):
		return dt.tzinfo.normalize(dt)
	return dt


def to_zoned_time(dt: datetime, tz: TimezoneLike) -> datetime:
	"""Convierte un instante a la hora local de `tz`."""
	return _ensure_aware(dt).astimezone(get_timezone(tz))


def to_utc(dt: datetime) -> datetime:
	"""Convierte un instante (aware o naive=UTC) a UTC."""
	return _ensure_aware(dt).astimezone(pytz.UTC)


def add_minutes(dt: datetime, minutes: int) -> datetime:
	"""Suma minutos absolutos (no wall-clock) conservando la zona."""
	return _normalize(_ensure_aware(dt) + timedelta(minutes=minutes))


def add_days(dt: datetime, days: int) -> datetime:
	"""Avanza `days` días de calendario manteniendo la hora local."""
	dt = _ensure_aware(dt)
	naive = dt.replace(tzinfo=None) + timedelta(days=days)
	return _localize(naive, _zone_of(dt))


def set_time_of_day(dt: datetime, hour: int, minute: int = 0) -> datetime:
	"""Mismo día local que `dt`, a la hora `hour:minute` (segundos en cero)."""
	dt = _ensure_aware(dt)
	naive = datetime.combine(dt.date(), time(hour, minute))
	return _localize(naive, _zone_of(dt))


def round_date_up(dt: datetime, interval_minutes: int = 30) -> datetime:
	"""
	Redondea hacia arriba al siguiente múltiplo de `interval_minutes`
	en hora local. Si ya está alineado, lo devuelve igual.

	`interval_minutes` debe dividir 60.
	"""
	dt = _ensure_aware(dt)
	naive = dt.replace(tzinfo=None)

	if naive.minute % interval_minutes == 0 and naive.second == 0 and naive.microsecond == 0:
		return dt

	remainder = naive.minute % interval_minutes
	naive = naive.replace(second=0, microsecond=0) + timedelta(minutes=interval_minutes - remainder)
	return _localize(naive, _zone_of(dt))


def get_day(dt: datetime) -> int:
	"""Día de la semana con 0 = domingo ... 6 = sábado."""
	return (dt.weekday() + 1) % 7


def difference_in_hours(later: datetime, earlier: datetime) -> int:
	"""Horas completas entre dos instantes, truncando hacia cero."""
	seconds = (_ensure_aware(later) - _ensure_aware(earlier)).total_seconds()
	return math.trunc(seconds / 3600)


def is_same_day(a: datetime, b: datetime) -> bool:
	"""Compara fechas de calendario (ambos ya en la misma zona local)."""
	return a.date() == b.date()


def local_day_bounds(target_date: date, tz: TimezoneLike) -> Tuple[datetime, datetime]:
	"""
	Obtiene los instantes UTC de inicio de `target_date` y del día siguiente
	en la zona `tz`.
	"""
	zone = get_timezone(tz)
	start = _localize(datetime.combine(target_date, time(0, 0)), zone)
	end = _localize(datetime.combine(target_date + timedelta(days=1), time(0, 0)), zone)
	return to_utc(start), to_utc(end)
