"""
Time helpers for the scheduling engine.

All instants are UTC. They are stored as naive datetimes (Frappe Datetime
fields carry no tzinfo) and a day is always [00:00, 24:00) UTC.
"""

import math
import re
from datetime import date, datetime, time, timedelta
from typing import Dict, Tuple, Union

import pytz

from .intervals import MINUTES_PER_DAY, clip_to_day

WEEKDAY_KEYS = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")

_HHMM_RE = re.compile(r"^(\d{2}):(\d{2})$")
_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def weekday_key(target_date: date) -> str:
	"""Devuelve la clave canónica del día de la semana ("mon" ... "sun")."""
	return WEEKDAY_KEYS[target_date.weekday()]


def parse_date(value: Union[date, str]) -> date:
	"""
	Convierte YYYY-MM-DD (o un date/datetime) a date.

	Raises:
		ValueError: si el formato no es válido
	"""
	if isinstance(value, datetime):
		return value.date()
	if isinstance(value, date):
		return value

	value = str(value or "").strip()
	if not _DATE_RE.match(value):
		raise ValueError(f"Invalid date '{value}', expected YYYY-MM-DD")

	return datetime.strptime(value, "%Y-%m-%d").date()


def parse_utc_datetime(value: Union[datetime, str]) -> datetime:
	"""
	Convierte un timestamp ISO 8601 a datetime UTC naive.

	Acepta sufijo "Z" u offsets ("+01:00"); un valor sin offset se asume UTC.

	Raises:
		ValueError: si el valor no se puede interpretar
	"""
	if isinstance(value, datetime):
		parsed = value
	else:
		raw = str(value or "").strip()
		if not raw:
			raise ValueError("Empty timestamp")
		if raw.endswith("Z") or raw.endswith("z"):
			raw = raw[:-1] + "+00:00"
		parsed = datetime.fromisoformat(raw)

	if parsed.tzinfo is not None:
		parsed = parsed.astimezone(pytz.utc).replace(tzinfo=None)

	return parsed


def format_utc(value: datetime) -> str:
	"""Formatea un datetime UTC naive como 2025-11-17T09:00:00Z."""
	return value.strftime("%Y-%m-%dT%H:%M:%SZ")


def day_bounds(target_date: date) -> Tuple[datetime, datetime]:
	"""Devuelve (00:00 del día, 00:00 del día siguiente) en UTC naive."""
	day_start = datetime.combine(target_date, time.min)
	return day_start, day_start + timedelta(days=1)


def hhmm_to_minutes(value: Union[str, time, timedelta]) -> int:
	"""
	Convierte HH:MM a minutos desde medianoche.

	"24:00" es válido y representa el fin del día.

	Args:
		value: string HH:MM, time, o timedelta (desde medianoche)

	Raises:
		ValueError: si el valor no es una hora válida
	"""
	if isinstance(value, timedelta):
		minutes = int(value.total_seconds() // 60)
	elif isinstance(value, time):
		minutes = value.hour * 60 + value.minute
	else:
		match = _HHMM_RE.match(str(value or "").strip())
		if not match:
			raise ValueError(f"Invalid time '{value}', expected HH:MM")
		hours, mins = int(match.group(1)), int(match.group(2))
		if mins > 59:
			raise ValueError(f"Invalid time '{value}', expected HH:MM")
		minutes = hours * 60 + mins

	if minutes < 0 or minutes > MINUTES_PER_DAY:
		raise ValueError(f"Time '{value}' is outside 00:00-24:00")

	return minutes


def minutes_to_hhmm(minutes: int) -> str:
	"""Convierte minutos desde medianoche a HH:MM con ceros a la izquierda."""
	return f"{minutes // 60:02d}:{minutes % 60:02d}"


def instant_range_to_minutes(start: datetime, end: datetime, day_start: datetime) -> Dict[str, int]:
	"""
	Convierte un rango de instantes a minutos relativos al día.

	El inicio se redondea hacia abajo y el fin hacia arriba al minuto,
	luego se recorta a [0, 1440].
	"""
	start_min = math.floor((start - day_start).total_seconds() / 60)
	end_min = math.ceil((end - day_start).total_seconds() / 60)
	return clip_to_day(start_min, end_min)


def minutes_to_datetime(day_start: datetime, minutes: int) -> datetime:
	return day_start + timedelta(minutes=minutes)
