"""
Interval Algebra

Pure set operations over minute ranges inside a single UTC day:
- subtract_intervals: remove cutouts (blocks, appointments) from free time
- merge_intervals: coalesce overlapping or touching ranges
- clip_to_day: clamp a range to [0, 1440]

Intervals are dicts {"start": int, "end": int} with half-open semantics.
Nothing in this module touches the database.
"""

from typing import Dict, List, Iterable

MINUTES_PER_DAY = 24 * 60

Interval = Dict[str, int]


def clip_to_day(start: int, end: int) -> Interval:
	"""
	Recorta un rango a los límites del día [0, 1440].

	Un rango que empieza antes de 00:00 o termina después de 24:00
	se trunca en el borde, nunca se envuelve al día siguiente.
	"""
	return {
		"start": max(0, start),
		"end": min(MINUTES_PER_DAY, end)
	}


def merge_intervals(ranges: Iterable[Interval]) -> List[Interval]:
	"""
	Une intervalos adyacentes o overlapping.

	Args:
		ranges: intervalos {"start": int, "end": int}, en cualquier orden

	Returns:
		list: intervalos merged, ordenados por start. La entrada no se modifica.
	"""
	ordered = sorted(
		({"start": r["start"], "end": r["end"]} for r in ranges),
		key=lambda x: x["start"]
	)

	if not ordered:
		return []

	merged = [ordered[0]]

	for current in ordered[1:]:
		last_merged = merged[-1]

		# Si current se solapa o toca a last_merged, extender
		if current["start"] <= last_merged["end"]:
			if current["end"] > last_merged["end"]:
				last_merged["end"] = current["end"]
		else:
			merged.append(current)

	return merged


def _interval_subtract(interval: Interval, cutout: Interval) -> List[Interval]:
	"""
	Resta un recorte de un intervalo.

	Returns:
		list: 0, 1 o 2 fragmentos (la parte antes del recorte y la parte después)
	"""
	# Recorte vacío o sin intersección: se mantiene
	if cutout["end"] <= cutout["start"]:
		return [interval]

	if cutout["end"] <= interval["start"] or cutout["start"] >= interval["end"]:
		return [interval]

	fragments = []

	if cutout["start"] > interval["start"]:
		fragments.append({"start": interval["start"], "end": min(cutout["start"], interval["end"])})

	if cutout["end"] < interval["end"]:
		fragments.append({"start": max(cutout["end"], interval["start"]), "end": interval["end"]})

	return [f for f in fragments if f["end"] - f["start"] > 0]


def subtract_intervals(intervals: Iterable[Interval], cutouts: Iterable[Interval]) -> List[Interval]:
	"""
	Resta una lista de recortes de una lista de intervalos.

	Cada recorte se aplica sobre los fragmentos que sobrevivieron al anterior,
	así el resultado no depende del orden de los recortes.

	Args:
		intervals: intervalos libres
		cutouts: rangos ocupados

	Returns:
		list: fragmentos restantes con longitud > 0
	"""
	result = [{"start": i["start"], "end": i["end"]} for i in intervals]

	for cutout in cutouts:
		remaining = []
		for interval in result:
			remaining.extend(_interval_subtract(interval, cutout))
		result = remaining

	return [r for r in result if r["end"] - r["start"] > 0]
