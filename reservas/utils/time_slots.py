"""
Utilidades de aritmética horaria para la agenda.
Los horarios se manejan como minutos desde medianoche y los rangos son
semiabiertos: [inicio, fin).
"""

import re
from datetime import date, datetime, time, timedelta
from typing import Iterable, List, Optional, Tuple
from zoneinfo import ZoneInfo

MINUTES_PER_DAY = 24 * 60

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::\d{2})?$")


def parse_time_to_minutes(time_str: str) -> int:
    """
    Convierte un string de tiempo (H:MM, HH:MM o HH:MM:SS) a minutos desde medianoche.

    Args:
        time_str: String con la hora

    Returns:
        int: Minutos desde medianoche (0-1439), o -1 si el formato es inválido
    """
    if not isinstance(time_str, str):
        return -1
    match = _TIME_RE.match(time_str.strip())
    if not match:
        return -1
    hours = int(match.group(1))
    minutes = int(match.group(2))
    if hours > 23 or minutes > 59:
        return -1
    return hours * 60 + minutes


def minutes_to_time_string(minutes: int) -> str:
    hours = minutes // 60
    mins = minutes % 60
    return f"{hours:02d}:{mins:02d}"


def normalize_time_string(time_str: str) -> Optional[str]:
    """Normaliza "9:00" / "09:00:00" a "09:00". Devuelve None si es inválido."""
    minutes = parse_time_to_minutes(time_str)
    if minutes == -1:
        return None
    return minutes_to_time_string(minutes)


def time_to_minutes(value: time) -> int:
    return value.hour * 60 + value.minute


def block_end_minutes(value: time) -> int:
    # 23:59 cierra el día completo
    if value.hour == 23 and value.minute == 59:
        return MINUTES_PER_DAY
    return time_to_minutes(value)


def combine(target_date: date, minutes: int) -> datetime:
    return datetime.combine(target_date, time(0, 0)) + timedelta(minutes=minutes)


def local_now(timezone_name: Optional[str]) -> datetime:
    """Hora de pared actual en la zona de la barbería, sin tzinfo como los horarios guardados."""
    if not timezone_name:
        return datetime.now()
    return datetime.now(ZoneInfo(timezone_name)).replace(tzinfo=None)


def ranges_overlap(
    start_a: int, end_a: int, start_b: int, end_b: int
) -> bool:
    """Dos rangos [a) y [b) se solapan si cada uno empieza antes de que termine el otro."""
    return start_a < end_b and end_a > start_b


def overlaps_any(start: int, end: int, busy_ranges: Iterable[Tuple[int, int]]) -> bool:
    for busy_start, busy_end in busy_ranges:
        if ranges_overlap(start, end, busy_start, busy_end):
            return True
    return False


def merge_ranges(ranges: Iterable[Tuple[int, int]]) -> List[Tuple[int, int]]:
    merged: List[Tuple[int, int]] = []
    for start, end in sorted(ranges):
        if merged and start <= merged[-1][1]:
            merged[-1] = (merged[-1][0], max(merged[-1][1], end))
        else:
            merged.append((start, end))
    return merged
