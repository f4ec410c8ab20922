from datetime import date, datetime, timedelta
from typing import List, Optional, Tuple

from trimflow.scheduling.hours import DaySchedule

Interval = Tuple[datetime, datetime]


def overlaps(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    """Retorna True se [a_start, a_end) sobrepõe [b_start, b_end)."""
    return a_start < b_end and a_end > b_start


def conflicts(start: datetime, end: datetime, busy: List[Interval]) -> bool:
    return any(overlaps(start, end, b_start, b_end) for b_start, b_end in busy)


def fits_schedule(start: datetime, end: datetime, schedule: DaySchedule) -> bool:
    bounds = schedule.bounds(start.date())
    if bounds is None:
        return False
    day_start, day_end = bounds
    return day_start <= start and end <= day_end


def available_slots(
    day: date,
    schedule: DaySchedule,
    duration: timedelta,
    busy: List[Interval],
    step: timedelta,
    not_before: Optional[datetime] = None,
) -> List[datetime]:
    """Inícios livres do dia: de open_time em passos de ``step`` enquanto o serviço cabe até close_time.

    Com ``not_before`` (agora), horários que já passaram ficam de fora.
    """
    bounds = schedule.bounds(day)
    if bounds is None:
        return []

    day_start, day_end = bounds
    slots: List[datetime] = []
    current = day_start

    while current + duration <= day_end:
        if not_before is not None and current < not_before:
            current += step
            continue
        if not conflicts(current, current + duration, busy):
            slots.append(current)
        current += step

    return slots
