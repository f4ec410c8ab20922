"""Calendar grid construction for the dashboard month and week views."""

import calendar
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Tuple


@dataclass
class CalendarDay:
    date: date
    in_current_month: bool
    is_today: bool
    appointments: List = field(default_factory=list)


def month_bounds(reference: date) -> Tuple[date, date]:
    first = reference.replace(day=1)
    last_day = calendar.monthrange(reference.year, reference.month)[1]
    return first, reference.replace(day=last_day)


def grid_range(reference: date) -> Tuple[date, date]:
    """Primeira e última célula do grid: segunda antes do dia 1, domingo depois do último dia."""
    first, last = month_bounds(reference)
    start = first - timedelta(days=first.weekday())
    end = last + timedelta(days=6 - last.weekday())
    return start, end


def week_dates(reference: date) -> List[date]:
    monday = reference - timedelta(days=reference.weekday())
    return [monday + timedelta(days=i) for i in range(7)]


def bucket_by_day(appointments: Iterable) -> Dict[date, List]:
    """Agrupa por data de início, cada dia ordenado por horário."""
    buckets: Dict[date, List] = defaultdict(list)
    for appt in appointments:
        buckets[appt.appointment_date_time.date()].append(appt)
    for items in buckets.values():
        items.sort(key=lambda a: a.appointment_date_time)
    return buckets


def _build_cells(days: Iterable[date], reference: date, appointments: Iterable, today: date) -> List[CalendarDay]:
    buckets = bucket_by_day(appointments)
    return [
        CalendarDay(
            date=d,
            in_current_month=(d.year, d.month) == (reference.year, reference.month),
            is_today=d == today,
            appointments=buckets.get(d, []),
        )
        for d in days
    ]


def build_month_grid(reference: date, appointments: Iterable, today: Optional[date] = None) -> List[CalendarDay]:
    """
    Build the month grid for the month containing ``reference``.

    The grid always starts on a Monday and ends on a Sunday, padding with days
    from the neighbouring months. Each cell carries the appointments starting
    on that date, sorted by start time.
    """
    start, end = grid_range(reference)
    days = [start + timedelta(days=i) for i in range((end - start).days + 1)]
    return _build_cells(days, reference, appointments, today or date.today())


def build_week_grid(reference: date, appointments: Iterable, today: Optional[date] = None) -> List[CalendarDay]:
    return _build_cells(week_dates(reference), reference, appointments, today or date.today())
