from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Dict, Iterable, Optional

from trimflow.models.business_hours import BusinessHoursFormDay, DayOfWeek

# expediente mínimo de um dia aberto
MIN_OPEN_MINUTES = 60

# sugestão mostrada no formulário de configurações; nunca vale como horário real
FORM_DEFAULT_OPEN = time(9, 0)
FORM_DEFAULT_CLOSE = time(18, 0)


class BusinessHoursError(ValueError):
    pass


@dataclass(frozen=True)
class DaySchedule:
    is_open: bool
    open_time: Optional[time] = None
    close_time: Optional[time] = None

    @property
    def is_closed(self) -> bool:
        return not self.is_open

    def bounds(self, day: date):
        """Retorna (inicio, fim) do expediente como datetimes do dia."""
        if not self.is_open:
            return None
        return datetime.combine(day, self.open_time), datetime.combine(day, self.close_time)

    @property
    def minutes(self) -> int:
        if not self.is_open:
            return 0
        return _to_minutes(self.close_time) - _to_minutes(self.open_time)


CLOSED = DaySchedule(is_open=False)


def _to_minutes(value: time) -> int:
    return value.hour * 60 + value.minute


def daily_schedule(day: date, business_hours: Iterable) -> DaySchedule:
    """Horário do dia da semana de ``day``.

    Dia sem registro, com is_open=False ou sem os dois horários = fechado.
    Não existe horário padrão aqui.
    """
    weekday = DayOfWeek.from_date(day)
    for entry in business_hours:
        if DayOfWeek(entry.day_of_week) != weekday:
            continue
        if not entry.is_open or entry.open_time is None or entry.close_time is None:
            return CLOSED
        return DaySchedule(is_open=True, open_time=entry.open_time, close_time=entry.close_time)
    return CLOSED


def validate_business_hours(is_open: bool, open_time: Optional[time], close_time: Optional[time]) -> None:
    if not is_open:
        return

    if open_time is None or close_time is None:
        raise BusinessHoursError("open_time e close_time são obrigatórios quando is_open=true")

    if close_time <= open_time:
        raise BusinessHoursError("close_time deve ser maior que open_time")

    if _to_minutes(close_time) - _to_minutes(open_time) < MIN_OPEN_MINUTES:
        raise BusinessHoursError(f"O expediente deve ter pelo menos {MIN_OPEN_MINUTES} minutos")


def business_hours_form(business_hours: Iterable) -> Dict[DayOfWeek, BusinessHoursFormDay]:
    """Semana completa para o formulário de configurações.

    Dias nunca salvos aparecem fechados, com 09:00-18:00 pré-preenchido.
    """
    saved = {DayOfWeek(entry.day_of_week): entry for entry in business_hours}
    form: Dict[DayOfWeek, BusinessHoursFormDay] = {}

    for day in DayOfWeek:
        entry = saved.get(day)
        if entry is None:
            form[day] = BusinessHoursFormDay(
                day_of_week=day,
                is_open=False,
                open_time=FORM_DEFAULT_OPEN,
                close_time=FORM_DEFAULT_CLOSE,
                configured=False,
            )
        else:
            form[day] = BusinessHoursFormDay(
                day_of_week=day,
                is_open=entry.is_open,
                open_time=entry.open_time,
                close_time=entry.close_time,
                configured=True,
            )
    return form


def toggle_open(entry: BusinessHoursFormDay, is_open: bool) -> BusinessHoursFormDay:
    """Abrir um dia no formulário preenche horários vazios com a sugestão."""
    return entry.model_copy(
        update={
            "is_open": is_open,
            "open_time": (entry.open_time or FORM_DEFAULT_OPEN) if is_open else entry.open_time,
            "close_time": (entry.close_time or FORM_DEFAULT_CLOSE) if is_open else entry.close_time,
        }
    )
