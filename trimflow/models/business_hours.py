from datetime import date, time
from enum import Enum
from typing import Optional
from sqlmodel import SQLModel, Field

from trimflow.models.common import new_id


class DayOfWeek(str, Enum):
    MONDAY = "MONDAY"
    TUESDAY = "TUESDAY"
    WEDNESDAY = "WEDNESDAY"
    THURSDAY = "THURSDAY"
    FRIDAY = "FRIDAY"
    SATURDAY = "SATURDAY"
    SUNDAY = "SUNDAY"

    @classmethod
    def from_date(cls, day: date) -> "DayOfWeek":
        # date.weekday(): 0=segunda ... 6=domingo
        return list(cls)[day.weekday()]


class BusinessHoursBase(SQLModel):
    is_open: bool = False
    open_time: Optional[time] = None
    close_time: Optional[time] = None


class BusinessHours(BusinessHoursBase, table=True):
    id: str = Field(default_factory=new_id, primary_key=True)
    barbershop_id: str = Field(foreign_key="barbershop.id", index=True)
    day_of_week: DayOfWeek = Field(index=True)


class BusinessHoursUpdate(BusinessHoursBase):
    pass


class BusinessHoursRead(BusinessHoursBase):
    id: Optional[str] = None
    barbershop_id: str
    day_of_week: DayOfWeek


class BusinessHoursFormDay(BusinessHoursBase):
    day_of_week: DayOfWeek
    # False = dia nunca salvo, horários são só sugestão do formulário
    configured: bool = False
