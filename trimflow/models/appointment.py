from typing import Optional
from datetime import date, datetime
from enum import Enum
from sqlmodel import SQLModel, Field

from trimflow.models.common import new_id


class AppointmentStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    NO_SHOW = "NO_SHOW"


class AppointmentBase(SQLModel):
    barber_id: str = Field(foreign_key="barber.id", index=True)
    service_id: str = Field(foreign_key="service.id", index=True)

    # início; o fim vem da duração do serviço
    appointment_date_time: datetime = Field(index=True)

    customer_name: str
    customer_email: str
    customer_phone: Optional[str] = None
    notes: Optional[str] = None


class Appointment(AppointmentBase, table=True):
    id: str = Field(default_factory=new_id, primary_key=True)
    barbershop_id: str = Field(foreign_key="barbershop.id", index=True)
    customer_id: Optional[str] = Field(default=None, foreign_key="customer.id", index=True)

    status: AppointmentStatus = Field(default=AppointmentStatus.PENDING, index=True)

    created_at: datetime = Field(default_factory=datetime.utcnow, index=True)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class AppointmentCreate(AppointmentBase):
    pass


class AppointmentUpdate(SQLModel):
    appointment_date_time: Optional[datetime] = None
    status: Optional[AppointmentStatus] = None
    notes: Optional[str] = None
    customer_phone: Optional[str] = None


class AppointmentRead(AppointmentBase):
    id: str
    barbershop_id: str
    customer_id: Optional[str] = None
    status: AppointmentStatus = AppointmentStatus.PENDING
    end_date_time: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def day(self) -> date:
        return self.appointment_date_time.date()


class AppointmentFilters(SQLModel):
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    barber_id: Optional[str] = None
    status: Optional[AppointmentStatus] = None
    page: int = 0
    size: int = 20
