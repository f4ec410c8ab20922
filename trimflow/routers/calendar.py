import datetime as dt
from datetime import date, datetime, time, timedelta
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlmodel import Session, select

from trimflow.database import get_session
from trimflow.models.appointment import Appointment, AppointmentRead, AppointmentStatus
from trimflow.models.user import User
from trimflow.core.security import get_current_owner
from trimflow.routers.appointments import to_read
from trimflow.scheduling.grid import build_month_grid, grid_range


router = APIRouter(prefix="/calendar", tags=["calendar"])


class CalendarDayRead(BaseModel):
    date: dt.date
    in_current_month: bool
    is_today: bool
    appointments: List[AppointmentRead]


@router.get("/month", response_model=List[CalendarDayRead])
def month_calendar(
    year: int,
    month: int,
    barber_id: Optional[str] = None,
    status: Optional[AppointmentStatus] = None,
    session: Session = Depends(get_session),
    current_owner: User = Depends(get_current_owner),
):
    if not 1 <= month <= 12:
        raise HTTPException(status_code=400, detail="month deve ser 1..12")

    reference = date(year, month, 1)
    start, end = grid_range(reference)

    query = select(Appointment).where(
        Appointment.barbershop_id == current_owner.barbershop_id,
        Appointment.appointment_date_time >= datetime.combine(start, time(0, 0)),
        Appointment.appointment_date_time < datetime.combine(end + timedelta(days=1), time(0, 0)),
    )
    if barber_id:
        query = query.where(Appointment.barber_id == barber_id)
    if status:
        query = query.where(Appointment.status == status)

    appts = [to_read(session, a) for a in session.exec(query).all()]
    return [
        CalendarDayRead(
            date=cell.date,
            in_current_month=cell.in_current_month,
            is_today=cell.is_today,
            appointments=cell.appointments,
        )
        for cell in build_month_grid(reference, appts)
    ]
