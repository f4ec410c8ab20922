from collections import Counter
from datetime import date, datetime, time, timedelta
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends
from sqlmodel import Session, select

from trimflow.database import get_session
from trimflow.core.security import get_current_owner
from trimflow.models.appointment import Appointment, AppointmentStatus
from trimflow.models.business_hours import BusinessHours
from trimflow.models.dashboard import DashboardSummary, TopService
from trimflow.models.service import Service
from trimflow.models.user import User
from trimflow.scheduling.hours import daily_schedule


router = APIRouter(prefix="/dashboard", tags=["dashboard"])

TOP_SERVICES_LIMIT = 5


def _top_services(appts: List[Appointment], services: Dict[str, Service]) -> List[TopService]:
    counter = Counter(a.service_id for a in appts)
    return [
        TopService(service_id=sid, name=services[sid].name, count=qty)
        for sid, qty in counter.most_common(TOP_SERVICES_LIMIT)
        if sid in services
    ]


# =========================
# RESUMO DO DIA
# GET /dashboard/summary?day=2025-03-10[&barber_id=...]
# =========================
@router.get("/summary", response_model=DashboardSummary)
def dashboard_summary(
    day: date,
    barber_id: Optional[str] = None,
    session: Session = Depends(get_session),
    current_owner: User = Depends(get_current_owner),
):
    barbershop_id = current_owner.barbershop_id
    start = datetime.combine(day, time(0, 0))

    query = select(Appointment).where(
        Appointment.barbershop_id == barbershop_id,
        Appointment.appointment_date_time >= start,
        Appointment.appointment_date_time < start + timedelta(days=1),
    )
    if barber_id:
        query = query.where(Appointment.barber_id == barber_id)
    appts = session.exec(query).all()

    service_ids = {a.service_id for a in appts}
    services = {
        s.id: s for s in session.exec(select(Service).where(Service.id.in_(service_ids))).all()
    }

    # receita e minutos: só concluídos
    completed = [
        services[a.service_id]
        for a in appts
        if a.status == AppointmentStatus.COMPLETED and a.service_id in services
    ]
    revenue = sum(float(s.price) for s in completed)
    minutes_completed = sum(s.duration_minutes for s in completed)

    schedule = daily_schedule(
        day,
        session.exec(select(BusinessHours).where(BusinessHours.barbershop_id == barbershop_id)).all(),
    )
    capacity = schedule.minutes if schedule.is_open else None
    occupancy = round(minutes_completed / capacity * 100, 2) if capacity else None

    return DashboardSummary(
        day=day,
        barbershop_id=barbershop_id,
        barber_id=barber_id,
        is_open=schedule.is_open,
        total_appointments=len(appts),
        status=dict(Counter(a.status.value for a in appts)),
        revenue_completed=round(revenue, 2),
        minutes_completed=minutes_completed,
        capacity_minutes=capacity,
        occupancy_percent=occupancy,
        top_services=_top_services(appts, services),
    )
