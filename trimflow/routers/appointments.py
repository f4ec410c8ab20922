import logging
from datetime import date, datetime, time, timedelta
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func
from sqlmodel import Session, select

from trimflow.config import SLOT_STEP_MINUTES
from trimflow.database import get_session
from trimflow.models.appointment import (
    Appointment,
    AppointmentCreate,
    AppointmentRead,
    AppointmentStatus,
    AppointmentUpdate,
)
from trimflow.models.barber import Barber
from trimflow.models.business_hours import BusinessHours
from trimflow.models.common import Page
from trimflow.models.customer import Customer
from trimflow.models.service import Service
from trimflow.models.user import User
from trimflow.core.security import get_barbershop_id, get_current_owner
from trimflow.live.broadcaster import broadcaster
from trimflow.scheduling.availability import available_slots, conflicts, fits_schedule
from trimflow.scheduling.hours import DaySchedule, daily_schedule
from trimflow.scheduling.status import can_transition, is_terminal

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/appointments", tags=["appointments"])


def get_now() -> datetime:
    """Relógio da barbearia (horário local, sem fuso)."""
    return datetime.now()


def _business_hours(session: Session, barbershop_id: str) -> List[BusinessHours]:
    return session.exec(
        select(BusinessHours).where(BusinessHours.barbershop_id == barbershop_id)
    ).all()


def _schedule_for(session: Session, barbershop_id: str, day: date) -> DaySchedule:
    return daily_schedule(day, _business_hours(session, barbershop_id))


def _build_busy_intervals_for_day(
    session: Session,
    barber_id: str,
    day: date,
    exclude_id: Optional[str] = None,
):
    """Intervalos ocupados do barbeiro no dia (ignora cancelados)."""
    day_start = datetime.combine(day, time(0, 0))
    day_end = day_start + timedelta(days=1)

    rows = session.exec(
        select(Appointment, Service)
        .join(Service, Service.id == Appointment.service_id)
        .where(
            Appointment.barber_id == barber_id,
            Appointment.appointment_date_time >= day_start,
            Appointment.appointment_date_time < day_end,
            Appointment.status != AppointmentStatus.CANCELLED,
        )
    ).all()

    busy = []
    for appt, appt_service in rows:
        if appt.id == exclude_id:
            continue
        start = appt.appointment_date_time
        busy.append((start, start + timedelta(minutes=appt_service.duration_minutes)))
    return busy


def _check_slot(
    session: Session,
    barbershop_id: str,
    barber_id: str,
    start: datetime,
    duration_minutes: int,
    exclude_id: Optional[str] = None,
) -> None:
    end = start + timedelta(minutes=duration_minutes)

    schedule = _schedule_for(session, barbershop_id, start.date())
    if schedule.is_closed:
        raise HTTPException(
            status_code=400,
            detail="Barbearia fechada ou sem horário configurado para esse dia",
        )

    if not fits_schedule(start, end, schedule):
        raise HTTPException(status_code=400, detail="Fora do horário de funcionamento")

    busy = _build_busy_intervals_for_day(session, barber_id, start.date(), exclude_id=exclude_id)
    if conflicts(start, end, busy):
        raise HTTPException(status_code=400, detail="Horário indisponível")


def _upsert_customer(session: Session, barbershop_id: str, payload: AppointmentCreate) -> Customer:
    """Cliente da barbearia pelo email; nome e telefone ficam com os dados da reserva mais recente."""
    email = payload.customer_email.strip().lower()
    customer = session.exec(
        select(Customer).where(Customer.barbershop_id == barbershop_id, Customer.email == email)
    ).first()

    if customer is None:
        customer = Customer(barbershop_id=barbershop_id, email=email, name=payload.customer_name.strip())
    else:
        customer.name = payload.customer_name.strip()
        customer.updated_at = datetime.utcnow()

    if payload.customer_phone:
        customer.phone = payload.customer_phone

    session.add(customer)
    session.flush()
    return customer


def to_read(session: Session, appt: Appointment) -> AppointmentRead:
    read = AppointmentRead.model_validate(appt)
    service = session.get(Service, appt.service_id)
    if service:
        read.end_date_time = appt.appointment_date_time + timedelta(minutes=service.duration_minutes)
    return read


def _get_owned(session: Session, appointment_id: str, barbershop_id: str) -> Appointment:
    appt = session.get(Appointment, appointment_id)
    if not appt or appt.barbershop_id != barbershop_id:
        raise HTTPException(status_code=404, detail="Agendamento não encontrado")
    return appt


def _save_and_publish(session: Session, appt: Appointment) -> AppointmentRead:
    appt.updated_at = datetime.utcnow()
    session.add(appt)
    session.commit()
    session.refresh(appt)

    read = to_read(session, appt)
    broadcaster.publish(appt.barbershop_id, read)
    return read


# =========================
# HORÁRIOS DISPONÍVEIS
# GET /appointments/availability?barber_id=...&date=2025-03-10&service_duration=30
# =========================
@router.get("/availability", response_model=List[str])
def get_available_slots(
    barber_id: str,
    date: date,
    service_duration: int,
    session: Session = Depends(get_session),
    now: datetime = Depends(get_now),
):
    barber = session.get(Barber, barber_id)
    if not barber or not barber.is_active:
        raise HTTPException(status_code=404, detail="Barbeiro não encontrado ou inativo")

    if service_duration <= 0:
        raise HTTPException(status_code=400, detail="service_duration deve ser positivo")

    schedule = _schedule_for(session, barber.barbershop_id, date)
    busy = _build_busy_intervals_for_day(session, barber_id, date)

    slots = available_slots(
        date,
        schedule,
        timedelta(minutes=service_duration),
        busy,
        timedelta(minutes=SLOT_STEP_MINUTES),
        not_before=now,
    )
    return [slot.isoformat() for slot in slots]


# =========================
# CRIAR AGENDAMENTO (PÚBLICO / WIZARD)
# =========================
@router.post("/", status_code=status.HTTP_201_CREATED, response_model=AppointmentRead)
def create_appointment(
    payload: AppointmentCreate,
    barbershop_id: str = Depends(get_barbershop_id),
    session: Session = Depends(get_session),
    now: datetime = Depends(get_now),
):
    if payload.appointment_date_time < now:
        raise HTTPException(status_code=400, detail="Não é possível agendar no passado")

    barber = session.get(Barber, payload.barber_id)
    if not barber or barber.barbershop_id != barbershop_id or not barber.is_active:
        raise HTTPException(status_code=404, detail="Barbeiro não encontrado ou inativo")

    service = session.get(Service, payload.service_id)
    if not service or service.barbershop_id != barbershop_id or not service.is_active:
        raise HTTPException(status_code=404, detail="Serviço não encontrado ou inativo")

    _check_slot(
        session,
        barbershop_id,
        barber.id,
        payload.appointment_date_time,
        service.duration_minutes,
    )

    customer = _upsert_customer(session, barbershop_id, payload)

    # status inicial
    appt = Appointment(
        **payload.model_dump(),
        barbershop_id=barbershop_id,
        customer_id=customer.id,
        status=AppointmentStatus.PENDING,
    )

    read = _save_and_publish(session, appt)
    logger.info(f"Appointment {appt.id} created for barber {barber.id} at {appt.appointment_date_time}")
    return read


# =========================
# LISTAR AGENDAMENTOS (DONO)
# =========================
@router.get("/", response_model=Page[AppointmentRead])
def list_appointments(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    barber_id: Optional[str] = None,
    status: Optional[AppointmentStatus] = None,
    page: int = 0,
    size: int = 20,
    session: Session = Depends(get_session),
    current_owner: User = Depends(get_current_owner),
):
    if page < 0 or size <= 0:
        raise HTTPException(status_code=400, detail="Paginação inválida")

    conditions = [Appointment.barbershop_id == current_owner.barbershop_id]
    if start_date:
        conditions.append(Appointment.appointment_date_time >= datetime.combine(start_date, time(0, 0)))
    if end_date:
        conditions.append(
            Appointment.appointment_date_time < datetime.combine(end_date + timedelta(days=1), time(0, 0))
        )
    if barber_id:
        conditions.append(Appointment.barber_id == barber_id)
    if status:
        conditions.append(Appointment.status == status)

    total = session.exec(select(func.count()).select_from(Appointment).where(*conditions)).one()

    appts = session.exec(
        select(Appointment)
        .where(*conditions)
        .order_by(Appointment.appointment_date_time)
        .offset(page * size)
        .limit(size)
    ).all()

    return Page[AppointmentRead].build([to_read(session, a) for a in appts], page, size, total)


@router.get("/{appointment_id}", response_model=AppointmentRead)
def get_appointment(
    appointment_id: str,
    session: Session = Depends(get_session),
    current_owner: User = Depends(get_current_owner),
):
    return to_read(session, _get_owned(session, appointment_id, current_owner.barbershop_id))


# =========================
# ATUALIZAR (status / remarcação)
# =========================
@router.put("/{appointment_id}", response_model=AppointmentRead)
def update_appointment(
    appointment_id: str,
    payload: AppointmentUpdate,
    session: Session = Depends(get_session),
    current_owner: User = Depends(get_current_owner),
):
    appt = _get_owned(session, appointment_id, current_owner.barbershop_id)

    if payload.status is not None and payload.status != appt.status:
        if not can_transition(appt.status, payload.status):
            raise HTTPException(
                status_code=400,
                detail=f"Não é possível mudar de {appt.status.value} para {payload.status.value}",
            )

    if payload.appointment_date_time is not None and payload.appointment_date_time != appt.appointment_date_time:
        if is_terminal(appt.status):
            raise HTTPException(status_code=400, detail="Não é possível remarcar nesse status")

        service = session.get(Service, appt.service_id)
        _check_slot(
            session,
            appt.barbershop_id,
            appt.barber_id,
            payload.appointment_date_time,
            service.duration_minutes if service else 0,
            exclude_id=appt.id,
        )
        appt.appointment_date_time = payload.appointment_date_time

    if payload.status is not None:
        appt.status = payload.status
    if payload.notes is not None:
        appt.notes = payload.notes
    if payload.customer_phone is not None:
        appt.customer_phone = payload.customer_phone

    read = _save_and_publish(session, appt)
    logger.info(f"Appointment {appt.id} updated (status={appt.status.value})")
    return read


# =========================
# CANCELAR
# =========================
@router.delete("/{appointment_id}", response_model=AppointmentRead)
def cancel_appointment(
    appointment_id: str,
    session: Session = Depends(get_session),
    current_owner: User = Depends(get_current_owner),
):
    appt = _get_owned(session, appointment_id, current_owner.barbershop_id)

    if appt.status == AppointmentStatus.CANCELLED:
        return to_read(session, appt)

    if not can_transition(appt.status, AppointmentStatus.CANCELLED):
        raise HTTPException(status_code=400, detail="Não é possível cancelar nesse status")

    appt.status = AppointmentStatus.CANCELLED
    read = _save_and_publish(session, appt)
    logger.info(f"Appointment {appt.id} cancelled")
    return read
