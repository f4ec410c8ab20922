from datetime import datetime
from typing import Dict, Optional, Tuple

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func, or_
from sqlmodel import Session, select

from trimflow.database import get_session
from trimflow.models.appointment import Appointment, AppointmentRead
from trimflow.models.common import Page
from trimflow.models.customer import Customer, CustomerRead
from trimflow.models.user import User
from trimflow.core.security import get_current_owner
from trimflow.routers.appointments import to_read


router = APIRouter(prefix="/customers", tags=["customers"])


def _check_paging(page: int, size: int) -> None:
    if page < 0 or size <= 0:
        raise HTTPException(status_code=400, detail="Paginação inválida")


def _get_owned(session: Session, customer_id: str, barbershop_id: str) -> Customer:
    customer = session.get(Customer, customer_id)
    if not customer or customer.barbershop_id != barbershop_id:
        raise HTTPException(status_code=404, detail="Cliente não encontrado")
    return customer


def _visit_stats(session: Session, customer_ids) -> Dict[str, Tuple[int, Optional[datetime]]]:
    """customer_id -> (quantidade de agendamentos, último agendamento)."""
    if not customer_ids:
        return {}
    rows = session.exec(
        select(
            Appointment.customer_id,
            func.count(Appointment.id),
            func.max(Appointment.appointment_date_time),
        )
        .where(Appointment.customer_id.in_(customer_ids))
        .group_by(Appointment.customer_id)
    ).all()
    return {cid: (count, last) for cid, count, last in rows}


def _with_stats(customer: Customer, stats) -> CustomerRead:
    count, last = stats.get(customer.id, (0, None))
    return CustomerRead(
        **customer.model_dump(),
        total_appointments=count,
        last_appointment_at=last,
    )


# =========================
# LISTAR CLIENTES (DONO)
# GET /customers/?search=ana&page=0&size=10
# =========================
@router.get("/", response_model=Page[CustomerRead])
def list_customers(
    search: Optional[str] = None,
    page: int = 0,
    size: int = 10,
    session: Session = Depends(get_session),
    current_owner: User = Depends(get_current_owner),
):
    _check_paging(page, size)

    conditions = [Customer.barbershop_id == current_owner.barbershop_id]
    if search and search.strip():
        term = f"%{search.strip().lower()}%"
        conditions.append(
            or_(
                func.lower(Customer.name).like(term),
                Customer.email.like(term),
                Customer.phone.like(term),
            )
        )

    total = session.exec(select(func.count()).select_from(Customer).where(*conditions)).one()
    customers = session.exec(
        select(Customer)
        .where(*conditions)
        .order_by(Customer.name)
        .offset(page * size)
        .limit(size)
    ).all()

    stats = _visit_stats(session, [c.id for c in customers])
    return Page[CustomerRead].build([_with_stats(c, stats) for c in customers], page, size, total)


@router.get("/{customer_id}", response_model=CustomerRead)
def get_customer(
    customer_id: str,
    session: Session = Depends(get_session),
    current_owner: User = Depends(get_current_owner),
):
    customer = _get_owned(session, customer_id, current_owner.barbershop_id)
    return _with_stats(customer, _visit_stats(session, [customer.id]))


# =========================
# HISTÓRICO DO CLIENTE (mais recentes primeiro)
# =========================
@router.get("/{customer_id}/appointments", response_model=Page[AppointmentRead])
def customer_appointments(
    customer_id: str,
    page: int = 0,
    size: int = 10,
    session: Session = Depends(get_session),
    current_owner: User = Depends(get_current_owner),
):
    _check_paging(page, size)
    customer = _get_owned(session, customer_id, current_owner.barbershop_id)

    condition = Appointment.customer_id == customer.id
    total = session.exec(select(func.count()).select_from(Appointment).where(condition)).one()
    appts = session.exec(
        select(Appointment)
        .where(condition)
        .order_by(Appointment.appointment_date_time.desc())
        .offset(page * size)
        .limit(size)
    ).all()

    return Page[AppointmentRead].build([to_read(session, a) for a in appts], page, size, total)
