from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from trimflow.database import get_session
from trimflow.models.business_hours import (
    BusinessHours,
    BusinessHoursFormDay,
    BusinessHoursRead,
    BusinessHoursUpdate,
    DayOfWeek,
)
from trimflow.models.user import User
from trimflow.core.security import get_barbershop_id, get_current_owner
from trimflow.scheduling.hours import BusinessHoursError, business_hours_form, validate_business_hours

router = APIRouter(prefix="/business-hours", tags=["business-hours"])


@router.get("/", response_model=List[BusinessHoursRead])
def list_business_hours(
    barbershop_id: str = Depends(get_barbershop_id),
    session: Session = Depends(get_session),
):
    return session.exec(
        select(BusinessHours).where(BusinessHours.barbershop_id == barbershop_id)
    ).all()


@router.get("/week", response_model=List[BusinessHoursFormDay])
def business_hours_week(
    session: Session = Depends(get_session),
    current_owner: User = Depends(get_current_owner),
):
    """Semana inteira para a tela de configurações (dias não salvos vêm com sugestão 09:00-18:00)."""
    saved = session.exec(
        select(BusinessHours).where(BusinessHours.barbershop_id == current_owner.barbershop_id)
    ).all()
    return list(business_hours_form(saved).values())


@router.put("/{day_of_week}", response_model=BusinessHoursRead)
def upsert_business_hours(
    day_of_week: DayOfWeek,
    payload: BusinessHoursUpdate,
    session: Session = Depends(get_session),
    current_owner: User = Depends(get_current_owner),
):
    try:
        validate_business_hours(payload.is_open, payload.open_time, payload.close_time)
    except BusinessHoursError as e:
        raise HTTPException(status_code=400, detail=str(e))

    existing = session.exec(
        select(BusinessHours).where(
            BusinessHours.barbershop_id == current_owner.barbershop_id,
            BusinessHours.day_of_week == day_of_week,
        )
    ).first()

    if existing:
        existing.is_open = payload.is_open
        existing.open_time = payload.open_time
        existing.close_time = payload.close_time
        session.add(existing)
        session.commit()
        session.refresh(existing)
        return existing

    new = BusinessHours(
        barbershop_id=current_owner.barbershop_id,
        day_of_week=day_of_week,
        is_open=payload.is_open,
        open_time=payload.open_time,
        close_time=payload.close_time,
    )
    session.add(new)
    session.commit()
    session.refresh(new)
    return new
