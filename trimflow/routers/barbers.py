from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session, select

from trimflow.database import get_session
from trimflow.models.barber import Barber, BarberCreate, BarberRead, BarberUpdate
from trimflow.models.user import User
from trimflow.core.security import get_barbershop_id, get_current_owner


router = APIRouter(prefix="/barbers", tags=["barbers"])


@router.get("/", response_model=List[BarberRead])
def list_barbers(
    active_only: bool = False,
    barbershop_id: str = Depends(get_barbershop_id),
    session: Session = Depends(get_session),
):
    query = select(Barber).where(Barber.barbershop_id == barbershop_id)
    if active_only:
        query = query.where(Barber.is_active == True)  # noqa: E712
    return session.exec(query).all()


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=BarberRead)
def create_barber(
    payload: BarberCreate,
    session: Session = Depends(get_session),
    current_owner: User = Depends(get_current_owner),
):
    # força ownership
    barber = Barber(**payload.model_dump(), barbershop_id=current_owner.barbershop_id)

    session.add(barber)
    session.commit()
    session.refresh(barber)
    return barber


@router.put("/{barber_id}", response_model=BarberRead)
def update_barber(
    barber_id: str,
    payload: BarberUpdate,
    session: Session = Depends(get_session),
    current_owner: User = Depends(get_current_owner),
):
    barber = session.get(Barber, barber_id)
    if not barber or barber.barbershop_id != current_owner.barbershop_id:
        raise HTTPException(status_code=404, detail="Barbeiro não encontrado")

    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(barber, field, value)

    session.add(barber)
    session.commit()
    session.refresh(barber)
    return barber
