from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session, select

from trimflow.database import get_session
from trimflow.models.service import Service, ServiceCreate, ServiceRead, ServiceUpdate
from trimflow.models.user import User
from trimflow.core.security import get_barbershop_id, get_current_owner


router = APIRouter(
    prefix="/services",
    tags=["services"]
)


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=ServiceRead)
def create_service(
    payload: ServiceCreate,
    session: Session = Depends(get_session),
    current_owner: User = Depends(get_current_owner),
):
    service = Service(**payload.model_dump(), barbershop_id=current_owner.barbershop_id)

    session.add(service)
    session.commit()
    session.refresh(service)

    return service


@router.get("/", response_model=List[ServiceRead])
def list_services(
    active_only: bool = False,
    barbershop_id: str = Depends(get_barbershop_id),
    session: Session = Depends(get_session),
):
    query = select(Service).where(Service.barbershop_id == barbershop_id)
    if active_only:
        query = query.where(Service.is_active == True)  # noqa: E712

    services = session.exec(query).all()

    return services


@router.put("/{service_id}", response_model=ServiceRead)
def update_service(
    service_id: str,
    payload: ServiceUpdate,
    session: Session = Depends(get_session),
    current_owner: User = Depends(get_current_owner),
):
    service = session.get(Service, service_id)
    if not service or service.barbershop_id != current_owner.barbershop_id:
        raise HTTPException(status_code=404, detail="Serviço não encontrado")

    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(service, field, value)

    session.add(service)
    session.commit()
    session.refresh(service)
    return service
