import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session, select

from trimflow.database import get_session
from trimflow.models.barbershop import Barbershop, BarbershopRead, RegisterRequest, RegisterResponse
from trimflow.models.user import User
from trimflow.core.security import get_password_hash

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/barbershops", tags=["barbershops"])


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=RegisterResponse)
def register(payload: RegisterRequest, session: Session = Depends(get_session)):
    email = payload.email.strip().lower()

    existing_user = session.exec(
        select(User).where(User.email == email)
    ).first()

    if existing_user:
        raise HTTPException(status_code=400, detail="Email já cadastrado")

    shop = Barbershop(
        name=payload.barbershop_name,
        email=email,
        phone=payload.phone,
        address=payload.address,
    )
    session.add(shop)
    session.flush()

    owner = User(
        email=email,
        first_name=payload.first_name,
        last_name=payload.last_name,
        role="OWNER",
        barbershop_id=shop.id,
        password_hash=get_password_hash(payload.password),
    )
    session.add(owner)
    session.commit()

    logger.info(f"Barbershop {shop.id} registered by {owner.email}")

    return RegisterResponse(
        user_id=owner.id,
        barbershop_id=shop.id,
        email=owner.email,
        message="Barbearia criada com sucesso",
    )


@router.get("/{barbershop_id}", response_model=BarbershopRead)
def get_barbershop(barbershop_id: str, session: Session = Depends(get_session)):
    shop = session.get(Barbershop, barbershop_id)
    if not shop:
        raise HTTPException(status_code=404, detail="Barbearia não encontrada")
    return shop
