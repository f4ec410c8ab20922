import logging
from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlmodel import Session, select

from trimflow.config import ACCESS_TOKEN_EXPIRE_MINUTES
from trimflow.database import get_session
from trimflow.models.user import LoginResponse, User, UserRead
from trimflow.core.security import create_access_token, get_current_user, verify_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


# =========================
# LOGIN DO DONO
# =========================
@router.post("/login", response_model=LoginResponse)
def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    session: Session = Depends(get_session),
):
    user = session.exec(
        select(User).where(User.email == form_data.username.strip().lower())
    ).first()

    if not user or not verify_password(form_data.password, user.password_hash):
        logger.warning(f"Failed login for {form_data.username}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Email ou senha inválidos",
            headers={"WWW-Authenticate": "Bearer"},
        )

    # barbearia e papel vão no token só como informação; a autorização relê o usuário
    expires = timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    access_token = create_access_token(
        data={"sub": user.email, "barbershop_id": user.barbershop_id, "role": user.role},
        expires_delta=expires,
    )

    logger.info(f"User {user.id} logged in for barbershop {user.barbershop_id}")
    return LoginResponse(
        access_token=access_token,
        user_id=user.id,
        barbershop_id=user.barbershop_id,
        expires_in=int(expires.total_seconds()),
    )


@router.get("/me", response_model=UserRead)
def me(current_user: User = Depends(get_current_user)):
    return current_user
