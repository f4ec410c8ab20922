import logging
from datetime import datetime, timedelta
from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from sqlmodel import Session, select

from trimflow.config import ACCESS_TOKEN_EXPIRE_MINUTES, ALGORITHM, SECRET_KEY
from trimflow.database import get_session
from trimflow.models.barbershop import Barbershop
from trimflow.models.user import User

logger = logging.getLogger(__name__)

OWNER_ROLES = ("OWNER", "ADMIN")


# =========================
# HASH DE SENHA
# =========================

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


# =========================
# TOKEN JWT
# =========================

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login")


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    claims = dict(data)
    lifetime = expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    claims["exp"] = datetime.utcnow() + lifetime
    return jwt.encode(claims, SECRET_KEY, algorithm=ALGORITHM)


def _unauthorized(detail: str = "Não foi possível validar as credenciais") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def decode_access_token(token: str) -> dict:
    """Claims do token; 401 se expirado, inválido ou sem ``sub``."""
    try:
        claims = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except ExpiredSignatureError:
        raise _unauthorized("Sessão expirada, faça login novamente")
    except JWTError:
        raise _unauthorized()

    if not claims.get("sub"):
        raise _unauthorized()
    return claims


# =========================
# USUÁRIO AUTENTICADO
# =========================

def get_current_user(
    token: str = Depends(oauth2_scheme),
    session: Session = Depends(get_session),
) -> User:
    claims = decode_access_token(token)

    user = session.exec(select(User).where(User.email == claims["sub"])).first()
    if user is None:
        logger.warning(f"Token for unknown user {claims['sub']}")
        raise _unauthorized()

    return user


# =========================
# ESCOPO DA BARBEARIA
# =========================

def get_barbershop_id(
    x_barbershop_id: str = Header(..., alias="X-Barbershop-Id"),
    session: Session = Depends(get_session),
) -> str:
    """Barbearia do header; 404 se não existir."""
    if not session.get(Barbershop, x_barbershop_id):
        raise HTTPException(status_code=404, detail="Barbearia não encontrada")
    return x_barbershop_id


def get_current_owner(
    barbershop_id: str = Depends(get_barbershop_id),
    current_user: User = Depends(get_current_user),
) -> User:
    """Usuário autenticado precisa ser dono e pertencer à barbearia do header."""

    if current_user.role not in OWNER_ROLES:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Apenas donos da barbearia podem acessar esta rota",
        )

    if current_user.barbershop_id != barbershop_id:
        logger.warning(f"User {current_user.id} tried to access barbershop {barbershop_id}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Sem permissão para esta barbearia",
        )

    return current_user
