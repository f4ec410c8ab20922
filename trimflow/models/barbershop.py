from typing import Optional
from datetime import datetime
from sqlmodel import SQLModel, Field

from trimflow.models.common import new_id


class BarbershopBase(SQLModel):
    name: str
    email: str
    phone: Optional[str] = None
    address: Optional[str] = None
    description: Optional[str] = None


class Barbershop(BarbershopBase, table=True):
    id: str = Field(default_factory=new_id, primary_key=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)


class BarbershopRead(BarbershopBase):
    id: str


class RegisterRequest(SQLModel):
    barbershop_name: str
    email: str
    password: str
    first_name: str
    last_name: str
    phone: Optional[str] = None
    address: Optional[str] = None


class RegisterResponse(SQLModel):
    user_id: str
    barbershop_id: str
    email: str
    message: str
