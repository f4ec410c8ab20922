from typing import Optional
from sqlmodel import SQLModel, Field

from trimflow.models.common import new_id


class BarberBase(SQLModel):
    first_name: str
    last_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    bio: Optional[str] = None
    profile_image_url: Optional[str] = None


class Barber(BarberBase, table=True):
    id: str = Field(default_factory=new_id, primary_key=True)
    barbershop_id: str = Field(foreign_key="barbershop.id", index=True)
    is_active: bool = True


class BarberCreate(BarberBase):
    pass


class BarberUpdate(SQLModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    bio: Optional[str] = None
    profile_image_url: Optional[str] = None
    is_active: Optional[bool] = None


class BarberRead(BarberBase):
    id: str
    barbershop_id: str
    is_active: bool = True

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
