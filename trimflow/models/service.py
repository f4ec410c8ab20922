from typing import Optional
from sqlmodel import SQLModel, Field

from trimflow.models.common import new_id


class ServiceBase(SQLModel):
    name: str
    description: Optional[str] = None
    price: float = Field(ge=0)
    duration_minutes: int = Field(ge=5, le=480)


class Service(ServiceBase, table=True):
    id: str = Field(default_factory=new_id, primary_key=True)
    barbershop_id: str = Field(foreign_key="barbershop.id", index=True)
    is_active: bool = True


class ServiceCreate(ServiceBase):
    pass


class ServiceUpdate(SQLModel):
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = None
    duration_minutes: Optional[int] = None
    is_active: Optional[bool] = None


class ServiceRead(ServiceBase):
    id: str
    barbershop_id: str
    is_active: bool = True
