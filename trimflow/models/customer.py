from typing import Optional
from datetime import datetime
from sqlmodel import SQLModel, Field

from trimflow.models.common import new_id


class CustomerBase(SQLModel):
    name: str
    # único por barbearia, sempre em minúsculas
    email: str = Field(index=True)
    phone: Optional[str] = None
    notes: Optional[str] = None


class Customer(CustomerBase, table=True):
    id: str = Field(default_factory=new_id, primary_key=True)
    barbershop_id: str = Field(foreign_key="barbershop.id", index=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class CustomerRead(CustomerBase):
    id: str
    barbershop_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    total_appointments: int = 0
    last_appointment_at: Optional[datetime] = None
