from sqlmodel import SQLModel, Field

from trimflow.models.common import new_id


class UserBase(SQLModel):
    email: str = Field(index=True, unique=True)
    first_name: str
    last_name: str
    role: str = "OWNER"  # "OWNER" ou "ADMIN"


class User(UserBase, table=True):
    id: str = Field(default_factory=new_id, primary_key=True)
    barbershop_id: str = Field(foreign_key="barbershop.id", index=True)
    password_hash: str


class UserRead(UserBase):
    id: str
    barbershop_id: str


class LoginResponse(SQLModel):
    access_token: str
    token_type: str = "bearer"
    user_id: str
    barbershop_id: str
    expires_in: int
