from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from supplychain.app.db.models.core_types import Role
from supplychain.app.schemas.common import ORMModel


class UserCreate(BaseModel):
    first_name: str = Field(min_length=2, max_length=50)
    last_name: str = Field(min_length=2, max_length=50)
    email: EmailStr
    password: str = Field(min_length=8, max_length=100)
    role: Role


class UserUpdate(BaseModel):
    first_name: str | None = Field(default=None, min_length=2, max_length=50)
    last_name: str | None = Field(default=None, min_length=2, max_length=50)
    email: EmailStr | None = None
    password: str | None = Field(default=None, max_length=100)
    role: Role | None = None


class UserRead(ORMModel):
    # jamais de hash de mot de passe en sortie
    id: int
    first_name: str
    last_name: str
    email: str
    role: Role
    created_at: datetime
