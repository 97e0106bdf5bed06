from datetime import datetime
from pydantic import BaseModel, field_validator

from app.schemas.user import UserCreate, UserUpdate


class ClientCreate(UserCreate):
    pass


class ClientUpdate(UserUpdate):
    is_active: bool | None = None

    @field_validator("is_active")
    @classmethod
    def is_active_not_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


class ClientOut(BaseModel):
    id: str
    username: str
    email: str
    is_active: bool
    users_count: int
    created_at: datetime
    updated_at: datetime
