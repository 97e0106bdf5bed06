from datetime import datetime
from pydantic import BaseModel, Field, field_validator

USERNAME_PATTERN = r"^[A-Za-z0-9_.-]+$"
EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class UserCreate(BaseModel):
    username: str = Field(min_length=3, max_length=180, pattern=USERNAME_PATTERN)
    email: str = Field(max_length=320, pattern=EMAIL_PATTERN)


class UserUpdate(BaseModel):
    username: str | None = Field(default=None, min_length=3, max_length=180, pattern=USERNAME_PATTERN)
    email: str | None = Field(default=None, max_length=320, pattern=EMAIL_PATTERN)

    @field_validator("username", "email")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


class UserOut(BaseModel):
    id: str
    username: str
    email: str
    client_id: str | None
    created_at: datetime
    updated_at: datetime
