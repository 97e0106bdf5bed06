from datetime import date, datetime
from pydantic import BaseModel, Field, field_validator


class ProductCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    brand: str = Field(min_length=1, max_length=255)
    details: str | None = None
    release_date: date | None = None


class ProductUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    brand: str | None = Field(default=None, min_length=1, max_length=255)
    details: str | None = None
    release_date: date | None = None

    # name and brand are NOT NULL; details and release_date may be cleared
    @field_validator("name", "brand")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


class ProductOut(BaseModel):
    """List view of a product"""
    id: str
    name: str
    brand: str


class ProductDetailOut(ProductOut):
    """Details view of a product"""
    details: str | None
    release_date: date | None
    created_at: datetime
    updated_at: datetime
