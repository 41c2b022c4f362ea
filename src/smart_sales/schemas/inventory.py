from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from decimal import Decimal


class InventoryItemCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=128)
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    stock: int = Field(..., ge=0)
    category: Optional[str] = Field(None, max_length=64)
    image_file_name: Optional[str] = None


class InventoryItemUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=128)
    price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    stock: Optional[int] = Field(None, ge=0)
    category: Optional[str] = Field(None, max_length=64)
    image_file_name: Optional[str] = None

    class Config:
        extra = "forbid"


class InventoryItemRead(BaseModel):
    id: str
    name: str
    price: Decimal
    stock: int
    category: str
    image_file_name: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
