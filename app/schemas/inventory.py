from pydantic import BaseModel, Field
from typing import Optional
from uuid import UUID
from datetime import datetime

class InventoryBase(BaseModel):
    sku: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    category: str = ""
    quantity: int = Field(default=0, ge=0)
    unit_cost: float = Field(default=0.0, ge=0)
    unit_price: float = Field(default=0.0, ge=0)

class InventoryCreate(InventoryBase):
    pass

class InventoryUpdate(BaseModel):
    sku: Optional[str] = Field(default=None, min_length=1)
    name: Optional[str] = Field(default=None, min_length=1)
    category: Optional[str] = None
    quantity: Optional[int] = Field(default=None, ge=0)
    unit_cost: Optional[float] = Field(default=None, ge=0)
    unit_price: Optional[float] = Field(default=None, ge=0)

class InventoryResponse(InventoryBase):
    id: UUID
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class InventorySummary(BaseModel):
    """Dashboard cards for the inventory page"""
    total_items: int
    total_quantity: int
    total_value: float
    total_revenue: float
    total_profit: float
    low_stock_items: int
