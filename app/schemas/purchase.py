from typing import List, Optional
from pydantic import BaseModel, Field
from uuid import UUID
from datetime import datetime


# Input for Recording a Purchase
class PurchaseItemInput(BaseModel):
    sku: str = Field(..., min_length=1)
    name: str = ""
    quantity: int = Field(..., gt=0)
    cost_price: float = Field(default=0.0, ge=0)


class PurchaseCreate(BaseModel):
    supplier: str = ""
    date: Optional[datetime] = None
    items: List[PurchaseItemInput] = Field(..., min_length=1)
    notes: Optional[str] = None


class PurchaseUpdate(BaseModel):
    supplier: Optional[str] = None
    date: Optional[datetime] = None
    items: Optional[List[PurchaseItemInput]] = Field(default=None, min_length=1)
    notes: Optional[str] = None


# Response schemas
class PurchaseItemResponse(BaseModel):
    sku: str
    name: str
    quantity: int
    cost_price: float
    subtotal: float

    class Config:
        from_attributes = True


class PurchaseResponse(BaseModel):
    id: UUID
    purchase_id: str
    date: datetime
    supplier: str
    items: List[PurchaseItemResponse]
    grand_total: float
    notes: Optional[str] = None
    created_by: str
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
