from pydantic import BaseModel, Field
from typing import List, Optional
from uuid import UUID
from datetime import datetime
from app.models.sale import PaymentMethod


# ==========================================
# REQUEST SCHEMAS (What users send)
# ==========================================

class SaleItemInput(BaseModel):
    """Item to be sold"""
    sku: str = Field(..., min_length=1)
    name: str = ""
    quantity: int = Field(..., gt=0, description="Must be greater than 0")
    selling_price: float = Field(..., ge=0)


class SaleCreate(BaseModel):
    """Record a new sale"""
    customer: str = ""
    date: Optional[datetime] = None
    items: List[SaleItemInput] = Field(..., min_length=1, description="Must have at least 1 item")
    payment_method: PaymentMethod = PaymentMethod.CASH
    notes: Optional[str] = None


class SaleUpdate(BaseModel):
    customer: Optional[str] = None
    date: Optional[datetime] = None
    items: Optional[List[SaleItemInput]] = Field(default=None, min_length=1)
    payment_method: Optional[PaymentMethod] = None
    notes: Optional[str] = None


# ==========================================
# RESPONSE SCHEMAS (What API returns)
# ==========================================

class SaleItemResponse(BaseModel):
    sku: str
    name: str
    quantity: int
    selling_price: float
    subtotal: float

    class Config:
        from_attributes = True


class SaleResponse(BaseModel):
    """Complete sale details"""
    id: UUID
    sale_id: str
    invoice: str
    date: datetime
    customer: str
    items: List[SaleItemResponse]
    grand_total: float
    payment_method: PaymentMethod
    notes: Optional[str] = None
    created_by: str
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
