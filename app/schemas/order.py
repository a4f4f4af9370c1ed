from typing import List, Optional
from pydantic import BaseModel, Field
from uuid import UUID
from datetime import datetime
from app.models.order import OrderStatus


class OrderItemInput(BaseModel):
    sku: str = Field(..., min_length=1)
    name: str = ""
    qty: int = Field(..., gt=0)
    price: float = Field(..., ge=0)


class OrderCreate(BaseModel):
    customer_name: str = Field(..., min_length=1)
    items: List[OrderItemInput] = Field(..., min_length=1)
    status: OrderStatus = OrderStatus.PENDING
    date: Optional[datetime] = None


class OrderUpdate(BaseModel):
    customer_name: Optional[str] = Field(default=None, min_length=1)
    items: Optional[List[OrderItemInput]] = Field(default=None, min_length=1)
    status: Optional[OrderStatus] = None
    date: Optional[datetime] = None


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


class OrderItemResponse(BaseModel):
    sku: str
    name: str
    qty: int
    price: float

    class Config:
        from_attributes = True


class OrderResponse(BaseModel):
    id: UUID
    order_number: str
    customer_name: str
    items: List[OrderItemResponse]
    total: float
    status: OrderStatus
    date: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
