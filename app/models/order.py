from typing import List
from datetime import datetime
from enum import Enum
from beanie import Document
from pydantic import BaseModel, Field
from uuid import UUID, uuid4

class OrderStatus(str, Enum):
    PENDING = "Pending"
    APPROVED = "Approved"
    CANCELLED = "Cancelled"

class OrderItem(BaseModel):
    sku: str
    name: str = ""
    qty: int = 0
    price: float = 0.0

class Order(Document):
    id: UUID = Field(default_factory=uuid4)
    order_number: str  # e.g. "ORD-20250125093000-4567"
    customer_name: str = ""
    items: List[OrderItem] = []

    total: float = 0.0
    status: OrderStatus = OrderStatus.PENDING

    date: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "orders"
        indexes = [
            "order_number",
            "status",
        ]
