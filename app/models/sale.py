from beanie import Document
from pydantic import BaseModel, Field
from typing import List, Optional
from uuid import UUID, uuid4
from datetime import datetime
from enum import Enum


class PaymentMethod(str, Enum):
    CASH = "Cash"
    CARD = "Card"
    TRANSFER = "Bank Transfer"
    E_WALLET = "E-Wallet"


class SaleItem(BaseModel):
    """Individual item in a sale - embedded in Sale document"""
    sku: str
    name: str = ""
    quantity: int = 0
    selling_price: float = 0.0  # Price at time of sale (snapshot)
    subtotal: float = 0.0       # quantity × selling_price


class Sale(Document):
    """
    Sales transaction record.
    Recording one takes the sold quantities out of inventory.
    """
    id: UUID = Field(default_factory=uuid4)

    # Sale Identification
    sale_id: str  # e.g., "INV-20250125093000-4567" - doubles as the invoice number

    date: datetime = Field(default_factory=datetime.utcnow)
    customer: str = ""

    # Items Sold
    items: List[SaleItem] = []
    grand_total: float = 0.0

    # Payment
    payment_method: PaymentMethod = PaymentMethod.CASH
    notes: Optional[str] = None

    created_by: str = "Unknown"
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: Optional[datetime] = None

    @property
    def invoice(self) -> str:
        return self.sale_id

    class Settings:
        name = "sales"
        indexes = [
            "sale_id",
            "date",
        ]
