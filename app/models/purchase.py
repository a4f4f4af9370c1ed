from typing import List, Optional
from datetime import datetime
from beanie import Document
from pydantic import BaseModel, Field
from uuid import UUID, uuid4

class PurchaseItem(BaseModel):
    sku: str
    name: str = ""
    quantity: int = 0
    cost_price: float = 0.0
    subtotal: float = 0.0  # quantity × cost_price

class Purchase(Document):
    id: UUID = Field(default_factory=uuid4)
    purchase_id: str  # e.g. "PUR-20250125093000-4567"

    date: datetime = Field(default_factory=datetime.utcnow)
    supplier: str = ""
    items: List[PurchaseItem] = []

    grand_total: float = 0.0
    notes: Optional[str] = None

    created_by: str = "Unknown"
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: Optional[datetime] = None

    class Settings:
        name = "purchases"
        indexes = [
            "purchase_id",
            "date",
        ]
