from typing import Optional, Annotated
from beanie import Document, Indexed
from pydantic import Field
from uuid import UUID, uuid4
from datetime import datetime

class InventoryItem(Document):
    """
    One stock line. Purchases add to ``quantity``, sales take from it.
    """
    id: UUID = Field(default_factory=uuid4)

    sku: Annotated[str, Indexed(unique=True)]
    name: str = ""
    category: str = ""

    quantity: int = 0
    unit_cost: float = 0.0   # Buying price, drives inventory value
    unit_price: float = 0.0  # Selling price, drives potential revenue

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: Optional[datetime] = None

    @property
    def inventory_value(self) -> float:
        return self.quantity * self.unit_cost

    @property
    def potential_revenue(self) -> float:
        return self.quantity * self.unit_price

    class Settings:
        name = "inventory"
