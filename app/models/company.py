from beanie import Document
from pydantic import Field
from typing import Optional
from uuid import UUID, uuid4
from datetime import datetime

class CompanyInfo(Document):
    """Single record holding the letterhead printed on reports."""
    id: UUID = Field(default_factory=uuid4)

    name: str = "L&B Company"
    address: str = "Jalan Mawar 8, Taman Bukit Beruang Permai, Melaka"
    phone: str = "01133127622"
    email: str = "lbcompany@gmail.com"
    tax_id: Optional[str] = None

    updated_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "company"
