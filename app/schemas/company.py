from pydantic import BaseModel, Field
from typing import Optional

class CompanyInfoUpdate(BaseModel):
    name: str = Field(..., min_length=1, description="Company name is required")
    address: str = ""
    phone: str = ""
    email: str = ""
    tax_id: Optional[str] = None

class CompanyInfoResponse(CompanyInfoUpdate):
    class Config:
        from_attributes = True
