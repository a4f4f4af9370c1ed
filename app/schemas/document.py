from pydantic import BaseModel, Field
from typing import List, Optional
from uuid import UUID
from datetime import datetime

class DocumentResponse(BaseModel):
    """Document metadata. The file bytes are only served by the download routes."""
    id: UUID
    name: str
    size: int
    date: datetime
    content_type: str
    folder: Optional[str] = None
    tags: List[str] = []
    report_type: Optional[str] = None
    uploaded_by: str

    class Config:
        from_attributes = True

class DocumentUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    folder: Optional[str] = None
    tags: Optional[List[str]] = None

class DocumentVerifyResponse(BaseModel):
    id: UUID
    name: str
    stored_size: int
    actual_data_length: int
    has_data: bool
    valid: bool
    content_type: str
    date: datetime

class CleanupResponse(BaseModel):
    success: bool
    deleted_count: int
