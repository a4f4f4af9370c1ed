from typing import List, Optional
from uuid import UUID, uuid4
from beanie import Document
from pydantic import Field
from datetime import datetime

class StoredDocument(Document):
    """
    An uploaded or generated file. The bytes live in the record itself.
    """
    id: UUID = Field(default_factory=uuid4)

    name: str
    size: int = 0
    date: datetime = Field(default_factory=datetime.utcnow)

    data: bytes = b""
    content_type: str = "application/octet-stream"

    folder: Optional[str] = None
    tags: List[str] = []
    report_type: Optional[str] = None  # set for generated reports
    uploaded_by: str = "Unknown"

    class Settings:
        name = "documents"
        indexes = [
            "name",
            "date",
        ]
