from beanie import Document
from pydantic import Field
from uuid import UUID, uuid4
from datetime import datetime

class ActivityLog(Document):
    id: UUID = Field(default_factory=uuid4)
    user: str = "Unknown"
    action: str = ""
    time: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "activity_logs"
        indexes = ["time"]
