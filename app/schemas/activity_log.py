from pydantic import BaseModel
from datetime import datetime

class ActivityLogResponse(BaseModel):
    user: str
    action: str
    time: datetime

    class Config:
        from_attributes = True
