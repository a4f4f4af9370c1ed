from beanie import Document, Indexed
from pydantic import Field
from typing import Annotated, Optional
from datetime import datetime
from uuid import UUID, uuid4


class User(Document):
    id: UUID = Field(default_factory=uuid4)
    username: Annotated[str, Indexed(unique=True)]
    hashed_password: str

    created_at: datetime = Field(default_factory=datetime.utcnow)
    last_login: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Settings:
        name = "users"
