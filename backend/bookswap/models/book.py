from datetime import datetime
from typing import Optional

from sqlmodel import Field, Relationship, SQLModel

from bookswap.models.ids import generate_id
from bookswap.models.timestamps import utcnow
from bookswap.models.user import User


class Book(SQLModel, table=True):
    id: str = Field(default_factory=generate_id, primary_key=True)
    title: str
    author: Optional[str] = Field(default=None)
    owner_id: str = Field(foreign_key="user.id", index=True)  # The user offering the book
    created_at: datetime = Field(default_factory=utcnow)

    # Relationships
    owner: Optional[User] = Relationship()
