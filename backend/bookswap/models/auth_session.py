from datetime import datetime
from typing import Optional

from sqlmodel import Field, Relationship, SQLModel

from bookswap.models.ids import generate_id
from bookswap.models.user import User


class AuthSession(SQLModel, table=True):
    """Server-side login session, looked up by its opaque token."""

    id: str = Field(default_factory=generate_id, primary_key=True)
    session_token: str = Field(unique=True, index=True)
    user_id: str = Field(foreign_key="user.id", index=True)
    expires: datetime

    # Relationships
    user: Optional[User] = Relationship()
