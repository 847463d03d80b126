from datetime import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint as SAUniqueConstraint
from sqlmodel import Field, Relationship, SQLModel

from bookswap.models.ids import generate_id
from bookswap.models.timestamps import utcnow


class User(SQLModel, table=True):
    id: str = Field(default_factory=generate_id, primary_key=True)
    name: Optional[str] = Field(default=None)  # Display name, also used as session user_name
    email: Optional[str] = Field(default=None, unique=True)
    image: Optional[str] = Field(default=None)
    created_at: datetime = Field(default_factory=utcnow)


class Account(SQLModel, table=True):
    """Link between a local user and an external identity-provider account."""

    __table_args__ = (
        SAUniqueConstraint("provider", "provider_account_id", name="uq_account_provider_account"),
    )

    id: str = Field(default_factory=generate_id, primary_key=True)
    user_id: str = Field(foreign_key="user.id", index=True)
    provider: str  # "github" | "stub"
    provider_account_id: str
    created_at: datetime = Field(default_factory=utcnow)

    # Relationships
    user: Optional[User] = Relationship()
