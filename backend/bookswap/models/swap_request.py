from datetime import datetime
from enum import Enum
from typing import Optional

from sqlmodel import Field, Relationship, SQLModel

from bookswap.models.book import Book
from bookswap.models.ids import generate_id
from bookswap.models.timestamps import utcnow
from bookswap.models.user import User


class SwapDirection(str, Enum):
    """Which side of a swap request the listed user is on."""

    ALL = "ALL"
    SENT = "SENT"  # user is the requester
    RECEIVED = "RECEIVED"  # user is the holder


class SwapStatus(str, Enum):
    PROPOSED = "PROPOSED"
    CONFIRMED = "CONFIRMED"


class SwapRequest(SQLModel, table=True):
    id: str = Field(default_factory=generate_id, primary_key=True)
    requester_id: str = Field(foreign_key="user.id", index=True)
    holder_id: str = Field(foreign_key="user.id", index=True)
    holder_book_id: str = Field(foreign_key="book.id", index=True)  # Book the requester wants
    # Counter-offer from the requester; only set on confirmation
    requester_book_id: Optional[str] = Field(default=None, foreign_key="book.id")
    created_at: datetime = Field(default_factory=utcnow)

    # Relationships
    requester: Optional[User] = Relationship(sa_relationship_kwargs={"foreign_keys": "SwapRequest.requester_id"})
    holder: Optional[User] = Relationship(sa_relationship_kwargs={"foreign_keys": "SwapRequest.holder_id"})
    holder_book: Optional[Book] = Relationship(sa_relationship_kwargs={"foreign_keys": "SwapRequest.holder_book_id"})
    requester_book: Optional[Book] = Relationship(
        sa_relationship_kwargs={"foreign_keys": "SwapRequest.requester_book_id"}
    )

    @property
    def status(self) -> SwapStatus:
        if self.requester_book_id is None:
            return SwapStatus.PROPOSED
        return SwapStatus.CONFIRMED
