"""
Swap Request Store Access

Typed operations over SwapRequest. Each operation is a single store
round-trip; there are no multi-step transactions.

Lookups that miss return None. Only confirm() raises not-found, because
confirming against a missing book or swap would otherwise leave the request
in a state the caller did not ask for.
"""

import logging
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from bookswap.models.book import Book
from bookswap.models.swap_request import SwapDirection, SwapRequest
from bookswap.services.errors import (
    BookNotFoundError,
    StoreError,
    SwapRequestNotFoundError,
    SwapValidationError,
)

logger = logging.getLogger(__name__)

# Every listed or looked-up swap carries both users and both books
EXPANDED_RELATIONS = (
    selectinload(SwapRequest.requester),
    selectinload(SwapRequest.holder),
    selectinload(SwapRequest.holder_book),
    selectinload(SwapRequest.requester_book),
)


def require_identifier(field: str, value: Optional[str]) -> str:
    if value is None or not str(value).strip():
        raise SwapValidationError(field)
    return value


class SwapRequestStore:
    def __init__(self, session: Session):
        self.session = session

    def find_by_users_and_book(self, requester_id: str, holder_id: str, holder_book_id: str) -> Optional[SwapRequest]:
        """
        Find an existing proposal for the same requester, holder and book.

        Callers use this to avoid proposing the same swap twice; create()
        itself does not deduplicate.
        """
        require_identifier("requester_id", requester_id)
        require_identifier("holder_id", holder_id)
        require_identifier("holder_book_id", holder_book_id)

        query = select(SwapRequest).where(
            SwapRequest.requester_id == requester_id,
            SwapRequest.holder_id == holder_id,
            SwapRequest.holder_book_id == holder_book_id,
        )
        return self.session.exec(query).first()

    def create(self, requester_id: str, holder_id: str, holder_book_id: str) -> SwapRequest:
        """Insert a new proposed swap request (requester_book_id unset)."""
        require_identifier("requester_id", requester_id)
        require_identifier("holder_id", holder_id)
        require_identifier("holder_book_id", holder_book_id)

        swap = SwapRequest(
            requester_id=requester_id,
            holder_id=holder_id,
            holder_book_id=holder_book_id,
        )
        self.session.add(swap)
        self._commit(f"create swap request {requester_id} -> {holder_id} for book {holder_book_id}")
        self.session.refresh(swap)

        logger.info(f"Created swap request {swap.id}: requester={requester_id} holder={holder_id} book={holder_book_id}")
        return swap

    def list_by_user(self, user_id: str, direction: SwapDirection = SwapDirection.ALL) -> List[SwapRequest]:
        """
        List swap requests where the user is the requester (SENT), the
        holder (RECEIVED), or either (ALL).
        """
        if not user_id:
            return []

        direction = SwapDirection(direction)
        if direction == SwapDirection.SENT:
            condition = SwapRequest.requester_id == user_id
        elif direction == SwapDirection.RECEIVED:
            condition = SwapRequest.holder_id == user_id
        else:
            condition = or_(SwapRequest.requester_id == user_id, SwapRequest.holder_id == user_id)

        query = (
            select(SwapRequest)
            .where(condition)
            .options(*EXPANDED_RELATIONS)
            .order_by(SwapRequest.created_at, SwapRequest.id)
        )
        return list(self.session.exec(query).all())

    def find_by_id(self, swap_id: str) -> Optional[SwapRequest]:
        if not swap_id:
            return None
        query = select(SwapRequest).where(SwapRequest.id == swap_id).options(*EXPANDED_RELATIONS)
        return self.session.exec(query).first()

    def confirm(self, swap_id: str, requester_book_id: str) -> None:
        """
        Attach the requester's counter-offer book to a swap request.

        Re-confirming overwrites the previous book (last write wins). There
        is no check that the swap is still in the proposed state.

        Raises:
            SwapValidationError: empty swap_id or requester_book_id
            BookNotFoundError: requester_book_id does not exist; swap untouched
            SwapRequestNotFoundError: swap_id does not exist
        """
        require_identifier("swap_id", swap_id)
        require_identifier("requester_book_id", requester_book_id)

        book = self.session.get(Book, requester_book_id)
        if book is None:
            logger.warning(f"Rejected confirmation of swap {swap_id}: book {requester_book_id} not found")
            raise BookNotFoundError(requester_book_id)

        swap = self.session.get(SwapRequest, swap_id)
        if swap is None:
            logger.warning(f"Rejected confirmation: swap request {swap_id} not found")
            raise SwapRequestNotFoundError(swap_id)

        swap.requester_book_id = book.id
        self.session.add(swap)
        self._commit(f"confirm swap request {swap_id}")

        logger.info(f"Confirmed swap request {swap_id} with requester book {book.id}")

    def _commit(self, action: str) -> None:
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            logger.warning(f"Store rejected {action}: {e.orig}")
            raise StoreError(f"Could not {action}: {e.orig}") from e
