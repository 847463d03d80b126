"""
Swap Request API Routes

Propose swaps, look them up, list them by user and direction, and confirm
them with the requester's counter-offer book. Everything except hello
requires a signed-in caller.
"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from pydantic import BaseModel, ConfigDict, field_validator
from sqlmodel import Session

from bookswap.auth.dependencies import require_session
from bookswap.database import get_session
from bookswap.models.swap_request import SwapDirection, SwapStatus
from bookswap.services.errors import (
    BookNotFoundError,
    StoreError,
    SwapRequestNotFoundError,
    SwapValidationError,
)
from bookswap.services.swap_store import SwapRequestStore

router = APIRouter(prefix="/api/swap", tags=["swap"])


def get_swap_store(session: Session = Depends(get_session)) -> SwapRequestStore:
    return SwapRequestStore(session)


# ============================================================================
# Request/Response Models
# ============================================================================


def _non_empty(value: str) -> str:
    if not value or not value.strip():
        raise ValueError("must be a non-empty identifier")
    return value


class InitialSwapRequestData(BaseModel):
    requester_id: str
    holder_id: str
    holder_book_id: str

    @field_validator("requester_id", "holder_id", "holder_book_id")
    @classmethod
    def validate_identifier(cls, v):
        return _non_empty(v)


class ConfirmSwapRequestData(BaseModel):
    requester_book_id: str

    @field_validator("requester_book_id")
    @classmethod
    def validate_identifier(cls, v):
        return _non_empty(v)


class UserSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: Optional[str] = None
    image: Optional[str] = None


class BookSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    author: Optional[str] = None
    owner_id: str


class SwapRequestResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    requester_id: str
    holder_id: str
    holder_book_id: str
    requester_book_id: Optional[str] = None
    status: SwapStatus
    created_at: datetime


class SwapRequestDetail(SwapRequestResponse):
    requester: UserSummary
    holder: UserSummary
    holder_book: BookSummary
    requester_book: Optional[BookSummary] = None


class GreetingResponse(BaseModel):
    greeting: str


# ============================================================================
# Endpoints
# ============================================================================


@router.get("/hello", response_model=GreetingResponse)
def hello(text: str = Query(...)):
    """Unauthenticated echo, used by clients as a liveness probe."""
    return GreetingResponse(greeting=f"Hello {text}")


@router.get("/lookup", response_model=Optional[SwapRequestResponse])
def find_swap_by_users_ids_and_book_id(
    requester_id: str = Query(..., min_length=1),
    holder_id: str = Query(..., min_length=1),
    holder_book_id: str = Query(..., min_length=1),
    store: SwapRequestStore = Depends(get_swap_store),
    _current=Depends(require_session),
):
    """
    Find an existing proposal for (requester, holder, book).

    Returns null when there is none. Clients call this before
    createInitialSwapRequest to avoid duplicate proposals.
    """
    try:
        swap = store.find_by_users_and_book(requester_id, holder_id, holder_book_id)
    except SwapValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    if swap is None:
        return None
    return SwapRequestResponse.model_validate(swap)


@router.post("/requests", response_model=SwapRequestResponse, status_code=201)
def create_initial_swap_request(
    request: InitialSwapRequestData,
    store: SwapRequestStore = Depends(get_swap_store),
    _current=Depends(require_session),
):
    """Propose a swap. Always inserts; duplicates are not rejected here."""
    try:
        swap = store.create(request.requester_id, request.holder_id, request.holder_book_id)
    except SwapValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except StoreError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return SwapRequestResponse.model_validate(swap)


@router.get("/users/{user_id}/requests", response_model=List[SwapRequestDetail])
def find_by_user_id(
    user_id: str,
    filter: SwapDirection = Query(SwapDirection.ALL),
    store: SwapRequestStore = Depends(get_swap_store),
    _current=Depends(require_session),
):
    """
    List a user's swap requests with requester, holder and both books expanded.

    filter: SENT (user is requester), RECEIVED (user is holder) or ALL.
    """
    swaps = store.list_by_user(user_id, filter)
    return [SwapRequestDetail.model_validate(swap) for swap in swaps]


@router.get("/requests/{swap_id}", response_model=Optional[SwapRequestDetail])
def find_by_id(
    swap_id: str,
    store: SwapRequestStore = Depends(get_swap_store),
    _current=Depends(require_session),
):
    """Get one swap request with relations expanded, or null if it does not exist."""
    swap = store.find_by_id(swap_id)
    if swap is None:
        return None
    return SwapRequestDetail.model_validate(swap)


@router.post("/requests/{swap_id}/confirm", status_code=204, response_class=Response)
def confirm_swap_request(
    swap_id: str,
    request: ConfirmSwapRequestData,
    store: SwapRequestStore = Depends(get_swap_store),
    _current=Depends(require_session),
):
    """
    Confirm a swap by attaching the requester's counter-offer book.

    Fails with 404 (and changes nothing) if the book or the swap request
    does not exist.
    """
    try:
        store.confirm(swap_id, request.requester_book_id)
    except SwapValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except (BookNotFoundError, SwapRequestNotFoundError) as e:
        raise HTTPException(status_code=404, detail=str(e))
    except StoreError as e:
        raise HTTPException(status_code=409, detail=str(e))
