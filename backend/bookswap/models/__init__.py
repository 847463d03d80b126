from bookswap.models.auth_session import AuthSession
from bookswap.models.book import Book
from bookswap.models.swap_request import SwapDirection, SwapRequest, SwapStatus
from bookswap.models.user import Account, User

__all__ = [
    "User",
    "Account",
    "AuthSession",
    "Book",
    "SwapRequest",
    "SwapDirection",
    "SwapStatus",
]
