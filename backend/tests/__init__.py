# Force SQLModel table registration at test discovery time
# This ensures all models are registered before any test database creation
from bookswap.models.auth_session import AuthSession  # noqa: F401
from bookswap.models.book import Book  # noqa: F401
from bookswap.models.swap_request import SwapRequest  # noqa: F401
from bookswap.models.user import Account, User  # noqa: F401
