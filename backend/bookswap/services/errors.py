class SwapStoreError(Exception):
    """Base class for failures raised by swap request operations"""

    pass


class SwapValidationError(SwapStoreError, ValueError):
    """Raised before any store access when an input identifier is unusable"""

    def __init__(self, field: str, message: str = "must be a non-empty identifier"):
        self.field = field
        super().__init__(f"{field} {message}")


class StoreError(SwapStoreError):
    """Raised when the store rejects a write (e.g. a dangling foreign key)"""

    pass


class SwapRequestNotFoundError(SwapStoreError):
    def __init__(self, swap_id: str):
        self.swap_id = swap_id
        super().__init__(f"Swap request {swap_id} not found")


class BookNotFoundError(SwapStoreError):
    def __init__(self, book_id: str):
        self.book_id = book_id
        super().__init__(f"Book {book_id} not found")
