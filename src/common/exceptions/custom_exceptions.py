"""Custom application-wide exceptions."""


class ApplicationError(Exception):
    """Base class for application-specific errors."""

    def __init__(
        self, message: str = "An application error occurred", original_exception: Exception | None = None
    ) -> None:
        super().__init__(message)
        self.original_exception = original_exception
        self.message = message

    def __str__(self) -> str:
        if self.original_exception:
            return f"{self.message} (Original error: {self.original_exception})"
        return self.message


class APIError(ApplicationError):
    """Exception raised for errors during external API calls."""

    def __init__(
        self,
        message: str = "API call failed",
        original_exception: Exception | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message, original_exception)
        self.status_code = status_code
        self.message = f"API Error: {message}"
        if status_code:
            self.message += f" (Status Code: {status_code})"


class DatabaseError(ApplicationError):
    """Exception raised for errors during database operations."""

    def __init__(self, message: str = "Database operation failed", original_exception: Exception | None = None) -> None:
        super().__init__(message, original_exception)
        self.message = f"Database Error: {message}"


class LedgerError(ApplicationError):
    """
    Base class for rejected ledger operations.

    Ledger functions return these as values instead of raising them, so a
    rejected operation never leaves the record set half-applied.
    """

    def __init__(self, message: str = "Ledger operation rejected", record_id: str | None = None) -> None:
        super().__init__(message)
        self.record_id = record_id


class RecordNotFoundError(LedgerError):
    """The referenced record id is not in the current record set."""

    def __init__(self, record_id: str | None) -> None:
        super().__init__(f"Record not found: {record_id}", record_id)


class InvalidQuantityError(LedgerError):
    """Requested quantity is not positive or exceeds the available stock."""

    def __init__(self, quantity: int, available: int, record_id: str | None = None) -> None:
        super().__init__(f"Invalid quantity {quantity} (available: {available})", record_id)
        self.quantity = quantity
        self.available = available


class InvalidRecordStateError(LedgerError):
    """The record is in a state that does not allow the operation."""


class InvalidFieldError(LedgerError):
    """An edit referenced unknown or protected record fields."""

    def __init__(self, fields: list[str], record_id: str | None = None) -> None:
        super().__init__(f"Fields cannot be edited: {', '.join(sorted(fields))}", record_id)
        self.fields = fields
