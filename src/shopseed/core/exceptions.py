from typing import Optional, Dict, Any
import traceback
import sys


class SeedError(Exception):
    def __init__(self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        internal_message: Optional[str] = None):
        self.message = message  # Operator-facing message
        self.internal_message = internal_message or message  # Debug message
        self.error_code = error_code or self.__class__.__name__.replace('Error', '').upper()
        self.details = details or {}

        # Capture the active traceback when raised from an except block
        self.traceback = traceback.format_exc() if sys.exc_info()[0] else None

        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for the run report"""
        return {
            "code": self.error_code,
            "message": self.message,
            "details": self.details
        }


class FormatError(SeedError):
    """Raised when a source cannot be parsed into header + rows"""

    def __init__(self, message: str, source: Optional[str] = None, line: Optional[int] = None):
        details: Dict[str, Any] = {}
        if source:
            details["source"] = source
        if line is not None:
            details["line"] = line
        super().__init__(message, "FORMAT_ERROR", details)


class EmptyResultError(SeedError):
    """Raised when a dependent entity has no rows left after filtering"""

    def __init__(self, entity: str):
        super().__init__(
            f"No valid {entity} found to import",
            "EMPTY_RESULT",
            {"entity": entity},
        )


class DatabaseError(SeedError):
    """Raised when a store operation fails"""

    def __init__(
        self,
        message: str = "Database operation failed",
        operation: Optional[str] = None,
        table: Optional[str] = None,
    ):
        details: Dict[str, Any] = {}
        if operation:
            details["operation"] = operation
        if table:
            details["table"] = table
        super().__init__(
            f"Database {operation or 'operation'} failed" + (f" on {table}" if table else ""),
            "DATABASE_ERROR",
            details,
            internal_message=message,
        )


class UnexpectedFailure(SeedError):
    """Raised for anything the pipeline did not anticipate"""

    def __init__(self, message: str = "An unexpected error occurred", context: Optional[Dict[str, Any]] = None):
        super().__init__(message, "UNEXPECTED_FAILURE", context or {})


# --------------------------------------------------------------------- #
# Row-level rejections: the row is dropped, the import carries on         #
# --------------------------------------------------------------------- #

class ValidationRejection(SeedError):
    """Raised when a single source row cannot be accepted"""

    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code or "VALIDATION_REJECTION", details)


class InvalidAddressFormat(ValidationRejection):
    def __init__(self, address: str):
        super().__init__(
            f"Invalid address format: {address}",
            "INVALID_ADDRESS_FORMAT",
            {"address": address},
        )


class InvalidStateZipFormat(ValidationRejection):
    def __init__(self, segment: str):
        super().__init__(
            f"Invalid state/zip format: {segment}",
            "INVALID_STATE_ZIP_FORMAT",
            {"segment": segment},
        )


class MissingReference(ValidationRejection):
    """Foreign key not among the ids accepted earlier in this run"""

    def __init__(self, entity: str, field_name: str, referenced: str, value: Any):
        super().__init__(
            f"Skipping {entity} for non-existent {referenced} ID: {value}",
            "MISSING_REFERENCE",
            {"field": field_name, "value": value},
        )
        self.value = value


class InvalidQuantity(ValidationRejection):
    def __init__(self, field_name: str, raw: Optional[str]):
        super().__init__(
            f"Invalid {field_name}: {raw!r}",
            "INVALID_QUANTITY",
            {"field": field_name, "raw": raw},
        )


class InvalidIdentifier(ValidationRejection):
    def __init__(self, field_name: str, raw: Optional[str]):
        super().__init__(
            f"Invalid {field_name}: {raw!r}",
            "INVALID_IDENTIFIER",
            {"field": field_name, "raw": raw},
        )


class DuplicateKey(ValidationRejection):
    def __init__(
        self,
        field_name: str,
        value: Any,
        row_id: Optional[Any] = None,
        first_id: Optional[Any] = None,
    ):
        message = f"Duplicate {field_name}: {value}"
        if row_id is not None and first_id is not None:
            message += f" (id {row_id} collides with id {first_id})"
        super().__init__(
            message,
            "DUPLICATE_KEY",
            {"field": field_name, "value": value, "row_id": row_id, "first_id": first_id},
        )
