"""Exception hierarchy for the Biodata Manager API."""

from enum import Enum
from typing import Optional, Dict, Any


class ErrorCode(str, Enum):
    """Machine-readable error codes returned in API error bodies."""

    FOLDER_NOT_FOUND = "FOLDER_NOT_FOUND"
    CIRCULAR_REFERENCE = "CIRCULAR_REFERENCE"

    FILE_NOT_FOUND = "FILE_NOT_FOUND"

    MATERIAL_NOT_FOUND = "MATERIAL_NOT_FOUND"

    TABLE_NOT_FOUND = "TABLE_NOT_FOUND"

    VALIDATION_ERROR = "VALIDATION_ERROR"

    UNAUTHORIZED = "UNAUTHORIZED"
    RATE_LIMITED = "RATE_LIMITED"


class BiodataException(Exception):
    """
    Base exception for all service errors.

    Carries everything the exception handler needs to build a response:
    - Human-readable message
    - Machine-readable error code
    - HTTP status code
    - Optional additional details
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to the JSON error body."""
        return {
            "error": self.error_code.value,
            "message": self.message,
            "details": self.details
        }


class FolderNotFoundError(BiodataException):
    """Folder not found in database."""

    def __init__(self, folder_id: int):
        super().__init__(
            f"Folder not found: {folder_id}",
            ErrorCode.FOLDER_NOT_FOUND,
            status_code=404,
            details={"folder_id": folder_id}
        )


class StoredFileNotFoundError(BiodataException):
    """File record (or its stored content) not found."""

    def __init__(self, file_id: int, message: Optional[str] = None):
        super().__init__(
            message or f"File not found: {file_id}",
            ErrorCode.FILE_NOT_FOUND,
            status_code=404,
            details={"file_id": file_id}
        )


class MaterialNotFoundError(BiodataException):

    def __init__(self, material_id: int):
        super().__init__(
            f"Material not found: {material_id}",
            ErrorCode.MATERIAL_NOT_FOUND,
            status_code=404,
            details={"material_id": material_id}
        )


class TableNotFoundError(BiodataException):
    """Table is absent from the database catalog."""

    def __init__(self, table: str):
        super().__init__(
            f"Table not found: {table}",
            ErrorCode.TABLE_NOT_FOUND,
            status_code=404,
            details={"table": table}
        )


class ValidationError(BiodataException):
    """Malformed or unacceptable input."""

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(
            message,
            ErrorCode.VALIDATION_ERROR,
            status_code=400,
            details=details
        )


class CircularReferenceError(BiodataException):
    """Re-parenting a folder would make it its own ancestor."""

    def __init__(self, folder_id: int, parent_id: int):
        super().__init__(
            "Cannot move folder: would create circular reference",
            ErrorCode.CIRCULAR_REFERENCE,
            status_code=400,
            details={"folder_id": folder_id, "parent_id": parent_id}
        )


class AuthenticationError(BiodataException):
    """Request lacks valid authentication credentials."""

    def __init__(self, message: str = "Invalid or missing authentication token"):
        super().__init__(
            message,
            ErrorCode.UNAUTHORIZED,
            status_code=401,
        )
