"""
Exceptions raised by the storage layer.

Errors that already carry an HTTP meaning subclass HTTPException so the
upload handler passes them through untouched. StorageBackendError is a
plain exception: the upload handler wraps it into a 400, and the app
exception handler turns it into a 502 everywhere else.
"""
from fastapi import HTTPException, status


class StorageBackendError(Exception):
    """The object store rejected or failed an operation."""

    def __init__(self, operation: str, message: str):
        self.operation = operation
        super().__init__(message)


class AssetNotFoundError(HTTPException):
    """The requested object does not exist in the bucket."""

    def __init__(self, object_key: str):
        self.object_key = object_key
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"File not found: {object_key}"
        )


class StorageNotConfiguredError(HTTPException):
    """No object store credentials are configured."""

    def __init__(self):
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Storage service not configured"
        )


class InvalidAssetPathError(HTTPException):
    """An entity ID or file name would escape its bucket prefix."""

    def __init__(self, value: str):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid path segment: {value!r}"
        )
