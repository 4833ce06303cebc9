# media_catalog/exceptions.py
"""
Domain errors raised by the repositories.

Routers translate these into HTTP responses; anything else is left to the
global exception handler.
"""
from typing import Iterable, Optional


class CatalogError(Exception):
    """Base class for repository errors"""


class NotFoundError(CatalogError):
    """A lookup expected to return exactly one row returned none"""

    def __init__(self, entity: str, entity_id=None):
        self.entity = entity
        self.entity_id = entity_id
        if entity_id is None:
            message = f"{entity} not found"
        else:
            message = f"{entity} {entity_id} not found"
        super().__init__(message)


class UnknownReferenceError(NotFoundError):
    """One or more association ids do not exist"""

    def __init__(self, entity: str, missing_ids: Iterable[int]):
        self.missing_ids = sorted(set(missing_ids))
        super().__init__(entity)
        self.args = (f"Unknown {entity} ids: {self.missing_ids}",)


class ConflictError(CatalogError):
    """A uniqueness rule would be violated (season/episode number, email)"""


class ScanError(CatalogError):
    """A result row does not have the shape the reducer expects"""

    def __init__(self, message: str, row_index: Optional[int] = None):
        self.row_index = row_index
        if row_index is not None:
            message = f"row {row_index}: {message}"
        super().__init__(message)


class TransactionError(CatalogError):
    """A statement inside a multi-statement transaction failed; all work was rolled back"""

    def __init__(self, operation: str, cause: Exception):
        self.operation = operation
        self.cause = cause
        super().__init__(f"{operation} failed and was rolled back: {cause}")
