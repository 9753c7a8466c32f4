"""
Error taxonomy shared by services; the HTTP layer maps kinds to status codes
"""
import enum
from typing import Any, List, Optional


class ErrorKind(str, enum.Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    INSUFFICIENT_STOCK = "insufficient_stock"
    SCHEMA_PROBE = "schema_probe"
    UNKNOWN = "unknown"


STATUS_CODES = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.INSUFFICIENT_STOCK: 400,
    ErrorKind.SCHEMA_PROBE: 500,
    ErrorKind.UNKNOWN: 500,
}


class ErpError(Exception):
    """Base class for expected business failures"""
    kind = ErrorKind.UNKNOWN

    def __init__(self, message: str, errors: Optional[List[Any]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors

    @property
    def status_code(self) -> int:
        return status_code_for(self.kind)


class ValidationError(ErpError):
    kind = ErrorKind.VALIDATION


class NotFoundError(ErpError):
    kind = ErrorKind.NOT_FOUND


class InsufficientStockError(ErpError):
    kind = ErrorKind.INSUFFICIENT_STOCK

    def __init__(self, product_name: str, available: int, requested: int):
        super().__init__(f"Insufficient stock for product {product_name}")
        self.product_name = product_name
        self.available = available
        self.requested = requested


class SchemaProbeError(ErpError):
    kind = ErrorKind.SCHEMA_PROBE


def status_code_for(kind: ErrorKind) -> int:
    return STATUS_CODES.get(kind, 500)
