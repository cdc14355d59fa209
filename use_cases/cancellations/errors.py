"""Errors raised by the cancellation service for caller mistakes."""

from typing import List

from core.domain import ValidationError


class CancellationError(Exception):
    """Base class for cancellation request failures."""
    code = "CANCELLATION_ERROR"


class InvalidCancellationRequest(CancellationError, ValueError):
    """The request failed validation. `errors` lists every problem found."""
    code = "INVALID_REQUEST"

    def __init__(self, errors: List[ValidationError]):
        self.errors = errors
        details = "; ".join(f"{e.field}: {e.message}" for e in errors)
        super().__init__(f"Invalid cancellation request: {details}")


class ProductNotFound(CancellationError, LookupError):
    """No product matches the request's identifiers."""
    code = "PRODUCT_NOT_FOUND"
