"""
Cancellation Request Validation.

Checks inbound cancellation requests before any product is evaluated.
Validators return ValidationError lists and never raise; the service
layer decides how to surface them.
"""

from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel

from core.domain import ValidationError, Validator, parse_timestamp

from .models import Product, ProductType, Provider


class CancellationRequest(BaseModel):
    """Inbound cancellation request."""
    product_id: Optional[str] = None
    booking_id: Optional[str] = None
    booking_time: Optional[str] = None
    lounge_id: Optional[str] = None
    reason: Optional[str] = None


# Fields a provider needs before it will accept a cancellation,
# keyed by (provider, product type)
PROVIDER_REQUIRED_FIELDS: Dict[Tuple[str, str], List[str]] = {
    (Provider.DRAGONPASS.value, ProductType.LOUNGE_ACCESS.value): ["lounge_id"],
}


class CancellationRequestValidator(Validator):
    """
    Validates cancellation request data.

    validate() covers the request on its own; validate_for_product()
    covers what depends on the resolved product.
    """

    def validate(self, data: Dict[str, Any]) -> List[ValidationError]:
        errors = []

        if not data.get("booking_id") and not data.get("product_id"):
            errors.append(ValidationError(
                field="booking_id",
                message="Either booking_id or product_id is required",
                code="required",
            ))

        booking_time = data.get("booking_time")
        if booking_time and parse_timestamp(booking_time) is None:
            errors.append(ValidationError(
                field="booking_time",
                message="Invalid booking_time format",
                code="invalid_format",
            ))

        return errors

    def validate_for_product(self, data: Dict[str, Any], product: Product) -> List[ValidationError]:
        errors = []

        required = PROVIDER_REQUIRED_FIELDS.get((product.provider, product.type), [])
        for field in required:
            if not data.get(field):
                errors.append(ValidationError(
                    field=field,
                    message=f"{field} is required for {product.provider} {product.type} products",
                    code="required",
                ))

        lounge_id = data.get("lounge_id")
        if lounge_id and product.lounge_id and lounge_id != product.lounge_id:
            errors.append(ValidationError(
                field="lounge_id",
                message=f"lounge_id {lounge_id} does not match the booked lounge",
                code="mismatch",
            ))

        return errors
