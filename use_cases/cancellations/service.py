"""
Cancellation Request Handler.

Wires the domain layer to the catalog, the cancellation store and the
event bus: validate the request, resolve the product, evaluate its
policy, issue a cancellation id and record the outcome.

Policy rejections (zero refund) are successful cancellations. Only
malformed requests and unknown products raise.
"""

import logging
import secrets
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from config import settings
from core.data import QueryOptions
from core.domain import DomainEvent, DomainService, ValidationError, ensure_utc, parse_timestamp
from core.events import EventBus

from .data.catalog import ProductCatalog
from .data.store import InMemoryCancellationStore
from .domain.models import CancellationRecord, Product, RefundDecision
from .domain.policies import RefundPolicyEngine, WindowMatching
from .domain.validation import CancellationRequest, CancellationRequestValidator
from .errors import InvalidCancellationRequest, ProductNotFound

logger = logging.getLogger(__name__)


class CancellationEventType(str, Enum):
    STARTED = "cancellation.started"
    COMPLETED = "cancellation.completed"
    PARTIAL = "cancellation.partial"
    FAILED = "cancellation.failed"


def generate_cancellation_id(provider: str, prefix: Optional[str] = None) -> str:
    """e.g. CXL_DP_004815162 for a DragonPass product."""
    prefix = prefix or settings.cancellation_id_prefix
    provider_code = (provider[:2] or "XX").upper()
    return f"{prefix}_{provider_code}_{secrets.randbelow(10 ** 9):09d}"


class CancellationService(DomainService):
    """
    Handles cancellation requests end to end.

    Usage:
        service = CancellationService(ProductCatalog.with_sample_data())
        record = service.cancel({"product_id": "PROD-002"})
        record.to_response()
    """

    def __init__(
        self,
        catalog: ProductCatalog,
        store: Optional[InMemoryCancellationStore] = None,
        engine: Optional[RefundPolicyEngine] = None,
        event_bus: Optional[EventBus] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.catalog = catalog
        self.store = store if store is not None else InMemoryCancellationStore()
        self.engine = engine if engine is not None else RefundPolicyEngine(
            matching=WindowMatching(settings.window_matching)
        )
        self.event_bus = event_bus if event_bus is not None else EventBus()
        self.validator = CancellationRequestValidator()
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def execute(self, payload, evaluation_time: Optional[datetime] = None) -> CancellationRecord:
        return self.cancel(payload, evaluation_time)

    def cancel(
        self,
        payload: Union[CancellationRequest, Mapping[str, Any]],
        evaluation_time: Optional[datetime] = None,
    ) -> CancellationRecord:
        """
        Cancel the product a request refers to.

        Args:
            payload: A CancellationRequest or the raw request mapping
            evaluation_time: Moment treated as "now"; defaults to the service clock

        Returns:
            The stored CancellationRecord

        Raises:
            InvalidCancellationRequest: If the request fails validation
            ProductNotFound: If neither product_id nor booking_id resolves
        """
        correlation_id = str(uuid.uuid4())
        request = self._parse_request(payload, correlation_id)
        data = request.model_dump()

        errors = self.validator.validate(data)
        if errors:
            self._reject(request, errors, correlation_id)

        product = self.catalog.resolve(request.product_id, request.booking_id)
        if product is None:
            message = "Product not found"
            self._publish_failed(request, ProductNotFound.code, message, correlation_id)
            raise ProductNotFound(
                f"{message}: product_id={request.product_id!r} booking_id={request.booking_id!r}"
            )

        errors = self.validator.validate_for_product(data, product)
        if errors:
            self._reject(request, errors, correlation_id, product_id=product.id)

        self._publish(CancellationEventType.STARTED, correlation_id, {
            "product_id": product.id,
            "booking_id": request.booking_id or product.booking_id,
            "reason": request.reason,
        })

        now = ensure_utc(evaluation_time) if evaluation_time else self._clock()
        decision = self.engine.evaluate(product, now)
        record = self._build_record(request, product, decision, correlation_id, now)
        self.store.save(record)

        if decision.is_refundable and not decision.is_full_refund:
            event_type = CancellationEventType.PARTIAL
        else:
            event_type = CancellationEventType.COMPLETED
        self._publish(event_type, correlation_id, {
            "product_id": product.id,
            "cancellation_id": record.cancellation_id,
            "refund_amount": float(decision.refund_amount),
            "cancellation_fee": float(decision.cancellation_fee),
            "currency": decision.currency,
            "refund_policy": decision.policy_name,
        })

        logger.info(
            f"Cancellation {record.cancellation_id} issued for {product.id}: "
            f"{decision.policy_name}, refund {decision.refund_amount} {decision.currency}"
        )
        return record

    def quote(self, product_id: str, evaluation_time: Optional[datetime] = None) -> RefundDecision:
        """
        Evaluate a product's refund without cancelling anything.

        Raises:
            ProductNotFound: If the product does not exist
        """
        product = self.catalog.get_by_id(product_id)
        if product is None:
            raise ProductNotFound(f"Product not found: {product_id}")
        now = ensure_utc(evaluation_time) if evaluation_time else self._clock()
        return self.engine.evaluate(product, now)

    def get_cancellation(self, cancellation_id: str) -> Optional[CancellationRecord]:
        return self.store.get_by_id(cancellation_id)

    def list_cancellations(self, options: Optional[QueryOptions] = None) -> List[CancellationRecord]:
        options = options or QueryOptions(order_desc=True)
        return self.store.find(options).data

    # ----- helpers -----

    def _parse_request(self, payload, correlation_id: str) -> CancellationRequest:
        if isinstance(payload, CancellationRequest):
            return payload
        try:
            return CancellationRequest.model_validate(dict(payload))
        except PydanticValidationError as e:
            errors = [
                ValidationError(
                    field=".".join(str(part) for part in err["loc"]),
                    message=err["msg"],
                    code=err["type"],
                )
                for err in e.errors()
            ]
            self._publish_failed(None, InvalidCancellationRequest.code,
                                 "Invalid request", correlation_id)
            raise InvalidCancellationRequest(errors) from e

    def _reject(self, request: CancellationRequest, errors: List[ValidationError],
                correlation_id: str, product_id: Optional[str] = None) -> None:
        error = InvalidCancellationRequest(errors)
        logger.warning(str(error))
        self._publish_failed(request, error.code, str(error), correlation_id, product_id)
        raise error

    def _build_record(self, request: CancellationRequest, product: Product,
                      decision: RefundDecision, correlation_id: str,
                      now: datetime) -> CancellationRecord:
        return CancellationRecord(
            cancellation_id=generate_cancellation_id(product.provider),
            status="success",
            booking_id=request.booking_id or product.booking_id or "",
            lounge_id=request.lounge_id or product.lounge_id,
            refund_amount=decision.refund_amount,
            cancellation_fee=decision.cancellation_fee,
            currency=decision.currency,
            refund_policy=decision.policy_name,
            estimated_refund_time=settings.estimated_refund_time,
            message=decision.message,
            product_id=product.id,
            product_title=product.title,
            provider=product.provider,
            service_date_time=product.service_date_time,
            created_at=now,
            decision=decision,
            booking_time=parse_timestamp(request.booking_time),
            reason=request.reason,
            correlation_id=correlation_id,
        )

    def _publish_failed(self, request: Optional[CancellationRequest], error_code: str,
                        message: str, correlation_id: str,
                        product_id: Optional[str] = None) -> None:
        self._publish(CancellationEventType.FAILED, correlation_id, {
            "product_id": product_id or (request.product_id if request else None),
            "booking_id": request.booking_id if request else None,
            "error_code": error_code,
            "error_message": message,
        })

    def _publish(self, event_type: CancellationEventType, correlation_id: str,
                 data: Dict[str, Any]) -> None:
        self.event_bus.publish(DomainEvent(
            event_type=event_type.value,
            correlation_id=correlation_id,
            data=data,
        ))
