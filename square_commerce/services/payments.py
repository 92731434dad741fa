"""
Square Payments Service

Handles taking, completing and cancelling payments.
"""

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

from ..builder import RequestBuilder, new_idempotency_key
from ..exceptions import RemoteError
from ..models.common import Address
from ..models.payments import CreatePaymentRequest, Payment
from ..pagination import CursorPager
from ..utils import Timestamp, format_timestamp

if TYPE_CHECKING:
    from ..client import SquareClient


logger = logging.getLogger(__name__)


class PaymentBuilder(RequestBuilder):
    """Builds a CreatePaymentRequest; an idempotency key is generated if unset"""

    required = ("source_id", "amount_money")

    def source_id(self, source_id: str) -> 'PaymentBuilder':
        return self._set("source_id", source_id)

    def amount(self, amount: int, currency: str) -> 'PaymentBuilder':
        """Amount in the smallest currency unit (e.g. cents)"""
        return self._set("amount_money", {"amount": amount, "currency": currency})

    def tip(self, amount: int, currency: str) -> 'PaymentBuilder':
        return self._set("tip_money", {"amount": amount, "currency": currency})

    def autocomplete(self, autocomplete: bool = True) -> 'PaymentBuilder':
        return self._set("autocomplete", autocomplete)

    def customer_id(self, customer_id: str) -> 'PaymentBuilder':
        return self._set("customer_id", customer_id)

    def location_id(self, location_id: str) -> 'PaymentBuilder':
        return self._set("location_id", location_id)

    def order_id(self, order_id: str) -> 'PaymentBuilder':
        return self._set("order_id", order_id)

    def reference_id(self, reference_id: str) -> 'PaymentBuilder':
        return self._set("reference_id", reference_id)

    def verification_token(self, token: str) -> 'PaymentBuilder':
        return self._set("verification_token", token)

    def note(self, note: str) -> 'PaymentBuilder':
        return self._set("note", note)

    def buyer_email_address(self, email: str) -> 'PaymentBuilder':
        return self._set("buyer_email_address", email)

    def billing_address(self, address: Address) -> 'PaymentBuilder':
        return self._set("billing_address", address)

    def idempotency_key(self, key: str) -> 'PaymentBuilder':
        return self._set("idempotency_key", key)

    def _assemble(self, values: Dict[str, Any]) -> CreatePaymentRequest:
        values = dict(values)
        values.setdefault("idempotency_key", new_idempotency_key())
        return CreatePaymentRequest(**values)


class PaymentsService:
    """Service for Square payments"""

    def __init__(self, client: 'SquareClient'):
        self.client = client

    def builder(self) -> PaymentBuilder:
        """Builder whose build() creates the payment"""
        return PaymentBuilder(dispatch=self.create)

    def list(self, begin_time: Optional[Timestamp] = None,
             end_time: Optional[Timestamp] = None,
             sort_order: Optional[str] = None,
             location_id: Optional[str] = None,
             limit: Optional[int] = None) -> CursorPager[Payment]:
        """List payments taken by the account"""
        params = {
            "begin_time": format_timestamp(begin_time),
            "end_time": format_timestamp(end_time),
            "sort_order": sort_order,
            "location_id": location_id,
            "limit": limit,
        }

        async def fetch_page(cursor: Optional[str]) -> Tuple[List[Payment], Optional[str]]:
            logger.info("Listing payments")
            response = await self.client.get("/payments", params={**params, "cursor": cursor})
            payments = [Payment.model_validate(item) for item in response.get("payments", [])]
            return payments, response.get("cursor")

        return CursorPager(fetch_page)

    async def retrieve(self, payment_id: str) -> Payment:
        logger.info(f"Fetching payment: {payment_id}")
        response = await self.client.get(f"/payments/{payment_id}", resource_id=payment_id)
        return _payment_from(response)

    async def create(self, request: CreatePaymentRequest) -> Payment:
        logger.info(f"Creating payment of {request.amount_money.amount} "
                    f"{request.amount_money.currency}")
        response = await self.client.post("/payments", data=request.to_payload())
        payment = _payment_from(response)
        logger.info(f"Created payment with ID: {payment.id}")
        return payment

    async def cancel(self, payment_id: str) -> Payment:
        logger.info(f"Cancelling payment: {payment_id}")
        response = await self.client.post(f"/payments/{payment_id}/cancel", data={},
                                          resource_id=payment_id)
        return _payment_from(response)

    async def complete(self, payment_id: str, version_token: Optional[str] = None) -> Payment:
        logger.info(f"Completing payment: {payment_id}")
        data = {"version_token": version_token} if version_token else {}
        response = await self.client.post(f"/payments/{payment_id}/complete", data=data,
                                          resource_id=payment_id)
        return _payment_from(response)


def _payment_from(response: Dict[str, Any]) -> Payment:
    payment = response.get("payment")
    if not payment:
        raise RemoteError("Square returned no payment data", response=str(response))
    return Payment.model_validate(payment)
