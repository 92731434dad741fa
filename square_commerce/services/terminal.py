"""
Square Terminal Service

Handles checkouts and interac refunds pushed to a paired Square Terminal.
"""

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple, Union

from ..builder import RequestBuilder, new_idempotency_key
from ..exceptions import RemoteError
from ..models.terminal import (
    CreateTerminalCheckoutRequest, CreateTerminalRefundRequest, DeviceCheckoutOptions,
    SearchTerminalRequest, TerminalCheckout, TerminalCheckoutDraft, TerminalRefund,
    TerminalRefundDraft,
)
from ..pagination import CursorPager
from ..utils import Timestamp, format_timestamp

if TYPE_CHECKING:
    from ..client import SquareClient


logger = logging.getLogger(__name__)


class DeviceOptionsBuilder(RequestBuilder):
    """Builds the DeviceCheckoutOptions of a terminal checkout"""

    request_model = DeviceCheckoutOptions
    required = ("device_id",)

    def device_id(self, device_id: str) -> 'DeviceOptionsBuilder':
        return self._set("device_id", device_id)

    def skip_receipt_screen(self, skip: bool = True) -> 'DeviceOptionsBuilder':
        return self._set("skip_receipt_screen", skip)

    def collect_signature(self, collect: bool = True) -> 'DeviceOptionsBuilder':
        return self._set("collect_signature", collect)

    def show_itemized_cart(self, show: bool = True) -> 'DeviceOptionsBuilder':
        return self._set("show_itemized_cart", show)

    def tip_settings(self, tip_settings: Dict[str, Any]) -> 'DeviceOptionsBuilder':
        return self._set("tip_settings", tip_settings)


DeviceOptions = Union[DeviceCheckoutOptions, DeviceOptionsBuilder]


def _split_key(values: Dict[str, Any]) -> Tuple[str, Dict[str, Any]]:
    values = dict(values)
    key = values.pop("idempotency_key", None) or new_idempotency_key()
    return key, values


class TerminalCheckoutBuilder(RequestBuilder):
    """Builds a CreateTerminalCheckoutRequest; an idempotency key is generated if unset"""

    required = ("amount_money", "device_options")

    def amount(self, amount: int, currency: str) -> 'TerminalCheckoutBuilder':
        return self._set("amount_money", {"amount": amount, "currency": currency})

    def device_options(self, options: DeviceOptions) -> 'TerminalCheckoutBuilder':
        return self._set("device_options", options)

    def reference_id(self, reference_id: str) -> 'TerminalCheckoutBuilder':
        return self._set("reference_id", reference_id)

    def note(self, note: str) -> 'TerminalCheckoutBuilder':
        return self._set("note", note)

    def order_id(self, order_id: str) -> 'TerminalCheckoutBuilder':
        return self._set("order_id", order_id)

    def customer_id(self, customer_id: str) -> 'TerminalCheckoutBuilder':
        return self._set("customer_id", customer_id)

    def deadline_duration(self, duration: str) -> 'TerminalCheckoutBuilder':
        """RFC 3339 duration such as 'PT5M'"""
        return self._set("deadline_duration", duration)

    def payment_type(self, payment_type: str) -> 'TerminalCheckoutBuilder':
        return self._set("payment_type", payment_type)

    def payment_options(self, options: Dict[str, Any]) -> 'TerminalCheckoutBuilder':
        return self._set("payment_options", options)

    def idempotency_key(self, key: str) -> 'TerminalCheckoutBuilder':
        return self._set("idempotency_key", key)

    def _assemble(self, values: Dict[str, Any]) -> CreateTerminalCheckoutRequest:
        key, values = _split_key(values)
        return CreateTerminalCheckoutRequest(idempotency_key=key,
                                             checkout=TerminalCheckoutDraft(**values))


class TerminalRefundBuilder(RequestBuilder):
    """Builds a CreateTerminalRefundRequest; an idempotency key is generated if unset"""

    required = ("payment_id", "amount_money", "reason", "device_id")

    def payment_id(self, payment_id: str) -> 'TerminalRefundBuilder':
        return self._set("payment_id", payment_id)

    def amount(self, amount: int, currency: str) -> 'TerminalRefundBuilder':
        return self._set("amount_money", {"amount": amount, "currency": currency})

    def reason(self, reason: str) -> 'TerminalRefundBuilder':
        return self._set("reason", reason)

    def device_id(self, device_id: str) -> 'TerminalRefundBuilder':
        return self._set("device_id", device_id)

    def deadline_duration(self, duration: str) -> 'TerminalRefundBuilder':
        return self._set("deadline_duration", duration)

    def idempotency_key(self, key: str) -> 'TerminalRefundBuilder':
        return self._set("idempotency_key", key)

    def _assemble(self, values: Dict[str, Any]) -> CreateTerminalRefundRequest:
        key, values = _split_key(values)
        return CreateTerminalRefundRequest(idempotency_key=key,
                                           refund=TerminalRefundDraft(**values))


class TerminalSearchBuilder(RequestBuilder):
    """Builds a SearchTerminalRequest for either checkouts or refunds"""

    def device_id(self, device_id: str) -> 'TerminalSearchBuilder':
        return self._set("device_id", device_id)

    def status(self, status: str) -> 'TerminalSearchBuilder':
        """PENDING, IN_PROGRESS, CANCEL_REQUESTED, CANCELED or COMPLETED"""
        return self._set("status", status)

    def created_at(self, start_at: Timestamp, end_at: Timestamp) -> 'TerminalSearchBuilder':
        return self._set("created_at", {"start_at": format_timestamp(start_at),
                                        "end_at": format_timestamp(end_at)})

    def sort(self, order: str = "DESC") -> 'TerminalSearchBuilder':
        return self._set("sort", {"sort_order": order})

    def limit(self, limit: int) -> 'TerminalSearchBuilder':
        return self._set("limit", limit)

    def _assemble(self, values: Dict[str, Any]) -> SearchTerminalRequest:
        query_filter = {name: values[name] for name in ("device_id", "status", "created_at")
                        if name in values}
        query: Dict[str, Any] = {}
        if query_filter:
            query["filter"] = query_filter
        if "sort" in values:
            query["sort"] = values["sort"]

        request: Dict[str, Any] = {}
        if query:
            request["query"] = query
        if "limit" in values:
            request["limit"] = values["limit"]
        return SearchTerminalRequest(**request)


class TerminalService:
    """Service for Square Terminal checkouts and refunds"""

    def __init__(self, client: 'SquareClient'):
        """
        Initialize TerminalService

        Args:
            client: Square API client instance
        """
        self.client = client

    def checkout_builder(self) -> TerminalCheckoutBuilder:
        """Builder whose build() sends the checkout to the device"""
        return TerminalCheckoutBuilder(dispatch=self.create_checkout)

    def refund_builder(self) -> TerminalRefundBuilder:
        """Builder whose build() sends the refund to the device"""
        return TerminalRefundBuilder(dispatch=self.create_refund)

    def checkout_search_builder(self) -> TerminalSearchBuilder:
        """Builder whose build() returns every matching checkout"""
        return TerminalSearchBuilder(dispatch=self.search_checkouts)

    def refund_search_builder(self) -> TerminalSearchBuilder:
        """Builder whose build() returns every matching refund"""
        return TerminalSearchBuilder(dispatch=self.search_refunds)

    async def create_checkout(self, request: CreateTerminalCheckoutRequest) -> TerminalCheckout:
        checkout = request.checkout
        logger.info(f"Creating terminal checkout of {checkout.amount_money.amount} "
                    f"{checkout.amount_money.currency} on {checkout.device_options.device_id}")
        response = await self.client.post("/terminals/checkouts", data=request.to_payload())
        result = _checkout_from(response)
        logger.info(f"Created terminal checkout with ID: {result.id}")
        return result

    async def get_checkout(self, checkout_id: str) -> TerminalCheckout:
        logger.info(f"Fetching terminal checkout: {checkout_id}")
        response = await self.client.get(f"/terminals/checkouts/{checkout_id}",
                                         resource_id=checkout_id)
        return _checkout_from(response)

    async def cancel_checkout(self, checkout_id: str) -> TerminalCheckout:
        """Ask the device to cancel a checkout that has not completed"""
        logger.info(f"Cancelling terminal checkout: {checkout_id}")
        response = await self.client.post(f"/terminals/checkouts/{checkout_id}/cancel",
                                          data={}, resource_id=checkout_id)
        return _checkout_from(response)

    def search_checkout_pages(self, request: Optional[SearchTerminalRequest] = None
                              ) -> CursorPager[TerminalCheckout]:
        return self._search("/terminals/checkouts/search", "checkouts", TerminalCheckout, request)

    async def search_checkouts(self, request: Optional[SearchTerminalRequest] = None
                               ) -> List[TerminalCheckout]:
        return await self.search_checkout_pages(request).collect()

    async def create_refund(self, request: CreateTerminalRefundRequest) -> TerminalRefund:
        logger.info(f"Creating terminal refund for payment {request.refund.payment_id}")
        response = await self.client.post("/terminals/refunds", data=request.to_payload())
        result = _refund_from(response)
        logger.info(f"Created terminal refund with ID: {result.id}")
        return result

    async def get_refund(self, refund_id: str) -> TerminalRefund:
        logger.info(f"Fetching terminal refund: {refund_id}")
        response = await self.client.get(f"/terminals/refunds/{refund_id}",
                                         resource_id=refund_id)
        return _refund_from(response)

    async def cancel_refund(self, refund_id: str) -> TerminalRefund:
        logger.info(f"Cancelling terminal refund: {refund_id}")
        response = await self.client.post(f"/terminals/refunds/{refund_id}/cancel",
                                          data={}, resource_id=refund_id)
        return _refund_from(response)

    def search_refund_pages(self, request: Optional[SearchTerminalRequest] = None
                            ) -> CursorPager[TerminalRefund]:
        return self._search("/terminals/refunds/search", "refunds", TerminalRefund, request)

    async def search_refunds(self, request: Optional[SearchTerminalRequest] = None
                             ) -> List[TerminalRefund]:
        return await self.search_refund_pages(request).collect()

    def _search(self, endpoint: str, key: str, model: Any,
                request: Optional[SearchTerminalRequest]) -> CursorPager[Any]:
        request = request or SearchTerminalRequest()

        async def fetch_page(cursor: Optional[str]) -> Tuple[List[Any], Optional[str]]:
            logger.info(f"Searching terminal {key}")
            payload = request.to_payload()
            if cursor:
                payload["cursor"] = cursor
            response = await self.client.post(endpoint, data=payload)
            items = [model.model_validate(item) for item in response.get(key, [])]
            return items, response.get("cursor")

        return CursorPager(fetch_page, cursor=request.cursor)


def _checkout_from(response: Dict[str, Any]) -> TerminalCheckout:
    checkout = response.get("checkout")
    if not checkout:
        raise RemoteError("Square returned no terminal checkout data", response=str(response))
    return TerminalCheckout.model_validate(checkout)


def _refund_from(response: Dict[str, Any]) -> TerminalRefund:
    refund = response.get("refund")
    if not refund:
        raise RemoteError("Square returned no terminal refund data", response=str(response))
    return TerminalRefund.model_validate(refund)
