"""
Square Checkout Service

Handles online checkout through payment links: a hosted page where the buyer
pays for either an order or a quick-pay amount.
"""

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple, Union

from ..builder import RequestBuilder, new_idempotency_key
from ..exceptions import RemoteError
from ..models.checkout import (
    CheckoutOptions, CreatePaymentLinkRequest, PaymentLink, PaymentLinkDraft, PaymentLinkResult,
    PrePopulatedData, QuickPay, UpdatePaymentLinkRequest,
)
from ..models.common import DeleteResult
from ..models.orders import OrderDraft
from ..pagination import CursorPager
from .orders import OrderDraftBuilder

if TYPE_CHECKING:
    from ..client import SquareClient


logger = logging.getLogger(__name__)


class QuickPayBuilder(RequestBuilder):
    """Builds a QuickPay for a single named amount"""

    request_model = QuickPay
    required = ("name", "price_money", "location_id")

    def name(self, name: str) -> 'QuickPayBuilder':
        return self._set("name", name)

    def price(self, amount: int, currency: str) -> 'QuickPayBuilder':
        return self._set("price_money", {"amount": amount, "currency": currency})

    def location_id(self, location_id: str) -> 'QuickPayBuilder':
        return self._set("location_id", location_id)


class PaymentLinkBuilder(RequestBuilder):
    """
    Builds a CreatePaymentLinkRequest

    The link charges for exactly one of a quick-pay amount or an order. An
    idempotency key is generated if unset.
    """

    exclusive = (("quick_pay", "order"),)
    one_of = (("quick_pay", "order"),)

    def quick_pay(self, quick_pay: Union[QuickPay, QuickPayBuilder]) -> 'PaymentLinkBuilder':
        return self._set("quick_pay", quick_pay)

    def order(self, order: Union[OrderDraft, OrderDraftBuilder]) -> 'PaymentLinkBuilder':
        return self._set("order", order)

    def description(self, description: str) -> 'PaymentLinkBuilder':
        return self._set("description", description)

    def payment_note(self, note: str) -> 'PaymentLinkBuilder':
        return self._set("payment_note", note)

    def checkout_options(self, options: Union[CheckoutOptions, Dict[str, Any]]) -> 'PaymentLinkBuilder':
        return self._set("checkout_options", options)

    def pre_populated_data(self, data: Union[PrePopulatedData, Dict[str, Any]]) -> 'PaymentLinkBuilder':
        return self._set("pre_populated_data", data)

    def source(self, source: str) -> 'PaymentLinkBuilder':
        return self._set("source", source)

    def idempotency_key(self, key: str) -> 'PaymentLinkBuilder':
        return self._set("idempotency_key", key)

    def _assemble(self, values: Dict[str, Any]) -> CreatePaymentLinkRequest:
        values = dict(values)
        values.setdefault("idempotency_key", new_idempotency_key())
        return CreatePaymentLinkRequest(**values)


class PaymentLinkUpdateBuilder(RequestBuilder):
    """Builds an UpdatePaymentLinkRequest; Square needs the link's current version"""

    required = ("link_id", "version")

    def link_id(self, link_id: str) -> 'PaymentLinkUpdateBuilder':
        return self._set("link_id", link_id)

    def version(self, version: int) -> 'PaymentLinkUpdateBuilder':
        return self._set("version", version)

    def description(self, description: str) -> 'PaymentLinkUpdateBuilder':
        return self._set("description", description)

    def payment_note(self, note: str) -> 'PaymentLinkUpdateBuilder':
        return self._set("payment_note", note)

    def checkout_options(self, options: Union[CheckoutOptions, Dict[str, Any]]) -> 'PaymentLinkUpdateBuilder':
        return self._set("checkout_options", options)

    def pre_populated_data(self, data: Union[PrePopulatedData, Dict[str, Any]]) -> 'PaymentLinkUpdateBuilder':
        return self._set("pre_populated_data", data)

    def _assemble(self, values: Dict[str, Any]) -> UpdatePaymentLinkRequest:
        values = dict(values)
        link_id = values.pop("link_id")
        return UpdatePaymentLinkRequest(link_id=link_id, payment_link=PaymentLinkDraft(**values))


class CheckoutService:
    """Service for Square payment links"""

    def __init__(self, client: 'SquareClient'):
        self.client = client

    def payment_link_builder(self) -> PaymentLinkBuilder:
        """Builder whose build() creates the payment link"""
        return PaymentLinkBuilder(dispatch=self.create_payment_link)

    def payment_link_update_builder(self, link_id: Optional[str] = None) -> PaymentLinkUpdateBuilder:
        """Builder whose build() updates the payment link"""
        builder = PaymentLinkUpdateBuilder(dispatch=self.update_payment_link)
        if link_id is not None:
            builder.link_id(link_id)
        return builder

    def list_payment_links(self, limit: Optional[int] = None) -> CursorPager[PaymentLink]:
        """List the seller's payment links"""
        async def fetch_page(cursor: Optional[str]) -> Tuple[List[PaymentLink], Optional[str]]:
            logger.info("Listing payment links")
            response = await self.client.get("/online-checkout/payment-links",
                                             params={"limit": limit, "cursor": cursor})
            links = [PaymentLink.model_validate(item)
                     for item in response.get("payment_links", [])]
            return links, response.get("cursor")

        return CursorPager(fetch_page)

    async def retrieve_payment_link(self, link_id: str) -> PaymentLink:
        """
        Get a payment link by ID

        Raises:
            NotFoundError: If the link does not exist
        """
        logger.info(f"Fetching payment link: {link_id}")
        response = await self.client.get(f"/online-checkout/payment-links/{link_id}",
                                         resource_id=link_id)
        return _payment_link_from(response)

    async def create_payment_link(self, request: CreatePaymentLinkRequest) -> PaymentLinkResult:
        """
        Create a payment link

        Returns:
            The link and, under related_resources, the order Square made for it
        """
        logger.info("Creating payment link")
        response = await self.client.post("/online-checkout/payment-links",
                                          data=request.to_payload())
        _payment_link_from(response)
        result = PaymentLinkResult.model_validate(response)
        logger.info(f"Created payment link {result.payment_link.id}: {result.payment_link.url}")
        return result

    async def update_payment_link(self, request: UpdatePaymentLinkRequest) -> PaymentLink:
        logger.info(f"Updating payment link: {request.link_id}")
        response = await self.client.put(f"/online-checkout/payment-links/{request.link_id}",
                                         data=request.to_payload(),
                                         resource_id=request.link_id)
        return _payment_link_from(response)

    async def delete_payment_link(self, link_id: str) -> DeleteResult:
        """Delete a payment link; Square also cancels the order behind it"""
        logger.info(f"Deleting payment link: {link_id}")
        response = await self.client.delete(f"/online-checkout/payment-links/{link_id}",
                                            resource_id=link_id)
        return DeleteResult.model_validate(response)


def _payment_link_from(response: Dict[str, Any]) -> PaymentLink:
    link = response.get("payment_link")
    if not link:
        raise RemoteError("Square returned no payment link data", response=str(response))
    return PaymentLink.model_validate(link)
