"""
Square Cards Service

Stores, lists and disables cards on file.
"""

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

from ..builder import RequestBuilder, new_idempotency_key
from ..exceptions import RemoteError
from ..models.cards import Card, CardDraft, CreateCardRequest
from ..models.common import Address
from ..pagination import CursorPager

if TYPE_CHECKING:
    from ..client import SquareClient


logger = logging.getLogger(__name__)


class CardBuilder(RequestBuilder):
    """Builds a CreateCardRequest; an idempotency key is generated if unset"""

    required = ("source_id", "customer_id")

    def source_id(self, source_id: str) -> 'CardBuilder':
        return self._set("source_id", source_id)

    def customer_id(self, customer_id: str) -> 'CardBuilder':
        return self._set("customer_id", customer_id)

    def cardholder_name(self, name: str) -> 'CardBuilder':
        return self._set("cardholder_name", name)

    def billing_address(self, address: Address) -> 'CardBuilder':
        return self._set("billing_address", address)

    def reference_id(self, reference_id: str) -> 'CardBuilder':
        return self._set("reference_id", reference_id)

    def verification_token(self, token: str) -> 'CardBuilder':
        return self._set("verification_token", token)

    def idempotency_key(self, key: str) -> 'CardBuilder':
        return self._set("idempotency_key", key)

    def _assemble(self, values: Dict[str, Any]) -> CreateCardRequest:
        values = dict(values)
        envelope = {
            "idempotency_key": values.pop("idempotency_key", None) or new_idempotency_key(),
            "source_id": values.pop("source_id"),
        }
        if "verification_token" in values:
            envelope["verification_token"] = values.pop("verification_token")
        return CreateCardRequest(card=CardDraft(**values), **envelope)


class CardsService:
    """Service for cards on file"""

    def __init__(self, client: 'SquareClient'):
        self.client = client

    def builder(self) -> CardBuilder:
        """Builder whose build() stores the card"""
        return CardBuilder(dispatch=self.create)

    def list(self, customer_id: Optional[str] = None,
             include_disabled: Optional[bool] = None,
             reference_id: Optional[str] = None,
             sort_order: Optional[str] = None) -> CursorPager[Card]:
        """List cards, optionally for one customer"""
        params = {
            "customer_id": customer_id,
            "include_disabled": include_disabled,
            "reference_id": reference_id,
            "sort_order": sort_order,
        }

        async def fetch_page(cursor: Optional[str]) -> Tuple[List[Card], Optional[str]]:
            logger.info("Listing cards")
            response = await self.client.get("/cards", params={**params, "cursor": cursor})
            cards = [Card.model_validate(item) for item in response.get("cards", [])]
            return cards, response.get("cursor")

        return CursorPager(fetch_page)

    async def retrieve(self, card_id: str) -> Card:
        logger.info(f"Fetching card: {card_id}")
        response = await self.client.get(f"/cards/{card_id}", resource_id=card_id)
        return _card_from(response)

    async def create(self, request: CreateCardRequest) -> Card:
        logger.info(f"Storing card for customer: {request.card.customer_id}")
        response = await self.client.post("/cards", data=request.to_payload())
        card = _card_from(response)
        logger.info(f"Stored card with ID: {card.id}")
        return card

    async def disable(self, card_id: str) -> Card:
        logger.info(f"Disabling card: {card_id}")
        response = await self.client.post(f"/cards/{card_id}/disable", data={},
                                          resource_id=card_id)
        return _card_from(response)


def _card_from(response: Dict[str, Any]) -> Card:
    card = response.get("card")
    if not card:
        raise RemoteError("Square returned no card data", response=str(response))
    return Card.model_validate(card)
