from __future__ import annotations

from typing import Optional

from .common import Address, SquareModel, SquareRequest


class Card(SquareModel):
    id: Optional[str] = None
    card_brand: Optional[str] = None
    last_4: Optional[str] = None
    exp_month: Optional[int] = None
    exp_year: Optional[int] = None
    cardholder_name: Optional[str] = None
    billing_address: Optional[Address] = None
    fingerprint: Optional[str] = None
    customer_id: Optional[str] = None
    merchant_id: Optional[str] = None
    reference_id: Optional[str] = None
    enabled: Optional[bool] = None
    card_type: Optional[str] = None
    prepaid_type: Optional[str] = None
    bin: Optional[str] = None
    version: Optional[int] = None


class CardDraft(SquareRequest):
    customer_id: str
    cardholder_name: Optional[str] = None
    billing_address: Optional[Address] = None
    reference_id: Optional[str] = None


class CreateCardRequest(SquareRequest):
    idempotency_key: str
    source_id: str
    verification_token: Optional[str] = None
    card: CardDraft
