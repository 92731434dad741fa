from __future__ import annotations

from typing import Any, Dict, Optional

from .common import Address, Money, SquareModel, SquareRequest


class Payment(SquareModel):
    id: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    amount_money: Optional[Money] = None
    tip_money: Optional[Money] = None
    total_money: Optional[Money] = None
    approved_money: Optional[Money] = None
    status: Optional[str] = None
    source_type: Optional[str] = None
    card_details: Optional[Dict[str, Any]] = None
    location_id: Optional[str] = None
    order_id: Optional[str] = None
    reference_id: Optional[str] = None
    customer_id: Optional[str] = None
    note: Optional[str] = None
    receipt_number: Optional[str] = None
    receipt_url: Optional[str] = None
    version_token: Optional[str] = None


class CreatePaymentRequest(SquareRequest):
    idempotency_key: str
    source_id: str
    amount_money: Money
    tip_money: Optional[Money] = None
    autocomplete: Optional[bool] = None
    customer_id: Optional[str] = None
    location_id: Optional[str] = None
    order_id: Optional[str] = None
    reference_id: Optional[str] = None
    verification_token: Optional[str] = None
    note: Optional[str] = None
    buyer_email_address: Optional[str] = None
    billing_address: Optional[Address] = None
