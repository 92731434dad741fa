from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from pydantic import Field

from .common import Address, Money, SquareModel, SquareRequest
from .orders import OrderDraft


class QuickPay(SquareModel):
    """Ad hoc single-item checkout; Square creates the order itself"""
    name: str
    price_money: Money
    location_id: str


class CheckoutOptions(SquareModel):
    allow_tipping: Optional[bool] = None
    custom_fields: Optional[Tuple[Dict[str, Any], ...]] = None
    subscription_plan_id: Optional[str] = None
    redirect_url: Optional[str] = None
    merchant_support_email: Optional[str] = None
    ask_for_shipping_address: Optional[bool] = None
    accepted_payment_methods: Optional[Dict[str, Any]] = None
    app_fee_money: Optional[Money] = None
    shipping_fee: Optional[Dict[str, Any]] = None
    enable_coupon: Optional[bool] = None
    enable_loyalty: Optional[bool] = None


class PrePopulatedData(SquareModel):
    buyer_email: Optional[str] = None
    buyer_phone_number: Optional[str] = None
    buyer_address: Optional[Address] = None


class PaymentLink(SquareModel):
    id: Optional[str] = None
    version: Optional[int] = None
    description: Optional[str] = None
    order_id: Optional[str] = None
    checkout_options: Optional[CheckoutOptions] = None
    pre_populated_data: Optional[PrePopulatedData] = None
    url: Optional[str] = None
    long_url: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    payment_note: Optional[str] = None


class CreatePaymentLinkRequest(SquareRequest):
    idempotency_key: str
    description: Optional[str] = None
    quick_pay: Optional[QuickPay] = None
    order: Optional[OrderDraft] = None
    checkout_options: Optional[CheckoutOptions] = None
    pre_populated_data: Optional[PrePopulatedData] = None
    payment_note: Optional[str] = None
    source: Optional[str] = None


class PaymentLinkDraft(SquareRequest):
    """Writable subset of a payment link"""
    version: int = Field(ge=1)
    description: Optional[str] = None
    checkout_options: Optional[CheckoutOptions] = None
    pre_populated_data: Optional[PrePopulatedData] = None
    payment_note: Optional[str] = None


class UpdatePaymentLinkRequest(SquareRequest):
    link_id: str = Field(exclude=True)
    payment_link: PaymentLinkDraft


class PaymentLinkResult(SquareModel):
    """A payment link plus the order Square created for it, if any"""
    payment_link: Optional[PaymentLink] = None
    related_resources: Optional[Dict[str, List[Dict[str, Any]]]] = None
