from __future__ import annotations

from typing import Any, Dict, List, Optional

from .common import Money, SquareModel, SquareRequest


class DeviceCheckoutOptions(SquareModel):
    device_id: str
    skip_receipt_screen: Optional[bool] = None
    collect_signature: Optional[bool] = None
    show_itemized_cart: Optional[bool] = None
    tip_settings: Optional[Dict[str, Any]] = None


class TerminalCheckout(SquareModel):
    id: Optional[str] = None
    amount_money: Optional[Money] = None
    reference_id: Optional[str] = None
    note: Optional[str] = None
    order_id: Optional[str] = None
    customer_id: Optional[str] = None
    device_options: Optional[DeviceCheckoutOptions] = None
    deadline_duration: Optional[str] = None
    status: Optional[str] = None
    cancel_reason: Optional[str] = None
    payment_ids: Optional[List[str]] = None
    payment_type: Optional[str] = None
    location_id: Optional[str] = None
    app_id: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class TerminalCheckoutDraft(SquareRequest):
    amount_money: Money
    device_options: DeviceCheckoutOptions
    reference_id: Optional[str] = None
    note: Optional[str] = None
    order_id: Optional[str] = None
    customer_id: Optional[str] = None
    deadline_duration: Optional[str] = None
    payment_type: Optional[str] = None
    payment_options: Optional[Dict[str, Any]] = None


class CreateTerminalCheckoutRequest(SquareRequest):
    idempotency_key: str
    checkout: TerminalCheckoutDraft


class TerminalRefund(SquareModel):
    id: Optional[str] = None
    refund_id: Optional[str] = None
    payment_id: Optional[str] = None
    order_id: Optional[str] = None
    amount_money: Optional[Money] = None
    reason: Optional[str] = None
    device_id: Optional[str] = None
    deadline_duration: Optional[str] = None
    status: Optional[str] = None
    cancel_reason: Optional[str] = None
    location_id: Optional[str] = None
    app_id: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class TerminalRefundDraft(SquareRequest):
    payment_id: str
    amount_money: Money
    reason: str
    device_id: str
    deadline_duration: Optional[str] = None


class CreateTerminalRefundRequest(SquareRequest):
    idempotency_key: str
    refund: TerminalRefundDraft


class SearchTerminalRequest(SquareRequest):
    """Search body shared by terminal checkouts and terminal refunds"""
    query: Optional[Dict[str, Any]] = None
    cursor: Optional[str] = None
    limit: Optional[int] = None

