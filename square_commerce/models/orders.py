from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from pydantic import Field

from .common import Money, SquareModel, SquareRequest


class OrderLineItem(SquareModel):
    uid: Optional[str] = None
    name: Optional[str] = None
    quantity: Optional[str] = None
    note: Optional[str] = None
    catalog_object_id: Optional[str] = None
    catalog_version: Optional[int] = None
    variation_name: Optional[str] = None
    item_type: Optional[str] = None
    base_price_money: Optional[Money] = None
    gross_sales_money: Optional[Money] = None
    total_tax_money: Optional[Money] = None
    total_discount_money: Optional[Money] = None
    total_money: Optional[Money] = None
    metadata: Optional[Dict[str, str]] = None


class OrderServiceCharge(SquareModel):
    uid: Optional[str] = None
    name: Optional[str] = None
    catalog_object_id: Optional[str] = None
    percentage: Optional[str] = None
    amount_money: Optional[Money] = None
    applied_money: Optional[Money] = None
    total_money: Optional[Money] = None
    calculation_phase: Optional[str] = None
    taxable: Optional[bool] = None


class Order(SquareModel):
    id: Optional[str] = None
    location_id: Optional[str] = None
    reference_id: Optional[str] = None
    customer_id: Optional[str] = None
    ticket_name: Optional[str] = None
    state: Optional[str] = None
    version: Optional[int] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    closed_at: Optional[str] = None
    source: Optional[Dict[str, Any]] = None
    line_items: Optional[List[OrderLineItem]] = None
    service_charges: Optional[List[OrderServiceCharge]] = None
    fulfillments: Optional[List[Dict[str, Any]]] = None
    tenders: Optional[List[Dict[str, Any]]] = None
    net_amounts: Optional[Dict[str, Any]] = None
    total_money: Optional[Money] = None
    total_tax_money: Optional[Money] = None
    total_discount_money: Optional[Money] = None
    total_tip_money: Optional[Money] = None
    total_service_charge_money: Optional[Money] = None
    metadata: Optional[Dict[str, str]] = None


class OrderEntry(SquareModel):
    """Summary row returned by order search when return_entries is set"""
    order_id: Optional[str] = None
    version: Optional[int] = None
    location_id: Optional[str] = None


class OrderDraft(SquareRequest):
    """Writable subset of an order"""
    location_id: Optional[str] = None
    reference_id: Optional[str] = None
    customer_id: Optional[str] = None
    ticket_name: Optional[str] = None
    state: Optional[str] = None
    version: Optional[int] = None
    line_items: Optional[Tuple[OrderLineItem, ...]] = None
    service_charges: Optional[Tuple[OrderServiceCharge, ...]] = None
    metadata: Optional[Dict[str, str]] = None


class CreateOrderRequest(SquareRequest):
    idempotency_key: str
    order: OrderDraft


class UpdateOrderRequest(SquareRequest):
    order_id: str = Field(exclude=True)
    idempotency_key: str
    order: OrderDraft
    fields_to_clear: Optional[Tuple[str, ...]] = None


class CalculateOrderRequest(SquareRequest):
    order: OrderDraft
    proposed_rewards: Optional[Tuple[Dict[str, Any], ...]] = None


class PayOrderRequest(SquareRequest):
    order_id: str = Field(exclude=True)
    idempotency_key: str
    order_version: Optional[int] = None
    payment_ids: Tuple[str, ...]


class SearchOrdersRequest(SquareRequest):
    location_ids: Tuple[str, ...]
    cursor: Optional[str] = None
    limit: Optional[int] = None
    query: Optional[Dict[str, Any]] = None
    return_entries: Optional[bool] = None
