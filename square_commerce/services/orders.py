"""
Square Orders Service

Handles creating, searching, updating, pricing and paying for orders.
"""

import logging
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Tuple, Union

from ..builder import RequestBuilder, new_idempotency_key
from ..exceptions import RemoteError
from ..models.orders import (
    CalculateOrderRequest, CreateOrderRequest, Order, OrderDraft, OrderEntry, OrderLineItem,
    OrderServiceCharge, PayOrderRequest, SearchOrdersRequest, UpdateOrderRequest,
)
from ..pagination import CursorPager
from ..utils import Timestamp, format_timestamp

if TYPE_CHECKING:
    from ..client import SquareClient


logger = logging.getLogger(__name__)


class LineItemBuilder(RequestBuilder):
    """Builds one OrderLineItem, either from the catalog or ad hoc by name and price"""

    request_model = OrderLineItem
    required = ("quantity",)
    exclusive = (("catalog_object_id", "name"),)
    one_of = (("catalog_object_id", "name"),)

    def quantity(self, quantity: Union[int, str]) -> 'LineItemBuilder':
        """Square carries quantities as decimal strings"""
        return self._set("quantity", None if quantity is None else str(quantity))

    def catalog_object_id(self, object_id: str) -> 'LineItemBuilder':
        return self._set("catalog_object_id", object_id)

    def catalog_version(self, version: int) -> 'LineItemBuilder':
        return self._set("catalog_version", version)

    def name(self, name: str) -> 'LineItemBuilder':
        return self._set("name", name)

    def variation_name(self, variation_name: str) -> 'LineItemBuilder':
        return self._set("variation_name", variation_name)

    def base_price(self, amount: int, currency: str) -> 'LineItemBuilder':
        return self._set("base_price_money", {"amount": amount, "currency": currency})

    def item_type(self, item_type: str) -> 'LineItemBuilder':
        return self._set("item_type", item_type)

    def note(self, note: str) -> 'LineItemBuilder':
        return self._set("note", note)


class ServiceChargeBuilder(RequestBuilder):
    """Builds one OrderServiceCharge; either a flat amount or a percentage"""

    request_model = OrderServiceCharge
    required = ("name", "calculation_phase")
    exclusive = (("amount_money", "percentage"),)
    one_of = (("amount_money", "percentage"),)

    def name(self, name: str) -> 'ServiceChargeBuilder':
        return self._set("name", name)

    def amount(self, amount: int, currency: str) -> 'ServiceChargeBuilder':
        return self._set("amount_money", {"amount": amount, "currency": currency})

    def percentage(self, percentage: str) -> 'ServiceChargeBuilder':
        return self._set("percentage", percentage)

    def calculation_phase(self, phase: str) -> 'ServiceChargeBuilder':
        """SUBTOTAL_PHASE or TOTAL_PHASE"""
        return self._set("calculation_phase", phase)

    def taxable(self, taxable: bool = True) -> 'ServiceChargeBuilder':
        return self._set("taxable", taxable)


LineItem = Union[OrderLineItem, LineItemBuilder]
ServiceCharge = Union[OrderServiceCharge, ServiceChargeBuilder]


class OrderDraftBuilder(RequestBuilder):
    """Builds an OrderDraft, the order body nested in other requests"""

    request_model = OrderDraft
    required = ("location_id",)

    def location_id(self, location_id: str) -> 'OrderDraftBuilder':
        return self._set("location_id", location_id)

    def customer_id(self, customer_id: str) -> 'OrderDraftBuilder':
        return self._set("customer_id", customer_id)

    def reference_id(self, reference_id: str) -> 'OrderDraftBuilder':
        return self._set("reference_id", reference_id)

    def ticket_name(self, ticket_name: str) -> 'OrderDraftBuilder':
        return self._set("ticket_name", ticket_name)

    def metadata(self, metadata: Dict[str, str]) -> 'OrderDraftBuilder':
        return self._set("metadata", metadata)

    def add_line_item(self, line_item: LineItem) -> 'OrderDraftBuilder':
        return self._append("line_items", line_item)

    def add_service_charge(self, service_charge: ServiceCharge) -> 'OrderDraftBuilder':
        return self._append("service_charges", service_charge)


class OrderBuilder(OrderDraftBuilder):
    """Builds a CreateOrderRequest; an idempotency key is generated if unset"""

    def idempotency_key(self, key: str) -> 'OrderBuilder':
        return self._set("idempotency_key", key)

    def _assemble(self, values: Dict[str, Any]) -> CreateOrderRequest:
        values = dict(values)
        key = values.pop("idempotency_key", None) or new_idempotency_key()
        return CreateOrderRequest(idempotency_key=key, order=OrderDraft(**values))


class OrderUpdateBuilder(OrderBuilder):
    """
    Builds an UpdateOrderRequest

    Only the fields set are changed. Square rejects the update unless the
    version matches the order's current version.
    """

    required = ("order_id", "version")

    def order_id(self, order_id: str) -> 'OrderUpdateBuilder':
        return self._set("order_id", order_id)

    def version(self, version: int) -> 'OrderUpdateBuilder':
        return self._set("version", version)

    def state(self, state: str) -> 'OrderUpdateBuilder':
        return self._set("state", state)

    def add_field_to_clear(self, field_path: str) -> 'OrderUpdateBuilder':
        """Dot-separated path of a field to remove, e.g. 'line_items[uid].note'"""
        return self._append("fields_to_clear", field_path)

    def _assemble(self, values: Dict[str, Any]) -> UpdateOrderRequest:
        values = dict(values)
        envelope = {
            "order_id": values.pop("order_id"),
            "idempotency_key": values.pop("idempotency_key", None) or new_idempotency_key(),
        }
        if "fields_to_clear" in values:
            envelope["fields_to_clear"] = values.pop("fields_to_clear")
        return UpdateOrderRequest(order=OrderDraft(**values), **envelope)


class OrderCalculationBuilder(OrderDraftBuilder):
    """Builds a CalculateOrderRequest to preview totals without creating the order"""

    def add_proposed_reward(self, reward: Dict[str, Any]) -> 'OrderCalculationBuilder':
        return self._append("proposed_rewards", reward)

    def _assemble(self, values: Dict[str, Any]) -> CalculateOrderRequest:
        values = dict(values)
        envelope = {}
        if "proposed_rewards" in values:
            envelope["proposed_rewards"] = values.pop("proposed_rewards")
        return CalculateOrderRequest(order=OrderDraft(**values), **envelope)


class PayOrderBuilder(RequestBuilder):
    """Builds a PayOrderRequest; an idempotency key is generated if unset"""

    required = ("order_id", "payment_ids")

    def order_id(self, order_id: str) -> 'PayOrderBuilder':
        return self._set("order_id", order_id)

    def order_version(self, version: int) -> 'PayOrderBuilder':
        return self._set("order_version", version)

    def add_payment_id(self, payment_id: str) -> 'PayOrderBuilder':
        return self._append("payment_ids", payment_id)

    def idempotency_key(self, key: str) -> 'PayOrderBuilder':
        return self._set("idempotency_key", key)

    def _assemble(self, values: Dict[str, Any]) -> PayOrderRequest:
        values = dict(values)
        values.setdefault("idempotency_key", new_idempotency_key())
        return PayOrderRequest(**values)


class OrderSearchBuilder(RequestBuilder):
    """Builds a SearchOrdersRequest over one or more locations"""

    required = ("location_ids",)

    def add_location_id(self, location_id: str) -> 'OrderSearchBuilder':
        return self._append("location_ids", location_id)

    def states(self, states: Iterable[str]) -> 'OrderSearchBuilder':
        """OPEN, COMPLETED, CANCELED or DRAFT"""
        return self._set("states", list(states))

    def customer_ids(self, customer_ids: Iterable[str]) -> 'OrderSearchBuilder':
        return self._set("customer_ids", list(customer_ids))

    def created_at(self, start_at: Timestamp, end_at: Timestamp) -> 'OrderSearchBuilder':
        return self._set("created_at", {"start_at": format_timestamp(start_at),
                                        "end_at": format_timestamp(end_at)})

    def closed_at(self, start_at: Timestamp, end_at: Timestamp) -> 'OrderSearchBuilder':
        return self._set("closed_at", {"start_at": format_timestamp(start_at),
                                       "end_at": format_timestamp(end_at)})

    def sort(self, field: str = "CREATED_AT", order: str = "DESC") -> 'OrderSearchBuilder':
        return self._set("sort", {"sort_field": field, "sort_order": order})

    def limit(self, limit: int) -> 'OrderSearchBuilder':
        return self._set("limit", limit)

    def return_entries(self, entries_only: bool = True) -> 'OrderSearchBuilder':
        return self._set("return_entries", entries_only)

    def _assemble(self, values: Dict[str, Any]) -> SearchOrdersRequest:
        query_filter: Dict[str, Any] = {}
        if "states" in values:
            query_filter["state_filter"] = {"states": values["states"]}
        if "customer_ids" in values:
            query_filter["customer_filter"] = {"customer_ids": values["customer_ids"]}
        date_time_filter = {name: values[name] for name in ("created_at", "closed_at")
                            if name in values}
        if date_time_filter:
            query_filter["date_time_filter"] = date_time_filter

        query: Dict[str, Any] = {}
        if query_filter:
            query["filter"] = query_filter
        if "sort" in values:
            query["sort"] = values["sort"]

        request: Dict[str, Any] = {"location_ids": values["location_ids"]}
        if query:
            request["query"] = query
        for name in ("limit", "return_entries"):
            if name in values:
                request[name] = values[name]
        return SearchOrdersRequest(**request)


class OrdersService:
    """Service for Square orders"""

    def __init__(self, client: 'SquareClient'):
        """
        Initialize OrdersService

        Args:
            client: Square API client instance
        """
        self.client = client

    def builder(self) -> OrderBuilder:
        """Builder whose build() creates the order"""
        return OrderBuilder(dispatch=self.create)

    def update_builder(self, order_id: Optional[str] = None) -> OrderUpdateBuilder:
        """Builder whose build() updates the order"""
        builder = OrderUpdateBuilder(dispatch=self.update)
        if order_id is not None:
            builder.order_id(order_id)
        return builder

    def calculate_builder(self) -> OrderCalculationBuilder:
        """Builder whose build() returns the priced order without saving it"""
        return OrderCalculationBuilder(dispatch=self.calculate)

    def pay_builder(self, order_id: Optional[str] = None) -> PayOrderBuilder:
        """Builder whose build() pays for the order"""
        builder = PayOrderBuilder(dispatch=self.pay)
        if order_id is not None:
            builder.order_id(order_id)
        return builder

    def search_builder(self) -> OrderSearchBuilder:
        """Builder whose build() runs the search and returns all matches"""
        return OrderSearchBuilder(dispatch=self.search)

    async def create(self, request: CreateOrderRequest) -> Order:
        logger.info(f"Creating order at location {request.order.location_id}")
        response = await self.client.post("/orders", data=request.to_payload())
        order = _order_from(response)
        logger.info(f"Created order with ID: {order.id}")
        return order

    async def retrieve(self, order_id: str) -> Order:
        """
        Get an order by ID

        Raises:
            NotFoundError: If the order does not exist
        """
        logger.info(f"Fetching order: {order_id}")
        response = await self.client.get(f"/orders/{order_id}", resource_id=order_id)
        return _order_from(response)

    async def batch_retrieve(self, order_ids: Iterable[str],
                             location_id: Optional[str] = None) -> List[Order]:
        """Get several orders at once; ids Square does not know are left out"""
        data: Dict[str, Any] = {"order_ids": list(order_ids)}
        if location_id:
            data["location_id"] = location_id
        logger.info(f"Fetching {len(data['order_ids'])} orders")
        response = await self.client.post("/orders/batch-retrieve", data=data)
        return [Order.model_validate(item) for item in response.get("orders", [])]

    async def update(self, request: UpdateOrderRequest) -> Order:
        logger.info(f"Updating order: {request.order_id}")
        response = await self.client.put(f"/orders/{request.order_id}",
                                         data=request.to_payload(),
                                         resource_id=request.order_id)
        return _order_from(response)

    async def calculate(self, request: CalculateOrderRequest) -> Order:
        logger.info("Calculating order totals")
        response = await self.client.post("/orders/calculate", data=request.to_payload())
        return _order_from(response)

    async def pay(self, request: PayOrderRequest) -> Order:
        logger.info(f"Paying order {request.order_id} with {len(request.payment_ids)} payment(s)")
        response = await self.client.post(f"/orders/{request.order_id}/pay",
                                          data=request.to_payload(),
                                          resource_id=request.order_id)
        return _order_from(response)

    async def clone(self, order_id: str, version: Optional[int] = None,
                    idempotency_key: Optional[str] = None) -> Order:
        """Create a new DRAFT order from an existing one"""
        logger.info(f"Cloning order: {order_id}")
        data: Dict[str, Any] = {
            "order_id": order_id,
            "idempotency_key": idempotency_key or new_idempotency_key(),
        }
        if version is not None:
            data["version"] = version
        response = await self.client.post("/orders/clone", data=data, resource_id=order_id)
        return _order_from(response)

    def search_pages(self, request: SearchOrdersRequest) -> CursorPager[Union[Order, OrderEntry]]:
        """
        Lazy sequence of every order matching the search

        Yields OrderEntry summaries instead of full orders when the request
        asked for entries only.
        """
        if request.return_entries:
            key, model = "order_entries", OrderEntry
        else:
            key, model = "orders", Order

        async def fetch_page(cursor: Optional[str]) -> Tuple[List[Any], Optional[str]]:
            logger.info(f"Searching orders in {len(request.location_ids)} location(s)")
            payload = request.to_payload()
            if cursor:
                payload["cursor"] = cursor
            response = await self.client.post("/orders/search", data=payload)
            items = [model.model_validate(item) for item in response.get(key, [])]
            logger.info(f"Found {len(items)} matching orders")
            return items, response.get("cursor")

        return CursorPager(fetch_page, cursor=request.cursor)

    async def search(self, request: SearchOrdersRequest) -> List[Union[Order, OrderEntry]]:
        """Search orders and return all matches"""
        return await self.search_pages(request).collect()


def _order_from(response: Dict[str, Any]) -> Order:
    order = response.get("order")
    if not order:
        raise RemoteError("Square returned no order data", response=str(response))
    return Order.model_validate(order)
