import pytest

from square_commerce.exceptions import ConflictError, NotFoundError, RemoteError, ValidationError
from square_commerce.models.orders import CreateOrderRequest, Order, OrderEntry
from square_commerce.services.orders import (
    LineItemBuilder, OrderBuilder, OrderCalculationBuilder, OrderSearchBuilder,
    OrderUpdateBuilder, PayOrderBuilder, ServiceChargeBuilder,
)


ORDER = {
    "id": "ord_1",
    "location_id": "L1",
    "state": "OPEN",
    "version": 1,
    "line_items": [{"uid": "li_1", "name": "Drain cleaning", "quantity": "1",
                    "base_price_money": {"amount": 12000, "currency": "USD"}}],
    "total_money": {"amount": 12000, "currency": "USD"},
}


def _line_item():
    return LineItemBuilder().name("Drain cleaning").quantity(1).base_price(12000, "USD")


class TestOrderBuilders:
    """Unit tests for order request builders"""

    def test_order_payload(self):
        """Test the create-order body with a nested line item and service charge"""
        request = (OrderBuilder()
                   .location_id("L1")
                   .customer_id("cust_1")
                   .add_line_item(_line_item())
                   .add_service_charge(ServiceChargeBuilder()
                                       .name("Call-out fee")
                                       .amount(3500, "USD")
                                       .calculation_phase("SUBTOTAL_PHASE"))
                   .idempotency_key("order-1")
                   .finalize())

        assert isinstance(request, CreateOrderRequest)
        assert request.to_payload() == {
            "idempotency_key": "order-1",
            "order": {
                "location_id": "L1",
                "customer_id": "cust_1",
                "line_items": [{
                    "name": "Drain cleaning",
                    "quantity": "1",
                    "base_price_money": {"amount": 12000, "currency": "USD"},
                }],
                "service_charges": [{
                    "name": "Call-out fee",
                    "amount_money": {"amount": 3500, "currency": "USD"},
                    "calculation_phase": "SUBTOTAL_PHASE",
                }],
            },
        }

    def test_order_generates_idempotency_key(self):
        """Test that every order request carries a fresh key"""
        first = OrderBuilder().location_id("L1").finalize()
        second = OrderBuilder().location_id("L1").finalize()
        assert first.idempotency_key
        assert first.idempotency_key != second.idempotency_key

    def test_order_requires_location(self):
        """Test that an order needs a location"""
        with pytest.raises(ValidationError) as exc_info:
            OrderBuilder().add_line_item(_line_item()).finalize()
        assert exc_info.value.fields == ["location_id"]

    def test_line_item_catalog_or_name(self):
        """Test that a line item is either a catalog item or an ad hoc one"""
        with pytest.raises(ValidationError) as exc_info:
            LineItemBuilder().quantity(2).finalize()
        assert exc_info.value.fields == ["catalog_object_id", "name"]
        with pytest.raises(ConflictError):
            LineItemBuilder().quantity(2).name("Valve").catalog_object_id("var_1").finalize()

    def test_service_charge_amount_or_percentage(self):
        """Test that a service charge is a flat amount or a percentage, not both"""
        builder = (ServiceChargeBuilder()
                   .name("Fee")
                   .calculation_phase("TOTAL_PHASE")
                   .amount(100, "USD")
                   .percentage("10"))
        with pytest.raises(ConflictError):
            builder.finalize()

    def test_invalid_nested_line_item_fails_order(self):
        """Test that a bad price inside a line item fails the whole order"""
        line_item = LineItemBuilder().name("Valve").quantity(1).base_price("cheap", "USD")
        builder = OrderBuilder().location_id("L1").add_line_item(line_item)
        with pytest.raises(ValidationError) as exc_info:
            builder.finalize()
        assert exc_info.value.fields == ["base_price_money"]
        assert not builder.consumed

    def test_finalized_line_items_are_immutable(self):
        """Test that line items of a finalized order cannot be appended to"""
        request = OrderBuilder().location_id("L1").add_line_item(_line_item()).finalize()
        with pytest.raises(AttributeError):
            request.order.line_items.append(request.order.line_items[0])

    def test_update_payload(self):
        """Test that an update sends the version, changed fields and fields to clear"""
        request = (OrderUpdateBuilder()
                   .order_id("ord_1")
                   .version(1)
                   .reference_id("job-42")
                   .add_field_to_clear("line_items[li_1].note")
                   .finalize())
        payload = request.to_payload()
        assert payload.pop("idempotency_key")
        assert payload == {
            "order": {"version": 1, "reference_id": "job-42"},
            "fields_to_clear": ["line_items[li_1].note"],
        }

    def test_update_requires_version(self):
        """Test that an update without the current version is rejected"""
        with pytest.raises(ValidationError) as exc_info:
            OrderUpdateBuilder().order_id("ord_1").finalize()
        assert exc_info.value.fields == ["version"]

    def test_calculate_has_no_idempotency_key(self):
        """Test the calculate body"""
        request = (OrderCalculationBuilder()
                   .location_id("L1")
                   .add_line_item(_line_item())
                   .add_proposed_reward({"id": "rw_1", "reward_tier_id": "tier_1"})
                   .finalize())
        payload = request.to_payload()
        assert "idempotency_key" not in payload
        assert payload["proposed_rewards"] == [{"id": "rw_1", "reward_tier_id": "tier_1"}]
        assert payload["order"]["location_id"] == "L1"

    def test_pay_requires_payments(self):
        """Test that paying an order needs at least one payment"""
        with pytest.raises(ValidationError) as exc_info:
            PayOrderBuilder().order_id("ord_1").finalize()
        assert exc_info.value.fields == ["payment_ids"]

    def test_search_payload(self):
        """Test the search body built from filters"""
        request = (OrderSearchBuilder()
                   .add_location_id("L1")
                   .add_location_id("L2")
                   .states(["OPEN", "COMPLETED"])
                   .created_at("2024-01-01T00:00:00Z", "2024-02-01T00:00:00Z")
                   .sort("CREATED_AT", "ASC")
                   .limit(50)
                   .finalize())
        assert request.to_payload() == {
            "location_ids": ["L1", "L2"],
            "query": {
                "filter": {
                    "state_filter": {"states": ["OPEN", "COMPLETED"]},
                    "date_time_filter": {
                        "created_at": {"start_at": "2024-01-01T00:00:00Z",
                                       "end_at": "2024-02-01T00:00:00Z"},
                    },
                },
                "sort": {"sort_field": "CREATED_AT", "sort_order": "ASC"},
            },
            "limit": 50,
        }

    def test_search_requires_location(self):
        """Test that an order search needs at least one location"""
        with pytest.raises(ValidationError) as exc_info:
            OrderSearchBuilder().states(["OPEN"]).finalize()
        assert exc_info.value.fields == ["location_ids"]


class TestOrdersService:
    """Tests for OrdersService"""

    @pytest.fixture
    def orders(self, client):
        return client.orders()

    @pytest.mark.asyncio
    async def test_create(self, orders, transport):
        """Test creating an order through the bound builder"""
        transport.queue({"order": ORDER})

        order = await orders.builder().location_id("L1").add_line_item(_line_item()).build()

        assert isinstance(order, Order)
        assert order.id == "ord_1"
        assert order.line_items[0].base_price_money.amount == 12000
        call = transport.calls[0]
        assert call["method"] == "POST"
        assert call["url"].endswith("/v2/orders")
        assert call["json"]["order"]["line_items"][0]["name"] == "Drain cleaning"

    @pytest.mark.asyncio
    async def test_retrieve_not_found(self, orders, transport):
        """Test that a missing order raises NotFoundError"""
        transport.queue({"errors": [{"category": "INVALID_REQUEST_ERROR", "code": "NOT_FOUND",
                                     "detail": "Order not found"}]}, status_code=404)
        with pytest.raises(NotFoundError) as exc_info:
            await orders.retrieve("missing")
        assert exc_info.value.resource_id == "missing"

    @pytest.mark.asyncio
    async def test_update(self, orders, transport):
        """Test that update puts to the order path"""
        transport.queue({"order": {**ORDER, "version": 2, "reference_id": "job-42"}})

        order = await orders.update_builder("ord_1").version(1).reference_id("job-42").build()

        assert order.version == 2
        call = transport.calls[0]
        assert call["method"] == "PUT"
        assert call["url"].endswith("/v2/orders/ord_1")
        assert "order_id" not in call["json"]

    @pytest.mark.asyncio
    async def test_pay(self, orders, transport):
        """Test paying an order with existing payments"""
        transport.queue({"order": {**ORDER, "state": "COMPLETED"}})

        order = await (orders.pay_builder("ord_1")
                       .order_version(1)
                       .add_payment_id("pay_1")
                       .idempotency_key("pay-order-1")
                       .build())

        assert order.state == "COMPLETED"
        call = transport.calls[0]
        assert call["url"].endswith("/v2/orders/ord_1/pay")
        assert call["json"] == {"idempotency_key": "pay-order-1", "order_version": 1,
                                "payment_ids": ["pay_1"]}

    @pytest.mark.asyncio
    async def test_calculate(self, orders, transport):
        """Test pricing an order without creating it"""
        transport.queue({"order": {"location_id": "L1",
                                   "total_money": {"amount": 12000, "currency": "USD"}}})

        order = await orders.calculate_builder().location_id("L1").add_line_item(_line_item()).build()

        assert order.total_money.amount == 12000
        assert transport.calls[0]["url"].endswith("/v2/orders/calculate")

    @pytest.mark.asyncio
    async def test_search_follows_cursor(self, orders, transport):
        """Test that search pages through every match"""
        transport.queue({"orders": [ORDER], "cursor": "c1"})
        transport.queue({"orders": [{**ORDER, "id": "ord_2"}]})

        results = await orders.search_builder().add_location_id("L1").build()

        assert [order.id for order in results] == ["ord_1", "ord_2"]
        assert "cursor" not in transport.calls[0]["json"]
        assert transport.calls[1]["json"]["cursor"] == "c1"
        assert transport.calls[1]["url"].endswith("/v2/orders/search")

    @pytest.mark.asyncio
    async def test_search_entries(self, orders, transport):
        """Test that entry-only searches yield OrderEntry summaries"""
        transport.queue({"order_entries": [{"order_id": "ord_1", "version": 1,
                                            "location_id": "L1"}]})

        results = await orders.search_builder().add_location_id("L1").return_entries().build()

        assert results == [OrderEntry(order_id="ord_1", version=1, location_id="L1")]
        assert transport.calls[0]["json"]["return_entries"] is True

    @pytest.mark.asyncio
    async def test_batch_retrieve(self, orders, transport):
        """Test fetching several orders in one call"""
        transport.queue({"orders": [ORDER]})

        results = await orders.batch_retrieve(["ord_1", "ord_9"], location_id="L1")

        assert [order.id for order in results] == ["ord_1"]
        assert transport.calls[0]["json"] == {"order_ids": ["ord_1", "ord_9"],
                                              "location_id": "L1"}

    @pytest.mark.asyncio
    async def test_clone(self, orders, transport):
        """Test cloning an order into a new draft"""
        transport.queue({"order": {**ORDER, "id": "ord_3", "state": "DRAFT"}})

        order = await orders.clone("ord_1", version=1)

        assert order.state == "DRAFT"
        body = transport.calls[0]["json"]
        assert body["order_id"] == "ord_1"
        assert body["version"] == 1
        assert body["idempotency_key"]

    @pytest.mark.asyncio
    async def test_missing_order_payload(self, orders, transport):
        """Test that a success body without an order is a RemoteError"""
        transport.queue({})
        with pytest.raises(RemoteError):
            await orders.retrieve("ord_1")
