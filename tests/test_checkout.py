import pytest

from square_commerce.exceptions import ConflictError, ValidationError
from square_commerce.models.checkout import CheckoutOptions, PaymentLink, PaymentLinkResult
from square_commerce.services.checkout import (
    PaymentLinkBuilder, PaymentLinkUpdateBuilder, QuickPayBuilder,
)
from square_commerce.services.orders import LineItemBuilder, OrderDraftBuilder


LINK = {
    "id": "link_1",
    "version": 1,
    "order_id": "ord_1",
    "url": "https://square.link/u/abc",
    "long_url": "https://checkout.square.site/merchant/M1/order/ord_1",
}


def _quick_pay():
    return QuickPayBuilder().name("Water heater flush").price(9900, "USD").location_id("L1")


class TestPaymentLinkBuilders:
    """Unit tests for payment link requests"""

    def test_quick_pay_payload(self):
        """Test a quick-pay link body"""
        request = (PaymentLinkBuilder()
                   .quick_pay(_quick_pay())
                   .checkout_options(CheckoutOptions(allow_tipping=True,
                                                     redirect_url="https://example.test/thanks"))
                   .payment_note("Invoice 1001")
                   .idempotency_key("link-1")
                   .finalize())
        assert request.to_payload() == {
            "idempotency_key": "link-1",
            "quick_pay": {
                "name": "Water heater flush",
                "price_money": {"amount": 9900, "currency": "USD"},
                "location_id": "L1",
            },
            "checkout_options": {"allow_tipping": True,
                                 "redirect_url": "https://example.test/thanks"},
            "payment_note": "Invoice 1001",
        }

    def test_order_payload(self):
        """Test a link that charges for a nested order"""
        order = (OrderDraftBuilder()
                 .location_id("L1")
                 .add_line_item(LineItemBuilder().catalog_object_id("var_1").quantity(2)))
        request = PaymentLinkBuilder().order(order).finalize()
        payload = request.to_payload()
        assert payload["idempotency_key"]
        assert payload["order"] == {
            "location_id": "L1",
            "line_items": [{"catalog_object_id": "var_1", "quantity": "2"}],
        }
        assert order.consumed

    def test_needs_quick_pay_or_order(self):
        """Test that a link must charge for something"""
        with pytest.raises(ValidationError) as exc_info:
            PaymentLinkBuilder().description("Nothing").finalize()
        assert exc_info.value.fields == ["quick_pay", "order"]

    def test_quick_pay_and_order_conflict(self):
        """Test that a link cannot carry both a quick-pay amount and an order"""
        builder = (PaymentLinkBuilder()
                   .quick_pay(_quick_pay())
                   .order(OrderDraftBuilder().location_id("L1")))
        with pytest.raises(ConflictError):
            builder.finalize()

    def test_quick_pay_requires_price(self):
        """Test that a quick-pay amount is required"""
        with pytest.raises(ValidationError) as exc_info:
            QuickPayBuilder().name("Flush").location_id("L1").finalize()
        assert exc_info.value.fields == ["price_money"]

    def test_update_version_must_be_positive(self):
        """Test that an update needs a real link version"""
        builder = PaymentLinkUpdateBuilder().link_id("link_1").version(0).description("New")
        with pytest.raises(ValidationError) as exc_info:
            builder.finalize()
        assert exc_info.value.fields == ["version"]


class TestCheckoutService:
    """Tests for CheckoutService"""

    @pytest.fixture
    def checkout(self, client):
        return client.checkout()

    @pytest.mark.asyncio
    async def test_create_payment_link(self, checkout, transport):
        """Test creating a link and reading back the order Square made"""
        transport.queue({"payment_link": LINK,
                         "related_resources": {"orders": [{"id": "ord_1", "location_id": "L1"}]}})

        result = await checkout.payment_link_builder().quick_pay(_quick_pay()).build()

        assert isinstance(result, PaymentLinkResult)
        assert result.payment_link.url == "https://square.link/u/abc"
        assert result.related_resources["orders"][0]["id"] == "ord_1"
        call = transport.calls[0]
        assert call["method"] == "POST"
        assert call["url"].endswith("/v2/online-checkout/payment-links")

    @pytest.mark.asyncio
    async def test_list_payment_links(self, checkout, transport):
        """Test listing links across pages"""
        transport.queue({"payment_links": [LINK], "cursor": "c1"})
        transport.queue({"payment_links": [{**LINK, "id": "link_2"}]})

        links = await checkout.list_payment_links(limit=1).collect()

        assert [link.id for link in links] == ["link_1", "link_2"]
        assert transport.calls[0]["params"] == {"limit": 1}
        assert transport.calls[1]["params"] == {"limit": 1, "cursor": "c1"}

    @pytest.mark.asyncio
    async def test_update_payment_link(self, checkout, transport):
        """Test that update puts the sparse link under payment_link"""
        transport.queue({"payment_link": {**LINK, "version": 2, "description": "Flush"}})

        link = await (checkout.payment_link_update_builder("link_1")
                      .version(1)
                      .description("Flush")
                      .build())

        assert isinstance(link, PaymentLink)
        assert link.version == 2
        call = transport.calls[0]
        assert call["method"] == "PUT"
        assert call["url"].endswith("/v2/online-checkout/payment-links/link_1")
        assert call["json"] == {"payment_link": {"version": 1, "description": "Flush"}}

    @pytest.mark.asyncio
    async def test_retrieve_and_delete(self, checkout, transport):
        """Test fetching and deleting a link"""
        transport.queue({"payment_link": LINK})
        transport.queue({"id": "link_1", "cancelled_order_id": "ord_1"})

        link = await checkout.retrieve_payment_link("link_1")
        deleted = await checkout.delete_payment_link("link_1")

        assert link.order_id == "ord_1"
        assert deleted.model_extra["cancelled_order_id"] == "ord_1"
        assert transport.calls[1]["method"] == "DELETE"
