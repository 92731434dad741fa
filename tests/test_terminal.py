import pytest

from square_commerce.exceptions import ValidationError
from square_commerce.models.sites import Site
from square_commerce.models.terminal import SearchTerminalRequest
from square_commerce.services.terminal import (
    DeviceOptionsBuilder, TerminalCheckoutBuilder, TerminalRefundBuilder, TerminalSearchBuilder,
)


CHECKOUT = {
    "id": "chk_1",
    "amount_money": {"amount": 2500, "currency": "USD"},
    "device_options": {"device_id": "dev_1", "skip_receipt_screen": True},
    "status": "PENDING",
}

REFUND = {
    "id": "ref_1",
    "payment_id": "pay_1",
    "amount_money": {"amount": 500, "currency": "CAD"},
    "reason": "Overcharged",
    "device_id": "dev_1",
    "status": "PENDING",
}


class TestTerminalBuilders:
    """Unit tests for terminal request builders"""

    def test_checkout_payload(self):
        """Test the checkout body with nested device options"""
        request = (TerminalCheckoutBuilder()
                   .amount(2500, "USD")
                   .device_options(DeviceOptionsBuilder().device_id("dev_1").skip_receipt_screen())
                   .reference_id("job-42")
                   .deadline_duration("PT5M")
                   .idempotency_key("chk-key")
                   .finalize())
        assert request.to_payload() == {
            "idempotency_key": "chk-key",
            "checkout": {
                "amount_money": {"amount": 2500, "currency": "USD"},
                "device_options": {"device_id": "dev_1", "skip_receipt_screen": True},
                "reference_id": "job-42",
                "deadline_duration": "PT5M",
            },
        }

    def test_skip_receipt_only_sets_its_own_flag(self):
        """Test that each device flag sets only itself"""
        options = DeviceOptionsBuilder().device_id("dev_1").skip_receipt_screen().finalize()
        assert options.skip_receipt_screen is True
        assert options.show_itemized_cart is None

    def test_device_options_require_device(self):
        """Test that device options need the target device"""
        with pytest.raises(ValidationError) as exc_info:
            DeviceOptionsBuilder().collect_signature().finalize()
        assert exc_info.value.fields == ["device_id"]

    def test_checkout_requires_amount_and_device(self):
        """Test that every missing checkout field is reported"""
        with pytest.raises(ValidationError) as exc_info:
            TerminalCheckoutBuilder().note("Front desk").finalize()
        assert exc_info.value.fields == ["amount_money", "device_options"]

    def test_refund_requires_all_fields(self):
        """Test the required fields of a terminal refund"""
        with pytest.raises(ValidationError) as exc_info:
            TerminalRefundBuilder().payment_id("pay_1").finalize()
        assert exc_info.value.fields == ["amount_money", "reason", "device_id"]

    def test_search_payload(self):
        """Test the search body"""
        request = (TerminalSearchBuilder()
                   .device_id("dev_1")
                   .status("COMPLETED")
                   .sort("ASC")
                   .limit(10)
                   .finalize())
        assert request.to_payload() == {
            "query": {
                "filter": {"device_id": "dev_1", "status": "COMPLETED"},
                "sort": {"sort_order": "ASC"},
            },
            "limit": 10,
        }


class TestTerminalService:
    """Tests for TerminalService"""

    @pytest.fixture
    def terminal(self, client):
        return client.terminal()

    @pytest.mark.asyncio
    async def test_create_checkout(self, terminal, transport):
        """Test sending a checkout to a device"""
        transport.queue({"checkout": CHECKOUT})

        checkout = await (terminal.checkout_builder()
                          .amount(2500, "USD")
                          .device_options(DeviceOptionsBuilder().device_id("dev_1"))
                          .build())

        assert checkout.id == "chk_1"
        assert checkout.device_options.device_id == "dev_1"
        call = transport.calls[0]
        assert call["url"].endswith("/v2/terminals/checkouts")
        assert call["json"]["idempotency_key"]

    @pytest.mark.asyncio
    async def test_get_and_cancel_checkout(self, terminal, transport):
        """Test reading and cancelling a checkout"""
        transport.queue({"checkout": CHECKOUT})
        transport.queue({"checkout": {**CHECKOUT, "status": "CANCELED"}})

        fetched = await terminal.get_checkout("chk_1")
        cancelled = await terminal.cancel_checkout("chk_1")

        assert fetched.status == "PENDING"
        assert cancelled.status == "CANCELED"
        assert transport.calls[0]["method"] == "GET"
        assert transport.calls[1]["method"] == "POST"
        assert transport.calls[1]["url"].endswith("/v2/terminals/checkouts/chk_1/cancel")

    @pytest.mark.asyncio
    async def test_search_checkouts_posts(self, terminal, transport):
        """Test that checkout search posts the query and follows the cursor"""
        transport.queue({"checkouts": [CHECKOUT], "cursor": "c1"})
        transport.queue({"checkouts": [{**CHECKOUT, "id": "chk_2"}]})

        results = await terminal.checkout_search_builder().device_id("dev_1").build()

        assert [checkout.id for checkout in results] == ["chk_1", "chk_2"]
        assert transport.calls[0]["method"] == "POST"
        assert transport.calls[0]["url"].endswith("/v2/terminals/checkouts/search")
        assert transport.calls[0]["json"] == {"query": {"filter": {"device_id": "dev_1"}}}
        assert transport.calls[1]["json"]["cursor"] == "c1"

    @pytest.mark.asyncio
    async def test_search_without_query(self, terminal, transport):
        """Test that an empty search lists everything"""
        transport.queue({"refunds": [REFUND]})

        results = await terminal.search_refunds()

        assert [refund.id for refund in results] == ["ref_1"]
        assert transport.calls[0]["json"] == {}

    @pytest.mark.asyncio
    async def test_refund_lifecycle(self, terminal, transport):
        """Test creating, reading and cancelling a refund"""
        transport.queue({"refund": REFUND})
        transport.queue({"refund": REFUND})
        transport.queue({"refund": {**REFUND, "status": "CANCELED"}})

        created = await (terminal.refund_builder()
                         .payment_id("pay_1")
                         .amount(500, "CAD")
                         .reason("Overcharged")
                         .device_id("dev_1")
                         .build())
        fetched = await terminal.get_refund("ref_1")
        cancelled = await terminal.cancel_refund("ref_1")

        assert created.reason == "Overcharged"
        assert fetched.id == "ref_1"
        assert cancelled.status == "CANCELED"
        assert transport.calls[0]["json"]["refund"]["payment_id"] == "pay_1"
        assert transport.calls[2]["url"].endswith("/v2/terminals/refunds/ref_1/cancel")

    @pytest.mark.asyncio
    async def test_search_pages_start_from_cursor(self, terminal, transport):
        """Test resuming a search from a saved cursor"""
        transport.queue({"refunds": [REFUND]})

        pager = terminal.search_refund_pages(SearchTerminalRequest(cursor="saved"))
        results = await pager.collect()

        assert len(results) == 1
        assert transport.calls[0]["json"]["cursor"] == "saved"


class TestSitesService:
    """Tests for SitesService"""

    @pytest.mark.asyncio
    async def test_list(self, client, transport):
        """Test listing Square Online sites"""
        transport.queue({"sites": [{"id": "site_1", "site_title": "Plumbing Co",
                                    "domain": "plumbing.square.site", "is_published": True}]})

        sites = await client.sites().list()

        assert sites == [Site(id="site_1", site_title="Plumbing Co",
                              domain="plumbing.square.site", is_published=True)]
        assert transport.calls[0]["url"].endswith("/v2/sites")

    @pytest.mark.asyncio
    async def test_list_empty(self, client, transport):
        """Test that an empty body means no sites"""
        transport.queue({})
        assert await client.sites().list() == []
