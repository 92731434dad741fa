"""
Square Customers Service

Handles customer-related operations for Square API.
"""

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

from ..builder import RequestBuilder
from ..exceptions import RemoteError
from ..models.common import Address, DeleteResult
from ..models.customers import Customer, CustomerRequest, SearchCustomersRequest
from ..pagination import CursorPager
from ..utils import Timestamp, format_timestamp

if TYPE_CHECKING:
    from ..client import SquareClient


logger = logging.getLogger(__name__)


class CustomerBuilder(RequestBuilder):
    """Builds a CustomerRequest; Square needs at least one identifying field"""

    request_model = CustomerRequest
    one_of = (("given_name", "family_name", "company_name", "email_address", "phone_number"),)

    def given_name(self, given_name: str) -> 'CustomerBuilder':
        return self._set("given_name", given_name)

    def family_name(self, family_name: str) -> 'CustomerBuilder':
        return self._set("family_name", family_name)

    def nickname(self, nickname: str) -> 'CustomerBuilder':
        return self._set("nickname", nickname)

    def company_name(self, company_name: str) -> 'CustomerBuilder':
        return self._set("company_name", company_name)

    def email_address(self, email: str) -> 'CustomerBuilder':
        return self._set("email_address", email)

    def phone_number(self, phone_number: str) -> 'CustomerBuilder':
        return self._set("phone_number", phone_number)

    def address(self, address: Address) -> 'CustomerBuilder':
        return self._set("address", address)

    def birthday(self, birthday: str) -> 'CustomerBuilder':
        return self._set("birthday", birthday)

    def reference_id(self, reference_id: str) -> 'CustomerBuilder':
        return self._set("reference_id", reference_id)

    def note(self, note: str) -> 'CustomerBuilder':
        return self._set("note", note)

    def version(self, version: int) -> 'CustomerBuilder':
        return self._set("version", version)

    def idempotency_key(self, key: str) -> 'CustomerBuilder':
        return self._set("idempotency_key", key)


class CustomerSearchBuilder(RequestBuilder):
    """Builds a SearchCustomersRequest from exact/fuzzy filters"""

    exclusive = (
        ("exact_email", "fuzzy_email"),
        ("exact_phone", "fuzzy_phone"),
        ("exact_reference_id", "fuzzy_reference_id"),
    )

    def exact_email(self, email: str) -> 'CustomerSearchBuilder':
        return self._set("exact_email", email)

    def fuzzy_email(self, email: str) -> 'CustomerSearchBuilder':
        return self._set("fuzzy_email", email)

    def exact_phone(self, phone_number: str) -> 'CustomerSearchBuilder':
        return self._set("exact_phone", phone_number)

    def fuzzy_phone(self, phone_number: str) -> 'CustomerSearchBuilder':
        return self._set("fuzzy_phone", phone_number)

    def exact_reference_id(self, reference_id: str) -> 'CustomerSearchBuilder':
        return self._set("exact_reference_id", reference_id)

    def fuzzy_reference_id(self, reference_id: str) -> 'CustomerSearchBuilder':
        return self._set("fuzzy_reference_id", reference_id)

    def created_at(self, start_at: Timestamp, end_at: Timestamp) -> 'CustomerSearchBuilder':
        return self._set("created_at", {"start_at": format_timestamp(start_at),
                                        "end_at": format_timestamp(end_at)})

    def updated_at(self, start_at: Timestamp, end_at: Timestamp) -> 'CustomerSearchBuilder':
        return self._set("updated_at", {"start_at": format_timestamp(start_at),
                                        "end_at": format_timestamp(end_at)})

    def sort(self, field: str = "DEFAULT", order: str = "ASC") -> 'CustomerSearchBuilder':
        return self._set("sort", {"field": field, "order": order})

    def limit(self, limit: int) -> 'CustomerSearchBuilder':
        return self._set("limit", limit)

    def _assemble(self, values: Dict[str, Any]) -> SearchCustomersRequest:
        query_filter: Dict[str, Any] = {}
        for attribute, wire_name in (("email", "email_address"),
                                     ("phone", "phone_number"),
                                     ("reference_id", "reference_id")):
            for mode in ("exact", "fuzzy"):
                value = values.get(f"{mode}_{attribute}")
                if value is not None:
                    query_filter[wire_name] = {mode: value}
        for time_filter in ("created_at", "updated_at"):
            if time_filter in values:
                query_filter[time_filter] = values[time_filter]

        query: Dict[str, Any] = {}
        if query_filter:
            query["filter"] = query_filter
        if "sort" in values:
            query["sort"] = values["sort"]

        request: Dict[str, Any] = {}
        if query:
            request["query"] = query
        if "limit" in values:
            request["limit"] = values["limit"]
        return SearchCustomersRequest(**request)


class CustomersService:
    """Service for managing Square customers"""

    def __init__(self, client: 'SquareClient'):
        """
        Initialize CustomersService

        Args:
            client: Square API client instance
        """
        self.client = client

    def builder(self) -> CustomerBuilder:
        """Builder whose build() creates the customer"""
        return CustomerBuilder(dispatch=self.create)

    def search_builder(self) -> CustomerSearchBuilder:
        """Builder whose build() runs the search and returns all matches"""
        return CustomerSearchBuilder(dispatch=self.search)

    def list(self, limit: Optional[int] = None,
             sort_field: Optional[str] = None,
             sort_order: Optional[str] = None) -> CursorPager[Customer]:
        """
        List customers

        Args:
            limit: Page size requested from Square
            sort_field: DEFAULT or CREATED_AT
            sort_order: ASC or DESC
        """
        params = {"limit": limit, "sort_field": sort_field, "sort_order": sort_order}

        async def fetch_page(cursor: Optional[str]) -> Tuple[List[Customer], Optional[str]]:
            logger.info("Listing customers")
            response = await self.client.get("/customers", params={**params, "cursor": cursor})
            customers = [Customer.model_validate(item) for item in response.get("customers", [])]
            logger.info(f"Found {len(customers)} customers")
            return customers, response.get("cursor")

        return CursorPager(fetch_page)

    async def retrieve(self, customer_id: str) -> Customer:
        """
        Get a customer by ID

        Raises:
            NotFoundError: If the customer does not exist
        """
        logger.info(f"Fetching customer: {customer_id}")
        response = await self.client.get(f"/customers/{customer_id}", resource_id=customer_id)
        return _customer_from(response)

    async def create(self, request: CustomerRequest) -> Customer:
        """Create a new customer"""
        logger.info(f"Creating customer: {request.given_name or ''} {request.family_name or ''}".rstrip())
        response = await self.client.post("/customers", data=request.to_payload())
        customer = _customer_from(response)
        logger.info(f"Created customer with ID: {customer.id}")
        return customer

    async def update(self, customer_id: str, request: CustomerRequest) -> Customer:
        """Update customer information; unset fields are left unchanged"""
        logger.info(f"Updating customer: {customer_id}")
        payload = request.to_payload()
        payload.pop("idempotency_key", None)
        response = await self.client.put(f"/customers/{customer_id}", data=payload,
                                         resource_id=customer_id)
        return _customer_from(response)

    async def delete(self, customer_id: str, version: Optional[int] = None) -> DeleteResult:
        """
        Delete a customer

        Args:
            customer_id: Square customer ID
            version: Optional current version, for optimistic concurrency
        """
        logger.info(f"Deleting customer: {customer_id}")
        response = await self.client.delete(f"/customers/{customer_id}",
                                            params={"version": version},
                                            resource_id=customer_id)
        return DeleteResult.model_validate(response)

    def search_pages(self, request: SearchCustomersRequest) -> CursorPager[Customer]:
        """Lazy sequence of every customer matching the search"""
        async def fetch_page(cursor: Optional[str]) -> Tuple[List[Customer], Optional[str]]:
            logger.info("Searching for customers")
            payload = request.to_payload()
            if cursor:
                payload["cursor"] = cursor
            response = await self.client.post("/customers/search", data=payload)
            customers = [Customer.model_validate(item) for item in response.get("customers", [])]
            logger.info(f"Found {len(customers)} matching customers")
            return customers, response.get("cursor")

        return CursorPager(fetch_page, cursor=request.cursor)

    async def search(self, request: SearchCustomersRequest) -> List[Customer]:
        """Search customers and return all matches"""
        return await self.search_pages(request).collect()


def _customer_from(response: Dict[str, Any]) -> Customer:
    customer = response.get("customer")
    if not customer:
        raise RemoteError("Square returned no customer data", response=str(response))
    return Customer.model_validate(customer)
