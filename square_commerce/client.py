"""
Square API Client

Main client for interfacing with Square's Commerce APIs.
Holds the credential and configuration, exposes one accessor per resource
family and maps HTTP failures onto the typed error hierarchy.
"""

import json
import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from .config import DEFAULT_SQUARE_VERSION, DEFAULT_TIMEOUT, SquareConfig, SquareEnvironment
from .exceptions import (
    AuthError, NotFoundError, RateLimitError, RemoteError, SquareError,
)
from .transport import HttpxTransport, Transport, TransportResponse

if TYPE_CHECKING:
    from .services import (
        BookingsService, CardsService, CatalogService, CheckoutService, CustomersService,
        InventoryService, LocationsService, OrdersService, PaymentsService, SitesService,
        TerminalService,
    )


logger = logging.getLogger(__name__)

API_PREFIX = "/v2"


class SquareClient:
    """Entry point for the Square API; safe to share between tasks"""

    def __init__(self, access_token: str, *,
                 environment: SquareEnvironment = SquareEnvironment.SANDBOX,
                 base_url: Optional[str] = None,
                 square_version: str = DEFAULT_SQUARE_VERSION,
                 timeout: float = DEFAULT_TIMEOUT,
                 location_id: Optional[str] = None,
                 transport: Optional[Transport] = None):
        """
        Initialize Square API client

        Args:
            access_token: Square access token (sent as a bearer token)
            environment: Sandbox (default) or production
            base_url: Explicit API host, overrides the environment's host
            square_version: Value of the Square-Version header
            timeout: Transport timeout in seconds, used when no transport is given
            location_id: Default location for helpers that need one
            transport: Custom transport; owned by the caller when given

        Raises:
            ConfigError: If the token is empty or the timeout is not positive
        """
        config = SquareConfig(
            access_token=access_token,
            environment=environment,
            base_url_override=base_url,
            square_version=square_version,
            timeout=timeout,
            location_id=location_id,
        )
        config.validate()
        self._config = config
        self._owns_transport = transport is None
        self._transport = transport or HttpxTransport(timeout=config.timeout)

    @classmethod
    def from_config(cls, config: SquareConfig,
                    transport: Optional[Transport] = None) -> 'SquareClient':
        """Create a client from an existing SquareConfig"""
        return cls(
            config.access_token,
            environment=config.environment,
            base_url=config.base_url_override,
            square_version=config.square_version,
            timeout=config.timeout,
            location_id=config.location_id,
            transport=transport,
        )

    @classmethod
    def from_env(cls, transport: Optional[Transport] = None) -> 'SquareClient':
        """Create a client from SQUARE_* environment variables"""
        return cls.from_config(SquareConfig.from_env(), transport=transport)

    @property
    def config(self) -> SquareConfig:
        return self._config

    @property
    def environment(self) -> SquareEnvironment:
        return self._config.environment

    @property
    def base_url(self) -> str:
        return self._config.base_url

    def production(self) -> 'SquareClient':
        """Return a new client pointed at production; this client is unchanged"""
        transport = None if self._owns_transport else self._transport
        return SquareClient.from_config(self._config.production(), transport=transport)

    # Resource accessors

    def locations(self) -> 'LocationsService':
        from .services.locations import LocationsService
        return LocationsService(self)

    def bookings(self) -> 'BookingsService':
        from .services.bookings import BookingsService
        return BookingsService(self)

    def inventory(self) -> 'InventoryService':
        from .services.inventory import InventoryService
        return InventoryService(self)

    def customers(self) -> 'CustomersService':
        from .services.customers import CustomersService
        return CustomersService(self)

    def catalog(self) -> 'CatalogService':
        from .services.catalog import CatalogService
        return CatalogService(self)

    def payments(self) -> 'PaymentsService':
        from .services.payments import PaymentsService
        return PaymentsService(self)

    def cards(self) -> 'CardsService':
        from .services.cards import CardsService
        return CardsService(self)

    def orders(self) -> 'OrdersService':
        from .services.orders import OrdersService
        return OrdersService(self)

    def checkout(self) -> 'CheckoutService':
        from .services.checkout import CheckoutService
        return CheckoutService(self)

    def terminal(self) -> 'TerminalService':
        from .services.terminal import TerminalService
        return TerminalService(self)

    def sites(self) -> 'SitesService':
        from .services.sites import SitesService
        return SitesService(self)

    # Dispatch

    async def request(self, method: str, endpoint: str,
                      json_body: Optional[Dict[str, Any]] = None,
                      params: Optional[Dict[str, Any]] = None,
                      resource_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Make HTTP request to Square API with error handling

        Args:
            method: HTTP method (GET, POST, PUT, PATCH, DELETE)
            endpoint: API endpoint below /v2, e.g. "/locations"
            json_body: Request body data
            params: Query parameters; None values are dropped
            resource_id: Id reported by NotFoundError on a 404

        Returns:
            Decoded JSON body ({} for an empty body)

        Raises:
            TransportError: Connectivity or timeout failure
            AuthError: 401/403
            NotFoundError: 404
            RateLimitError: 429
            RemoteError: Any other error status or an errors array in the body
        """
        url = f"{self._config.base_url}{API_PREFIX}{endpoint}"
        query = None
        if params:
            query = {key: value for key, value in params.items() if value is not None}

        logger.debug(f"Making {method} request to {endpoint}")
        response = await self._transport.send(
            method.upper(),
            url,
            headers=self._config.headers,
            json=json_body,
            params=query or None,
        )
        return self._handle_response(response, resource_id)

    async def get(self, endpoint: str, params: Optional[Dict[str, Any]] = None,
                  resource_id: Optional[str] = None) -> Dict[str, Any]:
        """Make GET request"""
        return await self.request("GET", endpoint, params=params, resource_id=resource_id)

    async def post(self, endpoint: str, data: Optional[Dict[str, Any]] = None,
                   resource_id: Optional[str] = None) -> Dict[str, Any]:
        """Make POST request"""
        return await self.request("POST", endpoint, json_body=data, resource_id=resource_id)

    async def put(self, endpoint: str, data: Optional[Dict[str, Any]] = None,
                  resource_id: Optional[str] = None) -> Dict[str, Any]:
        """Make PUT request"""
        return await self.request("PUT", endpoint, json_body=data, resource_id=resource_id)

    async def delete(self, endpoint: str, params: Optional[Dict[str, Any]] = None,
                     resource_id: Optional[str] = None) -> Dict[str, Any]:
        """Make DELETE request"""
        return await self.request("DELETE", endpoint, params=params, resource_id=resource_id)

    def _handle_response(self, response: TransportResponse,
                         resource_id: Optional[str]) -> Dict[str, Any]:
        status = response.status_code
        text = response.text
        payload = _decode_json(text)
        errors = _extract_errors(payload)
        detail = errors[0].get("detail") if errors else None
        error_kwargs = {"status_code": status, "errors": errors, "response": text}

        if status in (401, 403):
            raise AuthError(f"Authentication failed ({status}): {detail or 'check access token'}",
                            **error_kwargs)

        if status == 404:
            label = f"Resource {resource_id}" if resource_id else "Resource"
            raise NotFoundError(f"{label} not found", resource_id=resource_id, **error_kwargs)

        if status == 429:
            headers = {key.lower(): value for key, value in response.headers.items()}
            retry_after = _parse_int(headers.get("retry-after"))
            raise RateLimitError(f"Rate limit exceeded. Retry after {retry_after} seconds",
                                 retry_after=retry_after, **error_kwargs)

        if status >= 400:
            message = detail or text or f"HTTP {status} error"
            raise RemoteError(f"API request failed: {message}", **error_kwargs)

        if payload is None:
            if not text.strip():
                return {}
            raise RemoteError("API returned a malformed JSON body", **error_kwargs)

        if errors:
            raise RemoteError(f"API request failed: {detail or errors[0].get('code')}",
                              **error_kwargs)

        if not isinstance(payload, dict):
            raise RemoteError("API returned an unexpected JSON body", **error_kwargs)
        return payload

    async def health_check(self) -> bool:
        """
        Check if the API client can connect to Square

        Returns:
            True if connection successful, False otherwise
        """
        try:
            response = await self.get("/locations")
            return "locations" in response
        except SquareError as e:
            logger.error(f"Health check failed: {e}")
            return False

    async def aclose(self) -> None:
        """Close the transport if this client created it"""
        if self._owns_transport:
            await self._transport.aclose()

    async def __aenter__(self) -> 'SquareClient':
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    def __repr__(self) -> str:
        return f"SquareClient(environment={self.environment.value!r}, base_url={self.base_url!r})"


def _decode_json(text: str) -> Any:
    if not text or not text.strip():
        return None
    try:
        return json.loads(text)
    except ValueError:
        return None


def _extract_errors(payload: Any) -> List[Dict[str, Any]]:
    if not isinstance(payload, dict):
        return []
    errors = payload.get("errors") or []
    return [error for error in errors if isinstance(error, dict)]


def _parse_int(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None
