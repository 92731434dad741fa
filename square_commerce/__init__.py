"""
Square Commerce API client

Typed request builders and async services over Square's REST API:
locations, bookings, inventory, customers, catalog, payments, cards,
orders, payment links, Square Terminal and sites.
"""

from .builder import RequestBuilder, new_idempotency_key
from .client import SquareClient
from .config import SquareConfig, SquareEnvironment, SquareSettings
from .exceptions import (
    AuthError, BuilderConsumedError, ConfigError, ConflictError, NotFoundError, RateLimitError,
    RemoteError, SquareError, TransportError, ValidationError,
)
from .pagination import CursorPager
from .transport import HttpxTransport, Transport, TransportResponse
from .services import (
    BookingsService, CardsService, CatalogService, CheckoutService, CustomersService,
    InventoryService, LocationsService, OrdersService, PaymentsService, SitesService,
    TerminalService,
)

__all__ = [
    'SquareClient',
    'RequestBuilder',
    'new_idempotency_key',
    'SquareConfig',
    'SquareEnvironment',
    'SquareSettings',
    'CursorPager',
    'Transport',
    'TransportResponse',
    'HttpxTransport',
    'LocationsService',
    'BookingsService',
    'InventoryService',
    'CustomersService',
    'CatalogService',
    'PaymentsService',
    'CardsService',
    'OrdersService',
    'CheckoutService',
    'TerminalService',
    'SitesService',
    'SquareError',
    'ConfigError',
    'ValidationError',
    'ConflictError',
    'BuilderConsumedError',
    'TransportError',
    'RemoteError',
    'AuthError',
    'NotFoundError',
    'RateLimitError',
]

__version__ = '1.0.0'
