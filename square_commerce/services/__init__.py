"""
Square API Services

Service modules for the Square API resource families, each with the
builders for its request types.
"""

from .bookings import (
    AppointmentSegmentBuilder, AvailabilityQueryBuilder, BookingBuilder, BookingsService,
    BookingUpdateBuilder, CancelBookingBuilder,
)
from .cards import CardBuilder, CardsService
from .catalog import CatalogObjectBuilder, CatalogService
from .checkout import CheckoutService, PaymentLinkBuilder, PaymentLinkUpdateBuilder, QuickPayBuilder
from .customers import CustomerBuilder, CustomerSearchBuilder, CustomersService
from .inventory import InventoryBatchChangeBuilder, InventoryChangeBuilder, InventoryService
from .locations import LocationBuilder, LocationsService
from .orders import (
    LineItemBuilder, OrderBuilder, OrderCalculationBuilder, OrderDraftBuilder, OrdersService,
    OrderSearchBuilder, OrderUpdateBuilder, PayOrderBuilder, ServiceChargeBuilder,
)
from .payments import PaymentBuilder, PaymentsService
from .sites import SitesService
from .terminal import (
    DeviceOptionsBuilder, TerminalCheckoutBuilder, TerminalRefundBuilder, TerminalSearchBuilder,
    TerminalService,
)

__all__ = [
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
    'LocationBuilder',
    'AppointmentSegmentBuilder',
    'BookingBuilder',
    'BookingUpdateBuilder',
    'CancelBookingBuilder',
    'AvailabilityQueryBuilder',
    'InventoryChangeBuilder',
    'InventoryBatchChangeBuilder',
    'CustomerBuilder',
    'CustomerSearchBuilder',
    'CatalogObjectBuilder',
    'PaymentBuilder',
    'CardBuilder',
    'LineItemBuilder',
    'ServiceChargeBuilder',
    'OrderDraftBuilder',
    'OrderBuilder',
    'OrderUpdateBuilder',
    'OrderCalculationBuilder',
    'PayOrderBuilder',
    'OrderSearchBuilder',
    'QuickPayBuilder',
    'PaymentLinkBuilder',
    'PaymentLinkUpdateBuilder',
    'DeviceOptionsBuilder',
    'TerminalCheckoutBuilder',
    'TerminalRefundBuilder',
    'TerminalSearchBuilder',
]
