"""
Typed request and response objects for the Square API.

Response models are frozen and keep any fields Square adds beyond the ones
declared here. Request models serialize only the fields that were set.
"""

from .common import Address, DeleteResult, Money, ResponseError, SquareModel, SquareRequest
from .bookings import (
    AppointmentSegment, Availability, AvailabilityFilter, AvailabilityQuery, Booking,
    BookingDraft, BusinessBookingProfile, CancelBookingRequest, CreateBookingRequest,
    FilterValue, SearchAvailabilityRequest, SegmentFilter, TeamMemberBookingProfile,
    TimeRange, UpdateBookingRequest,
)
from .cards import Card, CardDraft, CreateCardRequest
from .catalog import (
    CatalogObject, CatalogObjectResult, UpsertCatalogObjectRequest, UpsertCatalogObjectResult,
)
from .checkout import (
    CheckoutOptions, CreatePaymentLinkRequest, PaymentLink, PaymentLinkDraft, PaymentLinkResult,
    PrePopulatedData, QuickPay, UpdatePaymentLinkRequest,
)
from .customers import Customer, CustomerRequest, SearchCustomersRequest
from .inventory import (
    BatchChangeInventoryRequest, InventoryAdjustment, InventoryChange, InventoryCount,
    InventoryPhysicalCount, InventoryTransfer,
)
from .locations import Coordinates, Location, LocationDraft, LocationRequest
from .orders import (
    CalculateOrderRequest, CreateOrderRequest, Order, OrderDraft, OrderEntry, OrderLineItem,
    OrderServiceCharge, PayOrderRequest, SearchOrdersRequest, UpdateOrderRequest,
)
from .payments import CreatePaymentRequest, Payment
from .sites import Site
from .terminal import (
    CreateTerminalCheckoutRequest, CreateTerminalRefundRequest, DeviceCheckoutOptions,
    SearchTerminalRequest, TerminalCheckout, TerminalCheckoutDraft, TerminalRefund,
    TerminalRefundDraft,
)

__all__ = [
    'Address', 'DeleteResult', 'Money', 'ResponseError', 'SquareModel', 'SquareRequest',
    'AppointmentSegment', 'Availability', 'AvailabilityFilter', 'AvailabilityQuery', 'Booking',
    'BookingDraft', 'BusinessBookingProfile', 'CancelBookingRequest', 'CreateBookingRequest',
    'FilterValue', 'SearchAvailabilityRequest', 'SegmentFilter', 'TeamMemberBookingProfile',
    'TimeRange', 'UpdateBookingRequest',
    'Card', 'CardDraft', 'CreateCardRequest',
    'CatalogObject', 'CatalogObjectResult', 'UpsertCatalogObjectRequest',
    'UpsertCatalogObjectResult',
    'Customer', 'CustomerRequest', 'SearchCustomersRequest',
    'BatchChangeInventoryRequest', 'InventoryAdjustment', 'InventoryChange', 'InventoryCount',
    'InventoryPhysicalCount', 'InventoryTransfer',
    'Coordinates', 'Location', 'LocationDraft', 'LocationRequest',
    'CreatePaymentRequest', 'Payment',
    'CheckoutOptions', 'CreatePaymentLinkRequest', 'PaymentLink', 'PaymentLinkDraft',
    'PaymentLinkResult', 'PrePopulatedData', 'QuickPay', 'UpdatePaymentLinkRequest',
    'CalculateOrderRequest', 'CreateOrderRequest', 'Order', 'OrderDraft', 'OrderEntry',
    'OrderLineItem', 'OrderServiceCharge', 'PayOrderRequest', 'SearchOrdersRequest',
    'UpdateOrderRequest',
    'Site',
    'CreateTerminalCheckoutRequest', 'CreateTerminalRefundRequest', 'DeviceCheckoutOptions',
    'SearchTerminalRequest', 'TerminalCheckout', 'TerminalCheckoutDraft', 'TerminalRefund',
    'TerminalRefundDraft',
]
