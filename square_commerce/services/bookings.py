"""
Square Bookings Service

Handles booking-related operations for Square API including availability search,
booking creation, cancellation and team member booking profiles.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Tuple, Union

from ..builder import RequestBuilder
from ..exceptions import RemoteError, ValidationError
from ..models.bookings import (
    AppointmentSegment, Availability, AvailabilityFilter, AvailabilityQuery, Booking,
    BookingDraft, BusinessBookingProfile, CancelBookingRequest, CreateBookingRequest,
    SearchAvailabilityRequest, TeamMemberBookingProfile, UpdateBookingRequest,
)
from ..pagination import CursorPager
from ..utils import Timestamp, as_utc, format_timestamp

if TYPE_CHECKING:
    from ..client import SquareClient


logger = logging.getLogger(__name__)

# Square rejects availability searches outside this window
MIN_AVAILABILITY_RANGE = timedelta(hours=24)
MAX_AVAILABILITY_RANGE = timedelta(days=32)


class AppointmentSegmentBuilder(RequestBuilder):
    """Builds one appointment segment of a booking"""

    request_model = AppointmentSegment
    required = ("duration_minutes", "service_variation_id", "service_variation_version")
    exclusive = (("team_member_id", "any_team_member_id"),)

    def duration_minutes(self, minutes: float) -> 'AppointmentSegmentBuilder':
        return self._set("duration_minutes", minutes)

    def service_variation_id(self, variation_id: str) -> 'AppointmentSegmentBuilder':
        return self._set("service_variation_id", variation_id)

    def service_variation_version(self, version: int) -> 'AppointmentSegmentBuilder':
        return self._set("service_variation_version", version)

    def team_member_id(self, team_member_id: str) -> 'AppointmentSegmentBuilder':
        return self._set("team_member_id", team_member_id)

    def any_team_member_id(self, any_team_member: bool = True) -> 'AppointmentSegmentBuilder':
        return self._set("any_team_member_id", any_team_member)

    def intermission_minutes(self, minutes: int) -> 'AppointmentSegmentBuilder':
        return self._set("intermission_minutes", minutes)

    def add_resource_id(self, resource_id: str) -> 'AppointmentSegmentBuilder':
        return self._append("resource_ids", resource_id)


Segment = Union[AppointmentSegment, AppointmentSegmentBuilder]


class BookingBuilder(RequestBuilder):
    """Builds a CreateBookingRequest"""

    required = ("start_at", "customer_id", "appointment_segments")

    def start_at(self, start_at: Timestamp) -> 'BookingBuilder':
        return self._set("start_at", format_timestamp(start_at))

    def customer_id(self, customer_id: str) -> 'BookingBuilder':
        return self._set("customer_id", customer_id)

    def location_id(self, location_id: str) -> 'BookingBuilder':
        return self._set("location_id", location_id)

    def location_type(self, location_type: str) -> 'BookingBuilder':
        return self._set("location_type", location_type)

    def customer_note(self, note: str) -> 'BookingBuilder':
        return self._set("customer_note", note)

    def seller_note(self, note: str) -> 'BookingBuilder':
        return self._set("seller_note", note)

    def add_appointment_segment(self, segment: Segment) -> 'BookingBuilder':
        return self._append("appointment_segments", segment)

    def idempotency_key(self, key: str) -> 'BookingBuilder':
        return self._set("idempotency_key", key)

    def _split(self, values: Dict[str, Any]) -> Tuple[Dict[str, Any], BookingDraft]:
        envelope = {}
        if "idempotency_key" in values:
            envelope["idempotency_key"] = values.pop("idempotency_key")
        return envelope, BookingDraft(**values)

    def _assemble(self, values: Dict[str, Any]) -> CreateBookingRequest:
        envelope, booking = self._split(dict(values))
        return CreateBookingRequest(booking=booking, **envelope)


class BookingUpdateBuilder(BookingBuilder):
    """Builds an UpdateBookingRequest; only the fields set are changed"""

    required = ("booking_id",)

    def booking_id(self, booking_id: str) -> 'BookingUpdateBuilder':
        return self._set("booking_id", booking_id)

    def version(self, version: int) -> 'BookingUpdateBuilder':
        return self._set("version", version)

    def _assemble(self, values: Dict[str, Any]) -> UpdateBookingRequest:
        values = dict(values)
        booking_id = values.pop("booking_id")
        envelope, booking = self._split(values)
        return UpdateBookingRequest(booking_id=booking_id, booking=booking, **envelope)


class CancelBookingBuilder(RequestBuilder):
    """Builds a CancelBookingRequest"""

    request_model = CancelBookingRequest
    required = ("booking_id",)

    def booking_id(self, booking_id: str) -> 'CancelBookingBuilder':
        return self._set("booking_id", booking_id)

    def booking_version(self, version: int) -> 'CancelBookingBuilder':
        return self._set("booking_version", version)

    def idempotency_key(self, key: str) -> 'CancelBookingBuilder':
        return self._set("idempotency_key", key)


class AvailabilityQueryBuilder(RequestBuilder):
    """Builds a SearchAvailabilityRequest"""

    required = ("start_at_range",)

    def start_at_range(self, start_at: Timestamp, end_at: Timestamp) -> 'AvailabilityQueryBuilder':
        return self._set("start_at_range", (start_at, end_at))

    def location_id(self, location_id: str) -> 'AvailabilityQueryBuilder':
        return self._set("location_id", location_id)

    def booking_id(self, booking_id: str) -> 'AvailabilityQueryBuilder':
        return self._set("booking_id", booking_id)

    def add_segment_filter(self, service_variation_id: str,
                           team_member_ids: Optional[Iterable[str]] = None) -> 'AvailabilityQueryBuilder':
        segment_filter = {"service_variation_id": service_variation_id}
        if team_member_ids:
            segment_filter["team_member_id_filter"] = {"any": list(team_member_ids)}
        return self._append("segment_filters", segment_filter)

    def _assemble(self, values: Dict[str, Any]) -> SearchAvailabilityRequest:
        values = dict(values)
        start_at, end_at = values.pop("start_at_range")
        if isinstance(start_at, datetime) and isinstance(end_at, datetime):
            span = as_utc(end_at) - as_utc(start_at)
            if span < MIN_AVAILABILITY_RANGE:
                raise ValidationError("Time range must be at least 24 hours",
                                      fields=["start_at_range"])
            if span > MAX_AVAILABILITY_RANGE:
                raise ValidationError("Time range must be no more than 32 days",
                                      fields=["start_at_range"])

        time_range = {"start_at": format_timestamp(start_at), "end_at": format_timestamp(end_at)}
        query_filter = AvailabilityFilter(start_at_range=time_range, **values)
        return SearchAvailabilityRequest(query=AvailabilityQuery(filter=query_filter))


class BookingsService:
    """Service for managing Square bookings"""

    def __init__(self, client: 'SquareClient'):
        """
        Initialize BookingsService

        Args:
            client: Square API client instance
        """
        self.client = client

    def builder(self) -> BookingBuilder:
        """Builder whose build() creates the booking"""
        return BookingBuilder(dispatch=self.create)

    def update_builder(self, booking_id: Optional[str] = None) -> BookingUpdateBuilder:
        """Builder whose build() updates the booking"""
        builder = BookingUpdateBuilder(dispatch=self.update)
        if booking_id is not None:
            builder.booking_id(booking_id)
        return builder

    def cancel_builder(self, booking_id: Optional[str] = None) -> CancelBookingBuilder:
        """Builder whose build() cancels the booking"""
        builder = CancelBookingBuilder(dispatch=self.cancel)
        if booking_id is not None:
            builder.booking_id(booking_id)
        return builder

    def availability_builder(self) -> AvailabilityQueryBuilder:
        """Builder whose build() runs the availability search"""
        return AvailabilityQueryBuilder(dispatch=self.search_availability)

    def list(self, limit: Optional[int] = None,
             location_id: Optional[str] = None,
             customer_id: Optional[str] = None,
             team_member_id: Optional[str] = None,
             start_at_min: Optional[Timestamp] = None,
             start_at_max: Optional[Timestamp] = None) -> CursorPager[Booking]:
        """
        List bookings with optional filters

        Args:
            limit: Page size requested from Square
            location_id: Filter by location ID
            customer_id: Filter by customer ID
            team_member_id: Filter by team member ID
            start_at_min: Filter by minimum start time
            start_at_max: Filter by maximum start time

        Returns:
            Lazy sequence of Booking objects
        """
        params = {
            "limit": limit,
            "location_id": location_id,
            "customer_id": customer_id,
            "team_member_id": team_member_id,
            "start_at_min": format_timestamp(start_at_min),
            "start_at_max": format_timestamp(start_at_max),
        }

        async def fetch_page(cursor: Optional[str]) -> Tuple[List[Booking], Optional[str]]:
            logger.info("Listing bookings")
            response = await self.client.get("/bookings", params={**params, "cursor": cursor})
            bookings = [Booking.model_validate(item) for item in response.get("bookings", [])]
            logger.info(f"Found {len(bookings)} bookings")
            return bookings, response.get("cursor")

        return CursorPager(fetch_page)

    async def retrieve(self, booking_id: str) -> Booking:
        """
        Get a specific booking by ID

        Raises:
            NotFoundError: If the booking does not exist
        """
        logger.info(f"Fetching booking: {booking_id}")
        response = await self.client.get(f"/bookings/{booking_id}", resource_id=booking_id)
        return _booking_from(response)

    async def create(self, request: CreateBookingRequest) -> Booking:
        """
        Create a new booking

        Not idempotent unless the request carries an idempotency key.
        """
        logger.info(f"Creating booking for customer {request.booking.customer_id} "
                    f"at {request.booking.start_at}")
        response = await self.client.post("/bookings", data=request.to_payload())
        booking = _booking_from(response)
        logger.info(f"Created booking with ID: {booking.id}")
        return booking

    async def update(self, request: UpdateBookingRequest) -> Booking:
        """Update booking information"""
        logger.info(f"Updating booking: {request.booking_id}")
        response = await self.client.put(f"/bookings/{request.booking_id}",
                                         data=request.to_payload(),
                                         resource_id=request.booking_id)
        booking = _booking_from(response)
        logger.info(f"Updated booking: {request.booking_id}")
        return booking

    async def cancel(self, request: CancelBookingRequest) -> Booking:
        """Cancel a booking"""
        logger.info(f"Cancelling booking: {request.booking_id}")
        response = await self.client.post(f"/bookings/{request.booking_id}/cancel",
                                          data=request.to_payload(),
                                          resource_id=request.booking_id)
        return _booking_from(response)

    async def search_availability(self, request: SearchAvailabilityRequest) -> List[Availability]:
        """
        Search for available appointment slots

        Returns:
            Available time slots in the order Square returned them
        """
        time_range = request.query.filter.start_at_range
        logger.info(f"Searching availability from {time_range.start_at} to {time_range.end_at}")
        response = await self.client.post("/bookings/availability/search",
                                          data=request.to_payload())
        availabilities = [Availability.model_validate(item)
                          for item in response.get("availabilities", [])]
        logger.info(f"Found {len(availabilities)} available slots")
        return availabilities

    async def retrieve_business_profile(self) -> BusinessBookingProfile:
        """Get the seller's business booking profile"""
        logger.info("Fetching business booking profile")
        response = await self.client.get("/bookings/business-booking-profile")
        return BusinessBookingProfile.model_validate(
            response.get("business_booking_profile") or {})

    def list_team_member_profiles(self, bookable_only: Optional[bool] = None,
                                  location_id: Optional[str] = None,
                                  limit: Optional[int] = None) -> CursorPager[TeamMemberBookingProfile]:
        """List booking profiles of team members"""
        params = {"bookable_only": bookable_only, "location_id": location_id, "limit": limit}

        async def fetch_page(cursor: Optional[str]) -> Tuple[List[TeamMemberBookingProfile], Optional[str]]:
            logger.info("Listing team member booking profiles")
            response = await self.client.get("/bookings/team-member-booking-profiles",
                                             params={**params, "cursor": cursor})
            profiles = [TeamMemberBookingProfile.model_validate(item)
                        for item in response.get("team_member_booking_profiles", [])]
            return profiles, response.get("cursor")

        return CursorPager(fetch_page)

    async def retrieve_team_member_profile(self, team_member_id: str) -> TeamMemberBookingProfile:
        """Get the booking profile of one team member"""
        logger.info(f"Fetching team member booking profile: {team_member_id}")
        response = await self.client.get(
            f"/bookings/team-member-booking-profiles/{team_member_id}",
            resource_id=team_member_id,
        )
        return TeamMemberBookingProfile.model_validate(
            response.get("team_member_booking_profile") or {})

    async def get_upcoming_bookings(self, location_id: str, days_ahead: int = 30) -> List[Booking]:
        """
        Get upcoming bookings for a location

        Args:
            location_id: Square location ID
            days_ahead: Number of days ahead to look (default 30)
        """
        now = datetime.now(timezone.utc)
        end_time = now + timedelta(days=days_ahead)
        return await self.list(location_id=location_id,
                               start_at_min=now,
                               start_at_max=end_time).collect()


def _booking_from(response: Dict[str, Any]) -> Booking:
    booking = response.get("booking")
    if not booking:
        raise RemoteError("Square returned no booking data", response=str(response))
    return Booking.model_validate(booking)
