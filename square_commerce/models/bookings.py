from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from pydantic import Field

from .common import SquareModel, SquareRequest


class AppointmentSegment(SquareModel):
    duration_minutes: Optional[float] = None
    service_variation_id: Optional[str] = None
    service_variation_version: Optional[int] = None
    team_member_id: Optional[str] = None
    any_team_member_id: Optional[bool] = None
    intermission_minutes: Optional[int] = None
    resource_ids: Optional[Tuple[str, ...]] = None


class Booking(SquareModel):
    id: Optional[str] = None
    version: Optional[int] = None
    status: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    start_at: Optional[str] = None
    all_day: Optional[bool] = None
    location_id: Optional[str] = None
    location_type: Optional[str] = None
    customer_id: Optional[str] = None
    customer_note: Optional[str] = None
    seller_note: Optional[str] = None
    source: Optional[str] = None
    transition_time_minutes: Optional[int] = None
    appointment_segments: Optional[List[AppointmentSegment]] = None
    creator_details: Optional[Dict[str, Any]] = None


class BookingDraft(SquareRequest):
    """Writable subset of a booking"""
    start_at: Optional[str] = None
    customer_id: Optional[str] = None
    location_id: Optional[str] = None
    location_type: Optional[str] = None
    customer_note: Optional[str] = None
    seller_note: Optional[str] = None
    version: Optional[int] = None
    appointment_segments: Optional[Tuple[AppointmentSegment, ...]] = None


class CreateBookingRequest(SquareRequest):
    idempotency_key: Optional[str] = None
    booking: BookingDraft


class UpdateBookingRequest(SquareRequest):
    booking_id: str = Field(exclude=True)
    idempotency_key: Optional[str] = None
    booking: BookingDraft


class CancelBookingRequest(SquareRequest):
    booking_id: str = Field(exclude=True)
    idempotency_key: Optional[str] = None
    booking_version: Optional[int] = None


class TimeRange(SquareModel):
    start_at: str
    end_at: str


class FilterValue(SquareModel):
    any: Optional[Tuple[str, ...]] = None
    all: Optional[Tuple[str, ...]] = None
    none: Optional[Tuple[str, ...]] = None


class SegmentFilter(SquareModel):
    service_variation_id: str
    team_member_id_filter: Optional[FilterValue] = None


class AvailabilityFilter(SquareModel):
    start_at_range: TimeRange
    location_id: Optional[str] = None
    booking_id: Optional[str] = None
    segment_filters: Optional[Tuple[SegmentFilter, ...]] = None


class AvailabilityQuery(SquareModel):
    filter: AvailabilityFilter


class SearchAvailabilityRequest(SquareRequest):
    query: AvailabilityQuery


class Availability(SquareModel):
    start_at: Optional[str] = None
    location_id: Optional[str] = None
    appointment_segments: Optional[List[AppointmentSegment]] = None


class BusinessBookingProfile(SquareModel):
    seller_id: Optional[str] = None
    created_at: Optional[str] = None
    booking_enabled: Optional[bool] = None
    customer_timezone_choice: Optional[str] = None
    booking_policy: Optional[str] = None
    allow_user_cancel: Optional[bool] = None
    business_appointment_settings: Optional[Dict[str, Any]] = None
    support_seller_level_writes: Optional[bool] = None


class TeamMemberBookingProfile(SquareModel):
    team_member_id: Optional[str] = None
    description: Optional[str] = None
    display_name: Optional[str] = None
    is_bookable: Optional[bool] = None
    profile_image_url: Optional[str] = None
