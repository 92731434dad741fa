from __future__ import annotations

from typing import Any, Dict, List, Optional

from .common import Address, SquareModel, SquareRequest


class Coordinates(SquareModel):
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class Location(SquareModel):
    id: Optional[str] = None
    name: Optional[str] = None
    status: Optional[str] = None
    type: Optional[str] = None
    address: Optional[Address] = None
    timezone: Optional[str] = None
    capabilities: Optional[List[str]] = None
    created_at: Optional[str] = None
    merchant_id: Optional[str] = None
    country: Optional[str] = None
    language_code: Optional[str] = None
    currency: Optional[str] = None
    phone_number: Optional[str] = None
    business_name: Optional[str] = None
    business_email: Optional[str] = None
    description: Optional[str] = None
    website_url: Optional[str] = None
    coordinates: Optional[Coordinates] = None
    business_hours: Optional[Dict[str, Any]] = None
    mcc: Optional[str] = None


class LocationDraft(SquareRequest):
    name: Optional[str] = None
    address: Optional[Address] = None
    timezone: Optional[str] = None
    status: Optional[str] = None
    type: Optional[str] = None
    language_code: Optional[str] = None
    phone_number: Optional[str] = None
    business_name: Optional[str] = None
    business_email: Optional[str] = None
    description: Optional[str] = None
    website_url: Optional[str] = None
    twitter_username: Optional[str] = None
    instagram_username: Optional[str] = None
    facebook_url: Optional[str] = None
    coordinates: Optional[Coordinates] = None
    mcc: Optional[str] = None


class LocationRequest(SquareRequest):
    """Body for both create and update"""
    location: LocationDraft
