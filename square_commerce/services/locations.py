"""
Square Locations Service

Handles location-related operations for Square API.
"""

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

from ..builder import RequestBuilder
from ..exceptions import NotFoundError, RemoteError
from ..models.common import Address
from ..models.locations import Location, LocationDraft, LocationRequest
from ..pagination import CursorPager

if TYPE_CHECKING:
    from ..client import SquareClient


logger = logging.getLogger(__name__)


class LocationBuilder(RequestBuilder):
    """Builds the body for creating or updating a location"""

    required = ("name",)

    def name(self, name: str) -> 'LocationBuilder':
        return self._set("name", name)

    def address(self, address: Address) -> 'LocationBuilder':
        return self._set("address", address)

    def timezone(self, timezone: str) -> 'LocationBuilder':
        return self._set("timezone", timezone)

    def status(self, status: str) -> 'LocationBuilder':
        return self._set("status", status)

    def location_type(self, location_type: str) -> 'LocationBuilder':
        return self._set("type", location_type)

    def language_code(self, language_code: str) -> 'LocationBuilder':
        return self._set("language_code", language_code)

    def phone_number(self, phone_number: str) -> 'LocationBuilder':
        return self._set("phone_number", phone_number)

    def business_name(self, business_name: str) -> 'LocationBuilder':
        return self._set("business_name", business_name)

    def business_email(self, business_email: str) -> 'LocationBuilder':
        return self._set("business_email", business_email)

    def description(self, description: str) -> 'LocationBuilder':
        return self._set("description", description)

    def website_url(self, website_url: str) -> 'LocationBuilder':
        return self._set("website_url", website_url)

    def twitter_username(self, twitter_username: str) -> 'LocationBuilder':
        return self._set("twitter_username", twitter_username)

    def instagram_username(self, instagram_username: str) -> 'LocationBuilder':
        return self._set("instagram_username", instagram_username)

    def facebook_url(self, facebook_url: str) -> 'LocationBuilder':
        return self._set("facebook_url", facebook_url)

    def coordinates(self, latitude: float, longitude: float) -> 'LocationBuilder':
        return self._set("coordinates", {"latitude": latitude, "longitude": longitude})

    def mcc(self, mcc: str) -> 'LocationBuilder':
        return self._set("mcc", mcc)

    def _assemble(self, values: Dict[str, Any]) -> LocationRequest:
        return LocationRequest(location=LocationDraft(**values))


class LocationsService:
    """Service for managing Square locations"""

    def __init__(self, client: 'SquareClient'):
        """
        Initialize LocationsService

        Args:
            client: Square API client instance
        """
        self.client = client

    def builder(self) -> LocationBuilder:
        """Builder whose build() creates the location"""
        return LocationBuilder(dispatch=self.create)

    def list(self) -> CursorPager[Location]:
        """
        List all locations for the merchant

        Returns:
            Lazy sequence of Location objects
        """
        async def fetch_page(cursor: Optional[str]) -> Tuple[List[Location], Optional[str]]:
            logger.info("Fetching all locations")
            response = await self.client.get("/locations", params={"cursor": cursor})
            locations = [Location.model_validate(item) for item in response.get("locations", [])]
            logger.info(f"Found {len(locations)} locations")
            return locations, response.get("cursor")

        return CursorPager(fetch_page)

    async def retrieve(self, location_id: str) -> Location:
        """
        Get a specific location by ID

        Args:
            location_id: Square location ID ("main" selects the main location)

        Raises:
            NotFoundError: If the location does not exist
        """
        logger.info(f"Fetching location: {location_id}")
        response = await self.client.get(f"/locations/{location_id}", resource_id=location_id)
        return _location_from(response)

    async def create(self, request: LocationRequest) -> Location:
        """Create a new location"""
        logger.info(f"Creating location: {request.location.name}")
        response = await self.client.post("/locations", data=request.to_payload())
        location = _location_from(response)
        logger.info(f"Created location with ID: {location.id}")
        return location

    async def update(self, location_id: str, request: LocationRequest) -> Location:
        """Update an existing location"""
        logger.info(f"Updating location: {location_id}")
        response = await self.client.put(f"/locations/{location_id}",
                                         data=request.to_payload(), resource_id=location_id)
        return _location_from(response)

    async def get_main_location_id(self) -> str:
        """
        Get the main location ID (first active location)

        Raises:
            NotFoundError: If no active locations found
        """
        async for location in self.list():
            if location.status == "ACTIVE":
                logger.info(f"Main location ID: {location.id}")
                return location.id
        raise NotFoundError("No active locations found")

    async def find_by_name(self, name: str) -> Optional[Location]:
        """
        Find a location by name (case-insensitive)

        Returns:
            Location if found, None otherwise
        """
        async for location in self.list():
            if (location.name or "").lower() == name.lower():
                logger.info(f"Found location by name '{name}': {location.id}")
                return location

        logger.warning(f"No location found with name '{name}'")
        return None

    async def is_bookings_enabled(self, location_id: str) -> bool:
        """Check if the BOOKINGS capability is enabled for a location"""
        location = await self.retrieve(location_id)
        enabled = "BOOKINGS" in (location.capabilities or [])
        logger.info(f"Bookings enabled for location {location_id}: {enabled}")
        return enabled


def _location_from(response: Dict[str, Any]) -> Location:
    location = response.get("location")
    if not location:
        raise RemoteError("Square returned no location data", response=str(response))
    return Location.model_validate(location)
