"""
Square Catalog Service

Handles catalog-related operations for Square API including items,
variations and services.
"""

import logging
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Tuple

from ..builder import RequestBuilder, new_idempotency_key
from ..exceptions import RemoteError
from ..models.catalog import (
    CatalogObject, CatalogObjectResult, UpsertCatalogObjectRequest, UpsertCatalogObjectResult,
)
from ..models.common import DeleteResult
from ..pagination import CursorPager

if TYPE_CHECKING:
    from ..client import SquareClient


logger = logging.getLogger(__name__)


class CatalogObjectBuilder(RequestBuilder):
    """
    Builds an UpsertCatalogObjectRequest

    New objects use a temporary id starting with '#'; Square maps it to a
    permanent id in the response.
    """

    required = ("type", "id")

    def object_type(self, object_type: str) -> 'CatalogObjectBuilder':
        return self._set("type", object_type)

    def object_id(self, object_id: str) -> 'CatalogObjectBuilder':
        return self._set("id", object_id)

    def version(self, version: int) -> 'CatalogObjectBuilder':
        return self._set("version", version)

    def present_at_all_locations(self, present: bool = True) -> 'CatalogObjectBuilder':
        return self._set("present_at_all_locations", present)

    def present_at_location_ids(self, location_ids: Iterable[str]) -> 'CatalogObjectBuilder':
        return self._set("present_at_location_ids", list(location_ids))

    def item_data(self, item_data: Dict[str, Any]) -> 'CatalogObjectBuilder':
        return self._set("item_data", item_data)

    def item_variation_data(self, variation_data: Dict[str, Any]) -> 'CatalogObjectBuilder':
        return self._set("item_variation_data", variation_data)

    def category_data(self, category_data: Dict[str, Any]) -> 'CatalogObjectBuilder':
        return self._set("category_data", category_data)

    def idempotency_key(self, key: str) -> 'CatalogObjectBuilder':
        return self._set("idempotency_key", key)

    def _assemble(self, values: Dict[str, Any]) -> UpsertCatalogObjectRequest:
        values = dict(values)
        key = values.pop("idempotency_key", None) or new_idempotency_key()
        return UpsertCatalogObjectRequest(idempotency_key=key, object=CatalogObject(**values))


class CatalogService:
    """Service for managing Square catalog items and services"""

    def __init__(self, client: 'SquareClient'):
        """
        Initialize CatalogService

        Args:
            client: Square API client instance
        """
        self.client = client

    def builder(self) -> CatalogObjectBuilder:
        """Builder whose build() upserts the object"""
        return CatalogObjectBuilder(dispatch=self.upsert)

    def list(self, types: Optional[Iterable[str]] = None) -> CursorPager[CatalogObject]:
        """
        List catalog objects with optional type filtering

        Args:
            types: Catalog object types to filter by (e.g., ["ITEM", "ITEM_VARIATION"])
        """
        params = {"types": ",".join(types) if types else None}

        async def fetch_page(cursor: Optional[str]) -> Tuple[List[CatalogObject], Optional[str]]:
            logger.info("Fetching catalog items")
            response = await self.client.get("/catalog/list", params={**params, "cursor": cursor})
            objects = [CatalogObject.model_validate(item) for item in response.get("objects", [])]
            logger.info(f"Found {len(objects)} catalog objects")
            return objects, response.get("cursor")

        return CursorPager(fetch_page)

    async def retrieve(self, object_id: str,
                       include_related_objects: bool = False) -> CatalogObjectResult:
        """
        Get a catalog object by ID

        Args:
            object_id: Catalog object ID
            include_related_objects: Also return variations, categories, taxes...

        Raises:
            NotFoundError: If the object does not exist
        """
        logger.info(f"Fetching catalog object: {object_id}")
        params = {"include_related_objects": include_related_objects or None}
        response = await self.client.get(f"/catalog/object/{object_id}", params=params,
                                         resource_id=object_id)
        if not response.get("object"):
            raise RemoteError("Square returned no catalog object", response=str(response))
        return CatalogObjectResult.model_validate(response)

    async def upsert(self, request: UpsertCatalogObjectRequest) -> UpsertCatalogObjectResult:
        """Create or update a catalog object"""
        logger.info(f"Upserting catalog object: {request.object.id}")
        response = await self.client.post("/catalog/object", data=request.to_payload())
        result = UpsertCatalogObjectResult.model_validate(response)
        if result.catalog_object is None:
            raise RemoteError("Square returned no catalog object", response=str(response))
        logger.info(f"Upserted catalog object: {result.catalog_object.id}")
        return result

    async def delete(self, object_id: str) -> DeleteResult:
        """Delete a catalog object and its children"""
        logger.info(f"Deleting catalog object: {object_id}")
        response = await self.client.delete(f"/catalog/object/{object_id}", resource_id=object_id)
        return DeleteResult.model_validate(response)

    async def get_service_variations(self, service_item_id: str) -> List[CatalogObject]:
        """Get all ITEM_VARIATION objects related to a service item"""
        result = await self.retrieve(service_item_id, include_related_objects=True)
        variations = [obj for obj in (result.related_objects or [])
                      if obj.type == "ITEM_VARIATION"]
        logger.info(f"Found {len(variations)} variations")
        return variations
