"""
Square Inventory Service

Handles inventory counts, adjustments, transfers and batch changes.
"""

import logging
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Tuple, Union

from ..builder import RequestBuilder, new_idempotency_key
from ..exceptions import RemoteError
from ..models.inventory import (
    BatchChangeInventoryRequest, InventoryAdjustment, InventoryChange, InventoryCount,
    InventoryPhysicalCount, InventoryTransfer,
)
from ..pagination import CursorPager

if TYPE_CHECKING:
    from ..client import SquareClient


logger = logging.getLogger(__name__)


class InventoryChangeBuilder(RequestBuilder):
    """Builds one InventoryChange; exactly one kind of change may be attached"""

    request_model = InventoryChange
    required = ("type",)
    exclusive = (("physical_count", "adjustment", "transfer"),)

    def _set_change(self, name: str, change_type: str, value: Any) -> 'InventoryChangeBuilder':
        # The type follows the attached change; clearing the change clears its type
        if value is not None:
            self._set("type", change_type)
        elif self._values.get("type") == change_type:
            self._set("type", None)
        return self._set(name, value)

    def physical_count(self, count: InventoryPhysicalCount) -> 'InventoryChangeBuilder':
        return self._set_change("physical_count", "PHYSICAL_COUNT", count)

    def adjustment(self, adjustment: InventoryAdjustment) -> 'InventoryChangeBuilder':
        return self._set_change("adjustment", "ADJUSTMENT", adjustment)

    def transfer(self, transfer: InventoryTransfer) -> 'InventoryChangeBuilder':
        return self._set_change("transfer", "TRANSFER", transfer)

    def change_type(self, change_type: str) -> 'InventoryChangeBuilder':
        return self._set("type", change_type)

    def measurement_unit_id(self, unit_id: str) -> 'InventoryChangeBuilder':
        return self._set("measurement_unit_id", unit_id)


Change = Union[InventoryChange, InventoryChangeBuilder]


class InventoryBatchChangeBuilder(RequestBuilder):
    """Builds a BatchChangeInventoryRequest; an idempotency key is generated if unset"""

    required = ("changes",)

    def add_change(self, change: Change) -> 'InventoryBatchChangeBuilder':
        return self._append("changes", change)

    def ignore_unchanged_counts(self, ignore: bool = True) -> 'InventoryBatchChangeBuilder':
        return self._set("ignore_unchanged_counts", ignore)

    def idempotency_key(self, key: str) -> 'InventoryBatchChangeBuilder':
        return self._set("idempotency_key", key)

    def _assemble(self, values: Dict[str, Any]) -> BatchChangeInventoryRequest:
        values = dict(values)
        values.setdefault("idempotency_key", new_idempotency_key())
        return BatchChangeInventoryRequest(**values)


class InventoryService:
    """Service for reading and changing Square inventory"""

    def __init__(self, client: 'SquareClient'):
        """
        Initialize InventoryService

        Args:
            client: Square API client instance
        """
        self.client = client

    def batch_change_builder(self) -> InventoryBatchChangeBuilder:
        """Builder whose build() applies the batch change"""
        return InventoryBatchChangeBuilder(dispatch=self.batch_change)

    async def batch_change(self, request: BatchChangeInventoryRequest) -> List[InventoryCount]:
        """
        Apply adjustments, transfers and physical counts in one call

        Returns:
            The resulting inventory counts
        """
        logger.info(f"Applying {len(request.changes)} inventory changes")
        response = await self.client.post("/inventory/changes/batch-create",
                                          data=request.to_payload())
        counts = [InventoryCount.model_validate(item) for item in response.get("counts", [])]
        logger.info(f"Inventory batch change returned {len(counts)} counts")
        return counts

    def counts(self, catalog_object_id: str,
               location_ids: Optional[Iterable[str]] = None) -> CursorPager[InventoryCount]:
        """Lazy sequence of counts of one catalog object across locations"""
        params = {"location_ids": ",".join(location_ids) if location_ids else None}

        async def fetch_page(cursor: Optional[str]) -> Tuple[List[InventoryCount], Optional[str]]:
            logger.info(f"Fetching inventory counts for: {catalog_object_id}")
            response = await self.client.get(f"/inventory/{catalog_object_id}",
                                             params={**params, "cursor": cursor},
                                             resource_id=catalog_object_id)
            counts = [InventoryCount.model_validate(item) for item in response.get("counts", [])]
            return counts, response.get("cursor")

        return CursorPager(fetch_page)

    async def retrieve_count(self, catalog_object_id: str,
                             location_id: Optional[str] = None,
                             location_ids: Optional[Iterable[str]] = None) -> List[InventoryCount]:
        """
        Get the current counts of a catalog object

        Args:
            catalog_object_id: Item variation ID
            location_id: Optional single location to restrict the counts to
            location_ids: Optional set of locations to restrict the counts to

        Raises:
            NotFoundError: If the catalog object does not exist
        """
        locations = list(location_ids or [])
        if location_id:
            locations.append(location_id)
        return await self.counts(catalog_object_id, locations or None).collect()

    async def retrieve_adjustment(self, adjustment_id: str) -> InventoryAdjustment:
        """Get one inventory adjustment by ID"""
        logger.info(f"Fetching inventory adjustment: {adjustment_id}")
        response = await self.client.get(f"/inventory/adjustments/{adjustment_id}",
                                         resource_id=adjustment_id)
        return InventoryAdjustment.model_validate(_required(response, "adjustment"))

    async def retrieve_transfer(self, transfer_id: str) -> InventoryTransfer:
        """Get one inventory transfer by ID"""
        logger.info(f"Fetching inventory transfer: {transfer_id}")
        response = await self.client.get(f"/inventory/transfers/{transfer_id}",
                                         resource_id=transfer_id)
        return InventoryTransfer.model_validate(_required(response, "transfer"))

    async def retrieve_physical_count(self, physical_count_id: str) -> InventoryPhysicalCount:
        """Get one inventory physical count by ID"""
        logger.info(f"Fetching inventory physical count: {physical_count_id}")
        response = await self.client.get(f"/inventory/physical-counts/{physical_count_id}",
                                         resource_id=physical_count_id)
        return InventoryPhysicalCount.model_validate(_required(response, "count"))


def _required(response: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = response.get(key)
    if not value:
        raise RemoteError(f"Square returned no {key} data", response=str(response))
    return value
