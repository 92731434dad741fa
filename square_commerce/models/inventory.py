from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from .common import SquareModel, SquareRequest


class InventoryCount(SquareModel):
    catalog_object_id: Optional[str] = None
    catalog_object_type: Optional[str] = None
    state: Optional[str] = None
    location_id: Optional[str] = None
    quantity: Optional[str] = None
    calculated_at: Optional[str] = None
    is_estimated: Optional[bool] = None


class InventoryPhysicalCount(SquareModel):
    id: Optional[str] = None
    reference_id: Optional[str] = None
    catalog_object_id: Optional[str] = None
    catalog_object_type: Optional[str] = None
    state: Optional[str] = None
    location_id: Optional[str] = None
    quantity: Optional[str] = None
    occurred_at: Optional[str] = None
    created_at: Optional[str] = None
    team_member_id: Optional[str] = None
    source: Optional[Dict[str, Any]] = None


class InventoryAdjustment(SquareModel):
    id: Optional[str] = None
    reference_id: Optional[str] = None
    from_state: Optional[str] = None
    to_state: Optional[str] = None
    location_id: Optional[str] = None
    catalog_object_id: Optional[str] = None
    catalog_object_type: Optional[str] = None
    quantity: Optional[str] = None
    occurred_at: Optional[str] = None
    created_at: Optional[str] = None
    team_member_id: Optional[str] = None
    source: Optional[Dict[str, Any]] = None


class InventoryTransfer(SquareModel):
    id: Optional[str] = None
    reference_id: Optional[str] = None
    state: Optional[str] = None
    from_location_id: Optional[str] = None
    to_location_id: Optional[str] = None
    catalog_object_id: Optional[str] = None
    catalog_object_type: Optional[str] = None
    quantity: Optional[str] = None
    occurred_at: Optional[str] = None
    created_at: Optional[str] = None
    team_member_id: Optional[str] = None
    source: Optional[Dict[str, Any]] = None


class InventoryChange(SquareModel):
    type: Optional[str] = None
    physical_count: Optional[InventoryPhysicalCount] = None
    adjustment: Optional[InventoryAdjustment] = None
    transfer: Optional[InventoryTransfer] = None
    measurement_unit_id: Optional[str] = None


class BatchChangeInventoryRequest(SquareRequest):
    idempotency_key: str
    changes: Tuple[InventoryChange, ...]
    ignore_unchanged_counts: Optional[bool] = None
