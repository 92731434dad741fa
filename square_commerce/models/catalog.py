from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from .common import SquareModel, SquareRequest


class CatalogObject(SquareModel):
    type: Optional[str] = None
    id: Optional[str] = None
    version: Optional[int] = None
    updated_at: Optional[str] = None
    is_deleted: Optional[bool] = None
    present_at_all_locations: Optional[bool] = None
    present_at_location_ids: Optional[Tuple[str, ...]] = None
    absent_at_location_ids: Optional[Tuple[str, ...]] = None
    item_data: Optional[Dict[str, Any]] = None
    item_variation_data: Optional[Dict[str, Any]] = None
    category_data: Optional[Dict[str, Any]] = None
    tax_data: Optional[Dict[str, Any]] = None
    discount_data: Optional[Dict[str, Any]] = None
    modifier_list_data: Optional[Dict[str, Any]] = None
    image_data: Optional[Dict[str, Any]] = None


class CatalogObjectResult(SquareModel):
    """A catalog object plus whatever related objects Square returned with it"""
    object: Optional[CatalogObject] = None
    related_objects: Optional[List[CatalogObject]] = None


class UpsertCatalogObjectRequest(SquareRequest):
    idempotency_key: str
    object: CatalogObject


class UpsertCatalogObjectResult(SquareModel):
    catalog_object: Optional[CatalogObject] = None
    id_mappings: Optional[List[Dict[str, str]]] = None
