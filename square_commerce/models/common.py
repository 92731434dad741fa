from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict


class SquareModel(BaseModel):
    """Response object mirroring Square's schema; unknown fields are kept"""
    model_config = ConfigDict(frozen=True, extra="allow")


class SquareRequest(BaseModel):
    """
    Finalized request body. Only fields that were set are serialized.

    Repeated fields are declared as tuples so a finalized request cannot be
    changed in place.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_unset=True)


class Money(SquareModel):
    amount: Optional[int] = None
    currency: Optional[str] = None


class Address(SquareModel):
    address_line_1: Optional[str] = None
    address_line_2: Optional[str] = None
    address_line_3: Optional[str] = None
    locality: Optional[str] = None
    sublocality: Optional[str] = None
    administrative_district_level_1: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class ResponseError(SquareModel):
    category: str
    code: str
    detail: Optional[str] = None
    field: Optional[str] = None


class DeleteResult(SquareModel):
    """Body returned by delete endpoints: usually empty, sometimes ids"""
    deleted_object_ids: Optional[List[str]] = None
    deleted_at: Optional[str] = None
