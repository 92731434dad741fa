from __future__ import annotations

from typing import Any, Dict, List, Optional

from .common import Address, SquareModel, SquareRequest


class Customer(SquareModel):
    id: Optional[str] = None
    version: Optional[int] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    given_name: Optional[str] = None
    family_name: Optional[str] = None
    nickname: Optional[str] = None
    company_name: Optional[str] = None
    email_address: Optional[str] = None
    phone_number: Optional[str] = None
    address: Optional[Address] = None
    birthday: Optional[str] = None
    reference_id: Optional[str] = None
    note: Optional[str] = None
    creation_source: Optional[str] = None
    group_ids: Optional[List[str]] = None
    segment_ids: Optional[List[str]] = None
    preferences: Optional[Dict[str, Any]] = None


class CustomerRequest(SquareRequest):
    """Body for creating or updating a customer"""
    idempotency_key: Optional[str] = None
    given_name: Optional[str] = None
    family_name: Optional[str] = None
    nickname: Optional[str] = None
    company_name: Optional[str] = None
    email_address: Optional[str] = None
    phone_number: Optional[str] = None
    address: Optional[Address] = None
    birthday: Optional[str] = None
    reference_id: Optional[str] = None
    note: Optional[str] = None
    version: Optional[int] = None


class SearchCustomersRequest(SquareRequest):
    limit: Optional[int] = None
    cursor: Optional[str] = None
    query: Optional[Dict[str, Any]] = None
