from __future__ import annotations

from typing import Optional

from .common import SquareModel


class Site(SquareModel):
    """A Square Online site of the seller"""
    id: Optional[str] = None
    site_title: Optional[str] = None
    domain: Optional[str] = None
    is_published: Optional[bool] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
