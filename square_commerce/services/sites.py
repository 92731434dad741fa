"""
Square Sites Service

Lists the seller's Square Online sites.
"""

import logging
from typing import TYPE_CHECKING, List

from ..models.sites import Site

if TYPE_CHECKING:
    from ..client import SquareClient


logger = logging.getLogger(__name__)


class SitesService:
    """Service for Square Online sites"""

    def __init__(self, client: 'SquareClient'):
        self.client = client

    async def list(self) -> List[Site]:
        """All sites of the seller, most recently created first"""
        logger.info("Listing sites")
        response = await self.client.get("/sites")
        sites = [Site.model_validate(item) for item in response.get("sites", [])]
        logger.info(f"Found {len(sites)} sites")
        return sites
