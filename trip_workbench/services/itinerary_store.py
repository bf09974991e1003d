"""
Itinerary Store - Client-side cache of the traveler's saved itineraries.
Refreshed with a full reload after every mutation.
"""
import logging
from typing import Optional, Callable

from .gateway import GatewayClient
from ..models.itinerary import ItineraryRecord

logger = logging.getLogger(__name__)


class ItineraryStore:
    """Cache of itinerary records kept consistent by reloading from the service."""

    def __init__(self, gateway: GatewayClient, token_provider: Callable[[], str]):
        self.gateway = gateway
        self._token_provider = token_provider
        self._records: list[ItineraryRecord] = []
        self._issued = 0
        self._applied = 0
        self._in_flight = 0

    @property
    def records(self) -> list[ItineraryRecord]:
        return list(self._records)

    @property
    def loading(self) -> bool:
        return self._in_flight > 0

    def get(self, itinerary_id: int) -> Optional[ItineraryRecord]:
        for record in self._records:
            if record.id == itinerary_id:
                return record
        return None

    async def reload(self) -> list[ItineraryRecord]:
        """
        Replace the cache with the service's current list.

        Overlapping reloads may finish out of order; a response older than
        one already applied is dropped. Errors propagate to the caller.
        """
        self._issued += 1
        sequence = self._issued
        self._in_flight += 1
        try:
            records = await self.gateway.list(self._token_provider())
        finally:
            self._in_flight -= 1

        if sequence < self._applied:
            logger.debug(f"Dropping stale itinerary list (reload #{sequence})")
            return self.records
        self._applied = sequence
        self._records = records
        logger.info(f"Loaded {len(records)} itineraries")
        return self.records

    def clear(self):
        self._records = []
