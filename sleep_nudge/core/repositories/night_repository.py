# sleep_nudge/core/repositories/night_repository.py
import logging
import threading
from typing import Iterable, List

from sleep_nudge.core.models.data_models import RawNight

logger = logging.getLogger(__name__)


class NightRepository:
    """In-memory store of raw nights, one entry per calendar date"""

    def __init__(self, nights=None):
        self._lock = threading.RLock()
        self._nights = {}
        if nights:
            self.write_all(nights)

    def read_all(self) -> List[RawNight]:
        """Snapshot of every stored night in insertion order"""
        with self._lock:
            return list(self._nights.values())

    def write_all(self, nights: Iterable[RawNight]):
        """Replace the whole store; a later night for the same date wins"""
        replacement = {}
        for night in nights:
            replacement[night.date] = night

        with self._lock:
            self._nights = replacement

        logger.info(f"Stored {len(replacement)} nights")

    def upsert_night(self, night: RawNight):
        """Save a night, replacing any existing entry for its date"""
        with self._lock:
            replaced = night.date in self._nights
            self._nights[night.date] = night

        if replaced:
            logger.info(f"Replaced night for {night.date}")
        else:
            logger.info(f"Added night for {night.date}")
        return night

    def clear(self):
        """Delete every stored night"""
        with self._lock:
            self._nights = {}
        logger.info("Cleared all nights")

    def count(self):
        with self._lock:
            return len(self._nights)

    def storage_kind(self):
        return "memory"
