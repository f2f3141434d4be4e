"""Load and save the recent-commands list against a KeyValueStorage."""

import logging
from collections.abc import Sequence

from ..config.constants import MAX_RECENT_COMMANDS, RECENT_COMMANDS_KEY
from .storage import KeyValueStorage

logger = logging.getLogger(__name__)


class RecentCommandsPersistence:
    """
    Persistence adapter for the bounded recent-commands list.

    Neither operation ever raises: missing or malformed data loads as an
    empty list and failed writes are logged and dropped.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        key: str = RECENT_COMMANDS_KEY,
        max_items: int = MAX_RECENT_COMMANDS,
    ):
        self.storage = storage
        self.key = key
        self.max_items = max_items

    async def load_recent(self) -> list[str]:
        """Recent command ids from storage, most recent first."""
        try:
            value = await self.storage.get(self.key)
        except Exception as e:
            logger.warning(f"Failed to load recent commands: {e}")
            return []

        if value is None:
            logger.debug(f"No recent commands stored under '{self.key}'")
            return []

        if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
            logger.warning(
                f"Ignoring malformed recent commands under '{self.key}': "
                f"expected a list, got {type(value).__name__}"
            )
            return []

        ids: list[str] = []
        for item in value:
            if not isinstance(item, str):
                logger.warning(f"Dropping non-string recent command entry: {item!r}")
                continue
            if item not in ids:
                ids.append(item)
        return ids[: self.max_items]

    async def save_recent(self, ids: Sequence[str]) -> bool:
        """Write the full list. Returns False if the write was lost."""
        try:
            await self.storage.set(self.key, list(ids))
        except Exception as e:
            logger.error(f"Failed to save recent commands: {e}")
            return False
        return True
