"""Key-value cache kept outside the database.

Holds two records: the admin session and the local fare-rate snapshot.
Values are JSON strings with no expiry. A missing or unreachable Redis
turns every read into a miss and every write into a logged no-op.
"""
import json
import logging
from typing import Any, Optional

logger = logging.getLogger(__name__)


class LocalCache:
    def __init__(self, client=None):
        self.client = client

    @property
    def available(self) -> bool:
        return self.client is not None

    async def get_json(self, key: str) -> Optional[Any]:
        if self.client is None:
            return None
        try:
            raw = await self.client.get(key)
        except Exception as e:
            logger.warning(f"Cache read failed for {key}: {e}")
            return None
        if raw is None:
            return None
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning(f"Discarding unreadable cache entry {key}")
            return None

    async def set_json(self, key: str, value: Any) -> bool:
        if self.client is None:
            return False
        try:
            await self.client.set(key, json.dumps(value, default=str))
            return True
        except Exception as e:
            logger.warning(f"Cache write failed for {key}: {e}")
            return False

    async def delete(self, key: str) -> bool:
        if self.client is None:
            return False
        try:
            await self.client.delete(key)
            return True
        except Exception as e:
            logger.warning(f"Cache delete failed for {key}: {e}")
            return False
