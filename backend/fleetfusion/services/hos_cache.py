"""
Short-lived cache for computed HOS statuses.

The cache is an explicit object: whoever needs it builds one around a
redis-compatible async client and a TTL. A cache failure never fails the
caller, it only costs a recomputation.
"""
import json
import logging
import uuid
from typing import Any

from redis.exceptions import RedisError

logger = logging.getLogger(__name__)


class HOSStatusCache:

    def __init__(self, client: Any, ttl_seconds: int):
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.client = client
        self.ttl_seconds = ttl_seconds

    @staticmethod
    def key(organization_id: uuid.UUID, driver_id: uuid.UUID) -> str:
        return f"hos:status:{organization_id}:{driver_id}"

    async def get(self, organization_id: uuid.UUID, driver_id: uuid.UUID) -> dict | None:
        try:
            raw = await self.client.get(self.key(organization_id, driver_id))
        except RedisError as e:
            logger.warning("HOS cache read failed for driver %s: %s", driver_id, e)
            return None
        if raw is None:
            return None
        return json.loads(raw)

    async def set(self, organization_id: uuid.UUID, driver_id: uuid.UUID, payload: dict) -> None:
        try:
            await self.client.set(
                self.key(organization_id, driver_id),
                json.dumps(payload, default=str),
                ex=self.ttl_seconds,
            )
        except RedisError as e:
            logger.warning("HOS cache write failed for driver %s: %s", driver_id, e)

    async def invalidate(self, organization_id: uuid.UUID, driver_id: uuid.UUID) -> None:
        try:
            await self.client.delete(self.key(organization_id, driver_id))
        except RedisError as e:
            logger.warning("HOS cache invalidation failed for driver %s: %s", driver_id, e)
