"""Activity events published on Redis and relayed to WebSocket clients."""

import json
import logging
from typing import Any, Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from taskboard.core.config import settings
from taskboard.core.database import utcnow

logger = logging.getLogger(__name__)

ACTIVITY_CHANNEL = "taskboard_activity"


class ActivityPublisher:
    def __init__(self, client: Optional[redis.Redis] = None):
        self.client = client

    async def publish(self, event_type: str, **payload: Any) -> dict:
        event = {"type": event_type, "at": utcnow().isoformat(), **payload}
        logger.debug("activity %s", event)
        if self.client is None:
            return event
        try:
            await self.client.publish(ACTIVITY_CHANNEL, json.dumps(event, default=str))
        except RedisError as e:
            # the change is already committed; only the notification is lost
            logger.warning("could not publish %s: %s", event_type, e)
        return event


def create_redis_client() -> Optional[redis.Redis]:
    if not settings.REDIS_URL:
        return None
    return redis.from_url(settings.REDIS_URL, encoding="utf-8", decode_responses=True)


redis_client = create_redis_client()
publisher = ActivityPublisher(redis_client)


def get_publisher() -> ActivityPublisher:
    return publisher
