# clickbus/sinks.py
import json
from typing import Any, Dict, Protocol

import redis

from .config import Settings
from .logging_utils import logger


class EventSink(Protocol):
    name: str

    def send(self, record: Dict[str, Any]) -> None: ...

    def ready(self) -> bool: ...


class NullSink:
    name = "none"

    def send(self, record: Dict[str, Any]) -> None:
        return None

    def ready(self) -> bool:
        return True


class RedisSink:
    """Pushes enriched log records as JSON onto a Redis list."""

    name = "redis"

    def __init__(self, client: "redis.Redis", queue: str):
        self.client = client
        self.queue = queue

    def send(self, record: Dict[str, Any]) -> None:
        self.client.rpush(self.queue, json.dumps(record))

    def ready(self) -> bool:
        try:
            self.client.ping()
            return True
        except redis.RedisError:
            return False


def build_sink(settings: Settings) -> EventSink:
    if not settings.REDIS_URL:
        return NullSink()
    try:
        client = redis.Redis.from_url(settings.REDIS_URL, decode_responses=True)
        client.ping()
    except redis.RedisError as e:
        logger.warning("Redis sink unavailable (%s), events will not be forwarded", e)
        return NullSink()
    logger.info("Forwarding log events to redis list %s", settings.REDIS_QUEUE)
    return RedisSink(client, settings.REDIS_QUEUE)
