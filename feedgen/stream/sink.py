"""
Event sinks the generator publishes trades to.
"""
import logging
from typing import Optional, Protocol

import redis

from feedgen.config import RedisSettings
from feedgen.data.trade import Trade

logger = logging.getLogger(__name__)


class SinkError(Exception):
    """Raised when the sink cannot be reached or rejects a trade"""


class Sink(Protocol):
    def ping(self) -> None:
        """Verify the sink is reachable; raise SinkError otherwise"""

    def publish(self, trade: Trade) -> None:
        """Write one trade; raise SinkError on failure"""


class RedisStreamSink:
    """Append trades to a Redis stream with XADD"""

    def __init__(
        self,
        client: "redis.Redis",
        stream: str = "trades:stream",
        maxlen: Optional[int] = None,
    ):
        """
        Args:
            client: Connected redis client
            stream: Stream key to append to
            maxlen: Approximate stream length cap (None keeps everything)
        """
        self.client = client
        self.stream = stream
        self.maxlen = maxlen

    @classmethod
    def from_settings(cls, settings: RedisSettings) -> "RedisStreamSink":
        client = redis.Redis(
            host=settings.host,
            port=settings.port,
            password=settings.password or None,
            db=settings.db,
            socket_timeout=settings.socket_timeout,
            decode_responses=True,
        )
        return cls(client, stream=settings.stream, maxlen=settings.maxlen)

    def ping(self) -> None:
        try:
            self.client.ping()
        except redis.RedisError as e:
            raise SinkError(f"Redis is not reachable: {e}") from e

    def publish(self, trade: Trade) -> None:
        kwargs = {}
        if self.maxlen is not None:
            kwargs['maxlen'] = self.maxlen
            kwargs['approximate'] = True

        try:
            self.client.xadd(self.stream, trade.to_stream_fields(), **kwargs)
        except redis.RedisError as e:
            raise SinkError(f"Failed to publish trade {trade.trade_id}: {e}") from e

    def close(self) -> None:
        try:
            self.client.close()
        except redis.RedisError as e:
            logger.warning(f"Error closing Redis connection: {e}")
