"""Tests for the Redis stream sink."""
from unittest.mock import MagicMock, patch

import pytest
import redis

from feedgen.config import RedisSettings
from feedgen.data.trade import Trade, TradeSide
from feedgen.stream.sink import RedisStreamSink, SinkError


@pytest.fixture
def trade(base_time):
    return Trade(
        trade_id="6f1c2d8e-0000-4000-8000-000000000001",
        user_id="HFT_001",
        symbol="NVDA",
        amount=120.5,
        price=495.2,
        side=TradeSide.SELL,
        timestamp=base_time,
    )


class TestRedisStreamSink:
    def test_publish_appends_to_stream(self, trade):
        client = MagicMock()
        sink = RedisStreamSink(client, stream="trades:test")

        sink.publish(trade)

        client.xadd.assert_called_once_with("trades:test", {
            'id': trade.trade_id,
            'user_id': "HFT_001",
            'symbol': "NVDA",
            'amount': "120.5",
            'price': "495.2",
            'type': "SELL",
            'timestamp': "2024-03-14T14:30:00+00:00",
        })

    def test_publish_with_maxlen(self, trade):
        client = MagicMock()
        sink = RedisStreamSink(client, maxlen=1000)

        sink.publish(trade)

        _, kwargs = client.xadd.call_args
        assert kwargs == {'maxlen': 1000, 'approximate': True}

    def test_publish_error_is_wrapped(self, trade):
        client = MagicMock()
        client.xadd.side_effect = redis.ConnectionError("connection reset")
        sink = RedisStreamSink(client)

        with pytest.raises(SinkError, match=trade.trade_id):
            sink.publish(trade)

    def test_ping(self):
        client = MagicMock()
        RedisStreamSink(client).ping()
        client.ping.assert_called_once()

    def test_ping_error_is_wrapped(self):
        client = MagicMock()
        client.ping.side_effect = redis.TimeoutError("timed out")
        with pytest.raises(SinkError, match="not reachable"):
            RedisStreamSink(client).ping()

    def test_close_swallows_redis_errors(self):
        client = MagicMock()
        client.close.side_effect = redis.RedisError("already closed")
        RedisStreamSink(client).close()
        client.close.assert_called_once()

    def test_from_settings(self):
        settings = RedisSettings(host="redis.internal", port=6380, password="", db=2,
                                 stream="feed", maxlen=500)
        with patch("feedgen.stream.sink.redis.Redis") as redis_cls:
            sink = RedisStreamSink.from_settings(settings)

        redis_cls.assert_called_once_with(
            host="redis.internal",
            port=6380,
            password=None,
            db=2,
            socket_timeout=5.0,
            decode_responses=True,
        )
        assert sink.client is redis_cls.return_value
        assert sink.stream == "feed"
        assert sink.maxlen == 500
