"""Stream sinks for generated trades"""

from feedgen.stream.sink import RedisStreamSink, Sink, SinkError

__all__ = ['RedisStreamSink', 'Sink', 'SinkError']
