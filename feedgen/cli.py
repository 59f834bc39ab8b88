"""
Command-line entry point for the trade feed generator.

Usage:
    feed-generator --tps 100 --duration 5m
    feed-generator --tps 50 --fraud-rate 0.1
    feed-generator --tps 100 --duration 0 --verbose
    feed-generator --tps 50 --fraud-type WASH
"""

import argparse
import logging
import signal
import sys
from typing import Any, Dict, List, Optional

import yaml
from pydantic import ValidationError

from feedgen import __version__
from feedgen.api.main import create_app, serve_in_background
from feedgen.config import load_settings, parse_duration
from feedgen.data.generator import TradeFeedGenerator
from feedgen.stream.sink import RedisStreamSink, SinkError

logger = logging.getLogger("feedgen")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="feed-generator",
        description="Generate a realistic trade feed with injected fraud patterns",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Trader profiles:
  HFT      fast, high-volume trades
  REGULAR  moderate activity, typical patterns
  CASUAL   low frequency, small volumes

Fraud patterns:
  WASH      buy/sell pairs with minimal price difference
  VELOCITY  sudden bursts of trading on one symbol
  ANOMALY   unusual size, time, symbol or price

Flags left unset fall back to the config file, FEED_GEN_* environment
variables and built-in defaults, in that order.
        """
    )

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", type=str, default=None,
                        help="YAML config file (default: .feed-generator.yaml if present)")
    parser.add_argument("--log-level", type=str, default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Logging level (default: INFO)")

    redis_group = parser.add_argument_group("redis")
    redis_group.add_argument("--redis-host", type=str, help="Redis host (default: localhost)")
    redis_group.add_argument("--redis-port", type=int, help="Redis port (default: 6379)")
    redis_group.add_argument("--redis-password", type=str, help="Redis password")
    redis_group.add_argument("--redis-db", type=int, help="Redis database (default: 0)")
    redis_group.add_argument("--stream", type=str, help="Stream key (default: trades:stream)")

    gen_group = parser.add_argument_group("generation")
    gen_group.add_argument("--tps", "-t", type=int,
                           help="Trades per second, 1-10000 (default: 100)")
    gen_group.add_argument("--duration", "-d", type=parse_duration,
                           help="Generation duration, e.g. 30s, 5m, 1h (0 = unbounded, default: 5m)")
    gen_group.add_argument("--fraud-rate", "-f", type=float,
                           help="Fraud pattern injection rate 0.0-1.0 (default: 0.05)")
    gen_group.add_argument("--fraud-type", type=str,
                           help="Fraud types: ALL, WASH, VELOCITY, ANOMALY (default: ALL)")
    gen_group.add_argument("--verbose", "-v", action="store_true", default=None,
                           help="Log each trade generated")
    gen_group.add_argument("--stats-interval", type=parse_duration,
                           help="Statistics reporting interval (default: 10s)")
    gen_group.add_argument("--seed", type=int, help="Random seed for reproducibility")
    gen_group.add_argument("--api-port", type=int,
                           help="Serve live stats over HTTP on this port (0 = disabled)")

    profile_group = parser.add_argument_group("profiles")
    profile_group.add_argument("--hft-ratio", type=float, help="Share of HFT trades (default: 0.20)")
    profile_group.add_argument("--regular-ratio", type=float, help="Share of regular trades (default: 0.70)")
    profile_group.add_argument("--casual-ratio", type=float, help="Share of casual trades (default: 0.10)")

    return parser


_FLAG_SECTIONS = {
    'redis': {
        'redis_host': 'host',
        'redis_port': 'port',
        'redis_password': 'password',
        'redis_db': 'db',
        'stream': 'stream',
    },
    'generate': {
        'tps': 'tps',
        'duration': 'duration',
        'fraud_rate': 'fraud_rate',
        'fraud_type': 'fraud_type',
        'verbose': 'verbose',
        'stats_interval': 'stats_interval',
        'seed': 'seed',
        'api_port': 'api_port',
    },
    'profiles': {
        'hft_ratio': 'hft_ratio',
        'regular_ratio': 'regular_ratio',
        'casual_ratio': 'casual_ratio',
    },
}


def overrides_from_args(args: argparse.Namespace) -> Dict[str, Any]:
    """Nested settings overrides for the flags that were actually given"""
    overrides: Dict[str, Any] = {}
    for section, flags in _FLAG_SECTIONS.items():
        values = {
            field: getattr(args, flag)
            for flag, field in flags.items()
            if getattr(args, flag) is not None
        }
        if values:
            overrides[section] = values
    return overrides


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        settings = load_settings(args.config, overrides_from_args(args))
    except (ValidationError, ValueError, OSError, yaml.YAMLError) as e:
        logger.error(f"❌ Invalid configuration: {e}")
        return 1

    sink = RedisStreamSink.from_settings(settings.redis)
    generator = TradeFeedGenerator(settings, sink)

    def handle_signal(signum, frame):
        logger.warning("⚠️  Shutdown signal received, stopping generator...")
        generator.cancel()

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    server = None
    if settings.generate.api_port:
        server = serve_in_background(create_app(generator), settings.generate.api_port)

    try:
        generator.run()
    except SinkError as e:
        logger.error(f"❌ {e}")
        return 1
    finally:
        if server is not None:
            server.should_exit = True
        sink.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
