"""
Rate-controlled trade feed generator.

Emits a mix of normal trades and injected fraud patterns at a fixed tick
rate, publishing each trade to a sink and tracking live statistics.
"""

import logging
import threading
import time
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence

import numpy as np

from feedgen.config import Settings
from feedgen.data.market import MarketModel
from feedgen.data.patterns import FraudPattern, pattern_for
from feedgen.data.profiles import (
    FraudType,
    TraderProfile,
    all_profiles,
    select_fraud_profile,
    select_profile,
)
from feedgen.data.stats import (
    Statistics,
    StatsReporter,
    StatsSnapshot,
    format_final,
)
from feedgen.data.trade import Trade
from feedgen.stream.sink import Sink, SinkError

logger = logging.getLogger(__name__)


class EngineState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    DRAINING = "draining"
    STOPPED = "stopped"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TradeFeedGenerator:
    """Generate and publish a synthetic trade feed"""

    def __init__(
        self,
        settings: Settings,
        sink: Sink,
        rng: Optional[np.random.Generator] = None,
        profiles: Optional[Sequence[TraderProfile]] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Args:
            settings: Validated generator settings
            sink: Where trades are published
            rng: Random source (seeded from settings.generate.seed if omitted)
            profiles: Trader catalog (defaults to the built-in catalog)
            clock: Source of trade timestamps
        """
        self.settings = settings
        self.sink = sink
        self.rng = rng if rng is not None else np.random.default_rng(settings.generate.seed)
        self.profiles = list(profiles) if profiles is not None else all_profiles()
        self.clock = clock

        self.market = MarketModel(self.rng)
        self.patterns: Dict[FraudType, FraudPattern] = {
            fraud_type: pattern_for(fraud_type, self.market)
            for fraud_type in (FraudType.WASH, FraudType.VELOCITY, FraudType.ANOMALY)
        }
        self.stats = Statistics()
        self.state = EngineState.IDLE
        self.publish_failures = 0

        self._stop_event = threading.Event()

    def cancel(self) -> None:
        """Ask the loop to stop at its next tick"""
        self._stop_event.set()

    @property
    def cancelled(self) -> bool:
        return self._stop_event.is_set()

    def _log_banner(self) -> None:
        gen = self.settings.generate
        ratios = self.settings.profiles
        duration = f"{gen.duration:g}s" if gen.duration > 0 else "unbounded"

        logger.info("=" * 60)
        logger.info("🚀 Starting Trade Feed Generator")
        logger.info("=" * 60)
        logger.info(f"   Redis: {self.settings.redis.address}")
        logger.info(f"   Stream: {self.settings.redis.stream}")
        logger.info(f"   Throughput: {gen.tps} trades/sec")
        logger.info(f"   Duration: {duration}")
        logger.info(f"   Fraud rate: {gen.fraud_rate:.1%} ({gen.fraud_type.value})")
        logger.info(
            f"   Profile mix: HFT {ratios.hft_ratio:.0%} / "
            f"Regular {ratios.regular_ratio:.0%} / Casual {ratios.casual_ratio:.0%}"
        )
        logger.info("=" * 60)

    def run(self) -> StatsSnapshot:
        """
        Run the generation loop until cancelled or the duration elapses.

        Returns:
            Final statistics snapshot

        Raises:
            SinkError: If the sink fails its liveness probe
        """
        if self.state != EngineState.IDLE:
            raise RuntimeError(f"Generator cannot run from state {self.state.value}")

        self.sink.ping()
        logger.info("✅ Sink connection verified")
        self._log_banner()

        gen = self.settings.generate
        self.stats.restart_clock()
        self.state = EngineState.RUNNING

        reporter = StatsReporter(self.stats, gen.stats_interval)
        reporter.start()

        interval = 1.0 / gen.tps
        started = time.monotonic()
        deadline = started + gen.duration if gen.duration > 0 else None
        next_tick = started + interval

        try:
            while True:
                # Tick boundary: wait, then check cancellation and deadline
                if self._stop_event.wait(max(0.0, next_tick - time.monotonic())):
                    logger.info("Cancellation requested, stopping generator...")
                    break

                now = time.monotonic()
                if deadline is not None and now >= deadline:
                    break

                next_tick += interval
                if next_tick < now - interval:
                    # Fell behind (slow sink); drop the missed ticks
                    next_tick = now + interval

                self.generate_and_publish()
        finally:
            self.state = EngineState.DRAINING
            reporter.stop(timeout=gen.stats_interval)

        final = self.stats.snapshot()
        logger.info(format_final(final))
        if self.publish_failures:
            logger.warning(f"⚠️  {self.publish_failures:,} trades failed to publish")
        logger.info("Generation complete! ✅")

        self.state = EngineState.STOPPED
        return final

    def generate_and_publish(self) -> List[Trade]:
        """Run one tick: a normal trade or a fraud pattern"""
        if self.rng.random() < self.settings.generate.fraud_rate:
            return self.generate_fraud_pattern()
        return self.generate_normal_trade()

    def generate_normal_trade(self) -> List[Trade]:
        ratios = self.settings.profiles
        profile = select_profile(
            self.profiles,
            ratios.hft_ratio,
            ratios.regular_ratio,
            ratios.casual_ratio,
            self.rng,
        )

        trade = self.market.normal_trade(profile, self.clock())
        if self._publish(trade, profile, is_fraud=False) and self.settings.generate.verbose:
            logger.info(
                f"[{trade.timestamp:%H:%M:%S}] {trade.user_id}: {trade.side.value} "
                f"{trade.amount:.2f} @ ${trade.price:.2f} ({trade.symbol})"
            )
        return [trade]

    def generate_fraud_pattern(self) -> List[Trade]:
        profile = select_fraud_profile(self.profiles, self.settings.generate.fraud_type, self.rng)
        if profile is None or profile.fraud_pattern not in self.patterns:
            # Nothing can inject the requested pattern
            return self.generate_normal_trade()

        pattern = self.patterns[profile.fraud_pattern]
        trades = pattern.generate(profile, self.clock())

        for trade in trades:
            if self._publish(trade, profile, is_fraud=True) and self.settings.generate.verbose:
                logger.info(
                    f"[{trade.timestamp:%H:%M:%S}] 🚨 FRAUD {pattern.name} {trade.user_id}: "
                    f"{trade.side.value} {trade.amount:.2f} @ ${trade.price:.2f} ({trade.symbol})"
                )
        return trades

    def _publish(self, trade: Trade, profile: TraderProfile, is_fraud: bool) -> bool:
        """Publish one trade and record it; failures are logged, not raised"""
        try:
            self.sink.publish(trade)
        except SinkError as e:
            self.publish_failures += 1
            logger.error(f"❌ Failed to publish trade: {e}")
            return False

        self.stats.record(trade, profile.category, is_fraud=is_fraud)
        return True
