"""
Generation statistics: thread-safe counters, snapshots and report rendering.
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from decimal import ROUND_HALF_EVEN, Decimal
from typing import Dict, Optional

import pandas as pd

from feedgen.data.profiles import TraderCategory
from feedgen.data.trade import Trade

logger = logging.getLogger(__name__)

_CENT = Decimal("0.01")


@dataclass(frozen=True)
class StatsSnapshot:
    """Point-in-time copy of the generation counters"""
    total_trades: int
    fraud_trades: int
    volume_minor_units: int  # cents
    by_category: Dict[str, int] = field(default_factory=dict)
    by_symbol: Dict[str, int] = field(default_factory=dict)
    elapsed_seconds: float = 0.0

    @property
    def volume(self) -> float:
        return self.volume_minor_units / 100.0

    @property
    def tps(self) -> float:
        if self.elapsed_seconds <= 0:
            return 0.0
        return self.total_trades / self.elapsed_seconds

    @property
    def fraud_share(self) -> float:
        if self.total_trades == 0:
            return 0.0
        return self.fraud_trades / self.total_trades


class Statistics:
    """
    Counters shared between the generation loop and its readers.

    Only the generation loop calls ``record``; reporters call ``snapshot``.
    Every access goes through one lock, so a snapshot never sees a
    half-applied update and lazily created symbol counters cannot race.
    """

    def __init__(self, clock=time.monotonic):
        self._clock = clock
        self._lock = threading.Lock()
        self._total = 0
        self._fraud = 0
        self._volume = Decimal(0)
        self._by_category = {category.value: 0 for category in TraderCategory}
        self._by_symbol: Dict[str, int] = {}
        self.start_time = clock()

    def restart_clock(self) -> None:
        with self._lock:
            self.start_time = self._clock()

    def record(self, trade: Trade, category: TraderCategory, is_fraud: bool = False) -> None:
        """Fold one published trade into the counters"""
        notional = Decimal(trade.amount) * Decimal(trade.price)
        with self._lock:
            self._total += 1
            if is_fraud:
                self._fraud += 1
            self._volume += notional
            self._by_category[category.value] = self._by_category.get(category.value, 0) + 1
            self._by_symbol[trade.symbol] = self._by_symbol.get(trade.symbol, 0) + 1

    def snapshot(self) -> StatsSnapshot:
        with self._lock:
            total = self._total
            fraud = self._fraud
            volume = self._volume
            by_category = dict(self._by_category)
            by_symbol = dict(self._by_symbol)
            elapsed = self._clock() - self.start_time

        # Volume is rounded to cents once, here, not per trade
        cents = int((volume / _CENT).quantize(Decimal(1), rounding=ROUND_HALF_EVEN))
        return StatsSnapshot(
            total_trades=total,
            fraud_trades=fraud,
            volume_minor_units=cents,
            by_category=by_category,
            by_symbol=by_symbol,
            elapsed_seconds=elapsed,
        )


def format_elapsed(seconds: float) -> str:
    """Format seconds as MM:SS"""
    seconds = int(seconds)
    return f"{seconds // 60:02d}:{seconds % 60:02d}"


def format_progress(snapshot: StatsSnapshot) -> str:
    return (
        f"[{format_elapsed(snapshot.elapsed_seconds)}] "
        f"{snapshot.total_trades:,} trades | "
        f"{snapshot.fraud_trades:,} fraud | "
        f"{snapshot.tps:.1f} tps | "
        f"${snapshot.volume / 1_000_000:.1f}M volume"
    )


def format_final(snapshot: StatsSnapshot, top_symbols: int = 5) -> str:
    """Render the end-of-run summary"""
    total = snapshot.total_trades
    lines = [
        "",
        "=" * 60,
        "Final Statistics",
        "=" * 60,
        f"Duration:       {format_elapsed(snapshot.elapsed_seconds)}",
        f"Total Trades:   {total:,}",
        f"Fraud Trades:   {snapshot.fraud_trades:,} ({snapshot.fraud_share:.1%})",
        f"Throughput:     {snapshot.tps:.1f} trades/sec",
        f"Total Volume:   ${snapshot.volume:,.2f}",
    ]

    by_category = pd.Series(snapshot.by_category, dtype="int64")
    by_category = by_category[by_category > 0]
    if total > 0 and not by_category.empty:
        lines.append("")
        lines.append("By Profile Type:")
        for category, count in by_category.items():
            lines.append(f"  {category}: {int(count):,} ({count / total:.1%})")

    by_symbol = pd.Series(snapshot.by_symbol, dtype="int64")
    if not by_symbol.empty:
        lines.append("")
        lines.append("Top Symbols:")
        for symbol, count in by_symbol.nlargest(top_symbols).items():
            lines.append(f"  {symbol}: {int(count):,}")

    lines.append("=" * 60)
    return "\n".join(lines)


class StatsReporter(threading.Thread):
    """Log a progress line every ``interval`` seconds until stopped"""

    def __init__(
        self,
        stats: Statistics,
        interval: float,
        stop_event: Optional[threading.Event] = None,
    ):
        super().__init__(name="stats-reporter", daemon=True)
        self.stats = stats
        self.interval = interval
        self.stop_event = stop_event or threading.Event()
        self.reports = 0

    def run(self) -> None:
        while not self.stop_event.wait(self.interval):
            logger.info(format_progress(self.stats.snapshot()))
            self.reports += 1

    def stop(self, timeout: Optional[float] = None) -> None:
        self.stop_event.set()
        self.join(timeout)
