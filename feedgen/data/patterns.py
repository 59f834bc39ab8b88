"""
Fraud pattern definitions for synthetic trade injection.

Each pattern turns a fraud profile into the trade sequence a detector is
expected to catch.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import List

from feedgen.data.market import MarketModel
from feedgen.data.profiles import PENNY_STOCKS, FraudType, TraderProfile
from feedgen.data.trade import Trade, TradeSide


@dataclass
class FraudPattern:
    """Base class for fraud patterns"""
    name: str
    description: str

    def generate(self, profile: TraderProfile, base_time: datetime) -> List[Trade]:
        """Generate the fraudulent trades for this pattern"""
        raise NotImplementedError


class WashTradePattern(FraudPattern):
    """
    Wash Trade:
    - Buy followed by a sell of the same symbol and size
    - Sell leg within a few seconds at almost the same price
    - Fabricates volume without changing the net position
    """

    def __init__(self, market: MarketModel):
        super().__init__(
            name="wash_trade",
            description="Self-trade that inflates volume with no net position"
        )
        self.market = market

    def generate(self, profile: TraderProfile, base_time: datetime) -> List[Trade]:
        market = self.market
        symbol = market.random_symbol(profile)
        amount = market.synthetic_amount(profile)
        price = market.price_for(symbol)

        # Tiny price difference (at most +/-0.05%)
        sell_price = price * (1 + (market.rng.random() - 0.5) * 0.001)
        sell_delay = timedelta(seconds=int(market.rng.integers(1, 5)))

        buy = Trade(
            trade_id=market.new_trade_id(),
            user_id=profile.user_id,
            symbol=symbol,
            amount=amount,
            price=price,
            side=TradeSide.BUY,
            timestamp=base_time,
        )
        sell = Trade(
            trade_id=market.new_trade_id(),
            user_id=profile.user_id,
            symbol=symbol,
            amount=amount,
            price=sell_price,
            side=TradeSide.SELL,
            timestamp=base_time + sell_delay,
        )
        return [buy, sell]


class VelocitySpikePattern(FraudPattern):
    """
    Velocity Spike:
    - Sudden burst of 10-20 trades on one symbol
    - One second apart
    - Prices wander within +/-1% of a single base price
    """

    min_trades = 10
    max_trades = 20

    def __init__(self, market: MarketModel):
        super().__init__(
            name="velocity_spike",
            description="Burst of rapid trades against one instrument"
        )
        self.market = market

    def generate(self, profile: TraderProfile, base_time: datetime) -> List[Trade]:
        market = self.market
        num_trades = int(market.rng.integers(self.min_trades, self.max_trades + 1))

        symbol = market.random_symbol(profile)
        base_price = market.price_for(symbol)

        trades = []
        for i in range(num_trades):
            price = base_price * (1 + (market.rng.random() - 0.5) * 0.02)
            trades.append(Trade(
                trade_id=market.new_trade_id(),
                user_id=profile.user_id,
                symbol=symbol,
                amount=market.synthetic_amount(profile),
                price=price,
                side=market.random_side(),
                timestamp=base_time + timedelta(seconds=i),
            ))

        return trades


class AnomalyKind(str, Enum):
    SIZE = "size"
    TIMING = "timing"
    OFF_CATALOG_SYMBOL = "off_catalog_symbol"
    PRICE = "price"


ANOMALY_KINDS = tuple(AnomalyKind)


class AnomalyPattern(FraudPattern):
    """
    Anomaly:
    - Single trade that breaks one aspect of the profile's behavior
    - Massive size, middle-of-the-night timing, penny stock, or off-market price
    """

    size_multiplier = 10

    def __init__(self, market: MarketModel):
        super().__init__(
            name="anomaly",
            description="Single trade deviating in size, timing, symbol or price"
        )
        self.market = market

    def generate(self, profile: TraderProfile, base_time: datetime) -> List[Trade]:
        kind = ANOMALY_KINDS[int(self.market.rng.integers(len(ANOMALY_KINDS)))]
        return [self.build(kind, profile, base_time)]

    def build(self, kind: AnomalyKind, profile: TraderProfile, base_time: datetime) -> Trade:
        """Build one anomalous trade of the given kind"""
        market = self.market
        rng = market.rng

        symbol = market.random_symbol(profile)
        amount = market.synthetic_amount(profile)
        timestamp = base_time

        if kind == AnomalyKind.SIZE:
            amount = profile.avg_trade_size * self.size_multiplier
            price = market.price_for(symbol)
        elif kind == AnomalyKind.TIMING:
            # 02:00-05:59 on the same day
            timestamp = base_time.replace(
                hour=int(rng.integers(2, 6)),
                minute=int(rng.integers(60)),
                second=int(rng.integers(60)),
                microsecond=0,
            )
            price = market.price_for(symbol)
        elif kind == AnomalyKind.OFF_CATALOG_SYMBOL:
            unusual = [s for s in PENNY_STOCKS if s not in profile.typical_symbols]
            choices = unusual or list(PENNY_STOCKS)
            symbol = choices[int(rng.integers(len(choices)))]
            price = rng.random() * 5 + 0.5
        elif kind == AnomalyKind.PRICE:
            # Up to 25% away from market
            price = market.base_price(symbol) * (1 + (rng.random() - 0.5) * 0.5)
        else:
            raise ValueError(f"Unknown anomaly kind: {kind}")

        return Trade(
            trade_id=market.new_trade_id(),
            user_id=profile.user_id,
            symbol=symbol,
            amount=amount,
            price=price,
            side=market.random_side(),
            timestamp=timestamp,
        )


_PATTERN_CLASSES = {
    FraudType.WASH: WashTradePattern,
    FraudType.VELOCITY: VelocitySpikePattern,
    FraudType.ANOMALY: AnomalyPattern,
}


def pattern_for(fraud_type: FraudType, market: MarketModel) -> FraudPattern:
    """Build the pattern injector for a profile's assigned fraud type"""
    try:
        pattern_cls = _PATTERN_CLASSES[fraud_type]
    except KeyError:
        raise ValueError(f"No injectable pattern for fraud type {fraud_type.value}") from None
    return pattern_cls(market)
