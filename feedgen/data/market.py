"""
Amount and price model for synthetic trades.

All randomness comes from the generator passed in, so a seeded model
produces a reproducible feed.
"""

from datetime import datetime
from typing import Dict, Optional

import numpy as np
from faker import Faker

from feedgen.data.profiles import (
    BLUE_CHIP_SYMBOLS,
    ETF_SYMBOLS,
    POPULAR_SYMBOLS,
    TraderProfile,
)
from feedgen.data.trade import Trade, TradeSide

DEFAULT_SYMBOL = "AAPL"
DEFAULT_PRICE = 100.0

# Chance a trader sticks to their usual instruments
TYPICAL_SYMBOL_PROBABILITY = 0.8

EXPLORATION_SYMBOLS = BLUE_CHIP_SYMBOLS + POPULAR_SYMBOLS + ETF_SYMBOLS

SYMBOL_PRICES: Dict[str, float] = {
    # Blue chip stocks
    "AAPL": 175.50,
    "MSFT": 378.25,
    "GOOGL": 140.75,
    "AMZN": 155.35,
    "META": 362.80,
    "NVDA": 495.20,
    "TSLA": 242.80,

    # Popular stocks
    "AMD": 142.30,
    "NFLX": 485.60,
    "DIS": 95.40,

    # ETFs
    "SPY": 475.20,
    "QQQ": 405.80,
    "VTI": 245.30,
    "IWM": 198.50,
    "DIA": 382.40,

    # Penny stocks
    "PENNY_A": 2.50,
    "PENNY_B": 1.80,
    "PENNY_C": 3.20,
    "MICRO_X": 0.85,
    "MICRO_Y": 1.25,
}


class MarketModel:
    """Draw symbols, sizes, prices and sides for a trader profile"""

    def __init__(self, rng: np.random.Generator, fake: Optional[Faker] = None):
        """
        Args:
            rng: Random source used for every draw
            fake: Faker used for trade ids (seeded from ``rng`` if omitted)
        """
        self.rng = rng
        if fake is None:
            fake = Faker()
            fake.seed_instance(int(rng.integers(2**31)))
        self.fake = fake

    @classmethod
    def seeded(cls, seed: Optional[int] = None) -> "MarketModel":
        return cls(np.random.default_rng(seed))

    def random_symbol(self, profile: TraderProfile) -> str:
        if not profile.typical_symbols:
            return DEFAULT_SYMBOL

        if self.rng.random() < TYPICAL_SYMBOL_PROBABILITY:
            symbols = profile.typical_symbols
        else:
            symbols = EXPLORATION_SYMBOLS
        return symbols[int(self.rng.integers(len(symbols)))]

    def synthetic_amount(self, profile: TraderProfile) -> float:
        """Normal draw around the profile's average size, clamped to [0.1x, 3x]"""
        mean = profile.avg_trade_size
        amount = self.rng.normal(loc=mean, scale=mean * profile.volatility)
        return float(np.clip(amount, mean * 0.1, mean * 3.0))

    def base_price(self, symbol: str) -> float:
        return SYMBOL_PRICES.get(symbol, DEFAULT_PRICE)

    def price_for(self, symbol: str) -> float:
        """Base price with +/-1% jitter"""
        variation = (self.rng.random() - 0.5) * 0.02
        return self.base_price(symbol) * (1 + variation)

    def random_side(self) -> TradeSide:
        if self.rng.random() < 0.5:
            return TradeSide.BUY
        return TradeSide.SELL

    def new_trade_id(self) -> str:
        return self.fake.uuid4()

    def normal_trade(self, profile: TraderProfile, timestamp: datetime) -> Trade:
        """Generate a normal (legitimate) trade for a profile"""
        symbol = self.random_symbol(profile)
        return Trade(
            trade_id=self.new_trade_id(),
            user_id=profile.user_id,
            symbol=symbol,
            amount=self.synthetic_amount(profile),
            price=self.price_for(symbol),
            side=self.random_side(),
            timestamp=timestamp,
        )
