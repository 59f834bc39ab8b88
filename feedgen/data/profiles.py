"""
Trader profile catalog and weighted profile selection.

Each profile is a fixed behavioral archetype. Normal trades are drawn from
HFT / regular / casual profiles according to the configured category ratios;
fraud profiles carry the pattern they are used to inject.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, NamedTuple, Optional, Sequence, Tuple

import numpy as np


class TraderCategory(str, Enum):
    HFT = "HFT"
    REGULAR = "REGULAR"
    CASUAL = "CASUAL"
    FRAUD = "FRAUD"


class FraudType(str, Enum):
    NONE = "NONE"
    WASH = "WASH"
    VELOCITY = "VELOCITY"
    ANOMALY = "ANOMALY"
    ALL = "ALL"


# Symbol universes
BLUE_CHIP_SYMBOLS = ("AAPL", "MSFT", "GOOGL", "AMZN", "META", "NVDA", "TSLA")
POPULAR_SYMBOLS = ("AAPL", "TSLA", "AMZN", "NVDA", "SPY", "QQQ")
ETF_SYMBOLS = ("SPY", "QQQ", "VTI", "IWM", "DIA")
PENNY_STOCKS = ("PENNY_A", "PENNY_B", "PENNY_C", "MICRO_X", "MICRO_Y")

MARKET_HOURS = (9, 10, 11, 12, 13, 14, 15)


@dataclass(frozen=True)
class TraderProfile:
    """Behavioral characteristics of one trader"""
    user_id: str
    category: TraderCategory
    typical_symbols: Tuple[str, ...]
    avg_trade_size: float
    volatility: float  # relative standard deviation (0.0-1.0)
    active_hours: Tuple[int, ...]  # 0-23
    trades_per_hour: int
    fraud_pattern: FraudType = FraudType.NONE

    def is_active_at(self, hour: int) -> bool:
        return hour in self.active_hours


_CATALOG: Tuple[TraderProfile, ...] = (
    # High-frequency traders (20% of users, 80% of volume)
    TraderProfile("HFT_001", TraderCategory.HFT, BLUE_CHIP_SYMBOLS,
                  75000, 0.2, MARKET_HOURS, 100),
    TraderProfile("HFT_002", TraderCategory.HFT, ("TSLA", "NVDA", "META", "AMZN"),
                  100000, 0.3, MARKET_HOURS + (16,), 150),
    TraderProfile("HFT_003", TraderCategory.HFT, BLUE_CHIP_SYMBOLS,
                  50000, 0.2, MARKET_HOURS, 80),

    # Regular traders (70% of users, 18% of volume)
    TraderProfile("USER_001", TraderCategory.REGULAR, POPULAR_SYMBOLS[:4],
                  5000, 0.5, (10, 14), 2),
    TraderProfile("USER_002", TraderCategory.REGULAR, ("AAPL", "MSFT", "GOOGL"),
                  7500, 0.4, (9, 12, 15), 3),
    TraderProfile("USER_003", TraderCategory.REGULAR, POPULAR_SYMBOLS,
                  4000, 0.6, (11, 14), 1),
    TraderProfile("USER_004", TraderCategory.REGULAR, ("TSLA", "NVDA", "AMD"),
                  6000, 0.5, (10, 13), 2),
    TraderProfile("USER_005", TraderCategory.REGULAR, POPULAR_SYMBOLS[:3],
                  5500, 0.4, (9, 14), 2),
    TraderProfile("USER_006", TraderCategory.REGULAR, BLUE_CHIP_SYMBOLS[:4],
                  8000, 0.3, (10, 15), 3),
    TraderProfile("USER_007", TraderCategory.REGULAR, POPULAR_SYMBOLS,
                  4500, 0.5, (11, 14), 1),

    # Casual traders (10% of users, 2% of volume)
    TraderProfile("CASUAL_001", TraderCategory.CASUAL, ETF_SYMBOLS[:2],
                  1000, 0.3, (10,), 1),

    # Fraud traders (used for pattern injection)
    TraderProfile("FRAUD_WASH_001", TraderCategory.FRAUD, PENNY_STOCKS,
                  10000, 0.1, MARKET_HOURS, 20, FraudType.WASH),
    TraderProfile("FRAUD_VELOCITY_001", TraderCategory.FRAUD, POPULAR_SYMBOLS[:3],
                  5000, 0.2, (14,), 5, FraudType.VELOCITY),
    TraderProfile("FRAUD_ANOMALY_001", TraderCategory.FRAUD, BLUE_CHIP_SYMBOLS[:3],
                  3000, 0.4, (10, 14), 2, FraudType.ANOMALY),
)


def all_profiles() -> List[TraderProfile]:
    """Return the default trader catalog"""
    return list(_CATALOG)


class ProfileSelection(NamedTuple):
    profile: TraderProfile
    fell_back: bool  # True when the weighted bucket was empty


def _pick(profiles: Sequence[TraderProfile], rng: np.random.Generator) -> TraderProfile:
    return profiles[int(rng.integers(len(profiles)))]


def choose_profile(
    profiles: Sequence[TraderProfile],
    hft_ratio: float,
    regular_ratio: float,
    casual_ratio: float,
    rng: np.random.Generator,
) -> ProfileSelection:
    """
    Pick a profile with a single weighted three-way draw over categories.

    Args:
        profiles: Catalog to select from
        hft_ratio: Share of HFT selections
        regular_ratio: Share of regular selections
        casual_ratio: Share of casual selections (the remainder)
        rng: Random source

    Returns:
        ProfileSelection; ``fell_back`` is set when the chosen category had no
        profiles and a catalog-wide draw was used instead.

    Raises:
        ValueError: If the catalog is empty
    """
    if not profiles:
        raise ValueError("Cannot select a profile from an empty catalog")

    buckets = {category: [] for category in TraderCategory}
    for profile in profiles:
        buckets[profile.category].append(profile)

    r = rng.random()
    if r < hft_ratio:
        bucket = buckets[TraderCategory.HFT]
    elif r < hft_ratio + regular_ratio:
        bucket = buckets[TraderCategory.REGULAR]
    else:
        bucket = buckets[TraderCategory.CASUAL]

    if bucket:
        return ProfileSelection(_pick(bucket, rng), False)

    return ProfileSelection(_pick(profiles, rng), True)


def select_profile(
    profiles: Sequence[TraderProfile],
    hft_ratio: float,
    regular_ratio: float,
    casual_ratio: float,
    rng: np.random.Generator,
) -> TraderProfile:
    return choose_profile(profiles, hft_ratio, regular_ratio, casual_ratio, rng).profile


def select_fraud_profile(
    profiles: Sequence[TraderProfile],
    fraud_type: FraudType,
    rng: np.random.Generator,
) -> Optional[TraderProfile]:
    """Pick a fraud profile matching the filter, or None if nothing matches"""
    candidates = [
        p for p in profiles
        if p.category == TraderCategory.FRAUD
        and (fraud_type == FraudType.ALL or p.fraud_pattern == fraud_type)
    ]
    if not candidates:
        return None
    return _pick(candidates, rng)
