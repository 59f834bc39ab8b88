"""Trade synthesis: profiles, market model, fraud patterns and statistics"""

from feedgen.data.trade import Trade, TradeSide
from feedgen.data.profiles import FraudType, TraderCategory, TraderProfile, all_profiles
from feedgen.data.market import MarketModel
from feedgen.data.stats import Statistics, StatsSnapshot

__all__ = [
    'Trade',
    'TradeSide',
    'FraudType',
    'TraderCategory',
    'TraderProfile',
    'all_profiles',
    'MarketModel',
    'Statistics',
    'StatsSnapshot',
]
