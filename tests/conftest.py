"""Shared fixtures for the feed generator tests."""
import os
from datetime import datetime, timezone
from typing import List

import numpy as np
import pytest

from feedgen.config import Settings
from feedgen.data.market import MarketModel
from feedgen.data.profiles import all_profiles
from feedgen.stream.sink import SinkError

BASE_TIME = datetime(2024, 3, 14, 14, 30, 0, tzinfo=timezone.utc)


class InMemorySink:
    """Sink that keeps every published trade in a list"""

    def __init__(self, fail_every: int = 0, alive: bool = True):
        self.trades: List = []
        self.attempts = 0
        self.pings = 0
        self.fail_every = fail_every
        self.alive = alive

    def ping(self) -> None:
        self.pings += 1
        if not self.alive:
            raise SinkError("sink is down")

    def publish(self, trade) -> None:
        self.attempts += 1
        if self.fail_every and self.attempts % self.fail_every == 0:
            raise SinkError(f"rejected {trade.trade_id}")
        self.trades.append(trade)


@pytest.fixture
def rng():
    return np.random.default_rng(42)


@pytest.fixture
def market(rng):
    return MarketModel(rng)


@pytest.fixture
def profiles():
    return all_profiles()


@pytest.fixture
def profile_by_id(profiles):
    return {p.user_id: p for p in profiles}


@pytest.fixture
def base_time():
    return BASE_TIME


@pytest.fixture
def sink():
    return InMemorySink()


@pytest.fixture
def make_settings(monkeypatch, tmp_path):
    """Build Settings isolated from the developer's env and config files"""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    for name in list(os.environ):
        if name.upper().startswith("FEED_GEN_"):
            monkeypatch.delenv(name)

    def _make(**sections):
        return Settings(**sections)

    return _make
