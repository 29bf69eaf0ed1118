# tests/conftest.py
import numpy as np
import pandas as pd
import pytest

from pynav import Instrument, PriceSeries, PriceSource


def make_series(ticker, closes, start="2024-01-01", currency="EUR",
                source=PriceSource.REAL, dates=None) -> PriceSeries:
    """Business-day PriceSeries starting at `start` (or on explicit dates)."""
    if dates is None:
        dates = pd.bdate_range(start, periods=len(closes))
    return PriceSeries(ticker, pd.Series(closes, index=pd.DatetimeIndex(dates), dtype=float),
                       currency, source)


@pytest.fixture
def series_factory():
    return make_series


@pytest.fixture
def two_asset_portfolio():
    """
    60/40 portfolio: A quoted in USD from $100, B in EUR from €50.
    """
    dates = pd.bdate_range("2024-01-01", periods=5)
    price_data = {
        "A": make_series("A", [100, 101, 102, 103, 104], currency="USD", dates=dates),
        "B": make_series("B", [50, 50.5, 51, 50, 49], currency="EUR", dates=dates),
    }
    instruments = [
        Instrument("A", 60, currency="USD"),
        Instrument("B", 40, currency="EUR"),
    ]
    return price_data, instruments


@pytest.fixture
def random_walk_nav():
    def _make(n, seed=7):
        rng = np.random.default_rng(seed)
        values = 100_000 * np.exp(np.cumsum(rng.normal(0.0003, 0.01, n)))
        return pd.Series(values, index=pd.bdate_range("2020-01-01", periods=n), name="NAV")
    return _make
