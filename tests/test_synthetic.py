# tests/test_synthetic.py
import numpy as np
import pandas as pd
import pytest

from pynav import PriceSource, generate_synthetic_prices, get_asset_parameters


TODAY = "2025-06-13"


def test_series_is_tagged_synthetic_and_long_enough():
    series = generate_synthetic_prices("AAPL", seed=1, today=TODAY)
    assert series.source is PriceSource.SYNTHETIC
    assert series.is_synthetic
    assert len(series) >= 400
    assert series.currency == "USD"


def test_weekends_are_skipped_and_dates_ordered():
    prices = generate_synthetic_prices("MSFT", seed=2, today=TODAY).prices
    assert (prices.index.dayofweek < 5).all()
    assert prices.index.is_monotonic_increasing
    assert prices.index.is_unique
    assert prices.index[-1] <= pd.Timestamp(TODAY)


def test_short_horizon_is_extended():
    series = generate_synthetic_prices("SPY", days=30, seed=3, today=TODAY)
    assert len(series) >= 400


def test_long_horizon_is_not_extended():
    series = generate_synthetic_prices("SPY", days=365 * 10, seed=3, today=TODAY)
    first = series.prices.index[0]
    assert first >= pd.Timestamp(TODAY) - pd.Timedelta(days=365 * 10)
    assert first <= pd.Timestamp(TODAY) - pd.Timedelta(days=365 * 10 - 3)


def test_prices_are_positive_and_rounded():
    prices = generate_synthetic_prices("TSLA", seed=4, today=TODAY).prices
    assert (prices > 0).all()
    np.testing.assert_allclose(prices.values, np.round(prices.values, 4))


def test_same_seed_same_path():
    a = generate_synthetic_prices("GLD", seed=11, today=TODAY)
    b = generate_synthetic_prices("GLD", seed=11, today=TODAY)
    pd.testing.assert_series_equal(a.prices, b.prices)


def test_volatility_matches_parameters():
    series = generate_synthetic_prices("AAPL", days=365 * 10, seed=5, today=TODAY)
    log_returns = np.diff(np.log(series.prices.values))
    annual_vol = log_returns.std(ddof=1) * np.sqrt(252)
    assert annual_vol == pytest.approx(0.30, abs=0.03)


def test_currency_argument_wins_over_table():
    series = generate_synthetic_prices("AAPL", currency="EUR", seed=1, today=TODAY)
    assert series.currency == "EUR"


def test_unknown_ticker_uses_defaults():
    params = get_asset_parameters("NOT-A-TICKER")
    assert params["annual_return"] == 0.08
    assert params["volatility"] == 0.18
    series = generate_synthetic_prices("NOT-A-TICKER", seed=1, today=TODAY)
    assert series.currency == "USD"


def test_parameters_by_isin_and_crypto_prefix():
    assert get_asset_parameters("US0378331005") == get_asset_parameters("AAPL")
    assert get_asset_parameters("CRYPTO:BTC")["volatility"] == 0.90


def test_custom_parameter_table():
    table = {"XYZ": {"annual_return": 0.0, "volatility": 0.01, "currency": "CHF"}}
    series = generate_synthetic_prices("XYZ", parameters=table, seed=1, today=TODAY)
    assert series.currency == "CHF"
    assert series.prices.between(80, 120).all()


def test_non_positive_horizon_raises():
    with pytest.raises(ValueError):
        generate_synthetic_prices("AAPL", days=0)
