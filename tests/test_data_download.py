# tests/test_data_download.py
import numpy as np
import pandas as pd
import pytest
import requests

import pynav.data_download as dd
from pynav import Instrument, PriceDataError, PriceSeries, PriceSource


def _recent_dates(n=5):
    return pd.bdate_range(end=pd.Timestamp.today().normalize() - pd.Timedelta(days=3), periods=n)


def _alpha_vantage_payload(dates, closes):
    return {
        "Meta Data": {"2. Symbol": "IBM"},
        "Time Series (Daily)": {
            d.strftime("%Y-%m-%d"): {"4. close": str(c + 1), "5. adjusted close": str(c)}
            for d, c in zip(dates, closes)
        },
    }


# -------------------- Alpha Vantage payloads --------------------
def test_parse_alpha_vantage_sorts_adjusted_closes():
    dates = pd.to_datetime(["2024-01-03", "2024-01-01", "2024-01-02"])
    prices = dd.parse_alpha_vantage(_alpha_vantage_payload(dates, [3.0, 1.0, 2.0]), "IBM")
    assert prices.tolist() == [1.0, 2.0, 3.0]
    assert prices.index.is_monotonic_increasing


@pytest.mark.parametrize("payload, match", [
    ({"Error Message": "Invalid API call"}, "error"),
    ({"Note": "5 calls per minute"}, "rate limit"),
    ({"Information": "demo key"}, "rate limit"),
    ({"Meta Data": {}}, "Time Series"),
    ({"Time Series (Daily)": {"2024-01-01": {"4. close": "1"}}}, "Malformed"),
    ([], "Unexpected"),
])
def test_parse_alpha_vantage_rejects_bad_payloads(payload, match):
    with pytest.raises(PriceDataError, match=match):
        dd.parse_alpha_vantage(payload, "IBM")


def test_validate_prices():
    cleaned = dd.validate_prices(pd.Series([1.0, np.nan, 2.0]), "X")
    assert cleaned.tolist() == [1.0, 2.0]
    with pytest.raises(PriceDataError):
        dd.validate_prices(pd.Series([1.0, 0.0]), "X")
    with pytest.raises(PriceDataError):
        dd.validate_prices(pd.Series([], dtype=float), "X")


class _FakeResponse:
    def __init__(self, payload, status=200):
        self._payload = payload
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self._payload


def test_get_alpha_vantage_prices_requests_full_history(monkeypatch):
    calls = []
    dates = _recent_dates()

    def fake_get(url, params, timeout):
        calls.append(params)
        return _FakeResponse(_alpha_vantage_payload(dates, [10, 11, 12, 13, 14]))

    monkeypatch.setattr(dd.requests, "get", fake_get)
    prices = dd.get_alpha_vantage_prices("IBM", days=365, api_key="KEY")

    assert calls[0]["outputsize"] == "full"
    assert calls[0]["apikey"] == "KEY"
    assert calls[0]["function"] == "TIME_SERIES_DAILY_ADJUSTED"
    assert len(prices) == 5

    dd.get_alpha_vantage_prices("IBM", days=50)
    assert calls[1]["outputsize"] == "compact"


# -------------------- Provider with fallback --------------------
def test_alpha_vantage_source_returns_real_series(monkeypatch):
    dates = _recent_dates()
    monkeypatch.setattr(dd.requests, "get",
                        lambda url, params, timeout: _FakeResponse(_alpha_vantage_payload(dates, [1, 2, 3, 4, 5])))
    series = dd.fetch_price_history("IBM", days=365, currency="USD", source="alphavantage")
    assert series.source is PriceSource.REAL
    assert series.currency == "USD"
    assert series.prices.tolist() == [1, 2, 3, 4, 5]


def test_network_error_falls_back_to_synthetic(monkeypatch):
    def fail(*args, **kwargs):
        raise requests.ConnectionError("offline")

    monkeypatch.setattr(dd.requests, "get", fail)
    with pytest.warns(UserWarning, match="synthetic"):
        series = dd.fetch_price_history("AAPL", days=365, source="alphavantage")
    assert series.is_synthetic
    assert len(series) >= 400


def test_http_error_falls_back_to_synthetic(monkeypatch):
    monkeypatch.setattr(dd.requests, "get", lambda url, params, timeout: _FakeResponse({}, status=503))
    with pytest.warns(UserWarning):
        series = dd.fetch_price_history("AAPL", source="alphavantage")
    assert series.is_synthetic


def test_yfinance_source_returns_real_series(monkeypatch):
    dates = _recent_dates(4)
    frame = pd.DataFrame({"Close": [10.0, 10.5, 11.0, 10.8], "Open": [1.0] * 4}, index=dates)
    monkeypatch.setattr(dd.yf, "download", lambda *args, **kwargs: frame)

    series = dd.fetch_price_history("MSFT", currency="USD")
    assert series.source is PriceSource.REAL
    assert series.prices.tolist() == [10.0, 10.5, 11.0, 10.8]
    assert series.ticker == "MSFT"


def test_yfinance_multi_column_close(monkeypatch):
    dates = _recent_dates(3)
    columns = pd.MultiIndex.from_tuples([("Close", "MSFT"), ("Open", "MSFT")])
    frame = pd.DataFrame([[1.0, 1.0], [2.0, 2.0], [3.0, 3.0]], index=dates, columns=columns)
    monkeypatch.setattr(dd.yf, "download", lambda *args, **kwargs: frame)

    close = dd.get_raw_prices("MSFT", days=30)
    assert list(close.columns) == ["MSFT"]
    assert close["MSFT"].tolist() == [1.0, 2.0, 3.0]


def test_yfinance_empty_result_falls_back(monkeypatch):
    monkeypatch.setattr(dd.yf, "download", lambda *args, **kwargs: pd.DataFrame())
    with pytest.warns(UserWarning, match="'NOPE'"):
        series = dd.fetch_price_history("NOPE", currency="EUR")
    assert series.is_synthetic
    assert series.currency == "EUR"


def test_crypto_tickers_are_always_synthetic(monkeypatch):
    def unexpected(*args, **kwargs):
        raise AssertionError("live source must not be called for crypto")

    monkeypatch.setattr(dd.yf, "download", unexpected)
    series = dd.fetch_price_history("CRYPTO:BTC", days=365)
    assert series.is_synthetic
    assert series.ticker == "CRYPTO:BTC"


def test_unsupported_source():
    with pytest.raises(ValueError):
        dd.fetch_price_history("AAPL", source="bloomberg")


def test_resolve_ticker():
    assert dd.resolve_ticker("US0378331005") == "AAPL"
    assert dd.resolve_ticker("MSFT") == "MSFT"


# -------------------- Portfolio fetch --------------------
def test_fetch_all_prices_alpha_vantage_fetches_each_ticker_once(monkeypatch):
    calls = []

    def fake_fetch(ticker, days, currency, source, api_key, verbose):
        calls.append((ticker, currency))
        return PriceSeries(ticker, pd.Series([1.0, 2.0], index=_recent_dates(2)), currency)

    monkeypatch.setattr(dd, "fetch_price_history", fake_fetch)
    instruments = [
        Instrument("AAPL", 50, currency="USD"),
        Instrument("ENI.MI", 30, currency="EUR"),
        Instrument("AAPL", 20, currency="USD"),
        Instrument("", 0),
    ]
    result = dd.fetch_all_prices(instruments, days=100, source="alphavantage")

    assert set(result) == {"AAPL", "ENI.MI"}
    assert sorted(calls) == [("AAPL", "USD"), ("ENI.MI", "EUR")]
    assert result["ENI.MI"].currency == "EUR"


def test_fetch_all_prices_without_tickers():
    assert dd.fetch_all_prices([Instrument("", 10)]) == {}


def test_fetch_all_prices_yfinance_uses_one_batch_download(monkeypatch):
    calls = []
    dates = _recent_dates(3)
    columns = pd.MultiIndex.from_tuples([("Close", "AAPL"), ("Close", "BMW.DE"), ("Close", "NOPE")])
    frame = pd.DataFrame([[1.0, 50.0, np.nan], [2.0, 51.0, np.nan], [3.0, np.nan, np.nan]],
                         index=dates, columns=columns)

    def fake_download(tickers, **kwargs):
        calls.append(tickers)
        return frame

    monkeypatch.setattr(dd.yf, "download", fake_download)
    instruments = [
        Instrument("AAPL", 40, currency="USD"),
        Instrument("BMW.DE", 40, currency="EUR"),
        Instrument("NOPE", 10, currency="USD"),
        Instrument("CRYPTO:BTC", 10),
    ]
    with pytest.warns(UserWarning, match="'NOPE'"):
        result = dd.fetch_all_prices(instruments, days=365)

    assert calls == ["AAPL BMW.DE NOPE"]
    assert result["AAPL"].prices.tolist() == [1.0, 2.0, 3.0]
    assert result["BMW.DE"].prices.tolist() == [50.0, 51.0]
    assert result["BMW.DE"].currency == "EUR"
    assert not result["AAPL"].is_synthetic
    assert result["NOPE"].is_synthetic
    assert result["CRYPTO:BTC"].is_synthetic


def test_fetch_all_prices_yfinance_failure_falls_back_for_every_ticker(monkeypatch):
    def fail(*args, **kwargs):
        raise requests.ConnectionError("offline")

    monkeypatch.setattr(dd.yf, "download", fail)
    with pytest.warns(UserWarning, match="synthetic"):
        result = dd.fetch_all_prices([Instrument("AAPL", 50), Instrument("MSFT", 50)], days=365)
    assert all(series.is_synthetic for series in result.values())


# -------------------- Quote currency --------------------
def test_synthetic_fallback_keeps_parameter_table_currency(monkeypatch):
    monkeypatch.setattr(dd.yf, "download", lambda *args, **kwargs: pd.DataFrame())
    with pytest.warns(UserWarning, match="synthetic"):
        series = dd.fetch_price_history("ENI.MI", days=365)
    assert series.is_synthetic
    assert series.currency == "EUR"


class _FakeTicker:
    def __init__(self, currency):
        self.fast_info = {"currency": currency}


def test_real_yfinance_series_uses_detected_currency(monkeypatch):
    frame = pd.DataFrame({"Close": [10.0, 11.0]}, index=_recent_dates(2))
    monkeypatch.setattr(dd.yf, "download", lambda *args, **kwargs: frame)
    monkeypatch.setattr(dd.yf, "Ticker", lambda ticker: _FakeTicker("GBP"))

    series = dd.fetch_price_history("VOD.L")
    assert series.source is PriceSource.REAL
    assert series.currency == "GBP"


def test_detect_currency_defaults_to_usd(monkeypatch):
    def fail(ticker):
        raise requests.ConnectionError("offline")

    monkeypatch.setattr(dd.yf, "Ticker", fail)
    assert dd.detect_currency("AAPL") == "USD"

    monkeypatch.setattr(dd.yf, "Ticker", lambda ticker: _FakeTicker(None))
    assert dd.detect_currency("AAPL") == "USD"
