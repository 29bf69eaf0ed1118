"""
Price History Download Module
-----------------------------

Provides the price history providers used in front of the valuation
engine. Each provider returns a PriceSeries tagged REAL, or falls back to
a synthetic GBM series (tagged SYNTHETIC) when the live source fails:
network errors, HTTP errors, malformed payloads, rate-limit notes or
empty results. The engine itself never downloads anything.

Two live sources are supported:
- 'yfinance': daily adjusted closes from Yahoo Finance
- 'alphavantage': TIME_SERIES_DAILY_ADJUSTED from Alpha Vantage (API key
  read from the ALPHA_VANTAGE_KEY environment variable, default 'demo')

All instruments are fetched first (one yfinance batch call, or concurrent
Alpha Vantage requests) and only then handed to the engine, so a
calculation always runs on one complete snapshot.

Authors
-------
pynav contributors

Created
-------
October 2026

Contents
--------
- PriceDataError: Raised when a provider response cannot be used
- validate_prices: Structural checks on a downloaded price series
- resolve_ticker: Map an ISIN to a ticker when it is known
- get_raw_prices: Download adjusted closing prices for a list of tickers using yfinance
- detect_currency: Quote currency of a ticker as reported by Yahoo Finance
- parse_alpha_vantage: Decode an Alpha Vantage daily-adjusted payload
- get_alpha_vantage_prices: Download adjusted closing prices from Alpha Vantage
- fetch_price_history: Real prices with synthetic fallback for one ticker
- fetch_all_prices: Fetch of every instrument of a portfolio, joined before returning
"""


#----------------------------------------------------------
# Packages
#----------------------------------------------------------
import os
import warnings
from concurrent.futures import ThreadPoolExecutor

import pandas as pd
import requests
import yfinance as yf

from .models import PriceSeries, PriceSource
from .reference_data import ISIN_TO_TICKER, DEFAULT_LOOKBACK_DAYS, FALLBACK_CURRENCY
from .synthetic import generate_synthetic_prices


# ---------------- CONFIGURATION ----------------
ALPHA_VANTAGE_URL = "https://www.alphavantage.co/query"
ALPHA_VANTAGE_KEY = os.getenv("ALPHA_VANTAGE_KEY", "demo")
REQUEST_TIMEOUT   = 30
SOURCES           = ("yfinance", "alphavantage")
# -----------------------------------------------


class PriceDataError(Exception):
    """A provider returned no usable price history."""


#----------------------------------------------------------
# Checks for Downloaded Prices
#----------------------------------------------------------
def validate_prices(prices: pd.Series, context: str = "") -> pd.Series:
    """
    Main
    ----
    Clean and check a downloaded closing-price series.

    NaNs are dropped (with a warning line). A series that ends up empty or
    contains non-positive prices is rejected, so the engine never receives
    a malformed series.

    Parameters
    ----------
    prices : pd.Series
        Closing prices indexed by date.
    context : str, optional
        Context label for messages (e.g., the ticker).

    Returns
    -------
    pd.Series
        The cleaned series.

    Raises
    ------
    PriceDataError
        If the series is empty or has non-positive prices.
    """
    label = f"[{context}]" if context else ""

    if prices.isnull().any():
        print(f"[warning] {label} NaNs detected — dropping {int(prices.isnull().sum())} rows.")
        prices = prices.dropna()

    if prices.empty:
        raise PriceDataError(f"{label} No price data returned.")

    if (prices <= 0).any():
        raise PriceDataError(f"{label} Non-positive prices detected.")

    return prices


def resolve_ticker(identifier, isin_map=None) -> str:
    """
    Return the ticker mapped to an ISIN, or the identifier itself.
    """
    isin_map = ISIN_TO_TICKER if isin_map is None else isin_map
    return isin_map.get(identifier, identifier)


#----------------------------------------------------------
# Yahoo Finance
#----------------------------------------------------------
def get_raw_prices(tickers, days=DEFAULT_LOOKBACK_DAYS) -> pd.DataFrame:
    """
    Main
    ----
    Download daily adjusted closing prices for a list of tickers using yfinance.

    All tickers go through a single yf.download call, so each column of the
    result belongs to the ticker it is named after.

    Parameters
    ----------
    tickers : str or list of str
        Ticker symbols (e.g., ['AAPL', 'BMW.DE']).
    days : int, optional
        Calendar-day lookback ending today. Default is 5 years.

    Returns
    -------
    pd.DataFrame
        Adjusted closing prices with rows as dates and columns as tickers.
        Tickers Yahoo does not know are missing or all-NaN.

    Raises
    ------
    PriceDataError
        If nothing at all is returned.
    """
    if isinstance(tickers, str):
        tickers = [tickers]

    start = (pd.Timestamp.today().normalize() - pd.Timedelta(days=days)).strftime("%Y-%m-%d")
    data = yf.download(" ".join(tickers), start=start, auto_adjust=True, progress=False)

    if data is None or data.empty or "Close" not in data:
        raise PriceDataError(f"[{', '.join(tickers)}] Yahoo Finance returned no data.")

    close = data["Close"]
    # Older yfinance versions return a flat frame for a single ticker
    if isinstance(close, pd.Series):
        close = close.to_frame(tickers[0])

    return close


def detect_currency(ticker, verbose=False) -> str:
    """
    Quote currency reported by Yahoo Finance, 'USD' when it cannot be detected.
    """
    try:
        currency = yf.Ticker(ticker).fast_info.get("currency")
    except Exception:
        currency = None

    currency = currency or FALLBACK_CURRENCY
    if verbose:
        print(f"[currency detection] {ticker}: {currency}")

    return currency


def _fetch_yfinance(currencies, days, verbose) -> dict:
    # One batch download for every live ticker, then one series per column
    live = [ticker for ticker in currencies if not ticker.startswith("CRYPTO:")]
    close, failure = pd.DataFrame(), None
    if live:
        try:
            close = get_raw_prices(live, days)
        except Exception as exc:
            failure = exc

    result = {}
    for ticker, currency in currencies.items():
        if ticker.startswith("CRYPTO:"):
            if verbose:
                print(f"[synthetic] {ticker}: crypto tickers are not supported by yfinance")
            result[ticker] = generate_synthetic_prices(ticker, days, currency)
            continue

        if failure is not None:
            result[ticker] = _synthetic_fallback(ticker, days, currency, failure)
            continue

        try:
            if ticker not in close.columns:
                raise PriceDataError(f"[{ticker}] Yahoo Finance returned no data.")
            prices = validate_prices(close[ticker].dropna().rename(ticker), context=ticker)
        except Exception as exc:
            result[ticker] = _synthetic_fallback(ticker, days, currency, exc)
            continue

        if verbose:
            print(f"[download] {ticker}: {len(prices)} real prices from yfinance")
        currency = currency or detect_currency(ticker, verbose)
        result[ticker] = PriceSeries(ticker, prices, currency, PriceSource.REAL)

    return result


#----------------------------------------------------------
# Alpha Vantage
#----------------------------------------------------------
def parse_alpha_vantage(payload, ticker="") -> pd.Series:
    """
    Main
    ----
    Decode an Alpha Vantage TIME_SERIES_DAILY_ADJUSTED response.

    Parameters
    ----------
    payload : dict
        Decoded JSON body.
    ticker : str, optional
        Ticker, used only in error messages.

    Returns
    -------
    pd.Series
        Adjusted closes ('5. adjusted close') sorted by date.

    Raises
    ------
    PriceDataError
        On an 'Error Message' (unknown ticker), a 'Note' or 'Information'
        (rate limit / demo key) or a missing 'Time Series (Daily)' block.
    """
    if not isinstance(payload, dict):
        raise PriceDataError(f"[{ticker}] Unexpected Alpha Vantage payload.")

    if "Error Message" in payload:
        raise PriceDataError(f"[{ticker}] Alpha Vantage error: {payload['Error Message']}")

    for key in ("Note", "Information"):
        if key in payload:
            raise PriceDataError(f"[{ticker}] Alpha Vantage rate limit reached: {payload[key]}")

    time_series = payload.get("Time Series (Daily)")
    if not time_series:
        raise PriceDataError(f"[{ticker}] Invalid data format: 'Time Series (Daily)' missing.")

    try:
        closes = {date: float(row["5. adjusted close"]) for date, row in time_series.items()}
    except (KeyError, TypeError, ValueError) as exc:
        raise PriceDataError(f"[{ticker}] Malformed Alpha Vantage row: {exc}") from exc

    prices = pd.Series(closes, dtype=float, name=ticker)
    prices.index = pd.to_datetime(prices.index)
    return validate_prices(prices.sort_index(), context=ticker)


def get_alpha_vantage_prices(ticker, days=DEFAULT_LOOKBACK_DAYS, api_key=None) -> pd.Series:
    """
    Download daily adjusted closes from Alpha Vantage.

    'outputsize=full' (20+ years) is requested when more than 100 days are
    needed, 'compact' otherwise. Raises requests.RequestException on network
    or HTTP errors and PriceDataError on unusable payloads.
    """
    params = {
        "function": "TIME_SERIES_DAILY_ADJUSTED",
        "symbol": ticker,
        "outputsize": "full" if days > 100 else "compact",
        "apikey": api_key or ALPHA_VANTAGE_KEY,
    }
    resp = requests.get(ALPHA_VANTAGE_URL, params=params, timeout=REQUEST_TIMEOUT)
    resp.raise_for_status()

    try:
        payload = resp.json()
    except ValueError as exc:
        raise PriceDataError(f"[{ticker}] Alpha Vantage returned invalid JSON.") from exc

    return parse_alpha_vantage(payload, ticker)


#----------------------------------------------------------
# Provider with Synthetic Fallback
#----------------------------------------------------------
def _synthetic_fallback(ticker, days, currency, exc) -> PriceSeries:
    warnings.warn(f"Price download for '{ticker}' failed ({exc}) — using synthetic data.",
                  UserWarning, stacklevel=3)
    return generate_synthetic_prices(ticker, days, currency)


def fetch_price_history(ticker, days=DEFAULT_LOOKBACK_DAYS, currency=None,
                        source="yfinance", api_key=None, verbose=False) -> PriceSeries:
    """
    Main
    ----
    Fetch the price history of one ticker, falling back to synthetic data.

    'CRYPTO:' tickers are not served by the live sources and always get a
    synthetic series. Any failure of the live source is reported with a
    UserWarning and replaced by a GBM series built from the static parameters.

    Parameters
    ----------
    ticker : str
        Ticker symbol.
    days : int, optional
        Calendar-day lookback ending today. Default is 5 years.
    currency : str, optional
        Currency of the quotes. If None, yfinance quotes use the detected
        currency, Alpha Vantage quotes 'USD' and synthetic series the
        currency of their parameter table entry.
    source : str, optional
        'yfinance' or 'alphavantage'. Default is 'yfinance'.
    api_key : str, optional
        Alpha Vantage key (defaults to ALPHA_VANTAGE_KEY).
    verbose : bool, optional
        If True, prints which data was loaded.

    Returns
    -------
    PriceSeries
        Tagged REAL or SYNTHETIC.

    Raises
    ------
    ValueError
        If `source` is not supported.
    """
    if source not in SOURCES:
        raise ValueError(f"source must be one of {SOURCES}")

    if source == "yfinance":
        return _fetch_yfinance({ticker: currency}, days, verbose)[ticker]

    if ticker.startswith("CRYPTO:"):
        if verbose:
            print(f"[synthetic] {ticker}: crypto tickers are not supported by {source}")
        return generate_synthetic_prices(ticker, days, currency)

    try:
        prices = get_alpha_vantage_prices(ticker, days, api_key)
        prices = prices.loc[pd.Timestamp.today().normalize() - pd.Timedelta(days=days):]
        prices = validate_prices(prices, context=ticker)
    except Exception as exc:
        return _synthetic_fallback(ticker, days, currency, exc)

    if verbose:
        print(f"[download] {ticker}: {len(prices)} real prices from {source}")

    return PriceSeries(ticker, prices, currency or FALLBACK_CURRENCY, PriceSource.REAL)


def fetch_all_prices(instruments, days=DEFAULT_LOOKBACK_DAYS, source="yfinance",
                     max_workers=4, api_key=None, verbose=False) -> dict:
    """
    Main
    ----
    Fetch the price history of every instrument of a portfolio.

    yfinance tickers are downloaded in one batch call. Alpha Vantage only
    serves one symbol per request, so those downloads run concurrently.
    Either way every download is joined before returning, so the result is
    a complete snapshot that can be handed to build_nav_series in one go.

    Parameters
    ----------
    instruments : list of Instrument
        Portfolio lines. Empty tickers are skipped, repeated tickers fetched once.
    days : int, optional
        Calendar-day lookback. Default is 5 years.
    source : str, optional
        'yfinance' or 'alphavantage'.
    max_workers : int, optional
        Number of concurrent Alpha Vantage downloads. Default is 4.
    api_key : str, optional
        Alpha Vantage key.
    verbose : bool, optional
        If True, prints which data was loaded.

    Returns
    -------
    dict
        Mapping ticker -> PriceSeries.

    Raises
    ------
    ValueError
        If `source` is not supported.
    """
    if source not in SOURCES:
        raise ValueError(f"source must be one of {SOURCES}")

    currencies = {}
    for instrument in instruments:
        if instrument.ticker and instrument.ticker not in currencies:
            currencies[instrument.ticker] = instrument.currency

    if not currencies:
        return {}

    if source == "yfinance":
        return _fetch_yfinance(currencies, days, verbose)

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = {
            ticker: executor.submit(fetch_price_history, ticker, days, currency,
                                    source, api_key, verbose)
            for ticker, currency in currencies.items()
        }
        return {ticker: future.result() for ticker, future in futures.items()}
