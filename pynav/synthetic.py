"""
Synthetic Price Generation Module
---------------------------------

Generates plausible daily price histories with a Geometric Brownian Motion
when real data for an instrument is not available. The output is only a
degraded-mode fallback: the series is tagged as SYNTHETIC so the caller
can tell the user that part of the portfolio is simulated.

Each weekday between (today - days) and today gets one observation:

    price_t = price_(t-1) * exp((mu - 0.5 * sigma^2) * dt + sigma * sqrt(dt) * z),  z ~ N(0, 1)

with dt = 1/252 and a starting price of 100. Exact values are not
reproducible across runs unless a seed is given; only the statistical
shape (GBM with the given drift and volatility) is guaranteed.

Authors
-------
pynav contributors

Created
-------
October 2026

Contents
--------
- get_asset_parameters: Look up (annual return, volatility, currency) for a ticker or ISIN
- generate_synthetic_prices: GBM price series with a guaranteed minimum length
"""


#----------------------------------------------------------
# Packages
#----------------------------------------------------------
import numpy as np
import pandas as pd

from .models import PriceSeries, PriceSource
from .reference_data import (
    ASSET_PARAMETERS,
    DEFAULT_ASSET_PARAMETERS,
    ISIN_TO_TICKER,
    FALLBACK_CURRENCY,
    TRADING_DAYS,
    SYNTHETIC_START_PRICE,
    SYNTHETIC_MIN_POINTS,
    SYNTHETIC_MAX_DAYS,
)


#----------------------------------------------------------
# Parameter Lookup
#----------------------------------------------------------
def get_asset_parameters(identifier, parameters=None, isin_map=None) -> dict:
    """
    Return the GBM parameters of an instrument.

    The identifier is looked up as a ticker first, then as an ISIN through
    `isin_map`. Unknown identifiers get DEFAULT_ASSET_PARAMETERS
    (8% drift, 18% volatility).
    """
    parameters = ASSET_PARAMETERS if parameters is None else parameters
    isin_map = ISIN_TO_TICKER if isin_map is None else isin_map

    if identifier in parameters:
        return {**DEFAULT_ASSET_PARAMETERS, **parameters[identifier]}

    ticker = isin_map.get(identifier)
    if ticker in parameters:
        return {**DEFAULT_ASSET_PARAMETERS, **parameters[ticker]}

    return dict(DEFAULT_ASSET_PARAMETERS)


#----------------------------------------------------------
# GBM Price Series
#----------------------------------------------------------
def generate_synthetic_prices(ticker, days=365 * 3, currency=None,
                              parameters=None, seed=None, today=None) -> PriceSeries:
    """
    Main
    ----
    Simulate a daily GBM price path for `ticker`.

    Weekends are skipped, so a short horizon can produce too few points:
    when fewer than 400 observations are generated, the horizon is doubled
    and the simulation is run again, up to a horizon of 10 years.

    Parameters
    ----------
    ticker : str
        Ticker (or ISIN) used to look up drift and volatility.
    days : int, optional
        Calendar-day horizon ending today. Default is 3 years.
    currency : str, optional
        Currency of the generated quotes. Defaults to the parameter table
        currency, then 'USD'.
    parameters : dict, optional
        Parameter table (ticker -> dict). Default is reference_data.ASSET_PARAMETERS.
    seed : int, optional
        Seed of the normal sampler. None gives a different path on every call.
    today : date-like, optional
        Last day of the simulation. Default is the current date.

    Returns
    -------
    PriceSeries
        Prices rounded to 4 decimals, tagged SYNTHETIC.

    Raises
    ------
    ValueError
        If `days` is not positive.
    """
    if days <= 0:
        raise ValueError("'days' must be a positive number of calendar days.")

    params = get_asset_parameters(ticker, parameters)
    mu = params["annual_return"]
    sigma = params["volatility"]
    currency = currency or params.get("currency") or FALLBACK_CURRENCY
    dt = 1 / TRADING_DAYS

    end = pd.Timestamp.today().normalize() if today is None else pd.Timestamp(today).normalize()
    calendar = pd.date_range(end - pd.Timedelta(days=days), end, freq="D")
    trading_days = calendar[calendar.dayofweek < 5]

    rng = np.random.default_rng(seed)
    z = rng.standard_normal(len(trading_days))
    log_steps = (mu - 0.5 * sigma ** 2) * dt + sigma * np.sqrt(dt) * z
    prices = np.round(SYNTHETIC_START_PRICE * np.exp(np.cumsum(log_steps)), 4)

    if len(prices) < SYNTHETIC_MIN_POINTS and days < SYNTHETIC_MAX_DAYS:
        return generate_synthetic_prices(ticker, days * 2, currency, parameters, seed, end)

    return PriceSeries(ticker, pd.Series(prices, index=trading_days), currency, PriceSource.SYNTHETIC)
