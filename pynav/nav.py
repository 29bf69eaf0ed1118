"""
Portfolio NAV Construction Module
---------------------------------

Turns one price series per instrument into a single daily Net Asset Value
(NAV) series in base currency, under a buy-and-hold assumption: share
quantities are fixed on the common start date and never rebalanced.

Steps
-----
1. Keep instruments with a non-empty ticker.
2. Common start date = latest first date among the instruments with data.
3. Date axis = union of all dates on or after the common start.
4. Shares = (weight / 100) * capital / base-currency price at the start
   (or the first price after it).
5. NAV = sum of shares * forward-filled base-currency price on each date.
6. Rebase so that the first point equals the initial capital.
7. Drop non-positive points.

Missing data does not abort the calculation: an instrument without
prices contributes zero (and a warning is emitted).

Authors
-------
pynav contributors

Created
-------
October 2026

Contents
--------
- instrument_currency: Resolve the currency an instrument is quoted in
- compute_shares: Initial share quantities per instrument
- build_nav_series: Aligned, currency-normalized and rebased NAV series
"""


#----------------------------------------------------------
# Packages
#----------------------------------------------------------
import warnings

import pandas as pd

from .currency import CurrencyConverter
from .reference_data import BASE_CURRENCY, FALLBACK_CURRENCY


#----------------------------------------------------------
# Helpers
#----------------------------------------------------------
def instrument_currency(instrument, series) -> str:
    """
    Instrument currency, else series currency, else 'USD'.
    """
    series_currency = series.currency if series is not None else None
    return instrument.currency or series_currency or FALLBACK_CURRENCY


def _empty_nav() -> pd.Series:
    return pd.Series(dtype=float, index=pd.DatetimeIndex([]), name="NAV")


#----------------------------------------------------------
# Initial Share Quantities
#----------------------------------------------------------
def compute_shares(price_data, instruments, initial_capital, start_date, converter) -> list:
    """
    Main
    ----
    Number of shares bought for each instrument on `start_date`.

    The unit price is the record on `start_date` or, if missing, the first
    record after it, converted to base currency. Instruments without such a
    record (or with a non-positive price) get zero shares.

    Parameters
    ----------
    price_data : dict
        Mapping ticker -> PriceSeries.
    instruments : list of Instrument
        Instruments with a non-empty ticker.
    initial_capital : float
        Capital allocated on the start date.
    start_date : pd.Timestamp
        Common start date.
    converter : CurrencyConverter
        Converter to base currency.

    Returns
    -------
    list of float
        Share quantities, aligned with `instruments`.
    """
    shares = []
    for instrument in instruments:
        series = price_data.get(instrument.ticker)
        if series is None or series.empty:
            shares.append(0.0)
            continue

        available = series.prices.loc[start_date:]
        if available.empty:
            shares.append(0.0)
            continue

        currency = instrument_currency(instrument, series)
        unit_price = converter.to_base(float(available.iloc[0]), currency)
        allocation = (instrument.weight / 100) * initial_capital
        shares.append(allocation / unit_price if unit_price > 0 else 0.0)

    return shares


#----------------------------------------------------------
# NAV Series
#----------------------------------------------------------
def build_nav_series(price_data, instruments, initial_capital,
                     base_currency=BASE_CURRENCY, exchange_rates=None) -> pd.Series:
    """
    Main
    ----
    Build the daily NAV series of a weighted portfolio.

    Parameters
    ----------
    price_data : dict
        Mapping ticker -> PriceSeries (real or synthetic).
    instruments : list of Instrument
        Portfolio lines. Instruments with an empty ticker are ignored.
    initial_capital : float
        Portfolio value on the common start date (in base currency).
    base_currency : str, optional
        Currency of the NAV. Default is 'EUR'.
    exchange_rates : dict, optional
        Rate table (currency -> (symbol, rate to pivot)). Default is reference_data.EXCHANGE_RATES.

    Returns
    -------
    pd.Series
        NAV indexed by date (strictly increasing), first value equal to
        `initial_capital`, all values > 0. Empty if no instrument has data.

    Raises
    ------
    ValueError
        If `initial_capital` is not positive.
    """
    if initial_capital <= 0:
        raise ValueError("'initial_capital' must be positive.")

    instruments = [instrument for instrument in instruments if instrument.ticker]
    if not instruments:
        return _empty_nav()

    converter = CurrencyConverter(exchange_rates, base_currency)

    with_data = []
    for instrument in instruments:
        series = price_data.get(instrument.ticker)
        if series is None or series.empty:
            warnings.warn(f"No price data for '{instrument.ticker}' — it contributes zero to the NAV.",
                          UserWarning, stacklevel=2)
            continue
        with_data.append((instrument, series))

    if not with_data:
        return _empty_nav()

    common_start = max(series.first_date for _, series in with_data)

    # Base-currency prices, one column per instrument, on the union of all dates
    converted = {}
    for position, (instrument, series) in enumerate(with_data):
        currency = instrument_currency(instrument, series)
        if not converter.is_known(currency):
            warnings.warn(f"Unknown currency '{currency}' for '{instrument.ticker}' — treated as {base_currency}.",
                          UserWarning, stacklevel=2)
        converted[position] = converter.to_base(series.prices, currency)

    prices = pd.DataFrame(converted).sort_index()
    prices = prices.ffill().loc[common_start:]
    if prices.empty:
        return _empty_nav()

    shares = compute_shares(price_data, [instrument for instrument, _ in with_data],
                            initial_capital, common_start, converter)
    shares = pd.Series(shares, index=prices.columns)

    # Not-yet-started instruments are NaN after the forward fill: they contribute 0
    nav = prices.fillna(0.0).mul(shares, axis=1).sum(axis=1)
    nav.name = "NAV"

    if nav.iloc[0] > 0:
        nav = nav * (initial_capital / nav.iloc[0])

    return nav[nav > 0]
