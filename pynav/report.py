"""
Portfolio Report Module
-----------------------

Ties the providers and the engine together: fetch every price history
first, then build the NAV, the metrics and the rolling-return histogram
on that complete snapshot.

Authors
-------
pynav contributors

Created
-------
October 2026

Contents
--------
- PortfolioReport: Result container of a full analysis
- check_weights: Total portfolio weight, with a warning if it is not 100%
- uses_synthetic_data: True if any series of a snapshot is synthetic
- analyze_portfolio: Fetch (optional) + NAV + metrics + histogram
- format_report: Plain-text summary of a PortfolioReport
"""


#----------------------------------------------------------
# Packages
#----------------------------------------------------------
import dataclasses
import math
import warnings
from dataclasses import dataclass, field

import pandas as pd

from .currency import CurrencyConverter
from .data_download import fetch_all_prices, resolve_ticker
from .histogram import build_histogram
from .metrics import compute_metrics
from .models import Metrics
from .nav import build_nav_series
from .reference_data import BASE_CURRENCY, DEFAULT_LOOKBACK_DAYS, HISTOGRAM_BUCKETS


@dataclass
class PortfolioReport:
    nav: pd.Series
    metrics: Metrics
    histogram: pd.DataFrame
    base_currency: str = BASE_CURRENCY
    synthetic: bool = False
    synthetic_tickers: list = field(default_factory=list)
    total_weight: float = 0.0


#----------------------------------------------------------
# Input Checks
#----------------------------------------------------------
def check_weights(instruments) -> float:
    """
    Return the total weight (in %) of the instruments with a ticker.

    Weights that do not sum to 100 are allowed; a UserWarning is emitted so
    the caller can show it.
    """
    total = float(sum(instrument.weight for instrument in instruments if instrument.ticker))
    if instruments and not math.isclose(total, 100.0, abs_tol=1e-6):
        warnings.warn(f"Portfolio weights sum to {total:.2f}% instead of 100%.", UserWarning, stacklevel=2)
    return total


def uses_synthetic_data(price_data) -> bool:
    return any(series.is_synthetic for series in price_data.values())


def _resolve_instruments(instruments) -> list:
    """Fill missing tickers from known ISINs."""
    resolved = []
    for instrument in instruments:
        if not instrument.ticker and instrument.isin:
            ticker = resolve_ticker(instrument.isin)
            if ticker != instrument.isin:
                instrument = dataclasses.replace(instrument, ticker=ticker)
        resolved.append(instrument)
    return resolved


#----------------------------------------------------------
# Full Analysis
#----------------------------------------------------------
def analyze_portfolio(instruments, initial_capital, base_currency=BASE_CURRENCY,
                      price_data=None, days=DEFAULT_LOOKBACK_DAYS, source="yfinance",
                      buckets=HISTOGRAM_BUCKETS, exchange_rates=None,
                      max_workers=4, verbose=False) -> PortfolioReport:
    """
    Main
    ----
    Run the full analysis of a weighted portfolio.

    If `price_data` is not given, every instrument is downloaded first
    (concurrently, with synthetic fallback) and the engine runs once on the
    complete result.

    Parameters
    ----------
    instruments : list of Instrument
        Portfolio lines.
    initial_capital : float
        Capital invested on the common start date.
    base_currency : str, optional
        Currency of the NAV. Default is 'EUR'.
    price_data : dict, optional
        Already fetched mapping ticker -> PriceSeries.
    days : int, optional
        Lookback used when downloading. Default is 5 years.
    source : str, optional
        Live source used when downloading ('yfinance' or 'alphavantage').
    buckets : int, optional
        Number of histogram bins. Default is 20.
    exchange_rates : dict, optional
        Rate table. Default is reference_data.EXCHANGE_RATES.
    max_workers : int, optional
        Concurrent downloads.
    verbose : bool, optional
        If True, prints progress lines.

    Returns
    -------
    PortfolioReport
    """
    instruments = _resolve_instruments(instruments)
    total_weight = check_weights(instruments)

    if price_data is None:
        price_data = fetch_all_prices(instruments, days, source, max_workers, verbose=verbose)

    tickers = {instrument.ticker for instrument in instruments if instrument.ticker}
    used = {ticker: series for ticker, series in price_data.items() if ticker in tickers}

    nav = build_nav_series(used, instruments, initial_capital, base_currency, exchange_rates)
    metrics = compute_metrics(nav)
    histogram = build_histogram(nav, buckets)

    synthetic_tickers = sorted(ticker for ticker, series in used.items() if series.is_synthetic)
    if verbose:
        print(f"[nav] {len(nav)} points, synthetic data: {synthetic_tickers or 'none'}")

    return PortfolioReport(
        nav=nav,
        metrics=metrics,
        histogram=histogram,
        base_currency=base_currency,
        synthetic=uses_synthetic_data(used),
        synthetic_tickers=synthetic_tickers,
        total_weight=total_weight,
    )


#----------------------------------------------------------
# Text Summary
#----------------------------------------------------------
def _pct(value) -> str:
    return "n/a" if value is None else f"{value:.2%}"


def format_report(report, exchange_rates=None) -> str:
    """
    Plain-text summary of a PortfolioReport (values in base currency).
    """
    converter = CurrencyConverter(exchange_rates, report.base_currency)
    metrics = report.metrics

    if metrics.is_empty:
        return "No data: the NAV series has fewer than 2 points."

    lines = [
        f"Period:             {report.nav.index[0]:%Y-%m-%d} → {report.nav.index[-1]:%Y-%m-%d} ({len(report.nav)} days)",
        f"Final value:        {converter.format(metrics.final_value)}",
        f"Annual return:      {_pct(metrics.annual_return)}",
        f"Annual volatility:  {_pct(metrics.annual_volatility)}",
        f"Sharpe ratio:       {metrics.sharpe:.2f}",
        f"VaR 95% (1y):       {_pct(metrics.var_95)}",
        f"CVaR 95% (1y):      {_pct(metrics.cvar_95)}",
    ]
    if report.synthetic:
        lines.append(f"[warning] Synthetic data used for: {', '.join(report.synthetic_tickers)}")
    return "\n".join(lines)
