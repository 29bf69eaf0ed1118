"""
pynav: Historical NAV and Risk Metrics for Weighted Portfolios

pynav shows how a weighted basket of instruments would have performed
historically. It aligns daily price histories quoted in different currencies,
forward-fills missing days, converts everything to a base currency and
rebases the result to an initial capital, producing a single daily Net
Asset Value (NAV) series.

Main Features
-------------
From the NAV series, pynav computes annualized return and volatility, the
Sharpe ratio, historical 1-year rolling Value-at-Risk and Conditional VaR
at 95%, and a histogram of the rolling 1-year return distribution.

Price histories can be downloaded from Yahoo Finance or Alpha Vantage.
When a live source fails, a Geometric Brownian Motion series is generated
instead and tagged as synthetic, so the analysis can still run in
degraded mode.

Authors
-------
- pynav contributors

Version
-------
0.1
"""
from .models import (
    Instrument,
    PriceSeries,
    PriceSource,
    Metrics
)

from .currency import CurrencyConverter

from .synthetic import (
    get_asset_parameters,
    generate_synthetic_prices
)

from .nav import (
    compute_shares,
    build_nav_series
)

from .metrics import (
    daily_returns,
    rolling_returns,
    historical_var_cvar,
    compute_metrics
)

from .histogram import build_histogram

from .data_download import (
    PriceDataError,
    resolve_ticker,
    get_raw_prices,
    detect_currency,
    parse_alpha_vantage,
    get_alpha_vantage_prices,
    fetch_price_history,
    fetch_all_prices
)

from .report import (
    PortfolioReport,
    check_weights,
    uses_synthetic_data,
    analyze_portfolio,
    format_report
)

__version__ = "0.1"
