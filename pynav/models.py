"""
Portfolio Data Model Module
---------------------------

Defines the plain data containers passed between the providers and the
valuation engine: instruments, per-instrument price series and the
metrics record. All of them are treated as immutable inputs/outputs of
a single calculation; nothing here holds state between calls.

A NAV series is a plain pd.Series (dates as index, portfolio value in
base currency as values) and a histogram is a plain pd.DataFrame, so
they are not defined here.

Authors
-------
pynav contributors

Created
-------
October 2026

Contents
--------
- PriceSource: tag telling whether a series is real or synthetic
- Instrument: ticker, optional ISIN/currency and portfolio weight (in %)
- PriceSeries: date-indexed closing prices of one instrument, tagged with its source
- Metrics: annualized return/volatility, Sharpe, VaR/CVaR 95% and final value
"""


#----------------------------------------------------------
# Packages
#----------------------------------------------------------
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Optional

import pandas as pd


#----------------------------------------------------------
# Price Source Tag
#----------------------------------------------------------
class PriceSource(str, Enum):
    REAL = "real"
    SYNTHETIC = "synthetic"


#----------------------------------------------------------
# Instrument
#----------------------------------------------------------
@dataclass(frozen=True)
class Instrument:
    """
    One line of the portfolio.

    Parameters
    ----------
    ticker : str
        Provider ticker (e.g. 'AAPL', 'ENI.MI'). Instruments with an empty
        ticker are ignored by the engine.
    weight : float
        Portfolio weight in percent (0-100). Weights are not required
        to sum to 100; see report.check_weights.
    currency : str, optional
        Denomination currency. If None, the currency of the price series is used.
    isin : str, optional
        Secondary identifier, only used to look up synthetic parameters.
    """
    ticker: str
    weight: float
    currency: Optional[str] = None
    isin: Optional[str] = None

    def __post_init__(self):
        if not 0 <= self.weight <= 100:
            raise ValueError(f"Weight of '{self.ticker}' must be between 0 and 100, got {self.weight}.")


#----------------------------------------------------------
# Price Series
#----------------------------------------------------------
@dataclass
class PriceSeries:
    """
    Main
    ----
    Daily closing prices of a single instrument.

    The index is normalized to calendar days, sorted ascending and made
    unique (the last close wins on duplicated dates), so every consumer
    can rely on an ordered, date-unique series.

    Parameters
    ----------
    ticker : str
        Instrument ticker.
    prices : pd.Series
        Closing prices indexed by date (anything pd.to_datetime accepts).
    currency : str, optional
        Currency of the quotes, used when the instrument declares none.
    source : PriceSource, optional
        REAL for provider data, SYNTHETIC for the GBM fallback.
    """
    ticker: str
    prices: pd.Series = field(default_factory=lambda: pd.Series(dtype=float))
    currency: Optional[str] = None
    source: PriceSource = PriceSource.REAL

    def __post_init__(self):
        prices = pd.Series(self.prices, dtype=float).dropna().copy()
        if isinstance(prices.index, pd.DatetimeIndex):
            index = prices.index
        else:
            # element-wise, so one index may mix '2024-01-03' and '2024-01-01 15:30'
            index = pd.DatetimeIndex([pd.Timestamp(date) for date in prices.index])
        if index.tz is not None:
            index = index.tz_localize(None)
        prices.index = index.normalize()
        prices = prices.sort_index(kind="mergesort")
        prices = prices[~prices.index.duplicated(keep="last")]
        prices.name = self.ticker
        self.prices = prices
        self.source = PriceSource(self.source)

    @classmethod
    def from_records(cls, ticker, records, currency=None, source=PriceSource.REAL):
        """
        Build a series from (date, close) pairs.
        """
        records = list(records)
        index = pd.DatetimeIndex([pd.Timestamp(date) for date, _ in records])
        closes = [close for _, close in records]
        return cls(ticker, pd.Series(closes, index=index, dtype=float), currency, source)

    @property
    def is_synthetic(self) -> bool:
        return self.source is PriceSource.SYNTHETIC

    @property
    def empty(self) -> bool:
        return self.prices.empty

    @property
    def first_date(self):
        return None if self.prices.empty else self.prices.index[0]

    def __len__(self):
        return len(self.prices)


#----------------------------------------------------------
# Metrics
#----------------------------------------------------------
@dataclass(frozen=True)
class Metrics:
    annual_return: Optional[float] = None
    annual_volatility: Optional[float] = None
    sharpe: Optional[float] = None
    var_95: Optional[float] = None
    cvar_95: Optional[float] = None
    final_value: Optional[float] = None

    @property
    def is_empty(self) -> bool:
        return self.final_value is None

    def to_dict(self) -> dict:
        return asdict(self)
