"""
Portfolio Risk and Return Metrics Module
----------------------------------------

Computes a fixed set of performance and risk measures from a NAV series:
annualized return and volatility, Sharpe ratio, historical VaR and
Expected Shortfall (CVaR) at 95% on 1-year rolling returns, and final value.

VaR and CVaR are historical (non-parametric): they are read directly from
the empirical distribution of overlapping 252-day returns, without any
distributional assumption. Losses are reported as positive numbers.

Authors
-------
pynav contributors

Created
-------
October 2026

Contents
--------
- daily_returns: Simple daily returns of a NAV series
- rolling_returns: Overlapping returns over a fixed window (default 1 year)
- historical_var_cvar: Historical VaR and CVaR from a return sample
- compute_metrics: All metrics of a NAV series in a Metrics record

Notes
-----
- Assumes 252 trading days per year and a 2% annual risk-free rate.
"""


#----------------------------------------------------------
# Packages
#----------------------------------------------------------
import math

import numpy as np

from .models import Metrics
from .reference_data import TRADING_DAYS, RISK_FREE_RATE, VAR_CONFIDENCE


#----------------------------------------------------------
# Returns
#----------------------------------------------------------
def daily_returns(nav) -> np.ndarray:
    values = np.asarray(nav, dtype=float)
    return values[1:] / values[:-1] - 1


def rolling_returns(nav, window=TRADING_DAYS) -> np.ndarray:
    """
    Return nav[i] / nav[i - window] - 1 for every i >= window.

    Empty when the series has `window` points or fewer.
    """
    values = np.asarray(nav, dtype=float)
    if len(values) <= window:
        return np.array([])
    return values[window:] / values[:-window] - 1


#----------------------------------------------------------
# Historical VaR and CVaR
#----------------------------------------------------------
def historical_var_cvar(returns, confidence_level=VAR_CONFIDENCE) -> tuple:
    """
    Main
    ----
    Historical VaR and CVaR from a sample of returns.

    The sample is sorted ascending and the cutoff is the element at index
    floor((1 - confidence_level) * count). CVaR is the mean of all returns
    up to and including the cutoff.

    Parameters
    ----------
    returns : array-like
        Return sample in decimal format (e.g., 0.01 = 1%).
    confidence_level : float, optional
        Confidence level (e.g., 0.95). Default is 0.95.

    Returns
    -------
    tuple of (float or None, float or None)
        (VaR, CVaR) as positive losses; (None, None) for an empty sample.
    """
    sorted_returns = np.sort(np.asarray(returns, dtype=float))
    if sorted_returns.size == 0:
        return None, None

    # round() keeps 1 - 0.95 equal to 0.05 before flooring
    alpha = round(1 - confidence_level, 10)
    idx = max(0, math.floor(alpha * sorted_returns.size))
    var = -sorted_returns[idx]
    cvar = -sorted_returns[:idx + 1].mean()
    return float(var), float(cvar)


#----------------------------------------------------------
# Metrics
#----------------------------------------------------------
def compute_metrics(nav_series, risk_free_rate=RISK_FREE_RATE,
                    confidence_level=VAR_CONFIDENCE) -> Metrics:
    """
    Main
    ----
    Compute return, risk and tail metrics of a NAV series.

    Parameters
    ----------
    nav_series : pd.Series or array-like
        Portfolio values ordered by date.
    risk_free_rate : float, optional
        Annual risk-free rate for the Sharpe ratio. Default is 0.02.
    confidence_level : float, optional
        Confidence level of VaR/CVaR. Default is 0.95.

    Returns
    -------
    Metrics
        All fields None if the series has fewer than 2 points.
        VaR and CVaR are None when no 1-year rolling return exists.

    Notes
    -----
    - Volatility uses the sample standard deviation (ddof=1) of daily returns.
    - A zero volatility is replaced by 1e-9 in the Sharpe denominator.
    """
    values = np.asarray(nav_series, dtype=float)
    n = len(values)
    if n < 2:
        return Metrics()

    daily = daily_returns(values)
    start, end = values[0], values[-1]

    years = (n - 1) / TRADING_DAYS or 1
    annual_return = (end / start) ** (1 / years) - 1

    daily_std = daily.std(ddof=1) if daily.size > 1 else 0.0
    annual_volatility = daily_std * np.sqrt(TRADING_DAYS)
    sharpe = (annual_return - risk_free_rate) / (annual_volatility or 1e-9)

    var, cvar = historical_var_cvar(rolling_returns(values), confidence_level)

    return Metrics(
        annual_return=float(annual_return),
        annual_volatility=float(annual_volatility),
        sharpe=float(sharpe),
        var_95=var,
        cvar_95=cvar,
        final_value=float(end),
    )
