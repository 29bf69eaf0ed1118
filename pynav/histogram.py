"""
Rolling Return Histogram Module
-------------------------------

Buckets the distribution of 1-year rolling portfolio returns into
fixed-width bins, ready to be drawn as a bar chart.

Authors
-------
pynav contributors

Created
-------
October 2026

Contents
--------
- build_histogram: Fixed-width histogram of 1-year rolling returns
"""


#----------------------------------------------------------
# Packages
#----------------------------------------------------------
import numpy as np
import pandas as pd

from .metrics import rolling_returns
from .reference_data import HISTOGRAM_BUCKETS, TRADING_DAYS


#----------------------------------------------------------
# Histogram
#----------------------------------------------------------
def build_histogram(nav_series, buckets=HISTOGRAM_BUCKETS) -> pd.DataFrame:
    """
    Main
    ----
    Histogram of the 1-year rolling returns of a NAV series.

    Bins are equal-width and span [min, max] of the rolling returns. The
    maximum falls in the last bin. When all returns are identical the width
    is set to 1, so everything lands in the first bin.

    Parameters
    ----------
    nav_series : pd.Series or array-like
        Portfolio values ordered by date.
    buckets : int, optional
        Number of bins. Default is 20.

    Returns
    -------
    pd.DataFrame
        Columns 'bin' (lower edge as a 3-decimal string, e.g. '-0.050')
        and 'count', one row per bin. Empty when there are no rolling returns.

    Raises
    ------
    ValueError
        If `buckets` is smaller than 1.
    """
    if buckets < 1:
        raise ValueError("'buckets' must be at least 1.")

    rolling = rolling_returns(nav_series, TRADING_DAYS)
    if rolling.size == 0:
        return pd.DataFrame({"bin": pd.Series(dtype=str), "count": pd.Series(dtype=int)})

    min_r, max_r = rolling.min(), rolling.max()
    width = (max_r - min_r) / buckets or 1.0

    idx = np.floor((rolling - min_r) / width).astype(int)
    idx = np.clip(idx, 0, buckets - 1)
    counts = np.bincount(idx, minlength=buckets)

    return pd.DataFrame({
        "bin": [f"{min_r + i * width:.3f}" for i in range(buckets)],
        "count": counts.astype(int),
    })
