"""
Static Reference Data Module
----------------------------

Holds the static tables and constants shared by the valuation engine
and the price providers. None of the engine functions read these
tables implicitly: they are the default values of explicit arguments,
so a caller can pass its own tables (e.g. live FX rates) at any time.

Rates in EXCHANGE_RATES are quoted against EUR (the pivot currency).
Converting to another base currency divides by the base rate, so any
currency listed here can be used as base.

Authors
-------
pynav contributors

Created
-------
October 2026

Contents
--------
- EXCHANGE_RATES: currency -> (display symbol, rate to EUR)
- ASSET_PARAMETERS: ticker -> (annual return, volatility, currency) for synthetic data
- DEFAULT_ASSET_PARAMETERS: parameters used for unknown tickers
- ISIN_TO_TICKER: ISIN -> ticker map, used only to look up synthetic parameters
- Engine constants (trading days, risk-free rate, VaR confidence, ...)
"""


#----------------------------------------------------------
# Engine Constants
#----------------------------------------------------------
BASE_CURRENCY         = "EUR"
FALLBACK_CURRENCY     = "USD"      # currency assumed when neither instrument nor series has one
TRADING_DAYS          = 252
RISK_FREE_RATE        = 0.02
VAR_CONFIDENCE        = 0.95
HISTOGRAM_BUCKETS     = 20
DEFAULT_LOOKBACK_DAYS = 365 * 5
SYNTHETIC_START_PRICE = 100.0
SYNTHETIC_MIN_POINTS  = 400
SYNTHETIC_MAX_DAYS    = 365 * 10


#----------------------------------------------------------
# Exchange Rates (static, EUR pivot)
#----------------------------------------------------------
EXCHANGE_RATES = {
    "USD": ("$", 0.92),
    "EUR": ("€", 1.0),
    "GBP": ("£", 1.15),
    "JPY": ("¥", 0.0067),
    "CHF": ("CHF", 0.93),
    "AUD": ("A$", 0.62),
    "CAD": ("C$", 0.69),
    "NZD": ("NZ$", 0.58),
    "SEK": ("kr", 0.086),
    "NOK": ("kr", 0.089),
    "DKK": ("kr", 0.134),
    "SGD": ("S$", 0.67),
    "HKD": ("HK$", 0.12),
}


#----------------------------------------------------------
# Synthetic Data Parameters
#----------------------------------------------------------
DEFAULT_ASSET_PARAMETERS = {"annual_return": 0.08, "volatility": 0.18, "currency": None}

ASSET_PARAMETERS = {
    # Equities
    "AAPL":    {"annual_return": 0.20, "volatility": 0.30, "currency": "USD"},
    "MSFT":    {"annual_return": 0.18, "volatility": 0.25, "currency": "USD"},
    "GOOGL":   {"annual_return": 0.17, "volatility": 0.28, "currency": "USD"},
    "AMZN":    {"annual_return": 0.16, "volatility": 0.33, "currency": "USD"},
    "TSLA":    {"annual_return": 0.30, "volatility": 0.60, "currency": "USD"},
    "ENI.MI":  {"annual_return": 0.05, "volatility": 0.22, "currency": "EUR"},
    "IWDA.AS": {"annual_return": 0.09, "volatility": 0.16, "currency": "EUR"},
    "BRK.B":   {"annual_return": 0.14, "volatility": 0.22, "currency": "USD"},
    "JPM":     {"annual_return": 0.12, "volatility": 0.28, "currency": "USD"},
    "UNH":     {"annual_return": 0.15, "volatility": 0.24, "currency": "USD"},

    # ETFs
    "IWD.AS":  {"annual_return": 0.08, "volatility": 0.18, "currency": "EUR"},
    "IEMG.AS": {"annual_return": 0.10, "volatility": 0.25, "currency": "USD"},
    "QQQ.L":   {"annual_return": 0.19, "volatility": 0.30, "currency": "USD"},
    "VUSA.AS": {"annual_return": 0.15, "volatility": 0.20, "currency": "EUR"},
    "VEVE.AS": {"annual_return": 0.08, "volatility": 0.16, "currency": "EUR"},
    "SPY":     {"annual_return": 0.15, "volatility": 0.22, "currency": "USD"},

    # Commodities
    "GLD":     {"annual_return": 0.08, "volatility": 0.18, "currency": "USD"},
    "SLV":     {"annual_return": 0.06, "volatility": 0.25, "currency": "USD"},
    "USO":     {"annual_return": 0.10, "volatility": 0.45, "currency": "USD"},
    "UNG":     {"annual_return": 0.12, "volatility": 0.50, "currency": "USD"},
    "DBC":     {"annual_return": 0.07, "volatility": 0.35, "currency": "USD"},

    # Crypto
    "BTC":     {"annual_return": 0.80, "volatility": 0.90, "currency": "USD"},
    "ETH":     {"annual_return": 0.75, "volatility": 0.85, "currency": "USD"},
    "BNB":     {"annual_return": 0.60, "volatility": 0.80, "currency": "USD"},
}

ISIN_TO_TICKER = {
    "US0378331005": "AAPL",
    "US5949181045": "MSFT",
    "US02079K3059": "GOOGL",
    "US0231351067": "AMZN",
    "US88160R1014": "TSLA",
    "IT0003132476": "ENI.MI",
    "IE00B4L5Y983": "IWDA.AS",
    "US0846707026": "BRK.B",
    "US46625H1005": "JPM",
    "US91324P1021": "UNH",
    "IE00B0M62Q58": "IWD.AS",
    "IE00B4L5Y999": "IEMG.AS",
    "IE00B1FZS350": "QQQ.L",
    "IE00B5BMR087": "VUSA.AS",
    "IE00B3RBWM25": "VEVE.AS",
    "US4642872000": "SPY",
    "US78462F1030": "PYPL",
    "GB00B03MLX29": "HSBA.L",
    "US9311421039": "V",
    "FR0000120271": "BNP.PA",
    "DE000BASF111": "BAS.DE",
    "JP3435000009": "SONY",
    "CH0038863350": "NESN.SW",
    "US78463V1070": "GLD",
    "US78464Y4090": "SLV",
    "US912810FH35": "USO",
    "US912810JA50": "UNG",
    "US4642882799": "DBC",
    "CRYPTO:BTC":   "BTC",
    "CRYPTO:ETH":   "ETH",
}
