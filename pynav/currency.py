"""
Currency Conversion Module
--------------------------

Converts amounts to a common base currency using a static rate table
and formats monetary values for display.

The rate table maps each currency code to (display symbol, rate to the
pivot currency). The default table (reference_data.EXCHANGE_RATES) uses
EUR as pivot; converting to any other base divides by the base rate.

Unknown currency codes are converted with a rate of 1.0, i.e. they are
treated as already expressed in base currency. Callers that need strict
validation should check CurrencyConverter.is_known before calling the engine.

Authors
-------
pynav contributors

Created
-------
October 2026

Contents
--------
- CurrencyConverter: to_base, rate, symbol, is_known and format
"""


#----------------------------------------------------------
# Packages
#----------------------------------------------------------
from .reference_data import EXCHANGE_RATES, BASE_CURRENCY


#----------------------------------------------------------
# Currency Converter
#----------------------------------------------------------
class CurrencyConverter:
    """
    Main
    ----
    Static-table currency converter.

    Parameters
    ----------
    exchange_rates : dict, optional
        Mapping currency -> (symbol, rate to pivot). Default is reference_data.EXCHANGE_RATES.
    base_currency : str, optional
        Currency every amount is converted to. Default is 'EUR'.
    """

    def __init__(self, exchange_rates=None, base_currency=BASE_CURRENCY):
        self.exchange_rates = dict(EXCHANGE_RATES if exchange_rates is None else exchange_rates)
        self.base_currency = base_currency

    def is_known(self, currency) -> bool:
        return currency in self.exchange_rates

    def rate(self, currency) -> float:
        """
        Rate of `currency` against the pivot currency (1.0 when unknown).
        """
        entry = self.exchange_rates.get(currency)
        return 1.0 if entry is None else float(entry[1])

    def symbol(self, currency=None) -> str:
        """
        Display symbol of `currency`. Unknown codes use the base currency symbol,
        and the code itself when the base is unknown too.
        """
        currency = currency or self.base_currency
        entry = self.exchange_rates.get(currency) or self.exchange_rates.get(self.base_currency)
        return entry[0] if entry is not None else currency

    def to_base(self, amount, currency) -> float:
        """
        Convert `amount` quoted in `currency` to the base currency.

        Works element-wise on numpy arrays and pandas objects as well.
        """
        if not self.is_known(currency) or currency == self.base_currency:
            return amount
        return amount * (self.rate(currency) / self.rate(self.base_currency))

    def format(self, amount, currency=None) -> str:
        """
        Format a monetary value with an abbreviated magnitude.

        Examples: 1.5e9 -> '€1.50B', 2.35e6 -> '€2.35M', 12345 -> '€12.3k', 12.5 -> '€12.50'.
        """
        symbol = self.symbol(currency)
        value = float(amount)
        magnitude = abs(value)

        # a unit is used once the next smaller unit would display 1000 or more:
        # 999_960 -> '1.00M', not '1000.0k'
        if round(magnitude / 1e6, 2) >= 1000:
            return f"{symbol}{value / 1e9:.2f}B"
        if round(magnitude / 1e3, 1) >= 1000:
            return f"{symbol}{value / 1e6:.2f}M"
        if round(magnitude, 2) >= 1000:
            return f"{symbol}{value / 1e3:.1f}k"
        return f"{symbol}{value:.2f}"
