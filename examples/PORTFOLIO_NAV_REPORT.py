#================================================================
# Historical NAV and Risk Report for a Weighted Portfolio
# ================================================================
import pynav as pv
from pynav.currency import CurrencyConverter


if __name__ == "__main__":
    # 1) USER INPUT
    BASE     = "EUR"
    CAPITAL  = 100_000
    DAYS     = 365 * 5
    SOURCE   = "yfinance"        # or "alphavantage" (set ALPHA_VANTAGE_KEY)
    PORTFOLIO = [
        pv.Instrument("AAPL",    30, currency="USD"),
        pv.Instrument("IWDA.AS", 40, currency="EUR"),
        pv.Instrument("GLD",     20, currency="USD"),
        pv.Instrument("CRYPTO:BTC", 10, currency="USD"),
    ]

    # 2) FETCH ALL PRICES FIRST (concurrent, synthetic fallback)
    price_data = pv.fetch_all_prices(PORTFOLIO, days=DAYS, source=SOURCE, verbose=True)

    # 3) NAV, METRICS AND HISTOGRAM ON THE COMPLETE SNAPSHOT
    report = pv.analyze_portfolio(PORTFOLIO, CAPITAL, base_currency=BASE,
                                  price_data=price_data, verbose=True)

    print("\n" + "=" * 60)
    print(pv.format_report(report))
    print("=" * 60)

    # 4) ROLLING 1Y RETURN DISTRIBUTION
    converter = CurrencyConverter(base_currency=BASE)
    if not report.nav.empty:
        print(f"\nNAV: {converter.format(report.nav.iloc[0])} → {converter.format(report.nav.iloc[-1])}")
    if not report.histogram.empty:
        peak = report.histogram["count"].max()
        for _, row in report.histogram.iterrows():
            bar = "#" * int(40 * row["count"] / peak) if peak else ""
            print(f"{row['bin']:>8} | {bar} {row['count']}")
