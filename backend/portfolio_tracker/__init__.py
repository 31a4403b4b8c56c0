"""Portfolio tracker backend: holdings, live prices, valuation and insights."""

__version__ = "0.1.0"
