"""Application constants to avoid magic strings."""


class InstrumentType:
    """Instrument category constants."""

    STOCK = "stock"
    MUTUAL_FUND = "mutual_fund"
    ETF = "etf"
    DEBT = "debt"

    # Mutual funds and debt have no live exchange quote
    LIVE_PRICED = (STOCK, ETF)


# Sector label used when a holding has none
UNSPECIFIED_SECTOR = "Others"

# Chart palette for sector allocation; entries cycle by position
SECTOR_COLORS = (
    "hsl(239, 84%, 67%)",
    "hsl(142, 71%, 45%)",
    "hsl(38, 92%, 50%)",
    "hsl(280, 65%, 55%)",
    "hsl(218, 11%, 55%)",
)
