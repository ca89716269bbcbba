from .binance import (
    fetch_24hr_ticker,
    fetch_24hr_ticker_async,
    fetch_klines_async,
    parse_24hr_ticker,
    parse_klines,
)

__all__ = [
    "fetch_24hr_ticker",
    "fetch_24hr_ticker_async",
    "fetch_klines_async",
    "parse_24hr_ticker",
    "parse_klines",
]
