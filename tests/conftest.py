"""Shared test fixtures and utilities."""

import asyncio
from typing import Callable, List, Optional, Sequence

import httpx
import pytest

from crypto_monitor.models import Candle, IndicatorResult, Trend

BASE_TIMESTAMP = 1_700_000_000_000
MINUTE_MS = 60_000


def build_candles(closes: Sequence[float], volumes: Optional[Sequence[float]] = None) -> List[Candle]:
    """Build chronological candles from close prices (open = previous close)."""
    volumes = volumes or [10.0] * len(closes)
    candles = []
    prev = closes[0] if closes else 0.0
    for i, (close, volume) in enumerate(zip(closes, volumes)):
        candles.append(
            Candle(
                timestamp=BASE_TIMESTAMP + i * MINUTE_MS,
                open=prev,
                high=max(prev, close),
                low=min(prev, close),
                close=close,
                volume=volume,
            )
        )
        prev = close
    return candles


def kline_rows(candles: Sequence[Candle]) -> list:
    """Render candles the way Binance /api/v3/klines does (strings for decimals)."""
    return [
        [
            c.timestamp,
            str(c.open),
            str(c.high),
            str(c.low),
            str(c.close),
            str(c.volume),
            c.timestamp + MINUTE_MS - 1,
            "0",
            10,
            "0",
            "0",
            "0",
        ]
        for c in candles
    ]


def ticker_payload(last_price: float = 65000.0, change_percent: float = 1.5) -> dict:
    return {
        "symbol": "BTCUSDT",
        "priceChange": "975.00",
        "priceChangePercent": str(change_percent),
        "lastPrice": str(last_price),
        "highPrice": "66000.00",
        "lowPrice": "63500.00",
        "volume": "25000.5",
        "quoteVolume": "1625000000.0",
        "count": 1234567,
    }


def run_with_transport(handler: Callable[[httpx.Request], httpx.Response], coro_factory):
    """Run coro_factory(client) on a fresh event loop with a mocked HTTP transport."""

    async def _run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await coro_factory(client)

    return asyncio.run(_run())


@pytest.fixture
def make_candles():
    return build_candles


@pytest.fixture
def make_result():
    def _make(trend: Trend = Trend.SIDEWAYS, rsi: float = 50.0, volume_spike: bool = False) -> IndicatorResult:
        return IndicatorResult(trend=trend, strength=1.0, rsi=rsi, volume_spike=volume_spike)

    return _make


@pytest.fixture
def rising_closes():
    return [100.0 + i for i in range(20)]


@pytest.fixture
def falling_closes():
    return [200.0 - i for i in range(20)]
