from typing import Any, Dict, List, Optional

import httpx
import requests

from crypto_monitor.config import BINANCE_BASE_URL
from crypto_monitor.models import Candle, PriceData
from crypto_monitor.rate_limiter import AsyncConcurrencyLimiter, new_binance_limiter


def parse_24hr_ticker(ticker_data: Any) -> PriceData:
    """将 /api/v3/ticker/24hr 的返回转换为 PriceData。"""
    if not isinstance(ticker_data, dict):
        raise ValueError(f"API 返回格式错误：期望字典，得到 {type(ticker_data)}")

    try:
        return PriceData(
            price=float(ticker_data["lastPrice"]),
            change_24h=float(ticker_data.get("priceChangePercent", 0)),
            volume_24h=float(ticker_data.get("volume", 0)),
            high_24h=float(ticker_data.get("highPrice", 0)),
            low_24h=float(ticker_data.get("lowPrice", 0)),
            trades=int(ticker_data.get("count", 0)),
        )
    except (KeyError, TypeError) as exc:
        raise ValueError(f"24 小时行情数据格式错误：{exc}") from exc


def parse_klines(raw_klines: Any) -> List[Candle]:
    """将 /api/v3/klines 的数组转换为按时间正序排列的 Candle 列表。"""
    if not isinstance(raw_klines, list):
        raise ValueError(f"API 返回格式错误：期望列表，得到 {type(raw_klines)}")

    candles: List[Candle] = []
    for entry in raw_klines:
        if not isinstance(entry, list) or len(entry) < 6:
            raise ValueError(f"K 线数据格式错误：{entry}")

        candles.append(
            Candle(
                timestamp=int(entry[0]),
                open=float(entry[1]),
                high=float(entry[2]),
                low=float(entry[3]),
                close=float(entry[4]),
                volume=float(entry[5]),
            )
        )

    # Binance 本身按时间正序返回，这里再排序一次以保证指标计算的前提成立
    candles.sort(key=lambda c: c.timestamp)
    return candles


def fetch_24hr_ticker(symbol: str, base_url: str = BINANCE_BASE_URL) -> PriceData:
    """同步获取 24 小时行情（--price-only 快速模式使用）。"""
    response = requests.get(
        f"{base_url}/api/v3/ticker/24hr",
        params={"symbol": symbol.upper()},
        timeout=30,
    )
    response.raise_for_status()
    return parse_24hr_ticker(response.json())


async def fetch_24hr_ticker_async(
    client: httpx.AsyncClient,
    symbol: str,
    base_url: str = BINANCE_BASE_URL,
    limiter: Optional[AsyncConcurrencyLimiter] = None,
) -> PriceData:
    data = await _get_json(
        client,
        f"{base_url}/api/v3/ticker/24hr",
        {"symbol": symbol.upper()},
        limiter,
    )
    return parse_24hr_ticker(data)


async def fetch_klines_async(
    client: httpx.AsyncClient,
    symbol: str,
    interval: str,
    limit: int = 100,
    base_url: str = BINANCE_BASE_URL,
    limiter: Optional[AsyncConcurrencyLimiter] = None,
) -> List[Candle]:
    data = await _get_json(
        client,
        f"{base_url}/api/v3/klines",
        {"symbol": symbol.upper(), "interval": interval, "limit": limit},
        limiter,
    )
    return parse_klines(data)


async def _get_json(
    client: httpx.AsyncClient,
    url: str,
    params: Dict[str, Any],
    limiter: Optional[AsyncConcurrencyLimiter],
) -> Any:
    async with limiter or new_binance_limiter():
        response = await client.get(url, params=params, timeout=30)
    response.raise_for_status()
    return response.json()
