from typing import List, Sequence

from crypto_monitor.models import Candle, IndicatorResult, Trend

WINDOW_SIZE = 10
SHORT_MA_PERIOD = 5
RSI_PERIOD = 14
MIN_CANDLES = 3


def analyze_klines(
    candles: Sequence[Candle],
    volume_spike_multiplier: float = 3.0,
) -> IndicatorResult:
    """
    根据单个周期的 K 线计算趋势、强度、均线、RSI 和成交量异动。

    K 线需按时间正序排列（最旧在前）。不足 3 根时返回 trend=unknown 的默认结果，
    任何输入都不会抛出异常。
    """
    if not candles or len(candles) < MIN_CANDLES:
        return IndicatorResult.unknown()

    recent = list(candles[-WINDOW_SIZE:])
    current = recent[-1]
    closes = [c.close for c in recent]

    short_ma = moving_average(closes[-SHORT_MA_PERIOD:])
    medium_ma = moving_average(closes)
    price_change = percent_change(closes[0], current.close)

    trend = classify_trend(current.close, short_ma, medium_ma)
    strength = 0.0
    if trend is not Trend.SIDEWAYS:
        strength = _clamp(min(abs(price_change), 100.0))

    # 平均成交量不包含当前这根
    prev_volumes = [c.volume for c in recent[:-1]]
    avg_volume = sum(prev_volumes) / len(prev_volumes)
    volume_spike = current.volume > avg_volume * volume_spike_multiplier

    rsi = calculate_rsi(candles[-(RSI_PERIOD + 1):], RSI_PERIOD)

    return IndicatorResult(
        trend=trend,
        strength=round(strength, 1),
        short_ma=round(short_ma, 2),
        medium_ma=round(medium_ma, 2),
        price_change_percent=round(price_change, 2),
        rsi=rsi,
        volume_spike=volume_spike,
        current_volume=round(current.volume, 2),
        avg_volume=round(avg_volume, 2),
    )


def moving_average(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return sum(values) / len(values)


def percent_change(start: float, end: float) -> float:
    if start == 0:
        return 0.0
    return (end - start) / start * 100


def classify_trend(close: float, short_ma: float, medium_ma: float) -> Trend:
    if short_ma > medium_ma and close > short_ma:
        return Trend.BULLISH
    if short_ma < medium_ma and close < short_ma:
        return Trend.BEARISH
    return Trend.SIDEWAYS


def calculate_rsi(candles: Sequence[Candle], period: int = RSI_PERIOD) -> float:
    """
    简单平均版 RSI：取前 period+1 根 K 线的 period 次收盘价变化，
    涨幅与跌幅分别求和后除以 period。数据不足时返回中性值 50。
    """
    if len(candles) < period + 1:
        return 50.0

    closes: List[float] = [c.close for c in candles[: period + 1]]
    gains = 0.0
    losses = 0.0
    for i in range(1, period + 1):
        change = closes[i] - closes[i - 1]
        if change > 0:
            gains += change
        else:
            losses += abs(change)

    avg_gain = gains / period
    avg_loss = losses / period
    if avg_loss == 0:
        return 100.0

    rs = avg_gain / avg_loss
    return round(_clamp(100 - (100 / (1 + rs))), 1)


def _clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))
