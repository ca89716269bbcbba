"""
多周期信号汇总。

输入为按配置周期顺序排列的 {周期: IndicatorResult} 映射，输出 1~4 条可读信号，
规则按固定顺序执行：趋势共识 -> RSI 极值 -> 24 小时波动 -> 成交量异动。
"""
from typing import Dict, List, Mapping, Tuple

from crypto_monitor.models import IndicatorResult, Trend

BULLISH_SIGNAL = "✅ Multi-timeframe bullish signal"
BEARISH_SIGNAL = "⚠️ Multi-timeframe bearish signal"
MIXED_SIGNAL = "⚖️ Mixed signals - suggest wait and see"
OVERBOUGHT_SIGNAL = "🔴 RSI overbought - possible correction ahead"
OVERSOLD_SIGNAL = "🟢 RSI oversold - possible bounce opportunity"
VOLUME_SIGNAL = "📢 Unusual volume detected - significant move possible"

CONSENSUS_MIN_TIMEFRAMES = 3
RSI_OVERBOUGHT = 70
RSI_OVERSOLD = 30
HIGH_VOLATILITY_PERCENT = 5

TimeframeAnalysis = Dict[str, IndicatorResult]


def count_trends(analysis: Mapping[str, IndicatorResult]) -> Tuple[int, int]:
    """返回 (看涨周期数, 看跌周期数)。"""
    bullish = sum(1 for result in analysis.values() if result.trend is Trend.BULLISH)
    bearish = sum(1 for result in analysis.values() if result.trend is Trend.BEARISH)
    return bullish, bearish


def average_rsi(analysis: Mapping[str, IndicatorResult]) -> float:
    if not analysis:
        raise ValueError("analysis must contain at least one timeframe")
    return sum(result.rsi for result in analysis.values()) / len(analysis)


def format_volatility_signal(change_24h: float) -> str:
    sign = "+" if change_24h > 0 else ""
    return f"⚡ High volatility ({sign}{change_24h:.2f}%) - manage risk"


def generate_market_signals(
    change_24h: float,
    analysis: Mapping[str, IndicatorResult],
) -> List[str]:
    if not analysis:
        raise ValueError("analysis must contain at least one timeframe")

    signals: List[str] = []

    bullish, bearish = count_trends(analysis)
    if bullish >= CONSENSUS_MIN_TIMEFRAMES:
        signals.append(BULLISH_SIGNAL)
    elif bearish >= CONSENSUS_MIN_TIMEFRAMES:
        signals.append(BEARISH_SIGNAL)
    else:
        signals.append(MIXED_SIGNAL)

    avg_rsi = average_rsi(analysis)
    if avg_rsi > RSI_OVERBOUGHT:
        signals.append(OVERBOUGHT_SIGNAL)
    elif avg_rsi < RSI_OVERSOLD:
        signals.append(OVERSOLD_SIGNAL)

    if abs(change_24h) > HIGH_VOLATILITY_PERCENT:
        signals.append(format_volatility_signal(change_24h))

    if any(result.volume_spike for result in analysis.values()):
        signals.append(VOLUME_SIGNAL)

    return signals
