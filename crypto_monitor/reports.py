"""
文本报告与提示词生成。

输出面向人类阅读或交给外部 AI 代理，不保证可被程序解析。
"""
from datetime import datetime
from typing import List, Mapping, Optional, Sequence

from crypto_monitor.config import HunterConfig
from crypto_monitor.models import IndicatorResult, PriceData, TokenFinding, Trend

TREND_EMOJI = {
    Trend.BULLISH: "📈",
    Trend.BEARISH: "📉",
    Trend.SIDEWAYS: "↔️",
    Trend.UNKNOWN: "❓",
}

TIMEFRAME_NAMES = {
    "5m": "5-min",
    "15m": "15-min",
    "1h": "1-hour",
    "4h": "4-hour",
}


def _signed(value: float) -> str:
    return f"{'+' if value > 0 else ''}{value:.2f}%"


def _rsi_tag(rsi: float) -> str:
    if rsi > 70:
        return "(Overbought⚠️)"
    if rsi < 30:
        return "(Oversold⚠️)"
    return "(Neutral)"


def generate_report(
    price: PriceData,
    analysis: Mapping[str, IndicatorResult],
    signals: Sequence[str],
    sharp_change_percent: float = 2.0,
    now: Optional[datetime] = None,
) -> str:
    """生成 BTC 市场报告。"""
    now = now or datetime.now()
    lines = [
        f"🪙 **BTC Market Report** ({now.strftime('%Y-%m-%d %H:%M:%S')})",
        "",
        f"💰 **Current Price**: ${price.price:,.2f}",
        f"📊 **24h Change**: {_signed(price.change_24h)}",
        f"📈 **24h High**: ${price.high_24h:,.2f}",
        f"📉 **24h Low**: ${price.low_24h:,.2f}",
        f"💹 **24h Volume**: {price.volume_24h / 1000:.2f}K BTC",
        f"🔁 **24h Trades**: {price.trades:,}",
        "",
        "🔍 **Technical Analysis**",
    ]

    for timeframe, result in analysis.items():
        name = TIMEFRAME_NAMES.get(timeframe, timeframe)
        lines.append("")
        lines.append(f"{name}: {TREND_EMOJI[result.trend]} **{result.trend.value.upper()}**")
        lines.append(f"  • Strength: {result.strength}%")
        lines.append(f"  • RSI: {result.rsi} {_rsi_tag(result.rsi)}")
        lines.append(f"  • MA5: ${result.short_ma:,.2f} | MA10: ${result.medium_ma:,.2f}")
        if result.trend is not Trend.UNKNOWN and abs(result.price_change_percent) >= sharp_change_percent:
            lines.append(f"  • ⚡ Sharp move: {_signed(result.price_change_percent)} over last 10 candles")
        if result.volume_spike:
            lines.append(f"  • 🔥 Volume spike! ({result.volume_ratio:.1f}x average)")

    lines.append("")
    lines.append("📊 **Market Signals**")
    lines.extend(signals)
    return "\n".join(lines)


def generate_analysis_prompt(
    price: PriceData,
    analysis: Mapping[str, IndicatorResult],
) -> str:
    """生成交给外部 AI 代理的综合分析提示词（技术面 + 情绪面 + 宏观面）。"""
    lines = [
        "Bitcoin Market Comprehensive Analysis:",
        "",
        "**Current Market Data**:",
        f"- Price: ${price.price:,.2f}",
        f"- 24h Change: {_signed(price.change_24h)}",
        f"- 24h Volume: {price.volume_24h / 1000:.2f}K BTC",
        "",
        "**Technical Indicators**:",
    ]
    for timeframe, result in analysis.items():
        lines.append(
            f"- {timeframe}: {result.trend.value} (strength {result.strength}%, RSI {result.rsi})"
        )
    lines.extend(
        [
            "",
            "**Analysis Tasks**:",
            "1. Search latest crypto market news and Twitter sentiment",
            "2. Search macro economic news (Federal Reserve, inflation, interest rates)",
            "3. Analyze: technical + sentiment + macro factors",
            "4. Provide outlook: short-term (1-24h) and medium-term (1-7d)",
            "5. Trading suggestions (for reference only)",
            "",
            "Please respond in concise format with emoji.",
        ]
    )
    return "\n".join(lines)


CHAIN_NAMES = {
    "SOL": "Solana",
    "ETH": "Ethereum",
    "BASE": "Base",
    "BSC": "BSC",
}


def generate_search_prompt(config: HunterConfig, now: Optional[datetime] = None) -> str:
    """生成 Meme 代币搜索提示词，交给具备 web_search 能力的外部代理执行。"""
    time_str = (now or datetime.now()).isoformat()
    chain_names = "/".join(CHAIN_NAMES.get(c, c) for c in config.chains)

    lines = [
        f"🔍 **Meme Token Hunt** - {time_str}",
        "",
        "Execute Twitter hot meme coin monitoring:",
        "",
        "**1. Search the following keyword combinations** (use web_search, freshness: past 1-24 hours):",
    ]
    for idx, keyword in enumerate(config.search_keywords, start=1):
        lines.append(f'   {idx}. "{keyword}"')

    lines.append("")
    lines.append("**2. Focus on these KOL accounts**:")
    for account in config.influencer_accounts:
        lines.append(f"   • {account}")

    lines.extend(
        [
            "",
            "**3. Extract information**:",
            f"   For each token that suddenly went viral on Twitter (mentions >{config.min_mentions_per_hour}x/hour):",
            "   - Token name and ticker symbol",
            "   - Contract address (CA)",
            f"   - Blockchain ({chain_names})",
            "   - Why it's trending (summarize tweets)",
            "   - Estimated mention count",
            "   - Whether key KOLs are involved",
            "   - Risk warning (any rug pull alerts)",
            "   - Original tweet links (at least 2-3)",
            "",
            "**4. Filtering criteria**:",
            "   ✅ Only report **newly appeared** or **suddenly viral** tokens",
            "   ✅ Must have clear contract address (CA)",
            "   ✅ Exclude old projects (BTC/ETH/SOL etc.)",
            "   ⚠️ Mark risk level (LOW/MEDIUM/HIGH/CRITICAL)",
            "",
            "**5. Output format** (in English or Chinese):",
            "If hot token found (one block per token, separate blocks with a line containing only ---):",
            "",
            "🔥 **Hot Meme Coin Detected!**",
            "",
            "💎 **Token**: [Name] ($TICKER)",
            "🔗 **CA**: `[Contract Address]`",
            f"⛓️ **Chain**: [{chain_names}]",
            "",
            "🔥 **Why trending**:",
            "[Summarize in 2-3 sentences]",
            "",
            "📊 **Data**:",
            "• Mentions: ~[number] tweets/hour",
            "• KOL involved: [Yes/No]",
            "• Risk level: [LOW/MEDIUM/HIGH/CRITICAL]",
            "",
            "🐦 **Sources**:",
            "• [Tweet link 1]",
            "• [Tweet link 2]",
            "",
            f"⏰ Detected: {time_str}",
            "",
            "---",
            "",
            "If **no** qualified hot token found, reply:",
            '"No new hot meme coins detected in this scan."',
            "",
            "**Important**: Only report truly **suddenly viral** new coins, not stable old projects.",
        ]
    )
    return "\n".join(lines)


def format_findings(findings: Sequence[TokenFinding]) -> str:
    if not findings:
        return "No new hot meme coins detected in this scan."

    lines: List[str] = [f"🔥 {len(findings)} new token(s) detected:"]
    for finding in findings:
        lines.append(
            f"• `{finding.address}` | Chain: {finding.chain.value} | Risk: {finding.risk.value}"
        )
    return "\n".join(lines)
