"""
BTC 市场监控：拉取 24 小时行情与多周期 K 线，计算指标、汇总信号、
生成报告并保存快照。

任何一次拉取失败都会放弃本轮运行（返回 None），不重试、不输出部分报告。
"""
import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

import httpx

from crypto_monitor.config import OUTPUT_DIR, MonitorConfig
from crypto_monitor.fetchers.binance import fetch_24hr_ticker_async, fetch_klines_async
from crypto_monitor.indicators import analyze_klines
from crypto_monitor.models import IndicatorResult, PriceData
from crypto_monitor.rate_limiter import new_binance_limiter
from crypto_monitor.reports import generate_analysis_prompt, generate_report
from crypto_monitor.signals import generate_market_signals
from crypto_monitor.storage import build_snapshot_path, cleanup_old_files, now_ms, save_json

logger = logging.getLogger(__name__)

FETCH_ERRORS = (httpx.HTTPError, ValueError, KeyError)


@dataclass
class MonitorResult:
    report: str
    price: PriceData
    analysis: Dict[str, IndicatorResult]
    signals: List[str]
    snapshot_path: Optional[Path] = None


@dataclass
class AnalysisResult:
    market: MonitorResult
    prompt: str


class BTCMonitor:
    def __init__(self, config: Optional[MonitorConfig] = None, data_dir: Optional[Path] = None) -> None:
        self.config = config or MonitorConfig()
        self.data_dir = Path(data_dir or OUTPUT_DIR)

    def run(self) -> Optional[MonitorResult]:
        return asyncio.run(self.run_async())

    async def run_async(self, client: Optional[httpx.AsyncClient] = None) -> Optional[MonitorResult]:
        if client is None:
            async with httpx.AsyncClient() as own_client:
                return await self._run(own_client)
        return await self._run(client)

    async def _run(self, client: httpx.AsyncClient) -> Optional[MonitorResult]:
        logger.info("Running BTC monitor for %s", self.config.symbol)
        limiter = new_binance_limiter()

        try:
            price = await fetch_24hr_ticker_async(
                client, self.config.symbol, self.config.binance_api, limiter
            )
        except FETCH_ERRORS as exc:
            logger.error("Error fetching %s price: %s", self.config.symbol, exc)
            return None

        analysis = await self._analyze_timeframes(client, limiter)
        if analysis is None:
            return None

        signals = generate_market_signals(price.change_24h, analysis)
        report = generate_report(
            price,
            analysis,
            signals,
            sharp_change_percent=self.config.price_alerts.sharp_change_percent,
        )
        snapshot_path = self.save_snapshot(price, analysis)

        return MonitorResult(
            report=report,
            price=price,
            analysis=analysis,
            signals=signals,
            snapshot_path=snapshot_path,
        )

    async def _analyze_timeframes(
        self, client: httpx.AsyncClient, limiter
    ) -> Optional[Dict[str, IndicatorResult]]:
        timeframes = self.config.kline_timeframes
        results = await asyncio.gather(
            *(
                fetch_klines_async(
                    client,
                    self.config.symbol,
                    timeframe,
                    self.config.kline_limit,
                    self.config.binance_api,
                    limiter,
                )
                for timeframe in timeframes
            ),
            return_exceptions=True,
        )

        analysis: Dict[str, IndicatorResult] = {}
        for timeframe, candles in zip(timeframes, results):
            if isinstance(candles, BaseException):
                if not isinstance(candles, FETCH_ERRORS):
                    raise candles
                logger.error("Error fetching %s K-line: %s", timeframe, candles)
                return None
            analysis[timeframe] = analyze_klines(
                candles, self.config.price_alerts.volume_spike_multiplier
            )
            logger.debug("%s: %s", timeframe, analysis[timeframe])
        return analysis

    def save_snapshot(
        self, price: PriceData, analysis: Dict[str, IndicatorResult]
    ) -> Optional[Path]:
        """写入快照；写入失败只记录错误，不影响已生成的报告。"""
        timestamp = now_ms()
        path = build_snapshot_path(timestamp, self.data_dir)
        try:
            save_json(
                {
                    "timestamp": timestamp,
                    "price": price.to_dict(),
                    "analysis": {tf: result.to_dict() for tf, result in analysis.items()},
                },
                path,
            )
        except OSError as exc:
            logger.error("Failed to write snapshot %s: %s", path, exc)
            return None
        cleanup_old_files(path.parent, self.config.snapshot_keep)
        logger.info("Snapshot written to %s", path)
        return path


class BTCAnalyzer:
    """在监控结果基础上生成交给外部 AI 代理的综合分析提示词。"""

    def __init__(self, monitor: Optional[BTCMonitor] = None) -> None:
        self.monitor = monitor or BTCMonitor()

    def analyze(self) -> Optional[AnalysisResult]:
        return asyncio.run(self.analyze_async())

    async def analyze_async(self, client: Optional[httpx.AsyncClient] = None) -> Optional[AnalysisResult]:
        market = await self.monitor.run_async(client)
        if market is None:
            logger.error("Failed to fetch market data")
            return None
        prompt = generate_analysis_prompt(market.price, market.analysis)
        return AnalysisResult(market=market, prompt=prompt)
