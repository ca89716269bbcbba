"""End-to-end tests for the BTC monitor with mocked Binance HTTP calls."""

import json

import httpx

from crypto_monitor.config import MonitorConfig
from crypto_monitor.models import Trend
from crypto_monitor.monitor import BTCAnalyzer, BTCMonitor
from crypto_monitor.signals import BULLISH_SIGNAL, OVERBOUGHT_SIGNAL
from tests.conftest import build_candles, kline_rows, run_with_transport, ticker_payload

RISING = [60000.0 + 50 * i for i in range(100)]


def binance_handler(ticker=None, klines=None, fail_paths=()):
    requested = []

    def handler(request: httpx.Request) -> httpx.Response:
        requested.append((request.url.path, dict(request.url.params)))
        if request.url.path in fail_paths:
            return httpx.Response(500, json={"code": -1, "msg": "boom"})
        if request.url.path == "/api/v3/ticker/24hr":
            return httpx.Response(200, json=ticker or ticker_payload())
        if request.url.path == "/api/v3/klines":
            return httpx.Response(200, json=klines if klines is not None else kline_rows(build_candles(RISING)))
        return httpx.Response(404)

    handler.requested = requested
    return handler


class TestBTCMonitor:
    def test_full_run_produces_report_and_snapshot(self, tmp_path):
        handler = binance_handler(ticker=ticker_payload(65000.0, 6.0))
        monitor = BTCMonitor(MonitorConfig(), tmp_path)

        result = run_with_transport(handler, monitor.run_async)

        assert result is not None
        assert list(result.analysis) == ["5m", "15m", "1h", "4h"]
        assert all(r.trend is Trend.BULLISH for r in result.analysis.values())
        assert result.signals[0] == BULLISH_SIGNAL
        assert OVERBOUGHT_SIGNAL in result.signals
        assert "⚡ High volatility (+6.00%) - manage risk" in result.signals
        assert "$65,000.00" in result.report

        snapshot = json.loads(result.snapshot_path.read_text(encoding="utf-8"))
        assert snapshot["price"]["price"] == 65000.0
        assert snapshot["analysis"]["1h"]["trend"] == "bullish"
        assert result.snapshot_path.parent == tmp_path / "btc-monitor"

    def test_requests_every_configured_timeframe(self, tmp_path):
        handler = binance_handler()
        config = MonitorConfig(kline_timeframes=["1h", "1d"], kline_limit=50)

        run_with_transport(handler, BTCMonitor(config, tmp_path).run_async)

        kline_calls = [params for path, params in handler.requested if path == "/api/v3/klines"]
        assert sorted(p["interval"] for p in kline_calls) == ["1d", "1h"]
        assert all(p["symbol"] == "BTCUSDT" and p["limit"] == "50" for p in kline_calls)

    def test_ticker_failure_aborts_run(self, tmp_path):
        handler = binance_handler(fail_paths=("/api/v3/ticker/24hr",))

        result = run_with_transport(handler, BTCMonitor(MonitorConfig(), tmp_path).run_async)

        assert result is None
        assert not (tmp_path / "btc-monitor").exists()

    def test_kline_failure_aborts_run_without_partial_report(self, tmp_path):
        handler = binance_handler(fail_paths=("/api/v3/klines",))

        result = run_with_transport(handler, BTCMonitor(MonitorConfig(), tmp_path).run_async)

        assert result is None
        assert not (tmp_path / "btc-monitor").exists()

    def test_malformed_klines_abort_run(self, tmp_path):
        handler = binance_handler(klines={"unexpected": "object"})

        assert run_with_transport(handler, BTCMonitor(MonitorConfig(), tmp_path).run_async) is None

    def test_short_history_yields_unknown_trend(self, tmp_path):
        handler = binance_handler(klines=kline_rows(build_candles([60000.0, 60010.0])))

        result = run_with_transport(handler, BTCMonitor(MonitorConfig(), tmp_path).run_async)

        assert all(r.trend is Trend.UNKNOWN and r.rsi == 50 for r in result.analysis.values())

    def test_snapshot_retention(self, tmp_path):
        config = MonitorConfig(snapshot_keep=1)
        old = tmp_path / "btc-monitor" / "1000000000000.json"
        old.parent.mkdir(parents=True)
        old.write_text("{}", encoding="utf-8")

        result = run_with_transport(binance_handler(), BTCMonitor(config, tmp_path).run_async)

        assert not old.exists()
        assert list((tmp_path / "btc-monitor").glob("*.json")) == [result.snapshot_path]


class TestBTCAnalyzer:
    def test_prompt_includes_market_data(self, tmp_path):
        analyzer = BTCAnalyzer(BTCMonitor(MonitorConfig(), tmp_path))

        result = run_with_transport(binance_handler(), analyzer.analyze_async)

        assert result.prompt.startswith("Bitcoin Market Comprehensive Analysis:")
        assert "- 4h: bullish" in result.prompt
        assert "RSI 100.0" in result.prompt

    def test_failure_returns_none(self, tmp_path):
        analyzer = BTCAnalyzer(BTCMonitor(MonitorConfig(), tmp_path))
        handler = binance_handler(fail_paths=("/api/v3/ticker/24hr",))

        assert run_with_transport(handler, analyzer.analyze_async) is None


class TestSnapshotWriteFailure:
    def test_unwritable_data_dir_keeps_report(self, tmp_path):
        data_file = tmp_path / "data"
        data_file.write_text("not a directory", encoding="utf-8")

        result = run_with_transport(binance_handler(), BTCMonitor(MonitorConfig(), data_file).run_async)

        assert result is not None
        assert result.snapshot_path is None
        assert "BTC Market Report" in result.report
        assert result.signals[0] == BULLISH_SIGNAL
