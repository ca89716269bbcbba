"""
BTC 市场监控脚本。

功能：
- 从 Binance 现货 API 获取 BTC 24 小时行情与多周期 K 线
- 计算均线、RSI、趋势强度与成交量异动，并汇总多周期信号
- 打印市场报告，并保存快照到 data/btc-monitor/{timestamp}.json

适合配合 cron 定时执行，每次执行只运行一轮。
"""

import argparse
import json
import logging
import sys
from pathlib import Path

import requests

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from crypto_monitor.config import DEFAULT_CONFIG_PATH, OUTPUT_DIR, load_monitor_config
from crypto_monitor.fetchers.binance import fetch_24hr_ticker
from crypto_monitor.monitor import BTCMonitor


def parse_args() -> argparse.Namespace:
    """解析命令行参数。"""
    parser = argparse.ArgumentParser(
        description="获取 BTC 行情与多周期 K 线，计算技术指标并输出市场报告"
    )
    parser.add_argument("--config", default=str(DEFAULT_CONFIG_PATH), help="配置文件路径，默认 config.json")
    parser.add_argument("--data-dir", default=str(OUTPUT_DIR), help="快照输出目录，默认 data")
    parser.add_argument(
        "--price-only",
        action="store_true",
        help="仅获取当前价格，不获取K线（快速模式）",
    )
    parser.add_argument("--json", action="store_true", help="以 JSON 输出指标结果，而不是文本报告")
    parser.add_argument("--verbose", action="store_true", help="输出调试日志")
    return parser.parse_args()


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def main() -> None:
    """主函数：协调数据获取、指标计算、报告输出和快照保存。"""
    args = parse_args()
    setup_logging(args.verbose)
    config = load_monitor_config(Path(args.config))

    if args.price_only:
        try:
            price = fetch_24hr_ticker(config.symbol, config.binance_api)
        except (requests.RequestException, ValueError) as exc:
            print(f"[{config.symbol}] 获取价格失败：{exc}", file=sys.stderr)
            sys.exit(1)
        print(f"{config.symbol}: {price.price} ({price.change_24h:+.2f}%)")
        return

    result = BTCMonitor(config, Path(args.data_dir)).run()
    if result is None:
        print("本轮监控失败，未生成报告。", file=sys.stderr)
        sys.exit(1)

    if args.json:
        output = {
            "price": result.price.to_dict(),
            "analysis": {tf: r.to_dict() for tf, r in result.analysis.items()},
            "signals": result.signals,
            "snapshot": str(result.snapshot_path) if result.snapshot_path else None,
        }
        print(json.dumps(output, ensure_ascii=False, indent=2))
    else:
        print(result.report)


if __name__ == "__main__":
    main()
