"""
BTC 综合分析脚本。

先运行一轮市场监控，再把技术指标整理为提示词，交给具备联网搜索能力的
AI 助手补充新闻、情绪与宏观面分析。

AI助手说明：提示词位于 --- ANALYSIS_PROMPT --- 与 --- END_PROMPT --- 之间。
"""

import argparse
import logging
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from crypto_monitor.config import DEFAULT_CONFIG_PATH, OUTPUT_DIR, load_monitor_config
from crypto_monitor.monitor import BTCAnalyzer, BTCMonitor


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="生成 BTC 综合分析提示词（技术面 + 情绪面 + 宏观面）")
    parser.add_argument("--config", default=str(DEFAULT_CONFIG_PATH), help="配置文件路径，默认 config.json")
    parser.add_argument("--data-dir", default=str(OUTPUT_DIR), help="快照输出目录，默认 data")
    parser.add_argument("--verbose", action="store_true", help="输出调试日志")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    monitor = BTCMonitor(load_monitor_config(Path(args.config)), Path(args.data_dir))
    result = BTCAnalyzer(monitor).analyze()
    if result is None:
        print("获取市场数据失败，无法生成分析提示词。", file=sys.stderr)
        sys.exit(1)

    print(result.market.report)
    print("\n--- ANALYSIS_PROMPT ---")
    print(result.prompt)
    print("--- END_PROMPT ---")

    print("\n💡 To complete the analysis:")
    print("1. Search for latest crypto market news")
    print("2. Search for macro economic updates (Fed, inflation, rates)")
    print("3. Combine technical + sentiment + macro analysis")
    print("4. Provide short-term (1-24h) and medium-term (1-7d) outlook\n")


if __name__ == "__main__":
    main()
