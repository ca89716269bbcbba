"""
Meme 代币猎手脚本。

两种用法：
- 不带参数：生成 Twitter 热门 Meme 币搜索提示词，交给 AI 助手执行搜索
- --findings FILE：读取 AI 助手返回的结果文本（- 表示标准输入），
  提取合约地址、判断链与风险，过滤冷却期内已提醒过的代币

已提醒记录保存在 data/meme-hunter/seen-tokens.json。
"""

import argparse
import logging
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from crypto_monitor.config import DEFAULT_CONFIG_PATH, OUTPUT_DIR, load_hunter_config
from crypto_monitor.hunter import MemeTokenHunter
from crypto_monitor.reports import format_findings


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Twitter 热门 Meme 代币探测（生成搜索提示词 / 处理搜索结果）")
    parser.add_argument("--config", default=str(DEFAULT_CONFIG_PATH), help="配置文件路径，默认 config.json")
    parser.add_argument("--data-dir", default=str(OUTPUT_DIR), help="数据目录，默认 data")
    parser.add_argument("--findings", help="AI 助手返回的结果文本文件路径，- 表示从标准输入读取")
    parser.add_argument("--verbose", action="store_true", help="输出调试日志")
    return parser.parse_args()


def read_findings(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def main() -> None:
    args = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    config = load_hunter_config(Path(args.config))
    hunter = MemeTokenHunter(config, Path(args.data_dir))
    hunter.init()

    if args.findings:
        try:
            text = read_findings(args.findings)
        except OSError as exc:
            print(f"读取结果文件失败：{exc}", file=sys.stderr)
            sys.exit(1)
        print(format_findings(hunter.process_findings(text)))
        return

    result = hunter.hunt()
    print("--- SEARCH_PROMPT ---")
    print(result.search_prompt)
    print("--- END_PROMPT ---")

    print("\n💡 To complete the hunt:")
    print("1. Execute web searches with the provided keywords")
    print("2. Track KOL activity")
    print("3. Extract token info (name, CA, chain, trend reason)")
    print("4. Assess risk level")
    print("5. Report findings with sources")
    print(f"6. Feed the reply back with --findings; next scan in {config.check_interval_minutes} minutes\n")


if __name__ == "__main__":
    main()
