import json
import logging
import time
from pathlib import Path
from typing import Any, Dict, Optional

from .config import OUTPUT_DIR

logger = logging.getLogger(__name__)

MONITOR_DIR_NAME = "btc-monitor"
HUNTER_DIR_NAME = "meme-hunter"
SEEN_TOKENS_FILE = "seen-tokens.json"


def now_ms() -> int:
    return int(time.time() * 1000)


def build_snapshot_path(timestamp_ms: int, base_dir: Optional[Path] = None) -> Path:
    """
    构建快照文件路径，格式：data/btc-monitor/{timestamp}.json

    文件名使用毫秒时间戳，按文件名排序即按时间排序。
    """
    folder = Path(base_dir or OUTPUT_DIR) / MONITOR_DIR_NAME
    return folder / f"{timestamp_ms}.json"


def seen_tokens_path(base_dir: Optional[Path] = None) -> Path:
    return Path(base_dir or OUTPUT_DIR) / HUNTER_DIR_NAME / SEEN_TOKENS_FILE


def save_json(data: Any, output_path: Path) -> None:
    """保存数据为 JSON 文件，目录不存在时自动创建。"""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")


def cleanup_old_files(directory: Path, keep: int) -> int:
    """只保留目录下最新的 keep 个 JSON 文件，keep <= 0 时不做任何清理。返回删除数量。"""
    if keep <= 0 or not directory.exists():
        return 0

    json_files = sorted(directory.glob("*.json"), key=lambda p: p.stem)
    if len(json_files) <= keep:
        return 0

    removed = 0
    for json_file in json_files[:-keep]:
        try:
            json_file.unlink()
            removed += 1
        except OSError as exc:  # pragma: no cover - best effort cleanup
            logger.warning("删除旧文件 %s 失败：%s", json_file, exc)
    return removed


class SeenTokenStore:
    """
    已提醒过的代币记录：{"{CA}_{链}": 最后出现的毫秒时间戳}。

    生命周期限定在一次进程运行内：load() 读取并按冷却时间清理过期条目，
    mark_seen() 更新内存，save() 写回磁盘。
    """

    def __init__(self, path: Path, cooldown_hours: float = 24) -> None:
        self.path = Path(path)
        self.cooldown_ms = int(cooldown_hours * 60 * 60 * 1000)
        self._entries: Dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    @property
    def entries(self) -> Dict[str, int]:
        return dict(self._entries)

    def load(self, now: Optional[int] = None) -> int:
        """读取记录文件并删除超过冷却时间的条目，返回删除的条目数。"""
        self._entries = {}
        if not self.path.exists():
            return 0

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            if not isinstance(raw, dict):
                raise ValueError(f"期望 JSON 对象，得到 {type(raw).__name__}")
            entries = {str(key): int(value) for key, value in raw.items()}
        except (OSError, TypeError, ValueError) as exc:
            logger.warning("Seen-token file %s is unreadable (%s), starting empty", self.path, exc)
            return 0

        current = now_ms() if now is None else now
        self._entries = {
            key: ts for key, ts in entries.items() if current - ts <= self.cooldown_ms
        }
        return len(entries) - len(self._entries)

    def is_seen(self, key: str) -> bool:
        return key in self._entries

    def mark_seen(self, key: str, now: Optional[int] = None) -> None:
        self._entries[key] = now_ms() if now is None else now

    def save(self) -> None:
        save_json(self._entries, self.path)
