import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

# 统一项目输出目录
OUTPUT_DIR = Path("data")
DEFAULT_CONFIG_PATH = Path("config.json")

# 交易所基础 URL（现货接口）
BINANCE_BASE_URL = "https://api.binance.com"

BINANCE_MAX_CONCURRENT_REQUESTS = 10
BINANCE_MIN_REQUEST_INTERVAL = 0.05

DEFAULT_TIMEFRAMES = ["5m", "15m", "1h", "4h"]
DEFAULT_CHAINS = ["SOL", "ETH", "BASE", "BSC"]
DEFAULT_SEARCH_KEYWORDS = [
    "meme coin mooning right now CA",
    "just launched contract address",
    "100x potential meme",
]
DEFAULT_INFLUENCERS = ["@ansem", "@blknoiz06", "@Flowslikeosmo"]


@dataclass
class PriceAlerts:
    sharp_change_percent: float = 2.0
    volume_spike_multiplier: float = 3.0


@dataclass
class MonitorConfig:
    """BTC 监控配置。"""

    binance_api: str = BINANCE_BASE_URL
    symbol: str = "BTCUSDT"
    kline_timeframes: List[str] = field(default_factory=lambda: list(DEFAULT_TIMEFRAMES))
    kline_limit: int = 100
    price_alerts: PriceAlerts = field(default_factory=PriceAlerts)
    # 0 表示保留全部快照
    snapshot_keep: int = 0

    def __post_init__(self) -> None:
        if not self.kline_timeframes:
            raise ValueError("kline_timeframes must contain at least one timeframe")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MonitorConfig":
        defaults = cls()
        alerts = data.get("price_alerts") or {}
        if not isinstance(alerts, dict):
            alerts = {}
        return cls(
            binance_api=str(data.get("binance_api", defaults.binance_api)).rstrip("/"),
            symbol=str(data.get("symbol", defaults.symbol)).upper(),
            kline_timeframes=_str_list(data.get("kline_timeframes"), defaults.kline_timeframes),
            kline_limit=_number(data.get("kline_limit"), defaults.kline_limit, int),
            price_alerts=PriceAlerts(
                sharp_change_percent=_number(
                    alerts.get("sharp_change_percent"),
                    defaults.price_alerts.sharp_change_percent,
                    float,
                ),
                volume_spike_multiplier=_number(
                    alerts.get("volume_spike_multiplier"),
                    defaults.price_alerts.volume_spike_multiplier,
                    float,
                ),
            ),
            snapshot_keep=_number(data.get("snapshot_keep"), defaults.snapshot_keep, int),
        )


@dataclass
class HunterConfig:
    """Meme 代币猎手配置。"""

    check_interval_minutes: int = 10
    min_mentions_per_hour: int = 50
    chains: List[str] = field(default_factory=lambda: list(DEFAULT_CHAINS))
    search_keywords: List[str] = field(default_factory=lambda: list(DEFAULT_SEARCH_KEYWORDS))
    influencer_accounts: List[str] = field(default_factory=lambda: list(DEFAULT_INFLUENCERS))
    alert_cooldown_hours: float = 24.0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HunterConfig":
        defaults = cls()
        return cls(
            check_interval_minutes=_number(
                data.get("check_interval_minutes"), defaults.check_interval_minutes, int
            ),
            min_mentions_per_hour=_number(
                data.get("min_mentions_per_hour"), defaults.min_mentions_per_hour, int
            ),
            chains=[c.upper() for c in _str_list(data.get("chains"), defaults.chains)],
            search_keywords=_str_list(data.get("search_keywords"), defaults.search_keywords),
            influencer_accounts=_str_list(
                data.get("influencer_accounts"), defaults.influencer_accounts
            ),
            alert_cooldown_hours=_number(
                data.get("alert_cooldown_hours"), defaults.alert_cooldown_hours, float
            ),
        )


def load_config_data(path: Optional[Path] = None) -> Dict[str, Any]:
    """读取 JSON 配置文件；文件缺失或格式错误时返回空字典（即全部使用默认值）。"""
    config_path = Path(path) if path else DEFAULT_CONFIG_PATH
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        logger.warning("Config file %s not found, using defaults", config_path)
        return {}
    except (OSError, ValueError) as exc:
        logger.warning("Config file %s unreadable (%s), using defaults", config_path, exc)
        return {}

    if not isinstance(data, dict):
        logger.warning("Config file %s is not a JSON object, using defaults", config_path)
        return {}
    return data


def load_monitor_config(path: Optional[Path] = None) -> MonitorConfig:
    return MonitorConfig.from_dict(load_config_data(path))


def load_hunter_config(path: Optional[Path] = None) -> HunterConfig:
    return HunterConfig.from_dict(load_config_data(path))


def _str_list(value: Any, default: List[str]) -> List[str]:
    if not isinstance(value, list):
        return list(default)
    items = [str(item).strip() for item in value if str(item).strip()]
    return items or list(default)


def _number(value: Any, default, cast):
    if value is None or isinstance(value, bool):
        return default
    try:
        return cast(value)
    except (TypeError, ValueError):
        logger.warning("Invalid config value %r, using default %r", value, default)
        return default
