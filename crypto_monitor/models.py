from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict


class Trend(str, Enum):
    BULLISH = "bullish"
    BEARISH = "bearish"
    SIDEWAYS = "sideways"
    UNKNOWN = "unknown"


class Chain(str, Enum):
    SOL = "SOL"
    BASE = "BASE"
    BSC = "BSC"
    ETH = "ETH"
    UNKNOWN = "UNKNOWN"


class RiskLevel(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


@dataclass(frozen=True)
class Candle:
    """单根 K 线（OHLCV），timestamp 为毫秒时间戳。"""

    timestamp: int
    open: float
    high: float
    low: float
    close: float
    volume: float


@dataclass(frozen=True)
class PriceData:
    """24 小时行情统计。"""

    price: float
    change_24h: float
    volume_24h: float
    high_24h: float
    low_24h: float
    trades: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class IndicatorResult:
    """单个周期的指标计算结果。"""

    trend: Trend
    strength: float
    short_ma: float = 0.0
    medium_ma: float = 0.0
    price_change_percent: float = 0.0
    rsi: float = 50.0
    volume_spike: bool = False
    current_volume: float = 0.0
    avg_volume: float = 0.0

    @classmethod
    def unknown(cls) -> "IndicatorResult":
        return cls(trend=Trend.UNKNOWN, strength=0.0, rsi=50.0)

    @property
    def volume_ratio(self) -> float:
        return self.current_volume / self.avg_volume if self.avg_volume > 0 else 0.0

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["trend"] = self.trend.value
        return data


@dataclass(frozen=True)
class TokenFinding:
    address: str
    chain: Chain
    risk: RiskLevel

    @property
    def seen_key(self) -> str:
        return f"{self.address}_{self.chain.value}"
