"""
Meme 代币猎手。

本身不调用 Twitter 接口：hunt() 只生成搜索提示词，由外部代理执行搜索；
代理返回的文本再交给 process_findings() 提取合约地址并按冷却时间去重。
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from crypto_monitor.config import OUTPUT_DIR, HunterConfig
from crypto_monitor.models import Chain, TokenFinding
from crypto_monitor.reports import generate_search_prompt
from crypto_monitor.storage import SeenTokenStore, now_ms, seen_tokens_path
from crypto_monitor.token_scanner import scan_text

logger = logging.getLogger(__name__)


@dataclass
class HuntResult:
    search_prompt: str
    timestamp: int


class MemeTokenHunter:
    def __init__(
        self,
        config: Optional[HunterConfig] = None,
        data_dir: Optional[Path] = None,
        store: Optional[SeenTokenStore] = None,
    ) -> None:
        self.config = config or HunterConfig()
        self.store = store or SeenTokenStore(
            seen_tokens_path(data_dir or OUTPUT_DIR),
            cooldown_hours=self.config.alert_cooldown_hours,
        )

    def init(self, now: Optional[int] = None) -> None:
        expired = self.store.load(now)
        if expired:
            logger.info("Dropped %d expired token(s) from %s", expired, self.store.path)
        logger.info("Tracking %d tokens (cooldown active)", len(self.store))

    def hunt(self, now: Optional[datetime] = None) -> HuntResult:
        now = now or datetime.now()
        prompt = generate_search_prompt(self.config, now)
        return HuntResult(search_prompt=prompt, timestamp=int(now.timestamp() * 1000))

    def process_findings(self, text: str, now: Optional[int] = None) -> List[TokenFinding]:
        """返回本次新出现的代币，并将其记为已提醒；有新增时写回记录文件。"""
        allowed = set(self.config.chains)
        timestamp = now_ms() if now is None else now

        new_findings: List[TokenFinding] = []
        for finding in scan_text(text):
            if finding.chain is not Chain.UNKNOWN and finding.chain.value not in allowed:
                logger.debug("Skipping %s on untracked chain %s", finding.address, finding.chain.value)
                continue
            if self.store.is_seen(finding.seen_key):
                logger.debug("Skipping %s, still in cooldown", finding.seen_key)
                continue
            self.store.mark_seen(finding.seen_key, timestamp)
            new_findings.append(finding)

        if new_findings:
            self._save_store()
        return new_findings

    def mark_as_seen(self, address: str, chain: Chain, now: Optional[int] = None) -> None:
        self.store.mark_seen(f"{address}_{chain.value}", now)
        self._save_store()

    def _save_store(self) -> None:
        # 写入失败时本轮结果照常返回，下次运行可能重复提醒
        try:
            self.store.save()
        except OSError as exc:
            logger.error("Failed to save seen tokens to %s: %s", self.store.path, exc)
