"""Tests for the meme token hunter workflow."""

import json
from datetime import datetime

from crypto_monitor.config import HunterConfig
from crypto_monitor.hunter import MemeTokenHunter
from crypto_monitor.models import Chain, RiskLevel

NOW = 1_700_000_000_000
HOUR_MS = 60 * 60 * 1000
SOL_ADDRESS = "7xKXtg2CW87d97TXJSDpbD5jBkheTqA83TZRuJosgAsU"
EVM_ADDRESS = "0xABCDEF0123456789ABCDEF0123456789ABCDEF01"

FINDINGS = (
    f"🔥 Hot Meme Coin Detected!\n🔗 CA: `{SOL_ADDRESS}`\n⛓️ Chain: Solana\n"
    "• Risk level: warning, rug pull reports\n"
    "---\n"
    f"🔥 Hot Meme Coin Detected!\n🔗 CA: `{EVM_ADDRESS}`\n⛓️ Chain: Ethereum\n"
)


def _seen_file(tmp_path):
    return tmp_path / "meme-hunter" / "seen-tokens.json"


class TestHunt:
    def test_prompt_uses_config(self, tmp_path):
        config = HunterConfig(
            search_keywords=["frog coin CA"],
            influencer_accounts=["@frogking"],
            min_mentions_per_hour=120,
            chains=["SOL", "BASE"],
        )
        hunter = MemeTokenHunter(config, tmp_path)

        result = hunter.hunt(now=datetime(2025, 1, 1, 12, 0, 0))

        assert '1. "frog coin CA"' in result.search_prompt
        assert "• @frogking" in result.search_prompt
        assert "mentions >120x/hour" in result.search_prompt
        assert "Solana/Base" in result.search_prompt
        assert "2025-01-01T12:00:00" in result.search_prompt
        assert result.timestamp == int(datetime(2025, 1, 1, 12, 0, 0).timestamp() * 1000)


class TestProcessFindings:
    def test_new_tokens_are_reported_and_persisted(self, tmp_path):
        hunter = MemeTokenHunter(HunterConfig(), tmp_path)
        hunter.init(now=NOW)

        findings = hunter.process_findings(FINDINGS, now=NOW)

        by_address = {f.address: f for f in findings}
        assert by_address[SOL_ADDRESS].chain is Chain.SOL
        assert by_address[SOL_ADDRESS].risk is RiskLevel.CRITICAL
        assert by_address[EVM_ADDRESS].chain is Chain.ETH
        saved = json.loads(_seen_file(tmp_path).read_text(encoding="utf-8"))
        assert saved == {f"{SOL_ADDRESS}_SOL": NOW, f"{EVM_ADDRESS}_ETH": NOW}

    def test_seen_tokens_are_skipped_within_cooldown(self, tmp_path):
        first = MemeTokenHunter(HunterConfig(), tmp_path)
        first.init(now=NOW)
        first.process_findings(FINDINGS, now=NOW)

        second = MemeTokenHunter(HunterConfig(), tmp_path)
        second.init(now=NOW + HOUR_MS)

        assert second.process_findings(FINDINGS, now=NOW + HOUR_MS) == []

    def test_tokens_reappear_after_cooldown(self, tmp_path):
        first = MemeTokenHunter(HunterConfig(alert_cooldown_hours=24), tmp_path)
        first.init(now=NOW)
        first.process_findings(FINDINGS, now=NOW)

        later = NOW + 25 * HOUR_MS
        second = MemeTokenHunter(HunterConfig(alert_cooldown_hours=24), tmp_path)
        second.init(now=later)

        assert len(second.process_findings(FINDINGS, now=later)) == 2

    def test_untracked_chains_are_skipped(self, tmp_path):
        hunter = MemeTokenHunter(HunterConfig(chains=["SOL"]), tmp_path)
        hunter.init(now=NOW)

        findings = hunter.process_findings(FINDINGS, now=NOW)

        assert [f.address for f in findings] == [SOL_ADDRESS]

    def test_nothing_found_does_not_write_store(self, tmp_path):
        hunter = MemeTokenHunter(HunterConfig(), tmp_path)
        hunter.init(now=NOW)

        assert hunter.process_findings("No new hot meme coins detected in this scan.", now=NOW) == []
        assert not _seen_file(tmp_path).exists()

    def test_mark_as_seen(self, tmp_path):
        hunter = MemeTokenHunter(HunterConfig(), tmp_path)
        hunter.init(now=NOW)

        hunter.mark_as_seen(SOL_ADDRESS, Chain.SOL, now=NOW)

        assert hunter.store.is_seen(f"{SOL_ADDRESS}_SOL")
        assert _seen_file(tmp_path).exists()


class TestStoreWriteFailure:
    def test_unwritable_data_dir_still_reports_findings(self, tmp_path):
        data_file = tmp_path / "data"
        data_file.write_text("not a directory", encoding="utf-8")
        hunter = MemeTokenHunter(HunterConfig(), data_file)
        hunter.init(now=NOW)

        findings = hunter.process_findings(FINDINGS, now=NOW)

        assert {f.address for f in findings} == {SOL_ADDRESS, EVM_ADDRESS}
        assert hunter.store.is_seen(f"{SOL_ADDRESS}_SOL")

    def test_mark_as_seen_survives_write_failure(self, tmp_path):
        data_file = tmp_path / "data"
        data_file.write_text("not a directory", encoding="utf-8")
        hunter = MemeTokenHunter(HunterConfig(), data_file)

        hunter.mark_as_seen(EVM_ADDRESS, Chain.ETH, now=NOW)

        assert hunter.store.is_seen(f"{EVM_ADDRESS}_ETH")
