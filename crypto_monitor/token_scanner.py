"""
从外部代理返回的非结构化文本中识别合约地址（CA）、所属链以及风险等级。

全部为无状态的纯字符串函数。链识别是简单的关键词启发式，
"sol"/"eth" 这类子串可能命中无关单词，这里保持原有优先级不做修正。
"""
import re
from typing import List

from crypto_monitor.models import Chain, RiskLevel, TokenFinding

# Ethereum / BSC / Base (0x...)
EVM_ADDRESS_PATTERN = re.compile(r"\b0x[a-fA-F0-9]{40}\b")
# Solana（base58，不含 0 O I l，通常 32~44 位）
BASE58_ADDRESS_PATTERN = re.compile(r"\b[1-9A-HJ-NP-Za-km-z]{32,44}\b")
# 段落边界："---" 分隔线，或每个代币块开头的 "Hot Meme Coin Detected" 标题行
SECTION_SEPARATOR = re.compile(
    r"^\s*-{3,}\s*$|^(?=.*Hot Meme Coin Detected)", re.MULTILINE | re.IGNORECASE
)

HIGH_RISK_KEYWORDS = ["rug pull", "scam", "honeypot", "beware", "warning", "avoid"]
POSITIVE_KEYWORDS = ["audit", "safe", "verified", "legit", "solid team", "lp locked"]


def extract_contract_addresses(text: str) -> List[str]:
    """提取候选合约地址，去重后按首次出现顺序返回。"""
    found = {}
    for pattern in (EVM_ADDRESS_PATTERN, BASE58_ADDRESS_PATTERN):
        for match in pattern.findall(text or ""):
            found.setdefault(match, None)
    return list(found)


def detect_chain(text: str, address: str) -> Chain:
    lower_text = (text or "").lower()
    is_evm = address.lower().startswith("0x")

    if "solana" in lower_text or "sol" in lower_text or (not is_evm and len(address) > 40):
        return Chain.SOL
    if "base" in lower_text:
        return Chain.BASE
    if "bsc" in lower_text or "binance smart chain" in lower_text:
        return Chain.BSC
    if "ethereum" in lower_text or "eth" in lower_text or is_evm:
        return Chain.ETH
    return Chain.UNKNOWN


def risk_score(text: str) -> int:
    lower_text = (text or "").lower()
    score = 0
    for keyword in HIGH_RISK_KEYWORDS:
        if keyword in lower_text:
            score += 2
    for keyword in POSITIVE_KEYWORDS:
        if keyword in lower_text:
            score -= 1
    return score


def assess_risk(text: str) -> RiskLevel:
    score = risk_score(text)
    if score >= 4:
        return RiskLevel.CRITICAL
    if score >= 2:
        return RiskLevel.HIGH
    if score >= 0:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def scan_text(text: str) -> List[TokenFinding]:
    """
    逐段扫描文本：按 "---" 分隔线或代币标题行切分，每一段作为上下文判断链与风险，
    同一地址只保留第一次出现时的结果。
    """
    findings: List[TokenFinding] = []
    seen = set()
    for block in SECTION_SEPARATOR.split(text or ""):
        risk = assess_risk(block)
        for address in extract_contract_addresses(block):
            if address in seen:
                continue
            seen.add(address)
            findings.append(
                TokenFinding(address=address, chain=detect_chain(block, address), risk=risk)
            )
    return findings
