"""
crypto_monitor
~~~~~~~~~~~~~~

核心业务包：
- Binance 行情与 K 线抓取
- 技术指标计算与多周期信号汇总
- Meme 代币合约地址识别、链与风险判断
- 本地 JSON 快照与已提醒代币记录

入口脚本位于 scripts/ 目录：
- btc_monitor.py
- btc_analyzer.py
- meme_hunter.py
"""
