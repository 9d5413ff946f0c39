"""
どこで: `common` パッケージ。
何を: 設定（settings/env）・ロギング初期化・型エイリアスなどの最内層ユーティリティ。
なぜ: `frames`/`api` から再利用する共通基盤を分離し、依存の向きを単純化するため。
"""

from .logging import setup_default_logging

__all__ = [
    "setup_default_logging",
]
