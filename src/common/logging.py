"""
どこで: `common.logging`
何を: スクリプト/チュートリアル向けにロギングの最小構成を 1 度だけ適用するヘルパ。
なぜ: ライブラリ本体はハンドラを持たず `logging.getLogger(__name__)` に出力するだけに留め、
      構成は呼び出し側（エントリポイント）に委ねるため。
"""

from __future__ import annotations

import logging

from . import settings as _settings


def setup_default_logging(level: int | str | None = None) -> None:
    """最小限のロギング設定を 1 度だけ適用する。

    - ルートロガーにハンドラが既にあれば何もしない（no-op）
    - `level` 省略時は `settings.LOG_LEVEL`（`PFR_LOG_LEVEL`）を使用
    """
    if level is None:
        level = _settings.get().LOG_LEVEL
    if isinstance(level, str):
        lvl = getattr(logging, level.upper(), logging.INFO)
    else:
        lvl = int(level)

    root = logging.getLogger()
    if root.handlers:
        # Assume the app has configured logging
        return
    logging.basicConfig(
        level=lvl,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


__all__ = ["setup_default_logging"]
