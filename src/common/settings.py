"""
どこで: `common.settings`
何を: フレーム計算の閾値・実行経路の切替を型付きで一元管理し、import 時に環境変数から読み込む。
なぜ: `os.getenv` の散在を解消し、既定値/型の一貫性とテスト容易性（`reload_from_env`）を高めるため。

環境変数:
- `PFR_SINGULAR_EPS`    : 2x2 線形部の |det| がこの値以下なら特異とみなす（既定 1e-12, 負値は 0 に丸め）
- `PFR_USE_NUMBA`       : 一括座標変換で numba カーネルを使う（既定 1）
- `PFR_VALIDATE_AFFINE` : 行列設置時に有限性（nan/inf を含まないこと）を検証する（既定 1。最下行 [0, 0, 1] は常に検証）
- `PFR_LOG_LEVEL`       : `setup_default_logging()` の既定レベル（既定 INFO）
"""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_bool, env_float, env_str

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass
class _Settings:
    # 数値
    SINGULAR_EPS: float = 1e-12
    VALIDATE_AFFINE: bool = True

    # 実行経路
    USE_NUMBA: bool = True

    # Misc
    LOG_LEVEL: str = "INFO"


_settings = _Settings()


def reload_from_env() -> None:
    """環境変数から設定を再読込。

    - 不正値は既定値へフォールバックする（例外は投げない）。
    - `SINGULAR_EPS` は下限 0 に丸める。
    """
    _settings.SINGULAR_EPS = env_float("PFR_SINGULAR_EPS", 1e-12, min_value=0.0)
    _settings.VALIDATE_AFFINE = env_bool("PFR_VALIDATE_AFFINE", True)
    _settings.USE_NUMBA = env_bool("PFR_USE_NUMBA", True)
    _settings.LOG_LEVEL = env_str("PFR_LOG_LEVEL", "INFO").upper()
    if _settings.LOG_LEVEL not in _LOG_LEVELS:
        _settings.LOG_LEVEL = "INFO"


def get() -> _Settings:
    """現在の設定スナップショットを返す。"""
    return _settings


# 初期ロード
reload_from_env()


__all__ = ["get", "reload_from_env", "_Settings"]
