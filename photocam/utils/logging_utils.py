"""Logging utilities for the photogrammetric camera toolkit."""

import logging
from pathlib import Path
import sys
from typing import Optional


def setup_logging(debug_mode: bool = False, log_file: Optional[str] = None) -> None:
    """ロギングを設定する

    Args:
        debug_mode: デバッグモードの場合True
        log_file: ログファイルのパス（指定しない場合はコンソールのみ）
    """
    log_level = logging.DEBUG if debug_mode else logging.INFO
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # 既存のハンドラをクリア
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    # コンソール出力
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter(log_format))
    root_logger.addHandler(console_handler)

    # ファイル出力
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(exist_ok=True, parents=True)

        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(log_level)
        file_handler.setFormatter(logging.Formatter(log_format))
        root_logger.addHandler(file_handler)

    root_logger.setLevel(log_level)
