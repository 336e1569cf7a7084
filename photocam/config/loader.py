"""キャリブレーション設定ファイルの読み込みモジュール。"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from photocam.camera.parameters import CameraParameters

logger = logging.getLogger(__name__)

CAMERA_SECTION = "camera"
SUPPORTED_SUFFIXES = {".yaml": "YAML", ".yml": "YAML", ".json": "JSON"}


def load_config_file(path: str | Path) -> dict[str, Any]:
    """YAML/JSON形式のキャリブレーションファイルを辞書として読み込む。

    ``camera`` セクションがある場合は辞書形式であることも検証する。

    Args:
        path: 設定ファイルのパス

    Returns:
        設定辞書（空ファイルなら空の辞書）

    Raises:
        FileNotFoundError: ファイルが存在しない場合
        ValueError: 形式が不正、または未対応の拡張子の場合
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"キャリブレーションファイルが見つかりません: {config_path}")

    suffix = config_path.suffix.lower()
    file_format = SUPPORTED_SUFFIXES.get(suffix)
    if file_format is None:
        raise ValueError(f"サポートされない設定形式です: {suffix}")

    with config_path.open(encoding="utf-8") as f:
        data = yaml.safe_load(f) if file_format == "YAML" else json.load(f)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{file_format}設定は辞書形式である必要があります")
    if CAMERA_SECTION in data and not isinstance(data[CAMERA_SECTION], dict):
        raise ValueError(f"{CAMERA_SECTION} セクションは辞書形式である必要があります")

    logger.debug(f"{file_format}設定を読み込みました: {config_path} (keys={list(data)})")
    return data


def load_camera_parameters(path: str | Path) -> CameraParameters:
    """設定ファイルからカメラパラメータを読み込む。

    ``camera`` セクションがあればそれを、なければファイル全体を
    カメラパラメータの辞書として扱う。

    Args:
        path: 設定ファイルのパス

    Returns:
        CameraParameters インスタンス
    """
    config = load_config_file(path)
    section = config.get(CAMERA_SECTION, config)

    logger.info(f"キャリブレーションを読み込みました: {path}")
    return CameraParameters.from_dict(section)
