"""Command-line argument parsing."""

from __future__ import annotations

import argparse
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

FRAMES = ("pixel", "texture", "ndc")


def parse_arguments(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """コマンドライン引数をパースする

    Args:
        argv: 引数列（None なら sys.argv を使用）

    Returns:
        パース済み引数
    """
    parser = argparse.ArgumentParser(description="写真測量カメラ - キャリブレーション済みカメラによる3D点の投影")

    parser.add_argument(
        "--config",
        type=str,
        default="camera.yaml",
        help="キャリブレーションファイルのパス（デフォルト: camera.yaml）",
    )

    parser.add_argument(
        "--point",
        type=float,
        nargs=3,
        action="append",
        metavar=("X", "Y", "Z"),
        default=None,
        help="投影するワールド座標の点（複数指定可）",
    )

    parser.add_argument(
        "--frame",
        choices=FRAMES,
        default="pixel",
        help="出力座標系: pixel=歪み適用後のピクセル, texture=テクスチャ座標, ndc=正規化デバイス座標（デフォルト: pixel）",
    )

    parser.add_argument("--debug", action="store_true", help="デバッグモードで実行（詳細ログ）")

    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="ログファイルのパス（指定しない場合はコンソールのみ）",
    )

    return parser.parse_args(argv)
