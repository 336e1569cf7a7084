"""写真測量カメラ - コマンドラインエントリーポイント

キャリブレーションファイルからカメラを構築し、
指定した3D点を歪み適用後のピクセル座標・テクスチャ座標・NDC に投影します。
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

from photocam.cli.arguments import parse_arguments
from photocam.config import load_camera_parameters
from photocam.utils import setup_logging

if TYPE_CHECKING:
    from collections.abc import Sequence


def main(argv: Sequence[str] | None = None) -> int:
    """メイン処理"""
    args = parse_arguments(argv)

    setup_logging(args.debug, args.log_file)
    logger = logging.getLogger(__name__)

    try:
        logger.info(f"キャリブレーションファイルを読み込んでいます: {args.config}")
        camera = load_camera_parameters(args.config).build_camera()

        if not args.point:
            logger.warning("投影する点が指定されていません (--point X Y Z)")
            return 0

        transform = {
            "pixel": camera.distort,
            "texture": camera.texture,
            "ndc": camera.project,
        }[args.frame]

        for point, result in zip(args.point, transform(args.point)):
            print(f"{point[0]:.6f} {point[1]:.6f} {point[2]:.6f} -> {result[0]:.6f} {result[1]:.6f} {result[2]:.6f}")

        return 0

    except FileNotFoundError as e:
        logger.error(f"ファイルが見つかりません: {e}")
        return 1
    except ValueError as e:
        logger.error(f"キャリブレーションエラー: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
