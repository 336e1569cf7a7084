#!/usr/bin/env python
"""
写真測量カメラ - メインエントリーポイント

キャリブレーションファイル（YAML/JSON）からカメラと歪みモデルを構築し、
3D点を歪み適用後のピクセル座標・テクスチャ座標・NDC に投影します。
"""

import sys

from photocam.cli import main

if __name__ == "__main__":
    sys.exit(main())
