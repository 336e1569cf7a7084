"""歪みモデルの基底定義。

全ての歪みモデルはピクセル平面上の2D点を変換する純粋関数
``project(point) -> point`` を提供します。入力は単一点 (k,) または
点群 (N, k) で、先頭2成分 (x, y) のみを変換し残りの成分はそのまま保持します。
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
import logging
import math
from typing import TYPE_CHECKING, Any, ClassVar

import numpy as np

from photocam.utils.polynomial_utils import solve_cubic

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)


class DistortionType(str, Enum):
    """歪みモデルの種別タグ"""

    RADIAL = "radial"
    FRASER = "fraser"
    BROWN = "brown"
    EBNER = "ebner"
    POLYNOM = "polynom"
    FISHEYE = "fisheye"


def frozen_array(values: Sequence[float] | np.ndarray, name: str, length: int | None = None) -> np.ndarray:
    """係数列を読み取り専用の float64 配列に変換する。

    Args:
        values: 係数列
        name: エラーメッセージ用のパラメータ名
        length: 期待する長さ（None なら任意）

    Returns:
        書き込み不可の1次元配列

    Raises:
        ValueError: 長さが一致しない場合
    """
    arr = np.array(values, dtype=np.float64).reshape(-1)
    if length is not None and arr.shape[0] != length:
        raise ValueError(f"{name} must have {length} values, got {arr.shape[0]}")
    arr.flags.writeable = False
    return arr


def radial3_validity_bound(R: Sequence[float] | np.ndarray) -> float:
    """3項放射歪み (r3, r5, r7) が単調である最大二乗半径を返す。

    歪み多項式の導関数 7*R2*x^3 + 5*R1*x^2 + 3*R0*x + 1 (x = r^2) の
    最小の正の根を返す。この半径を超えると歪みが全単射でなくなる可能性がある。

    Args:
        R: 放射歪み係数（不足分は0とみなす）

    Returns:
        最大二乗半径（正の根がなければ math.inf）
    """
    coeffs = list(R[:3]) + [0.0] * (3 - len(R[:3]))
    roots = solve_cubic(7 * coeffs[2], 5 * coeffs[1], 3 * coeffs[0], 1)
    positive = [root for root in roots if root > 0]
    if not positive:
        # 正の根がない: 平面全体で有効
        return math.inf
    bound = min(positive)
    logger.debug(f"Radial validity bound: r2max={bound:.6g}")
    return bound


class DistortionModel(ABC):
    """歪みモデルの基底クラス

    サブクラスは不変（frozen dataclass）で、係数は構築後に変更できない。
    """

    type: ClassVar[DistortionType]

    def project(self, point: Sequence[float] | np.ndarray) -> np.ndarray:
        """点（または点群）に歪みを適用する。

        Args:
            point: 単一点 (k,) または点群 (N, k)、k >= 2

        Returns:
            歪み適用後の点（入力と同じ形状の新しい配列）

        Raises:
            ValueError: 点の成分数が2未満の場合
        """
        points = np.array(point, dtype=np.float64)
        if points.ndim == 0 or points.shape[-1] < 2:
            raise ValueError(f"point must have at least 2 components, got shape {points.shape}")

        flat = points.reshape(-1, points.shape[-1])
        x, y = self._distort(flat[:, 0].copy(), flat[:, 1].copy())
        flat[:, 0] = x
        flat[:, 1] = y
        return flat.reshape(points.shape)

    @abstractmethod
    def _distort(self, x: np.ndarray, y: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        """(x, y) 配列を変換して新しい (x, y) を返す"""

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        """ファクトリで再構築可能なタグ付き辞書に変換"""
