"""4x4 同次変換行列のユーティリティ。

行列は行優先（m[row, col]）の numpy 配列として扱い、
点は列ベクトルとして左から行列を掛ける。
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from collections.abc import Sequence


def make_scale(x: float, y: float, z: float = 1.0) -> np.ndarray:
    """拡大縮小行列を返す"""
    return np.diag([x, y, z, 1.0]).astype(np.float64)


def make_translation(x: float, y: float, z: float = 0.0) -> np.ndarray:
    """平行移動行列を返す"""
    matrix = np.eye(4, dtype=np.float64)
    matrix[:3, 3] = (x, y, z)
    return matrix


def compose_matrix(position: Sequence[float] | np.ndarray, rotation_matrix: np.ndarray) -> np.ndarray:
    """回転と平行移動から剛体変換行列を構築する。

    Args:
        position: 平行移動 (3,)
        rotation_matrix: 回転行列 (3, 3)

    Returns:
        4x4 変換行列
    """
    matrix = np.eye(4, dtype=np.float64)
    matrix[:3, :3] = rotation_matrix
    matrix[:3, 3] = np.asarray(position, dtype=np.float64).reshape(3)
    return matrix


def apply_matrix4(matrix: np.ndarray, points: Sequence[float] | np.ndarray) -> np.ndarray:
    """3D点に4x4行列を適用し、同次座標の w で除算する。

    Args:
        matrix: 4x4 変換行列
        points: 3D点 (3,) または (N, 3)

    Returns:
        変換後の点（入力と同じ形状の新しい配列）
    """
    pts = np.asarray(points, dtype=np.float64)
    if pts.shape[-1] != 3:
        raise ValueError(f"points must have 3 components, got shape {pts.shape}")

    flat = pts.reshape(-1, 3)
    homogeneous = np.hstack([flat, np.ones((flat.shape[0], 1), dtype=np.float64)])
    transformed = homogeneous @ matrix.T
    result = transformed[:, :3] / transformed[:, 3:4]
    return result.reshape(pts.shape)
