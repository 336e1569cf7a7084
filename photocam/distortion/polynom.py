"""一般2次元多項式歪みモデル。

正規化座標 ((x - C) / S) 上で次数2から degree までの単項式展開を適用します。
次数 d の係数数は l(d) = d * (d + 3) - 4（l(2)=6, l(n)=l(n-1)+2n+2）。
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import math
from typing import TYPE_CHECKING, Any

import numpy as np

from photocam.distortion.base import DistortionModel, DistortionType, frozen_array

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)


def coefficient_count(degree: int) -> int:
    """次数 degree の多項式が持つ係数数 l(d) = d * (d + 3) - 4"""
    return degree * (degree + 3) - 4


def degree_for_length(length: int) -> int:
    """係数数を収める最小の次数を返す（d^2 + 3d - (length + 4) = 0 の正の根の切り上げ）"""
    delta = math.sqrt(25 + 4 * length)
    return math.ceil(0.5 * delta - 1.5)


def truncate_coefficients(coeffs: Sequence[float], degree: int) -> tuple[list[float], int]:
    """末尾のゼロ係数を落として次数を下げる。

    末尾の連続するゼロが十分長ければ、係数ブロックが非ゼロを含む
    最小の次数まで切り詰める。全てゼロの場合は切り詰めない。

    Args:
        coeffs: 係数列（呼び出し元の列は変更しない）
        degree: 現在の次数

    Returns:
        (切り詰め後の係数, 次数)
    """
    params = list(coeffs)
    params.reverse()
    last_nonzero = next((i for i, value in enumerate(params) if value != 0), -1)
    first_zero = len(params) - last_nonzero
    params.reverse()

    for d in range(degree - 1, 0, -1):
        length = coefficient_count(d)
        if first_zero <= length:
            params = params[:length]
            degree = d
    return params, degree


@dataclass(frozen=True, eq=False)
class PolynomDistortion(DistortionModel):
    """多項式歪みモデル

    Attributes:
        C: 正規化中心 [pixel]
        S: 正規化スケール
        R: 多項式係数（次数2ブロックの6係数に続き、次数 d ごとに 2(d+1) 係数）
        degree: 多項式次数（None なら R の長さから推定）
    """

    type = DistortionType.POLYNOM

    C: np.ndarray
    S: float
    R: np.ndarray
    degree: int | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "C", frozen_array(self.C, "C", length=2))
        object.__setattr__(self, "S", float(self.S))

        coeffs = [float(value) for value in np.asarray(self.R, dtype=np.float64).reshape(-1)]
        degree = self.degree
        if not degree:
            degree = degree_for_length(len(coeffs))

        expected = coefficient_count(degree)
        if len(coeffs) > expected:
            raise ValueError(f"Polynom of degree {degree} expects at most {expected} coefficients, got {len(coeffs)}")
        coeffs.extend([0.0] * (expected - len(coeffs)))

        truncated, reduced = truncate_coefficients(coeffs, degree)
        if reduced != degree:
            logger.debug(f"Polynom degree reduced from {degree} to {reduced} (trailing zero coefficients)")

        object.__setattr__(self, "R", frozen_array(truncated, "R"))
        object.__setattr__(self, "degree", int(reduced))

    def _distort(self, x: np.ndarray, y: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        # 正規化
        x = (x - self.C[0]) / self.S
        y = (y - self.C[1]) / self.S
        out_x = x.copy()
        out_y = y.copy()
        R = self.R

        # 次数2
        X = [x * x, x * y, y * y]
        if R.shape[0] >= 6:
            out_x += R[0] * x + R[1] * y + R[3] * X[1] - 2 * R[2] * X[0] + R[4] * X[2]
            out_y += R[1] * x - R[0] * y + R[2] * X[1] - 2 * R[3] * X[2] + R[5] * X[0]

        # 次数3以上: X[l] = x^(d-l) * y^l
        i = 6
        d = 3
        while i < R.shape[0]:
            j = i + d + 1
            X.append(y * X[d - 1])
            for m in range(d):
                X[m] = X[m] * x
                out_x += R[i + m] * X[m]
                out_y += R[j + m] * X[m]
            out_x += R[i + d] * X[d]
            out_y += R[j + d] * X[d]
            i = j + d + 1
            d += 1

        # 正規化を戻す
        return self.C[0] + self.S * out_x, self.C[1] + self.S * out_y

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "C": self.C.tolist(),
            "S": self.S,
            "R": self.R.tolist(),
            "degree": self.degree,
        }
