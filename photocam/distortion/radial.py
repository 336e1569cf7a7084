"""放射歪みモデル（純粋な放射歪み、および Fraser モデル）。"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import cached_property
from typing import Any

import numpy as np

from photocam.distortion.base import (
    DistortionModel,
    DistortionType,
    frozen_array,
    radial3_validity_bound,
)
from photocam.utils.polynomial_utils import evaluate_polynomial


def _radial_factor(R: np.ndarray, r2: np.ndarray) -> np.ndarray:
    """r^2 * P(r^2)（係数がなければ0）"""
    if R.shape[0] == 0:
        return np.zeros_like(r2)
    return r2 * evaluate_polynomial(R, r2)


@dataclass(frozen=True, eq=False)
class RadialDistortion(DistortionModel):
    """放射歪みモデル

    歪み中心 C からの二乗距離 r^2 の多項式による変位:
    x' = x + r^2 * P(r^2) * (x - Cx)

    Attributes:
        C: 歪み中心 [pixel]
        R: 放射歪み係数 (r3, r5, r7, ...)
    """

    type = DistortionType.RADIAL

    C: np.ndarray
    R: np.ndarray

    def __post_init__(self) -> None:
        object.__setattr__(self, "C", frozen_array(self.C, "C", length=2))
        object.__setattr__(self, "R", frozen_array(self.R, "R"))

    @cached_property
    def r2max(self) -> float:
        """歪みが単調である最大二乗半径 [pixel^2]"""
        return radial3_validity_bound(self.R)

    def _distort(self, x: np.ndarray, y: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        dx = x - self.C[0]
        dy = y - self.C[1]
        radial = _radial_factor(self.R, dx * dx + dy * dy)
        return x + radial * dx, y + radial * dy

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type.value, "C": self.C.tolist(), "R": self.R.tolist()}


@dataclass(frozen=True, eq=False)
class FraserDistortion(DistortionModel):
    """Fraser モデル（放射歪み + 接線歪み + アフィン補正）

    アフィン補正項 b0 * x + b1 * y は x 成分にのみ加算される。

    Attributes:
        C: 歪み中心 [pixel]
        R: 放射歪み係数
        P: 接線（偏心）歪み係数 [P1, P2]
        b: アフィン係数 [b1, b2]
    """

    type = DistortionType.FRASER

    C: np.ndarray
    R: np.ndarray
    P: np.ndarray = field(default_factory=lambda: np.zeros(2))
    b: np.ndarray = field(default_factory=lambda: np.zeros(2))

    def __post_init__(self) -> None:
        object.__setattr__(self, "C", frozen_array(self.C, "C", length=2))
        object.__setattr__(self, "R", frozen_array(self.R, "R"))
        object.__setattr__(self, "P", frozen_array(self.P, "P", length=2))
        object.__setattr__(self, "b", frozen_array(self.b, "b", length=2))

    @cached_property
    def r2max(self) -> float:
        """放射成分が単調である最大二乗半径 [pixel^2]"""
        return radial3_validity_bound(self.R)

    def _distort(self, x: np.ndarray, y: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        dx = x - self.C[0]
        dy = y - self.C[1]
        x2 = dx * dx
        y2 = dy * dy
        xy = dx * dy
        r2 = x2 + y2
        radial = _radial_factor(self.R, r2)
        P = self.P
        out_x = x + (radial * dx + P[0] * (2 * x2 + r2) + P[1] * 2 * xy)
        out_y = y + (radial * dy + P[1] * (2 * y2 + r2) + P[0] * 2 * xy)
        out_x = out_x + (self.b[0] * dx + self.b[1] * dy)
        return out_x, out_y

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "C": self.C.tolist(),
            "R": self.R.tolist(),
            "P": self.P.tolist(),
            "b": self.b.tolist(),
        }
