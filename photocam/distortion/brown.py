"""Conrad-Brown および Ebner の多項式歪みモデル。

x 出力と y 出力で係数の割り当てが非対称であるのは
キャリブレーション時の係数規約に従うためであり、意図的なものです。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np

from photocam.distortion.base import DistortionModel, DistortionType, frozen_array


@dataclass(frozen=True, eq=False)
class BrownDistortion(DistortionModel):
    """Conrad-Brown 歪みモデル

    Attributes:
        F: 焦点距離 [pixel]（補正項 f の正規化に使用）
        P: 係数 P[0..13]（x は P0..P6、y は P7..P11、P12/P13 は両軸共通の f）
    """

    type = DistortionType.BROWN

    F: float
    P: np.ndarray

    def __post_init__(self) -> None:
        object.__setattr__(self, "F", float(self.F))
        object.__setattr__(self, "P", frozen_array(self.P, "P", length=14))

    def _distort(self, x: np.ndarray, y: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        x2 = x * x
        y2 = y * y
        xy = x * y
        xy2 = x * y2
        yx2 = y * x2
        x2y2 = x2 * y2
        P = self.P
        f = (P[12] * x2y2 / self.F) + (P[13] * (x2 + y2))
        out_x = x + (P[0] * x + P[1] * y)
        out_x = out_x + (P[2] * xy + P[3] * y2 + P[4] * yx2 + P[5] * xy2 + P[6] * x2y2 + f * x)
        out_y = y + (P[7] * xy + P[8] * x2 + P[9] * yx2 + P[10] * xy2 + P[11] * x2y2 + f * y)
        return out_x, out_y

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type.value, "F": self.F, "P": self.P.tolist()}


@dataclass(frozen=True, eq=False)
class EbnerDistortion(DistortionModel):
    """Ebner 歪みモデル

    x^2, y^2 をバイアス B2 で中心化した直交多項式で補正する。
    P0, P1 は両軸で回転的に（符号を入れ替えて）作用する。

    Attributes:
        B2: 基底スケール（B^2 / 1.5）
        P: 係数 P[0..11]
    """

    type = DistortionType.EBNER

    B2: float
    P: np.ndarray

    def __post_init__(self) -> None:
        object.__setattr__(self, "B2", float(self.B2))
        object.__setattr__(self, "P", frozen_array(self.P, "P", length=12))

    @classmethod
    def from_base(cls, base: float, P: Any) -> EbnerDistortion:
        """基底長 B から作成（B2 = B^2 / 1.5）"""
        return cls(B2=base * base / 1.5, P=P)

    def _distort(self, x: np.ndarray, y: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        x2 = x * x - self.B2
        y2 = y * y - self.B2
        xy = x * y
        xy2 = x * y2
        yx2 = y * x2
        x2y2 = x2 * y2
        P = self.P
        out_x = x + (
            P[0] * x + P[1] * y + P[3] * xy - 2 * P[2] * x2 + P[4] * y2 + P[6] * xy2 + P[8] * yx2 + P[10] * x2y2
        )
        out_y = y + (
            P[1] * x - P[0] * y + P[2] * xy - 2 * P[3] * y2 + P[5] * x2 + P[9] * xy2 + P[7] * yx2 + P[11] * x2y2
        )
        return out_x, out_y

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type.value, "B2": self.B2, "P": self.P.tolist()}
