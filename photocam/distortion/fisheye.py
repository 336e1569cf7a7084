"""魚眼レンズ歪みモデル（等距離射影 / 等立体角射影）。"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np

from photocam.distortion.base import DistortionModel, DistortionType, frozen_array
from photocam.utils.polynomial_utils import evaluate_polynomial


@dataclass(frozen=True, eq=False)
class FishEyeDistortion(DistortionModel):
    """魚眼歪みモデル

    焦点距離で正規化した点の入射角 theta = atan(R) を求め、
    等距離（theta）または等立体角（2 sin(theta / 2)）の像高に再配置した後、
    放射・接線・高次多項式の補正を適用する。

    光軸上の点（R == 0）では theta / R の極限値 1 を用いる。

    Attributes:
        C: 歪み中心 [pixel]
        F: 焦点距離 [pixel]
        P: 接線歪み係数（偶数個、2個ずつ r^2 の冪が上がる）
        l: 1次項 [l0, l1] と次数3以上の多項式係数
        R: 放射歪み係数
        equisolid: 等立体角射影なら True
    """

    type = DistortionType.FISHEYE

    C: np.ndarray
    F: float
    P: np.ndarray
    l: np.ndarray  # noqa: E741
    R: np.ndarray
    equisolid: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "C", frozen_array(self.C, "C", length=2))
        object.__setattr__(self, "F", float(self.F))
        object.__setattr__(self, "P", frozen_array(self.P, "P"))
        object.__setattr__(self, "l", frozen_array(self.l, "l"))
        object.__setattr__(self, "R", frozen_array(self.R, "R"))
        object.__setattr__(self, "equisolid", bool(self.equisolid))

        if self.P.shape[0] % 2:
            raise ValueError(f"P must have an even number of values, got {self.P.shape[0]}")
        if self.l.shape[0] < 2:
            raise ValueError(f"l must have at least 2 values, got {self.l.shape[0]}")

    def _distort(self, x: np.ndarray, y: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        # 正規化
        A = (x - self.C[0]) / self.F
        B = (y - self.C[1]) / self.F
        rho = np.sqrt(A * A + B * B)
        theta = np.arctan(rho)
        if self.equisolid:
            theta = 2 * np.sin(0.5 * theta)
        lam = np.divide(theta, rho, out=np.ones_like(rho), where=rho != 0)
        x = lam * A
        y = lam * B
        x2 = x * x
        xy = x * y
        y2 = y * y
        r2 = x2 + y2

        # 放射歪みと1次項
        radial = 1 + r2 * evaluate_polynomial(self.R, r2) if self.R.shape[0] else np.ones_like(r2)
        l = self.l  # noqa: E741
        out_x = y * l[1] + x * (radial + l[0])
        out_y = x * l[1] + y * radial

        # 接線歪み
        P = self.P
        rk = 1.0
        for k in range(0, P.shape[0], 2):
            K = k + 2
            out_x += rk * ((r2 + K * x2) * P[k] + P[k + 1] * K * xy)
            out_y += rk * ((r2 + K * y2) * P[k + 1] + P[k] * K * xy)
            rk = rk * r2

        # 次数3以上（次数2はなし）
        X = [x2, xy, y2]
        j = 2
        n = l.shape[0]

        def take() -> float:
            nonlocal j
            value = l[j] if j < n else 0.0
            j += 1
            return value

        d = 3
        while j < n:
            X.append(y * X[d - 1])
            X[0] = X[0] * x
            out_y += take() * X[0]
            for m in range(1, d):
                X[m] = X[m] * x
                out_x += take() * X[m]
                out_y += take() * X[m]
            out_x += take() * X[d]
            if d % 2:
                out_y += take() * X[d]
            d += 1

        # 正規化を戻す
        return self.C[0] + self.F * out_x, self.C[1] + self.F * out_y

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "C": self.C.tolist(),
            "F": self.F,
            "P": self.P.tolist(),
            "l": self.l.tolist(),
            "R": self.R.tolist(),
            "equisolid": self.equisolid,
        }
