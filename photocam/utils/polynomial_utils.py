"""多項式ユーティリティ。

歪みモデルで使用する多項式評価（Horner法）と、
有効半径の算出に使用する2次・3次方程式の解析解を提供します。
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    import numpy as np


def evaluate_polynomial(coeffs: Sequence[float] | np.ndarray, x: float | np.ndarray) -> float | np.ndarray:
    """Horner法で多項式を評価する。

    係数は低次から高次の順に並んでいるものとする:
    c[0] + c[1] * x + c[2] * x^2 + ...

    Args:
        coeffs: 多項式係数（長さ1以上）
        x: 評価点（スカラーまたは numpy 配列）

    Returns:
        多項式の値（x と同じ形状）

    Raises:
        ValueError: 係数が空の場合
    """
    if len(coeffs) == 0:
        raise ValueError("Polynomial requires at least one coefficient")

    result = coeffs[-1]
    for i in range(len(coeffs) - 2, -1, -1):
        result = result * x + coeffs[i]
    return result


def cube_root(x: float) -> float:
    """符号を保持した実数の立方根"""
    return math.copysign(abs(x) ** (1.0 / 3.0), x)


def solve_quadratic(a: float, b: float, c: float) -> list[float]:
    """2次方程式 a*x^2 + b*x + c = 0 の実数解を返す。

    Args:
        a, b, c: 係数

    Returns:
        実数解のリスト（判別式が負なら空、重解なら1つ、それ以外は小さい順に2つ）
    """
    if a == 0:
        # 1次方程式に退化
        if b == 0:
            return []
        return [-c / b]

    delta = b * b - 4 * a * c
    if delta < 0:
        return []
    x0 = -b / (2 * a)
    if delta == 0:
        return [x0]
    half_width = math.sqrt(delta) / (2 * a)
    return sorted([x0 - half_width, x0 + half_width])


def solve_cubic(a: float, b: float, c: float, d: float) -> list[float]:
    """3次方程式 a*x^3 + b*x^2 + c*x + d = 0 の実数解をカルダノの方法で求める。

    x = t - b / 3a の置換で t^3 + p*t + q = 0 に帰着し、
    判別式 q^2 + 4p^3/27 の符号で解の公式を切り替える。

    Args:
        a, b, c, d: 係数

    Returns:
        実数解のリスト（重解は重複して含まれる、順序は不定）
    """
    if a == 0:
        return solve_quadratic(b, c, d)

    shift = -b / (3 * a)
    a2 = a * a
    b2 = b * b
    p = c / a - b2 / (3 * a2)
    q = b2 * b / (a2 * a * 13.5) + d / a - b * c / (3 * a2)

    if p == 0:
        x0 = cube_root(-q) + shift
        return [x0, x0, x0]

    p3_4_27 = p * p * p * 4 / 27
    delta = q * q + p3_4_27

    if delta > 0:
        sqrt_delta = math.sqrt(delta)
        u = cube_root((-q + sqrt_delta) / 2)
        v = cube_root((-q - sqrt_delta) / 2)
        return [u + v + shift]

    if delta == 0:
        z0 = 3 * q / p
        x12 = shift - z0 * 0.5
        return [shift + z0, x12, x12]

    # delta < 0 のとき p < 0 なので -p3_4_27 > 0
    cos_arg = max(-1.0, min(1.0, -q / math.sqrt(-p3_4_27)))
    kos = math.acos(cos_arg)
    r = 2 * math.sqrt(-p / 3)
    return [shift + r * math.cos((kos + 2 * math.pi * k) / 3) for k in range(3)]
