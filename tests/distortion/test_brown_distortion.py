"""Unit tests for Conrad-Brown and Ebner distortion models."""

from __future__ import annotations

import numpy as np
import pytest

from photocam.distortion import BrownDistortion, EbnerDistortion


def _coeffs(length: int, **values: float) -> list[float]:
    """P<index>=value 形式で一部だけ非ゼロの係数列を作る"""
    coeffs = [0.0] * length
    for key, value in values.items():
        coeffs[int(key[1:])] = value
    return coeffs


class TestBrownDistortion:
    """BrownDistortionのテスト"""

    def test_origin_is_fixed_point(self):
        """原点は移動しない"""
        disto = BrownDistortion(F=1000.0, P=np.linspace(0.001, 0.014, 14))

        np.testing.assert_allclose(disto.project((0.0, 0.0)), [0.0, 0.0])

    def test_zero_coefficients_is_identity(self):
        disto = BrownDistortion(F=1000.0, P=[0.0] * 14)

        np.testing.assert_allclose(disto.project((12.0, -7.0)), [12.0, -7.0])

    def test_linear_terms_only_affect_x(self):
        """P0, P1 は x のみに作用する"""
        disto = BrownDistortion(F=1000.0, P=_coeffs(14, P0=0.01, P1=0.02))

        np.testing.assert_allclose(disto.project((10.0, 20.0)), [10.5, 20.0])

    def test_y_quadratic_term(self):
        """P8 は y に x^2 を加える"""
        disto = BrownDistortion(F=1000.0, P=_coeffs(14, P8=0.001))

        np.testing.assert_allclose(disto.project((10.0, 20.0)), [10.0, 20.1])

    def test_x_monomials(self):
        """x 出力の単項式の割り当て"""
        disto = BrownDistortion(F=1000.0, P=_coeffs(14, P2=1.0, P3=2.0, P4=3.0, P5=4.0, P6=5.0))

        x, y = 2.0, 3.0
        expected_x = x + (1.0 * x * y + 2.0 * y * y + 3.0 * x * x * y + 4.0 * x * y * y + 5.0 * x * x * y * y)
        np.testing.assert_allclose(disto.project((x, y)), [expected_x, y])

    def test_y_monomials(self):
        """y 出力の単項式の割り当て（x と非対称）"""
        disto = BrownDistortion(F=1000.0, P=_coeffs(14, P7=1.0, P9=2.0, P10=3.0, P11=4.0))

        x, y = 2.0, 3.0
        expected_y = y + (1.0 * x * y + 2.0 * x * x * y + 3.0 * x * y * y + 4.0 * x * x * y * y)
        np.testing.assert_allclose(disto.project((x, y)), [x, expected_y])

    def test_combined_correction_factor(self):
        """f = P12 * x^2 y^2 / F + P13 * r^2 は両軸に掛かる"""
        disto = BrownDistortion(F=1000.0, P=_coeffs(14, P12=2.0, P13=1e-4))

        # f = 2 * 100 * 400 / 1000 + 1e-4 * 500 = 80.05
        np.testing.assert_allclose(disto.project((10.0, 20.0)), [10.0 + 800.5, 20.0 + 1601.0])

    def test_requires_fourteen_coefficients(self):
        with pytest.raises(ValueError, match="P must have 14 values"):
            BrownDistortion(F=1000.0, P=[0.0] * 12)

    def test_to_dict(self):
        disto = BrownDistortion(F=500, P=[0.0] * 14)

        record = disto.to_dict()
        assert record["type"] == "brown"
        assert record["F"] == 500.0
        assert len(record["P"]) == 14


class TestEbnerDistortion:
    """EbnerDistortionのテスト"""

    def test_rotation_like_pair(self):
        """P0 は x に +x、y に -y として作用する"""
        disto = EbnerDistortion(B2=0.0, P=_coeffs(12, P0=0.01))

        np.testing.assert_allclose(disto.project((10.0, 20.0)), [10.1, 19.8])

    def test_shared_linear_term(self):
        """P1 は x に y、y に x として作用する"""
        disto = EbnerDistortion(B2=0.0, P=_coeffs(12, P1=0.01))

        np.testing.assert_allclose(disto.project((10.0, 20.0)), [10.2, 20.1])

    def test_bias_centers_squares(self):
        """x^2, y^2 は B2 で中心化される"""
        disto = EbnerDistortion(B2=4.0, P=_coeffs(12, P2=0.001))

        # x^2 - B2 = 0 なので x は変化せず、y に P2 * xy が加わる
        np.testing.assert_allclose(disto.project((2.0, 3.0)), [2.0, 3.006])

    def test_origin_shift_from_bias(self):
        """原点でもバイアス項による一定の変位がある"""
        disto = EbnerDistortion(B2=4.0, P=_coeffs(12, P2=0.5, P3=0.25))

        # x: -2 * P2 * (-4) = 4, y: -2 * P3 * (-4) = 2
        np.testing.assert_allclose(disto.project((0.0, 0.0)), [4.0, 2.0])

    def test_high_order_terms(self):
        """P6..P11 の割り当て"""
        P = _coeffs(12, P6=1.0, P7=2.0, P8=3.0, P9=4.0, P10=5.0, P11=6.0)
        disto = EbnerDistortion(B2=1.0, P=P)

        x, y = 2.0, 3.0
        x2 = x * x - 1.0
        y2 = y * y - 1.0
        expected_x = x + (1.0 * x * y2 + 3.0 * y * x2 + 5.0 * x2 * y2)
        expected_y = y + (4.0 * x * y2 + 2.0 * y * x2 + 6.0 * x2 * y2)
        np.testing.assert_allclose(disto.project((x, y)), [expected_x, expected_y])

    def test_from_base(self):
        """B2 = B^2 / 1.5"""
        disto = EbnerDistortion.from_base(3.0, [0.0] * 12)

        assert disto.B2 == pytest.approx(6.0)

    def test_requires_twelve_coefficients(self):
        with pytest.raises(ValueError, match="P must have 12 values"):
            EbnerDistortion(B2=1.0, P=[0.0] * 14)
