"""写真測量カメラモデル。

内部パラメータ（焦点距離、主点、スキュー、画像サイズ/切り出し）と
歪みモデル列から、カメラ座標系の3D点をピクセル座標・テクスチャ座標・
正規化デバイス座標 (NDC) に変換します。

座標系の定義:
    - View (3D): カメラ局所座標、光軸は -Z 方向
    - Pixel: 歪み適用後の画像座標 [0, size.x] x [0, size.y]、Z near=-1/far=1
    - Texture: [0, 1]^2（切り出し範囲を考慮）
    - NDC: X/Y ∈ [-1, 1]（ズームとアスペクト比を考慮）

派生行列の再計算は即時方式: 各パラメータのセッターは値を読み取り専用配列として
保存した直後に ``update_projection_matrix`` を呼び出す。ベクトルパラメータは
書き込み不可のため、部分的な書き換え（``camera.focal[0] = ...``）はできず、
常にセッター経由で置き換える。
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, replace
import logging
import math
from typing import TYPE_CHECKING

import numpy as np
from scipy.spatial.transform import Rotation, Slerp

from photocam.utils.matrix_utils import apply_matrix4, compose_matrix, make_scale

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from photocam.distortion.base import DistortionModel

logger = logging.getLogger(__name__)

# テクスチャ座標 [0, 1] から NDC [-1, 1] への変換（V軸反転）
NDC_MATRIX = np.array(
    [
        [2, 0, 0, -1],
        [0, -2, 0, 1],
        [0, 0, 1, 0],
        [0, 0, 0, 1],
    ],
    dtype=np.float64,
)


def _readonly(values: Sequence[float] | np.ndarray, length: int, name: str) -> np.ndarray:
    arr = np.array(values, dtype=np.float64).reshape(-1)
    if arr.shape[0] != length:
        raise ValueError(f"{name} must have {length} components, got {arr.shape[0]}")
    arr.flags.writeable = False
    return arr


def _as_vector2(value: float | Sequence[float] | np.ndarray | None, default: float, name: str) -> np.ndarray:
    """スカラーまたは2要素列を2次元ベクトルに変換（スカラーは両軸に同じ値）"""
    if value is None:
        value = default
    if np.ndim(value) == 0:
        value = (value, value)
    return _readonly(value, 2, name)


@dataclass(frozen=True)
class ImageView:
    """画像の切り出し範囲（全体画像のピクセル単位）

    Attributes:
        full_width: 全体画像の幅
        full_height: 全体画像の高さ
        offset_x: 切り出し範囲の左オフセット
        offset_y: 切り出し範囲の上オフセット
        width: 切り出し範囲の幅
        height: 切り出し範囲の高さ
        enabled: 切り出しが有効か
    """

    full_width: float
    full_height: float
    offset_x: float
    offset_y: float
    width: float
    height: float
    enabled: bool = True

    @classmethod
    def full(cls, width: float, height: float, enabled: bool = True) -> ImageView:
        """切り出しなし（全体）のビューを作成"""
        return cls(width, height, 0.0, 0.0, width, height, enabled)

    def lerp(self, other: ImageView, t: float) -> ImageView:
        """幾何パラメータを線形補間する（enabled はどちらかが有効なら有効）"""

        def mix(a: float, b: float) -> float:
            return a + (b - a) * t

        return ImageView(
            full_width=mix(self.full_width, other.full_width),
            full_height=mix(self.full_height, other.full_height),
            offset_x=mix(self.offset_x, other.offset_x),
            offset_y=mix(self.offset_y, other.offset_y),
            width=mix(self.width, other.width),
            height=mix(self.height, other.height),
            enabled=self.enabled or other.enabled,
        )


class PhotogrammetricCamera:
    """写真測量カメラ

    Attributes:
        distortions: 投影時に順に適用する歪みモデル列
        r2max: 有効な最大二乗半径 [pixel^2]（任意、呼び出し側が設定）
    """

    DEFAULT_FOCAL = 1024.0
    DEFAULT_SIZE = 1024.0
    DEFAULT_NEAR = 0.1
    DEFAULT_FAR = 2000.0
    DEFAULT_FILM_GAUGE = 35.0

    def __init__(
        self,
        focal: float | Sequence[float] | None = None,
        size: float | Sequence[float] | None = None,
        point: Sequence[float] | None = None,
        skew: float = 0.0,
        distortions: Iterable[DistortionModel] = (),
        near: float | None = None,
        far: float | None = None,
        aspect: float | None = None,
    ):
        """初期化

        Args:
            focal: 焦点距離 [pixel]（スカラーなら x, y 共通、デフォルト: 1024）
            size: 画像サイズ [pixel]（スカラーなら正方形、デフォルト: 1024x1024）
            point: 主点 [pixel]（デフォルト: 画像中心）
            skew: スキュー（デフォルト: 0）
            distortions: 投影時の適用順に並べた歪みモデル列
            near: 近クリップ面（デフォルト: 0.1）
            far: 遠クリップ面（デフォルト: 2000）
            aspect: アスペクト比（デフォルト: size.x / size.y）
        """
        # 行列の確保前は update_projection_matrix は何もしない
        self._pre_projection_matrix: np.ndarray | None = None

        self._size = _as_vector2(size, self.DEFAULT_SIZE, "size")
        self._focal = _as_vector2(focal, self.DEFAULT_FOCAL, "focal")
        self._point = _readonly(self._size * 0.5 if point is None else point, 2, "point")
        self._skew = float(skew or 0.0)
        self._near = float(self.DEFAULT_NEAR if near is None else near)
        self._far = float(self.DEFAULT_FAR if far is None else far)
        self._aspect = float(aspect if aspect else self._size[0] / self._size[1])
        self._zoom = 1.0
        self._view: ImageView | None = None
        self._film_gauge = self.DEFAULT_FILM_GAUGE
        self._position = _readonly((0.0, 0.0, 0.0), 3, "position")
        self._rotation = Rotation.identity()

        self.distortions: tuple[DistortionModel, ...] = tuple(distortions)
        self.r2max: float | None = None

        self._pre_projection_matrix = np.eye(4)
        self._texture_matrix = np.eye(4)
        self._post_projection_matrix = np.eye(4)
        self._projection_matrix = np.eye(4)
        self._matrix_world = np.eye(4)
        self._matrix_world_inverse = np.eye(4)
        self.update_projection_matrix()
        self.update_matrix_world()

    # ------------------------------------------------------------------
    # 内部パラメータ
    # ------------------------------------------------------------------

    @property
    def focal(self) -> np.ndarray:
        """焦点距離 (fx, fy) [pixel]"""
        return self._focal

    @focal.setter
    def focal(self, value: float | Sequence[float]) -> None:
        self._focal = _as_vector2(value, self.DEFAULT_FOCAL, "focal")
        self.update_projection_matrix()

    @property
    def size(self) -> np.ndarray:
        """画像サイズ (width, height) [pixel]"""
        return self._size

    @size.setter
    def size(self, value: float | Sequence[float]) -> None:
        self._size = _as_vector2(value, self.DEFAULT_SIZE, "size")
        self.update_projection_matrix()

    @property
    def point(self) -> np.ndarray:
        """主点 (px, py) [pixel]"""
        return self._point

    @point.setter
    def point(self, value: Sequence[float]) -> None:
        self._point = _readonly(value, 2, "point")
        self.update_projection_matrix()

    @property
    def skew(self) -> float:
        return self._skew

    @skew.setter
    def skew(self, value: float) -> None:
        self._skew = float(value)
        self.update_projection_matrix()

    @property
    def near(self) -> float:
        return self._near

    @near.setter
    def near(self, value: float) -> None:
        self._near = float(value)
        self.update_projection_matrix()

    @property
    def far(self) -> float:
        return self._far

    @far.setter
    def far(self, value: float) -> None:
        self._far = float(value)
        self.update_projection_matrix()

    @property
    def zoom(self) -> float:
        return self._zoom

    @zoom.setter
    def zoom(self, value: float) -> None:
        self._zoom = float(value)
        self.update_projection_matrix()

    @property
    def aspect(self) -> float:
        """描画先のアスペクト比 (width / height)"""
        return self._aspect

    @aspect.setter
    def aspect(self, value: float) -> None:
        self._aspect = float(value)
        self.update_projection_matrix()

    @property
    def view(self) -> ImageView | None:
        """切り出し範囲（None なら切り出しなし）"""
        return self._view

    @view.setter
    def view(self, value: ImageView | None) -> None:
        self._view = value
        self.update_projection_matrix()

    @property
    def film_gauge(self) -> float:
        """フィルム幅 [mm]（焦点距離の mm 換算に使用）"""
        return self._film_gauge

    @film_gauge.setter
    def film_gauge(self, value: float) -> None:
        self._film_gauge = float(value)

    @property
    def fov(self) -> float:
        """垂直画角 [degrees]（focal.y と size.y から計算）"""
        return math.atan2(self._size[1], 2 * self._focal[1]) * 360 / math.pi

    @fov.setter
    def fov(self, value: float) -> None:
        # 画角の設定は focal.x と focal.y の両方を上書きする
        focal = 0.5 * self._size[1] / math.tan(value * math.pi / 360)
        self.focal = (focal, focal)

    # ------------------------------------------------------------------
    # 外部パラメータ
    # ------------------------------------------------------------------

    @property
    def position(self) -> np.ndarray:
        """カメラ位置（ワールド座標）"""
        return self._position

    @position.setter
    def position(self, value: Sequence[float]) -> None:
        self._position = _readonly(value, 3, "position")
        self.update_matrix_world()

    @property
    def rotation(self) -> Rotation:
        """カメラの姿勢（カメラ座標系 → ワールド座標系）"""
        return self._rotation

    @rotation.setter
    def rotation(self, value: Rotation) -> None:
        self._rotation = value
        self.update_matrix_world()

    def set_world_matrix(self, matrix: Sequence[Sequence[float]] | np.ndarray) -> None:
        """4x4 ワールド変換行列から位置と姿勢を設定する。

        Args:
            matrix: カメラ座標系 → ワールド座標系の剛体変換行列

        Raises:
            ValueError: 4x4 でない場合
        """
        m = np.asarray(matrix, dtype=np.float64)
        if m.shape != (4, 4):
            raise ValueError(f"world matrix must be 4x4, got {m.shape}")
        self._rotation = Rotation.from_matrix(m[:3, :3])
        self._position = _readonly(m[:3, 3], 3, "position")
        self.update_matrix_world()

    def look_at(self, target: Sequence[float], up: Sequence[float] = (0.0, 1.0, 0.0)) -> None:
        """カメラの -Z 軸が target を向くように姿勢を設定する"""
        z_axis = self._position - np.asarray(target, dtype=np.float64)
        if np.linalg.norm(z_axis) == 0:
            z_axis = np.array([0.0, 0.0, 1.0])
        z_axis = z_axis / np.linalg.norm(z_axis)

        up_vec = np.asarray(up, dtype=np.float64)
        x_axis = np.cross(up_vec, z_axis)
        if np.linalg.norm(x_axis) == 0:
            # up と視線が平行
            z_axis = z_axis + np.array([1e-4, 0.0, 0.0])
            z_axis = z_axis / np.linalg.norm(z_axis)
            x_axis = np.cross(up_vec, z_axis)
        x_axis = x_axis / np.linalg.norm(x_axis)
        y_axis = np.cross(z_axis, x_axis)

        self.rotation = Rotation.from_matrix(np.column_stack([x_axis, y_axis, z_axis]))

    def update_matrix_world(self) -> None:
        """位置と姿勢からワールド行列とその逆行列を再計算する"""
        matrix_world = compose_matrix(self._position, self._rotation.as_matrix())
        matrix_world_inverse = np.linalg.inv(matrix_world)
        matrix_world.flags.writeable = False
        matrix_world_inverse.flags.writeable = False
        self._matrix_world = matrix_world
        self._matrix_world_inverse = matrix_world_inverse

    @property
    def matrix_world(self) -> np.ndarray:
        return self._matrix_world

    @property
    def matrix_world_inverse(self) -> np.ndarray:
        return self._matrix_world_inverse

    # ------------------------------------------------------------------
    # 派生行列
    # ------------------------------------------------------------------

    @property
    def pre_projection_matrix(self) -> np.ndarray:
        """歪み適用前のピンホール投影行列（主点とスキューを含む）"""
        return self._pre_projection_matrix

    @property
    def texture_matrix(self) -> np.ndarray:
        """ピクセル座標 → テクスチャ座標 [0, 1]^2（切り出し範囲を考慮）"""
        return self._texture_matrix

    @property
    def post_projection_matrix(self) -> np.ndarray:
        """歪み適用後のピクセル座標 → NDC（ズームとアスペクト比を考慮）"""
        return self._post_projection_matrix

    @property
    def projection_matrix(self) -> np.ndarray:
        """近似投影行列 post_projection @ pre_projection（歪みは無視される）"""
        return self._projection_matrix

    @property
    def texture_aspect(self) -> float:
        """テクスチャ（切り出し範囲）のアスペクト比"""
        if self._view is not None and self._view.enabled:
            return self._view.width / self._view.height
        return self._size[0] / self._size[1]

    def update_projection_matrix(self) -> None:
        """現在のパラメータから派生行列を再計算する。

        何度呼んでも同じ結果になり、派生行列の上書き以外の副作用はない。
        行列の確保前（構築中）に呼ばれた場合は何もしない。
        """
        if self._pre_projection_matrix is None:
            return

        near, far = self._near, self._far
        c = -(far + near) / (far - near)
        d = -2 * far * near / (far - near)
        pre_projection = np.array(
            [
                [self._focal[0], -self._skew, -self._point[0], 0],
                [0, -self._focal[1], -self._point[1], 0],
                [0, 0, c, d],
                [0, 0, -1, 0],
            ],
            dtype=np.float64,
        )

        texture = make_scale(1 / self._size[0], 1 / self._size[1])
        view = self._view
        if view is not None and view.enabled:
            sx = view.full_width / view.width
            sy = view.full_height / view.height
            crop = np.array(
                [
                    [sx, 0, 0, -view.offset_x / view.width],
                    [0, sy, 0, -view.offset_y / view.height],
                    [0, 0, 1, 0],
                    [0, 0, 0, 1],
                ],
                dtype=np.float64,
            )
            texture = crop @ texture

        post_projection = NDC_MATRIX @ texture

        # ズームとアスペクト比を反映
        aspect_ratio = self._aspect / self.texture_aspect
        zoom_x = zoom_y = self._zoom
        if aspect_ratio > 1:
            zoom_x /= aspect_ratio
        else:
            zoom_y *= aspect_ratio
        post_projection = make_scale(zoom_x, zoom_y, 1) @ post_projection

        projection = post_projection @ pre_projection

        for matrix in (pre_projection, texture, post_projection, projection):
            matrix.flags.writeable = False
        self._pre_projection_matrix = pre_projection
        self._texture_matrix = texture
        self._post_projection_matrix = post_projection
        self._projection_matrix = projection

        logger.debug(
            f"Projection matrices updated: focal={self._focal.tolist()}, point={self._point.tolist()}, "
            f"zoom={self._zoom}, aspect={self._aspect}"
        )

    # ------------------------------------------------------------------
    # 点の変換
    # ------------------------------------------------------------------

    def distort(self, points: Sequence[float] | np.ndarray) -> np.ndarray:
        """ワールド座標の点を歪み適用後のピクセル座標に変換する。

        アスペクト比とズームの影響は受けない。

        Args:
            points: 3D点 (3,) または (N, 3)

        Returns:
            ピクセル座標（x, y）と深度 z（near=-1, far=1）
        """
        pts = apply_matrix4(self._matrix_world_inverse, points)
        pts = apply_matrix4(self._pre_projection_matrix, pts)
        for distortion in self.distortions:
            pts = distortion.project(pts)
        return pts

    def texture(self, points: Sequence[float] | np.ndarray) -> np.ndarray:
        """ワールド座標の点をテクスチャ座標 [0, 1]^2 に変換する（アスペクト比とズームの影響なし）"""
        return apply_matrix4(self._texture_matrix, self.distort(points))

    def project(self, points: Sequence[float] | np.ndarray) -> np.ndarray:
        """ワールド座標の点を NDC [-1, 1]^2 に変換する（アスペクト比とズームを考慮）"""
        return apply_matrix4(self._post_projection_matrix, self.distort(points))

    # ------------------------------------------------------------------
    # 切り出し
    # ------------------------------------------------------------------

    def set_view_offset(
        self,
        full_width: float,
        full_height: float,
        x: float,
        y: float,
        width: float,
        height: float,
    ) -> None:
        """切り出し範囲を設定して有効化する"""
        self.view = ImageView(full_width, full_height, x, y, width, height, enabled=True)

    def clear_view_offset(self) -> None:
        """切り出しを無効化する（範囲は保持）"""
        if self._view is not None:
            self.view = replace(self._view, enabled=False)

    # ------------------------------------------------------------------
    # 透視投影カメラ互換
    # ------------------------------------------------------------------

    def get_effective_fov(self) -> float:
        """ズームを考慮した垂直画角 [degrees]"""
        return math.atan2(self._size[1], 2 * self._focal[1] * self._zoom) * 360 / math.pi

    def get_film_width(self) -> float:
        return self._film_gauge * min(self._aspect, 1)

    def get_film_height(self) -> float:
        return self._film_gauge / max(self._aspect, 1)

    def get_focal_length(self) -> float:
        """焦点距離 [mm]（フィルム高さ換算）"""
        return self._focal[1] * self.get_film_height() / self._size[1]

    def set_focal_length(self, focal_length: float) -> None:
        """焦点距離 [mm] を設定する（focal.x, focal.y の両方を上書き）"""
        focal = focal_length * self._size[1] / self.get_film_height()
        self.focal = (focal, focal)

    # ------------------------------------------------------------------
    # 複製と補間
    # ------------------------------------------------------------------

    def copy(self) -> PhotogrammetricCamera:
        """カメラを複製する。

        パラメータと行列は全て不変配列として保持されているため浅い複製で独立する。
        歪みモデル列は共有される（歪みモデルは不変）。
        """
        return copy.copy(self)

    def clone(self) -> PhotogrammetricCamera:
        return self.copy()

    def lerp(self, other: PhotogrammetricCamera, t: float) -> PhotogrammetricCamera:
        """other に向けて内部・外部パラメータを補間する（自身を更新して返す）。

        姿勢は球面線形補間、それ以外は線形補間。歪みモデル列は補間しない。

        Args:
            other: 補間先のカメラ
            t: 補間係数 [0, 1]

        Returns:
            self
        """

        def mix(a, b):
            return a + (b - a) * t

        self._focal = _readonly(mix(self._focal, other.focal), 2, "focal")
        self._point = _readonly(mix(self._point, other.point), 2, "point")
        self._skew = float(mix(self._skew, other.skew))
        self._zoom = float(mix(self._zoom, other.zoom))
        self._aspect = float(mix(self._aspect, other.aspect))
        self._near = float(mix(self._near, other.near))
        self._far = float(mix(self._far, other.far))

        if self._view is not None or other.view is not None:
            view_a = self._view if self._view is not None and self._view.enabled else None
            view_b = other.view if other.view is not None and other.view.enabled else None
            if view_a is not None or view_b is not None:
                view_a = view_a or ImageView.full(*self._size.tolist(), enabled=False)
                view_b = view_b or ImageView.full(*other.size.tolist(), enabled=False)
                self._view = view_a.lerp(view_b, t)

        self._position = _readonly(mix(self._position, other.position), 3, "position")
        rotations = Rotation.concatenate([self._rotation, other.rotation])
        self._rotation = Slerp([0.0, 1.0], rotations)(t)

        self.update_projection_matrix()
        self.update_matrix_world()
        return self
