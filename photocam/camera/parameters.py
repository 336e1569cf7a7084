"""カメラパラメータ構造体。

キャリブレーション情報（向きファイルのパーサや設定ファイル）から得られる
パラメータをまとめ、``PhotogrammetricCamera`` を構築します。
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import TYPE_CHECKING, Any

import numpy as np

from photocam.camera.photogrammetric_camera import PhotogrammetricCamera
from photocam.distortion.factory import create_distortions

if TYPE_CHECKING:
    from collections.abc import Mapping

    from photocam.distortion.base import DistortionModel

logger = logging.getLogger(__name__)


def _vector2(config: Mapping[str, Any], key: str, default: Any = None) -> tuple[float, float] | None:
    """スカラーまたは [x, y] を2次元ベクトルとして読む"""
    value = config.get(key, default)
    if value is None:
        return None
    if isinstance(value, (int, float)):
        return (float(value), float(value))
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise ValueError(f"{key} は数値または [x, y] 形式である必要があります: {value!r}")
    if not all(isinstance(v, (int, float)) for v in value):
        raise ValueError(f"{key} の要素は数値である必要があります: {value!r}")
    return (float(value[0]), float(value[1]))


def _number(config: Mapping[str, Any], key: str, default: float | None) -> float | None:
    value = config.get(key, default)
    if value is None:
        return None
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        raise ValueError(f"{key} は数値である必要があります: {value!r}")
    return float(value)


@dataclass
class CameraParameters:
    """カメラパラメータ

    Attributes:
        focal: 焦点距離 (fx, fy) [pixel]
        size: 画像サイズ (width, height) [pixel]
        point: 主点 (px, py) [pixel]
        skew: スキュー
        distortions: 投影時の適用順に並べた歪みモデル列
        near: 近クリップ面
        far: 遠クリップ面
        world_transform: カメラ座標系 → ワールド座標系の 4x4 行列
        aspect: アスペクト比（None なら size から計算）
        r2max: 有効な最大二乗半径 [pixel^2]（None なら未指定）
    """

    focal: tuple[float, float] | None = None
    size: tuple[float, float] | None = None
    point: tuple[float, float] | None = None
    skew: float = 0.0
    distortions: tuple[DistortionModel, ...] = ()
    near: float | None = None
    far: float | None = None
    world_transform: np.ndarray = field(default_factory=lambda: np.eye(4, dtype=np.float64))
    aspect: float | None = None
    r2max: float | None = None

    def __post_init__(self) -> None:
        """配列を numpy 配列に変換し、形状を検証"""
        self.world_transform = np.asarray(self.world_transform, dtype=np.float64)
        if self.world_transform.shape != (4, 4):
            raise ValueError(f"world_transform must be 4x4, got {self.world_transform.shape}")
        self.distortions = tuple(self.distortions)

    @classmethod
    def from_dict(cls, config: Mapping[str, Any]) -> CameraParameters:
        """設定辞書から CameraParameters を作成。

        Args:
            config: camera セクションの設定辞書

        Returns:
            CameraParameters インスタンス

        Raises:
            ValueError: 値の形式が不正な場合
            UnknownDistortionError: 未知の歪みモデル種別を含む場合
        """
        distortion_specs = config.get("distortions", [])
        if not isinstance(distortion_specs, list):
            raise ValueError("distortions はリストである必要があります")
        for i, spec in enumerate(distortion_specs):
            if spec is not None and not isinstance(spec, dict):
                raise ValueError(f"distortions[{i}] は辞書である必要があります")

        r2max = None
        useful_radius = _number(config, "useful_radius", None)
        if useful_radius is not None:
            r2max = useful_radius * useful_radius

        return cls(
            focal=_vector2(config, "focal"),
            size=_vector2(config, "size"),
            point=_vector2(config, "principal_point"),
            skew=_number(config, "skew", 0.0),
            distortions=create_distortions(distortion_specs),
            near=_number(config, "near", None),
            far=_number(config, "far", None),
            world_transform=config.get("world_transform", np.eye(4)),
            aspect=_number(config, "aspect", None),
            r2max=r2max,
        )

    def build_camera(self) -> PhotogrammetricCamera:
        """パラメータから PhotogrammetricCamera を構築する"""
        camera = PhotogrammetricCamera(
            focal=self.focal,
            size=self.size,
            point=self.point,
            skew=self.skew,
            distortions=self.distortions,
            near=self.near,
            far=self.far,
            aspect=self.aspect,
        )
        camera.set_world_matrix(self.world_transform)
        camera.r2max = self.r2max
        logger.info(
            f"Camera built: focal={camera.focal.tolist()}, size={camera.size.tolist()}, "
            f"distortions={[d.type.value for d in camera.distortions]}"
        )
        return camera
