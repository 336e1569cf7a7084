"""歪みモデルのファクトリ。

パーサが生成するタグ付きレコード（``{"type": ..., **params}``）から
対応する歪みモデルを構築します。種別はタグで閉じた集合としてディスパッチし、
未知のタグはモデルを一切構築せずに ``UnknownDistortionError`` を送出します。
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable

from photocam.distortion.base import DistortionModel, DistortionType
from photocam.distortion.brown import BrownDistortion, EbnerDistortion
from photocam.distortion.fisheye import FishEyeDistortion
from photocam.distortion.polynom import PolynomDistortion
from photocam.distortion.radial import FraserDistortion, RadialDistortion

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

logger = logging.getLogger(__name__)


class UnknownDistortionError(ValueError):
    """未知の歪みモデル種別"""


# タグの別名
TYPE_ALIASES: dict[str, DistortionType] = {
    "radial3": DistortionType.RADIAL,
    "conrad_brown": DistortionType.BROWN,
    "fish_eye": DistortionType.FISHEYE,
}

# 統一モデル形式（状態ベクトル + パラメータベクトル）のモデル名
POLYNOM_MODEL_PREFIX = "eModelePolyDeg"
EBNER_MODEL = "eModeleEbner"
BROWN_MODEL = "eModeleDCBrown"
FISHEYE_MODEL = "eModele_FishEye_10_5_5"
EQUISOLID_FISHEYE_MODEL = "eModele_EquiSolid_FishEye_10_5_5"


def _require(spec: Mapping[str, Any], key: str, tag: DistortionType) -> Any:
    if key not in spec:
        raise ValueError(f"Distortion '{tag.value}' requires parameter '{key}'")
    return spec[key]


def _build_radial(spec: Mapping[str, Any]) -> RadialDistortion:
    tag = DistortionType.RADIAL
    return RadialDistortion(C=_require(spec, "C", tag), R=_require(spec, "R", tag))


def _build_fraser(spec: Mapping[str, Any]) -> FraserDistortion:
    tag = DistortionType.FRASER
    return FraserDistortion(
        C=_require(spec, "C", tag),
        R=_require(spec, "R", tag),
        P=spec.get("P", [0.0, 0.0]),
        b=spec.get("b", [0.0, 0.0]),
    )


def _build_brown(spec: Mapping[str, Any]) -> BrownDistortion:
    tag = DistortionType.BROWN
    return BrownDistortion(F=_require(spec, "F", tag), P=_require(spec, "P", tag))


def _build_ebner(spec: Mapping[str, Any]) -> EbnerDistortion:
    tag = DistortionType.EBNER
    if "B2" not in spec and "B" in spec:
        return EbnerDistortion.from_base(float(spec["B"]), _require(spec, "P", tag))
    return EbnerDistortion(B2=_require(spec, "B2", tag), P=_require(spec, "P", tag))


def _build_polynom(spec: Mapping[str, Any]) -> PolynomDistortion:
    tag = DistortionType.POLYNOM
    return PolynomDistortion(
        C=_require(spec, "C", tag),
        S=_require(spec, "S", tag),
        R=_require(spec, "R", tag),
        degree=spec.get("degree"),
    )


def _build_fisheye(spec: Mapping[str, Any]) -> FishEyeDistortion:
    tag = DistortionType.FISHEYE
    return FishEyeDistortion(
        C=_require(spec, "C", tag),
        F=_require(spec, "F", tag),
        P=spec.get("P", []),
        l=_require(spec, "l", tag),
        R=spec.get("R", []),
        equisolid=bool(spec.get("equisolid", False)),
    )


BUILDERS: dict[DistortionType, Callable[[Mapping[str, Any]], DistortionModel]] = {
    DistortionType.RADIAL: _build_radial,
    DistortionType.FRASER: _build_fraser,
    DistortionType.BROWN: _build_brown,
    DistortionType.EBNER: _build_ebner,
    DistortionType.POLYNOM: _build_polynom,
    DistortionType.FISHEYE: _build_fisheye,
}


def resolve_type(tag: Any) -> DistortionType:
    """タグ文字列を DistortionType に解決する。

    Raises:
        UnknownDistortionError: 未知のタグの場合
    """
    if isinstance(tag, DistortionType):
        return tag
    if not isinstance(tag, str):
        raise UnknownDistortionError(f"Distortion type must be a string, got {tag!r}")

    key = tag.strip().lower()
    if key in TYPE_ALIASES:
        return TYPE_ALIASES[key]
    try:
        return DistortionType(key)
    except ValueError:
        raise UnknownDistortionError(f"Unknown distortion type: {tag}") from None


def create_distortion(spec: Mapping[str, Any]) -> DistortionModel:
    """タグ付きレコードから歪みモデルを構築する。

    Args:
        spec: ``{"type": <タグ>, ...パラメータ}`` 形式の辞書

    Returns:
        歪みモデル

    Raises:
        UnknownDistortionError: タグが無い、または未知の場合
        ValueError: 必須パラメータが不足している、または形状が不正な場合
    """
    if "type" not in spec:
        raise UnknownDistortionError("Distortion record has no 'type'")

    tag = resolve_type(spec["type"])
    model = BUILDERS[tag](spec)
    logger.debug(f"Distortion created: {tag.value}")
    return model


def create_distortions(specs: Iterable[Mapping[str, Any] | None]) -> tuple[DistortionModel, ...]:
    """複数のレコードから歪みモデル列を構築する（順序を保持、None は歪みなしとして除外）"""
    return tuple(create_distortion(spec) for spec in specs if spec is not None)


def distortion_from_unified_model(
    type_name: str,
    params: Sequence[float],
    states: Sequence[float],
) -> DistortionModel | None:
    """統一モデル形式（モデル名、パラメータベクトル、状態ベクトル）から歪みモデルを構築する。

    Args:
        type_name: モデル名（例: "eModelePolyDeg3", "eModeleEbner"）
        params: パラメータベクトル
        states: 状態ベクトル

    Returns:
        歪みモデル（"ModNoDist" の場合は None）

    Raises:
        UnknownDistortionError: 未知のモデル名の場合
    """
    params = list(params)
    states = list(states)

    if type_name == "ModNoDist":
        return None

    if type_name.startswith(POLYNOM_MODEL_PREFIX):
        suffix = type_name[len(POLYNOM_MODEL_PREFIX) :]
        if suffix not in {"2", "3", "4", "5", "6", "7"}:
            raise UnknownDistortionError(f"Unknown distortion model: {type_name}")
        return PolynomDistortion(C=states[1:3], S=states[0], R=params, degree=int(suffix))

    if type_name == EBNER_MODEL:
        return EbnerDistortion.from_base(states[0], params)

    if type_name == BROWN_MODEL:
        return BrownDistortion(F=states[0], P=params)

    if type_name in (FISHEYE_MODEL, EQUISOLID_FISHEYE_MODEL):
        return FishEyeDistortion(
            C=params[0:2],
            F=states[0],
            R=params[2:12],
            P=params[12:22],
            l=params[22:],
            equisolid=type_name == EQUISOLID_FISHEYE_MODEL,
        )

    raise UnknownDistortionError(f"Unknown distortion model: {type_name}")
