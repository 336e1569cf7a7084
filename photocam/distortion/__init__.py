"""Lens distortion models.

This package provides the photogrammetric lens distortion variants
(radial, Fraser, Conrad-Brown, Ebner, polynomial, fisheye), the validity
bound of radial models and a tag-dispatching factory.
"""

from photocam.distortion.base import (
    DistortionModel,
    DistortionType,
    radial3_validity_bound,
)
from photocam.distortion.brown import BrownDistortion, EbnerDistortion
from photocam.distortion.factory import (
    UnknownDistortionError,
    create_distortion,
    create_distortions,
    distortion_from_unified_model,
)
from photocam.distortion.fisheye import FishEyeDistortion
from photocam.distortion.polynom import PolynomDistortion
from photocam.distortion.radial import FraserDistortion, RadialDistortion

__all__ = [
    "BrownDistortion",
    "DistortionModel",
    "DistortionType",
    "EbnerDistortion",
    "FishEyeDistortion",
    "FraserDistortion",
    "PolynomDistortion",
    "RadialDistortion",
    "UnknownDistortionError",
    "create_distortion",
    "create_distortions",
    "distortion_from_unified_model",
    "radial3_validity_bound",
]
