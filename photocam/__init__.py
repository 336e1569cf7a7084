"""Calibrated photogrammetric camera with lens distortion models.

This package provides:
- Camera intrinsics and the pre-projection/texture/post-projection matrices
- Point transforms to distorted pixel, texture and NDC coordinates
- Radial, Fraser, Conrad-Brown, Ebner, polynomial and fisheye distortion models
"""

from photocam.camera import CameraParameters, ImageView, PhotogrammetricCamera
from photocam.distortion import (
    BrownDistortion,
    DistortionModel,
    DistortionType,
    EbnerDistortion,
    FishEyeDistortion,
    FraserDistortion,
    PolynomDistortion,
    RadialDistortion,
    UnknownDistortionError,
    create_distortion,
    create_distortions,
    radial3_validity_bound,
)

__version__ = "0.1.0"

__all__ = [
    "BrownDistortion",
    "CameraParameters",
    "DistortionModel",
    "DistortionType",
    "EbnerDistortion",
    "FishEyeDistortion",
    "FraserDistortion",
    "ImageView",
    "PhotogrammetricCamera",
    "PolynomDistortion",
    "RadialDistortion",
    "UnknownDistortionError",
    "create_distortion",
    "create_distortions",
    "radial3_validity_bound",
]
