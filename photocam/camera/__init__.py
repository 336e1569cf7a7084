"""Photogrammetric camera model.

This package provides the calibrated camera (intrinsics, derived projection
matrices and the distort/texture/project point pipeline) and the parameter
struct it is built from.
"""

from photocam.camera.parameters import CameraParameters
from photocam.camera.photogrammetric_camera import ImageView, PhotogrammetricCamera

__all__ = [
    "CameraParameters",
    "ImageView",
    "PhotogrammetricCamera",
]
