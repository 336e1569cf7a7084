"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]

if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import numpy as np
import pytest

from photocam.camera import PhotogrammetricCamera
from photocam.distortion import RadialDistortion


@pytest.fixture(autouse=True)
def reset_root_logger():
    """setup_logging が追加したハンドラーをテスト後に外す"""
    root_logger = logging.getLogger()
    before = list(root_logger.handlers)
    level = root_logger.level
    yield
    for handler in root_logger.handlers[:]:
        if handler not in before:
            root_logger.removeHandler(handler)
            handler.close()
    root_logger.setLevel(level)


@pytest.fixture
def default_camera() -> PhotogrammetricCamera:
    """Return a camera built with every default."""

    return PhotogrammetricCamera()


@pytest.fixture
def calibrated_camera() -> PhotogrammetricCamera:
    """Return a 2000x1500 camera with a non-centered principal point and skew."""

    return PhotogrammetricCamera(
        focal=(1800.0, 1750.0),
        size=(2000.0, 1500.0),
        point=(1010.0, 740.0),
        skew=2.5,
        near=0.5,
        far=500.0,
    )


@pytest.fixture
def radial_distortion() -> RadialDistortion:
    """Return a mild barrel radial distortion centered near the image center."""

    return RadialDistortion(C=(1005.0, 745.0), R=(-1.2e-8, 3.0e-15, -1.0e-22))


@pytest.fixture
def sample_points() -> np.ndarray:
    """Return view-space points in front of the camera (-Z)."""

    return np.array(
        [
            [0.0, 0.0, -10.0],
            [1.5, -0.75, -12.0],
            [-2.0, 1.0, -8.0],
            [0.3, 0.4, -3.0],
        ],
        dtype=np.float64,
    )
