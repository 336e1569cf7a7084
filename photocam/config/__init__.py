"""Calibration file loading for the photogrammetric camera toolkit."""

from photocam.config.loader import load_camera_parameters, load_config_file

__all__ = ["load_camera_parameters", "load_config_file"]
