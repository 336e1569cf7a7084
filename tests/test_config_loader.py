"""Test cases for calibration file loading."""

from __future__ import annotations

import json

import numpy as np
import pytest
import yaml

from photocam.config import load_camera_parameters, load_config_file
from photocam.distortion import BrownDistortion, PolynomDistortion


def test_load_yaml(tmp_path):
    """YAMLファイルの読み込み"""
    path = tmp_path / "camera.yaml"
    path.write_text("camera:\n  focal: 1200\n", encoding="utf-8")

    assert load_config_file(path) == {"camera": {"focal": 1200}}


def test_load_json(tmp_path):
    """JSONファイルの読み込み"""
    path = tmp_path / "camera.json"
    path.write_text(json.dumps({"focal": [1000, 1100]}), encoding="utf-8")

    assert load_config_file(path) == {"focal": [1000, 1100]}


def test_load_empty_yaml(tmp_path):
    """空のYAMLは空の辞書"""
    path = tmp_path / "empty.yml"
    path.write_text("", encoding="utf-8")

    assert load_config_file(path) == {}


def test_load_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config_file(tmp_path / "missing.yaml")


def test_load_non_dict_yaml(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- 1\n- 2\n", encoding="utf-8")

    with pytest.raises(ValueError, match="辞書形式"):
        load_config_file(path)


def test_load_unsupported_suffix(tmp_path):
    path = tmp_path / "camera.txt"
    path.write_text("focal: 1", encoding="utf-8")

    with pytest.raises(ValueError, match="サポートされない設定形式"):
        load_config_file(path)


def test_load_rejects_non_dict_camera_section(tmp_path):
    """camera セクションが辞書でなければ読み込み時にエラー"""
    path = tmp_path / "camera.json"
    path.write_text(json.dumps({"camera": [1000, 800]}), encoding="utf-8")

    with pytest.raises(ValueError, match="camera セクション"):
        load_config_file(path)


def test_load_non_dict_json(tmp_path):
    path = tmp_path / "camera.json"
    path.write_text(json.dumps([1, 2]), encoding="utf-8")

    with pytest.raises(ValueError, match="JSON設定は辞書形式"):
        load_config_file(path)


def test_load_camera_parameters_from_section(tmp_path):
    """camera セクションから読み込む"""
    config = {
        "camera": {
            "focal": [1800, 1750],
            "size": [2000, 1500],
            "principal_point": [1010, 740],
            "world_transform": [
                [1, 0, 0, 0],
                [0, 1, 0, 0],
                [0, 0, 1, 5],
                [0, 0, 0, 1],
            ],
            "distortions": [
                {"type": "polynom", "C": [1000, 750], "S": 1000, "R": [0.0] * 6},
                {"type": "conrad_brown", "F": 1800, "P": [0.0] * 14},
            ],
        }
    }
    path = tmp_path / "camera.yaml"
    path.write_text(yaml.safe_dump(config), encoding="utf-8")

    params = load_camera_parameters(path)

    assert params.focal == (1800.0, 1750.0)
    assert params.point == (1010.0, 740.0)
    assert params.world_transform[2, 3] == 5.0
    assert [type(d) for d in params.distortions] == [PolynomDistortion, BrownDistortion]


def test_load_camera_parameters_without_section(tmp_path):
    """camera セクションがなければファイル全体を使う"""
    path = tmp_path / "camera.json"
    path.write_text(json.dumps({"focal": 900, "size": 600}), encoding="utf-8")

    params = load_camera_parameters(path)
    camera = params.build_camera()

    np.testing.assert_array_equal(camera.focal, [900.0, 900.0])
    np.testing.assert_array_equal(camera.point, [300.0, 300.0])


def test_load_camera_parameters_invalid_section(tmp_path):
    path = tmp_path / "camera.yaml"
    path.write_text("camera: 3\n", encoding="utf-8")

    with pytest.raises(ValueError, match="camera セクション"):
        load_camera_parameters(path)
