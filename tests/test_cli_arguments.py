"""Test cases for CLI arguments and the command-line entry point."""

from __future__ import annotations

import logging
import sys
from unittest.mock import patch

import pytest
import yaml

from photocam.cli import main, parse_arguments


def test_parse_arguments_default():
    """デフォルト引数のパース"""
    test_args = ["script_name"]

    with patch.object(sys, "argv", test_args):
        args = parse_arguments()

        assert args.config == "camera.yaml"
        assert args.point is None
        assert args.frame == "pixel"
        assert args.debug is False
        assert args.log_file is None


def test_parse_arguments_config():
    """設定ファイルパスの指定"""
    args = parse_arguments(["--config", "custom_camera.yaml"])

    assert args.config == "custom_camera.yaml"


def test_parse_arguments_debug():
    """デバッグモードの指定"""
    args = parse_arguments(["--debug"])

    assert args.debug is True


def test_parse_arguments_log_file():
    """ログファイルの指定"""
    args = parse_arguments(["--log-file", "output/photocam.log"])

    assert args.log_file == "output/photocam.log"


def test_parse_arguments_points():
    """投影点は複数指定できる"""
    args = parse_arguments(["--point", "1", "2", "-3", "--point", "0", "0", "-1"])

    assert args.point == [[1.0, 2.0, -3.0], [0.0, 0.0, -1.0]]


def test_parse_arguments_frame():
    """出力座標系の指定"""
    args = parse_arguments(["--frame", "ndc"])

    assert args.frame == "ndc"


def test_parse_arguments_invalid_frame():
    """不正な座標系はエラー"""
    with pytest.raises(SystemExit):
        parse_arguments(["--frame", "world"])


def test_parse_arguments_point_requires_three_values():
    with pytest.raises(SystemExit):
        parse_arguments(["--point", "1", "2"])


@pytest.fixture
def calibration_file(tmp_path):
    """camera セクションを持つキャリブレーションファイル"""
    path = tmp_path / "camera.yaml"
    config = {
        "camera": {
            "focal": 1000,
            "size": [1000, 800],
            "near": 0.5,
            "far": 100,
            "distortions": [{"type": "radial", "C": [500, 400], "R": [0.0]}],
        }
    }
    path.write_text(yaml.safe_dump(config), encoding="utf-8")
    return path


class TestMain:
    """mainのテスト"""

    def test_projects_to_pixels(self, calibration_file, capsys):
        exit_code = main(["--config", str(calibration_file), "--point", "0", "0", "-10"])

        assert exit_code == 0
        lines = [line for line in capsys.readouterr().out.splitlines() if "->" in line]
        assert len(lines) == 1
        source, result = lines[0].split("->")
        assert source.split() == ["0.000000", "0.000000", "-10.000000"]
        assert result.split()[:2] == ["500.000000", "400.000000"]

    def test_projects_to_ndc(self, calibration_file, capsys):
        exit_code = main(["--config", str(calibration_file), "--frame", "ndc", "--point", "0", "0", "-10"])

        assert exit_code == 0
        line = [line for line in capsys.readouterr().out.splitlines() if "->" in line][0]
        x, y = (float(v) for v in line.split("->")[1].split()[:2])
        assert x == pytest.approx(0.0, abs=1e-6)
        assert y == pytest.approx(0.0, abs=1e-6)

    def test_multiple_points(self, calibration_file, capsys):
        exit_code = main(
            [
                "--config",
                str(calibration_file),
                "--frame",
                "texture",
                "--point",
                "0",
                "0",
                "-10",
                "--point",
                "1",
                "0",
                "-2",
            ]
        )

        assert exit_code == 0
        lines = [line for line in capsys.readouterr().out.splitlines() if "->" in line]
        assert len(lines) == 2
        # x = (1000 * 1 / 2 + 500) / 1000 = 1.0
        assert lines[1].split("->")[1].split()[0] == "1.000000"

    def test_no_points(self, calibration_file):
        """点の指定がなければ何もせず正常終了"""
        assert main(["--config", str(calibration_file)]) == 0

    def test_missing_file(self, tmp_path):
        assert main(["--config", str(tmp_path / "missing.yaml"), "--point", "0", "0", "-1"]) == 1

    def test_invalid_calibration(self, tmp_path):
        path = tmp_path / "camera.yaml"
        path.write_text(yaml.safe_dump({"distortions": [{"type": "spline"}]}), encoding="utf-8")

        assert main(["--config", str(path), "--point", "0", "0", "-1"]) == 1

    def test_writes_log_file(self, calibration_file, tmp_path):
        log_file = tmp_path / "logs" / "photocam.log"

        assert main(["--config", str(calibration_file), "--log-file", str(log_file)]) == 0

        for handler in logging.getLogger().handlers:
            handler.flush()
        assert "Camera built" in log_file.read_text(encoding="utf-8")
