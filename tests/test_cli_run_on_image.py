from __future__ import annotations

import json
from pathlib import Path

import cv2
import numpy as np
import pytest

import poseview.tools.run_on_image as cli
from poseview.core.errors import ModelLoadError
from poseview.core.runtime.static import StaticRuntime


@pytest.fixture(autouse=True)
def _isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("PV_CONFIG", str(tmp_path / "absent.yml"))


@pytest.fixture
def image_path(tmp_path: Path) -> Path:
    path = tmp_path / "in.png"
    assert cv2.imwrite(str(path), np.zeros((128, 256, 3), dtype=np.uint8))
    return path


def _fake_runtime_factory(captured: dict):
    out = np.zeros((1, 56, 2), dtype=np.float32)
    out[0, 0:5, 0] = (20.0, 10.0, 8.0, 12.0, 0.9)
    out[0, 0:5, 1] = (20.5, 10.0, 8.0, 12.0, 0.8)

    def _factory(model_path, providers=None, default_size=640):
        captured["model_path"] = model_path
        return StaticRuntime(out, input_shape=(1, 3, 64, 64))

    return _factory


def test_cli_prints_summary_and_writes_outputs(
    monkeypatch: pytest.MonkeyPatch, capsys, tmp_path: Path, image_path: Path
):
    captured: dict = {}
    monkeypatch.setattr(cli, "OnnxPoseRuntime", _fake_runtime_factory(captured))
    out_img = tmp_path / "out" / "annotated.png"
    out_json = tmp_path / "out" / "dets.json"

    code = cli.main(
        [
            "--image",
            str(image_path),
            "--model",
            "pose.onnx",
            "--no-show",
            "--output",
            str(out_img),
            "--json",
            str(out_json),
        ]
    )

    assert code == 0
    assert captured["model_path"] == "pose.onnx"
    stdout = capsys.readouterr().out
    assert "Infer time(ms):" in stdout
    assert stdout.strip().endswith("Detections: 1")
    assert out_img.exists()
    dets = json.loads(out_json.read_text())
    assert len(dets) == 1
    assert dets[0]["box"] == [64, 16, 32, 48]
    assert len(dets[0]["keypoints"]) == 17


def test_cli_mock_runs_without_model(capsys, image_path: Path):
    code = cli.main(["--image", str(image_path), "--mock", "--no-show"])
    assert code == 0
    assert "Detections: 0" in capsys.readouterr().out


def test_cli_reports_missing_image(monkeypatch: pytest.MonkeyPatch, capsys, tmp_path: Path):
    monkeypatch.setattr(cli, "OnnxPoseRuntime", _fake_runtime_factory({}))
    code = cli.main(["--image", str(tmp_path / "missing.jpg"), "--no-show"])
    assert code == 1
    assert "error:" in capsys.readouterr().err


def test_cli_reports_model_load_error(monkeypatch: pytest.MonkeyPatch, capsys, image_path: Path):
    def _fail(*args, **kwargs):
        raise ModelLoadError("Model file not found: nope.onnx")

    monkeypatch.setattr(cli, "OnnxPoseRuntime", _fail)
    code = cli.main(["--image", str(image_path), "--model", "nope.onnx", "--no-show"])
    assert code == 1
    assert "nope.onnx" in capsys.readouterr().err


def test_cli_without_image_exits():
    with pytest.raises(SystemExit):
        cli.main(["--mock", "--no-show"])
