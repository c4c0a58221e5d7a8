import json
import pytest
import yaml
from pathlib import Path
from vpfootprint.cli import main
from tests.factories import SAMPLE_SCENE as SCENE

pytestmark = pytest.mark.integration

@pytest.fixture()
def scene_path(tmp_path: Path) -> str:
    p = tmp_path / "scene.yaml"
    p.write_text(yaml.safe_dump(SCENE), encoding="utf-8")
    return str(p)

def test_cli_footprint_json(scene_path, capsys):
    assert main(["--scene", scene_path, "footprint", "--viewport", "2"]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out["viewport"] == "C-101:2"
    assert out["footprint"][0] == [480.0, 285.0, 0.0]

def test_cli_bounds_json(scene_path, capsys):
    assert main(["--scene", scene_path, "bounds", "--viewport", "2"]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out["bounds"] == {"min": [480.0, 285.0, 0.0], "max": [520.0, 315.0, 0.0]}

def test_cli_contains(scene_path, capsys):
    rc = main(["--scene", scene_path, "contains", "--viewport", "2", "-p", "500,300", "-p", "0,0"])
    assert rc == 0
    lines = capsys.readouterr().out.strip().splitlines()
    assert lines[0].endswith("inside")
    assert lines[1].endswith("outside")

def test_cli_diagnose(scene_path, capsys):
    assert main(["--scene", scene_path, "diagnose", "--viewport", "2"]) == 0
    assert "Hoja→Mundo" in capsys.readouterr().out

def test_cli_unsupported_geometry_exit_code(scene_path, capsys):
    assert main(["--scene", scene_path, "footprint", "--viewport", "4"]) == 1
    assert "circle" in capsys.readouterr().err

def test_cli_bounds_text(scene_path, capsys):
    assert main(["--scene", scene_path, "bounds", "--viewport", "2", "--text"]) == 0
    out = capsys.readouterr().out.strip()
    assert out == "C-101:2\tBoundingBox(min=(480.000, 285.000, 0.000), max=(520.000, 315.000, 0.000))"
