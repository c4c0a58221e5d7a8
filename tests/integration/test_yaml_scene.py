import pytest
import yaml
from pathlib import Path
from vpfootprint.adapters.yaml_scene import load_scene_yaml
from vpfootprint.contracts.errors import UnsupportedGeometryError
from vpfootprint.contracts.geometry import points_close
from vpfootprint.services.footprint_service import FootprintExtractor
from tests.factories import SAMPLE_SCENE as SCENE

pytestmark = pytest.mark.integration

@pytest.fixture()
def scene(tmp_path: Path):
    p = tmp_path / "scene.yaml"
    p.write_text(yaml.safe_dump(SCENE), encoding="utf-8")
    return load_scene_yaml(p)

def test_scene_loads_viewports_and_records(scene):
    assert len(scene.viewports) == 4
    assert scene.find("3").clip_ref == "1F3"
    with pytest.raises(KeyError):
        scene.find("3", layout_name="C-999")

def test_rectangular_and_polygonal_from_yaml(scene):
    ex = FootprintExtractor(store=scene.store)
    rect = ex.extract_footprint(scene.find("2"))
    assert points_close(rect[0], (480.0, 285.0, 0.0))
    assert points_close(rect[2], (520.0, 315.0, 0.0))
    tri = ex.extract_footprint(scene.find("3"))
    assert len(tri) == 3
    assert points_close(tri[0], (480.0, 285.0, 0.0))
    assert points_close(tri[2], (520.0, 315.0, 0.0))
    assert scene.store.open_sessions == 0

def test_legacy_polyline_from_yaml(scene):
    fp = FootprintExtractor(store=scene.store).extract_footprint(scene.find("5", "C-102"))
    assert [tuple(p) for p in fp] == [(0, 0, 0), (1, 0, 0), (1, 1, 0)]

def test_unknown_shape_from_yaml(scene):
    with pytest.raises(UnsupportedGeometryError, match="circle"):
        FootprintExtractor(store=scene.store).extract_footprint(scene.find("4"))
