import pytest
from pydantic import ValidationError
from vpfootprint.contracts.geometry import Point3
from vpfootprint.contracts.scene import (
    PolylineClip, Polyline2dClip, Polyline3dClip, UnsupportedEntity, Vertex2dRecord, record_from_mapping, record_kind,
)

def test_polyline_vertices_lifted_to_3d():
    pl = PolylineClip(vertices=[(0, 0), (1, 0), (1, 1)])
    assert pl.vertices[1] == Point3(1.0, 0.0, 0.0)

def test_polyline_rejects_vertex_with_wrong_arity():
    with pytest.raises(ValidationError):
        PolylineClip(vertices=[(0, 0), (1, 0, 0, 0), (1, 1)])

@pytest.mark.parametrize("data,cls", [
    ({"kind": "polyline", "vertices": [[0, 0], [1, 0], [1, 1]]}, PolylineClip),
    ({"kind": "Polyline2d", "vertex_refs": ["a", "b"]}, Polyline2dClip),
    ({"kind": "polyline3d", "vertex_refs": ["c"]}, Polyline3dClip),
    ({"kind": "vertex2d", "position": [2, 3]}, Vertex2dRecord),
])
def test_record_from_mapping_known_kinds(data, cls):
    assert isinstance(record_from_mapping(data), cls)

def test_unknown_kind_becomes_unsupported_entity():
    rec = record_from_mapping({"kind": "circle", "radius": 4})
    assert isinstance(rec, UnsupportedEntity)
    assert rec.kind == "circle"
    assert rec.extras == {"radius": 4}
    assert record_kind(rec) == "circle"

def test_missing_kind_fails():
    with pytest.raises(ValueError):
        record_from_mapping({"vertices": []})
