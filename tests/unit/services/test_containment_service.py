import numpy as np
import pytest
from vpfootprint.contracts.errors import InvalidArgumentError
from vpfootprint.contracts.geometry import Point3
from vpfootprint.services.containment_service import ContainmentTester
from tests.factories import square, star_polygon

T = ContainmentTester()
SQ = square(10.0)  # (0,0) (0,10) (10,10) (10,0)

@pytest.mark.parametrize("pt,expected", [
    ((5, 5), True), ((0.001, 9.999), True), ((-1, 5), False), ((11, 5), False), ((5, 10.5), False),
])
def test_ray_cast_square(pt, expected):
    assert T.is_inside(pt, SQ) is expected

def test_z_is_ignored():
    assert T.is_inside((5, 5, 1000.0), SQ)

def test_ray_through_shared_vertex_not_double_counted():
    diamond = [(0, -1), (1, 0), (0, 1), (-1, 0)]
    assert T.is_inside((0, 0), diamond)
    assert not T.is_inside((-2, 0), diamond)
    assert not T.is_inside((2, 0), diamond)

def test_winding_sign_follows_orientation():
    ccw = [(0, 0), (10, 0), (10, 10), (0, 10)]
    assert T.winding_number((5, 5), ccw) == 1
    assert T.winding_number((5, 5), list(reversed(ccw))) == -1
    assert T.winding_number((15, 5), ccw) == 0

@pytest.mark.parametrize("poly", [None, [], [(0, 0), (1, 1)]])
def test_degenerate_polygon_rejected(poly):
    with pytest.raises(InvalidArgumentError):
        T.is_inside((0, 0), poly)
    with pytest.raises(InvalidArgumentError):
        T.winding_number((0, 0), poly)

def test_null_point_rejected():
    with pytest.raises(InvalidArgumentError):
        T.is_inside(None, SQ)

def test_negative_tolerance_rejected():
    with pytest.raises(InvalidArgumentError):
        T.is_inside_with_tolerance((5, 5), SQ, -1e-6)

def test_point_on_edge_caught_by_a_probe():
    on_edge = (10.0, 5.0)
    assert not T.is_inside(on_edge, SQ)
    assert T.is_inside_with_tolerance(on_edge, SQ, 1e-6)

def test_tiny_tolerance_falls_back_to_exact():
    assert not T.is_inside_with_tolerance((10.0, 5.0), SQ, 5e-13)
    assert not T.is_inside_with_tolerance((10.0, 5.0), SQ, 0.0)

def test_far_point_outside_even_with_tolerance():
    assert not T.is_inside_with_tolerance((20.0, 5.0), SQ, 1e-3)

@pytest.mark.slow
def test_ray_cast_agrees_with_winding_on_simple_polygons():
    rng = np.random.default_rng(20240611)
    inside_total = 0
    for _ in range(25):
        poly = star_polygon(rng)
        pts = rng.uniform(-6.0, 6.0, size=(1000, 2))
        for x, y in pts:
            rc = T.is_inside((x, y), poly)
            assert rc == T.is_inside_winding((x, y), poly), (poly, (x, y))
            inside_total += rc
    # la muestra cubre ambos casos
    assert 0 < inside_total < 25 * 1000

def test_filter_inside_keeps_input_order():
    items = [("a", Point3(1, 1)), ("b", Point3(20, 1)), ("c", Point3(9, 9)), ("d", Point3(10, 3))]
    got = T.filter_inside(items, SQ, lambda it: it[1], tolerance=1e-6)
    assert [name for name, _ in got] == ["a", "c", "d"]

def test_exact_cutoff_is_the_probe_threshold():
    t = ContainmentTester(exact_cutoff=1e-3)
    on_edge = (10.0, 5.0)
    # tolerancia == umbral: se sondea
    assert t.is_inside_with_tolerance(on_edge, SQ, 1e-3)
    # justo por debajo: prueba exacta
    assert not t.is_inside_with_tolerance(on_edge, SQ, np.nextafter(1e-3, 0.0))
    assert T.is_inside_with_tolerance(on_edge, SQ, 1e-12)
    assert not T.is_inside_with_tolerance(on_edge, SQ, np.nextafter(1e-12, 0.0))
