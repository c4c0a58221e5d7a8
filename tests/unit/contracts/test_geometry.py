import math
import numpy as np
import pytest
from vpfootprint.contracts.errors import InvalidArgumentError
from vpfootprint.contracts.geometry import Point3, Transform, as_point3, as_polygon, points_close

def test_transform_matrix_is_read_only():
    t = Transform.translation((1, 2, 3))
    with pytest.raises(ValueError):
        t.matrix[0, 3] = 5.0

def test_transform_rejects_non_4x4():
    with pytest.raises(InvalidArgumentError):
        Transform(np.eye(3))

def test_scaling_keeps_pivot_fixed():
    t = Transform.scaling(2.0, pivot=(1.0, 1.0))
    assert points_close(t.apply((1, 1)), (1, 1, 0))
    assert points_close(t.apply((2, 1)), (3, 1, 0))

def test_rotation_about_pivot():
    t = Transform.rotation(math.pi / 2, (0, 0, 1), pivot=(10, 0, 0))
    assert points_close(t.apply((11, 0, 0)), (10, 1, 0))
    assert points_close(t.apply((10, 0, 4)), (10, 0, 4))

def test_plane_to_world_z_is_identity():
    assert Transform.plane_to_world((0, 0, 1)).is_close(Transform.identity(), 0.0)

def test_plane_to_world_arbitrary_axis_for_x_normal():
    t = Transform.plane_to_world((2, 0, 0))
    # Ax = Wz x N = +Y, Ay = N x Ax = +Z
    assert points_close(t.apply((1, 2, 0)), (0, 1, 2))
    r = t.matrix[:3, :3]
    assert np.allclose(r @ r.T, np.eye(3))
    assert math.isclose(float(np.linalg.det(r)), 1.0)

def test_plane_to_world_rejects_zero_normal():
    with pytest.raises(InvalidArgumentError):
        Transform.plane_to_world((0, 0, 0))

def test_compose_applies_right_operand_first():
    move = Transform.translation((1, 0, 0))
    scale = Transform.scaling(10.0)
    assert points_close(move.compose(scale).apply((1, 0)), (11, 0, 0))
    assert points_close(scale.compose(move).apply((1, 0)), (20, 0, 0))

@pytest.mark.parametrize("bad", [(1,), (1, 2, 3, 4)])
def test_as_point3_bad_arity(bad):
    with pytest.raises(InvalidArgumentError):
        as_point3(bad)

def test_as_point3_lifts_2d():
    assert as_point3((1, 2)) == Point3(1.0, 2.0, 0.0)

def test_as_polygon_lifts_each_vertex():
    assert as_polygon([(0, 0), (1, 2, 3)]) == (Point3(0.0, 0.0, 0.0), Point3(1.0, 2.0, 3.0))
