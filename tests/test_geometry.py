"""Geometry module tests"""
import pytest

import numpy as np
import scipy.spatial.transform as sptl

from kinematic_tree.errors import DegenerateAxisError
from kinematic_tree.geometry import AffineTransform, AxisAngle, as_rotation, normalize

from testing_utilities import (
    random_uniform, random_axis_angle, random_pose, skew_symmetric_matrix)

__all__ = ['TestAxisAngle', 'TestNormalize', 'TestAffineTransform']

NUM_ROTATIONS = 10
NUM_POSES = 5

@pytest.mark.parametrize('rotation', [random_axis_angle() for _ in range(NUM_ROTATIONS)])
class TestAxisAngle():
    def test_rodrigues(self, rotation: AxisAngle):
        """Compares scipy conversion against Rodrigues' rotation formula

        :param rotation: Axis-angle rotation
        :type rotation: AxisAngle
        """
        K = skew_symmetric_matrix(rotation.axis)
        theta = rotation.angle
        ref_mat = np.eye(3) + np.sin(theta)*K + (1 - np.cos(theta))*(K @ K)

        frob_error = np.linalg.norm(rotation.as_matrix() - ref_mat, 'fro') \
            / np.linalg.norm(ref_mat, 'fro')
        assert frob_error <= 1e-12, f"Test Failed: {frob_error} > 1e-12"

    def test_axis_is_fixed(self, rotation: AxisAngle):
        np.testing.assert_allclose(rotation.as_rotation().apply(rotation.axis),
                                   rotation.axis, atol=1e-12)

def test_axis_angle_normalizes_axis():
    rotation = AxisAngle([0, 3, 0], np.pi/2)
    np.testing.assert_allclose(rotation.axis, [0, 1, 0])

def test_axis_angle_identity():
    np.testing.assert_allclose(AxisAngle.identity().as_matrix(), np.eye(3))

class TestNormalize():
    def test_scales_to_unit(self):
        np.testing.assert_allclose(normalize([0, 0, 5]), [0, 0, 1])

    @pytest.mark.parametrize('vector', [[0, 0, 0], [1e-15, 0, 0], [np.nan, 0, 1], [np.inf, 0, 0]])
    def test_degenerate_rejected(self, vector):
        with pytest.raises(DegenerateAxisError):
            normalize(vector)

    def test_degenerate_is_value_error(self):
        with pytest.raises(ValueError):
            normalize([0, 0, 0])

    def test_wrong_dimension(self):
        with pytest.raises(ValueError, match='3D'):
            normalize([1, 0])

    def test_custom_tolerance(self):
        with pytest.raises(DegenerateAxisError):
            normalize([0.1, 0, 0], tolerance=0.5)

class TestAsRotation():
    def test_matrix_input(self):
        R = sptl.Rotation.from_euler('z', 30, degrees=True)
        np.testing.assert_allclose(as_rotation(R.as_matrix()).as_matrix(), R.as_matrix())

    def test_rotation_passthrough(self):
        R = sptl.Rotation.random()
        assert as_rotation(R) is R

    def test_bad_matrix_shape(self):
        with pytest.raises(ValueError, match='3x3'):
            as_rotation(np.eye(4))

@pytest.mark.parametrize('pose', [random_pose() for _ in range(NUM_POSES)])
class TestAffineTransform():
    def test_inverse(self, pose: AffineTransform):
        assert (pose.inverse() @ pose).isclose(AffineTransform.identity())
        assert (pose @ pose.inverse()).isclose(AffineTransform.identity())

    def test_inverse_matches_numpy(self, pose: AffineTransform):
        np.testing.assert_allclose(pose.inverse().matrix, np.linalg.inv(pose.matrix), atol=1e-12)

    def test_composition_applies_right_first(self, pose: AffineTransform):
        other = random_pose()
        point = random_uniform(5,3)
        np.testing.assert_allclose((pose @ other).apply(point),
                                   pose.apply(other.apply(point)), atol=1e-12)

    def test_translate_then_rotate(self, pose: AffineTransform):
        """:code:`translate(t).rotate(r)` maps p to R p + t"""
        t, r = pose.translation, pose.rotation
        composed = AffineTransform.identity().translate(t).rotate(r)
        point = random_uniform(5,3)
        np.testing.assert_allclose(composed.apply(point), r.apply(point) + t, atol=1e-12)

    def test_batch_apply(self, pose: AffineTransform):
        points = np.array([random_uniform(5,3) for _ in range(4)])
        out = pose.apply(points)
        assert out.shape == (4, 3)
        np.testing.assert_allclose(out[2], pose.apply(points[2]))

def test_rotate_then_translate_differs():
    """Order of right-multiplication matters"""
    r = AxisAngle([0, 0, 1], np.pi/2)
    a = AffineTransform().translate([1, 0, 0]).rotate(r)
    b = AffineTransform().rotate(r).translate([1, 0, 0])

    np.testing.assert_allclose(a.translation, [1, 0, 0], atol=1e-12)
    np.testing.assert_allclose(b.translation, [0, 1, 0], atol=1e-12)

def test_general_inverse():
    scale = AffineTransform(np.diag([2.0, 4.0, 0.5, 1.0])).translate([1, 1, 1])
    assert not scale.is_rigid()
    assert (scale.inverse() @ scale).isclose(AffineTransform.identity())

def test_rejects_bad_matrix():
    with pytest.raises(ValueError, match='4x4'):
        AffineTransform(np.eye(3))
    with pytest.raises(ValueError, match='bottom row'):
        AffineTransform(np.ones((4, 4)))

def test_matrix_is_copy():
    pose = AffineTransform.from_translation([1, 2, 3])
    m = pose.matrix
    m[0, 3] = 100
    np.testing.assert_allclose(pose.translation, [1, 2, 3])

def test_equality():
    assert AffineTransform.from_translation([1, 0, 0]) == AffineTransform.from_translation([1, 0, 0])
    assert AffineTransform.from_translation([1, 0, 0]) != AffineTransform.identity()
