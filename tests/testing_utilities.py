"""Testing Utility Functions"""
import numpy as np

import scipy.spatial.transform as sptl

from kinematic_tree.geometry import AffineTransform, AxisAngle

def random_uniform(scale: float, size: int) -> np.ndarray:
    """Generates uniform random vectors between :math:`[-s, s)`

    :return: Scaled uniform randoms
    :rtype: np.ndarray
    """
    return scale * np.random.uniform(-1,1,(size,))

def random_axis_angle() -> AxisAngle:
    """Generates random AxisAngle with a non-degenerate axis

    :return: Axis-angle rotation
    :rtype: AxisAngle
    """
    axis = random_uniform(1,3)
    while np.linalg.norm(axis) < 1e-3:
        axis = random_uniform(1,3)
    return AxisAngle(axis, np.random.uniform(-np.pi, np.pi))

def random_pose() -> AffineTransform:
    """Generates random rigid AffineTransform

    :return: Rigid pose
    :rtype: AffineTransform
    """
    return AffineTransform.from_translation_rotation(
        random_uniform(10,3), sptl.Rotation.random())

def skew_symmetric_matrix(v: np.ndarray) -> np.ndarray:
    r"""Creates skew symmetric cross-product matrix corresponding
    to vector in :math:`\mathbb{R}^3`

    :param v: Input vector
    :type v: numpy.ndarray

    :return: Skew symmetric cross-product matrix
    :rtype: numpy.ndarray
    """
    return np.array([[ 0   , -v[2],  v[1]],
                     [ v[2],  0   , -v[0]],
                     [-v[1],  v[0],  0   ]])
