"""geometry.py - Affine Pose and Rotation Utility Functions"""
from __future__ import annotations

import typing as typ
from dataclasses import dataclass
import numpy.typing as npt

import numpy as np

import scipy.spatial.transform as sptl

from kinematic_tree.config import get_config
from kinematic_tree.errors import DegenerateAxisError

__all__ = ['AxisAngle', 'AffineTransform',               # poses
           'as_rotation', 'normalize']                 # rotations

RotationLike = typ.Union['AxisAngle', sptl.Rotation, npt.ArrayLike]

# %% Rotations
@dataclass(frozen=True, eq=False)
class AxisAngle:
    """Rotation described by a direction and an angle about it

    :param axis: Rotation axis, normalized on construction
    :type axis: numpy.typing.ArrayLike

    :param angle: Rotation angle in radians, defaults to 0
    :type angle: float, optional
    """
    axis: np.ndarray
    angle: float = 0.0

    def __post_init__(self):
        """Normalize axis and coerce angle"""
        object.__setattr__(self, 'axis', normalize(self.axis))
        object.__setattr__(self, 'angle', float(self.angle))

    @classmethod
    def identity(cls) -> AxisAngle:
        """Zero rotation about the local Z axis"""
        return cls(np.array([0.0, 0.0, 1.0]), 0.0)

    def as_rotation(self) -> sptl.Rotation:
        """Convert to :code:`scipy.spatial.transform.Rotation`

        :return: Equivalent rotation operator
        :rtype: scipy.spatial.transform.Rotation
        """
        return sptl.Rotation.from_rotvec(self.axis * self.angle)

    def as_matrix(self) -> np.ndarray:
        """Convert to a 3x3 rotation matrix"""
        return self.as_rotation().as_matrix()

def as_rotation(rotation: RotationLike) -> sptl.Rotation:
    """Coerce supported rotation descriptions into a scipy rotation

    :param rotation: Axis-angle pair, scipy rotation, or 3x3 rotation matrix
    :type rotation: AxisAngle | scipy.spatial.transform.Rotation | numpy.typing.ArrayLike

    :raises ValueError: If a matrix input is not 3x3

    :return: Rotation operator
    :rtype: scipy.spatial.transform.Rotation
    """
    if isinstance(rotation, AxisAngle):
        return rotation.as_rotation()
    if isinstance(rotation, sptl.Rotation):
        return rotation

    matrix = np.asarray(rotation, dtype=np.double)
    if matrix.shape != (3, 3):
        raise ValueError(f'Rotation matrix must be 3x3, got {matrix.shape}')
    return sptl.Rotation.from_matrix(matrix)

def normalize(vector: npt.ArrayLike, tolerance: float | None = None) -> np.ndarray:
    """Scale a 3D vector to unit length

    :param vector: Input vector
    :type vector: numpy.typing.ArrayLike

    :param tolerance: Smallest accepted norm, defaults to configured axis tolerance
    :type tolerance: float | None, optional

    :raises ValueError: If vector is not three dimensional
    :raises DegenerateAxisError: If vector is zero length or not finite

    :return: Unit vector
    :rtype: numpy.ndarray
    """
    tolerance = get_config().axis_tolerance if tolerance is None else tolerance

    v = np.array(vector, dtype=np.double).reshape(-1)
    if v.shape != (3,):
        raise ValueError(f'Expected a 3D vector, got shape {v.shape}')
    if not np.all(np.isfinite(v)):
        raise DegenerateAxisError(f'Vector {v} is not finite')

    norm = np.linalg.norm(v)
    if norm <= tolerance:
        raise DegenerateAxisError(f'Vector {v} has norm {norm} <= {tolerance}')

    return v / norm

# %% Affine Poses
class AffineTransform():
    """Homogeneous 3D affine transformation

    Composition follows the matrix convention: :code:`(A @ B).apply(p)` equals
    :code:`A.apply(B.apply(p))`. :meth:`translate` and :meth:`rotate` multiply
    on the right, so :code:`identity().translate(t).rotate(r)` maps a point
    :math:`p` to :math:`R p + t`.

    :param matrix: 4x4 homogeneous matrix, defaults to identity
    :type matrix: numpy.typing.ArrayLike | None, optional
    """
    def __init__(self, matrix: npt.ArrayLike | None = None):
        """Initialize AffineTransform"""
        if matrix is None:
            self._matrix = np.eye(4)
            return

        matrix = np.array(matrix, dtype=np.double)
        if matrix.shape != (4, 4):
            raise ValueError(f'Affine matrix must be 4x4, got {matrix.shape}')
        if not np.allclose(matrix[3], [0, 0, 0, 1]):
            raise ValueError('Affine matrix bottom row must be [0, 0, 0, 1]')
        self._matrix = matrix

    # Constructors
    @classmethod
    def identity(cls) -> AffineTransform:
        return cls()

    @classmethod
    def from_matrix(cls, matrix: npt.ArrayLike) -> AffineTransform:
        return cls(matrix)

    @classmethod
    def from_translation(cls, translation: npt.ArrayLike) -> AffineTransform:
        """Pure translation transform"""
        return cls().translate(translation)

    @classmethod
    def from_rotation(cls, rotation: RotationLike) -> AffineTransform:
        """Pure rotation transform"""
        return cls().rotate(rotation)

    @classmethod
    def from_translation_rotation(cls, translation: npt.ArrayLike,
                                  rotation: RotationLike) -> AffineTransform:
        """Identity translated then rotated, matching :code:`translate(t).rotate(r)`

        :param translation: Translation vector
        :type translation: numpy.typing.ArrayLike

        :param rotation: Rotation description
        :type rotation: AxisAngle | scipy.spatial.transform.Rotation | numpy.typing.ArrayLike

        :return: Composed transform
        :rtype: AffineTransform
        """
        return cls().translate(translation).rotate(rotation)

    # Accessors
    @property
    def matrix(self) -> np.ndarray:
        """Copy of the 4x4 homogeneous matrix"""
        return self._matrix.copy()

    @property
    def linear(self) -> np.ndarray:
        return self._matrix[:3, :3].copy()

    @property
    def translation(self) -> np.ndarray:
        return self._matrix[:3, 3].copy()

    @property
    def rotation(self) -> sptl.Rotation:
        """Rotation part of the linear block, projected onto the nearest
        rotation when the transform is not rigid"""
        return sptl.Rotation.from_matrix(self.linear)

    def is_rigid(self, atol: float | None = None) -> bool:
        """Checks whether the linear block is orthonormal with unit determinant"""
        atol = get_config().pose_tolerance if atol is None else atol
        L = self._matrix[:3, :3]
        return bool(np.allclose(L.T @ L, np.eye(3), atol=atol)
                    and np.isclose(np.linalg.det(L), 1.0, atol=atol))

    # Composition
    def translate(self, translation: npt.ArrayLike) -> AffineTransform:
        """Right-multiply by a translation

        :param translation: Translation vector
        :type translation: numpy.typing.ArrayLike

        :return: New transform :math:`M T(t)`
        :rtype: AffineTransform
        """
        t = np.array(translation, dtype=np.double).reshape(-1)
        if t.shape != (3,):
            raise ValueError(f'Translation must be a 3D vector, got shape {t.shape}')

        T = np.eye(4)
        T[:3, 3] = t
        return AffineTransform(self._matrix @ T)

    def rotate(self, rotation: RotationLike) -> AffineTransform:
        """Right-multiply by a rotation

        :param rotation: Rotation description
        :type rotation: AxisAngle | scipy.spatial.transform.Rotation | numpy.typing.ArrayLike

        :return: New transform :math:`M R`
        :rtype: AffineTransform
        """
        R = np.eye(4)
        R[:3, :3] = as_rotation(rotation).as_matrix()
        return AffineTransform(self._matrix @ R)

    def inverse(self) -> AffineTransform:
        """Inverse transform

        Uses the closed form :math:`[R^T, -R^T t]` for rigid transforms and a
        general matrix inverse otherwise.

        :raises numpy.linalg.LinAlgError: If the linear block is singular

        :return: Inverse transform
        :rtype: AffineTransform
        """
        inv = np.eye(4)
        if self.is_rigid():
            Rt = self._matrix[:3, :3].T
            inv[:3, :3] = Rt
            inv[:3, 3] = -Rt @ self._matrix[:3, 3]
        else:
            inv = np.linalg.inv(self._matrix)
            inv[3] = [0, 0, 0, 1]
        return AffineTransform(inv)

    def __matmul__(self, other: AffineTransform) -> AffineTransform:
        if not isinstance(other, AffineTransform):
            return NotImplemented
        return AffineTransform(self._matrix @ other._matrix)

    def apply(self, points: npt.ArrayLike) -> np.ndarray:
        """Applies transform to point(s)

        :param points: Point(s) of shape :math:`(3,)` or :math:`(n,3)`
        :type points: numpy.typing.ArrayLike

        :return: Transformed point(s) with the input shape
        :rtype: numpy.ndarray
        """
        p = np.asarray(points, dtype=np.double)
        return p @ self._matrix[:3, :3].T + self._matrix[:3, 3]

    # Comparison
    def isclose(self, other: AffineTransform, atol: float | None = None) -> bool:
        """Elementwise comparison within tolerance

        :param other: Transform to compare against
        :type other: AffineTransform

        :param atol: Absolute tolerance, defaults to configured pose tolerance
        :type atol: float | None, optional
        """
        atol = get_config().pose_tolerance if atol is None else atol
        return bool(np.allclose(self._matrix, other._matrix, rtol=0.0, atol=atol))

    def copy(self) -> AffineTransform:
        return AffineTransform(self._matrix)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AffineTransform):
            return NotImplemented
        return bool(np.array_equal(self._matrix, other._matrix))

    __hash__ = None

    def __str__(self) -> str:
        return f"AffineTransform(translation={self.translation}, linear={self.linear.tolist()})"

    def __repr__(self) -> str:
        return f"AffineTransform({self._matrix.tolist()})"

