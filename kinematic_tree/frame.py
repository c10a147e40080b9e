"""frame.py - Kinematic Reference Frames, Links, and Joints"""

# %% Imports
from __future__ import annotations
import weakref
import numpy.typing as npt

import numpy as np

from kinematic_tree.config import get_config
from kinematic_tree.errors import DegenerateAxisError, FrameReferenceError
from kinematic_tree.geometry import AffineTransform, RotationLike, normalize
from kinematic_tree.logging import get_logger
from kinematic_tree.utilities import FrameIdCounter, default_id_counter

__all__ = ['Frame', 'Link', 'Joint']

log = get_logger(__name__)

# %% Frames
class Frame():
    """Rigid reference frame in a kinematic tree

    A frame holds two poses. The *origin* is its authored placement in
    whatever convention the builder chose. The *transform* is its pose
    relative to the parent frame and is only changed by explicit assignment
    or by :meth:`update_transformation_from_origin`.

    Parent and children are weak references; frames are owned elsewhere
    (for instance by :class:`kinematic_tree.kinematics.KinematicTree`).

    :param name: Frame name, defaults to 'anonymous'
    :type name: str, optional

    :param counter: Identity source, defaults to the process-wide counter
    :type counter: FrameIdCounter | None, optional
    """
    def __init__(self, name: str = 'anonymous', counter: FrameIdCounter | None = None):
        """Initialize Frame"""
        counter = default_id_counter if counter is None else counter

        self._id = next(counter)
        self.name = name

        self._parent: weakref.ref[Frame] | None = None
        self._children: list[weakref.ref[Frame]] = []

        self._origin = AffineTransform.identity()
        self._transform = AffineTransform.identity()

        log.debug("Created %s %d (%s)", type(self).__name__, self._id, name)

    @property
    def id(self) -> int:
        """Identity assigned at construction"""
        return self._id

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self._id}, name={self.name!r})"

    # Tree linkage
    @staticmethod
    def _check_frame(frame: object, role: str):
        if not isinstance(frame, Frame):
            raise FrameReferenceError(
                f"{role} must be a live Frame, got {type(frame).__name__}")

    def set_parent(self, frame: Frame):
        """Record a weak reference to the parent frame. The parent's children
        are left untouched.

        :param frame: Parent frame
        :type frame: Frame

        :raises FrameReferenceError: If `frame` is not a Frame
        """
        self._check_frame(frame, 'Parent')
        self._parent = weakref.ref(frame)

    @property
    def parent(self) -> Frame | None:
        """Parent frame, or None if unset or no longer alive"""
        return None if self._parent is None else self._parent()

    def add_child(self, child: Frame):
        """Append a weak reference to a child frame. The child's parent is left
        untouched and duplicates are not detected.

        :param child: Child frame
        :type child: Frame

        :raises FrameReferenceError: If `child` is not a Frame
        """
        self._check_frame(child, 'Child')
        self._children.append(weakref.ref(child))

    @property
    def children(self) -> list[weakref.ref[Frame]]:
        """Live list of child references in insertion order. Dead entries are
        kept until the caller removes them; call each entry to dereference."""
        return self._children

    def live_children(self) -> list[Frame]:
        """Children that are still alive, without pruning dead entries"""
        return [child for child in (ref() for ref in self._children)
                if child is not None]

    # Poses
    @property
    def origin(self) -> AffineTransform:
        return self._origin

    @origin.setter
    def origin(self, value: AffineTransform):
        self._origin = _coerce_pose(value)

    def set_origin(self, translation: npt.ArrayLike, rotation: RotationLike):
        """Set origin as identity translated then rotated

        :param translation: Translation vector
        :type translation: numpy.typing.ArrayLike

        :param rotation: Axis-angle pair, scipy rotation, or 3x3 rotation matrix
        :type rotation: AxisAngle | scipy.spatial.transform.Rotation | numpy.typing.ArrayLike
        """
        self._origin = AffineTransform.from_translation_rotation(translation, rotation)

    @property
    def transform(self) -> AffineTransform:
        return self._transform

    @transform.setter
    def transform(self, value: AffineTransform):
        self._transform = _coerce_pose(value)

    def set_transform(self, translation: npt.ArrayLike, rotation: RotationLike):
        """Set transform as identity translated then rotated. This overrides
        any derived value.

        :param translation: Translation vector
        :type translation: numpy.typing.ArrayLike

        :param rotation: Axis-angle pair, scipy rotation, or 3x3 rotation matrix
        :type rotation: AxisAngle | scipy.spatial.transform.Rotation | numpy.typing.ArrayLike
        """
        self._transform = AffineTransform.from_translation_rotation(translation, rotation)

    def update_transformation_from_origin(self) -> bool:
        """Derive the parent-relative transform from origins:
        :math:`T = O_{parent}^{-1} O`

        Only this frame is updated. A missing or dead parent leaves the
        transform unchanged.

        :raises numpy.linalg.LinAlgError: If the parent origin is a singular
            non-rigid transform that cannot be inverted

        :return: True if the transform was recomputed
        :rtype: bool
        """
        parent = self.parent
        if parent is None:
            log.debug("Frame %d has no live parent, transform kept", self._id)
            return False

        self._transform = parent.origin.inverse() @ self._origin
        return True

def _coerce_pose(value: AffineTransform | npt.ArrayLike) -> AffineTransform:
    """Copy a pose, accepting a 4x4 matrix in place of an AffineTransform"""
    if isinstance(value, AffineTransform):
        return value.copy()
    return AffineTransform(value)

class Link(Frame):
    """Rigid body frame. Geometry and dynamic properties are reserved."""

class Joint(Frame):
    """Frame that rotates or slides about a fixed local axis within limits

    :param name: Joint name, defaults to 'anonymous'
    :type name: str, optional

    :param counter: Identity source, defaults to the process-wide counter
    :type counter: FrameIdCounter | None, optional
    """
    def __init__(self, name: str = 'anonymous', counter: FrameIdCounter | None = None):
        """Initialize Joint"""
        super().__init__(name, counter)
        self._axis = np.array([0.0, 0.0, 1.0])
        self._lower, self._upper = get_config().default_angle_limits

    @property
    def axis(self) -> np.ndarray:
        """Unit axis in this frame's coordinates"""
        return self._axis.copy()

    @axis.setter
    def axis(self, value: npt.ArrayLike):
        """Stores the normalized axis

        :raises DegenerateAxisError: If `value` is zero or not finite, in
            which case the previous axis is kept
        """
        try:
            self._axis = normalize(value)
        except DegenerateAxisError:
            log.warning("Joint %d rejected axis %s, keeping %s", self.id, value, self._axis)
            raise

    def set_axis(self, value: npt.ArrayLike):
        self.axis = value

    @property
    def limits(self) -> tuple[float, float]:
        """Angle limits as (lower, upper) in radians"""
        return self._lower, self._upper

    def set_angle_limit(self, upper_rad: float, lower_rad: float):
        """Store angle limits without checking their order

        :param upper_rad: Upper angle limit in radians
        :type upper_rad: float

        :param lower_rad: Lower angle limit in radians
        :type lower_rad: float
        """
        self._lower = float(lower_rad)
        self._upper = float(upper_rad)

    def is_valid_angle(self, rad: float) -> bool:
        """Checks lower <= rad <= upper. Always False if the limits are inverted.

        :param rad: Joint angle in radians
        :type rad: float
        """
        return bool(self._lower <= rad <= self._upper)
