"""errors.py - Kinematic Tree Exception Types"""

__all__ = ['KinematicTreeError', 'ConfigError', 'FrameReferenceError',
           'DegenerateAxisError', 'CyclicTreeError']

class KinematicTreeError(Exception):
    """Base exception for all kinematic tree errors"""

class ConfigError(KinematicTreeError):
    """Configuration loading and validation errors"""

class FrameReferenceError(KinematicTreeError, TypeError):
    """A live frame was required but an absent or foreign object was given"""

class DegenerateAxisError(KinematicTreeError, ValueError):
    """Axis vector cannot be normalized (zero length or not finite)"""

class CyclicTreeError(KinematicTreeError):
    """Frame relations contain a cycle where a tree traversal was requested"""
