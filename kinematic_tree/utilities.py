"""utilities.py - Assorted Helper Functions"""
import itertools as itl
import threading

__all__ = ['FrameIdCounter', 'default_id_counter']

class FrameIdCounter():
    """Monotonic frame identity source. Values are never reused.

    :param start: First identity issued, defaults to 0
    :type start: int, optional
    """
    def __init__(self, start: int = 0):
        self._count = itl.count(start)
        self._lock = threading.Lock()

    def __next__(self) -> int:
        with self._lock:
            return next(self._count)

    def __iter__(self):
        return self

# Shared by every frame constructed without an explicit counter
default_id_counter = FrameIdCounter()
