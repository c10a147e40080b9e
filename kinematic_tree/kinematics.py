"""kinematics.py - Kinematic Tree Arena and Traversal"""
from __future__ import annotations

import typing as typ

import networkx as nx

from kinematic_tree.errors import CyclicTreeError, FrameReferenceError
from kinematic_tree.frame import Frame
from kinematic_tree.logging import get_logger

__all__ = ['KinematicTree']

log = get_logger(__name__)

FrameKey = typ.Union[int, Frame]

class KinematicTree(nx.DiGraph):
    """Owning container of frames, keyed by frame id

    Nodes are frame ids holding a strong reference under the :code:`'frame'`
    attribute; edges run parent to child. Frames only keep weak references to
    each other, so removing a frame from the tree (and dropping any other
    strong reference) leaves its relatives with stale references.
    """
    def __init__(self, incoming_graph_data = None, **attr):
        """Initialize KinematicTree"""
        self._path: dict[tuple[int,int], list[int]] = {}
        super().__init__(incoming_graph_data, **attr)

    # Structural edits invalidate cached paths
    def add_edge(self, u_of_edge, v_of_edge, **attr):
        super().add_edge(u_of_edge, v_of_edge, **attr)
        self._path.clear()

    def add_edges_from(self, ebunch_to_add, **attr):
        super().add_edges_from(ebunch_to_add, **attr)
        self._path.clear()

    def remove_edge(self, u, v):
        super().remove_edge(u, v)
        self._path.clear()

    def remove_edges_from(self, ebunch):
        super().remove_edges_from(ebunch)
        self._path.clear()

    def remove_node(self, n):
        super().remove_node(n)
        self._path.clear()

    def remove_nodes_from(self, nodes):
        super().remove_nodes_from(nodes)
        self._path.clear()

    def clear(self):
        super().clear()
        self._path.clear()

    # Ownership
    @staticmethod
    def _key(frame: FrameKey) -> int:
        return frame.id if isinstance(frame, Frame) else frame

    def add_frame(self, frame: Frame) -> int:
        """Take ownership of a frame

        :param frame: Frame to store
        :type frame: Frame

        :raises FrameReferenceError: If `frame` is not a Frame

        :return: Frame id
        :rtype: int
        """
        if not isinstance(frame, Frame):
            raise FrameReferenceError(f"Expected a Frame, got {type(frame).__name__}")

        self.add_node(frame.id, frame=frame)
        log.debug("Added frame %d (%s)", frame.id, frame.name)
        return frame.id

    def add_frames_from(self, frames: typ.Iterable[Frame]) -> list[int]:
        return [self.add_frame(frame) for frame in frames]

    def frame(self, key: FrameKey) -> Frame:
        """Look up an owned frame

        :param key: Frame id or frame
        :type key: int | Frame

        :raises KeyError: If the frame is not in the tree

        :return: Owned frame
        :rtype: Frame
        """
        return self.nodes[self._key(key)]['frame']

    def frames(self) -> typ.Iterator[Frame]:
        for _, frame in self.nodes(data='frame'):
            yield frame

    def by_name(self, name: str) -> list[Frame]:
        """Frames with the given name, in insertion order"""
        return [frame for frame in self.frames() if frame.name == name]

    def remove_frame(self, key: FrameKey) -> Frame:
        """Release ownership of a frame and drop its edges

        The relatives of the removed frame are not modified; once the frame is
        garbage collected their references to it become stale.

        :param key: Frame id or frame
        :type key: int | Frame

        :raises KeyError: If the frame is not in the tree

        :return: Released frame
        :rtype: Frame
        """
        frame = self.frame(key)
        self.remove_node(frame.id)
        log.debug("Removed frame %d (%s)", frame.id, frame.name)
        return frame

    # Linkage
    def connect(self, parent: FrameKey, child: FrameKey):
        """Link two owned frames in both directions

        Sets the child's parent, appends the child to the parent's children,
        and records the parent to child edge. Frames passed as objects are
        added to the tree first.

        :param parent: Parent frame or id
        :type parent: int | Frame

        :param child: Child frame or id
        :type child: int | Frame
        """
        for frame in (parent, child):
            if isinstance(frame, Frame) and frame.id not in self:
                self.add_frame(frame)

        p, c = self.frame(parent), self.frame(child)
        c.set_parent(p)
        p.add_child(c)

        self.add_edge(p.id, c.id)

    def roots(self) -> list[Frame]:
        """Owned frames without a parent edge in the tree"""
        return [self.frame(n) for n, degree in self.in_degree() if degree == 0]

    # Traversal
    def topological_frames(self) -> list[Frame]:
        """Owned frames ordered so every parent precedes its children

        :raises CyclicTreeError: If the parent to child edges form a cycle

        :return: Frames in root to leaf order
        :rtype: list[Frame]
        """
        try:
            order = list(nx.topological_sort(self))
        except nx.NetworkXUnfeasible as err:
            cycle = nx.find_cycle(self)
            raise CyclicTreeError(f"Frame relations contain a cycle: {cycle}") from err

        return [self.frame(n) for n in order]

    def update_transforms(self) -> int:
        """Derive every transform from origins in root to leaf order

        Each frame reads its own parent reference, which is expected to match
        the tree edge when frames were linked with :meth:`connect`.

        :raises CyclicTreeError: If the parent to child edges form a cycle

        :return: Number of transforms recomputed
        :rtype: int
        """
        updated = sum(frame.update_transformation_from_origin()
                      for frame in self.topological_frames())

        log.info("Updated %d of %d frame transforms", updated, self.number_of_nodes())
        return updated

    def get_path(self, source: FrameKey, target: FrameKey) -> list[int]:
        """Frame ids connecting two frames through the tree

        :param source: Source frame or id
        :type source: int | Frame

        :param target: Target frame or id
        :type target: int | Frame

        :raises networkx.NetworkXNoPath: If the frames are not connected

        :return: Frame ids from source to target inclusive
        :rtype: list[int]
        """
        source, target = self._key(source), self._key(target)

        if (source, target) in self._path:
            # Path previously cached
            return self._path[(source, target)]
        elif (target, source) in self._path:
            # Reverse path previously cached
            self._path[(source, target)] = self._path[(target, source)][::-1]
            return self._path[(source, target)]

        # Path not previously cached
        self._path[(source, target)] = nx.shortest_path(
            self.to_undirected(as_view=True), source, target)
        return self._path[(source, target)]
