# quadtree.py

import numpy as np
from collections import namedtuple
import logging

logger = logging.getLogger("crystal_sim")


class BoundingBox(namedtuple('BoundingBox', ['x', 'y', 'half_width', 'half_height'])):
    """A rectangle given by its center and half extents. Edges are inclusive."""
    __slots__ = ()

    def contains(self, point) -> bool:
        return (
            self.x - self.half_width <= point[0] <= self.x + self.half_width and
            self.y - self.half_height <= point[1] <= self.y + self.half_height
        )

    def intersects(self, other: "BoundingBox") -> bool:
        return not (
            other.x - other.half_width > self.x + self.half_width or
            other.x + other.half_width < self.x - self.half_width or
            other.y - other.half_height > self.y + self.half_height or
            other.y + other.half_height < self.y - self.half_height
        )

    @classmethod
    def around(cls, point, radius: float) -> "BoundingBox":
        """The square enclosing a circle of the given radius."""
        return cls(float(point[0]), float(point[1]), radius, radius)


class QuadTree:
    """
    Region quad-tree over particles, used to find link candidates without
    comparing every pair.

    A node stores particles directly until it holds `capacity` of them. The
    next insert subdivides it into NE/NW/SE/SW children and sends the particle
    to every child whose box contains it, so a particle sitting on a split line
    can be stored in more than one child. Queries de-duplicate by particle id.

    Data Contract:
    - Inputs: boundary (BoundingBox), capacity (int >= 1), max_depth (int).
    - Invariants: positions must not change while the tree is in use. The tree
      has no relocation, it is rebuilt from scratch every tick.
    """
    def __init__(self, boundary: BoundingBox, capacity: int = 4, max_depth: int = 16, _depth: int = 0):
        if capacity < 1:
            raise ValueError(f"QuadTree capacity must be at least 1, got {capacity}")
        self.boundary = boundary
        self.capacity = capacity
        self.max_depth = max_depth
        self.depth_level = _depth
        self.particles = []
        self.divided = False
        self.northeast = None
        self.northwest = None
        self.southeast = None
        self.southwest = None

    @classmethod
    def build(cls, particles, capacity: int = 4, max_depth: int = 16) -> "QuadTree":
        """
        Builds a tree whose root covers every given particle. The root is sized
        from the particles themselves, not the region, because a particle can
        overshoot the region by one tick before it is reflected.
        """
        particles = list(particles)
        if particles:
            positions = np.array([p.position for p in particles])
            low = positions.min(axis=0)
            high = positions.max(axis=0)
        else:
            low = high = np.zeros(2)
        center = (low + high) / 2
        # Square root box, slightly padded so the extreme points are strictly inside.
        half = max(float(np.max(high - low)) / 2, 1.0) * 1.01
        tree = cls(BoundingBox(float(center[0]), float(center[1]), half, half), capacity, max_depth)
        for particle in particles:
            tree.insert(particle)
        return tree

    def subdivide(self):
        x, y, w, h = self.boundary
        half_w, half_h = w / 2, h / 2
        child_depth = self.depth_level + 1
        self.northeast = QuadTree(BoundingBox(x + half_w, y - half_h, half_w, half_h),
                                  self.capacity, self.max_depth, child_depth)
        self.northwest = QuadTree(BoundingBox(x - half_w, y - half_h, half_w, half_h),
                                  self.capacity, self.max_depth, child_depth)
        self.southeast = QuadTree(BoundingBox(x + half_w, y + half_h, half_w, half_h),
                                  self.capacity, self.max_depth, child_depth)
        self.southwest = QuadTree(BoundingBox(x - half_w, y + half_h, half_w, half_h),
                                  self.capacity, self.max_depth, child_depth)
        self.divided = True

    def children(self):
        if not self.divided:
            return ()
        return (self.northeast, self.northwest, self.southeast, self.southwest)

    def insert(self, particle) -> bool:
        """Returns False if the particle lies outside this node's boundary."""
        if not self.boundary.contains(particle.position):
            return False

        # Coincident points would subdivide forever, so the deepest level just overflows.
        if len(self.particles) < self.capacity or self.depth_level >= self.max_depth:
            self.particles.append(particle)
            return True

        if not self.divided:
            self.subdivide()

        inserted = False
        for child in self.children():
            inserted = child.insert(particle) or inserted
        return inserted

    def query_range(self, box: BoundingBox):
        """Every stored particle whose position lies inside `box`."""
        found = {}
        self._collect(box, found)
        return list(found.values())

    def _collect(self, box: BoundingBox, found: dict):
        if not self.boundary.intersects(box):
            return
        for particle in self.particles:
            if box.contains(particle.position):
                found[particle.id] = particle
        for child in self.children():
            child._collect(box, found)

    def query_radius(self, point, radius: float):
        """Every stored particle strictly closer than `radius` to `point`."""
        radius_sq = radius * radius
        result = []
        for particle in self.query_range(BoundingBox.around(point, radius)):
            dx = particle.position[0] - point[0]
            dy = particle.position[1] - point[1]
            if dx * dx + dy * dy < radius_sq:
                result.append(particle)
        return result

    def depth(self) -> int:
        if not self.divided:
            return 1
        return 1 + max(child.depth() for child in self.children())

    def __len__(self):
        seen = set()
        stack = [self]
        while stack:
            node = stack.pop()
            seen.update(p.id for p in node.particles)
            stack.extend(node.children())
        return len(seen)
