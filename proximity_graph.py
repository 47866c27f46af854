# proximity_graph.py

import numpy as np
import logging
import numba
from quadtree import QuadTree

logger = logging.getLogger("crystal_sim")

# --- JIT-Compiled Pair Scan ---
# Kept outside the builder class and operating only on NumPy arrays and
# scalars, as required by Numba's nopython mode.

@numba.jit(nopython=True)
def _close_pairs_jit(positions, radius):
    """
    Naive O(n^2) scan. Marks close[i, j] (i < j) when the two particles are
    strictly closer than `radius`. Each unordered pair is evaluated once.
    """
    n = positions.shape[0]
    close = np.zeros((n, n), dtype=np.bool_)
    radius_sq = radius * radius
    for i in range(n):
        for j in range(i + 1, n):
            dx = positions[j, 0] - positions[i, 0]
            dy = positions[j, 1] - positions[i, 1]
            if dx * dx + dy * dy < radius_sq:
                close[i, j] = True
    return close


class ProximityGraphBuilder:
    """
    Recomputes the link relation of a store from the current positions.

    Two particles are linked iff their distance is strictly below
    link_radius / 2. The decision is made once per unordered pair and applied
    to both particles in the same step, so the relation is always symmetric.

    Data Contract:
    - Inputs:
        - quadtree_threshold (int): population at which the quad-tree replaces
          the naive scan. 0 means always use the quad-tree.
        - quadtree_capacity (int): node capacity of the quad-tree.
    - Side Effects: links and unlinks particles in the store. Unlinking deletes
      the edges that relied on the broken link.
    """
    def __init__(self, quadtree_threshold: int = 64, quadtree_capacity: int = 4):
        self.quadtree_threshold = quadtree_threshold
        self.quadtree_capacity = quadtree_capacity
        self.last_strategy = None

    def uses_quadtree(self, population: int) -> bool:
        return population >= self.quadtree_threshold

    def rebuild_links(self, store, link_radius: float):
        """
        Brings the store's links in line with the current positions.
        Returns (added, broken) as sets of (smaller id, larger id) pairs.
        """
        particles = list(store)
        radius = link_radius / 2

        if self.uses_quadtree(len(particles)):
            self.last_strategy = 'quadtree'
            desired = self.quadtree_pairs(particles, radius, self.quadtree_capacity)
        else:
            self.last_strategy = 'naive'
            desired = self.naive_pairs(particles, radius)

        current = store.link_pairs()
        added = desired - current
        broken = current - desired

        for a_id, b_id in broken:
            store.unlink(a_id, b_id)
        for a_id, b_id in added:
            store.link(a_id, b_id)

        if added or broken:
            logger.debug(
                f"Links rebuilt ({self.last_strategy}): +{len(added)} / -{len(broken)}, "
                f"total {len(desired)}."
            )
        return added, broken

    @staticmethod
    def naive_pairs(particles, radius: float):
        """All close pairs found by comparing every pair."""
        if len(particles) < 2:
            return set()
        positions = np.array([p.position for p in particles], dtype=np.float64)
        close = _close_pairs_jit(positions, float(radius))
        pairs = set()
        for i, j in np.argwhere(close):
            a_id, b_id = particles[i].id, particles[j].id
            pairs.add((a_id, b_id) if a_id < b_id else (b_id, a_id))
        return pairs

    @staticmethod
    def quadtree_pairs(particles, radius: float, capacity: int = 4):
        """
        All close pairs found through a freshly built quad-tree. Only
        particles inside the query square around each particle are compared.
        """
        if len(particles) < 2:
            return set()
        tree = QuadTree.build(particles, capacity=capacity)
        pairs = set()
        for particle in particles:
            for candidate in tree.query_radius(particle.position, radius):
                # Visit each unordered pair from its lower id only.
                if candidate.id > particle.id:
                    pairs.add((particle.id, candidate.id))
        return pairs
