# particle.py

import logging
import numpy as np

logger = logging.getLogger("crystal_sim")

class Particle:
    """
    Represents a single particle of a crystal.

    Relations to other particles and edges are held as identities, never as
    references, so removing a particle is a pure id-based prune in the store.

    Data Contract:
    - id (int): unique within the owning store, stable for the particle's lifetime.
    - position (np.ndarray): (x, y).
    - direction (np.ndarray): each component is -1.0 or +1.0.
    - speed (np.ndarray): non-negative speed per axis.
    - velocity (np.ndarray): always speed * direction, component-wise.
    - links (set[int]): ids of linked neighbors. Maintained symmetrically by the store.
    - edges (set[str]): ids of the edges this particle is a member of.
    """
    def __init__(self, particle_id: int, position, direction, speed):
        self.id = particle_id
        self.position = np.array(position, dtype=float)
        self.direction = np.array(direction, dtype=float)
        self.speed = np.abs(np.broadcast_to(np.asarray(speed, dtype=float), (2,)))
        self.velocity = self.speed * self.direction
        self.links = set()
        self.edges = set()

        logger.debug(f"Particle created: id={self.id}, pos={self.position}, dir={self.direction}")

    def move(self):
        """p_new = p_old + v"""
        self.position += self.velocity

    def reverse(self, axis: int):
        """Flips the direction along one axis (0 = x, 1 = y) and re-derives the velocity."""
        self.direction[axis] = -self.direction[axis]
        self.velocity = self.speed * self.direction

    def set_speed(self, speed):
        self.speed = np.abs(np.broadcast_to(np.asarray(speed, dtype=float), (2,)))
        self.velocity = self.speed * self.direction

    def distance_to(self, other: "Particle") -> float:
        return float(np.linalg.norm(self.position - other.position))

    def __repr__(self):
        return f"Particle(id={self.id}, pos=({self.position[0]:.1f}, {self.position[1]:.1f}), links={len(self.links)})"
