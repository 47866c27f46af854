# population.py

import logging
import numpy as np
from particle import Particle

logger = logging.getLogger("crystal_sim")

# Each direction component is drawn independently from these.
DIRECTIONS = np.array([1.0, -1.0])

class PopulationManager:
    """
    Adds and removes particles one at a time, so the store's invariants hold
    after every single step. Population changes of any size are expressed as a
    sequence of add_particle() / remove_particle() calls.

    Data Contract:
    - Inputs:
        - store (ParticleStore): the arena to populate.
        - region (Region): where new particles are placed.
        - rng (np.random.Generator): the seeded generator for positions and directions.
        - speed (float): speed per axis given to new particles.
    - Side Effects: inserts and removes particles in the store.
    """
    def __init__(self, store, region, rng: np.random.Generator, speed: float):
        self.store = store
        self.region = region
        self.rng = rng
        self.speed = speed

    def create_particle(self, region, speed) -> Particle:
        """A particle at a uniformly random spot inside the padded region, moving diagonally."""
        position = self.rng.uniform(region.lower, region.upper)
        direction = self.rng.choice(DIRECTIONS, size=2)
        return Particle(self.store.next_id(), position, direction, speed)

    def add_particle(self) -> Particle:
        particle = self.create_particle(self.region, self.speed)
        self.store.insert(particle)
        logger.debug(f"Added particle {particle.id}. Population: {len(self.store)}.")
        return particle

    def remove_particle(self, particle_id=None) -> bool:
        """
        Removes a particle with its links and edges. Without an id the most
        recently added particle goes. Unknown ids and an empty store are no-ops.
        """
        if particle_id is None:
            if not self.store.particles:
                return False
            particle_id = next(reversed(self.store.particles))
        removed = self.store.discard(particle_id)
        if removed:
            logger.debug(f"Removed particle {particle_id}. Population: {len(self.store)}.")
        return removed

    def resize_population(self, target: int):
        """Adds or removes particles until the population equals target. Returns (added, removed)."""
        if target < 0:
            raise ValueError(f"Population target must not be negative, got {target}")
        added = removed = 0
        while len(self.store) < target:
            self.add_particle()
            added += 1
        while len(self.store) > target:
            self.remove_particle()
            removed += 1
        if added or removed:
            logger.info(f"Population resized to {target} (+{added} / -{removed}).")
        return added, removed

    def prune(self, threshold: int):
        """
        Removes every particle with fewer than `threshold` links. The victims
        are chosen from one snapshot taken before any removal, so a particle
        does not die just because a neighbor was pruned this tick.
        """
        if threshold <= 0:
            return []
        victims = [p.id for p in self.store if len(p.links) < threshold]
        for particle_id in victims:
            self.remove_particle(particle_id)
        if victims:
            logger.debug(f"Pruned {len(victims)} particle(s) below {threshold} links.")
        return victims

    def set_speed(self, speed: float):
        """New speed for every particle. Directions are kept, velocities re-derived."""
        self.speed = speed
        for particle in self.store:
            particle.set_speed(speed)
