# simulator.py

"""
Moves particles and reflects them at the region boundary.

The boundary test runs on the position after the move and the position is
never clamped, so a particle can sit outside the usable area for up to one
tick's displacement before its direction flips back inward.

A flip happens only while the particle is still heading outward, not every
tick it is out of bounds, so one that overshoots by more than a tick keeps
returning instead of oscillating in place.
"""

import logging

logger = logging.getLogger("crystal_sim")


def advance(particle, region):
    """
    Applies one tick of motion to a particle.

    - Inputs: particle (Particle), region (Region).
    - Side Effects: updates position, and direction/velocity on a reflection.
    - Returns: True if the particle was reflected on either axis.
    """
    particle.move()
    lower = region.lower
    upper = region.upper
    reflected = False
    for axis in (0, 1):
        coordinate = particle.position[axis]
        # Only turn particles that are still heading outward.
        if (coordinate > upper[axis] and particle.direction[axis] > 0) or \
           (coordinate < lower[axis] and particle.direction[axis] < 0):
            particle.reverse(axis)
            reflected = True
    return reflected


def advance_all(particles, region):
    """Advances every particle, returning how many were reflected."""
    return sum(1 for particle in particles if advance(particle, region))
