# particle_store.py

import itertools
import logging

logger = logging.getLogger("crystal_sim")

class ParticleStore:
    """
    Arena owning every live particle and edge of one crystal, addressed by id.

    All relation changes go through this class so both directions of a relation
    are updated in the same step.

    Data Contract:
    - particles (dict[int, Particle]): live particles in insertion order.
    - edges (dict[str, Edge]): live edges by canonical id.
    - Invariants:
        - Particle ids are never reused within a store.
        - a in particles[b].links  <=>  b in particles[a].links.
        - An edge id is in a particle's `edges` iff that particle is one of the
          edge's members and the edge is in `edges`.
        - Every member pair of a live edge is linked. Breaking a link deletes
          the edges that relied on it.
    """
    def __init__(self):
        self.particles = {}
        self.edges = {}
        self._id_counter = itertools.count()

    def next_id(self) -> int:
        return next(self._id_counter)

    def insert(self, particle):
        if particle.id in self.particles:
            raise ValueError(f"Particle id {particle.id} is already in the store")
        self.particles[particle.id] = particle

    def get(self, particle_id):
        return self.particles.get(particle_id)

    def ids(self):
        return list(self.particles)

    def __len__(self):
        return len(self.particles)

    def __contains__(self, particle_id):
        return particle_id in self.particles

    def __iter__(self):
        return iter(list(self.particles.values()))

    # --- Links ---

    def link(self, a_id: int, b_id: int) -> bool:
        """Links both particles to each other. Returns True if the link is new."""
        if a_id == b_id or a_id not in self.particles or b_id not in self.particles:
            return False
        a, b = self.particles[a_id], self.particles[b_id]
        if b_id in a.links:
            return False
        a.links.add(b_id)
        b.links.add(a_id)
        return True

    def unlink(self, a_id: int, b_id: int) -> bool:
        """
        Removes the link in both directions, and every edge that has both
        particles as members. Returns False if they were not linked.
        """
        a, b = self.particles.get(a_id), self.particles.get(b_id)
        if a is None or b is None or b_id not in a.links:
            return False
        a.links.discard(b_id)
        b.links.discard(a_id)
        for edge_id in a.edges & b.edges:
            self.remove_edge(edge_id)
        return True

    def link_pairs(self):
        """Every link once, as (smaller id, larger id)."""
        return {
            (particle_id, other_id)
            for particle_id, particle in self.particles.items()
            for other_id in particle.links
            if particle_id < other_id
        }

    # --- Edges ---

    def add_edge(self, edge) -> bool:
        """Registers an edge with the store and its members. Existing ids are left alone."""
        if edge.id in self.edges:
            return False
        self.edges[edge.id] = edge
        for member_id in edge.members:
            self.particles[member_id].edges.add(edge.id)
        return True

    def remove_edge(self, edge_id: str) -> bool:
        edge = self.edges.pop(edge_id, None)
        if edge is None:
            return False
        for member_id in edge.members:
            member = self.particles.get(member_id)
            if member is not None:
                member.edges.discard(edge_id)
        return True

    # --- Removal ---

    def discard(self, particle_id: int) -> bool:
        """
        Removes a particle with all of its relations. Unknown ids are ignored so
        overlapping cleanup cascades cannot corrupt the store.
        """
        particle = self.particles.get(particle_id)
        if particle is None:
            return False
        for neighbor_id in list(particle.links):
            self.unlink(particle_id, neighbor_id)
        for edge_id in list(particle.edges):
            self.remove_edge(edge_id)
        del self.particles[particle_id]
        return True

    def consistency_errors(self):
        """Describes every broken invariant. An empty list means the store is consistent."""
        errors = []
        for particle_id, particle in self.particles.items():
            for other_id in particle.links:
                other = self.particles.get(other_id)
                if other is None:
                    errors.append(f"particle {particle_id} links missing particle {other_id}")
                elif particle_id not in other.links:
                    errors.append(f"link {particle_id}->{other_id} has no reverse link")
            for edge_id in particle.edges:
                edge = self.edges.get(edge_id)
                if edge is None:
                    errors.append(f"particle {particle_id} references missing edge {edge_id}")
                elif particle_id not in edge.members:
                    errors.append(f"particle {particle_id} references edge {edge_id} it is not part of")
        for edge_id, edge in self.edges.items():
            for member_id in edge.members:
                member = self.particles.get(member_id)
                if member is None:
                    errors.append(f"edge {edge_id} references missing particle {member_id}")
                elif edge_id not in member.edges:
                    errors.append(f"edge {edge_id} is not registered with member {member_id}")
            for a_id, b_id in itertools.combinations(edge.members, 2):
                a = self.particles.get(a_id)
                if a is not None and b_id in self.particles and b_id not in a.links:
                    errors.append(f"edge {edge_id} spans unlinked pair {a_id}-{b_id}")
        return errors
