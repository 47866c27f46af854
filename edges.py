# edges.py

import logging
from dataclasses import dataclass

import numpy as np

logger = logging.getLogger("crystal_sim")


def edge_id_for(a_id: int, b_id: int, c_id: int) -> str:
    """Canonical edge id: the member ids sorted and joined, so any ordering maps to one id."""
    return "-".join(str(member_id) for member_id in sorted((a_id, b_id, c_id)))


def sample_edge_color(rng: np.random.Generator, base_color, jitter: int):
    """Base color with every channel shifted by up to `jitter`, clipped to 0..255."""
    offsets = rng.integers(-jitter, jitter + 1, size=3)
    channels = np.clip(np.asarray(base_color, dtype=int) + offsets, 0, 255)
    return tuple(int(c) for c in channels)


@dataclass(frozen=True)
class Edge:
    """
    A filled triangle spanning three mutually linked particles.

    - id: canonical id from edge_id_for().
    - members: the three particle ids in the order they were discovered.
    - color: RGB sampled once when the edge is created.
    """
    id: str
    members: tuple
    color: tuple


class EdgeDeriver:
    """
    Finds every mutually linked triple in the link graph and keeps one Edge
    per triple in the store.

    Triples are discovered many times (from each of their links and each
    witness), the canonical id is what keeps the collection free of duplicates.
    Edges are deleted by the store when one of their links breaks, so after
    derive_edges() the collection is exactly the set of triangles in the graph.

    Data Contract:
    - Inputs: color_sampler, a zero-argument callable returning an RGB tuple.
    - Side Effects: adds edges to the store passed to derive_edges().
    """
    def __init__(self, color_sampler):
        self.color_sampler = color_sampler

    def derive_edges(self, store):
        """Creates the missing edges. Returns the ids of the new ones."""
        created = []
        for particle in store:
            for linked_id in particle.links:
                # Each link is walked from its lower end only, the witness loop covers the rest.
                if linked_id < particle.id:
                    continue
                linked = store.get(linked_id)
                for mutual_id in particle.links & linked.links:
                    edge_id = edge_id_for(particle.id, linked_id, mutual_id)
                    if edge_id in store.edges:
                        continue
                    edge = Edge(edge_id, (particle.id, linked_id, mutual_id), self.color_sampler())
                    store.add_edge(edge)
                    created.append(edge_id)

        if created:
            logger.debug(f"Derived {len(created)} new edge(s). Total edges: {len(store.edges)}.")
        return created
