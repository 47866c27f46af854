# crystal.py

import logging
import numpy as np
from edges import EdgeDeriver, sample_edge_color
from particle_store import ParticleStore
from population import PopulationManager
from proximity_graph import ProximityGraphBuilder
import settings
import simulator

logger = logging.getLogger("crystal_sim")

class Crystal:
    """
    One proximity graph: its particles, links and edges inside one region.

    Every tick runs the same fixed sequence to completion:
        1. rebuild links from the current positions
        2. prune particles with too few links
        3. derive edges from mutually linked triples
        4. advance positions and reflect at the boundary

    Data Contract:
    - Inputs:
        - config (CrystalConfig): validated simulation options.
        - rng (np.random.Generator): the master seeded random number generator.
        - center (tuple): center of the region in world coordinates.
    - Outputs: read-only iterations over particles, links and edges for a renderer.
    - Side Effects: owns and mutates all particle, link and edge state.
    - Invariants: the store is consistent (see ParticleStore) between ticks
      and between mutator calls.
    """
    def __init__(self, config: settings.CrystalConfig, rng: np.random.Generator, center=(0.0, 0.0)):
        self.config = config
        self.rng = rng
        self.center = tuple(center)
        self._handlers = {
            settings.ParticleNumberChanged: self._on_particle_number,
            settings.ParticleSpeedChanged: self._on_particle_speed,
            settings.LinkRadiusChanged: self._on_config_only,
            settings.LinkThresholdChanged: self._on_config_only,
            settings.DisplayOptionChanged: self._on_config_only,
            settings.PauseChanged: self._on_pause,
        }
        self.reset()

    def reset(self):
        """Discards all state and rebuilds it from the current config."""
        self.region = self.config.region(self.center)
        self.store = ParticleStore()
        self.population = PopulationManager(self.store, self.region, self.rng, self.config.particle_speed)
        self.graph = ProximityGraphBuilder(self.config.quadtree_threshold, self.config.quadtree_capacity)
        self.edge_deriver = EdgeDeriver(self._sample_color)
        self.tick_count = 0

        self.population.resize_population(self.config.particle_number)
        self.graph.rebuild_links(self.store, self.config.link_radius)
        self.edge_deriver.derive_edges(self.store)

        logger.info(
            f"Crystal initialized at {self.region.center} with distance {self.region.distance}: "
            f"{len(self.store)} particles, {len(self.store.link_pairs())} links, {len(self.store.edges)} edges."
        )

    def _sample_color(self):
        return sample_edge_color(self.rng, self.config.edge_color, self.config.edge_color_jitter)

    def tick(self):
        """Runs one full simulation step. Does nothing while paused."""
        if self.config.pause:
            return False

        self.graph.rebuild_links(self.store, self.config.link_radius)
        self.population.prune(self.config.link_threshold)
        self.edge_deriver.derive_edges(self.store)
        simulator.advance_all(self.store, self.region)

        self.tick_count += 1
        return True

    # --- Mutators ---

    def add_particle(self):
        return self.population.add_particle()

    def remove_particle(self, particle_id=None):
        return self.population.remove_particle(particle_id)

    def set_speed(self, value: float):
        """Validated like any other config change, so config and particles stay in step."""
        return self.apply(settings.ParticleSpeedChanged(value))

    def resize_population(self, target: int):
        """Returns (added, removed). The target becomes the configured particle number."""
        return self.apply(settings.ParticleNumberChanged(target))

    def apply(self, change):
        """
        Applies a typed config-change event. The new config is validated
        before anything changes, an invalid value raises ConfigValidationError
        and leaves the crystal untouched.
        """
        handler = self._handlers.get(type(change))
        if handler is None:
            raise TypeError(f"Unsupported configuration change: {change!r}")
        self.config = settings.apply_change(self.config, change)
        result = handler(change)
        logger.info(f"Applied {change}.")
        return result

    def _on_particle_number(self, change):
        return self.population.resize_population(change.value)

    def _on_particle_speed(self, change):
        self.population.set_speed(change.value)

    def _on_pause(self, change):
        logger.info("Crystal paused." if change.value else "Crystal resumed.")

    def _on_config_only(self, change):
        # Read from self.config at the start of the next tick or frame.
        pass

    # --- Read-only views for the renderer ---

    def iter_particles(self):
        return iter(self.store)

    def iter_links(self):
        """(position a, position b) for every link, each link once."""
        particles = self.store.particles
        for a_id, b_id in sorted(self.store.link_pairs()):
            yield particles[a_id].position, particles[b_id].position

    def iter_edges(self):
        """((position a, position b, position c), color) for every edge."""
        particles = self.store.particles
        for edge in list(self.store.edges.values()):
            yield tuple(particles[m].position for m in edge.members), edge.color

    def stats(self) -> dict:
        return {
            'tick': self.tick_count,
            'particles': len(self.store),
            'links': len(self.store.link_pairs()),
            'edges': len(self.store.edges),
            'strategy': self.graph.last_strategy,
        }
