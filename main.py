# main.py

import pygame
import constants
import json
import logging
import logger_setup
import numpy as np
import renderer
import settings
from crystal import Crystal

# Get the application's dedicated logger
logger = logging.getLogger("crystal_sim")

# Key bindings. Each maps the current config to the change event the key requests.
KEY_BINDINGS = {
    pygame.K_UP: lambda c: settings.ParticleNumberChanged(c.particle_number + constants.PARTICLE_NUMBER_STEP),
    pygame.K_DOWN: lambda c: settings.ParticleNumberChanged(c.particle_number - constants.PARTICLE_NUMBER_STEP),
    pygame.K_RIGHT: lambda c: settings.ParticleSpeedChanged(round(c.particle_speed + constants.PARTICLE_SPEED_STEP, 2)),
    pygame.K_LEFT: lambda c: settings.ParticleSpeedChanged(round(c.particle_speed - constants.PARTICLE_SPEED_STEP, 2)),
    pygame.K_RIGHTBRACKET: lambda c: settings.LinkRadiusChanged(c.link_radius + constants.LINK_RADIUS_STEP),
    pygame.K_LEFTBRACKET: lambda c: settings.LinkRadiusChanged(c.link_radius - constants.LINK_RADIUS_STEP),
    pygame.K_EQUALS: lambda c: settings.LinkThresholdChanged(c.link_threshold + constants.LINK_THRESHOLD_STEP),
    pygame.K_MINUS: lambda c: settings.LinkThresholdChanged(c.link_threshold - constants.LINK_THRESHOLD_STEP),
    pygame.K_p: lambda c: settings.DisplayOptionChanged(settings.DisplayOption.POINTS, not c.display_points),
    pygame.K_b: lambda c: settings.DisplayOptionChanged(settings.DisplayOption.BORDER, not c.display_border),
    pygame.K_l: lambda c: settings.DisplayOptionChanged(settings.DisplayOption.LINKS, not c.display_links),
    pygame.K_e: lambda c: settings.DisplayOptionChanged(settings.DisplayOption.EDGES, not c.display_edges),
    pygame.K_SPACE: lambda c: settings.PauseChanged(not c.pause),
}

def handle_key(crystal: Crystal, key: int):
    """Turns a key press into a config change. Rejected values are logged, not fatal."""
    if key == pygame.K_r:
        crystal.reset()
        return
    binding = KEY_BINDINGS.get(key)
    if binding is None:
        return
    change = binding(crystal.config)
    try:
        crystal.apply(change)
    except settings.ConfigValidationError as e:
        logger.warning(f"Ignored {change}: {e}")

def run_simulation_loop(crystal, screen, clock):
    """Runs one tick and draws one frame per iteration until the window closes."""
    running = True
    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                handle_key(crystal, event.key)

        ticked = crystal.tick()

        # --- Logging (throttled) ---
        if ticked and crystal.tick_count % constants.LOG_INTERVAL_TICKS == 0:
            stats = crystal.stats()
            logger.debug(
                f"Tick={stats['tick']}, "
                f"Particles={stats['particles']}, "
                f"Links={stats['links']}, "
                f"Edges={stats['edges']}, "
                f"Strategy={stats['strategy']}"
            )
            errors = crystal.store.consistency_errors()
            if errors:
                logger.warning(f"Store inconsistent at tick {stats['tick']}: {errors[:5]}")

        renderer.draw_crystal(screen, crystal)
        pygame.display.flip()
        clock.tick(constants.FPS)

def main():
    """
    Main function to initialize and run the crystal simulation.
    """
    # --- Setup ---
    with open('config.json', 'r') as f:
        config = json.load(f)
    logger_setup.setup_logging(config)

    crystal_config = settings.CrystalConfig.from_dict(config['simulation'])

    logger.info("Application starting...")
    logger.info(f"Loaded configuration: {config}")

    # Initialize the master random number generator (RNG)
    rng = np.random.default_rng(config['master_seed'])
    logger.info(f"Master RNG initialized with seed: {config['master_seed']}")

    # --- Initialization ---
    pygame.init()
    screen = pygame.display.set_mode((constants.WIDTH, constants.HEIGHT))
    pygame.display.set_caption(constants.TITLE)
    clock = pygame.time.Clock()

    crystal = Crystal(crystal_config, rng, center=(constants.WIDTH / 2, constants.HEIGHT / 2))

    run_simulation_loop(crystal, screen, clock)

    logger.info("Application shutting down.")
    pygame.quit()

if __name__ == "__main__":
    main()
