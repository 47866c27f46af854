# renderer.py

import pygame
import constants

def _point(position):
    return (int(position[0]), int(position[1]))

def draw_crystal(screen: pygame.Surface, crystal):
    """
    Draws one frame of a crystal. Edges are filled first, then the links are
    drawn over them in the background color, which cuts the filled area into
    separate shards.
    """
    config = crystal.config
    screen.fill(config.background_color)

    if config.display_edges:
        for corners, color in crystal.iter_edges():
            pygame.draw.polygon(screen, color, [_point(c) for c in corners])

    if config.display_links:
        for start, end in crystal.iter_links():
            pygame.draw.line(screen, config.background_color, _point(start), _point(end),
                             constants.LINK_LINE_WIDTH)

    if config.display_points:
        for particle in crystal.iter_particles():
            pygame.draw.circle(screen, config.edge_color, _point(particle.position), constants.POINT_RADIUS)

    if config.display_border:
        region = crystal.region
        size = int(region.distance * 2)
        border = pygame.Rect(0, 0, size, size)
        border.center = _point(region.center)
        pygame.draw.rect(screen, config.edge_color, border, constants.BORDER_LINE_WIDTH)
