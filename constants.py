# constants.py

"""
Application Constants

This module defines static values for the front end (window, line widths, controls).
Anything that shapes the simulation itself lives in config.json instead and is
validated by settings.py.

Data Contract:
- All values are immutable constants.
- Units are specified in comments where applicable.
"""

# Screen dimensions
WIDTH = 1000  # Pixels
HEIGHT = 800  # Pixels

# Framerate
FPS = 60  # Frames per second

# Window Title
TITLE = "Crystals"

# Line widths used by the renderer
LINK_LINE_WIDTH = 7  # Pixels. Links are drawn in the background color to split the shards.
BORDER_LINE_WIDTH = 1  # Pixels
POINT_RADIUS = 2  # Pixels

# Keyboard step sizes, one key press changes the option by this much.
PARTICLE_NUMBER_STEP = 5
PARTICLE_SPEED_STEP = 0.1
LINK_RADIUS_STEP = 10
LINK_THRESHOLD_STEP = 1

# Status logging cadence
LOG_INTERVAL_TICKS = 100
