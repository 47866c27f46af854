# settings.py

"""
Simulation configuration, the region definition, and the typed change events
the front end sends to a running Crystal.

Data Contract:
- CrystalConfig holds every recognized option as a pydantic model. Ranges and
  types are declared on the fields, unknown options are forbidden.
- from_dict() and apply_change() are the boundary where pydantic's
  ValidationError becomes ConfigValidationError.
- Region is the square the particles reflect inside. It validates on creation.
- Each config-change event carries exactly one option's new value.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Tuple

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, ValidationError, model_validator


class ConfigValidationError(ValueError):
    """Raised when a configuration value or region is outside its declared range."""


Channel = Annotated[StrictInt, Field(ge=0, le=255)]
Color = Tuple[Channel, Channel, Channel]


def _validated(model_cls, values: dict):
    try:
        return model_cls.model_validate(values)
    except ValidationError as e:
        raise ConfigValidationError(str(e)) from e


class Region(BaseModel):
    """The bounded square particles move inside."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    center: Tuple[float, float] = Field(description="(x, y) of the square")
    distance: float = Field(gt=0, description="Half-extent of the square")
    padding: float = Field(default=0.0, ge=0, description="Inner margin on every side")

    @model_validator(mode="after")
    def _padding_leaves_room(self):
        if self.padding >= self.distance:
            raise ValueError(
                f"padding ({self.padding}) must be smaller than distance ({self.distance})"
            )
        return self

    @property
    def lower(self) -> np.ndarray:
        """Lowest usable (x, y) once padding is applied."""
        return np.array(self.center) - self.distance + self.padding

    @property
    def upper(self) -> np.ndarray:
        """Highest usable (x, y) once padding is applied."""
        return np.array(self.center) + self.distance - self.padding


class CrystalConfig(BaseModel):
    """
    Every option a Crystal reads. Defaults match config.json.
    Instances are immutable; a change produces a new, re-validated config.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    particle_number: StrictInt = Field(default=25, ge=0, le=500, description="Target population")
    particle_speed: float = Field(default=0.3, ge=0.1, le=2.0, description="Speed per axis, per tick")
    link_radius: float = Field(default=200.0, ge=0.0, le=400.0, description="Particles link below half of this")
    link_threshold: StrictInt = Field(default=0, ge=0, le=20, description="Minimum links to survive pruning")
    distance: float = Field(default=200.0, ge=10.0, le=1000.0, description="Region half-extent")
    padding: float = Field(default=5.0, ge=0.0, le=50.0, description="Region inner margin")
    quadtree_threshold: StrictInt = Field(default=64, ge=0, le=100000,
                                          description="Population at which the quad-tree replaces the naive scan")
    quadtree_capacity: StrictInt = Field(default=4, ge=1, le=64, description="Particles per quad-tree node")
    edge_color: Color = Field(default=(210, 119, 95), description="Base fill color of edges")
    edge_color_jitter: StrictInt = Field(default=20, ge=0, le=127, description="Max per-channel color shift")
    background_color: Color = Field(default=(255, 255, 225), description="Canvas and link color")
    display_points: StrictBool = False
    display_border: StrictBool = False
    display_links: StrictBool = False
    display_edges: StrictBool = True
    pause: StrictBool = False

    @model_validator(mode="after")
    def _padding_leaves_room(self):
        # The region is derived from these two, so check them together now.
        if self.padding >= self.distance:
            raise ValueError(
                f"padding ({self.padding}) must be smaller than distance ({self.distance})"
            )
        return self

    def region(self, center) -> Region:
        return _validated(Region, {'center': tuple(center), 'distance': self.distance, 'padding': self.padding})

    @classmethod
    def from_dict(cls, section: dict) -> "CrystalConfig":
        """Builds a validated config from the 'simulation' section of config.json."""
        return _validated(cls, section)


# --- Config-change events ---

class DisplayOption(Enum):
    """Display toggles. They never affect the simulation itself."""
    POINTS = 'display_points'
    BORDER = 'display_border'
    LINKS = 'display_links'
    EDGES = 'display_edges'


@dataclass(frozen=True)
class ParticleNumberChanged:
    value: int


@dataclass(frozen=True)
class ParticleSpeedChanged:
    value: float


@dataclass(frozen=True)
class LinkRadiusChanged:
    value: float


@dataclass(frozen=True)
class LinkThresholdChanged:
    value: int


@dataclass(frozen=True)
class DisplayOptionChanged:
    option: DisplayOption
    value: bool


@dataclass(frozen=True)
class PauseChanged:
    value: bool


def apply_change(config: CrystalConfig, change) -> CrystalConfig:
    """
    Returns a new validated config with the change applied. The original config
    is untouched, so a rejected change leaves the caller's state as it was.
    """
    if isinstance(change, ParticleNumberChanged):
        update = {'particle_number': change.value}
    elif isinstance(change, ParticleSpeedChanged):
        update = {'particle_speed': change.value}
    elif isinstance(change, LinkRadiusChanged):
        update = {'link_radius': change.value}
    elif isinstance(change, LinkThresholdChanged):
        update = {'link_threshold': change.value}
    elif isinstance(change, DisplayOptionChanged):
        update = {change.option.value: change.value}
    elif isinstance(change, PauseChanged):
        update = {'pause': change.value}
    else:
        raise TypeError(f"Unsupported configuration change: {change!r}")
    # model_copy() skips validation, so the result goes through the model again.
    return _validated(CrystalConfig, config.model_copy(update=update).model_dump())
