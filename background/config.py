"""
Config Module - Particle background configuration and presets

A ParticleConfig is immutable. Changing the fields listed in REBUILD_FIELDS
on a running background tears the scene down and builds it again, since the
particle buffers are sized and coloured once at construction.
"""

from dataclasses import dataclass, fields, replace
from typing import Optional, Tuple

from .timeline import EASES

MOTIONS = ('drift', 'wave')

REBUILD_FIELDS = (
    'count', 'size', 'color', 'palette', 'motion', 'spread', 'speed',
    'antialias', 'alpha', 'clear_color',
)


def parse_color(value):
    """
    Convert a ``#RRGGBB`` (or ``#RGB``) string into an RGB triple in 0..1

    Args:
        value (str | tuple): Hex colour string or an RGB triple already in 0..1

    Returns:
        tuple: (r, g, b) floats
    """
    if isinstance(value, (tuple, list)):
        if len(value) != 3:
            raise ValueError(f"RGB colour needs 3 components, got {len(value)}")
        return tuple(float(c) for c in value)

    text = str(value).strip().lstrip('#')
    if len(text) == 3:
        text = ''.join(ch * 2 for ch in text)
    if len(text) != 6:
        raise ValueError(f"Invalid colour: {value!r}")
    try:
        return tuple(int(text[i:i + 2], 16) / 255.0 for i in (0, 2, 4))
    except ValueError:
        raise ValueError(f"Invalid colour: {value!r}") from None


@dataclass(frozen=True)
class ParticleConfig:
    count: int = 300
    size: float = 0.05
    color: str = '#8A2BE2'
    antialias: bool = True
    alpha: bool = True
    clear_color: str = '#000000'

    spread: float = 15.0
    speed: float = 0.01
    palette: Optional[Tuple[str, ...]] = None
    motion: str = 'drift'
    pointer_reactive: bool = False

    opacity: float = 0.6
    ease: str = 'power2.inOut'
    fade_duration: float = 2.0

    fov: float = 60.0
    camera_z: float = 10.0
    rotation_speed: Tuple[float, float, float] = (0.0, 0.0005, 0.0)

    def __post_init__(self):
        if not isinstance(self.count, int) or isinstance(self.count, bool) or self.count <= 0:
            raise ValueError(f"count must be a positive integer, got {self.count!r}")
        if self.size <= 0:
            raise ValueError(f"size must be positive, got {self.size!r}")
        if self.motion not in MOTIONS:
            raise ValueError(f"motion must be one of {MOTIONS}, got {self.motion!r}")
        if not 0.0 <= self.opacity <= 1.0:
            raise ValueError(f"opacity must be within 0..1, got {self.opacity!r}")
        if self.ease not in EASES:
            raise ValueError(f"ease must be one of {sorted(EASES)}, got {self.ease!r}")
        if self.palette is not None:
            if not self.palette:
                raise ValueError("palette must not be empty")
            # Lists are accepted for convenience but stored as a tuple so the
            # config stays hashable and comparable.
            object.__setattr__(self, 'palette', tuple(self.palette))
            for entry in self.palette:
                parse_color(entry)
        parse_color(self.color)
        parse_color(self.clear_color)

    @property
    def rgb(self):
        return parse_color(self.color)

    @property
    def palette_rgb(self):
        if self.palette is None:
            return None
        return [parse_color(entry) for entry in self.palette]

    def requires_rebuild(self, other):
        """True when switching to ``other`` invalidates the particle buffers."""
        return any(getattr(self, name) != getattr(other, name) for name in REBUILD_FIELDS)

    def with_changes(self, **changes):
        unknown = set(changes) - {f.name for f in fields(self)}
        if unknown:
            raise TypeError(f"Unknown particle config fields: {', '.join(sorted(unknown))}")
        return replace(self, **changes)


def floating_particles(**overrides):
    """Section background: slow drifting points bounded to the 7.5 cube"""
    return ParticleConfig(**overrides)


def hero_scene(**overrides):
    """Hero background: three-colour wave field that follows the pointer"""
    options = dict(
        count=1500,
        size=0.05,
        spread=10.0,
        palette=('#8A2BE2', '#00BFFF', '#FF4500'),
        motion='wave',
        pointer_reactive=True,
        opacity=0.7,
        ease='power2.out',
        fov=75.0,
        camera_z=5.0,
        rotation_speed=(0.0003, 0.0005, 0.0),
    )
    options.update(overrides)
    return ParticleConfig(**options)


PRESETS = {
    'floating': floating_particles,
    'hero': hero_scene,
}

__all__ = [
    'ParticleConfig',
    'parse_color',
    'floating_particles',
    'hero_scene',
    'PRESETS',
    'REBUILD_FIELDS',
]
