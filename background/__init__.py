"""
Background Package - Animated particle background for the portfolio page
"""

from .config import ParticleConfig, floating_particles, hero_scene, parse_color, PRESETS
from .controller import AnimatedBackground, BackgroundController, ControllerState
from .exceptions import SetupError
from .field import ParticleField
from .frames import FrameLoop
from .timeline import Timeline

__all__ = [
    'AnimatedBackground',
    'BackgroundController',
    'ControllerState',
    'FrameLoop',
    'ParticleConfig',
    'ParticleField',
    'PRESETS',
    'SetupError',
    'Timeline',
    'floating_particles',
    'hero_scene',
    'parse_color',
]
