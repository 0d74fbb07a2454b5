"""
Controller Module - Lifecycle of the animated particle background

BackgroundController moves through UNMOUNTED -> MOUNTING -> RUNNING and back
to UNMOUNTED. It owns the render context, the particle field, the frame loop
and a tween timeline; ``unmount`` releases them in that order:

    frame loop -> listeners -> drawing element -> geometry -> material
    -> renderer -> timeline

Cancelling the frame first guarantees no frame runs against freed buffers.
Event handlers only write plain data (pointer coordinates, camera aspect,
output size); everything else happens inside ``on_frame``.

AnimatedBackground is the page-facing wrapper: it turns setup failures into
an absent background instead of raising into the host.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Optional

from .backend import DisplaySurface, RenderBackend
from .config import ParticleConfig
from .context import RenderContext
from .exceptions import SetupError
from .field import ParticleField
from .frames import FrameLoop
from .scene import ORIGIN, BufferGeometry, Points, PointsMaterial
from .timeline import Timeline

logger = logging.getLogger(__name__)

POINTER_TRAVEL = 0.5
CAMERA_EASING = 0.05


class ControllerState(enum.Enum):
    UNMOUNTED = 'unmounted'
    MOUNTING = 'mounting'
    RUNNING = 'running'


@dataclass
class PointerState:
    """Normalised pointer position in -1..1, y up."""
    x: float = 0.0
    y: float = 0.0


class BackgroundController:
    def __init__(self, backend: RenderBackend, timeline: Optional[Timeline] = None, rng=None):
        self.backend = backend
        self.timeline = timeline if timeline is not None else Timeline()
        self.rng = rng
        self.state = ControllerState.UNMOUNTED
        self.config = None
        self.surface = None
        self.context = None
        self.field = None
        self.points = None
        self.pointer = PointerState()
        self._loop = None
        self._listeners = []

    @property
    def running(self):
        return self.state is ControllerState.RUNNING

    @property
    def frame_pending(self):
        return self._loop is not None and self._loop.pending

    def mount(self, surface: Optional[DisplaySurface], config: ParticleConfig) -> None:
        """
        Build the scene on ``surface`` and start the frame loop

        Args:
            surface: Display surface the drawing element is appended to
            config (ParticleConfig): Particle and camera settings

        Raises:
            SetupError: Surface missing or detached, already mounted, or the
                rendering backend failed. Partially created resources are
                released before raising.
        """
        if self.state is not ControllerState.UNMOUNTED:
            raise SetupError(f"Background is already {self.state.value}")
        if surface is None or not surface.is_attached:
            raise SetupError("Drawing surface is not attached to a display")

        self.state = ControllerState.MOUNTING
        self.config = config
        self.surface = surface
        self.pointer = PointerState()

        try:
            self.context = RenderContext.create(self.backend, surface, config)
            if not self.context.attached:
                raise SetupError("Drawing surface was detached during setup")

            self.field = ParticleField.random(
                config.count,
                config.spread,
                rng=self.rng,
                speed=config.speed if config.motion == 'drift' else None,
                palette=config.palette_rgb,
            )
            geometry = BufferGeometry(self.field.positions, self.field.colors)
            material = PointsMaterial(
                color=config.rgb,
                size=config.size,
                opacity=config.opacity,
                transparent=True,
                vertex_colors=self.field.colors is not None,
                blending='additive' if config.motion == 'drift' else 'normal',
            )
            self.points = Points(geometry, material)
            self.context.scene.add(self.points)

            self._listen('resize', self._handle_resize)
            if config.pointer_reactive:
                self._listen('pointermove', self._handle_pointer_move)

            self.timeline.from_to(material, 'opacity', 0.0, config.opacity,
                                  duration=config.fade_duration, ease=config.ease)
            self._loop = FrameLoop(self.backend.scheduler, self.on_frame)
        except Exception as exc:
            self.unmount()
            if isinstance(exc, SetupError):
                raise
            raise SetupError(f"Rendering backend unavailable: {exc}") from exc

        self.state = ControllerState.RUNNING
        self._loop.start()
        logger.debug("Background mounted with %d particles", config.count)

    def on_frame(self, timestamp):
        if self.state is not ControllerState.RUNNING:
            return
        config = self.config

        self.field.step(timestamp)
        self.points.geometry.needs_update = True
        self.points.rotation += config.rotation_speed
        self.timeline.tick(timestamp)

        if config.pointer_reactive:
            camera = self.context.camera
            camera.position[0] += (self.pointer.x * POINTER_TRAVEL - camera.position[0]) * CAMERA_EASING
            camera.position[1] += (self.pointer.y * POINTER_TRAVEL - camera.position[1]) * CAMERA_EASING
            camera.look_at(ORIGIN)

        self.context.render()

    def on_resize(self, width, height):
        if self.context is None or self.context.renderer is None:
            return
        self.context.resize(width, height)

    def on_pointer_move(self, x, y):
        if self.surface is None:
            return
        width = self.surface.width or 1
        height = self.surface.height or 1
        self.pointer.x = (x / width) * 2.0 - 1.0
        self.pointer.y = -(y / height) * 2.0 + 1.0

    def reconfigure(self, config: ParticleConfig) -> bool:
        """
        Apply a new config, rebuilding the scene if the buffers depend on it

        Returns:
            bool: True when the scene was rebuilt
        """
        if self.state is not ControllerState.RUNNING:
            self.config = config
            return False
        if not self.config.requires_rebuild(config):
            self.config = config
            return False
        surface = self.surface
        self.unmount()
        self.mount(surface, config)
        return True

    def unmount(self):
        """Release everything mount created; safe to call repeatedly."""
        if self._loop is not None:
            self._loop.cancel()
            self._loop = None

        for event_type, handler in self._listeners:
            self._release(f"{event_type} listener",
                          self.surface.remove_event_listener, event_type, handler)
        self._listeners = []

        if self.context is not None:
            self._release("drawing element", self.context.detach)
        if self.points is not None:
            self._release("geometry", self.points.geometry.dispose)
            self._release("material", self.points.material.dispose)
        if self.context is not None:
            self._release("renderer", self.context.dispose)

        self.timeline.kill()
        self.points = None
        self.field = None
        self.context = None
        self.surface = None
        self.state = ControllerState.UNMOUNTED

    def _listen(self, event_type, handler):
        self.surface.add_event_listener(event_type, handler)
        self._listeners.append((event_type, handler))

    def _handle_resize(self, event=None):
        self.on_resize(self.surface.width, self.surface.height)

    def _handle_pointer_move(self, event):
        self.on_pointer_move(event.client_x, event.client_y)

    @staticmethod
    def _release(name, release, *args):
        try:
            release(*args)
        except Exception:
            logger.exception("Failed to release %s", name)


class AnimatedBackground:
    """Page-level background that degrades to nothing when setup fails."""

    def __init__(self, backend, config=None, timeline=None, rng=None):
        self.controller = BackgroundController(backend, timeline=timeline, rng=rng)
        self.config = config
        self.error = None

    @property
    def visible(self):
        return self.controller.running

    def show(self, surface, config=None):
        """
        Mount on ``surface``, or reconfigure when already showing

        Returns:
            bool: Whether a background is being rendered
        """
        if config is not None:
            self.config = config
        if self.config is None:
            raise ValueError("AnimatedBackground needs a ParticleConfig")

        try:
            if self.controller.running and surface is self.controller.surface:
                self.controller.reconfigure(self.config)
            else:
                self.controller.unmount()
                self.controller.mount(surface, self.config)
            self.error = None
        except SetupError as exc:
            self.error = exc
            logger.warning("Animated background disabled: %s", exc)
        return self.visible

    def hide(self):
        self.controller.unmount()


__all__ = [
    'BackgroundController',
    'AnimatedBackground',
    'ControllerState',
    'PointerState',
]
