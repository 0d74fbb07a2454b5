"""
Pygame Backend Module - Desktop window rendering the particle background

The window acts as the display surface. ``PygameBackend.run`` pumps window
events into the surface listeners, fires the queued frame callbacks with the
pygame tick count and flips the display, once per clock tick.
"""

import itertools
import logging
from collections import defaultdict

import numpy as np
import pygame

from .headless import PointerEvent

logger = logging.getLogger(__name__)


def _to_rgb255(color, scale=1.0):
    return tuple(int(max(0.0, min(1.0, c * scale)) * 255) for c in color)


class PygameFrameScheduler:
    def __init__(self):
        self._callbacks = {}
        self._ids = itertools.count(1)

    def request_frame(self, callback):
        handle = next(self._ids)
        self._callbacks[handle] = callback
        return handle

    def cancel_frame(self, handle):
        self._callbacks.pop(handle, None)

    def fire(self, timestamp):
        due, self._callbacks = self._callbacks, {}
        for callback in due.values():
            callback(timestamp)


class PygameCanvas:
    def __init__(self):
        self.parent = None
        self.image = None


class PygameWindowSurface:
    def __init__(self, window):
        self.window = window
        self.device_pixel_ratio = 1.0
        self.children = []
        self.listeners = defaultdict(list)

    @property
    def width(self):
        return self.window.get_width() if self.window is not None else 0

    @property
    def height(self):
        return self.window.get_height() if self.window is not None else 0

    @property
    def is_attached(self):
        return self.window is not None and pygame.display.get_init()

    def append_child(self, element):
        element.parent = self
        self.children.append(element)

    def remove_child(self, element):
        self.children.remove(element)
        element.parent = None

    def contains(self, element):
        return element in self.children

    def add_event_listener(self, event_type, handler):
        self.listeners[event_type].append(handler)

    def remove_event_listener(self, event_type, handler):
        if handler in self.listeners[event_type]:
            self.listeners[event_type].remove(handler)

    def dispatch(self, event_type, event=None):
        for handler in list(self.listeners[event_type]):
            handler(event)


class PygameRenderer:
    def __init__(self, antialias=True, alpha=True):
        self.antialias = antialias
        self.alpha = alpha
        self.dom_element = PygameCanvas()
        self.size = (0, 0)
        self.pixel_ratio = 1.0
        self.clear_color = (0, 0, 0)
        self.disposed = False

    def set_size(self, width, height):
        # Only records the size; the backing image is reallocated on the next render.
        self.size = (max(int(width), 1), max(int(height), 1))

    def set_pixel_ratio(self, ratio):
        self.pixel_ratio = ratio

    def set_clear_color(self, color, alpha=1.0):
        # The window has no transparency; transparent black shows as black.
        self.clear_color = _to_rgb255(color, alpha)

    def render(self, scene, camera):
        if self.disposed:
            return
        width, height = self.size
        image = self.dom_element.image
        if image is None or image.get_size() != self.size:
            image = self.dom_element.image = pygame.Surface(self.size)
        image.fill(self.clear_color)
        focal = camera.projection_matrix[1, 1] * height / 2.0

        for node in scene.children:
            material = node.material
            ndc, depth, visible = camera.project(node.world_positions())
            xs = ((ndc[:, 0] + 1.0) * 0.5 * width).astype(int)
            ys = ((1.0 - ndc[:, 1]) * 0.5 * height).astype(int)
            radii = np.maximum(material.size * focal / np.maximum(depth, 1e-3) / 2.0, 1.0)
            if material.vertex_colors and node.geometry.colors is not None:
                colors = node.geometry.colors.reshape(-1, 3)
            else:
                colors = np.tile(material.color, (len(xs), 1))
            flags = pygame.BLEND_ADD if material.blending == 'additive' else 0
            for i in np.flatnonzero(visible):
                dot = _to_rgb255(colors[i], material.opacity)
                if flags:
                    image.fill(dot, pygame.Rect(xs[i], ys[i], int(radii[i]) + 1, int(radii[i]) + 1),
                               special_flags=flags)
                elif self.antialias and radii[i] > 1.0:
                    pygame.draw.circle(image, dot, (xs[i], ys[i]), int(radii[i]))
                else:
                    image.set_at((xs[i], ys[i]), dot)

    def dispose(self):
        self.disposed = True
        self.dom_element.image = None


class PygameBackend:
    def __init__(self, width=1280, height=720, title="Portfolio Background"):
        self.width = width
        self.height = height
        self.title = title
        self.scheduler = PygameFrameScheduler()
        self.surface = None
        self.clock = None

    def open(self):
        pygame.init()
        pygame.display.set_caption(self.title)
        window = pygame.display.set_mode((self.width, self.height), pygame.RESIZABLE)
        self.surface = PygameWindowSurface(window)
        self.clock = pygame.time.Clock()
        logger.info("Opened %dx%d background window", self.width, self.height)
        return self.surface

    def create_renderer(self, antialias=True, alpha=True):
        if not pygame.display.get_init():
            raise RuntimeError("pygame display is not initialised")
        return PygameRenderer(antialias=antialias, alpha=alpha)

    def run(self, fps=60):
        """Drive the frame loop until the window is closed."""
        if self.surface is None:
            self.open()
        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.VIDEORESIZE:
                    self.surface.window = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)
                    self.surface.dispatch('resize')
                elif event.type == pygame.MOUSEMOTION:
                    x, y = event.pos
                    self.surface.dispatch('pointermove', PointerEvent(x, y))

            self.scheduler.fire(float(pygame.time.get_ticks()))

            self.surface.window.fill((0, 0, 0))
            for child in self.surface.children:
                if child.image is not None:
                    self.surface.window.blit(child.image, (0, 0))
            pygame.display.flip()
            self.clock.tick(fps)

    def close(self):
        self.surface = None
        pygame.quit()


__all__ = ['PygameBackend', 'PygameRenderer', 'PygameWindowSurface', 'PygameFrameScheduler']
