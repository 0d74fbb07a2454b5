"""
Headless Backend Module - In-memory display backend

Used by tests and server-side previews. Frames only advance when
``ManualFrameScheduler.advance`` is called, and the renderer keeps a
registry of the buffers it has "uploaded" so leaks are observable after
teardown.
"""

import itertools
from collections import defaultdict
from dataclasses import dataclass


@dataclass
class PointerEvent:
    client_x: float
    client_y: float


class ManualFrameScheduler:
    def __init__(self, start=0.0):
        self.now = start
        self._callbacks = {}
        self._ids = itertools.count(1)

    @property
    def pending(self):
        return len(self._callbacks)

    def request_frame(self, callback):
        handle = next(self._ids)
        self._callbacks[handle] = callback
        return handle

    def cancel_frame(self, handle):
        self._callbacks.pop(handle, None)

    def advance(self, milliseconds=1000.0 / 60.0):
        """Fire every callback queued before this refresh."""
        self.now += milliseconds
        due, self._callbacks = self._callbacks, {}
        for callback in due.values():
            callback(self.now)
        return len(due)

    def run(self, frames, milliseconds=1000.0 / 60.0):
        for _ in range(frames):
            self.advance(milliseconds)


class HeadlessCanvas:
    def __init__(self):
        self.parent = None
        self.width = 0
        self.height = 0


class HeadlessSurface:
    def __init__(self, width=1280, height=720, device_pixel_ratio=1.0, attached=True):
        self.width = width
        self.height = height
        self.device_pixel_ratio = device_pixel_ratio
        self.attached = attached
        self.children = []
        self.listeners = defaultdict(list)

    @property
    def is_attached(self):
        return self.attached

    def append_child(self, element):
        if not self.attached:
            raise RuntimeError("Surface is not attached to a display")
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

    def listener_count(self):
        return sum(len(handlers) for handlers in self.listeners.values())

    def resize(self, width, height):
        self.width = width
        self.height = height
        self.dispatch('resize')

    def move_pointer(self, x, y):
        self.dispatch('pointermove', PointerEvent(x, y))


class HeadlessRenderer:
    def __init__(self, antialias=True, alpha=True):
        self.antialias = antialias
        self.alpha = alpha
        self.dom_element = HeadlessCanvas()
        self.size = (0, 0)
        self.pixel_ratio = 1.0
        self.clear_color = ((0.0, 0.0, 0.0), 1.0)
        self.render_count = 0
        self.disposed = False
        self.buffers = {}
        self.last_frame = None

    def set_size(self, width, height):
        self.size = (width, height)
        self.dom_element.width = int(width * self.pixel_ratio)
        self.dom_element.height = int(height * self.pixel_ratio)

    def set_pixel_ratio(self, ratio):
        self.pixel_ratio = ratio
        self.set_size(*self.size)

    def set_clear_color(self, color, alpha=1.0):
        self.clear_color = (color, alpha)

    def render(self, scene, camera):
        if self.disposed:
            raise RuntimeError("Renderer used after dispose")
        frame = []
        for node in scene.children:
            for resource in (node.geometry, node.material):
                if resource.disposed:
                    raise RuntimeError("Rendering a disposed resource")
                if id(resource) not in self.buffers:
                    self.buffers[id(resource)] = resource
                    resource.on_dispose(self._free)
            node.geometry.needs_update = False
            frame.append(node.world_positions().copy())
        self.render_count += 1
        self.last_frame = frame

    def _free(self, resource):
        self.buffers.pop(id(resource), None)

    def dispose(self):
        self.disposed = True


class HeadlessBackend:
    def __init__(self, scheduler=None, available=True):
        self.scheduler = scheduler if scheduler is not None else ManualFrameScheduler()
        self.available = available
        self.renderers = []

    def create_renderer(self, antialias=True, alpha=True):
        if not self.available:
            raise RuntimeError("No rendering context available")
        renderer = HeadlessRenderer(antialias=antialias, alpha=alpha)
        self.renderers.append(renderer)
        return renderer


__all__ = [
    'HeadlessBackend',
    'HeadlessRenderer',
    'HeadlessSurface',
    'ManualFrameScheduler',
    'PointerEvent',
]
