"""
Backend Module - Capabilities a display backend provides to the controller
"""

from typing import Any, Callable, Protocol


class FrameScheduler(Protocol):
    """Display refresh signal."""

    def request_frame(self, callback: Callable[[float], None]) -> int:
        ...

    def cancel_frame(self, handle: int) -> None:
        ...


class DisplaySurface(Protocol):
    """On-screen element the drawing element is attached to."""

    width: int
    height: int
    device_pixel_ratio: float

    @property
    def is_attached(self) -> bool:
        ...

    def append_child(self, element: Any) -> None:
        ...

    def remove_child(self, element: Any) -> None:
        ...

    def contains(self, element: Any) -> bool:
        ...

    def add_event_listener(self, event_type: str, handler: Callable) -> None:
        ...

    def remove_event_listener(self, event_type: str, handler: Callable) -> None:
        ...


class Renderer(Protocol):
    dom_element: Any

    def set_size(self, width: int, height: int) -> None:
        ...

    def set_pixel_ratio(self, ratio: float) -> None:
        ...

    def set_clear_color(self, color, alpha: float = 1.0) -> None:
        ...

    def render(self, scene, camera) -> None:
        ...

    def dispose(self) -> None:
        ...


class RenderBackend(Protocol):
    scheduler: FrameScheduler

    def create_renderer(self, antialias: bool = True, alpha: bool = True) -> Renderer:
        ...
