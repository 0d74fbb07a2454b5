"""
Render Context Module - Scene, camera and renderer bound to one surface
"""

import logging

from .scene import PerspectiveCamera, Scene

logger = logging.getLogger(__name__)

NEAR_PLANE = 0.1
FAR_PLANE = 1000.0
MAX_PIXEL_RATIO = 2.0


def aspect_ratio(width, height):
    # A collapsed surface keeps a square projection instead of dividing by zero.
    if height <= 0 or width <= 0:
        return 1.0
    return width / height


class RenderContext:
    def __init__(self, surface, scene, camera, renderer):
        self.surface = surface
        self.scene = scene
        self.camera = camera
        self.renderer = renderer
        self.attached = False

    @classmethod
    def create(cls, backend, surface, config):
        """
        Build the scene, camera and renderer and attach the drawing element

        The renderer is disposed again if anything after its creation fails,
        so a failed call leaves nothing allocated.
        """
        scene = Scene()
        camera = PerspectiveCamera(
            fov=config.fov,
            aspect=aspect_ratio(surface.width, surface.height),
            near=NEAR_PLANE,
            far=FAR_PLANE,
        )
        camera.position[2] = config.camera_z

        renderer = backend.create_renderer(antialias=config.antialias, alpha=config.alpha)
        context = cls(surface, scene, camera, renderer)
        try:
            renderer.set_size(surface.width, surface.height)
            renderer.set_pixel_ratio(min(surface.device_pixel_ratio, MAX_PIXEL_RATIO))
            if config.alpha:
                renderer.set_clear_color((0.0, 0.0, 0.0), 0.0)
            else:
                renderer.set_clear_color(config.clear_color)
            surface.append_child(renderer.dom_element)
            context.attached = surface.contains(renderer.dom_element)
        except Exception:
            context.release()
            raise
        return context

    def resize(self, width, height):
        self.camera.aspect = aspect_ratio(width, height)
        self.camera.update_projection_matrix()
        self.renderer.set_size(width, height)

    def render(self):
        self.renderer.render(self.scene, self.camera)

    def detach(self):
        if self.renderer is not None and self.surface.contains(self.renderer.dom_element):
            self.surface.remove_child(self.renderer.dom_element)
        self.attached = False

    def dispose(self):
        if self.renderer is not None:
            renderer, self.renderer = self.renderer, None
            renderer.dispose()
        self.scene.clear()

    def release(self):
        self.detach()
        self.dispose()


__all__ = ['RenderContext', 'aspect_ratio']
