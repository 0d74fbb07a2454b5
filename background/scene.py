"""
Scene Module - Scene graph, camera and point-cloud primitives

These hold plain data only. Renderers read them each frame and keep any
native buffers they allocate keyed on the geometry/material, freeing them
when ``dispose`` fires the registered listeners.
"""

import math

import numpy as np

ORIGIN = np.zeros(3)
UP = np.array([0.0, 1.0, 0.0])


def _normalize(vector):
    length = np.linalg.norm(vector)
    if length == 0:
        return None
    return vector / length


def rotation_matrix(angles):
    """XYZ Euler rotation, applied x first."""
    rx, ry, rz = angles
    cx, sx = math.cos(rx), math.sin(rx)
    cy, sy = math.cos(ry), math.sin(ry)
    cz, sz = math.cos(rz), math.sin(rz)
    x = np.array([[1, 0, 0], [0, cx, -sx], [0, sx, cx]])
    y = np.array([[cy, 0, sy], [0, 1, 0], [-sy, 0, cy]])
    z = np.array([[cz, -sz, 0], [sz, cz, 0], [0, 0, 1]])
    return x @ y @ z


class Disposable:
    """Mixin for resources whose native side is freed by listeners."""

    def __init__(self):
        self.disposed = False
        self._dispose_listeners = []

    def on_dispose(self, listener):
        self._dispose_listeners.append(listener)

    def dispose(self):
        if self.disposed:
            return
        self.disposed = True
        listeners, self._dispose_listeners = self._dispose_listeners, []
        for listener in listeners:
            listener(self)


class BufferGeometry(Disposable):
    def __init__(self, positions, colors=None):
        super().__init__()
        self.positions = positions
        self.colors = colors
        self.needs_update = True

    @property
    def count(self):
        return self.positions.size // 3


class PointsMaterial(Disposable):
    def __init__(self, color=(1.0, 1.0, 1.0), size=0.05, opacity=1.0,
                 transparent=True, vertex_colors=False, blending='normal'):
        super().__init__()
        self.color = color
        self.size = size
        self.opacity = opacity
        self.transparent = transparent
        self.vertex_colors = vertex_colors
        self.blending = blending


class Points:
    def __init__(self, geometry, material):
        self.geometry = geometry
        self.material = material
        self.rotation = np.zeros(3)

    def world_positions(self):
        local = self.geometry.positions.reshape(-1, 3)
        if not self.rotation.any():
            return local
        return local @ rotation_matrix(self.rotation).T


class Scene:
    def __init__(self):
        self.children = []
        self.position = ORIGIN.copy()

    def add(self, node):
        if node not in self.children:
            self.children.append(node)

    def remove(self, node):
        if node in self.children:
            self.children.remove(node)

    def clear(self):
        self.children = []


class PerspectiveCamera:
    """Right-handed perspective camera looking down -z by default."""

    def __init__(self, fov=75.0, aspect=1.0, near=0.1, far=1000.0):
        self.fov = fov
        self.aspect = aspect
        self.near = near
        self.far = far
        self.position = np.zeros(3)
        self.target = np.array([0.0, 0.0, -1.0])
        self.projection_matrix = np.identity(4)
        self.view_matrix = np.identity(4)
        self.update_projection_matrix()
        self.update_view_matrix()

    def update_projection_matrix(self):
        f = 1.0 / math.tan(math.radians(self.fov) / 2.0)
        depth = self.near - self.far
        self.projection_matrix = np.array([
            [f / self.aspect, 0.0, 0.0, 0.0],
            [0.0, f, 0.0, 0.0],
            [0.0, 0.0, (self.far + self.near) / depth, 2.0 * self.far * self.near / depth],
            [0.0, 0.0, -1.0, 0.0],
        ])

    def look_at(self, point):
        self.target = np.asarray(point, dtype=np.float64).copy()
        self.update_view_matrix()

    def update_view_matrix(self):
        forward = _normalize(self.position - self.target)
        if forward is None:
            return
        right = _normalize(np.cross(UP, forward))
        if right is None:
            return
        up = np.cross(forward, right)
        view = np.identity(4)
        view[0, :3], view[1, :3], view[2, :3] = right, up, forward
        view[:3, 3] = -view[:3, :3] @ self.position
        self.view_matrix = view

    def project(self, points):
        """
        Project world-space points to normalised device coordinates

        Args:
            points (numpy.ndarray): (N, 3) world coordinates

        Returns:
            tuple: (ndc (N, 2), depth (N,), visible (N,) bool mask)
        """
        self.update_view_matrix()
        homogeneous = np.hstack([points, np.ones((len(points), 1))])
        eye = homogeneous @ self.view_matrix.T
        clip = eye @ self.projection_matrix.T
        w = clip[:, 3]
        visible = w > self.near
        safe_w = np.where(visible, w, 1.0)
        ndc = clip[:, :2] / safe_w[:, None]
        visible &= (np.abs(ndc) <= 1.0).all(axis=1)
        return ndc, -eye[:, 2], visible


__all__ = [
    'BufferGeometry',
    'PointsMaterial',
    'Points',
    'Scene',
    'PerspectiveCamera',
    'ORIGIN',
    'rotation_matrix',
]
