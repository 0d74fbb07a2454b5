import numpy as np
import pytest

from background.controller import AnimatedBackground, BackgroundController, ControllerState
from background.exceptions import SetupError
from background.headless import HeadlessBackend, HeadlessSurface
from background.timeline import Timeline


@pytest.fixture
def controller(backend, rng):
    return BackgroundController(backend, rng=rng)


def assert_released(controller, backend, surface, renderer):
    assert controller.state is ControllerState.UNMOUNTED
    assert backend.scheduler.pending == 0
    assert surface.listener_count() == 0
    assert surface.children == []
    assert renderer.disposed
    assert renderer.buffers == {}
    assert not controller.timeline.active


def test_mount_attaches_and_schedules(controller, backend, surface, drift_config):
    controller.mount(surface, drift_config)

    renderer = backend.renderers[0]
    assert controller.state is ControllerState.RUNNING
    assert surface.children == [renderer.dom_element]
    assert renderer.dom_element.parent is surface
    assert renderer.size == (1280, 720)
    assert renderer.pixel_ratio == 2.0
    assert renderer.clear_color == ((0.0, 0.0, 0.0), 0.0)
    assert controller.field.positions.size == drift_config.count * 3
    assert controller.context.camera.aspect == pytest.approx(1280 / 720)
    assert controller.context.camera.position[2] == 10.0
    assert backend.scheduler.pending == 1
    assert surface.listener_count() == 1


def test_opaque_renderer_uses_clear_color(controller, backend, surface, drift_config):
    controller.mount(surface, drift_config.with_changes(alpha=False, clear_color='#101010'))
    assert backend.renderers[0].clear_color == ('#101010', 1.0)


def test_frames_render_and_move_particles(controller, backend, surface, drift_config):
    controller.mount(surface, drift_config)
    before = controller.field.positions.copy()

    backend.scheduler.run(3)

    renderer = backend.renderers[0]
    assert renderer.render_count == 3
    assert not np.allclose(controller.field.positions, before)
    assert controller.points.rotation[1] == pytest.approx(3 * 0.0005)
    assert backend.scheduler.pending == 1


def test_fade_in_reaches_target_opacity(controller, backend, surface, drift_config):
    controller.mount(surface, drift_config)
    material = controller.points.material
    assert material.opacity == 0.0

    backend.scheduler.run(4, milliseconds=1000.0)

    assert material.opacity == pytest.approx(0.6)
    assert not controller.timeline.active


def test_drift_frame_bounces_particle(controller, backend, surface, drift_config):
    controller.mount(surface, drift_config)
    field = controller.field
    field.positions[0], field.velocities[0] = 7.99, 0.01

    controller.on_frame(16.0)

    assert field.positions[0] == pytest.approx(-7.6)
    assert field.velocities[0] == pytest.approx(-0.009)


def test_resize_is_idempotent(controller, backend, surface, drift_config):
    controller.mount(surface, drift_config)
    camera = controller.context.camera
    renderer = backend.renderers[0]

    controller.on_resize(800, 600)
    first = (camera.aspect, renderer.size, camera.projection_matrix.copy())
    controller.on_resize(800, 600)

    assert camera.aspect == pytest.approx(800 / 600)
    assert (camera.aspect, renderer.size) == first[:2]
    assert np.array_equal(camera.projection_matrix, first[2])


def test_resize_event_tracks_surface(controller, backend, surface, drift_config):
    controller.mount(surface, drift_config)
    surface.resize(640, 640)
    assert controller.context.camera.aspect == 1.0
    assert backend.renderers[0].size == (640, 640)


def test_collapsed_surface_keeps_square_aspect(controller, surface, drift_config):
    controller.mount(surface, drift_config)
    controller.on_resize(1024, 0)
    assert controller.context.camera.aspect == 1.0


def test_resize_before_mount_is_ignored(controller):
    controller.on_resize(800, 600)
    assert controller.context is None


def test_pointer_eases_camera(controller, backend, surface, wave_config):
    controller.mount(surface, wave_config)
    assert surface.listener_count() == 2

    surface.move_pointer(1280, 0)
    assert (controller.pointer.x, controller.pointer.y) == (1.0, 1.0)

    camera = controller.context.camera
    backend.scheduler.advance()
    assert camera.position[0] == pytest.approx(0.5 * 0.05)
    assert camera.position[1] == pytest.approx(0.5 * 0.05)
    assert np.array_equal(camera.target, np.zeros(3))

    backend.scheduler.run(400)
    assert camera.position[0] == pytest.approx(0.5, abs=1e-6)


def test_wave_scene_uses_vertex_colours(controller, surface, wave_config):
    controller.mount(surface, wave_config)
    assert controller.field.velocities is None
    assert controller.points.material.vertex_colors
    assert controller.field.colors.shape == (wave_config.count * 3,)


def test_unmount_releases_everything(controller, backend, surface, drift_config):
    controller.mount(surface, drift_config)
    backend.scheduler.run(2)
    renderer = backend.renderers[0]
    geometry = controller.points.geometry
    material = controller.points.material
    assert len(renderer.buffers) == 2

    controller.unmount()

    assert_released(controller, backend, surface, renderer)
    assert geometry.disposed and material.disposed
    assert renderer.dom_element.parent is None


def test_unmount_twice_and_before_mount(controller, backend, surface, drift_config):
    controller.unmount()
    controller.mount(surface, drift_config)
    assert controller.frame_pending
    controller.unmount()
    controller.unmount()
    assert controller.state is ControllerState.UNMOUNTED
    assert not controller.frame_pending
    assert backend.scheduler.pending == 0


def test_frame_after_unmount_is_a_no_op(controller, backend, surface, drift_config):
    controller.mount(surface, drift_config)
    controller.unmount()
    controller.on_frame(100.0)
    assert backend.renderers[0].render_count == 0


def test_teardown_from_a_callback_between_frames(controller, backend, surface, drift_config):
    controller.mount(surface, drift_config)
    backend.scheduler.request_frame(lambda ts: controller.unmount())

    backend.scheduler.advance()
    backend.scheduler.run(3)

    assert backend.renderers[0].render_count == 1
    assert_released(controller, backend, surface, backend.renderers[0])


def test_detached_surface_fails_setup(controller, backend, drift_config):
    surface = HeadlessSurface(attached=False)
    with pytest.raises(SetupError):
        controller.mount(surface, drift_config)
    assert controller.state is ControllerState.UNMOUNTED
    assert backend.renderers == []
    assert surface.listener_count() == 0


def test_missing_surface_fails_setup(controller, drift_config):
    with pytest.raises(SetupError):
        controller.mount(None, drift_config)


def test_backend_failure_releases_partial_setup(surface, drift_config):
    backend = HeadlessBackend(available=False)
    controller = BackgroundController(backend)
    with pytest.raises(SetupError, match='No rendering context'):
        controller.mount(surface, drift_config)
    assert controller.state is ControllerState.UNMOUNTED
    assert surface.children == []
    assert backend.scheduler.pending == 0
    controller.unmount()


def test_mount_while_running_is_rejected(controller, backend, surface, drift_config):
    controller.mount(surface, drift_config)
    with pytest.raises(SetupError):
        controller.mount(surface, drift_config)
    assert controller.state is ControllerState.RUNNING
    assert len(backend.renderers) == 1
    assert backend.scheduler.pending == 1


def test_structural_change_rebuilds(controller, backend, surface, drift_config):
    controller.mount(surface, drift_config)
    old_renderer = backend.renderers[0]

    rebuilt = controller.reconfigure(drift_config.with_changes(count=80))

    assert rebuilt
    assert controller.state is ControllerState.RUNNING
    assert controller.field.count == 80
    assert old_renderer.disposed
    assert surface.children == [backend.renderers[1].dom_element]
    assert surface.listener_count() == 1
    assert backend.scheduler.pending == 1


def test_cosmetic_change_applies_live(controller, backend, surface, drift_config):
    controller.mount(surface, drift_config)
    field = controller.field

    rebuilt = controller.reconfigure(drift_config.with_changes(rotation_speed=(0.0, 0.01, 0.0)))
    backend.scheduler.advance()

    assert not rebuilt
    assert controller.field is field
    assert controller.points.rotation[1] == pytest.approx(0.01)


def test_timeline_is_owned_per_controller(backend, surface, drift_config):
    shared = Timeline()
    first = BackgroundController(backend, timeline=shared)
    second = BackgroundController(backend)

    first.mount(surface, drift_config)
    second.mount(HeadlessSurface(), drift_config)
    first.unmount()

    assert not shared.active
    assert second.timeline.active


def test_background_fails_closed(backend, drift_config):
    background = AnimatedBackground(backend, drift_config)

    shown = background.show(HeadlessSurface(attached=False))

    assert shown is False
    assert not background.visible
    assert isinstance(background.error, SetupError)


def test_background_show_and_hide(backend, surface, drift_config):
    background = AnimatedBackground(backend, drift_config)

    assert background.show(surface)
    assert background.show(surface, drift_config.with_changes(color='#00BFFF'))
    assert len(backend.renderers) == 2

    background.hide()
    assert not background.visible
    assert surface.children == []
    assert backend.scheduler.pending == 0


def test_background_moves_to_new_surface(backend, surface, drift_config):
    background = AnimatedBackground(backend, drift_config)
    other = HeadlessSurface(width=320, height=240)

    background.show(surface)
    background.show(other)

    assert surface.children == []
    assert len(other.children) == 1
    assert background.controller.context.camera.aspect == pytest.approx(320 / 240)
