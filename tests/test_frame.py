import numpy as np
import pytest

from semantic_nebula.core.camera import CameraController
from semantic_nebula.core.frame import (
    FrameRenderer,
    Viewport,
    animated_offset,
    draw_order,
    hit_test,
    intensity,
    parallax_offset,
    point_size,
    value_noise,
    wander,
)
from semantic_nebula.core.points import NO_RANK, PointSet
from semantic_nebula.core.ranker import SearchRanker
import config


@pytest.fixture
def viewport() -> Viewport:
    return Viewport(200.0, 100.0, margin=0, top_inset=0, bottom_inset=0)


@pytest.fixture
def points() -> PointSet:
    positions = np.array([[100.0, 50.0], [120.0, 50.0], [100.0, 80.0]])
    pts = PointSet(["a", "b", "c"], positions, depth=[0.9, 0.2, 0.5], seed=[1.0, 2.0, 3.0])
    return pts


@pytest.fixture
def camera() -> CameraController:
    cam = CameraController()
    cam.reset_to_overview(np.array([[100.0, 50.0]]))
    return cam


def test_value_noise_is_deterministic_and_bounded() -> None:
    xs = np.linspace(-50, 50, 1001)
    a = value_noise(xs)

    assert np.array_equal(a, value_noise(xs))
    assert np.all((a >= 0.0) & (a < 1.0))


def test_value_noise_is_smooth() -> None:
    xs = np.linspace(0, 10, 2001)
    steps = np.abs(np.diff(value_noise(xs)))
    assert steps.max() < 0.01


def test_wander_is_bounded_and_axes_differ() -> None:
    seeds = np.arange(100) * 37.0
    offsets = animated_offset(seeds, time=3.0)
    bound = (config.JITTER + config.DRIFT) / 2

    assert offsets.shape == (100, 2)
    assert np.all(np.abs(offsets) <= bound)
    assert not np.allclose(offsets[:, 0], offsets[:, 1])
    assert np.array_equal(wander(seeds, 0, 3.0), offsets[:, 0])


def test_wander_drifts_slowly_over_time() -> None:
    seeds = np.array([5.0, 50.0])
    early = animated_offset(seeds, time=1.0)
    later = animated_offset(seeds, time=1.0 + 1 / 60)

    assert np.all(np.abs(later - early) < config.DRIFT * 0.1)


def test_parallax_moves_near_points_more() -> None:
    depth = np.array([0.1, 0.9, 1.0])
    offset = parallax_offset(depth, (1.0, -0.5), strength=10.0)

    assert offset[0] == pytest.approx([9.0, -4.5])
    assert offset[1] == pytest.approx([1.0, -0.5])
    assert offset[2] == pytest.approx([0.0, 0.0])


def test_parallax_clamps_pointer_and_handles_missing_pointer() -> None:
    depth = np.array([0.5])

    assert np.array_equal(parallax_offset(depth, None), np.zeros((1, 2)))
    assert parallax_offset(depth, (5.0, -9.0)) == pytest.approx(parallax_offset(depth, (1.0, -1.0)))


def test_draw_order_is_far_to_near_with_index_ties() -> None:
    order = draw_order(np.array([0.5, 0.9, 0.5, 0.1]))
    assert order.tolist() == [1, 0, 2, 3]


def test_intensity_neutral_without_query() -> None:
    assert intensity(None, 3) == pytest.approx([config.NEUTRAL_INTENSITY] * 3)

    flat = SearchRanker().rank([0.4, 0.4], list("ab"))
    assert intensity(flat, 2) == pytest.approx([config.NEUTRAL_INTENSITY] * 2)

    result = SearchRanker().rank([0.9, 0.1, 0.5], list("abc"))
    assert intensity(result, 3) == pytest.approx([1.0, 0.0, 0.5], abs=1e-6)


def test_point_size_is_bounded_and_favors_top_ranks() -> None:
    t = np.array([1.0, 1.0, 0.0, 0.22])
    rank = np.array([0, 100, NO_RANK, NO_RANK])
    size = point_size(t, rank)

    assert size[0] == pytest.approx(config.SIZE_MAX)
    assert size[1] < size[0]
    assert size[2] == pytest.approx(config.SIZE_MIN)
    assert np.all((size >= config.SIZE_MIN) & (size <= config.SIZE_MAX))


def test_hit_test_prefers_frontmost_point() -> None:
    screen = np.array([[10.0, 10.0], [11.0, 10.0], [80.0, 80.0]])
    size = np.full(3, 2.0)
    order = np.array([1, 0, 2])  # point 0 painted after point 1

    hover = hit_test(screen, size, order, (10.5, 10.0))
    assert hover.index == 0
    assert (hover.x, hover.y) == (10.0, 10.0)

    assert hit_test(screen, size, np.array([0, 1, 2]), (10.5, 10.0)).index == 1


def test_hit_test_threshold_depends_on_size() -> None:
    screen = np.array([[0.0, 0.0]])
    order = np.array([0])

    assert hit_test(screen, np.array([1.0]), order, (8.0, 0.0)) is None
    assert hit_test(screen, np.array([10.0]), order, (8.0, 0.0)).index == 0
    assert hit_test(np.empty((0, 2)), np.empty(0), np.empty(0, dtype=int), (0.0, 0.0)) is None


def test_render_maps_focus_to_rect_center(points, camera, viewport) -> None:
    snapshot = FrameRenderer(animate=False).render(points, camera, None, viewport)

    assert snapshot.screen[0] == pytest.approx([100.0, 50.0])
    assert snapshot.screen[1] == pytest.approx([120.0, 50.0])
    assert snapshot.hover is None
    assert snapshot.rank.tolist() == [NO_RANK] * 3


def test_render_applies_zoom_about_focus(points, camera, viewport) -> None:
    camera.state.zoom = 2.0
    snapshot = FrameRenderer(animate=False).render(points, camera, None, viewport)

    assert snapshot.screen[1] == pytest.approx([140.0, 50.0])
    assert snapshot.screen[2] == pytest.approx([100.0, 110.0])


def test_render_reports_hover_and_draw_order(points, camera, viewport) -> None:
    result = SearchRanker().rank([0.1, 0.9, 0.5], ["a", "b", "c"])
    pointer = viewport.screen_to_pointer(120.0, 50.0)

    snapshot = FrameRenderer(animate=False).render(points, camera, result, viewport, pointer)

    # Pointer is level with the center, so parallax only shifts x
    assert snapshot.hover is not None
    assert snapshot.hover.index == 1
    rows = list(snapshot.rows())
    assert [r[0] for r in rows] == [0, 2, 1]
    assert rows[-1][3] == pytest.approx(1.0, abs=1e-6)
    assert rows[-1][4] == 0


def test_render_animation_offsets_are_cosmetic(points, camera, viewport) -> None:
    snapshot = FrameRenderer(animate=True).render(points, camera, None, viewport, time=2.0)
    bound = (config.JITTER + config.DRIFT) / 2

    assert np.all(np.abs(snapshot.screen - snapshot.anchor) <= bound)
    assert snapshot.anchor[0] == pytest.approx([100.0, 50.0])


def test_viewport_pointer_mapping(viewport: Viewport) -> None:
    assert viewport.pointer_to_screen((-1.0, -1.0)) == (0.0, 0.0)
    assert viewport.pointer_to_screen((1.0, 1.0)) == (200.0, 100.0)
    assert viewport.pointer_to_screen((3.0, float("nan"))) == (200.0, 50.0)
    assert viewport.screen_to_pointer(150.0, 25.0) == pytest.approx((0.5, -0.5))


def test_layout_rect_never_inverts() -> None:
    rect = Viewport(20.0, 10.0, margin=14, top_inset=0, bottom_inset=0).layout_rect

    assert rect.width > 0
    assert rect.height > 0
    assert rect.left == 14.0
