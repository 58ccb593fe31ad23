import numpy as np
import pytest

from semantic_nebula.core.nebula import Nebula
from semantic_nebula.visualization.nebula_plot import (
    NebulaPlotBuilder,
    color_by_pop,
    pop_curve,
    truncate,
)


def test_truncate_marks_cut_text() -> None:
    assert truncate("short", 10) == "short"
    assert truncate("a" * 20, 10) == "aaaaaaa..."


def test_pop_curve_and_colors_stay_in_range() -> None:
    pop = pop_curve(np.array([-1.0, 0.0, 0.5, 1.0, 2.0]))

    assert pop[0] == 0.0 and pop[-1] == 1.0
    assert np.all(np.diff(pop) >= 0)
    rgb = color_by_pop(pop)
    assert rgb.shape == (5, 3)
    assert np.all((rgb >= 0) & (rgb <= 255))


def test_build_layers_in_screen_space(nebula: Nebula) -> None:
    snapshot = nebula.snapshot()
    fig = NebulaPlotBuilder(nebula.viewport).build(snapshot, nebula.points.texts)

    assert [t.name for t in fig.data] == ["haze", "glow", "points", "hover"]
    assert tuple(fig.layout.xaxis.range) == (0, 100.0)
    assert tuple(fig.layout.yaxis.range) == (100.0, 0)

    points = fig.data[2]
    assert list(points.customdata) == snapshot.order.tolist()
    # Neutral cloud: no glow, no hover
    assert len(fig.data[1].x) == 0
    assert len(fig.data[3].x) == 0


def test_build_glows_best_match(nebula: Nebula) -> None:
    nebula.search("sunny beach party")
    fig = NebulaPlotBuilder(nebula.viewport).build(nebula.snapshot(), nebula.points.texts)

    assert len(fig.data[1].x) == 1


def test_build_animation_has_one_frame_per_snapshot(nebula: Nebula) -> None:
    nebula.search("quiet snowy forest")
    snapshots = [nebula.tick() for _ in range(6)]

    fig = NebulaPlotBuilder(nebula.viewport).build_animation(snapshots, nebula.points.texts)

    assert len(fig.frames) == 6
    assert fig.layout.updatemenus[0].buttons[0].method == "animate"


def test_build_animation_requires_frames(nebula: Nebula) -> None:
    with pytest.raises(ValueError):
        NebulaPlotBuilder(nebula.viewport).build_animation([], nebula.points.texts)
