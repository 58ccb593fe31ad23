import numpy as np
import pytest

from semantic_nebula.core.ranker import ScoreLengthError, SearchRanker


@pytest.fixture
def ranker() -> SearchRanker:
    return SearchRanker(top_k=25)


def test_three_point_scenario(ranker: SearchRanker) -> None:
    result = ranker.rank([0.9, 0.1, 0.5], ["a", "b", "c"], query="q")

    assert result.sim_min == pytest.approx(0.1)
    assert result.sim_max == pytest.approx(0.9)
    assert result.ranks.tolist() == [0, 2, 1]
    assert result.top_k[0].index == 0
    assert result.top_k[0].score == pytest.approx(0.9)
    assert result.top_k[0].text == "a"
    assert [m.index for m in result.top_k] == [0, 2, 1]
    assert result.query == "q"


def test_distinct_scores_rank_is_a_bijection(ranker: SearchRanker) -> None:
    scores = np.random.default_rng(5).permutation(50) / 50.0
    result = ranker.rank(scores, [str(i) for i in range(50)])

    assert sorted(result.ranks.tolist()) == list(range(50))
    assert result.ranks[int(np.argmax(scores))] == 0
    assert np.all(np.diff(scores[result.order]) < 0)


def test_ties_break_by_ascending_index(ranker: SearchRanker) -> None:
    result = ranker.rank([0.5, 0.7, 0.5, 0.7], list("abcd"))

    assert result.order.tolist() == [1, 3, 0, 2]
    assert result.ranks.tolist() == [2, 0, 3, 1]


def test_top_k_is_truncated() -> None:
    result = SearchRanker(top_k=2).rank([0.1, 0.4, 0.3], list("abc"))

    assert [m.index for m in result.top_k] == [1, 2]
    assert len(SearchRanker(top_k=10).rank([0.1, 0.4], list("ab")).top_k) == 2


def test_length_mismatch_is_rejected(ranker: SearchRanker) -> None:
    with pytest.raises(ScoreLengthError):
        ranker.rank([0.1, 0.2], list("abc"))

    # ScoreLengthError is a ValueError
    with pytest.raises(ValueError):
        ranker.rank([], list("a"))


def test_non_finite_scores_are_rejected(ranker: SearchRanker) -> None:
    with pytest.raises(ValueError, match="finite"):
        ranker.rank([0.1, float("nan")], list("ab"))


def test_flat_scores_have_no_range(ranker: SearchRanker) -> None:
    result = ranker.rank([0.3, 0.3, 0.3], list("abc"))

    assert not result.has_range
    assert result.ranks.tolist() == [0, 1, 2]


def test_normalized_scores_span_unit_interval(ranker: SearchRanker) -> None:
    result = ranker.rank([2.0, -1.0, 0.5], list("abc"))

    assert result.normalized() == pytest.approx([1.0, 0.0, 0.5], abs=1e-6)
