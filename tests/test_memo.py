from __future__ import annotations

import pytest

from portfolio_insights.memo import DerivationMemo

from factories import build_startup


def test_same_snapshot_is_computed_once():
    memo = DerivationMemo()
    calls = []
    snapshot = (build_startup("a", overallScore=50),)

    for _ in range(3):
        memo.get_or_compute("scores", snapshot, lambda: calls.append(1) or len(calls))

    assert calls == [1]
    assert memo.hits == 2
    assert memo.misses == 1


def test_equal_snapshots_share_an_entry():
    memo = DerivationMemo()
    memo.get_or_compute("scores", (build_startup("a", overallScore=50),), lambda: "first")
    value = memo.get_or_compute("scores", (build_startup("a", overallScore=50),), lambda: "second")
    assert value == "first"


def test_changed_record_forces_recompute():
    memo = DerivationMemo()
    memo.get_or_compute("scores", (build_startup("a", overallScore=50),), lambda: "old")
    value = memo.get_or_compute("scores", (build_startup("a", overallScore=51),), lambda: "new")
    assert value == "new"
    assert memo.misses == 2


def test_names_are_separate_keys():
    memo = DerivationMemo()
    snapshot = ()
    assert memo.get_or_compute("one", snapshot, lambda: 1) == 1
    assert memo.get_or_compute("two", snapshot, lambda: 2) == 2


def test_least_recently_used_entry_is_evicted():
    memo = DerivationMemo(maxsize=2)
    memo.get_or_compute("a", (), lambda: "a")
    memo.get_or_compute("b", (), lambda: "b")
    memo.get_or_compute("a", (), lambda: "a again")
    memo.get_or_compute("c", (), lambda: "c")

    assert len(memo) == 2
    assert memo.get_or_compute("a", (), lambda: "recomputed") == "a"
    assert memo.get_or_compute("b", (), lambda: "recomputed") == "recomputed"


def test_clear_resets_counters():
    memo = DerivationMemo()
    memo.get_or_compute("a", (), lambda: 1)
    memo.clear()
    assert len(memo) == 0
    assert memo.misses == 0


def test_maxsize_must_be_positive():
    with pytest.raises(ValueError):
        DerivationMemo(maxsize=0)
