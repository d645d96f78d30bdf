import random

import pytest

from app.services.roster import reconcile_roster


def test_pure_add():
    plan = reconcile_roster(set(), {1, 2, 3})
    assert plan.to_add == {1, 2, 3}
    assert plan.to_remove == set()
    assert plan.to_keep == set()


def test_pure_remove():
    plan = reconcile_roster({1, 2, 3}, set())
    assert plan.to_add == set()
    assert plan.to_remove == {1, 2, 3}
    assert plan.to_keep == set()


def test_mixed():
    plan = reconcile_roster({1, 2, 3}, {2, 3, 4})
    assert plan.to_add == {4}
    assert plan.to_remove == {1}
    assert plan.to_keep == {2, 3}
    assert plan.has_changes


def test_reconcile_against_itself_keeps_everything():
    existing = {7, 3, 11}
    plan = reconcile_roster(existing, existing)
    assert plan.to_add == set()
    assert plan.to_remove == set()
    assert plan.to_keep == existing
    assert not plan.has_changes


def test_accepts_lists_with_duplicates():
    plan = reconcile_roster([1, 1, 2], [2, 3, 3])
    assert plan == (frozenset({3}), frozenset({1}), frozenset({2}))


def test_sorted_views_are_ascending():
    plan = reconcile_roster({9, 5, 1, 30}, {30, 1, 12, 4, 8})
    assert plan.sorted_add() == [4, 8, 12]
    assert plan.sorted_remove() == [5, 9]
    assert plan.sorted_keep() == [1, 30]


@pytest.mark.parametrize("seed", range(5))
def test_partition_is_complete_and_disjoint(seed):
    rng = random.Random(seed)
    for _ in range(200):
        existing = {rng.randint(0, 40) for _ in range(rng.randint(0, 25))}
        requested = {rng.randint(0, 40) for _ in range(rng.randint(0, 25))}
        plan = reconcile_roster(existing, requested)

        assert plan.to_add | plan.to_keep == requested
        assert plan.to_remove | plan.to_keep == existing
        assert not plan.to_add & plan.to_keep
        assert not plan.to_remove & plan.to_keep
        assert not plan.to_add & plan.to_remove
