import random

import pytest

from models.draft import TEAM_1, TEAM_2
from services.team_partitioner import (
    assign_incrementally,
    balanced_team_for,
    even_split,
)


@pytest.mark.parametrize("size", range(2, 11))
def test_even_split_covers_roster(size):
    roster = [f"P{i}" for i in range(size)]
    team1, team2 = even_split(roster, random.Random(size))

    assert len(team1) - len(team2) in (0, 1)
    assert set(team1).isdisjoint(team2)
    assert sorted(team1 + team2) == sorted(roster)


def test_even_split_five_players():
    team1, team2 = even_split(["A", "B", "C", "D", "E"], random.Random(1))
    assert (len(team1), len(team2)) == (3, 2)


def test_balanced_team_prefers_smaller_team_and_team_one_on_ties():
    assert balanced_team_for(0, 0) == TEAM_1
    assert balanced_team_for(1, 0) == TEAM_2
    assert balanced_team_for(1, 1) == TEAM_1
    assert balanced_team_for(2, 3) == TEAM_1


def test_assign_incrementally_alternates_in_reveal_order():
    team1, team2, assignments = assign_incrementally(["E", "A", "D", "B", "C"])

    assert team1 == ["E", "D", "C"]
    assert team2 == ["A", "B"]
    assert list(assignments) == ["E", "A", "D", "B", "C"]
    assert assignments["A"] == TEAM_2
