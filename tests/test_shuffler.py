import random
from collections import Counter
from itertools import permutations

from services.shuffler import shuffle


def test_shuffle_returns_permutation_without_mutating_input():
    players = ["A", "B", "C", "D", "E"]
    shuffled = shuffle(players, random.Random(3))

    assert sorted(shuffled) == sorted(players)
    assert players == ["A", "B", "C", "D", "E"]
    assert shuffled is not players


def test_shuffle_handles_tiny_inputs():
    assert shuffle([]) == []
    assert shuffle(["solo"]) == ["solo"]


def test_shuffle_is_roughly_uniform():
    rng = random.Random(2024)
    trials = 12000
    counts = Counter(tuple(shuffle("ABC", rng)) for _ in range(trials))

    expected = trials / 6
    assert set(counts) == set(permutations("ABC"))
    for count in counts.values():
        assert abs(count - expected) < expected * 0.1
