import random


def shuffle(seq, rng: random.Random | None = None) -> list:
    """Return a uniformly shuffled copy of ``seq`` (Fisher-Yates)"""
    rng = rng or random
    shuffled = list(seq)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled
