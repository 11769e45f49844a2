import random
from typing import Iterable

from quiz_bot.quiz.models import Question


def shuffle_questions(pool: list[Question], rng: random.Random | None = None) -> list[Question]:
    """Fisher-Yates shuffle of a copy of the pool."""
    rng = rng or random
    shuffled = list(pool)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def select_questions(
    pool: list[Question],
    desired_count: int,
    history: Iterable[str],
    rng: random.Random | None = None,
) -> list[Question]:
    """Pick up to desired_count questions, unseen ones first.

    Order inside the unseen and seen groups is the shuffled order;
    ``sorted`` is stable, so the partition does not reshuffle.
    """
    if desired_count <= 0:
        return []

    seen = set(history)
    shuffled = shuffle_questions(pool, rng)
    ordered = sorted(shuffled, key=lambda q: q.id in seen)
    return ordered[:min(desired_count, len(ordered))]
