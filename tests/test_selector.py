"""Тесты выбора вопросов с учётом истории."""
import random

import pytest

from quiz_bot.quiz.selector import select_questions, shuffle_questions


def _ids(questions):
    return [q.id for q in questions]


class TestShuffle:

    def test_permutation(self, pool):
        shuffled = shuffle_questions(pool, random.Random(1))

        assert sorted(_ids(shuffled)) == ["a", "b", "c", "d"]

    def test_pool_not_modified(self, pool):
        shuffle_questions(pool, random.Random(2))

        assert _ids(pool) == ["a", "b", "c", "d"]

    def test_all_orders_reachable(self, pool):
        rng = random.Random(3)
        orders = {tuple(_ids(shuffle_questions(pool, rng))) for _ in range(2000)}

        assert len(orders) == 24


class TestSelectQuestions:

    @pytest.mark.parametrize("seed", range(20))
    def test_history_bias(self, pool, seed):
        """История [b], нужно 3: всегда a, c, d и никогда b."""
        result = select_questions(pool, 3, ["b"], random.Random(seed))

        assert sorted(_ids(result)) == ["a", "c", "d"]

    @pytest.mark.parametrize("seed", range(20))
    def test_unseen_before_seen(self, pool, seed):
        result = select_questions(pool, 4, ["a", "c"], random.Random(seed))

        ids = _ids(result)
        assert set(ids[:2]) == {"b", "d"}
        assert set(ids[2:]) == {"a", "c"}

    def test_partition_keeps_shuffled_order(self, pool):
        """Внутри групп порядок: как после перемешивания, без нового случайного выбора."""
        shuffled = _ids(shuffle_questions(pool, random.Random(5)))
        result = _ids(select_questions(pool, 4, ["b", "d"], random.Random(5)))

        assert result == [i for i in shuffled if i not in ("b", "d")] + [i for i in shuffled if i in ("b", "d")]

    def test_count_clamped_to_pool(self, pool):
        assert len(select_questions(pool, 10, [])) == 4

    @pytest.mark.parametrize("count", [0, -3])
    def test_non_positive_count(self, pool, count):
        assert select_questions(pool, count, []) == []

    def test_empty_pool(self):
        assert select_questions([], 5, []) == []

    def test_all_in_history(self, pool):
        result = select_questions(pool, 2, ["a", "b", "c", "d"], random.Random(0))

        assert len(result) == 2
