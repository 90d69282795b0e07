from __future__ import annotations

import random

from gardenforge.core.config import GateConfig
from gardenforge.systems.quiz_factory import ADD, DIV, MUL, make_challenge, make_choices, tier_for_cost


def test_tier_boundaries() -> None:
    cfg = GateConfig()
    assert tier_for_cost(101, cfg) == "ADD"
    assert tier_for_cost(199, cfg) == "ADD"
    assert tier_for_cost(200, cfg) == "MUL"
    assert tier_for_cost(999, cfg) == "MUL"
    assert tier_for_cost(1000, cfg) == "HARD"


def test_addition_for_cheap_spend() -> None:
    rng = random.Random(1)
    for _ in range(50):
        ch = make_challenge(150, rng)
        assert ch.kind == ADD
        assert 1 <= ch.a <= 9 and 1 <= ch.b <= 9
        assert ch.answer == ch.a + ch.b
        assert ch.text == f"{ch.a} + {ch.b} = ?"


def test_single_digit_multiplication_for_mid_spend() -> None:
    rng = random.Random(2)
    for _ in range(50):
        ch = make_challenge(500, rng)
        assert ch.kind == MUL
        assert 2 <= ch.a <= 9 and 2 <= ch.b <= 9
        assert ch.answer == ch.a * ch.b


def test_hard_spend_is_division_or_large_multiplication() -> None:
    rng = random.Random(3)
    seen = set()
    for _ in range(100):
        ch = make_challenge(1500, rng)
        seen.add(ch.kind)
        if ch.kind == DIV:
            assert 2 <= ch.b <= 9 and 2 <= ch.answer <= 12
            assert ch.a == ch.b * ch.answer
        else:
            assert ch.kind == MUL
            assert 10 <= ch.a <= 25 and 2 <= ch.b <= 5
    assert seen == {DIV, MUL}


def test_choices_unique_positive_and_include_answer() -> None:
    rng = random.Random(4)
    for cost in (150, 500, 2000):
        for _ in range(30):
            ch = make_challenge(cost, rng)
            assert len(ch.choices) == 4
            assert len(set(ch.choices)) == 4
            assert ch.answer in ch.choices
            assert all(c > 0 for c in ch.choices)


def test_distractors_stay_within_spread() -> None:
    rng = random.Random(5)
    for _ in range(30):
        choices = make_choices(50, 5, rng)
        assert all(45 <= c <= 55 for c in choices)


def test_small_answer_rerolls_non_positive_candidates() -> None:
    rng = random.Random(6)
    for _ in range(30):
        choices = make_choices(2, 5, rng)
        assert 2 in choices
        assert all(1 <= c <= 7 for c in choices)


def test_same_seed_same_challenge() -> None:
    a = make_challenge(300, random.Random(42))
    b = make_challenge(300, random.Random(42))
    assert (a.a, a.b, a.choices) == (b.a, b.b, b.choices)
