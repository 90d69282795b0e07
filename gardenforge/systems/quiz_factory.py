from __future__ import annotations

from dataclasses import dataclass
from typing import List
import random

from ..core.config import GateConfig

# Challenge kinds shown to the player
ADD = "ADD"
MUL = "MUL"
DIV = "DIV"


@dataclass
class Challenge:
    kind: str
    a: int
    b: int
    answer: int
    choices: List[int]

    @property
    def text(self) -> str:
        op = {ADD: "+", MUL: "×", DIV: "÷"}[self.kind]
        return f"{self.a} {op} {self.b} = ?"


def tier_for_cost(cost: int, cfg: GateConfig) -> str:
    """Which problem family a spend of `cost` gets (caller handles bypass)."""
    if cost >= cfg.hard_min_cost:
        return "HARD"
    if cost >= cfg.mul_min_cost:
        return "MUL"
    return "ADD"


def _problem(tier: str, rng: random.Random):
    if tier == "HARD":
        if rng.randint(0, 1) == 0:
            b = rng.randint(2, 9)
            q = rng.randint(2, 12)
            return DIV, b * q, b, q
        a = rng.randint(10, 25)
        b = rng.randint(2, 5)
        return MUL, a, b, a * b
    if tier == "MUL":
        a = rng.randint(2, 9)
        b = rng.randint(2, 9)
        return MUL, a, b, a * b
    a = rng.randint(1, 9)
    b = rng.randint(1, 9)
    return ADD, a, b, a + b


def make_choices(correct: int, spread: int, rng: random.Random, n: int = 4) -> List[int]:
    """`n` unique positive answers including `correct`, in shuffled order."""
    choices = [correct]
    while len(choices) < n:
        wrong = correct + rng.randint(-spread, spread)
        if wrong <= 0:
            wrong = rng.randint(1, correct + spread)
        if wrong not in choices:
            choices.append(wrong)
    rng.shuffle(choices)
    return choices


def make_challenge(cost: int, rng: random.Random, cfg: GateConfig = GateConfig()) -> Challenge:
    tier = tier_for_cost(cost, cfg)
    kind, a, b, answer = _problem(tier, rng)
    spread = cfg.spread_add if tier == "ADD" else cfg.spread_mul
    return Challenge(kind=kind, a=a, b=b, answer=answer, choices=make_choices(answer, spread, rng, cfg.choice_count))
