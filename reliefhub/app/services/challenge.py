"""Math challenge generator"""

import random
from dataclasses import dataclass

# operator -> (first operand range, second operand range), inclusive bounds
OPERAND_RANGES: dict[str, tuple[tuple[int, int], tuple[int, int]]] = {
    "+": ((1, 50), (1, 50)),
    # first operand is always >= the second, so the difference is never negative
    "-": ((25, 74), (1, 25)),
    "×": ((1, 12), (1, 12)),
}

_OPERATIONS = {
    "+": lambda a, b: a + b,
    "-": lambda a, b: a - b,
    "×": lambda a, b: a * b,
}

_system_random = random.SystemRandom()


@dataclass(frozen=True)
class Challenge:
    question: str
    answer: int


def generate_challenge(rng: random.Random | None = None) -> Challenge:
    """Pick +, - or × uniformly and build a question with its answer"""
    rng = rng or _system_random
    operator = rng.choice(list(OPERAND_RANGES))
    (a_low, a_high), (b_low, b_high) = OPERAND_RANGES[operator]
    a = rng.randint(a_low, a_high)
    b = rng.randint(b_low, b_high)
    return Challenge(question=f"{a} {operator} {b}", answer=_OPERATIONS[operator](a, b))
