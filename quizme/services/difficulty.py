from enum import Enum


class Difficulty(str, Enum):
    easy = "easy"
    medium = "medium"
    hard = "hard"


_NEXT_DIFFICULTY = {
    Difficulty.easy: Difficulty.medium,
    Difficulty.medium: Difficulty.hard,
    Difficulty.hard: Difficulty.hard,
}

DIFFICULTY_DESCRIPTIONS = {
    Difficulty.easy: "basic and straightforward",
    Difficulty.medium: "moderately challenging",
    Difficulty.hard: "advanced and complex",
}


def next_difficulty(current: Difficulty, harder: bool) -> Difficulty:
    current = Difficulty(current)
    if not harder:
        return current
    return _NEXT_DIFFICULTY[current]
