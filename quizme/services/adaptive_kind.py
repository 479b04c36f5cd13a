from enum import Enum


class AdaptiveKind(str, Enum):
    harder = "harder"
    weak_focus = "weak-focus"
    same_level_reinforcement = "same-level-reinforcement"
