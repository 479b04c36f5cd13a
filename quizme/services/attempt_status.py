from enum import Enum


class AttemptStatus(str, Enum):
    in_progress = "in-progress"
    completed = "completed"
    abandoned = "abandoned"
