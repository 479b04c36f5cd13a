from enum import Enum


class QuestionType(str, Enum):
    mcq = "mcq"
    true_false = "true-false"
    multiple_correct = "multiple-correct"


QUESTION_TYPE_VALUES = [question_type.value for question_type in QuestionType]
