import json

from quizme.core.security import create_access_token


class FakeGenerator:
    """Returns scripted responses in order and records every call."""

    def __init__(self, responses=None):
        self.responses = list(responses or [])
        self.calls = []

    def complete(self, system_instruction, prompt, temperature=0.7, purpose="generate_quiz"):
        self.calls.append({
            "system_instruction": system_instruction,
            "prompt": prompt,
            "temperature": temperature,
            "purpose": purpose,
        })
        if not self.responses:
            raise AssertionError(f"unexpected generator call: {purpose}")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def candidate(question_type, options, correct, text="What is it?", explanation="Because."):
    return {
        "questionText": text,
        "questionType": question_type,
        "options": options,
        "correctAnswers": correct,
        "explanation": explanation,
    }


def questions_payload(*candidates):
    return json.dumps({"questions": list(candidates)})


FOUR_QUESTIONS = [
    candidate("mcq", ["1", "2", "3", "4"], [1], text="What is 1 + 1?"),
    candidate("true-false", ["True", "False"], [0], text="The sky is blue."),
    candidate("mcq", ["red", "green", "blue", "yellow"], [2], text="Which colour is the sea?"),
    candidate("multiple-correct", ["2", "3", "4", "5"], [0, 2], text="Which numbers are even?"),
]


def auth_header(user_id):
    return {"Authorization": f"Bearer {create_access_token({'sub': user_id})}"}
