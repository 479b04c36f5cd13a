class QuizMeError(Exception):
    """Base class for failures surfaced to API callers as ``{kind, detail}``."""

    kind = "Error"
    status_code = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFoundError(QuizMeError):
    kind = "NotFound"
    status_code = 404


class ForbiddenError(QuizMeError):
    kind = "Forbidden"
    status_code = 403


class InvalidStateError(QuizMeError):
    kind = "InvalidState"
    status_code = 409


class OutOfRangeError(QuizMeError):
    kind = "OutOfRange"
    status_code = 400


class NoValidQuestionsError(QuizMeError):
    kind = "NoValidQuestions"
    status_code = 502


class UpstreamFailureError(QuizMeError):
    kind = "UpstreamFailure"
    status_code = 502
