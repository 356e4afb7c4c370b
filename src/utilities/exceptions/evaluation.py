class InvalidTemplate(Exception):
    """
    Throw an exception when a template's question list is empty, repeats a question,
    or references questions that do not exist.
    """

    def __init__(self, message: str, missing_question_ids: list[int] | None = None):
        super().__init__(message)
        self.missing_question_ids = missing_question_ids or []


class SessionHasNoQuestions(Exception):
    """
    Throw an exception when none of a template's questions survive to be snapshotted.
    """


class SessionStateConflict(Exception):
    """
    Throw an exception when a lifecycle transition is requested from a status that does not allow it.
    """

    def __init__(self, message: str, status: str):
        super().__init__(message)
        self.status = status
