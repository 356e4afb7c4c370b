from src.models.db.account import Account, AccountRoleEnum
from src.models.db.auth_session import AuthSession
from src.models.db.candidate import Candidate
from src.models.db.evaluation_session import EvaluationSession, SessionStatusEnum
from src.models.db.question import Question
from src.models.db.template import Template

__all__ = [
    "Account",
    "AccountRoleEnum",
    "AuthSession",
    "Candidate",
    "EvaluationSession",
    "Question",
    "SessionStatusEnum",
    "Template",
]
