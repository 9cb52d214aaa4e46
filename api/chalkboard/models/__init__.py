"""
Models package - imports all table models so SQLModel registers them.
"""
from chalkboard.models.enums import EvaluationOutcome, QuestionType
from chalkboard.models.user import User
from chalkboard.models.verification_code import VerificationCode
from chalkboard.models.practice_attempt import PracticeAttempt
from chalkboard.models.history import History

__all__ = [
    'EvaluationOutcome',
    'QuestionType',
    'User',
    'VerificationCode',
    'PracticeAttempt',
    'History',
]
