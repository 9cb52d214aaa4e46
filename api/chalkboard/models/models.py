"""
Models module - re-exports all models.

Allows imports like:
    from chalkboard.models.models import History
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
