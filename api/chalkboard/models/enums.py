"""
Model enums.
"""
from enum import Enum


class EvaluationOutcome(str, Enum):
    """Verdict for a graded whiteboard submission."""
    CORRECT = "correct"
    INCORRECT = "incorrect"
    BLANK = "blank"


class QuestionType(str, Enum):
    """Question formats the generator may produce."""
    MULTIPLE_CHOICE = "multiple-choice"
    SHORT_ANSWER = "short-answer"
    PROBLEM_SOLVING = "problem-solving"
    TRUE_FALSE = "true-false"
