"""
Practice attempts and practice question generation.
"""
import logging
import time
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from chalkboard.core.exceptions import PersistenceError
from chalkboard.models.enums import QuestionType
from chalkboard.models.practice_attempt import PracticeAttempt
from chalkboard.models.timestamps import utc_now
from chalkboard.services.gemini_client import GeminiClient
from chalkboard.services.prompt_service import generate_question_prompt, resolve_subtopic
from chalkboard.services.response_parser import extract_text, load_json_object

logger = logging.getLogger(__name__)

QUESTION_CONFIG = {"temperature": 0.7, "maxOutputTokens": 4096}


def submit_practice_attempt(
    session: Session,
    user_id: Optional[int],
    question: str,
    canvas: Optional[Dict[str, Any]],
) -> PracticeAttempt:
    """
    Store a practice attempt.

    Args:
        session: Database session
        user_id: Owner, or None for anonymous submissions
        question: Question text
        canvas: Canvas payload as sent by the client

    Returns:
        The stored attempt

    Raises:
        PersistenceError: If the insert fails
    """
    attempt = PracticeAttempt(user_id=user_id, question=question, canvas=canvas or {})
    try:
        session.add(attempt)
        session.commit()
        session.refresh(attempt)
    except SQLAlchemyError as e:
        session.rollback()
        raise PersistenceError(f"Practice attempt insert failed: {e}") from e
    return attempt


def _question_type(value: Any) -> str:
    """Known question type, with spaces, underscores and case variations folded (e.g. "Multiple Choice")."""
    if isinstance(value, str):
        folded = value.strip().lower().replace(" ", "-").replace("_", "-")
        if folded == "true/false":
            folded = QuestionType.TRUE_FALSE.value
        try:
            return QuestionType(folded).value
        except ValueError:
            logger.warning(f"Unknown question type from model: {value}")
    return QuestionType.SHORT_ANSWER.value


def _normalize_question(data: Dict[str, Any], topic: str, subtopic: str) -> Dict[str, Any]:
    options: List[Any] = data.get("options") if isinstance(data.get("options"), list) else []
    return {
        "id": f"gen-{int(time.time() * 1000)}",
        "questionText": data.get("questionText") or data.get("question") or "",
        "type": _question_type(data.get("type")),
        "options": options,
        "explanation": data.get("explanation") or "",
        "difficulty": data.get("difficulty") or "Medium",
        "topic": data.get("topic") or topic,
        "subtopic": data.get("subtopic") or subtopic,
        "generatedAt": utc_now().isoformat().replace("+00:00", "Z"),
    }


def generate_practice_question(
    client: GeminiClient,
    class_level: str,
    subject: str,
    curriculum: str,
    topic: str,
    subtopic: Optional[str] = None,
    subtopics: Optional[List[str]] = None,
) -> Dict[str, Any]:
    """
    Generate a single practice question.

    Returns:
        Generated question with id, questionText, type, options, explanation,
        difficulty, topic, subtopic and generatedAt

    Raises:
        ResponseParseError: If the model did not return a JSON object
    """
    resolved_subtopic = resolve_subtopic(subtopic, subtopics)
    prompt = generate_question_prompt(class_level, subject, curriculum, topic, resolved_subtopic)

    response = client.generate(prompt, operation="generate question", generation_config=QUESTION_CONFIG)
    text = extract_text(response)
    question_data = load_json_object(text)

    normalized = _normalize_question(question_data, topic, resolved_subtopic)
    logger.info(f"Generated {normalized['type']} question for {subject}/{topic}/{resolved_subtopic}")
    return normalized
