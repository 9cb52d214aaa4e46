"""
Practice endpoints: storing whiteboard attempts and generating questions.
"""
import logging

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from chalkboard.core.database import get_session
from chalkboard.schemas.practice import (
    SubmitPracticeRequest,
    PracticeAttemptResponse,
    GenerateQuestionRequest,
)
from chalkboard.services.canvas import count_strokes
from chalkboard.services.gemini_client import GeminiClient, get_gemini_client
from chalkboard.services.practice_service import submit_practice_attempt, generate_practice_question
from chalkboard.api.v1.endpoints.utils import success

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/practice", tags=["practice"])


def _truncate(text: str, limit: int = 80) -> str:
    return f"{text[:limit]}..." if len(text) > limit else text


@router.post("", status_code=status.HTTP_201_CREATED)
async def submit_practice(
    request: SubmitPracticeRequest,
    session: Session = Depends(get_session)
):
    """Store one whiteboard attempt. userId may be omitted for anonymous practice."""
    owner = request.user_id if request.user_id is not None else "anonymous"
    logger.info(
        f"[Practice] Submission received | user={owner} "
        f"question=\"{_truncate(request.question)}\" strokes={count_strokes(request.canvas)}"
    )

    attempt = submit_practice_attempt(session, request.user_id, request.question, request.canvas)

    logger.info(f"[Practice] Submission stored | user={owner} attemptId={attempt.id}")
    return success(PracticeAttemptResponse.model_validate(attempt))


@router.post("/generate-question")
def generate_question(
    request: GenerateQuestionRequest,
    client: GeminiClient = Depends(get_gemini_client)
):
    """
    Generate one practice question for a class level, subject, curriculum and topic.

    When no subtopic is given, the first of `subtopics` is used.
    """
    question = generate_practice_question(
        client,
        class_level=request.class_level,
        subject=request.subject,
        curriculum=request.curriculum,
        topic=request.topic,
        subtopic=request.subtopic,
        subtopics=request.subtopics,
    )
    return success(question)
