"""
Hint and evaluation service built on the Gemini client.
"""
import logging
from typing import Any

from chalkboard.core.exceptions import ChalkboardException
from chalkboard.schemas.ai import FeedbackResult
from chalkboard.services.canvas import describe_canvas_state
from chalkboard.services.gemini_client import GeminiClient
from chalkboard.services.prompt_service import (
    generate_canvas_evaluation_prompt,
    generate_hint_prompt,
    generate_image_evaluation_prompt,
)
from chalkboard.services.response_parser import (
    extract_text,
    parse_evaluation_response,
    parse_hint_response,
    parse_json_response,
)

logger = logging.getLogger(__name__)

HINT_CONFIG = {"temperature": 0.7, "maxOutputTokens": 1024, "topP": 0.95, "topK": 40}
IMAGE_EVALUATION_CONFIG = {"temperature": 0.3, "maxOutputTokens": 1536, "topP": 0.95, "topK": 40}
CANVAS_EVALUATION_CONFIG = {"temperature": 0.3, "maxOutputTokens": 2048}

HINT_TRUNCATION_FALLBACK = (
    "TITLE: Keep going!\n"
    "HINT: Your work is extensive, so I could not review all of it. Try focusing on the step you are stuck on.\n"
    "NEXT_STEP: Erase finished steps and ask again about the current one"
)
EVALUATION_TRUNCATION_FALLBACK = (
    "RESULT: INCORRECT\n"
    "FEEDBACK: Your work is extensive. Please break it into smaller steps for better feedback."
)


def _log_request(kind: str, question: str, image_bytes: bytes) -> None:
    logger.info(f"=== {kind} REQUEST === Question: {question[:100]} | Image size: {len(image_bytes)} bytes")


def generate_hint_from_image(
    client: GeminiClient,
    question: str,
    image_bytes: bytes,
    mime_type: str = "image/png",
) -> FeedbackResult:
    """
    Ask for one strategic hint on a whiteboard image.

    Args:
        client: Gemini client
        question: Problem the student is working on
        image_bytes: Decoded whiteboard image
        mime_type: MIME type of the image

    Returns:
        FeedbackResult with title, explanation and next steps

    Raises:
        UpstreamError: If the model call or text extraction fails
    """
    _log_request("HINT", question, image_bytes)
    try:
        response = client.generate(
            generate_hint_prompt(question),
            operation="generate hint",
            image_bytes=image_bytes,
            mime_type=mime_type,
            generation_config=HINT_CONFIG,
        )
        text = extract_text(response, truncation_fallback=HINT_TRUNCATION_FALLBACK)
    except ChalkboardException as e:
        logger.error(f"Gemini hint generation error: {e}")
        raise
    return parse_hint_response(text)


def evaluate_canvas_image(
    client: GeminiClient,
    question: str,
    image_bytes: bytes,
    mime_type: str = "image/png",
) -> FeedbackResult:
    """
    Grade a whiteboard image as correct, incorrect or blank.

    Args:
        client: Gemini client
        question: Problem the student is working on
        image_bytes: Decoded whiteboard image
        mime_type: MIME type of the image

    Returns:
        FeedbackResult with isCorrect and isBlank set
    """
    _log_request("EVALUATION", question, image_bytes)
    try:
        response = client.generate(
            generate_image_evaluation_prompt(question),
            operation="evaluate",
            image_bytes=image_bytes,
            mime_type=mime_type,
            generation_config=IMAGE_EVALUATION_CONFIG,
        )
        text = extract_text(response, truncation_fallback=EVALUATION_TRUNCATION_FALLBACK)
    except ChalkboardException as e:
        logger.error(f"Gemini Vision evaluation error: {e}")
        raise
    return parse_evaluation_response(text)


def evaluate_canvas_answer(client: GeminiClient, question: str, canvas_state: Any) -> FeedbackResult:
    """
    Evaluate a stroke-list canvas from a prose description of its strokes.

    The model never sees the drawing, so the feedback stays general.
    """
    canvas_description = describe_canvas_state(canvas_state)
    logger.info(f"Evaluating canvas state for question: {question[:100]}")
    try:
        response = client.generate(
            generate_canvas_evaluation_prompt(question, canvas_description),
            operation="evaluate canvas",
            generation_config=CANVAS_EVALUATION_CONFIG,
        )
        text = extract_text(response)
    except ChalkboardException as e:
        logger.error(f"Gemini evaluation error: {e}")
        raise
    return parse_json_response(text, default_title="AI Feedback")
