"""
Hint and evaluation endpoints.

Image endpoints reject canvases under MIN_CANVAS_BYTES before any model call.
"""
import logging
from typing import NamedTuple

from fastapi import APIRouter, Depends

from chalkboard.schemas.ai import ImageSubmissionRequest, CanvasEvaluationRequest
from chalkboard.services.ai_service import (
    generate_hint_from_image,
    evaluate_canvas_image,
    evaluate_canvas_answer,
)
from chalkboard.services.canvas import decode_image_payload, count_strokes
from chalkboard.services.gemini_client import GeminiClient, get_gemini_client
from chalkboard.api.v1.endpoints.utils import success

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ai", tags=["ai"])


class CanvasImage(NamedTuple):
    question: str
    image_bytes: bytes
    mime_type: str


def decode_canvas_image(request: ImageSubmissionRequest) -> CanvasImage:
    """Decode the submitted image; declared ahead of the Gemini client so blank canvases fail first."""
    image_bytes, mime_type = decode_image_payload(request.image_base64, request.mime_type)
    return CanvasImage(request.question, image_bytes, mime_type)


@router.post("/hints")
def get_hint(
    canvas: CanvasImage = Depends(decode_canvas_image),
    client: GeminiClient = Depends(get_gemini_client)
):
    """One strategic hint for the work on the whiteboard."""
    result = generate_hint_from_image(client, canvas.question, canvas.image_bytes, canvas.mime_type)
    return success(result.to_response())


@router.post("/evaluate-image")
def evaluate_image(
    canvas: CanvasImage = Depends(decode_canvas_image),
    client: GeminiClient = Depends(get_gemini_client)
):
    """Grade the whiteboard image as correct, incorrect or blank."""
    result = evaluate_canvas_image(client, canvas.question, canvas.image_bytes, canvas.mime_type)
    return success(result.to_response())


@router.post("/evaluate")
def evaluate(
    request: CanvasEvaluationRequest,
    client: GeminiClient = Depends(get_gemini_client)
):
    """Grade a stroke-list canvas from its text summary."""
    logger.info(f"Evaluating canvas with {count_strokes(request.canvas_state)} strokes")
    result = evaluate_canvas_answer(client, request.question, request.canvas_state)
    return success(result.to_response())
