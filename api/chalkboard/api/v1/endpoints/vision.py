from typing import Tuple

from fastapi import APIRouter, Depends

from chalkboard.core.exceptions import NoTextDetectedError
from chalkboard.schemas.vision import VisionExtractRequest, VisionExtractResponse
from chalkboard.services.canvas import decode_image_payload
from chalkboard.services.gemini_client import GeminiClient, get_gemini_client
from chalkboard.services.vision_service import extract_question_from_image
from chalkboard.api.v1.endpoints.utils import success

router = APIRouter(prefix="/vision", tags=["vision"])

PHOTO_MIME_TYPE = "image/jpeg"


def decode_photo(request: VisionExtractRequest) -> Tuple[bytes, str]:
    """Decode the uploaded photo before the Gemini client is resolved."""
    return decode_image_payload(
        request.image_base64,
        request.mime_type,
        min_bytes=1,
        default_mime_type=PHOTO_MIME_TYPE,
    )


@router.post("/extract")
def extract_question(
    photo: Tuple[bytes, str] = Depends(decode_photo),
    client: GeminiClient = Depends(get_gemini_client)
):
    """Transcribe the question (or written solution) in an image."""
    image_bytes, mime_type = photo

    text = extract_question_from_image(client, image_bytes, mime_type)
    if not text:
        raise NoTextDetectedError("No text detected in the image.")

    return success(VisionExtractResponse(text=text))
