"""
Question extraction (OCR) from photographed or drawn questions.
"""
import logging

from chalkboard.core.exceptions import EmptyResponseError, ValidationError
from chalkboard.services.gemini_client import GeminiClient
from chalkboard.services.prompt_service import VISION_EXTRACT_PROMPT, generate_reformat_prompt
from chalkboard.services.response_parser import clean_extracted_text, extract_text

logger = logging.getLogger(__name__)

EXTRACT_CONFIG = {"temperature": 0, "maxOutputTokens": 4096}
REFORMAT_CONFIG = {"temperature": 0.3, "maxOutputTokens": 4096}


def extract_question_from_image(client: GeminiClient, image_bytes: bytes, mime_type: str = "image/jpeg") -> str:
    """
    Extract the text of a question or solution from an image.

    Step 1 transcribes the image (LaTeX for math); step 2 lays the
    transcription out one statement per line. If the second step returns
    nothing, the raw transcription is used.

    Args:
        client: Gemini client
        image_bytes: Decoded image
        mime_type: MIME type of the image

    Returns:
        Cleaned text, or an empty string if nothing was detected
    """
    if not image_bytes:
        raise ValidationError("Empty image buffer provided")

    logger.info(f"Extracting text from image ({len(image_bytes)} bytes, {mime_type})")
    response = client.generate(
        VISION_EXTRACT_PROMPT,
        operation="extract text",
        image_bytes=image_bytes,
        mime_type=mime_type,
        generation_config=EXTRACT_CONFIG,
    )
    try:
        raw_text = extract_text(response)
    except EmptyResponseError:
        logger.info("No text detected in image")
        return ""
    logger.debug(f"Raw extracted text: {raw_text}")

    response = client.generate(
        generate_reformat_prompt(raw_text),
        operation="reformat text",
        generation_config=REFORMAT_CONFIG,
    )
    try:
        formatted_text = extract_text(response)
    except EmptyResponseError:
        logger.warning("Reformatting returned nothing, using raw extraction")
        formatted_text = raw_text

    # Literal "\n" sequences instead of real line breaks
    if "\\n" in formatted_text and "\n" not in formatted_text:
        logger.info("Detected literal \\n - converting to actual newlines")
        formatted_text = formatted_text.replace("\\n", "\n")

    logger.info(f"Extracted {formatted_text.count(chr(10))} line breaks of text")
    return clean_extracted_text(formatted_text)
