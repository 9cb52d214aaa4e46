"""
Decoding and summarizing of whiteboard submissions.
"""
import base64
import binascii
import json
import logging
import re
from typing import Any, Optional, Tuple

from chalkboard.core.exceptions import BlankCanvasError, ValidationError

logger = logging.getLogger(__name__)

MIN_CANVAS_BYTES = 1000
DEFAULT_CANVAS_MIME_TYPE = "image/png"

_DATA_URI_PATTERN = re.compile(r"^data:([^;,]*)(?:;[^,]*)?,", re.IGNORECASE)


def split_data_uri(data: str) -> Tuple[Optional[str], str]:
    """
    Split an optional data-URI header from base64 content.

    Returns:
        Tuple of (MIME type from the header or None, base64 content)
    """
    data = data.strip()
    match = _DATA_URI_PATTERN.match(data)
    if match:
        return (match.group(1) or None), data[match.end():]
    return None, data


def decode_image_payload(
    data: Optional[str],
    mime_type: Optional[str] = None,
    min_bytes: int = MIN_CANVAS_BYTES,
    default_mime_type: str = DEFAULT_CANVAS_MIME_TYPE,
) -> Tuple[bytes, str]:
    """
    Decode a base64 image submitted by the client.

    Args:
        data: Base64 string, optionally prefixed with "data:<mime>;base64,"
        mime_type: Declared MIME type; inferred from the data URI when absent
        min_bytes: Smallest decoded size accepted. Smaller canvases are treated as blank
        default_mime_type: MIME type used when none is declared or inferred

    Returns:
        Tuple of (image bytes, MIME type)

    Raises:
        ValidationError: If no data was sent or it is not valid base64
        BlankCanvasError: If the decoded image is smaller than `min_bytes`
    """
    if not data or not isinstance(data, str) or not data.strip():
        raise ValidationError('No image provided. Send base64 data in "imageBase64".')

    header_mime, content = split_data_uri(data)
    content = re.sub(r"\s+", "", content)

    try:
        image_bytes = base64.b64decode(content, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValidationError("Provided image data is invalid.") from e

    if not image_bytes:
        raise ValidationError("Provided image data is invalid.")

    if len(image_bytes) < min_bytes:
        logger.info(f"Rejected canvas image of {len(image_bytes)} bytes (minimum {min_bytes})")
        raise BlankCanvasError("The canvas appears to be blank. Write your work on the whiteboard before submitting.")

    return image_bytes, (mime_type or header_mime or default_mime_type)


def count_strokes(canvas: Any) -> int:
    """Number of strokes in a canvas payload, 0 for anything else."""
    if isinstance(canvas, dict) and isinstance(canvas.get("strokes"), list):
        return len(canvas["strokes"])
    return 0


def describe_canvas_state(canvas_state: Any) -> str:
    """
    Describe a stroke-list canvas in prose for a text-only evaluation prompt.

    The model cannot see the symbols, so the description only covers how much
    was written, how many erasures were made and the shape of the strokes.
    """
    if isinstance(canvas_state, str):
        try:
            canvas_state = json.loads(canvas_state)
        except json.JSONDecodeError:
            logger.warning("Canvas state is a string but not JSON")
            return "Unable to analyze the canvas content. Please evaluate based on the question alone."

    if not canvas_state or not isinstance(canvas_state, dict):
        return "The whiteboard appears to be empty - no mathematical work or solution has been written."

    if not isinstance(canvas_state.get("strokes"), list):
        return (
            f"The canvas contains drawing data in the following format: {json.dumps(canvas_state)[:2000]}. "
            "Please analyze this as handwritten mathematical work."
        )

    strokes = [stroke for stroke in canvas_state["strokes"] if isinstance(stroke, dict)]
    if not strokes:
        return "The whiteboard is completely blank. The student has not written any solution or work."

    drawing_strokes = [stroke for stroke in strokes if not stroke.get("isEraser")]
    eraser_strokes = [stroke for stroke in strokes if stroke.get("isEraser")]

    if not drawing_strokes:
        return "The whiteboard contains only eraser marks. Any previous work has been completely erased."

    total_points = sum(len(stroke.get("points") or []) for stroke in drawing_strokes)

    if total_points < 10:
        description = "The student has made minimal marks on the whiteboard, possibly just a few scribbles or test strokes."
    elif total_points < 50:
        description = "The student has written a brief solution with some mathematical symbols or short calculations."
    elif total_points < 200:
        description = "The student has written a moderate amount of work, likely including several steps or calculations."
    else:
        description = "The student has written an extensive solution with detailed mathematical work and calculations."

    if eraser_strokes:
        description += f" The work shows {len(eraser_strokes)} erasure(s), indicating the student made corrections or revisions."

    if total_points / len(drawing_strokes) > 20:
        description += " The writing appears to be in longer strokes, possibly containing expressions, equations, or explanations."
    else:
        description += " The writing consists of shorter strokes, possibly containing numbers, symbols, or brief notations."

    return description
