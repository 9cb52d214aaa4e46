"""
Turn raw Gemini responses into text, and text into structured feedback.

Two output conventions are supported:

* labeled fields, e.g.::

      TITLE: Good start!
      HINT: You moved the 5 correctly...
      NEXT_STEP: Divide both sides by 2

* a JSON object, optionally wrapped in a ```json fence or surrounded by prose.

Parsers never raise for text that is present but malformed; they fall back to
using the whole text as the explanation.
"""
import json
import logging
import re
from typing import Any, Dict, List, Optional, Tuple

from chalkboard.core.exceptions import ContentBlockedError, EmptyResponseError, ResponseParseError
from chalkboard.models.enums import EvaluationOutcome
from chalkboard.schemas.ai import FeedbackResult

logger = logging.getLogger(__name__)

MIN_PARTIAL_LENGTH = 20
DEFAULT_TRUNCATION_FALLBACK = (
    "The response was cut short before it could be completed. "
    "Please try again with a smaller portion of your work."
)

HINT_TITLE = "Hint"
EVALUATION_TITLE = "Evaluation"
FEEDBACK_TITLE = "Feedback"

OUTCOME_TITLES = {
    EvaluationOutcome.CORRECT: "Correct",
    EvaluationOutcome.INCORRECT: "Incorrect",
    EvaluationOutcome.BLANK: "Blank",
}

# Labels start a line or follow a "|" separator ("RESULT: CORRECT | FEEDBACK: ...")
_LABEL_PATTERN = re.compile(
    r"(?:^|(?<=\|))[ \t*]*(TITLE|HINT|FEEDBACK|NEXT[ _]STEPS?|RESULT)[ \t*]*:",
    re.IGNORECASE | re.MULTILINE,
)
_RESULT_VALUE_PATTERN = re.compile(r"\W*(INCORRECT|CORRECT|BLANK)\b", re.IGNORECASE)
_CORRECT_KEYWORDS = re.compile(r"\b(correct|perfect|right)\b", re.IGNORECASE)
_BLANK_KEYWORDS = re.compile(r"\bblank\b|cannot see", re.IGNORECASE)
_FENCE_PATTERN = re.compile(r"```(?:json)?[ \t]*\n?(.*?)```", re.IGNORECASE | re.DOTALL)


# ---------------------------------------------------------------------------
# Text extraction
# ---------------------------------------------------------------------------

def _field(obj: Any, name: str) -> Any:
    """Read `name` from a dict or an attribute-style response object."""
    if obj is None:
        return None
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def _first_candidate(response: Any) -> Any:
    candidates = _field(response, "candidates") or []
    return candidates[0] if len(candidates) > 0 else None


def _join_parts(candidate: Any) -> str:
    """Concatenate the text parts of a candidate, skipping thought summaries."""
    parts = _field(_field(candidate, "content"), "parts") or []
    texts = []
    for part in parts:
        if _field(part, "thought"):
            continue
        text = _field(part, "text")
        if isinstance(text, str):
            texts.append(text)
    return "".join(texts).strip()


def _direct_text(response: Any) -> Optional[str]:
    """Text accessor offered by SDK response objects (attribute, key or method)."""
    text = _field(response, "text")
    if callable(text):
        text = text()
    if isinstance(text, str):
        return text.strip()
    return None


def block_reason(response: Any) -> Optional[str]:
    """Safety block reason of a response, or None if it was not blocked."""
    reason = _field(_field(response, "promptFeedback"), "blockReason")
    if reason:
        return str(reason)
    if _field(_first_candidate(response), "finishReason") == "SAFETY":
        return "SAFETY"
    return None


def extract_text(response: Any, truncation_fallback: Optional[str] = None) -> str:
    """
    Extract plain text from a generateContent response.

    Args:
        response: Raw response (REST JSON dict or SDK-style object)
        truncation_fallback: Text used when the response was truncated and the
            salvaged part is shorter than MIN_PARTIAL_LENGTH

    Returns:
        Non-empty response text

    Raises:
        ContentBlockedError: If the safety filters blocked the prompt or response
        EmptyResponseError: If no text could be obtained
    """
    reason = block_reason(response)
    if reason:
        logger.error(f"Response blocked by safety filter: {reason}")
        raise ContentBlockedError("Content was blocked by safety filters. Please try rephrasing your question.")

    candidate = _first_candidate(response)
    finish_reason = _field(candidate, "finishReason")

    text = _direct_text(response)
    if text is None:
        text = _join_parts(candidate)

    if finish_reason == "MAX_TOKENS":
        thoughts = _field(_field(response, "usageMetadata"), "thoughtsTokenCount") or 0
        logger.warning(f"Response was truncated due to MAX_TOKENS. Thinking tokens used: {thoughts}")
        partial = _join_parts(candidate) or text
        if partial and len(partial) >= MIN_PARTIAL_LENGTH:
            logger.info(f"Using partial response: {len(partial)} chars")
            text = partial
        else:
            logger.warning("Partial response too short, using fallback")
            text = truncation_fallback or DEFAULT_TRUNCATION_FALLBACK

    if not text:
        logger.error(f"Empty response after extraction. Finish reason: {finish_reason}")
        raise EmptyResponseError("Received empty response from AI service. Please try again.")

    logger.debug(f"Extracted {len(text)} chars: {text[:200]}")
    return text


# ---------------------------------------------------------------------------
# Labeled-field format
# ---------------------------------------------------------------------------

def _clean_value(value: str) -> str:
    """Drop an inline `|` separator and bold markers left over from the label."""
    value = value.strip()
    if value.endswith("|"):
        value = value[:-1].rstrip()
    # Only an unpaired ** belongs to the label
    if value.startswith("**") and value.count("**") % 2 == 1:
        value = value[2:].lstrip()
    if value.endswith("**") and value.count("**") % 2 == 1:
        value = value[:-2].rstrip()
    return value


def split_labeled_fields(text: str) -> List[Tuple[str, str]]:
    """
    Split text into (LABEL, value) pairs in order of appearance.

    A value runs until the next known label or the end of the text. Labels are
    normalized to upper case, with NEXT STEP / NEXT_STEPS folded into NEXT_STEP.
    """
    matches = list(_LABEL_PATTERN.finditer(text))
    fields = []
    for index, match in enumerate(matches):
        end = matches[index + 1].start() if index + 1 < len(matches) else len(text)
        label = re.sub(r"[ _]", "_", match.group(1).upper())
        if label.startswith("NEXT_STEP"):
            label = "NEXT_STEP"
        fields.append((label, _clean_value(text[match.end():end])))
    return fields


def _first_value(fields: List[Tuple[str, str]], *labels: str) -> Optional[str]:
    for label, value in fields:
        if label in labels and value:
            return value
    return None


def _all_values(fields: List[Tuple[str, str]], label: str) -> List[str]:
    return [value for field_label, value in fields if field_label == label and value]


def parse_hint_response(text: str) -> FeedbackResult:
    """
    Parse TITLE / HINT / NEXT_STEP labeled text into a hint.

    Missing TITLE falls back to "Hint"; missing HINT (or FEEDBACK) falls back
    to the whole text; missing NEXT_STEP gives an empty list.
    """
    fields = split_labeled_fields(text)

    title = _first_value(fields, "TITLE") or HINT_TITLE
    explanation = _first_value(fields, "HINT", "FEEDBACK")
    if not explanation:
        logger.warning("Failed to parse hint response, using full response")
        explanation = text.strip()

    result = FeedbackResult(
        title=title,
        explanation=explanation,
        next_steps=_all_values(fields, "NEXT_STEP"),
    )
    logger.info(f"Parsed hint - Title: {result.title}, next steps: {len(result.next_steps)}")
    return result


def parse_outcome(value: Optional[str]) -> EvaluationOutcome:
    """Map a RESULT value to an outcome; anything unrecognized is INCORRECT."""
    if value:
        match = _RESULT_VALUE_PATTERN.match(value)
        if match:
            return EvaluationOutcome(match.group(1).lower())
    return EvaluationOutcome.INCORRECT


def sniff_outcome(text: str) -> Optional[EvaluationOutcome]:
    """Guess an outcome from keywords in unlabeled text."""
    if _CORRECT_KEYWORDS.search(text):
        return EvaluationOutcome.CORRECT
    if _BLANK_KEYWORDS.search(text):
        return EvaluationOutcome.BLANK
    return None


def parse_evaluation_response(text: str) -> FeedbackResult:
    """
    Parse RESULT / FEEDBACK labeled text into an evaluation.

    RESULT maps to correct, incorrect or blank (incorrect when unrecognized).
    Keyword sniffing is only used when neither RESULT nor FEEDBACK is present.
    """
    fields = split_labeled_fields(text)
    result_value = _first_value(fields, "RESULT")
    feedback = _first_value(fields, "FEEDBACK", "HINT")

    if result_value is None and feedback is None:
        logger.warning("Failed to parse evaluation response in expected format, using fallback")
        outcome = sniff_outcome(text)
        default_title = OUTCOME_TITLES[outcome] if outcome else EVALUATION_TITLE
        outcome = outcome or EvaluationOutcome.INCORRECT
    else:
        outcome = parse_outcome(result_value)
        default_title = OUTCOME_TITLES[outcome]

    result = FeedbackResult(
        title=_first_value(fields, "TITLE") or default_title,
        explanation=feedback or text.strip(),
        next_steps=_all_values(fields, "NEXT_STEP"),
        is_correct=outcome == EvaluationOutcome.CORRECT,
        is_blank=outcome == EvaluationOutcome.BLANK,
    )
    logger.info(f"Parsed evaluation - Title: {result.title}, isCorrect: {result.is_correct}, isBlank: {result.is_blank}")
    return result


# ---------------------------------------------------------------------------
# Embedded-JSON format
# ---------------------------------------------------------------------------

def _first_balanced_object(text: str) -> Optional[str]:
    """Return the first {...} block whose braces balance, ignoring braces inside JSON strings."""
    start = text.find("{")
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[start:index + 1]
    return None


def extract_json_block(text: str) -> Optional[str]:
    """
    Locate a JSON object in model text.

    A fenced block is preferred; otherwise the first balanced {...} block in
    the text is used.
    """
    for fence in _FENCE_PATTERN.finditer(text):
        block = _first_balanced_object(fence.group(1))
        if block:
            return block
    return _first_balanced_object(text)


def load_json_object(text: str) -> Dict[str, Any]:
    """
    Parse the JSON object embedded in model text.

    Raises:
        ResponseParseError: If no object is found or it is not valid JSON
    """
    block = extract_json_block(text)
    if block is None:
        logger.error(f"No JSON object found in response: {text[:500]}")
        raise ResponseParseError("Gemini returned invalid JSON")
    try:
        data = json.loads(block)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse LLM JSON response: {e}")
        logger.error(f"Response text: {block[:500]}")
        raise ResponseParseError("Gemini returned invalid JSON") from e
    if not isinstance(data, dict):
        raise ResponseParseError("Gemini returned invalid JSON")
    return data


def _optional_bool(value: Any) -> Optional[bool]:
    return value if isinstance(value, bool) else None


def parse_json_response(text: str, default_title: str = FEEDBACK_TITLE) -> FeedbackResult:
    """
    Parse feedback returned as a JSON object.

    Recognized fields: title, explanation, nextSteps, isCorrect, isBlank. If
    the JSON cannot be parsed the whole text becomes the explanation.
    """
    try:
        data = load_json_object(text)
    except ResponseParseError:
        logger.warning("Falling back to raw text for JSON feedback")
        return FeedbackResult(title=default_title, explanation=text.strip())

    title = data.get("title")
    explanation = data.get("explanation")
    next_steps = data.get("nextSteps")

    return FeedbackResult(
        title=title.strip() if isinstance(title, str) and title.strip() else default_title,
        explanation=explanation.strip() if isinstance(explanation, str) and explanation.strip() else text.strip(),
        next_steps=[str(step).strip() for step in next_steps if str(step).strip()] if isinstance(next_steps, list) else [],
        is_correct=_optional_bool(data.get("isCorrect")),
        is_blank=_optional_bool(data.get("isBlank")),
    )


# ---------------------------------------------------------------------------
# Plain text
# ---------------------------------------------------------------------------

def clean_extracted_text(text: str) -> str:
    """Strip HTML tags and markdown bold markers from OCR output."""
    return re.sub(r"<[^>]*>", "", text).replace("**", "").strip()
