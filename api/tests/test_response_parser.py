"""
Response extraction and feedback parsing.
"""
import unittest
from types import SimpleNamespace

from chalkboard.core.exceptions import ContentBlockedError, EmptyResponseError, ResponseParseError
from chalkboard.services.response_parser import (
    DEFAULT_TRUNCATION_FALLBACK,
    clean_extracted_text,
    extract_json_block,
    extract_text,
    load_json_object,
    parse_evaluation_response,
    parse_hint_response,
    parse_json_response,
)

from support import gemini_response


# ─────────────────────────────────────────────────────────
# Text extraction
# ─────────────────────────────────────────────────────────

class TestExtractText(unittest.TestCase):

    def test_joins_parts_of_first_candidate(self):
        response = {
            "candidates": [{
                "content": {"parts": [{"text": "HINT: Move "}, {"text": "the 5 across."}]},
                "finishReason": "STOP",
            }]
        }
        self.assertEqual(extract_text(response), "HINT: Move the 5 across.")

    def test_skips_thought_parts(self):
        response = {
            "candidates": [{
                "content": {"parts": [{"text": "thinking...", "thought": True}, {"text": "Answer"}]},
                "finishReason": "STOP",
            }]
        }
        self.assertEqual(extract_text(response), "Answer")

    def test_prefers_direct_text_accessor(self):
        response = SimpleNamespace(text=lambda: "  direct text  ", candidates=[])
        self.assertEqual(extract_text(response), "direct text")

    def test_prompt_block_reason_raises_content_blocked(self):
        response = {"promptFeedback": {"blockReason": "SAFETY"}, "candidates": []}
        with self.assertRaises(ContentBlockedError):
            extract_text(response)

    def test_safety_finish_reason_raises_content_blocked(self):
        with self.assertRaises(ContentBlockedError):
            extract_text(gemini_response("partial", finish_reason="SAFETY"))

    def test_truncated_response_keeps_long_partial(self):
        partial = "HINT: Start by isolating the variable on one side"
        text = extract_text(gemini_response(partial, finish_reason="MAX_TOKENS"), truncation_fallback="fallback")
        self.assertEqual(text, partial)

    def test_truncated_response_with_short_partial_uses_fallback(self):
        text = extract_text(gemini_response("HINT: St", finish_reason="MAX_TOKENS"), truncation_fallback="Try again")
        self.assertEqual(text, "Try again")

    def test_truncated_response_without_text_uses_default_fallback(self):
        text = extract_text(gemini_response(None, finish_reason="MAX_TOKENS"))
        self.assertEqual(text, DEFAULT_TRUNCATION_FALLBACK)

    def test_no_text_raises_empty_response(self):
        with self.assertRaises(EmptyResponseError):
            extract_text(gemini_response(None))
        with self.assertRaises(EmptyResponseError):
            extract_text({"candidates": []})


# ─────────────────────────────────────────────────────────
# Labeled fields
# ─────────────────────────────────────────────────────────

class TestParseHintResponse(unittest.TestCase):

    def test_fields_in_any_order_with_interior_whitespace(self):
        text = (
            "NEXT_STEP: Divide both sides by 2\n"
            "HINT:   You moved the 5 correctly.\n"
            "   Now isolate x.   \n"
            "TITLE: Good start!  \n"
        )
        result = parse_hint_response(text)
        self.assertEqual(result.title, "Good start!")
        self.assertTrue(result.explanation.startswith("You moved the 5 correctly."))
        self.assertTrue(result.explanation.endswith("Now isolate x."))
        self.assertEqual(result.next_steps, ["Divide both sides by 2"])

    def test_missing_hint_label_uses_full_text(self):
        text = "  Try factoring the quadratic first.  "
        result = parse_hint_response(text)
        self.assertEqual(result.title, "Hint")
        self.assertEqual(result.explanation, "Try factoring the quadratic first.")
        self.assertEqual(result.next_steps, [])

    def test_labels_are_case_insensitive_and_may_be_bold(self):
        result = parse_hint_response("**title:** Almost\n**hint:** Check your signs\nnext step: Redo line 2")
        self.assertEqual(result.title, "Almost")
        self.assertEqual(result.explanation, "Check your signs")
        self.assertEqual(result.next_steps, ["Redo line 2"])

    def test_value_markup_is_kept(self):
        result = parse_hint_response("TITLE: Stars\nHINT: Compare a with a*")
        self.assertEqual(result.explanation, "Compare a with a*")

        result = parse_hint_response("HINT: Use **factoring** | TITLE: *Almost*")
        self.assertEqual(result.explanation, "Use **factoring**")
        self.assertEqual(result.title, "*Almost*")

    def test_label_in_the_middle_of_a_line_is_text(self):
        result = parse_hint_response("HINT: Use the formula TITLE: not a label")
        self.assertEqual(result.explanation, "Use the formula TITLE: not a label")
        self.assertEqual(result.title, "Hint")

    def test_hint_has_no_verdict(self):
        response = parse_hint_response("HINT: Keep going").to_response()
        self.assertNotIn("isCorrect", response)
        self.assertNotIn("isBlank", response)
        self.assertEqual(response["nextSteps"], [])


class TestParseEvaluationResponse(unittest.TestCase):

    def test_result_correct(self):
        result = parse_evaluation_response("RESULT: CORRECT\nFEEDBACK: Well done, x = 4.")
        self.assertTrue(result.is_correct)
        self.assertFalse(result.is_blank)
        self.assertEqual(result.title, "Correct")
        self.assertEqual(result.explanation, "Well done, x = 4.")

    def test_pipe_separated_fields(self):
        result = parse_evaluation_response("RESULT: CORRECT | FEEDBACK: Nice work | NEXT_STEP: Try a harder one")
        self.assertTrue(result.is_correct)
        self.assertEqual(result.explanation, "Nice work")
        self.assertEqual(result.next_steps, ["Try a harder one"])

    def test_result_incorrect(self):
        result = parse_evaluation_response("RESULT: INCORRECT\nFEEDBACK: Check the sign in step 2.")
        self.assertFalse(result.is_correct)
        self.assertFalse(result.is_blank)
        self.assertEqual(result.title, "Incorrect")

    def test_result_blank(self):
        result = parse_evaluation_response("result: blank\nfeedback: Nothing is written yet.")
        self.assertTrue(result.is_blank)
        self.assertFalse(result.is_correct)
        self.assertEqual(result.title, "Blank")

    def test_unrecognized_result_is_incorrect(self):
        result = parse_evaluation_response("RESULT: maybe\nFEEDBACK: Hard to say.")
        self.assertFalse(result.is_correct)
        self.assertFalse(result.is_blank)
        self.assertEqual(result.title, "Incorrect")

    def test_keywords_only_sniffed_without_result_and_feedback(self):
        result = parse_evaluation_response("This looks perfect to me.")
        self.assertTrue(result.is_correct)
        self.assertEqual(result.title, "Correct")
        self.assertEqual(result.explanation, "This looks perfect to me.")

        result = parse_evaluation_response("I cannot see any work on the board.")
        self.assertTrue(result.is_blank)
        self.assertEqual(result.title, "Blank")

    def test_feedback_label_disables_sniffing(self):
        result = parse_evaluation_response("FEEDBACK: The right idea, but the sign is wrong.")
        self.assertFalse(result.is_correct)
        self.assertEqual(result.title, "Incorrect")

    def test_incorrect_is_not_sniffed_as_correct(self):
        result = parse_evaluation_response("Your answer is incorrect.")
        self.assertFalse(result.is_correct)
        self.assertEqual(result.title, "Evaluation")

    def test_nothing_inferred_gives_evaluation_title(self):
        result = parse_evaluation_response("Hmm.")
        self.assertEqual(result.title, "Evaluation")
        self.assertEqual(result.explanation, "Hmm.")
        self.assertFalse(result.is_correct)
        self.assertFalse(result.is_blank)


# ─────────────────────────────────────────────────────────
# Embedded JSON
# ─────────────────────────────────────────────────────────

class TestJsonFeedback(unittest.TestCase):

    BODY = '{"title": "Nice", "explanation": "Good {work}", "nextSteps": ["Simplify"], "isCorrect": true}'

    def test_fenced_and_unfenced_parse_identically(self):
        fenced = "Here you go:\n```json\n" + self.BODY + "\n```\nThanks!"
        unfenced = "Sure! " + self.BODY + " Hope that helps."
        self.assertEqual(parse_json_response(fenced), parse_json_response(unfenced))

        result = parse_json_response(fenced)
        self.assertEqual(result.title, "Nice")
        self.assertEqual(result.explanation, "Good {work}")
        self.assertEqual(result.next_steps, ["Simplify"])
        self.assertTrue(result.is_correct)
        self.assertIsNone(result.is_blank)

    def test_balanced_block_ignores_braces_in_strings(self):
        text = 'prefix {"a": "}", "b": {"c": 1}} suffix {"d": 2}'
        self.assertEqual(extract_json_block(text), '{"a": "}", "b": {"c": 1}}')

    def test_invalid_json_falls_back_to_raw_text(self):
        text = "I think the answer is close, but {not json"
        result = parse_json_response(text)
        self.assertEqual(result.title, "Feedback")
        self.assertEqual(result.explanation, text)
        self.assertEqual(result.next_steps, [])

    def test_missing_explanation_falls_back_to_raw_text(self):
        text = '{"title": "Check", "nextSteps": "not a list"}'
        result = parse_json_response(text, default_title="AI Feedback")
        self.assertEqual(result.title, "Check")
        self.assertEqual(result.explanation, text)
        self.assertEqual(result.next_steps, [])

    def test_load_json_object_raises_without_object(self):
        with self.assertRaises(ResponseParseError):
            load_json_object("no json here")
        with self.assertRaises(ResponseParseError):
            load_json_object("[1, 2, 3]")


class TestCleanExtractedText(unittest.TestCase):

    def test_strips_tags_and_bold_markers(self):
        self.assertEqual(clean_extracted_text("  <b>**Q1.**</b> Solve $x^2 = 4$ "), "Q1. Solve $x^2 = 4$")


if __name__ == "__main__":
    unittest.main()
