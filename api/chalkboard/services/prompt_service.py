"""
Service for generating LLM prompts.
"""
from typing import List, Optional


def generate_hint_prompt(question: str) -> str:
    """
    Prompt asking for one strategic hint on a whiteboard image.

    The answer uses the TITLE / HINT / NEXT_STEP labeled format.
    """
    return f"""You are a supportive math tutor. A student is working on this problem and needs a hint.

PROBLEM: {question}

Look at their whiteboard work in the image. Analyze what they've written and provide ONE strategic hint.

YOUR RESPONSE FORMAT (be concise):

TITLE: [Short encouraging phrase: "Good start!", "Almost there!", "Let's think about this", etc.]
HINT: [2-3 sentences: What they did right + specific next step + why it helps]
NEXT_STEP: [One concrete action: "Subtract 5 from both sides" or "Factor out the common term"]

EXAMPLES:

Problem: "Solve 2x + 5 = 13" | Student wrote "2x = 8"
TITLE: Excellent progress!
HINT: You correctly moved 5 to the right side. Now you need to isolate x by getting rid of the coefficient 2. Dividing both sides by the same number keeps the equation balanced.
NEXT_STEP: Divide both sides by 2 to find x = 4

Problem: "Find area of circle, radius = 5" | Student wrote "A = πr"
TITLE: You're on the right track!
HINT: You've got the right formula started. Remember the area formula uses r squared, not just r. The exponent matters because area is two-dimensional.
NEXT_STEP: Write A = πr² and substitute r = 5

Problem: "Simplify: 3x + 2x" | Blank whiteboard
TITLE: Let's get started!
HINT: These are like terms because they both have the variable x. Like terms combine by adding their coefficients (the numbers in front).
NEXT_STEP: Add the coefficients: 3 + 2 = 5, so the answer is 5x

RULES:
- Be specific about what you see in their work
- Don't give the final answer
- Keep it brief and actionable
- If blank, guide them to start"""


def generate_image_evaluation_prompt(question: str) -> str:
    """
    Prompt asking for a verdict on a whiteboard image.

    The answer uses the RESULT / FEEDBACK labeled format.
    """
    return f"""Check this student's math work.

PROBLEM: {question}

Look at the whiteboard image. Is their answer correct?

FORMAT:
RESULT: [CORRECT or INCORRECT or BLANK]
FEEDBACK: [One sentence]

EXAMPLES:
"Solve 2x+5=13" → Student: "x=4" → RESULT: CORRECT | FEEDBACK: Perfect! You found the right answer.
"7×8=?" → Student: "54" → RESULT: INCORRECT | FEEDBACK: Check your multiplication - 7×8 is not 54.
"Area of circle r=3" → Student: "28.27" → RESULT: CORRECT | FEEDBACK: Excellent use of A=πr²!
"Simplify 3x+2x" → Student: "5x²" → RESULT: INCORRECT | FEEDBACK: Add coefficients without changing exponents: 3x+2x=5x.
Blank whiteboard → RESULT: BLANK | FEEDBACK: Write your solution so I can check it.

RULES: CORRECT=right answer+method, INCORRECT=wrong answer/method, BLANK=no work shown. One sentence only."""


def generate_canvas_evaluation_prompt(question: str, canvas_description: str) -> str:
    """
    Prompt for evaluating a canvas from its stroke summary alone.

    The answer is a JSON object with title, explanation, nextSteps, isCorrect, isBlank.
    """
    return f"""You are an expert mathematics tutor. A student has submitted work on a digital whiteboard for this question:

QUESTION: {question}

CANVAS ANALYSIS: {canvas_description}

IMPORTANT: You cannot see the actual mathematical symbols or equations the student wrote. You only have the stroke pattern analysis above.

Based on the question and the canvas analysis, provide a BRIEF evaluation (2-3 sentences max) that:
1. Acknowledges what work the student appears to have done
2. Gives general feedback on the approach
3. Suggests what they should check or improve

Do NOT try to guess specific answers or mathematical content - you can't see what they actually wrote!

Return ONLY valid JSON in exactly this structure:
{{
  "title": "Short title (max 5 words)",
  "explanation": "Your 2-3 sentence feedback",
  "nextSteps": ["One concrete thing to check", "Optional second thing"],
  "isBlank": false
}}"""


VISION_EXTRACT_PROMPT = (
    "Extract ALL text from this image. Use LaTeX notation ($...$) for math. "
    "Just extract the text as you see it."
)


def generate_reformat_prompt(raw_text: str) -> str:
    """Prompt asking to lay extracted solution text out one statement per line."""
    return (
        "Reformat this math solution text with proper line breaks. Each line should be on a NEW LINE.\n\n"
        "INPUT TEXT:\n"
        f"{raw_text}\n\n"
        "REFORMATTING RULES:\n"
        "• Put EACH statement on its OWN line\n"
        "• Put EACH equation on its OWN line\n"
        "• Add blank lines between sections\n"
        "• Keep LaTeX: $...$\n"
        "• Output should look like a SOLUTION, not a paragraph\n\n"
        "EXAMPLE INPUT:\n"
        '"Given a=2 b=3 Therefore D=b^2-4ac=9-8=1 Hence real roots"\n\n'
        "EXAMPLE OUTPUT (each line separate):\n"
        "Given $a=2$, $b=3$\n\nTherefore $D = b^2 - 4ac$\n$= 9 - 8$\n$= 1$\n\nHence real roots\n\n"
        'IMPORTANT: Actually press ENTER after each line. Do NOT write "\\n" - actually create new lines!\n\n'
        "Now reformat the INPUT TEXT above (remember: actual line breaks, not \\n):"
    )


def resolve_subtopic(subtopic: Optional[str], subtopics: Optional[List[str]]) -> str:
    """Explicit subtopic, else the first listed one, else "General"."""
    if subtopic:
        return subtopic
    if subtopics:
        return subtopics[0]
    return "General"


def generate_question_prompt(
    class_level: str,
    subject: str,
    curriculum: str,
    topic: str,
    subtopic: str,
) -> str:
    """
    Prompt for generating a single practice question as JSON.

    Args:
        class_level: Class or grade (e.g. "Class 10")
        subject: Subject name
        curriculum: Curriculum name (e.g. "Cambridge IGCSE")
        topic: Topic name
        subtopic: Resolved subtopic name

    Returns:
        The prompt string
    """
    return f"""Generate a single question for a student.

Context:
- Class Level: {class_level}
- Subject: {subject}
- Curriculum: {curriculum}
- Topic: {topic}
- Subtopic: {subtopic}

Requirements:
1. The question should be challenging but appropriate for the class level.
2. Randomly select a question type from: Multiple Choice, Short Answer, Problem Solving, True/False.
3. If the type is Multiple Choice, provide 4 options (A, B, C, D) and mark the correct one.
4. Provide a detailed explanation for the correct answer.
5. Return ONLY valid JSON, no markdown, no code blocks, no additional text.

JSON Format (return exactly this structure):
{{
  "questionText": "The actual question text",
  "type": "multiple-choice" | "short-answer" | "problem-solving" | "true-false",
  "options": [
    {{ "id": "a", "text": "Option A text", "isCorrect": false }},
    {{ "id": "b", "text": "Option B text", "isCorrect": true }},
    {{ "id": "c", "text": "Option C text", "isCorrect": false }},
    {{ "id": "d", "text": "Option D text", "isCorrect": false }}
  ],
  "explanation": "Detailed explanation here",
  "difficulty": "Medium",
  "topic": "{topic}",
  "subtopic": "{subtopic}"
}}"""
