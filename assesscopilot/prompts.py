import json

from pydantic import BaseModel

from .binder import Each, Field, Template, Text
from .models import AnalysisReport, CompanyMotto, EvaluationResult, QuestionBatch

JSON_RULES = """
Return ONLY valid, compact JSON (no markdown, no explanations, no trailing text).

Hard rules (MUST follow):
- Output MUST be valid JSON only (no code fences, no markdown, no commentary).
- Output MUST be a single JSON object starting with '{' and ending with '}'.
- Use exactly the keys of the schema below; do not add keys.
- Use COMPACT JSON: no pretty-printing, no extra whitespace.

Required JSON schema:
"""


def schema_text(model: type[BaseModel]) -> str:
    return json.dumps(model.model_json_schema(by_alias=True), separators=(",", ":"), sort_keys=True)


def json_footer(model: type[BaseModel]) -> Text:
    return Text(f"\n{JSON_RULES}{schema_text(model)}\n")


ANALYZE_LOGS_SYSTEM_PROMPT = """
You are an AI assistant that analyzes proctoring logs from online tests to identify potential cheating incidents.
Be factual. Only flag activity that the logs support.
"""

ANALYZE_LOGS_TEMPLATE = Template.of(
    Text(
        """
You are provided with an array of proctoring logs, each containing the candidate ID, test ID, timestamp, and status (present, no_face, multiple_faces, tab_switch).

Your task is to analyze these logs and identify any suspicious activities, such as:

1. A candidate frequently disappearing from the camera (no_face status).
2. The presence of multiple faces in the camera (multiple_faces status), which could indicate assistance from others.
3. The candidate switching to another browser tab or application (tab_switch status).

For each suspicious activity, provide the candidate ID, test ID, a clear reason for flagging the activity as suspicious, and the timestamps of the events.

Also, provide a concise summary of your analysis.

Here are the proctoring logs:
"""
    ),
    Each(
        "logs",
        Template.of(
            Text("- Candidate ID: "),
            Field("candidateId"),
            Text(", Test ID: "),
            Field("testId"),
            Text(", Timestamp: "),
            Field("timestamp"),
            Text(", Status: "),
            Field("status"),
            Text("\n"),
        ),
    ),
    json_footer(AnalysisReport),
)

EVALUATE_ANSWER_SYSTEM_PROMPT = """
You are an expert evaluator for technical and skill-based assessments.
Be objective and constructive in your feedback.
"""

EVALUATE_ANSWER_TEMPLATE = Template.of(
    Text("\nYour task is to provide a detailed evaluation of a candidate's answer to a given question.\n\nQuestion ("),
    Field("questionType"),
    Text(", "),
    Field("marks"),
    Text(" marks):\n"),
    Field("questionText"),
    Text("\n\nCandidate's Answer:\n"),
    Field("answer"),
    Text(
        """

Based on the question and the candidate's answer, please provide:
1. Detailed feedback:
    - For 'coding' questions: Analyze the correctness, time complexity, space complexity, and overall code quality (e.g., readability, best practices).
    - For 'paragraph' (descriptive) questions: Evaluate the answer based on correctness, clarity, and depth of explanation against standard criteria for the topic.
    - For 'mcq', 'image' and 'audio' questions: State whether the chosen answer is correct and why.
2. A suggested score out of the total marks available for the question. The score should reflect the quality and correctness of the answer. Ensure the suggested score does not exceed the total marks.
"""
    ),
    json_footer(EvaluationResult),
)

PARSE_MCQ_SYSTEM_PROMPT = """
You are an expert data parser specializing in Multiple-Choice Questions (MCQs).
You will be given a raw string that may contain a mix of text; find and structure only the MCQs.
"""

PARSE_MCQ_TEMPLATE = Template.of(
    Text(
        """
Parse the string and convert it into a JSON object containing an array of questions. For each question you find, you MUST identify:
1. The question text. Questions are usually numbered (e.g., "Q1.", "1)", "Question 1:") or start a new paragraph.
2. The list of options. Options are typically lettered (a, b, c) or numbered (1, 2, 3) and may or may not have parentheses or dots.
3. The correct answer. First, look for an explicit answer key (e.g., "Answer: C", "Correct answer is B"). If no explicit key is found for a question, you MUST use your own knowledge to determine the correct answer from the provided options. The answer you provide must exactly match one of the options you extracted.
4. The marks for the question if the text states them; otherwise omit the field (it defaults to 10).

Ignore any text that does not appear to be part of an MCQ. If there are no MCQs, return an empty questions array.

Here is the text you need to parse:
"""
    ),
    Field("text"),
    Text("\n"),
    json_footer(QuestionBatch),
)

MOTTO_SYSTEM_PROMPT = """
You are a branding expert.
"""

MOTTO_TEMPLATE = Template.of(
    Text("\nGenerate a short, catchy, and inspiring motto for the following tech company: "),
    Field("companyName"),
    Text("\n"),
    json_footer(CompanyMotto),
)
