from __future__ import annotations
import json
import logging
import re
import uuid
from typing import Any, Dict, List, Optional, Sequence

from pydantic import ValidationError

from .encoder import DocumentFile, encode_document
from .errors import EmptyResponseError, EmptyResultError, ExtractionError, MalformedResponseError
from .gemini_client import GeminiClient
from .models import DEFAULT_QUIZ_TITLE, OPTION_COUNT, Question, QuizDocument
from .settings import settings

logger = logging.getLogger(__name__)


QUIZ_RESPONSE_SCHEMA: Dict[str, Any] = {
	"type": "OBJECT",
	"properties": {
		"title": {
			"type": "STRING",
			"description": "A short title for the quiz generated from the documents.",
		},
		"questions": {
			"type": "ARRAY",
			"items": {
				"type": "OBJECT",
				"properties": {
					"text": {"type": "STRING", "description": "The question text."},
					"options": {
						"type": "ARRAY",
						"items": {"type": "STRING"},
						"description": "A list of 4 possible answers.",
					},
					"correctAnswerIndex": {
						"type": "INTEGER",
						"description": "The zero-based index of the correct option (0, 1, 2, or 3).",
					},
					"explanation": {
						"type": "STRING",
						"description": "A brief explanation of why the answer is correct.",
					},
				},
				"required": ["text", "options", "correctAnswerIndex", "explanation"],
			},
		},
	},
	"required": ["title", "questions"],
}

SYSTEM_INSTRUCTION = (
	"You are an expert educational assistant. Your task is to convert PDF exam papers into "
	"interactive quizzes. You have deep knowledge in all academic subjects and can solve "
	"unanswered questions accurately."
)

EXTRACTION_INSTRUCTIONS = (
	"Analyze the attached PDF documents which contain Multiple Choice Questions (MCQs).\n"
	"Extract all valid MCQs found in the documents.\n\n"
	"Rules:\n"
	"1. Extract the question text clearly.\n"
	"2. Extract exactly 4 options for each question.\n"
	"3. Identify the correct answer.\n"
	"   - Check whether the document provides an answer key or marked answers.\n"
	"   - If an answer key is present, use it to determine the correct answer.\n"
	"   - If no answer key is present, solve the question yourself acting as a subject matter expert.\n"
	"4. Provide a short explanation for the correct answer, especially if you had to solve it yourself.\n"
	"5. Return the output in strict JSON format matching the schema."
)


def build_parts(files: Sequence[DocumentFile]) -> List[Dict[str, Any]]:
	parts = [encode_document(f) for f in files]
	parts.append({"text": EXTRACTION_INSTRUCTIONS})
	return parts


def _load_json(text: str) -> Any:
	try:
		return json.loads(text)
	except json.JSONDecodeError:
		pass
	code_block = re.search(r"```(?:json)?\s*([\s\S]*?)\s*```", text)
	if code_block:
		try:
			return json.loads(code_block.group(1))
		except json.JSONDecodeError:
			pass
	raise MalformedResponseError("Extraction service did not return valid JSON")


def _parse_question(raw: Any, qid: str, number: int) -> Question:
	if not isinstance(raw, dict):
		raise MalformedResponseError(f"Question {number} is not an object")
	text = raw.get("text")
	options = raw.get("options")
	correct_index = raw.get("correctAnswerIndex")
	explanation = raw.get("explanation")
	if not isinstance(text, str) or not text.strip():
		raise MalformedResponseError(f"Question {number} has no text")
	if not isinstance(options, list) or len(options) != OPTION_COUNT:
		raise MalformedResponseError(f"Question {number} must have exactly {OPTION_COUNT} options")
	if not all(isinstance(o, str) for o in options):
		raise MalformedResponseError(f"Question {number} has non-string options")
	# bool is an int subclass; reject it explicitly
	if isinstance(correct_index, bool) or not isinstance(correct_index, int):
		raise MalformedResponseError(f"Question {number} has a non-integer correctAnswerIndex")
	if correct_index < 0 or correct_index >= OPTION_COUNT:
		raise MalformedResponseError(f"Question {number} has correctAnswerIndex out of range")
	if not isinstance(explanation, str):
		raise MalformedResponseError(f"Question {number} has no explanation")
	try:
		return Question(
			id=qid,
			text=text.strip(),
			options=[o.strip() for o in options],
			correct_answer_index=correct_index,
			explanation=explanation.strip(),
		)
	except ValidationError as err:
		raise MalformedResponseError(f"Question {number} failed validation: {err}") from err


def parse_quiz(text: Optional[str], *, batch_token: Optional[str] = None) -> QuizDocument:
	"""Turn the service's JSON reply into a validated quiz document."""
	if not text or not text.strip():
		raise EmptyResponseError("No response received from Gemini.")
	data = _load_json(text)
	if not isinstance(data, dict):
		raise MalformedResponseError("Extraction reply is not a JSON object")
	questions = data.get("questions")
	if not isinstance(questions, list):
		raise MalformedResponseError("Extraction reply has no questions list")
	if not questions:
		raise EmptyResultError("No multiple-choice questions were found in the documents")
	title = data.get("title")
	if title is not None and not isinstance(title, str):
		raise MalformedResponseError("Extraction reply has a non-string title")
	token = batch_token or uuid.uuid4().hex[:12]
	parsed = [_parse_question(q, f"q-{token}-{i}", i + 1) for i, q in enumerate(questions)]
	# missing, null and blank titles all fall back
	if not title or not title.strip():
		title = DEFAULT_QUIZ_TITLE
	return QuizDocument(title=title.strip(), questions=parsed)


async def extract_quiz(files: Sequence[DocumentFile], client: Optional[GeminiClient] = None) -> QuizDocument:
	"""Send every file in one request and return the quiz the model found in them.

	Raises ConfigurationError before any request when no API key is set, EncodingError
	when a file cannot be read, and an ExtractionError subclass for unusable replies.
	Transport failures propagate as httpx errors.
	"""
	if not files:
		raise ExtractionError("At least one document is required")
	own_client = client is None
	if client is None:
		client = GeminiClient()
	try:
		parts = build_parts(files)
		logger.info("Extracting quiz from %d document(s) with %s", len(files), client.model)
		raw = await client.generate_multimodal(
			parts,
			system_instruction=SYSTEM_INSTRUCTION,
			temperature=settings.gemini_temperature,
			response_schema=QUIZ_RESPONSE_SCHEMA,
		)
	finally:
		if own_client:
			await client.aclose()
	logger.debug("Raw extraction reply: %s", raw)
	quiz = parse_quiz(raw)
	logger.info("Extracted %d question(s) for %r", len(quiz.questions), quiz.title)
	return quiz
