"""Per-browser screen machine: upload, processing, quiz, results."""

from __future__ import annotations
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Sequence

from .encoder import DocumentFile, is_pdf
from .errors import PROCESSING_FAILED_MESSAGE, ConfigurationError, InvalidTransitionError
from .extraction import extract_quiz
from .models import QuizDocument, QuizResult, build_review, percentage
from .quiz_session import QuestionState, QuizSession

logger = logging.getLogger(__name__)

Extractor = Callable[[Sequence[DocumentFile]], Awaitable[QuizDocument]]


class Screen(str, Enum):
	UPLOAD = "UPLOAD"
	PROCESSING = "PROCESSING"
	QUIZ = "QUIZ"
	RESULTS = "RESULTS"


@dataclass
class SessionContext:
	"""Everything one quiz run owns; created on extraction, dropped on exit/reset."""

	document: QuizDocument
	session: QuizSession
	result: Optional[QuizResult] = None

	@classmethod
	def start(cls, document: QuizDocument) -> "SessionContext":
		return cls(document=document, session=QuizSession(document))


class AppController:
	def __init__(self, extractor: Optional[Extractor] = None) -> None:
		self.extractor: Extractor = extractor or extract_quiz
		self.screen = Screen.UPLOAD
		self.files: List[DocumentFile] = []
		self.error: Optional[str] = None
		self.context: Optional[SessionContext] = None

	# upload selection

	def add_files(self, files: Iterable[DocumentFile]) -> List[DocumentFile]:
		"""Append the PDFs among ``files``; return the ones that were skipped."""
		self._require(Screen.UPLOAD, "add_files")
		skipped = []
		for f in files:
			if is_pdf(f.mime_type):
				self.files.append(f)
			else:
				skipped.append(f)
		return skipped

	def remove_file(self, index: int) -> DocumentFile:
		self._require(Screen.UPLOAD, "remove_file")
		if not 0 <= index < len(self.files):
			raise IndexError(index)
		return self.files.pop(index)

	def clear_files(self) -> None:
		self._require(Screen.UPLOAD, "clear_files")
		self.files = []

	# screen transitions

	async def submit_files(self) -> Screen:
		self._require(Screen.UPLOAD, "submit_files")
		if not self.files:
			raise InvalidTransitionError("submit_files without files", self.screen.value)
		batch = list(self.files)
		self.screen = Screen.PROCESSING
		self.error = None
		try:
			document = await self.extractor(batch)
		except ConfigurationError as err:
			logger.error("Extraction not attempted: %s", err)
			self._fail(str(err))
			return self.screen
		except Exception:
			logger.exception("Failed to extract a quiz from %d file(s)", len(batch))
			self._fail(PROCESSING_FAILED_MESSAGE)
			return self.screen
		if self.screen is not Screen.PROCESSING:
			logger.info("Discarding extraction result; controller moved to %s", self.screen.value)
			return self.screen
		self.context = SessionContext.start(document)
		self.files = []
		self.screen = Screen.QUIZ
		return self.screen

	def select(self, index: int) -> bool:
		return self._quiz("select").select(index)

	def submit_answer(self) -> bool:
		return self._quiz("submit_answer").submit()

	def next_question(self) -> bool:
		session = self._quiz("next_question")
		moved = session.advance()
		if session.is_complete:
			self.context.result = session.result
			self.screen = Screen.RESULTS
		return moved

	def exit(self) -> None:
		self._require(Screen.QUIZ, "exit")
		self._clear()

	def reset(self) -> None:
		self._require(Screen.RESULTS, "reset")
		self._clear()

	# helpers

	def _require(self, screen: Screen, operation: str) -> None:
		if self.screen is not screen:
			raise InvalidTransitionError(operation, self.screen.value)

	def _quiz(self, operation: str) -> QuizSession:
		self._require(Screen.QUIZ, operation)
		return self.context.session

	def _fail(self, message: str) -> None:
		self.context = None
		self.error = message
		self.screen = Screen.UPLOAD

	def _clear(self) -> None:
		self.context = None
		self.error = None
		self.screen = Screen.UPLOAD

	# rendering

	def view(self) -> Dict[str, Any]:
		payload: Dict[str, Any] = {
			"screen": self.screen.value,
			"error": self.error,
			"busy": self.screen is Screen.PROCESSING,
			"files": [{"name": f.filename, "size": f.size} for f in self.files],
		}
		if self.screen is Screen.QUIZ and self.context:
			payload["quiz"] = self._quiz_view(self.context)
		elif self.screen is Screen.RESULTS and self.context and self.context.result:
			payload["results"] = self._results_view(self.context)
		return payload

	@staticmethod
	def _quiz_view(ctx: SessionContext) -> Dict[str, Any]:
		session = ctx.session
		q = session.current_question
		answered = session.state is QuestionState.ANSWERED
		record = session.current_record
		return {
			"title": ctx.document.title,
			"number": session.current_index + 1,
			"total": session.total,
			"progress": percentage(session.current_index, session.total),
			"state": session.state.value,
			"question": {"id": q.id, "text": q.text, "options": list(q.options)},
			"selected_index": session.selected_index,
			"option_states": session.option_states(),
			"is_correct": record.is_correct if record else None,
			"explanation": q.explanation if answered else None,
			"is_last": session.is_last,
		}

	@staticmethod
	def _results_view(ctx: SessionContext) -> Dict[str, Any]:
		result = ctx.result
		return {
			"title": ctx.document.title,
			"score": result.score,
			"total": result.total,
			"incorrect": result.incorrect,
			"percentage": percentage(result.score, result.total),
			"review": [item.model_dump() for item in build_review(ctx.document, result)],
		}
