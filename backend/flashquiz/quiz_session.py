"""Forward-only quiz run over a single quiz document."""

from __future__ import annotations
import logging
from enum import Enum
from typing import List, Optional

from .errors import InvalidTransitionError
from .models import AnswerRecord, Question, QuizDocument, QuizResult

logger = logging.getLogger(__name__)


class QuestionState(str, Enum):
	UNANSWERED = "UNANSWERED"
	SELECTED = "SELECTED"
	ANSWERED = "ANSWERED"
	COMPLETE = "COMPLETE"


class QuizSession:
	"""Walks the questions in order, one commit per question.

	Operations that the current state forbids are ignored and return False;
	successful ones return True. Nothing here raises to the caller.
	"""

	def __init__(self, document: QuizDocument) -> None:
		self.document = document
		self.current_index = 0
		self.state = QuestionState.UNANSWERED
		self.selected_index: Optional[int] = None
		self.records: List[AnswerRecord] = []
		self.result: Optional[QuizResult] = None

	@property
	def total(self) -> int:
		return len(self.document.questions)

	@property
	def current_question(self) -> Optional[Question]:
		if self.is_complete:
			return None
		return self.document.questions[self.current_index]

	@property
	def is_complete(self) -> bool:
		return self.state is QuestionState.COMPLETE

	@property
	def is_last(self) -> bool:
		return self.current_index == self.total - 1

	@property
	def progress(self) -> float:
		# Fraction of questions started, not completed
		return self.current_index / self.total

	@property
	def current_record(self) -> Optional[AnswerRecord]:
		if self.state is QuestionState.ANSWERED and self.records:
			return self.records[-1]
		return None

	def select(self, index: int) -> bool:
		return self._attempt(self._select, index)

	def submit(self) -> bool:
		return self._attempt(self._submit)

	def advance(self) -> bool:
		return self._attempt(self._advance)

	def option_states(self) -> List[str]:
		q = self.current_question
		if q is None:
			return []
		if self.state is not QuestionState.ANSWERED:
			return ["selected" if i == self.selected_index else "idle" for i in range(len(q.options))]
		states = []
		for i in range(len(q.options)):
			if i == q.correct_answer_index:
				states.append("correct")
			elif i == self.selected_index:
				states.append("incorrect")
			else:
				states.append("dimmed")
		return states

	def _attempt(self, step, *args) -> bool:
		try:
			step(*args)
		except InvalidTransitionError as err:
			logger.debug("Ignored %s", err)
			return False
		return True

	def _select(self, index: int) -> None:
		if self.state not in (QuestionState.UNANSWERED, QuestionState.SELECTED):
			raise InvalidTransitionError("select", self.state.value)
		q = self.document.questions[self.current_index]
		if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < len(q.options):
			raise InvalidTransitionError(f"select({index!r})", self.state.value)
		self.selected_index = index
		self.state = QuestionState.SELECTED

	def _submit(self) -> None:
		if self.state is not QuestionState.SELECTED or self.selected_index is None:
			raise InvalidTransitionError("submit", self.state.value)
		q = self.document.questions[self.current_index]
		record = AnswerRecord(
			question_id=q.id,
			user_answer_index=self.selected_index,
			is_correct=(self.selected_index == q.correct_answer_index),
		)
		self.records.append(record)
		self.state = QuestionState.ANSWERED

	def _advance(self) -> None:
		if self.state is not QuestionState.ANSWERED:
			raise InvalidTransitionError("advance", self.state.value)
		if not self.is_last:
			self.current_index += 1
			self.selected_index = None
			self.state = QuestionState.UNANSWERED
			return
		self.result = QuizResult.from_records(self.records, self.total)
		self.state = QuestionState.COMPLETE
		logger.info("Quiz %r finished: %d/%d", self.document.title, self.result.score, self.result.total)
