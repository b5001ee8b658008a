from __future__ import annotations
from typing import List

from pydantic import BaseModel, ConfigDict, Field, model_validator


OPTION_COUNT = 4
DEFAULT_QUIZ_TITLE = "Generated Quiz"


class Question(BaseModel):
	model_config = ConfigDict(frozen=True)

	id: str
	text: str
	options: List[str] = Field(min_length=OPTION_COUNT, max_length=OPTION_COUNT)
	correct_answer_index: int = Field(ge=0, le=OPTION_COUNT - 1)
	explanation: str = ""

	@model_validator(mode="after")
	def _correct_index_in_options(self) -> "Question":
		if self.correct_answer_index >= len(self.options):
			raise ValueError("correct_answer_index must index one of the options")
		return self


class QuizDocument(BaseModel):
	model_config = ConfigDict(frozen=True)

	title: str = DEFAULT_QUIZ_TITLE
	questions: List[Question] = Field(min_length=1)

	@model_validator(mode="after")
	def _unique_ids(self) -> "QuizDocument":
		ids = [q.id for q in self.questions]
		if len(set(ids)) != len(ids):
			raise ValueError("question ids must be unique within a quiz")
		return self


class AnswerRecord(BaseModel):
	model_config = ConfigDict(frozen=True)

	question_id: str
	user_answer_index: int = Field(ge=0, le=OPTION_COUNT - 1)
	is_correct: bool


class QuizResult(BaseModel):
	model_config = ConfigDict(frozen=True)

	score: int = Field(ge=0)
	total: int = Field(ge=1)
	details: List[AnswerRecord]

	@model_validator(mode="after")
	def _consistent(self) -> "QuizResult":
		if self.score > self.total:
			raise ValueError("score cannot exceed total")
		if len(self.details) != self.total:
			raise ValueError("every question must be answered exactly once")
		return self

	@classmethod
	def from_records(cls, records: List[AnswerRecord], total: int) -> "QuizResult":
		score = sum(1 for r in records if r.is_correct)
		return cls(score=score, total=total, details=list(records))

	@property
	def incorrect(self) -> int:
		return self.total - self.score

	@property
	def percentage(self) -> int:
		return percentage(self.score, self.total)


def percentage(score: int, total: int) -> int:
	"""Whole-number percentage, rounding halves up like the browser's Math.round."""
	if total <= 0:
		return 0
	# Integer arithmetic keeps 0.5 cases exact (round() would use banker's rounding)
	return (score * 200 + total) // (total * 2)


class ReviewItem(BaseModel):
	number: int
	question_id: str
	text: str
	your_answer: str
	correct_answer: str
	is_correct: bool
	explanation: str
	show_explanation: bool


def build_review(document: QuizDocument, result: QuizResult) -> List[ReviewItem]:
	by_id = {d.question_id: d for d in result.details}
	items: List[ReviewItem] = []
	for number, q in enumerate(document.questions, start=1):
		record = by_id.get(q.id)
		is_correct = bool(record and record.is_correct)
		answer_index = record.user_answer_index if record else 0
		items.append(ReviewItem(
			number=number,
			question_id=q.id,
			text=q.text,
			your_answer=q.options[answer_index],
			correct_answer=q.options[q.correct_answer_index],
			is_correct=is_correct,
			explanation=q.explanation,
			show_explanation=(not is_correct) and bool(q.explanation),
		))
	return items
