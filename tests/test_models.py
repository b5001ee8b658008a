import pytest
from pydantic import ValidationError

from flashquiz.models import AnswerRecord, Question, QuizDocument, QuizResult, build_review, percentage

from conftest import make_document


def test_question_requires_four_options():
    with pytest.raises(ValidationError):
        Question(id="a", text="?", options=["x", "y", "z"], correct_answer_index=0)


def test_question_index_must_be_in_range():
    with pytest.raises(ValidationError):
        Question(id="a", text="?", options=["w", "x", "y", "z"], correct_answer_index=4)


def test_document_rejects_duplicate_ids():
    q = Question(id="same", text="?", options=["w", "x", "y", "z"], correct_answer_index=1)
    with pytest.raises(ValidationError):
        QuizDocument(title="t", questions=[q, q])


def test_document_rejects_empty_question_list():
    with pytest.raises(ValidationError):
        QuizDocument(title="t", questions=[])


def test_result_counts_correct_records():
    records = [
        AnswerRecord(question_id="a", user_answer_index=0, is_correct=True),
        AnswerRecord(question_id="b", user_answer_index=2, is_correct=False),
    ]
    result = QuizResult.from_records(records, total=2)
    assert result.score == 1
    assert result.incorrect == 1
    assert result.percentage == 50


def test_result_requires_every_question_answered():
    records = [AnswerRecord(question_id="a", user_answer_index=0, is_correct=True)]
    with pytest.raises(ValidationError):
        QuizResult.from_records(records, total=2)


@pytest.mark.parametrize(
    "score,total,expected",
    [(2, 3, 67), (1, 3, 33), (1, 8, 13), (0, 5, 0), (5, 5, 100), (1, 200, 1)],
)
def test_percentage_rounds_half_up(score, total, expected):
    assert percentage(score, total) == expected


def test_review_shows_explanation_only_for_misses():
    doc = make_document([0, 1])
    records = [
        AnswerRecord(question_id="q-test-0", user_answer_index=0, is_correct=True),
        AnswerRecord(question_id="q-test-1", user_answer_index=3, is_correct=False),
    ]
    review = build_review(doc, QuizResult.from_records(records, total=2))
    assert [r.number for r in review] == [1, 2]
    assert review[0].show_explanation is False
    assert review[1].show_explanation is True
    assert review[1].your_answer == "Option 1-3"
    assert review[1].correct_answer == "Option 1-1"
