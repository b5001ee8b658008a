from typing import List

import pytest

from flashquiz.encoder import DocumentFile
from flashquiz.models import Question, QuizDocument


def make_document(correct: List[int], title: str = "Biology Midterm") -> QuizDocument:
    questions = [
        Question(
            id=f"q-test-{i}",
            text=f"Question {i + 1}?",
            options=[f"Option {i}-{j}" for j in range(4)],
            correct_answer_index=c,
            explanation=f"Because option {c} is right.",
        )
        for i, c in enumerate(correct)
    ]
    return QuizDocument(title=title, questions=questions)


def make_pdf(name: str = "paper.pdf", mime_type: str = "application/pdf") -> DocumentFile:
    return DocumentFile(filename=name, mime_type=mime_type, data=b"%PDF-1.4 " + name.encode())


@pytest.fixture
def three_questions() -> QuizDocument:
    return make_document([0, 1, 2])


@pytest.fixture
def one_question() -> QuizDocument:
    return make_document([3])
