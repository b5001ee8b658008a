from flashquiz.quiz_session import QuestionState, QuizSession

from conftest import make_document


def answer(session, index):
    assert session.select(index)
    assert session.submit()
    return session.advance()


def test_submit_without_select_creates_no_record(three_questions):
    session = QuizSession(three_questions)
    assert session.submit() is False
    assert session.records == []
    assert session.state is QuestionState.UNANSWERED


def test_selection_can_change_before_commit(three_questions):
    session = QuizSession(three_questions)
    session.select(2)
    session.select(0)
    assert session.state is QuestionState.SELECTED
    session.submit()
    assert session.records[0].user_answer_index == 0
    assert session.records[0].is_correct


def test_select_after_commit_keeps_committed_answer(three_questions):
    session = QuizSession(three_questions)
    session.select(3)
    session.submit()
    assert session.select(0) is False
    assert session.selected_index == 3
    assert session.records[0].user_answer_index == 3
    assert session.submit() is False
    assert len(session.records) == 1


def test_select_out_of_range_is_ignored(three_questions):
    session = QuizSession(three_questions)
    assert session.select(4) is False
    assert session.select(-1) is False
    assert session.state is QuestionState.UNANSWERED


def test_advance_requires_commit(three_questions):
    session = QuizSession(three_questions)
    assert session.advance() is False
    session.select(1)
    assert session.advance() is False
    assert session.current_index == 0


def test_advance_resets_question_state(three_questions):
    session = QuizSession(three_questions)
    answer(session, 0)
    assert session.current_index == 1
    assert session.state is QuestionState.UNANSWERED
    assert session.selected_index is None
    assert session.option_states() == ["idle"] * 4


def test_mixed_answers_score(three_questions):
    # correct answers are 0, 1, 2
    session = QuizSession(three_questions)
    answer(session, 0)
    answer(session, 3)
    answer(session, 2)
    result = session.result
    assert session.is_complete
    assert (result.score, result.total) == (2, 3)
    assert [d.is_correct for d in result.details] == [True, False, True]
    assert [d.question_id for d in result.details] == [q.id for q in three_questions.questions]
    assert result.percentage == 67


def test_all_correct_scores_full_marks():
    doc = make_document([1, 2, 3, 0, 1])
    session = QuizSession(doc)
    for q in doc.questions:
        answer(session, q.correct_answer_index)
    assert session.result.score == 5
    assert session.result.total == 5
    assert len(session.result.details) == 5


def test_single_question_completes_on_first_advance(one_question):
    session = QuizSession(one_question)
    assert session.is_last
    session.select(3)
    session.submit()
    assert session.advance()
    assert session.is_complete
    assert session.result.score == 1


def test_advance_after_complete_has_no_effect(one_question):
    session = QuizSession(one_question)
    answer(session, 0)
    result = session.result
    assert session.advance() is False
    assert session.advance() is False
    assert session.result is result
    assert session.is_complete
    assert session.current_question is None
    assert session.select(1) is False


def test_progress_counts_started_questions(three_questions):
    session = QuizSession(three_questions)
    assert session.progress == 0
    answer(session, 0)
    assert session.progress == 1 / 3


def test_option_states_after_wrong_commit(three_questions):
    session = QuizSession(three_questions)
    session.select(2)
    assert session.option_states() == ["idle", "idle", "selected", "idle"]
    session.submit()
    assert session.option_states() == ["correct", "dimmed", "incorrect", "dimmed"]
