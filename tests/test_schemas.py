"""Validation rules for quiz definitions and submissions."""

import pytest
from pydantic import ValidationError

from quiz_app.schemas.attempt import QuizSubmitRequest
from quiz_app.schemas.quiz import QuestionCreate, QuizCreate, QuizUpdate

from conftest import mcq, quiz_payload, text_question, true_false


def test_valid_quiz_with_every_question_type():
    quiz = QuizCreate(**quiz_payload([mcq(), true_false(), text_question()]))

    assert [q.type.value for q in quiz.questions] == ["MCQ", "TRUE_FALSE", "TEXT"]
    assert quiz.is_published is True


def test_quiz_needs_at_least_one_question():
    with pytest.raises(ValidationError):
        QuizCreate(**quiz_payload([]))


@pytest.mark.parametrize("title", ["", "x" * 201])
def test_title_length_is_bounded(title):
    with pytest.raises(ValidationError):
        QuizCreate(**quiz_payload(title=title))


def test_mcq_without_correct_option_is_rejected():
    question = mcq()
    question["options"][0]["is_correct"] = False

    with pytest.raises(ValidationError, match="exactly one correct option"):
        QuestionCreate(**question)


def test_mcq_with_two_correct_options_is_rejected():
    question = mcq()
    question["options"][1]["is_correct"] = True

    with pytest.raises(ValidationError):
        QuestionCreate(**question)


def test_mcq_needs_two_options():
    with pytest.raises(ValidationError, match="at least two options"):
        QuestionCreate(**mcq(wrong=()))


def test_true_false_needs_exactly_two_options():
    question = true_false()
    question["options"].append({"text": "Maybe", "is_correct": False})

    with pytest.raises(ValidationError, match="exactly two options"):
        QuestionCreate(**question)


def test_text_question_rejects_options():
    question = text_question()
    question["options"] = [{"text": "Paris", "is_correct": True}]

    with pytest.raises(ValidationError):
        QuestionCreate(**question)


def test_text_question_may_be_ungraded():
    question = QuestionCreate(**text_question(correct_answer=None))

    assert question.correct_answer is None
    assert question.options == []


def test_correct_answer_only_allowed_on_text_questions():
    question = mcq()
    question["correct_answer"] = "Paris"

    with pytest.raises(ValidationError):
        QuestionCreate(**question)


def test_unknown_question_type_is_rejected():
    with pytest.raises(ValidationError):
        QuestionCreate(text="?", type="ESSAY")


def test_negative_order_is_rejected():
    with pytest.raises(ValidationError):
        QuestionCreate(**mcq(order=-1))


def test_partial_update_tracks_explicit_fields():
    update = QuizUpdate(description=None)

    assert update.model_fields_set == {"description"}
    assert update.questions is None


def test_update_with_empty_question_list_is_rejected():
    with pytest.raises(ValidationError):
        QuizUpdate(questions=[])


def test_submission_strips_participant_name():
    request = QuizSubmitRequest(participant_name="  Ada  ", answers={"q1": "a"})

    assert request.participant_name == "Ada"


@pytest.mark.parametrize("name", ["", "   ", "x" * 101])
def test_submission_participant_name_is_required_and_bounded(name):
    with pytest.raises(ValidationError):
        QuizSubmitRequest(participant_name=name, answers={})


def test_submission_answers_default_to_empty():
    assert QuizSubmitRequest(participant_name="Ada").answers == {}


def test_submission_answers_must_be_strings():
    with pytest.raises(ValidationError):
        QuizSubmitRequest(participant_name="Ada", answers={"q1": 3})
