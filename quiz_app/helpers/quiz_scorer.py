from typing import Dict, List, Mapping, Optional, Sequence

from quiz_app.models import Question, OPTION_QUESTION_TYPES
from quiz_app.schemas.attempt import AnswerResult, OptionResult, ScoreResult


def calculate_percentage(score: int, total: int) -> int:
    """
    Whole-number percentage, rounding halves up (2/3 -> 67, 1/8 -> 13).
    Returns 0 when there is nothing to score.
    """
    if total <= 0:
        return 0
    return (score * 200 + total) // (2 * total)


def _normalize_text(value: Optional[str]) -> str:
    return (value or "").strip().lower()


def _grade_option_question(question: Question, user_answer: str) -> Dict:
    correct_option = next((opt for opt in question.options if opt.is_correct), None)
    user_option = next((opt for opt in question.options if str(opt.id) == user_answer), None)

    correct_id = str(correct_option.id) if correct_option else None

    return {
        "user_answer_text": user_option.text if user_option else None,
        "correct_answer": correct_id,
        "correct_answer_text": correct_option.text if correct_option else None,
        "is_correct": bool(user_answer) and user_answer == correct_id,
    }


def _grade_text_question(question: Question, user_answer: str) -> Dict:
    expected = _normalize_text(question.correct_answer)
    given = _normalize_text(user_answer)

    return {
        "user_answer_text": user_answer,
        "correct_answer": question.correct_answer,
        "correct_answer_text": question.correct_answer,
        # an ungraded TEXT question (no expected answer) never matches
        "is_correct": bool(given) and bool(expected) and given == expected,
    }


def score_quiz(
    questions: Sequence[Question],
    answers: Mapping[str, str],
) -> ScoreResult:
    """
    Grades one submission against a quiz's questions.

    - every question is worth exactly one point, so total_points == len(questions)
    - unanswered questions count as an empty answer; unknown keys are ignored
    - the returned answers keep the order of `questions`

    Pure: reads only its arguments, so stored attempts can be re-graded
    on demand to rebuild the per-question breakdown.
    """

    score = 0
    total_points = 0
    answer_results: List[AnswerResult] = []

    for question in questions:
        user_answer = answers.get(str(question.id)) or ""

        if question.type in OPTION_QUESTION_TYPES:
            graded = _grade_option_question(question, user_answer)
        else:
            graded = _grade_text_question(question, user_answer)

        total_points += 1
        if graded["is_correct"]:
            score += 1

        answer_results.append(
            AnswerResult(
                question_id=str(question.id),
                question_text=question.text,
                type=question.type,
                user_answer=user_answer,
                options=[
                    OptionResult(id=str(opt.id), text=opt.text, is_correct=bool(opt.is_correct))
                    for opt in question.options
                ],
                **graded,
            )
        )

    return ScoreResult(
        score=score,
        total_points=total_points,
        percentage=calculate_percentage(score, total_points),
        answers=answer_results,
    )
