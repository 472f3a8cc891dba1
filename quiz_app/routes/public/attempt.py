from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from quiz_app.database import get_db
from quiz_app.errors import Forbidden, NotFound
from quiz_app.helpers import quiz_store
from quiz_app.helpers.quiz_scorer import score_quiz
from quiz_app.helpers.rate_limiter import QUIZ_SUBMIT_RULE, rate_limit
from quiz_app.schemas.attempt import AttemptResultView, QuizSubmitRequest, QuizSubmitResponse
from quiz_app.schemas.common import ApiResponse, success_response

router = APIRouter(
    prefix="/api/quizzes",
    tags=["Quiz Submission Endpoints"]
)


@router.post(
    "/{quiz_id}/submit",
    response_model=ApiResponse[QuizSubmitResponse],
    dependencies=[Depends(rate_limit(QUIZ_SUBMIT_RULE))],
)
async def submit_quiz(
    quiz_id: str,
    payload: QuizSubmitRequest,
    db: AsyncSession = Depends(get_db),
):
    # --------------------------
    # Fetch quiz with questions
    # --------------------------
    quiz = await quiz_store.find_quiz_with_questions(db, quiz_id)

    if not quiz:
        raise NotFound("Quiz not found")

    if not quiz.is_published:
        raise Forbidden("Quiz is not available for submission")

    # --------------------------
    # Grade and store the raw answers
    # --------------------------
    result = score_quiz(quiz.questions, payload.answers)

    attempt = await quiz_store.create_attempt(
        db,
        quiz_id=quiz.id,
        participant_name=payload.participant_name,
        answers=payload.answers,
        score=result.score,
        total_points=result.total_points,
    )

    return success_response(
        QuizSubmitResponse(
            attempt_id=attempt.id,
            participant_name=attempt.participant_name,
            **result.model_dump(),
        )
    )


@router.get(
    "/{quiz_id}/result/{attempt_id}",
    response_model=ApiResponse[AttemptResultView],
)
async def get_attempt_result(
    quiz_id: str,
    attempt_id: str,
    db: AsyncSession = Depends(get_db),
):
    """
    Shareable result page data. Everything graded, score and percentage
    included, comes from re-scoring the stored raw answers against the quiz's
    current questions. The score saved at submission time is only used by the
    owner's attempt listing.
    """
    attempt = await quiz_store.find_attempt_by_id(db, attempt_id)

    if not attempt or str(attempt.quiz_id) != str(quiz_store.parse_id(quiz_id)):
        raise NotFound("Result not found")

    result = score_quiz(attempt.quiz.questions, attempt.answers or {})

    return success_response(
        AttemptResultView(
            attempt_id=attempt.id,
            quiz_id=attempt.quiz_id,
            quiz_title=attempt.quiz.title,
            participant_name=attempt.participant_name,
            completed_at=attempt.created_at,
            **result.model_dump(),
        )
    )
