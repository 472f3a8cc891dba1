from typing import Any, List

from fastapi import APIRouter, Body, Depends
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from quiz_app.database import get_db
from quiz_app.auth.dependencies import get_current_user
from quiz_app.auth.quiz_access import get_owned_quiz_with_questions, verify_quiz_ownership
from quiz_app.errors import NotFound, ValidationFailed, validation_details
from quiz_app.helpers import quiz_store
from quiz_app.helpers.quiz_scorer import calculate_percentage
from quiz_app.helpers.rate_limiter import ADMIN_RULE, rate_limit
from quiz_app.models import User
from quiz_app.schemas.attempt import AttemptListItem, QuizAttemptsView
from quiz_app.schemas.common import ApiResponse, MessageData, success_response
from quiz_app.schemas.quiz import QuizCreate, QuizDetailView, QuizListItem, QuizUpdate

router = APIRouter(
    prefix="/api/quizzes",
    tags=["Quiz Admin Endpoints"]
)


@router.get("", response_model=ApiResponse[List[QuizListItem]])
async def list_my_quizzes(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    rows = await quiz_store.list_quizzes_by_owner(db, current_user.id)

    return success_response([
        QuizListItem(
            id=quiz.id,
            title=quiz.title,
            description=quiz.description,
            is_published=quiz.is_published,
            created_at=quiz.created_at,
            question_count=question_count,
            attempt_count=attempt_count,
        )
        for quiz, question_count, attempt_count in rows
    ])


@router.post(
    "",
    response_model=ApiResponse[QuizDetailView],
    status_code=201,
    dependencies=[Depends(rate_limit(ADMIN_RULE))],
)
async def create_quiz(
    quiz_in: QuizCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    quiz = await quiz_store.create_quiz(db, quiz_in, owner_id=current_user.id)
    return success_response(QuizDetailView.model_validate(quiz))


@router.get("/{quiz_id}", response_model=ApiResponse[QuizDetailView])
async def get_quiz(
    quiz_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    quiz = await get_owned_quiz_with_questions(quiz_id, current_user.id, db)
    return success_response(QuizDetailView.model_validate(quiz))


@router.put(
    "/{quiz_id}",
    response_model=ApiResponse[QuizDetailView],
    dependencies=[Depends(rate_limit(ADMIN_RULE))],
)
async def update_quiz(
    quiz_id: str,
    payload: Any = Body(default=None),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    The body is validated only after the ownership check, so a stranger or a
    missing quiz never gets a validation error back.
    """
    meta = await verify_quiz_ownership(quiz_id, current_user.id, db)

    try:
        quiz_in = QuizUpdate.model_validate(payload)
    except ValidationError as exc:
        raise ValidationFailed(details=validation_details(exc.errors()))

    quiz = await quiz_store.find_quiz_by_id(db, meta.id)
    if quiz is None:
        raise NotFound("Quiz not found")

    quiz = await quiz_store.update_quiz_replacing_questions(db, quiz, quiz_in)
    return success_response(QuizDetailView.model_validate(quiz))


@router.delete(
    "/{quiz_id}",
    response_model=ApiResponse[MessageData],
    dependencies=[Depends(rate_limit(ADMIN_RULE))],
)
async def delete_quiz(
    quiz_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    meta = await verify_quiz_ownership(quiz_id, current_user.id, db)

    quiz = await quiz_store.find_quiz_by_id(db, meta.id)
    if quiz is None:
        raise NotFound("Quiz not found")

    await quiz_store.delete_quiz(db, quiz)
    return success_response({"message": "Quiz deleted successfully"})


@router.get("/{quiz_id}/attempts", response_model=ApiResponse[QuizAttemptsView])
async def list_quiz_attempts(
    quiz_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    meta = await verify_quiz_ownership(quiz_id, current_user.id, db)

    attempts = await quiz_store.list_attempts_by_quiz(db, meta.id)

    return success_response(
        QuizAttemptsView(
            quiz_id=meta.id,
            quiz_title=meta.title,
            attempts=[
                AttemptListItem(
                    id=attempt.id,
                    participant_name=attempt.participant_name,
                    score=attempt.score,
                    total_points=attempt.total_points,
                    percentage=calculate_percentage(attempt.score, attempt.total_points),
                    created_at=attempt.created_at,
                )
                for attempt in attempts
            ],
        )
    )
