from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from quiz_app.database import get_db
from quiz_app.errors import NotFound
from quiz_app.helpers import quiz_store
from quiz_app.schemas.common import ApiResponse, success_response
from quiz_app.schemas.quiz import PublicQuizListItem, PublicQuizView

router = APIRouter(
    prefix="/api/public/quizzes",
    tags=["Public Quiz Endpoints"]
)


@router.get("", response_model=ApiResponse[List[PublicQuizListItem]])
async def list_published_quizzes(db: AsyncSession = Depends(get_db)):
    rows = await quiz_store.list_published_quizzes(db)

    return success_response([
        PublicQuizListItem(
            id=quiz.id,
            title=quiz.title,
            description=quiz.description,
            created_at=quiz.created_at,
            question_count=question_count,
        )
        for quiz, question_count in rows
    ])


@router.get("/{quiz_id}", response_model=ApiResponse[PublicQuizView])
async def get_public_quiz(quiz_id: str, db: AsyncSession = Depends(get_db)):
    """
    Quiz as shown to participants: option correctness and TEXT answers
    are left out. Unpublished quizzes look the same as missing ones.
    """
    quiz = await quiz_store.find_quiz_with_questions(db, quiz_id)

    if not quiz or not quiz.is_published:
        raise NotFound("Quiz not found")

    return success_response(PublicQuizView.model_validate(quiz))
