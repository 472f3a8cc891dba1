import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from quiz_app.errors import Forbidden, NotFound
from quiz_app.helpers.quiz_store import Identifier, find_quiz_ownership_meta, find_quiz_with_questions
from quiz_app.models import Quiz
from quiz_app.schemas.quiz import QuizMeta

logger = logging.getLogger(__name__)


async def verify_quiz_ownership(quiz_id: Identifier, user_id: UUID, db: AsyncSession) -> QuizMeta:
    """
    Allows the request only if `user_id` created the quiz.

    A missing quiz and someone else's quiz fail differently (404 vs 403),
    which lets owners tell a broken link from a permissions problem but
    also confirms to other users that the id exists.
    """
    meta = await find_quiz_ownership_meta(db, quiz_id)

    if meta is None:
        raise NotFound("Quiz not found")

    if str(meta.created_by_id) != str(user_id):
        logger.warning("User %s denied access to quiz %s", user_id, meta.id)
        raise Forbidden("You don't have permission to access this quiz")

    return meta


async def get_owned_quiz_with_questions(quiz_id: Identifier, user_id: UUID, db: AsyncSession) -> Quiz:
    meta = await verify_quiz_ownership(quiz_id, user_id, db)

    quiz = await find_quiz_with_questions(db, meta.id)
    if quiz is None:
        raise NotFound("Quiz not found")
    return quiz
