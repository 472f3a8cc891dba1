"""
Persistence helpers for quizzes and attempts.

Every function takes the request's AsyncSession; the ones that write commit
before returning. Identifiers arrive as opaque strings from the URL, so a
value that is not a valid UUID simply resolves to no record.
"""

import logging
import uuid
from typing import List, Optional, Sequence, Tuple, Union
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from quiz_app.models import Attempt, Option, Question, Quiz
from quiz_app.schemas.quiz import QuestionCreate, QuizCreate, QuizMeta, QuizUpdate

logger = logging.getLogger(__name__)

Identifier = Union[str, UUID]


def parse_id(value: Identifier) -> Optional[UUID]:
    if isinstance(value, UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


def build_questions(questions_in: Sequence[QuestionCreate]) -> List[Question]:
    """ORM questions for a validated payload; a missing `order` falls back to the list index."""
    return [
        Question(
            text=q.text,
            type=q.type,
            order=q.order if q.order is not None else index,
            correct_answer=q.correct_answer,
            options=[
                Option(text=opt.text, is_correct=opt.is_correct, position=position)
                for position, opt in enumerate(q.options)
            ],
        )
        for index, q in enumerate(questions_in)
    ]


def _question_count():
    return (
        select(func.count(Question.id))
        .where(Question.quiz_id == Quiz.id)
        .correlate(Quiz)
        .scalar_subquery()
    )


def _attempt_count():
    return (
        select(func.count(Attempt.id))
        .where(Attempt.quiz_id == Quiz.id)
        .correlate(Quiz)
        .scalar_subquery()
    )


# ---------------------------
# Quiz reads
# ---------------------------
async def find_quiz_by_id(db: AsyncSession, quiz_id: Identifier) -> Optional[Quiz]:
    parsed = parse_id(quiz_id)
    if parsed is None:
        return None
    result = await db.execute(select(Quiz).where(Quiz.id == parsed))
    return result.scalar_one_or_none()


async def find_quiz_with_questions(db: AsyncSession, quiz_id: Identifier) -> Optional[Quiz]:
    parsed = parse_id(quiz_id)
    if parsed is None:
        return None
    result = await db.execute(
        select(Quiz)
        .options(
            selectinload(Quiz.questions)
            .selectinload(Question.options)
        )
        .where(Quiz.id == parsed)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def find_quiz_ownership_meta(db: AsyncSession, quiz_id: Identifier) -> Optional[QuizMeta]:
    parsed = parse_id(quiz_id)
    if parsed is None:
        return None
    result = await db.execute(
        select(Quiz.id, Quiz.title, Quiz.created_by_id, Quiz.is_published)
        .where(Quiz.id == parsed)
    )
    row = result.first()
    if row is None:
        return None
    return QuizMeta(**row._mapping)


async def list_quizzes_by_owner(db: AsyncSession, user_id: UUID) -> List[Tuple[Quiz, int, int]]:
    result = await db.execute(
        select(
            Quiz,
            _question_count().label("question_count"),
            _attempt_count().label("attempt_count"),
        )
        .where(Quiz.created_by_id == user_id)
        .order_by(Quiz.created_at.desc())
    )
    return [tuple(row) for row in result.all()]


async def list_published_quizzes(db: AsyncSession) -> List[Tuple[Quiz, int]]:
    result = await db.execute(
        select(Quiz, _question_count().label("question_count"))
        .where(Quiz.is_published.is_(True))
        .order_by(Quiz.created_at.desc())
    )
    return [tuple(row) for row in result.all()]


# ---------------------------
# Quiz writes
# ---------------------------
async def create_quiz(db: AsyncSession, quiz_in: QuizCreate, owner_id: UUID) -> Quiz:
    quiz = Quiz(
        created_by_id=owner_id,
        title=quiz_in.title,
        description=quiz_in.description,
        is_published=quiz_in.is_published,
        questions=build_questions(quiz_in.questions),
    )
    db.add(quiz)
    await db.commit()

    logger.info("Quiz %s created by %s with %d questions", quiz.id, owner_id, len(quiz_in.questions))
    return await find_quiz_with_questions(db, quiz.id)


async def update_quiz_replacing_questions(db: AsyncSession, quiz: Quiz, quiz_in: QuizUpdate) -> Quiz:
    """
    Applies a partial update. When questions are supplied, the old set is
    deleted and the new one inserted in the same transaction, so readers
    never see the quiz without questions.
    """
    fields = quiz_in.model_fields_set

    try:
        if quiz_in.title is not None:
            quiz.title = quiz_in.title
        if "description" in fields:
            quiz.description = quiz_in.description
        if quiz_in.is_published is not None:
            quiz.is_published = quiz_in.is_published

        if quiz_in.questions is not None:
            result = await db.execute(select(Question).where(Question.quiz_id == quiz.id))
            for question in result.scalars().all():
                await db.delete(question)
            await db.flush()

            for question in build_questions(quiz_in.questions):
                question.quiz_id = quiz.id
                db.add(question)

        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info("Quiz %s updated (questions replaced: %s)", quiz.id, quiz_in.questions is not None)
    return await find_quiz_with_questions(db, quiz.id)


async def delete_quiz(db: AsyncSession, quiz: Quiz) -> None:
    """Deletes the quiz; questions, options and attempts go with it."""
    quiz_id = quiz.id
    await db.delete(quiz)
    await db.commit()
    logger.info("Quiz %s deleted", quiz_id)


# ---------------------------
# Attempts
# ---------------------------
async def create_attempt(
    db: AsyncSession,
    quiz_id: UUID,
    participant_name: str,
    answers: dict,
    score: int,
    total_points: int,
) -> Attempt:
    attempt = Attempt(
        quiz_id=quiz_id,
        participant_name=participant_name,
        answers=dict(answers),
        score=score,
        total_points=total_points,
    )
    db.add(attempt)
    await db.commit()
    await db.refresh(attempt)

    logger.info("Attempt %s recorded for quiz %s: %d/%d", attempt.id, quiz_id, score, total_points)
    return attempt


async def find_attempt_by_id(db: AsyncSession, attempt_id: Identifier) -> Optional[Attempt]:
    parsed = parse_id(attempt_id)
    if parsed is None:
        return None
    result = await db.execute(
        select(Attempt)
        .options(
            selectinload(Attempt.quiz)
            .selectinload(Quiz.questions)
            .selectinload(Question.options)
        )
        .where(Attempt.id == parsed)
    )
    return result.scalar_one_or_none()


async def list_attempts_by_quiz(db: AsyncSession, quiz_id: UUID) -> List[Attempt]:
    result = await db.execute(
        select(Attempt)
        .where(Attempt.quiz_id == quiz_id)
        .order_by(Attempt.created_at.desc())
    )
    return list(result.scalars().all())
