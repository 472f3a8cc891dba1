"""Tests for quiz storage transactions."""

import pytest

from quiz_app.helpers import quiz_store
from quiz_app.schemas.quiz import QuizCreate, QuizUpdate

from conftest import mcq, quiz_payload, text_question


@pytest.mark.asyncio
async def test_failed_question_replacement_rolls_back(db, session_factory, owner, monkeypatch):
    quiz = await quiz_store.create_quiz(
        db, QuizCreate(**quiz_payload([mcq(), text_question()])), owner_id=owner.id
    )
    quiz_id = quiz.id
    original_ids = [q.id for q in quiz.questions]

    def broken_build(questions_in):
        raise RuntimeError("question build failed")

    monkeypatch.setattr(quiz_store, "build_questions", broken_build)
    update = QuizUpdate(title="Half edited", questions=[text_question("Largest ocean?", "Pacific")])

    with pytest.raises(RuntimeError, match="question build failed"):
        await quiz_store.update_quiz_replacing_questions(db, quiz, update)

    async with session_factory() as fresh:
        reloaded = await quiz_store.find_quiz_with_questions(fresh, quiz_id)

    assert reloaded.title == "Geography"
    assert [q.id for q in reloaded.questions] == original_ids
    assert [len(q.options) for q in reloaded.questions] == [2, 0]


@pytest.mark.asyncio
async def test_question_replacement_commits_new_set(db, session_factory, owner):
    quiz = await quiz_store.create_quiz(db, QuizCreate(**quiz_payload([mcq(), mcq("Second?")])), owner_id=owner.id)
    old_ids = {q.id for q in quiz.questions}

    updated = await quiz_store.update_quiz_replacing_questions(
        db, quiz, QuizUpdate(questions=[text_question("Largest ocean?", "Pacific")])
    )

    async with session_factory() as fresh:
        reloaded = await quiz_store.find_quiz_with_questions(fresh, quiz.id)

    assert [q.text for q in updated.questions] == ["Largest ocean?"]
    assert [q.id for q in reloaded.questions] == [q.id for q in updated.questions]
    assert not old_ids & {q.id for q in reloaded.questions}
