from pydantic import BaseModel, Field, model_validator
from typing import Optional, List
from datetime import datetime
from uuid import UUID

from quiz_app.models import QuestionType


# Creating / updating quizzes

class OptionCreate(BaseModel):
    text: str = Field(min_length=1)
    is_correct: bool = False


class QuestionCreate(BaseModel):
    text: str = Field(min_length=1)
    type: QuestionType
    order: Optional[int] = Field(default=None, ge=0)
    options: List[OptionCreate] = Field(default_factory=list)
    correct_answer: Optional[str] = None

    @model_validator(mode="after")
    def check_answer_shape(self):
        """
        MCQ needs at least two options, TRUE_FALSE exactly two, and both
        exactly one correct option. TEXT carries no options; its expected
        answer (if any) lives in correct_answer.
        """
        if self.type == QuestionType.TEXT:
            if self.options:
                raise ValueError("TEXT questions cannot have options")
            return self

        if self.type == QuestionType.MCQ and len(self.options) < 2:
            raise ValueError("MCQ questions need at least two options")

        if self.type == QuestionType.TRUE_FALSE and len(self.options) != 2:
            raise ValueError("TRUE_FALSE questions need exactly two options")

        correct_count = sum(1 for opt in self.options if opt.is_correct)
        if correct_count != 1:
            raise ValueError(
                f"{self.type.value} questions must have exactly one correct option"
            )

        if self.correct_answer is not None:
            raise ValueError("correct_answer is only allowed on TEXT questions")

        return self


class QuizCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=1000)
    is_published: bool = False
    questions: List[QuestionCreate] = Field(min_length=1)


class QuizUpdate(BaseModel):
    """Partial update; `questions`, when sent, replaces the whole set."""

    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=1000)
    is_published: Optional[bool] = None
    questions: Optional[List[QuestionCreate]] = Field(default=None, min_length=1)


# Owner views (correct answers included)

class OptionView(BaseModel):
    id: UUID
    text: str
    is_correct: bool

    model_config = {"from_attributes": True}


class QuestionView(BaseModel):
    id: UUID
    text: str
    type: QuestionType
    order: int
    correct_answer: Optional[str] = None
    options: List[OptionView]

    model_config = {"from_attributes": True}


class QuizDetailView(BaseModel):
    id: UUID
    title: str
    description: Optional[str]
    is_published: bool
    created_by_id: UUID
    created_at: datetime
    updated_at: datetime
    questions: List[QuestionView]

    model_config = {"from_attributes": True}


class QuizListItem(BaseModel):
    id: UUID
    title: str
    description: Optional[str]
    is_published: bool
    created_at: datetime
    question_count: int
    attempt_count: int


class QuizMeta(BaseModel):
    id: UUID
    title: str
    created_by_id: UUID
    is_published: bool

    model_config = {"from_attributes": True}


# Public views (correct answers hidden)

class PublicOptionView(BaseModel):
    id: UUID
    text: str

    model_config = {"from_attributes": True}


class PublicQuestionView(BaseModel):
    id: UUID
    text: str
    type: QuestionType
    order: int
    options: List[PublicOptionView]

    model_config = {"from_attributes": True}


class PublicQuizView(BaseModel):
    id: UUID
    title: str
    description: Optional[str]
    questions: List[PublicQuestionView]

    model_config = {"from_attributes": True}


class PublicQuizListItem(BaseModel):
    id: UUID
    title: str
    description: Optional[str]
    created_at: datetime
    question_count: int
