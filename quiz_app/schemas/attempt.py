from pydantic import BaseModel, Field, StringConstraints
from typing import Annotated, Dict, List, Optional
from uuid import UUID
from datetime import datetime

from quiz_app.models import QuestionType


ParticipantName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]


# for participants
class QuizSubmitRequest(BaseModel):
    participant_name: ParticipantName
    # question id -> option id (MCQ / TRUE_FALSE) or free text (TEXT)
    answers: Dict[str, str] = Field(default_factory=dict)


# Grading output

class OptionResult(BaseModel):
    id: str
    text: str
    is_correct: bool


class AnswerResult(BaseModel):
    question_id: str
    question_text: str
    type: QuestionType
    user_answer: str
    user_answer_text: Optional[str]
    correct_answer: Optional[str]
    correct_answer_text: Optional[str]
    is_correct: bool
    options: List[OptionResult]


class ScoreResult(BaseModel):
    score: int
    total_points: int
    percentage: int
    answers: List[AnswerResult]


class QuizSubmitResponse(ScoreResult):
    attempt_id: UUID
    participant_name: str


class AttemptResultView(ScoreResult):
    attempt_id: UUID
    quiz_id: UUID
    quiz_title: str
    participant_name: str
    completed_at: datetime


# for quiz owners
class AttemptListItem(BaseModel):
    id: UUID
    participant_name: str
    score: int
    total_points: int
    percentage: int
    created_at: datetime


class QuizAttemptsView(BaseModel):
    quiz_id: UUID
    quiz_title: str
    attempts: List[AttemptListItem]
