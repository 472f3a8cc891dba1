import uuid
import enum
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, Integer, Enum, ForeignKey, Text, JSON, Uuid
from sqlalchemy.orm import relationship
from quiz_app.database import Base


# ---------------------------
# Question type Enum
# ---------------------------
class QuestionType(str, enum.Enum):
    MCQ = "MCQ"
    TRUE_FALSE = "TRUE_FALSE"
    TEXT = "TEXT"


# Question types answered by picking one of the stored options
OPTION_QUESTION_TYPES = (QuestionType.MCQ, QuestionType.TRUE_FALSE)


# ---------------------------
# User Model
# ---------------------------
class User(Base):
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    last_login = Column(DateTime, nullable=True)

    quizzes = relationship("Quiz", back_populates="created_by", cascade="all, delete-orphan")


# ---------------------------
# Quiz Model
# ---------------------------
class Quiz(Base):
    __tablename__ = "quizzes"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    # Never reassigned after creation
    created_by_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    is_published = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    created_by = relationship("User", back_populates="quizzes")
    questions = relationship(
        "Question",
        back_populates="quiz",
        cascade="all, delete-orphan",
        order_by=lambda: [Question.order, Question.id],
    )
    attempts = relationship(
        "Attempt",
        back_populates="quiz",
        cascade="all, delete-orphan",
        order_by=lambda: Attempt.created_at.desc(),
    )


class Question(Base):
    __tablename__ = "questions"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    quiz_id = Column(Uuid, ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False, index=True)

    text = Column(Text, nullable=False)
    type = Column(Enum(QuestionType, name="question_type_enum"), nullable=False)
    order = Column(Integer, nullable=False, default=0)
    # TEXT questions only
    correct_answer = Column(Text, nullable=True)

    quiz = relationship("Quiz", back_populates="questions")
    options = relationship(
        "Option",
        back_populates="question",
        cascade="all, delete-orphan",
        order_by=lambda: Option.position,
    )


class Option(Base):
    __tablename__ = "options"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    question_id = Column(Uuid, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False, index=True)

    text = Column(Text, nullable=False)
    is_correct = Column(Boolean, default=False, nullable=False)
    position = Column(Integer, nullable=False, default=0)

    question = relationship("Question", back_populates="options")


# ---------------------------
# Attempt Model
# ---------------------------
class Attempt(Base):
    __tablename__ = "attempts"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    quiz_id = Column(Uuid, ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False, index=True)

    participant_name = Column(String(100), nullable=False)
    # question id -> raw submitted string (option id or free text)
    answers = Column(JSON, nullable=False, default=dict)
    score = Column(Integer, nullable=False)
    total_points = Column(Integer, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)

    quiz = relationship("Quiz", back_populates="attempts")
