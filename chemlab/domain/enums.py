# chemlab/domain/enums.py
from __future__ import annotations

from enum import Enum


class QuestionType(str, Enum):
    MCQ = "mcq"
    FITB = "fitb"
    SHORT_ANSWER = "short_answer"


class ModuleStatus(str, Enum):
    LOCKED = "locked"
    ACTIVE = "active"
    COMPLETED = "completed"


class BondStereo(str, Enum):
    NONE = "none"
    WEDGE = "wedge"
    DASH = "dash"


class ChatRole(str, Enum):
    USER = "user"
    MODEL = "model"


class QuizPhase(str, Enum):
    NOT_STARTED = "not_started"
    AWAITING_ANSWER = "awaiting_answer"
    SHOWING_EXPLANATION = "showing_explanation"
    COMPLETED = "completed"
