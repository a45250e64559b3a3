# chemlab/config.py
from __future__ import annotations

import os
from dataclasses import dataclass

from chemlab.domain.syllabus import DEFAULT_SYLLABUS


def get_env(name: str, default: str = "") -> str:
    return os.environ.get(name, default).strip()


def _get_int(name: str, default: int) -> int:
    raw = get_env(name, str(default))
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} deve essere un intero (ricevuto {raw!r}).") from None


@dataclass(frozen=True)
class AppConfig:
    syllabus: str = DEFAULT_SYLLABUS
    quiz_length: int = 5
    log_level: str = "INFO"

    @staticmethod
    def from_env() -> "AppConfig":
        quiz_length = _get_int("CHEMLAB_QUIZ_LENGTH", 5)
        if quiz_length < 1:
            raise ValueError("CHEMLAB_QUIZ_LENGTH deve essere almeno 1.")
        return AppConfig(
            syllabus=get_env("CHEMLAB_SYLLABUS", DEFAULT_SYLLABUS).upper(),
            quiz_length=quiz_length,
            log_level=get_env("CHEMLAB_LOG_LEVEL", "INFO").upper(),
        )
