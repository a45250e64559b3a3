# chemlab/engine/scoring.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from chemlab.domain.enums import QuestionType
from chemlab.domain.errors import InvalidTransition
from chemlab.domain.models import QuizQuestion
from chemlab.domain.rules import DEFAULT_RULES, MasteryRules


@dataclass(frozen=True)
class ScoreResult:
    correct: bool
    points: int


CORRECT = ScoreResult(correct=True, points=1)
WRONG = ScoreResult(correct=False, points=0)


def evaluate_mcq(question: QuizQuestion, option_index: int) -> ScoreResult:
    """
    Punto se il testo dell'opzione scelta coincide (match esatto) con correct_answer.
    """
    options = question.options or ()
    if not 0 <= option_index < len(options):
        raise IndexError(f"Opzione {option_index} inesistente (domanda {question.id}).")
    return CORRECT if options[option_index] == question.correct_answer else WRONG


def evaluate_fitb(question: QuizQuestion, text: str) -> ScoreResult:
    """Confronto senza maiuscole/minuscole e senza spazi ai bordi."""
    return CORRECT if text.strip().casefold() == question.correct_answer.casefold() else WRONG


def evaluate_short_answer(text: str, rules: MasteryRules = DEFAULT_RULES) -> ScoreResult:
    """
    Risposta aperta: il motore non può verificarne la correttezza, quindi premia
    l'impegno. Punto se la risposta è più lunga di short_answer_min_length
    (4 caratteri sì, 3 no). Indulgenza voluta, non un bug.
    """
    return CORRECT if len(text) > rules.short_answer_min_length else WRONG


def evaluate_answer(
        question: QuizQuestion,
        answer: Union[int, str],
        rules: MasteryRules = DEFAULT_RULES,
) -> ScoreResult:
    """
    Router unico:
    - mcq -> indice dell'opzione
    - fitb / short_answer -> testo libero
    """
    if question.type == QuestionType.MCQ:
        if isinstance(answer, bool) or not isinstance(answer, int):
            raise InvalidTransition(f"La domanda {question.id} è a scelta multipla: serve un indice.")
        return evaluate_mcq(question, answer)

    if not isinstance(answer, str):
        raise InvalidTransition(f"La domanda {question.id} richiede una risposta testuale.")
    if question.type == QuestionType.FITB:
        return evaluate_fitb(question, answer)
    return evaluate_short_answer(answer, rules)
