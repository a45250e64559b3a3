# chemlab/domain/rules.py
from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal


@dataclass(frozen=True)
class MasteryRules:
    """
    Regole di progressione.
    NOTA: la soglia è espressa in percentuale (0..100).
    """
    pass_mark_percent: int = 60

    # risposta aperta: punto "per impegno" se la risposta supera questa lunghezza
    short_answer_min_length: int = 3


DEFAULT_RULES = MasteryRules()


def is_passed(percentage: int, rules: MasteryRules = DEFAULT_RULES) -> bool:
    """Ritorna True se la percentuale raggiunge la soglia di padronanza."""
    return percentage >= rules.pass_mark_percent


def quiz_percentage(score: int, total: int) -> int:
    """
    round(score / total * 100), arrotondando .5 verso l'alto (1/8 -> 13),
    come Math.round lato UI. total deve essere > 0.
    """
    if total <= 0:
        raise ValueError("Un quiz senza domande non ha percentuale.")
    value = Decimal(score) * 100 / Decimal(total)
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def average_score(total_score: int, quizzes_taken: int) -> int:
    """Media per la dashboard (0 se nessun quiz)."""
    if quizzes_taken <= 0:
        return 0
    return int((Decimal(total_score) / Decimal(quizzes_taken)).quantize(Decimal(1), rounding=ROUND_HALF_UP))
