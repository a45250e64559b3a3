# chemlab/ai/response_parser.py
"""
Validazione di forma per le risposte non strutturali (quiz, passaggi di
reazione, study guide). Le strutture molecolari passano invece da
chemlab.domain.structure.build_structure.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from chemlab.domain.enums import QuestionType
from chemlab.domain.errors import ChemLabError
from chemlab.domain.models import (
    QuizData,
    QuizQuestion,
    ReactionData,
    ReactionStep,
    StudyGuide,
    VideoResource,
)


class ResponseParseError(ChemLabError):
    pass


def parse_quiz(data: Dict[str, Any], fallback_topic: str = "") -> QuizData:
    topic = _optional_str(data, "topic") or fallback_topic
    raw_questions = _require_list(data, "questions")
    if not raw_questions:
        raise ResponseParseError("Il quiz non contiene domande.")

    questions = tuple(_parse_question(q, idx) for idx, q in enumerate(raw_questions))
    return QuizData(topic=topic, questions=questions)


def _parse_question(raw: Any, idx: int) -> QuizQuestion:
    if not isinstance(raw, dict):
        raise ResponseParseError(f"Domanda {idx + 1} non valida.")

    qtype = _require_enum(raw, "type", QuestionType)
    options: Optional[Tuple[str, ...]] = None
    raw_opts = raw.get("options")
    # alcune risposte mettono "options": [] anche per fitb/short_answer
    if raw_opts:
        if not isinstance(raw_opts, list):
            raise ResponseParseError(f"Domanda {idx + 1}: options deve essere una lista.")
        options = tuple(str(o).strip() for o in raw_opts)

    qid = raw.get("id")
    if isinstance(qid, bool) or not isinstance(qid, int):
        qid = idx + 1

    try:
        return QuizQuestion(
            id=qid,
            type=qtype,
            question=_require_str(raw, "question"),
            options=options,
            correct_answer=_require_str(raw, "correctAnswer"),
            explanation=_optional_str(raw, "explanation"),
        )
    except ValueError as e:
        raise ResponseParseError(str(e)) from e


def parse_reaction_steps(data: Dict[str, Any]) -> ReactionData:
    steps: List[ReactionStep] = []
    for i, raw in enumerate(_require_list(data, "steps")):
        if not isinstance(raw, dict):
            raise ResponseParseError(f"Passaggio {i + 1} non valido.")
        step = raw.get("step")
        steps.append(ReactionStep(
            step=step if isinstance(step, int) and not isinstance(step, bool) else i + 1,
            key_concept=_optional_str(raw, "keyConcept"),
            description=_require_str(raw, "description"),
        ))
    if not steps:
        raise ResponseParseError("Nessun passaggio di reazione.")
    return ReactionData(
        name=_require_str(data, "name"),
        steps=tuple(steps),
        references=tuple(_require_str_list(data, "references")),
    )


def parse_study_guide(data: Dict[str, Any], fallback_topic: str = "") -> StudyGuide:
    resources = []
    for raw in _require_list(data, "resources", default=[]):
        if not isinstance(raw, dict):
            continue
        resources.append(VideoResource(
            title=_require_str(raw, "title"),
            url=_require_str(raw, "url"),
            source=_optional_str(raw, "source"),
        ))
    return StudyGuide(
        topic=_optional_str(data, "topic") or fallback_topic,
        summary=_require_str(data, "summary"),
        key_points=tuple(_require_str_list(data, "keyPoints")),
        common_mistakes=tuple(_require_str_list(data, "commonMistakes")),
        resources=tuple(resources),
    )


# --- Helpers ---
def _require_str(data, key):
    v = data.get(key)
    if not isinstance(v, str) or not v.strip(): raise ResponseParseError(f"Manca {key}")
    return v.strip()


def _optional_str(data, key):
    # campi testuali accessori: un valore non stringa viene ignorato, non rifiutato
    v = data.get(key)
    return v.strip() if isinstance(v, str) else ""


def _require_enum(data, key, enum_cls):
    v = _require_str(data, key)
    try:
        return enum_cls(v.lower())
    except ValueError:
        raise ResponseParseError(f"{v} non valido per {key}") from None


def _require_list(data, key, default=None):
    v = data.get(key)
    if v is None:
        v = default
    if not isinstance(v, list): raise ResponseParseError(f"Manca la lista {key}")
    return v


def _require_str_list(data, key):
    v = data.get(key, [])
    if not isinstance(v, list): return []
    return [str(x).strip() for x in v if str(x).strip()]
