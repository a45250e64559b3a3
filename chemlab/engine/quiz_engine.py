# chemlab/engine/quiz_engine.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple, Union

from chemlab.ai.oracle import ContentOracle
from chemlab.domain.enums import QuizPhase
from chemlab.domain.errors import ChemLabError, InvalidTransition, QuizGenerationFailed
from chemlab.domain.models import QuizQuestion, QuizResult, UnlockEvent
from chemlab.domain.rules import DEFAULT_RULES, MasteryRules, is_passed, quiz_percentage
from chemlab.engine.gating import RequestGate, Ticket
from chemlab.engine.scoring import ScoreResult, evaluate_answer
from chemlab.engine.stats import StatsTracker

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnswerRecord:
    question_id: int
    answer: Union[int, str]
    correct: bool


@dataclass
class QuizSession:
    topic: str
    questions: Tuple[QuizQuestion, ...]
    module_id: Optional[str] = None
    current_index: int = 0
    score: int = 0
    phase: QuizPhase = QuizPhase.AWAITING_ANSWER

    # stato di inserimento della domanda corrente
    selected_option: Optional[int] = None
    text_answer: str = ""

    answers: List[AnswerRecord] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.questions)

    @property
    def current_question(self) -> QuizQuestion:
        return self.questions[self.current_index]

    @property
    def is_last(self) -> bool:
        return self.current_index >= self.total - 1

    @property
    def completed(self) -> bool:
        return self.phase == QuizPhase.COMPLETED


class QuizEngine:
    """
    Un'istanza per tentativo.
    NOT_STARTED -> AWAITING_ANSWER <-> SHOWING_EXPLANATION -> COMPLETED

    Una risposta vale solo in AWAITING_ANSWER: ogni domanda viene quindi
    punteggiata al più una volta.
    """

    def __init__(
            self,
            oracle: ContentOracle,
            stats: StatsTracker,
            on_unlock: Optional[Callable[[UnlockEvent], None]] = None,
            rules: MasteryRules = DEFAULT_RULES,
    ):
        self.oracle = oracle
        self.stats = stats
        self.on_unlock = on_unlock
        self.rules = rules
        self.gate = RequestGate("quiz")
        self.session: Optional[QuizSession] = None
        self.result: Optional[QuizResult] = None

    @property
    def phase(self) -> QuizPhase:
        return self.session.phase if self.session else QuizPhase.NOT_STARTED

    # --- AVVIO ---
    async def start(self, topic: str, module_id: Optional[str] = None,
                    ticket: Optional[Ticket] = None) -> Optional[QuizSession]:
        topic = (topic or "").strip()
        if not topic:
            raise ValueError("Argomento del quiz mancante.")
        if self.session is not None:
            raise InvalidTransition("Quiz già avviato: crea un nuovo QuizEngine per un nuovo tentativo.")

        async with self.gate.claim() as own:
            try:
                data = await self.oracle.generate_quiz(topic)
            except ChemLabError as e:
                logger.warning("Generazione quiz '%s' fallita: %s", topic, e)
                raise QuizGenerationFailed(f"Impossibile creare il quiz su {topic}: {e}") from e

            # 0 domande = generazione fallita, mai un completamento automatico
            if not data.questions:
                raise QuizGenerationFailed(f"Il quiz su {topic} non contiene domande.")

            # annullato (cancel) o superato dal chiamante: il quiz non parte
            if not own.is_current or (ticket is not None and not ticket.is_current):
                logger.info("Quiz su %s scartato: richiesta superata.", topic)
                return None

            self.session = QuizSession(topic=data.topic or topic, questions=tuple(data.questions),
                                       module_id=module_id)
            logger.info("Quiz avviato: %s (%d domande, modulo=%s)", topic, len(data.questions), module_id)
            return self.session

    def cancel(self) -> None:
        """Scarta un avvio ancora in volo."""
        self.gate.invalidate()

    # --- RISPOSTE ---
    def answer_mcq(self, option_index: int) -> Optional[ScoreResult]:
        session = self._require_session()
        if session.phase != QuizPhase.AWAITING_ANSWER:
            return None  # già risposto: niente doppio punteggio
        result = evaluate_answer(session.current_question, option_index, self.rules)
        session.selected_option = option_index
        return self._record(session, option_index, result)

    def answer_text(self, text: str) -> Optional[ScoreResult]:
        session = self._require_session()
        if session.phase != QuizPhase.AWAITING_ANSWER:
            return None
        text = text or ""
        result = evaluate_answer(session.current_question, text, self.rules)
        session.text_answer = text
        return self._record(session, text, result)

    def _record(self, session: QuizSession, answer: Union[int, str], result: ScoreResult) -> ScoreResult:
        session.score += result.points
        session.answers.append(AnswerRecord(session.current_question.id, answer, result.correct))
        session.phase = QuizPhase.SHOWING_EXPLANATION
        return result

    # --- AVANZAMENTO ---
    def next(self) -> Optional[QuizResult]:
        """Passa alla domanda successiva; sull'ultima chiude il quiz e ne restituisce l'esito."""
        session = self._require_session()
        if session.phase != QuizPhase.SHOWING_EXPLANATION:
            raise InvalidTransition(f"next() non ammesso in fase {session.phase.value}.")

        if not session.is_last:
            session.current_index += 1
            session.selected_option = None
            session.text_answer = ""
            session.phase = QuizPhase.AWAITING_ANSWER
            return None
        return self._complete(session)

    def _complete(self, session: QuizSession) -> QuizResult:
        session.phase = QuizPhase.COMPLETED
        percentage = quiz_percentage(session.score, session.total)
        self.stats.record_quiz(percentage)

        unlocked = bool(session.module_id) and is_passed(percentage, self.rules)
        self.result = QuizResult(
            topic=session.topic,
            module_id=session.module_id,
            score=session.score,
            total=session.total,
            percentage=percentage,
            unlocked=unlocked,
        )
        logger.info("Quiz completato: %s %d/%d (%d%%)", session.topic, session.score, session.total, percentage)

        if unlocked and self.on_unlock is not None:
            self.on_unlock(UnlockEvent(module_id=session.module_id, percentage=percentage))
        return self.result

    def _require_session(self) -> QuizSession:
        if self.session is None:
            raise InvalidTransition("Quiz non avviato.")
        return self.session
