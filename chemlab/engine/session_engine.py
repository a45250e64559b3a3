# chemlab/engine/session_engine.py
from __future__ import annotations

import logging
from typing import Optional

from chemlab.ai.oracle import ContentOracle
from chemlab.domain.errors import ModuleLocked
from chemlab.domain.models import DashboardSummary, Module
from chemlab.domain.syllabus import DEFAULT_SYLLABUS
from chemlab.engine.archive import Archive
from chemlab.engine.chat_tutor import ChatTutor
from chemlab.engine.curriculum import Curriculum
from chemlab.engine.gating import RequestGate
from chemlab.engine.molecule_lab import MoleculeLab
from chemlab.engine.quiz_engine import QuizEngine, QuizSession
from chemlab.engine.reaction_tutor import ReactionTutor
from chemlab.engine.stats import StatsTracker
from chemlab.engine.study_hub import StudyHub

logger = logging.getLogger(__name__)

DEFAULT_QUIZ_TOPIC = "Stereochemistry"


class SessionEngine:
    """
    Stato dell'applicazione per la durata del processo: statistiche, archivio,
    curriculum, laboratorio molecolare, quiz corrente, study hub e chat.
    Il completamento di un quiz legato a un modulo sblocca il successivo.
    """

    def __init__(self, oracle: ContentOracle, syllabus: str = DEFAULT_SYLLABUS):
        self.oracle = oracle
        self.stats = StatsTracker()
        self.archive = Archive()
        self.curriculum = Curriculum(syllabus)
        self.lab = MoleculeLab(oracle, self.stats, self.archive)
        self.study_hub = StudyHub(oracle)
        self.reaction_tutor = ReactionTutor(oracle)
        self.chat = ChatTutor(oracle)

        self.quiz: Optional[QuizEngine] = None
        self._quiz_gate = RequestGate("quiz_start")

    # --- CURRICULUM ---
    def select_syllabus(self, name: str) -> None:
        self.curriculum.select_syllabus(name)
        # un quiz ancora in generazione apparteneva al vecchio syllabus
        self._quiz_gate.invalidate()
        self.study_hub.close()

    # --- QUIZ ---
    async def start_quiz(self, topic: Optional[str] = None,
                         module_id: Optional[str] = None) -> Optional[QuizSession]:
        """
        Nuovo tentativo. Il quiz precedente viene sostituito solo se la
        generazione riesce; None se la risposta è arrivata fuori tempo.
        """
        engine = QuizEngine(self.oracle, self.stats, on_unlock=self.curriculum.handle_unlock)
        async with self._quiz_gate.claim() as ticket:
            session = await engine.start(topic or DEFAULT_QUIZ_TOPIC, module_id, ticket=ticket)
            if session is None:
                return None
            self.quiz = engine
            return session

    async def start_module_quiz(self, module_id: str) -> Optional[QuizSession]:
        module = self._require_module(module_id)
        if not self.curriculum.can_start_quiz(module_id):
            raise ModuleLocked(module_id)
        return await self.start_quiz(module.topic, module.id)

    # --- STUDY HUB ---
    async def open_study_guide(self, module_id: str):
        return await self.study_hub.open(self._require_module(module_id))

    def _require_module(self, module_id: str) -> Module:
        module = self.curriculum.find(module_id)
        if module is None:
            raise KeyError(f"Modulo sconosciuto: {module_id}")
        return module

    # --- CHAT ---
    async def ask_tutor(self, message: str):
        """Domanda al tutor con il contesto della molecola visualizzata."""
        return await self.chat.send(message, self.lab.current)

    # --- DASHBOARD ---
    def dashboard(self) -> DashboardSummary:
        s = self.stats.stats
        return DashboardSummary(
            syllabus=self.curriculum.syllabus,
            modules_done=self.curriculum.completed_count,
            module_count=len(self.curriculum.modules),
            progress_percent=self.curriculum.progress_percent,
            average_score=self.stats.average_score,
            quizzes_taken=s.quizzes_taken,
            reactions_mastered=s.reactions_mastered,
            molecules_generated=s.molecules_generated,
            archive_count=len(self.archive),
            recent_saves=tuple(self.archive.recent(3)),
        )
