# chemlab/engine/curriculum.py
from __future__ import annotations

import dataclasses
import logging
from typing import Optional, Tuple

from chemlab.domain.enums import ModuleStatus
from chemlab.domain.models import Module, UnlockEvent
from chemlab.domain.rules import DEFAULT_RULES, MasteryRules, is_passed
from chemlab.domain.syllabus import DEFAULT_SYLLABUS, get_syllabus

logger = logging.getLogger(__name__)


class Curriculum:
    """
    Lista ordinata di moduli del syllabus scelto.
    Ogni transizione calcola una nuova tupla e sostituisce la vecchia: chi
    conserva un riferimento alla lista precedente non la vede cambiare.
    """

    def __init__(self, syllabus: str = DEFAULT_SYLLABUS, rules: MasteryRules = DEFAULT_RULES):
        self.rules = rules
        self.syllabus = syllabus
        self.modules: Tuple[Module, ...] = get_syllabus(syllabus)

    def select_syllabus(self, name: str) -> Tuple[Module, ...]:
        modules = get_syllabus(name)  # UnknownSyllabus prima di toccare lo stato
        self.syllabus = name
        self.modules = modules
        logger.info("Syllabus selezionato: %s (%d moduli)", name, len(modules))
        return self.modules

    def index_of(self, module_id: str) -> int:
        for i, m in enumerate(self.modules):
            if m.id == module_id:
                return i
        return -1

    def find(self, module_id: str) -> Optional[Module]:
        i = self.index_of(module_id)
        return self.modules[i] if i >= 0 else None

    def on_quiz_unlock_event(self, module_id: str, percentage: int) -> Tuple[Module, ...]:
        """
        Modulo superato -> completed con il punteggio, e il successivo (se bloccato)
        diventa active. Ripetere il quiz di un modulo completato aggiorna solo il
        punteggio; un modulo successivo già attivo o completato non viene toccato.
        """
        idx = self.index_of(module_id)
        if idx == -1 or not is_passed(percentage, self.rules):
            return self.modules

        modules = list(self.modules)
        modules[idx] = dataclasses.replace(modules[idx], status=ModuleStatus.COMPLETED, score=percentage)
        if idx + 1 < len(modules) and modules[idx + 1].status == ModuleStatus.LOCKED:
            modules[idx + 1] = dataclasses.replace(modules[idx + 1], status=ModuleStatus.ACTIVE)
            logger.info("Modulo sbloccato: %s", modules[idx + 1].id)

        self.modules = tuple(modules)
        return self.modules

    def handle_unlock(self, event: UnlockEvent) -> None:
        self.on_quiz_unlock_event(event.module_id, event.percentage)

    # --- DASHBOARD ---
    @property
    def active_module(self) -> Optional[Module]:
        return next((m for m in self.modules if m.status == ModuleStatus.ACTIVE), None)

    @property
    def completed_count(self) -> int:
        return sum(1 for m in self.modules if m.status == ModuleStatus.COMPLETED)

    @property
    def progress_percent(self) -> int:
        if not self.modules:
            return 0
        return round(self.completed_count / len(self.modules) * 100)

    def can_start_quiz(self, module_id: str) -> bool:
        m = self.find(module_id)
        return m is not None and m.status != ModuleStatus.LOCKED
