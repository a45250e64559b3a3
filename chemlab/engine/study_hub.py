# chemlab/engine/study_hub.py
from __future__ import annotations

import logging
from typing import Optional

from chemlab.ai.oracle import ContentOracle
from chemlab.domain.models import Module, StudyGuide
from chemlab.engine.gating import RequestGate

logger = logging.getLogger(__name__)


class StudyHub:
    def __init__(self, oracle: ContentOracle):
        self.oracle = oracle
        self.gate = RequestGate("study_guide")
        self.module: Optional[Module] = None
        self.guide: Optional[StudyGuide] = None

    @property
    def loading(self) -> bool:
        return self.gate.busy

    async def open(self, module: Module) -> Optional[StudyGuide]:
        """Seleziona il modulo e ne scarica la guida (None se nel frattempo è stato chiuso)."""
        async with self.gate.claim() as ticket:
            # stato toccato solo dopo il claim: un open rifiutato non cambia nulla
            self.module = module
            self.guide = None
            guide = await self.oracle.generate_study_guide(module.topic)
            if not ticket.is_current:
                logger.info("Guida per %s scartata: pannello chiuso.", module.id)
                return None
            self.guide = guide
            return guide

    def close(self) -> None:
        self.gate.invalidate()
        self.module = None
        self.guide = None
