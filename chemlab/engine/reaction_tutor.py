# chemlab/engine/reaction_tutor.py
from __future__ import annotations

from typing import Optional

from chemlab.ai.oracle import ContentOracle
from chemlab.domain.models import ReactionData
from chemlab.engine.gating import RequestGate


class ReactionTutor:
    """Spiegazione passo-passo di un meccanismo (testo del modello, non simulato)."""

    def __init__(self, oracle: ContentOracle):
        self.oracle = oracle
        self.gate = RequestGate("reaction_steps")
        self.current: Optional[ReactionData] = None

    async def explain(self, description: str) -> Optional[ReactionData]:
        description = (description or "").strip()
        if not description:
            return None
        async with self.gate.claim():
            self.current = await self.oracle.generate_reaction_steps(description)
            return self.current
