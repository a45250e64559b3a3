# chemlab/engine/reaction_transformer.py
from __future__ import annotations

import logging
from typing import Optional

from chemlab.ai.oracle import ContentOracle
from chemlab.domain.errors import ChemLabError, ReactionFailed
from chemlab.domain.models import ReactionConditions, Structure
from chemlab.domain.structure import build_structure
from chemlab.engine.gating import RequestGate, Ticket
from chemlab.engine.stats import StatsTracker

logger = logging.getLogger(__name__)


class ReactionTransformer:
    """
    struttura corrente + reagente + condizioni -> nuova struttura.
    O restituisce una Structure completa e valida, o solleva ReactionFailed:
    mai un risultato applicato a metà.
    """

    def __init__(self, oracle: ContentOracle, stats: StatsTracker):
        self.oracle = oracle
        self.stats = stats
        self.gate = RequestGate("apply_reaction")

    async def apply(
            self,
            current: Structure,
            reagent: str,
            conditions: ReactionConditions = ReactionConditions(),
            ticket: Optional[Ticket] = None,
    ) -> Structure:
        reagent = (reagent or "").strip()
        if not reagent:
            raise ValueError("Il reagente è obbligatorio.")

        async with self.gate.claim():
            try:
                payload = await self.oracle.apply_reaction(current, reagent, conditions)
                product = build_structure(payload)
            except ChemLabError as e:
                logger.warning("Reazione %s + %s fallita: %s", current.name, reagent, e)
                raise ReactionFailed(f"Impossibile simulare la reazione con {reagent}: {e}") from e

            # il chiamante ha cambiato molecola nel frattempo
            if ticket is not None:
                ticket.ensure_current()

            # contatore d'uso: conta ogni trasformazione strutturalmente valida
            self.stats.record_reaction()
            logger.info("Reazione applicata: %s + %s -> %s", current.name, reagent, product.name)
            return product
