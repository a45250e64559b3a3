# chemlab/engine/molecule_lab.py
from __future__ import annotations

import logging
from typing import Optional

from chemlab.ai.oracle import ContentOracle
from chemlab.domain.errors import StaleResponse
from chemlab.domain.models import ArchiveItem, ReactionConditions, Structure
from chemlab.domain.structure import build_structure, validate_structure
from chemlab.engine.archive import Archive
from chemlab.engine.gating import RequestGate
from chemlab.engine.reaction_transformer import ReactionTransformer
from chemlab.engine.stats import StatsTracker

logger = logging.getLogger(__name__)


class MoleculeLab:
    """
    La molecola visualizzata. Ricerca, analisi dopo modifica manuale e
    reazioni condividono un solo gate: una richiesta alla volta.
    In caso di errore `current` resta quella di prima.
    """

    def __init__(self, oracle: ContentOracle, stats: StatsTracker, archive: Archive,
                 transformer: Optional[ReactionTransformer] = None):
        self.oracle = oracle
        self.stats = stats
        self.archive = archive
        self.transformer = transformer or ReactionTransformer(oracle, stats)
        self.gate = RequestGate("molecule")
        self.current: Optional[Structure] = None
        self.conditions = ReactionConditions()

    @property
    def loading(self) -> bool:
        return self.gate.busy

    async def search(self, name: str) -> Optional[Structure]:
        name = (name or "").strip()
        if not name:
            return None
        async with self.gate.claim() as ticket:
            payload = await self.oracle.generate_structure(name)
            structure = build_structure(payload)
            if not ticket.is_current:
                logger.info("Ricerca di %s scartata: richiesta superata.", name)
                return None
            self.current = structure
            self.stats.record_molecule()
            logger.info("Molecola generata: %s (%d atomi)", structure.name, len(structure.atoms))
            return structure

    async def analyze(self, edited: Structure) -> Optional[Structure]:
        """Rianalizza una struttura modificata a mano (prima viene validata localmente)."""
        validate_structure(edited)
        async with self.gate.claim() as ticket:
            payload = await self.oracle.analyze_structure(edited)
            structure = build_structure(payload)
            if not ticket.is_current:
                logger.info("Analisi di %s scartata: richiesta superata.", edited.name)
                return None
            self.current = structure
            return structure

    async def apply_reaction(self, reagent: str,
                             conditions: Optional[ReactionConditions] = None) -> Optional[Structure]:
        if self.current is None:
            raise ValueError("Nessuna molecola caricata.")
        conditions = conditions or self.conditions
        async with self.gate.claim() as ticket:
            try:
                product = await self.transformer.apply(self.current, reagent, conditions, ticket=ticket)
            except StaleResponse:
                return None
            self.current = product
            self.conditions = conditions
            return product

    # --- ARCHIVIO ---
    def save_to_archive(self) -> Optional[ArchiveItem]:
        if self.current is None:
            return None
        return self.archive.save(self.current)

    def load_from_archive(self, item_id: str) -> Optional[Structure]:
        item = self.archive.get(item_id)
        if item is None:
            return None
        # una ricerca ancora in volo non deve sovrascrivere la molecola caricata
        self.gate.invalidate()
        self.current = item.data
        return self.current
