# chemlab/engine/gating.py
"""
Mutua esclusione per le chiamate al modello.

Ogni componente che interroga il modello possiede un RequestGate:
- una sola richiesta in volo per gate (la seconda viene rifiutata con
  OperationInProgress, come il pulsante disabilitato nella UI);
- ogni richiesta riceve un Ticket con la "generazione" corrente; se nel
  frattempo il gate viene invalidato (l'utente ha cambiato modulo, caricato
  un'altra molecola...), la risposta è stantia e va scartata.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator

from chemlab.domain.errors import OperationInProgress, StaleResponse

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Ticket:
    gate: "RequestGate"
    generation: int

    @property
    def is_current(self) -> bool:
        return self.gate.generation == self.generation

    def ensure_current(self) -> None:
        if not self.is_current:
            logger.info("[%s] risposta stantia scartata (gen %d, attuale %d)",
                        self.gate.name, self.generation, self.gate.generation)
            raise StaleResponse(self.gate.name)


class RequestGate:
    def __init__(self, name: str):
        self.name = name
        self.generation = 0
        self._busy = False

    @property
    def busy(self) -> bool:
        return self._busy

    def invalidate(self) -> None:
        """Rende stantia qualsiasi richiesta in volo."""
        self.generation += 1

    @asynccontextmanager
    async def claim(self) -> AsyncIterator[Ticket]:
        if self._busy:
            raise OperationInProgress(self.name)
        self._busy = True
        self.generation += 1
        try:
            yield Ticket(self, self.generation)
        finally:
            self._busy = False
