# chemlab/domain/errors.py
"""
Errori del core. Nessuno è fatale: ogni operazione fallita lascia lo stato
precedente intatto e può essere ritentata.
"""
from __future__ import annotations


class ChemLabError(Exception):
    pass


class MalformedStructureError(ChemLabError):
    """Il payload del modello viola gli invarianti del grafo atomi/legami."""


class OracleUnavailable(ChemLabError):
    """Errore di rete o di servizio verso Gemini (ritentabile)."""


class QuizGenerationFailed(ChemLabError):
    pass


class ReactionFailed(ChemLabError):
    pass


class OperationInProgress(ChemLabError):
    """Una richiesta dello stesso tipo è già in corso."""

    def __init__(self, operation: str):
        super().__init__(f"Operazione già in corso: {operation}")
        self.operation = operation


class StaleResponse(ChemLabError):
    """La risposta è arrivata dopo che la richiesta è stata invalidata."""


class InvalidTransition(ChemLabError):
    pass


class ModuleLocked(ChemLabError):
    def __init__(self, module_id: str):
        super().__init__(f"Il modulo {module_id} è bloccato.")
        self.module_id = module_id


class UnknownSyllabus(ChemLabError, KeyError):
    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Syllabus sconosciuto: {self.name}"
