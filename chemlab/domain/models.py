# chemlab/domain/models.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

from chemlab.domain.enums import BondStereo, ChatRole, ModuleStatus, QuestionType


# --- STRUTTURA MOLECOLARE ---
@dataclass(frozen=True)
class Atom:
    id: str
    element: str
    # Solo suggerimento di layout per il rendering
    x: Optional[float] = None
    y: Optional[float] = None


@dataclass(frozen=True)
class Bond:
    source: str
    target: str
    order: int = 1
    stereo: Optional[BondStereo] = None

    def key(self) -> Tuple[str, str]:
        """Coppia non ordinata (source, target), usata per trovare i duplicati."""
        return (self.source, self.target) if self.source <= self.target else (self.target, self.source)


@dataclass(frozen=True)
class ResonanceStructure:
    description: str
    bonds: Tuple[Bond, ...] = ()


@dataclass(frozen=True)
class Symmetry:
    point_group: str
    elements: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Structure:
    """
    Grafo atomi/legami validato. Immutabile: ogni modifica produce una nuova
    Structure, così le copie in archivio restano valide.
    Si costruisce tramite chemlab.domain.structure (build_structure o le modifiche manuali).
    """
    name: str
    description: str
    atoms: Tuple[Atom, ...] = ()
    bonds: Tuple[Bond, ...] = ()
    resonance_structures: Tuple[ResonanceStructure, ...] = ()
    symmetry: Optional[Symmetry] = None

    def atom_ids(self) -> Tuple[str, ...]:
        return tuple(a.id for a in self.atoms)


@dataclass(frozen=True)
class ArchiveItem:
    id: str
    name: str
    timestamp: int  # epoch ms
    data: Structure


# --- REAZIONI ---
@dataclass(frozen=True)
class ReactionConditions:
    temp: float = 25.0  # °C
    pressure: float = 1.0  # atm
    catalyst: str = ""
    solvent: str = "Ethanol"

    def __post_init__(self):
        if not self.pressure > 0:
            raise ValueError(f"La pressione deve essere > 0 atm (ricevuto {self.pressure}).")


@dataclass(frozen=True)
class ReactionStep:
    step: int
    key_concept: str
    description: str


@dataclass(frozen=True)
class ReactionData:
    name: str
    steps: Tuple[ReactionStep, ...] = ()
    references: Tuple[str, ...] = ()


# --- QUIZ ---
@dataclass(frozen=True)
class QuizQuestion:
    """
    Variante taggata: le opzioni esistono solo per le domande a scelta multipla
    e la risposta corretta deve coincidere (match esatto) con una di esse.
    """
    id: int
    type: QuestionType
    question: str
    correct_answer: str
    explanation: str = ""
    options: Optional[Tuple[str, ...]] = None

    def __post_init__(self):
        if self.type == QuestionType.MCQ:
            if not self.options:
                raise ValueError(f"Domanda {self.id}: una mcq richiede almeno un'opzione.")
            if self.correct_answer not in self.options:
                raise ValueError(f"Domanda {self.id}: la risposta corretta non è tra le opzioni.")
        elif self.options is not None:
            raise ValueError(f"Domanda {self.id}: opzioni ammesse solo per mcq (tipo {self.type.value}).")


@dataclass(frozen=True)
class QuizData:
    topic: str
    questions: Tuple[QuizQuestion, ...] = ()


@dataclass(frozen=True)
class QuizResult:
    topic: str
    module_id: Optional[str]
    score: int
    total: int
    percentage: int
    unlocked: bool


@dataclass(frozen=True)
class UnlockEvent:
    module_id: str
    percentage: int


# --- CURRICULUM ---
@dataclass(frozen=True)
class Module:
    id: str
    title: str
    description: str
    status: ModuleStatus
    topic: str
    score: Optional[int] = None


# --- STUDY HUB ---
@dataclass(frozen=True)
class VideoResource:
    title: str
    url: str
    source: str


@dataclass(frozen=True)
class StudyGuide:
    topic: str
    summary: str
    key_points: Tuple[str, ...] = ()
    common_mistakes: Tuple[str, ...] = ()
    resources: Tuple[VideoResource, ...] = ()


# --- CHAT ---
@dataclass(frozen=True)
class ChatMessage:
    id: str
    role: ChatRole
    text: str
    timestamp: int


# --- STATISTICHE ---
@dataclass(frozen=True)
class UserStats:
    quizzes_taken: int = 0
    total_score: int = 0  # somma delle percentuali, non media
    reactions_mastered: int = 0
    molecules_generated: int = 0


@dataclass(frozen=True)
class DashboardSummary:
    syllabus: str
    modules_done: int
    module_count: int
    progress_percent: int
    average_score: int
    quizzes_taken: int
    reactions_mastered: int
    molecules_generated: int
    archive_count: int
    recent_saves: Tuple[ArchiveItem, ...] = field(default_factory=tuple)
