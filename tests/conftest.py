import asyncio
import copy

import pytest

from chemlab.domain.enums import QuestionType
from chemlab.domain.errors import OracleUnavailable
from chemlab.domain.models import QuizData, QuizQuestion, ReactionData, ReactionStep, StudyGuide
from chemlab.domain.structure import build_structure
from chemlab.engine.stats import StatsTracker

ETHANOL = {
    "name": "Ethanol",
    "description": "A primary alcohol.",
    "atoms": [
        {"id": "c1", "element": "C", "x": 0.0, "y": 0.0},
        {"id": "c2", "element": "C", "x": 1.0, "y": 0.5},
        {"id": "o1", "element": "O", "x": 2.0, "y": 0.0},
    ],
    "bonds": [
        {"source": "c1", "target": "c2", "order": 1},
        {"source": "c2", "target": "o1", "order": 1},
    ],
}

ACETALDEHYDE = {
    "name": "Acetaldehyde",
    "description": "Oxidation product of ethanol.",
    "atoms": [
        {"id": "c1", "element": "C"},
        {"id": "c2", "element": "C"},
        {"id": "o1", "element": "O"},
    ],
    "bonds": [
        {"source": "c1", "target": "c2", "order": 1},
        {"source": "c2", "target": "o1", "order": 2},
    ],
}

WATER = {
    "name": "Water",
    "description": "H2O",
    "atoms": [{"id": "o", "element": "O"}, {"id": "h1", "element": "H"}, {"id": "h2", "element": "H"}],
    "bonds": [{"source": "o", "target": "h1", "order": 1}, {"source": "o", "target": "h2", "order": 1}],
    "symmetry": {"pointGroup": "C2v", "elements": ["E", "C2"]},
}


def make_quiz(topic="Alcohols"):
    return QuizData(topic=topic, questions=(
        QuizQuestion(id=1, type=QuestionType.MCQ, question="Which is an alcohol?",
                     options=("Ethanol", "Ethane", "Ethene"), correct_answer="Ethanol",
                     explanation="-OH group."),
        QuizQuestion(id=2, type=QuestionType.FITB, question="CH3CH2OH is ____.",
                     correct_answer="Ethanol", explanation="Two carbons."),
        QuizQuestion(id=3, type=QuestionType.SHORT_ANSWER, question="Why do alcohols boil high?",
                     correct_answer="Hydrogen bonding", explanation="H-bonds."),
        QuizQuestion(id=4, type=QuestionType.MCQ, question="Oxidising ethanol gives?",
                     options=("Ethanal", "Ethane"), correct_answer="Ethanal",
                     explanation="Primary alcohol -> aldehyde."),
    ))


class FakeOracle:
    """Sostituisce ContentOracle: risposte preconfigurate, nessuna rete."""

    def __init__(self):
        self.structures = {"Ethanol": ETHANOL, "Water": WATER}
        self.analysis = None
        self.reaction_payload = ACETALDEHYDE
        self.quiz = make_quiz()
        self.study_guide = StudyGuide(topic="Alcohols", summary="R-OH compounds.", key_points=("H-bonding",))
        self.reaction_steps = ReactionData(name="SN2", steps=(
            ReactionStep(step=1, key_concept="Backside attack", description="OH- attacks carbon."),))
        self.chat_reply = "Ethanol is a primary alcohol."
        self.error = None
        self.release = None
        self.calls = []

    async def _wait(self, name, *args):
        self.calls.append((name,) + args)
        if self.release is not None:
            await self.release.wait()
        if self.error is not None:
            raise self.error

    async def generate_structure(self, name):
        await self._wait("generate_structure", name)
        if name not in self.structures:
            raise OracleUnavailable(f"no structure for {name}")
        return copy.deepcopy(self.structures[name])

    async def analyze_structure(self, structure):
        await self._wait("analyze_structure", structure)
        return copy.deepcopy(self.analysis)

    async def apply_reaction(self, structure, reagent, conditions):
        await self._wait("apply_reaction", structure, reagent, conditions)
        return copy.deepcopy(self.reaction_payload)

    async def generate_quiz(self, topic):
        await self._wait("generate_quiz", topic)
        return self.quiz

    async def generate_reaction_steps(self, description):
        await self._wait("generate_reaction_steps", description)
        return self.reaction_steps

    async def generate_study_guide(self, topic):
        await self._wait("generate_study_guide", topic)
        return self.study_guide

    async def chat(self, history, message):
        await self._wait("chat", list(history), message)
        return self.chat_reply


async def settle():
    """Lascia girare i task in attesa finché non si bloccano."""
    for _ in range(5):
        await asyncio.sleep(0)


@pytest.fixture
def oracle():
    return FakeOracle()


@pytest.fixture
def stats():
    return StatsTracker()


@pytest.fixture
def ethanol():
    return build_structure(ETHANOL)


@pytest.fixture
def water():
    return build_structure(WATER)
