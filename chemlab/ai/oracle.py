# chemlab/ai/oracle.py
"""
Confine tipizzato verso il servizio generativo.

Le risposte strutturali vengono restituite come dict grezzi: sono input non
fidato e chi le riceve deve passarle da build_structure. Le altre risposte
(quiz, passaggi, study guide) sono già validate nella forma.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Sequence, Tuple

from chemlab.ai.gemini_client import GeminiClient
from chemlab.ai.prompt_builder import (
    TUTOR_PERSONA,
    PromptBuildConfig,
    build_analyze_prompt,
    build_quiz_prompt,
    build_reaction_prompt,
    build_reaction_steps_prompt,
    build_structure_prompt,
    build_study_guide_prompt,
)
from chemlab.ai.response_parser import parse_quiz, parse_reaction_steps, parse_study_guide
from chemlab.domain.models import QuizData, ReactionConditions, ReactionData, Structure, StudyGuide

logger = logging.getLogger(__name__)


class ContentOracle:
    def __init__(self, gemini: GeminiClient, cfg: PromptBuildConfig = PromptBuildConfig()):
        self.gemini = gemini
        self.cfg = cfg

    async def generate_structure(self, name: str) -> Dict[str, Any]:
        logger.debug("generate_structure(%r)", name)
        return await self.gemini.generate_json(build_structure_prompt(name, self.cfg))

    async def analyze_structure(self, structure: Structure) -> Dict[str, Any]:
        return await self.gemini.generate_json(build_analyze_prompt(structure, self.cfg))

    async def apply_reaction(
            self, structure: Structure, reagent: str, conditions: ReactionConditions
    ) -> Dict[str, Any]:
        logger.debug("apply_reaction(%s + %r)", structure.name, reagent)
        return await self.gemini.generate_json(build_reaction_prompt(structure, reagent, conditions, self.cfg))

    async def generate_quiz(self, topic: str) -> QuizData:
        data = await self.gemini.generate_json(build_quiz_prompt(topic, self.cfg))
        return parse_quiz(data, fallback_topic=topic)

    async def generate_reaction_steps(self, description: str) -> ReactionData:
        data = await self.gemini.generate_json(build_reaction_steps_prompt(description, self.cfg))
        return parse_reaction_steps(data)

    async def generate_study_guide(self, topic: str) -> StudyGuide:
        data = await self.gemini.generate_json(build_study_guide_prompt(topic, self.cfg))
        return parse_study_guide(data, fallback_topic=topic)

    async def chat(self, history: Sequence[Tuple[str, str]], message: str) -> str:
        # la persona viaggia come primo scambio: l'API v1 non ha system_instruction
        primed = [("user", TUTOR_PERSONA), ("model", "Understood. Ask me anything about chemistry.")]
        return await self.gemini.chat(primed + list(history), message)
