# chemlab/ai/prompt_builder.py
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Optional

from chemlab.domain.models import ReactionConditions, Structure
from chemlab.domain.structure import structure_to_payload


@dataclass(frozen=True)
class PromptBuildConfig:
    question_count: int = 5
    strict_json_only: bool = True


STRUCTURE_SCHEMA = """
{
  "name": "string",
  "description": "string (2-3 sentences: key properties and uses)",
  "atoms": [{"id": "a1", "element": "C", "x": 0.0, "y": 0.0}],
  "bonds": [{"source": "a1", "target": "a2", "order": 1, "stereo": "none|wedge|dash"}],
  "resonanceStructures": [{"description": "string", "bonds": [ ...same shape as bonds... ]}],
  "symmetry": {"pointGroup": "C2v", "elements": ["E", "C2", "σv"]}
}
""".strip()

QUIZ_SCHEMA = """
{
  "topic": "string",
  "questions": [
    {"id": 1, "type": "mcq", "question": "string", "options": ["A", "B", "C", "D"],
     "correctAnswer": "exactly one of options", "explanation": "string"},
    {"id": 2, "type": "fitb", "question": "string with ____", "correctAnswer": "one word or short phrase",
     "explanation": "string"},
    {"id": 3, "type": "short_answer", "question": "string", "correctAnswer": "model answer",
     "explanation": "string"}
  ]
}
""".strip()

REACTION_STEPS_SCHEMA = """
{
  "name": "string",
  "steps": [{"step": 1, "keyConcept": "string", "description": "string"}],
  "references": ["string"]
}
""".strip()

STUDY_GUIDE_SCHEMA = """
{
  "topic": "string",
  "summary": "string",
  "keyPoints": ["string"],
  "commonMistakes": ["string"],
  "resources": [{"title": "string", "url": "https://...", "source": "YouTube|Khan Academy|..."}]
}
""".strip()

TUTOR_PERSONA = (
    "You are an expert, patient organic chemistry tutor. "
    "Explain concepts step by step, use correct IUPAC terminology and keep answers concise."
)


def _json_only(cfg: PromptBuildConfig) -> str:
    if cfg.strict_json_only:
        return "Return ONLY valid JSON, no markdown, no commentary."
    return "Return the JSON object."


def _structure_rules() -> str:
    return """
STRUCTURE RULES:
- Every atom id is unique. Include explicit hydrogens.
- Every bond references existing atom ids, never the same atom twice.
- At most ONE bond between any pair of atoms; use "order" (1, 2 or 3) for multiple bonds.
- Give x/y coordinates for a clean 2D skeletal layout.
- Resonance structures reuse the SAME atom ids.
""".strip()


def build_structure_prompt(name: str, cfg: PromptBuildConfig = PromptBuildConfig()) -> str:
    return f"""
{TUTOR_PERSONA}

Generate the 2D molecular structure of "{name}" as an atom/bond graph.
Include resonance structures and the symmetry point group when relevant.

{_structure_rules()}

OUTPUT ({_json_only(cfg)}):
{STRUCTURE_SCHEMA}
""".strip()


def build_analyze_prompt(structure: Structure, cfg: PromptBuildConfig = PromptBuildConfig()) -> str:
    return f"""
{TUTOR_PERSONA}

The student manually edited this molecule. Identify what it is now: give it the correct
name and description, keep the atom ids, tidy the coordinates and recompute resonance
structures and symmetry.

CURRENT STRUCTURE:
{_dump(structure_to_payload(structure))}

{_structure_rules()}

OUTPUT ({_json_only(cfg)}):
{STRUCTURE_SCHEMA}
""".strip()


def build_reaction_prompt(
        structure: Structure,
        reagent: str,
        conditions: ReactionConditions,
        cfg: PromptBuildConfig = PromptBuildConfig(),
) -> str:
    catalyst = conditions.catalyst or "none"
    return f"""
{TUTOR_PERSONA}

Simulate the reaction of the molecule below with the reagent "{reagent}".
CONDITIONS: temperature {conditions.temp} °C, pressure {conditions.pressure} atm,
catalyst {catalyst}, solvent {conditions.solvent}.
Return the MAJOR organic product. In "description" explain briefly what happened and why
these conditions favour it.

STARTING MATERIAL:
{_dump(structure_to_payload(structure))}

{_structure_rules()}

OUTPUT ({_json_only(cfg)}):
{STRUCTURE_SCHEMA}
""".strip()


def build_quiz_prompt(topic: str, cfg: PromptBuildConfig = PromptBuildConfig()) -> str:
    return f"""
{TUTOR_PERSONA}

Create a quiz of exactly {cfg.question_count} questions on "{topic}".
Mix the types: multiple choice ("mcq"), fill in the blank ("fitb") and short answer ("short_answer").
- "options" ONLY for mcq, and "correctAnswer" must be copied verbatim from the options.
- For fitb the answer is a single word or a short phrase.
- Every question has a short explanation.

OUTPUT ({_json_only(cfg)}):
{QUIZ_SCHEMA}
""".strip()


def build_reaction_steps_prompt(description: str, cfg: PromptBuildConfig = PromptBuildConfig()) -> str:
    return f"""
{TUTOR_PERSONA}

Explain the mechanism of: "{description}".
Break it down into numbered steps (electron flow, intermediates, stereochemistry).
Add textbook references when possible.

OUTPUT ({_json_only(cfg)}):
{REACTION_STEPS_SCHEMA}
""".strip()


def build_study_guide_prompt(topic: str, cfg: PromptBuildConfig = PromptBuildConfig()) -> str:
    return f"""
{TUTOR_PERSONA}

Write a study guide on "{topic}": a short summary, the key points, the most common
student mistakes and 2-4 video or web resources with real URLs.

OUTPUT ({_json_only(cfg)}):
{STUDY_GUIDE_SCHEMA}
""".strip()


def build_chat_message(message: str, structure: Optional[Structure] = None) -> str:
    """Messaggio verso il modello, con il contesto della molecola visualizzata (se c'è)."""
    if structure is None:
        return message
    return (
        f'[Context: User is currently viewing a molecule named "{structure.name}". '
        f'Description: "{structure.description}". '
        f"Atoms: {len(structure.atoms)}. Bonds: {len(structure.bonds)}.] \n\n"
        f" User Question: {message}"
    )


def _dump(payload: Dict[str, Any]) -> str:
    return json.dumps(payload, ensure_ascii=False)
