# chemlab/main.py
from __future__ import annotations

import asyncio
import logging

from chemlab.ai.gemini_client import GeminiClient, GeminiConfig
from chemlab.ai.oracle import ContentOracle
from chemlab.ai.prompt_builder import PromptBuildConfig
from chemlab.config import AppConfig
from chemlab.domain.enums import ModuleStatus, QuestionType
from chemlab.domain.errors import ChemLabError
from chemlab.domain.models import ReactionConditions
from chemlab.domain.structure import formula, fragments
from chemlab.domain.syllabus import syllabus_names
from chemlab.engine.quiz_engine import QuizEngine
from chemlab.engine.session_engine import SessionEngine

logger = logging.getLogger(__name__)

MENU = """
[1] Dashboard      [2] Cerca molecola   [3] Applica reazione  [4] Salva in archivio
[5] Archivio       [6] Quiz modulo      [7] Quiz libero       [8] Study guide
[9] Meccanismo     [c] Chat tutor       [s] Cambia syllabus   [q] Esci
""".strip()

STATUS_ICON = {ModuleStatus.COMPLETED: "✔", ModuleStatus.ACTIVE: "▶", ModuleStatus.LOCKED: "🔒"}


def _read(prompt: str) -> str:
    s = input(prompt).strip()
    if s.lower() in ("q", "quit", "exit"):
        raise KeyboardInterrupt()
    return s


def _print_dashboard(engine: SessionEngine) -> None:
    d = engine.dashboard()
    print("\n" + "=" * 80)
    print(f"Syllabus: {d.syllabus} | Moduli: {d.modules_done}/{d.module_count} ({d.progress_percent}%)")
    print(f"Media quiz: {d.average_score}% su {d.quizzes_taken} | Reazioni: {d.reactions_mastered} "
          f"| Molecole: {d.molecules_generated} | Archivio: {d.archive_count}")
    print("-" * 80)
    for i, m in enumerate(engine.curriculum.modules, 1):
        score = f" ({m.score}%)" if m.score is not None else ""
        print(f"{STATUS_ICON[m.status]} {i:>2}. [{m.id}] {m.title}{score}")
    print("=" * 80)


def _print_structure(engine: SessionEngine) -> None:
    s = engine.lab.current
    if s is None:
        print("Nessuna molecola caricata.")
        return
    print(f"\n{s.name} ({formula(s)}) - {len(s.atoms)} atomi, {len(s.bonds)} legami, "
          f"{len(fragments(s))} frammenti")
    print(s.description)
    if s.symmetry:
        print(f"Gruppo puntuale: {s.symmetry.point_group}")
    for r in s.resonance_structures:
        print(f"  Risonanza: {r.description}")


def _print_question(quiz: QuizEngine) -> None:
    session = quiz.session
    q = session.current_question
    print("\n" + "=" * 80)
    print(f"Domanda {session.current_index + 1} di {session.total} | Punteggio: {session.score}")
    print("-" * 80)
    print(q.question)
    if q.type == QuestionType.MCQ:
        for i, opt in enumerate(q.options, 1):
            print(f"{i}) {opt}")
    print("=" * 80)


async def _run_quiz(quiz: QuizEngine) -> None:
    while not quiz.session.completed:
        _print_question(quiz)
        q = quiz.session.current_question
        if q.type == QuestionType.MCQ:
            while True:
                raw = _read(f"Risposta (1-{len(q.options)}): ")
                if raw.isdigit() and 1 <= int(raw) <= len(q.options):
                    break
            res = quiz.answer_mcq(int(raw) - 1)
        else:
            res = quiz.answer_text(_read("Risposta: "))

        print("✅ Corretta!" if res.correct else "❌ Sbagliata.")
        print(f"Spiegazione: {q.explanation}\nRisposta corretta: {q.correct_answer}")
        _read("[invio] per continuare ")
        result = quiz.next()
        if result is not None:
            print(f"\n--- QUIZ COMPLETATO ---\nPunteggio: {result.score}/{result.total} ({result.percentage}%)")
            if result.unlocked:
                print("🌟 Modulo superato: il prossimo è sbloccato!")


async def _handle(cmd: str, engine: SessionEngine) -> None:
    if cmd == "1":
        _print_dashboard(engine)
    elif cmd == "2":
        await engine.lab.search(_read("Nome molecola: ") or "Caffeine")
        _print_structure(engine)
    elif cmd == "3":
        reagent = _read("Reagente: ")
        temp = _read("Temperatura °C [25]: ") or "25"
        pressure = _read("Pressione atm [1]: ") or "1"
        catalyst = _read("Catalizzatore []: ")
        solvent = _read("Solvente [Ethanol]: ") or "Ethanol"
        conditions = ReactionConditions(float(temp), float(pressure), catalyst, solvent)
        await engine.lab.apply_reaction(reagent, conditions)
        _print_structure(engine)
    elif cmd == "4":
        item = engine.lab.save_to_archive()
        print(f"Salvata: {item.name} [{item.id}]" if item else "Nessuna molecola da salvare.")
    elif cmd == "5":
        for item in engine.archive.list():
            print(f"[{item.id}] {item.name}")
        item_id = _read("Id da caricare (-id per rimuovere, invio per tornare): ")
        if item_id.startswith("-"):
            engine.archive.remove(item_id[1:])
        elif item_id and engine.lab.load_from_archive(item_id):
            _print_structure(engine)
    elif cmd == "6":
        active = engine.curriculum.active_module
        module_id = _read(f"Id modulo [{active.id if active else ''}]: ") or (active.id if active else "")
        if await engine.start_module_quiz(module_id):
            await _run_quiz(engine.quiz)
    elif cmd == "7":
        if await engine.start_quiz(_read("Argomento [Stereochemistry]: ") or None):
            await _run_quiz(engine.quiz)
    elif cmd == "8":
        guide = await engine.open_study_guide(_read("Id modulo: "))
        if guide:
            print(f"\n{guide.topic}\n{guide.summary}")
            for kp in guide.key_points:
                print(f"  • {kp}")
            for cm in guide.common_mistakes:
                print(f"  ⚠ {cm}")
            for r in guide.resources:
                print(f"  ▶ {r.title} ({r.source}) {r.url}")
    elif cmd == "9":
        data = await engine.reaction_tutor.explain(
            _read("Reazione: ") or "SN2 reaction of methyl bromide with hydroxide")
        if data:
            print(f"\n{data.name}")
            for st in data.steps:
                print(f"{st.step}. [{st.key_concept}] {st.description}")
    elif cmd == "c":
        reply = await engine.ask_tutor(_read("Tu: "))
        if reply:
            print(f"Tutor: {reply.text}")
    elif cmd == "s":
        engine.select_syllabus(_read(f"Syllabus {syllabus_names()}: ").upper())
        _print_dashboard(engine)


async def run(engine: SessionEngine) -> None:
    print("CHEMLAB TUTOR (CLI) - Q per uscire.")
    _print_dashboard(engine)
    while True:
        print(MENU)
        try:
            cmd = _read("> ").lower()
            await _handle(cmd, engine)
        except KeyboardInterrupt:
            print("\nUscita.")
            return
        except (ChemLabError, ValueError, KeyError) as e:
            # nessun errore è fatale: avviso di una riga e si riprova
            print(f"⚠ {e}")


def main() -> int:
    app_cfg = AppConfig.from_env()
    logging.basicConfig(
        level=getattr(logging, app_cfg.log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )

    gemini_cfg = GeminiConfig.from_env()
    if not gemini_cfg.api_key:
        print("ERRORE: GEMINI_API_KEY non è impostata.")
        return 2

    oracle = ContentOracle(GeminiClient(gemini_cfg), PromptBuildConfig(question_count=app_cfg.quiz_length))
    engine = SessionEngine(oracle, syllabus=app_cfg.syllabus)
    logger.info("Modello: %s | Syllabus: %s", gemini_cfg.model, app_cfg.syllabus)

    asyncio.run(run(engine))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
