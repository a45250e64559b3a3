# chemlab/ai/gemini_client.py
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence, Tuple

from chemlab.ai.response_parser import ResponseParseError
from chemlab.config import get_env
from chemlab.domain.errors import OracleUnavailable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeminiConfig:
    api_key: str
    model: str = "gemini-2.0-flash"  # cambia in .env/config se vuoi
    temperature: float = 0.7
    # le strutture molecolari in JSON sono lunghe
    max_output_tokens: int = 4096

    @staticmethod
    def from_env() -> "GeminiConfig":
        try:
            temperature = float(get_env("GEMINI_TEMPERATURE", "0.7"))
            max_tokens = int(get_env("GEMINI_MAX_TOKENS", "4096"))
        except ValueError as e:
            raise ValueError(f"GEMINI_TEMPERATURE/GEMINI_MAX_TOKENS non validi: {e}") from e
        return GeminiConfig(
            api_key=get_env("GEMINI_API_KEY"),
            model=get_env("GEMINI_MODEL", "gemini-2.0-flash"),
            temperature=temperature,
            max_output_tokens=max_tokens,
        )


class GeminiClient:
    """
    Client basato sul nuovo SDK google.genai (pacchetto: google-genai).
    Tutte le chiamate sono asincrone (client.aio): restituiscono il testo
    generato oppure sollevano OracleUnavailable.
    """

    def __init__(self, cfg: GeminiConfig):
        if not cfg.api_key:
            raise ValueError("GeminiConfig.api_key è vuoto.")
        self.cfg = cfg

        # Import SOLO nuovo SDK
        from google import genai  # type: ignore
        from google.genai import types  # type: ignore

        self._types = types
        self._client = genai.Client(
            api_key=cfg.api_key,
            http_options=types.HttpOptions(api_version="v1"),
        )

    def _config(self):
        return self._types.GenerateContentConfig(
            temperature=self.cfg.temperature,
            max_output_tokens=self.cfg.max_output_tokens,
        )

    async def generate_text(self, prompt: str) -> str:
        """
        Genera testo dal modello.
        """
        return await self._generate(prompt)

    async def generate_json(self, prompt: str) -> Dict[str, Any]:
        """
        Chiede al modello di produrre JSON e lo parse-a.
        Tenta anche estrazione robusta se il modello “incarta” il JSON.
        """
        raw = await self._generate(prompt)
        json_text = _extract_json_text(raw)
        try:
            data = json.loads(json_text)
        except json.JSONDecodeError as e:
            raise ResponseParseError(
                "JSON non valido da Gemini.\n"
                f"RAW (inizio): {raw[:800]}\n"
                f"JSON_EXTRACT (inizio): {json_text[:800]}"
            ) from e
        if not isinstance(data, dict):
            raise ResponseParseError(f"Atteso un oggetto JSON, ricevuto {type(data).__name__}.")
        return data

    async def chat(self, history: Sequence[Tuple[str, str]], message: str) -> str:
        """
        history: coppie (ruolo, testo) con ruolo "user" o "model".
        """
        types = self._types
        contents: List[Any] = [
            types.Content(role=role, parts=[types.Part(text=text)]) for role, text in history
        ]
        contents.append(types.Content(role="user", parts=[types.Part(text=message)]))
        return await self._generate(contents)

    async def _generate(self, contents: Any) -> str:
        try:
            resp = await self._client.aio.models.generate_content(
                model=self.cfg.model,
                contents=contents,
                config=self._config(),
            )
        except Exception as e:
            # errori SDK (google.genai.errors.APIError) e di trasporto
            logger.warning("Chiamata a Gemini fallita: %s", e)
            raise OracleUnavailable(f"Gemini non raggiungibile: {e}") from e

        text = (resp.text or "").strip()
        if not text:
            raise OracleUnavailable("Risposta vuota da Gemini.")
        return text


def _extract_json_text(raw: str) -> str:
    """
    Estrae JSON da:
    - raw JSON puro
    - raw con ```json ... ```
    - raw con testo extra (cerchiamo la prima { e l'ultima })
    """
    s = raw.strip()

    # Caso 1: blocco markdown ```json
    if s.startswith("```"):
        s = s.strip("`").strip()
        if s.lower().startswith("json"):
            s = s.split("\n", 1)[-1].strip()

    # Caso 2: già JSON
    if s.startswith("{") and s.endswith("}"):
        return s

    # Caso 3: estrai tra prima { e ultima }
    first = s.find("{")
    last = s.rfind("}")
    if first != -1 and last != -1 and last > first:
        return s[first : last + 1]

    # fallback: ritorna tutto e lasciamo fallire json.loads con errore chiaro
    return s
