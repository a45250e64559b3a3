# chemlab/engine/chat_tutor.py
from __future__ import annotations

import itertools
import logging
import time
from typing import List, Optional

from chemlab.ai.oracle import ContentOracle
from chemlab.ai.prompt_builder import build_chat_message
from chemlab.domain.enums import ChatRole
from chemlab.domain.errors import ChemLabError
from chemlab.domain.models import ChatMessage, Structure
from chemlab.engine.gating import RequestGate

logger = logging.getLogger(__name__)

ERROR_REPLY = "Sorry, I encountered an error."


class ChatTutor:
    def __init__(self, oracle: ContentOracle):
        self.oracle = oracle
        self.gate = RequestGate("chat")
        self.history: List[ChatMessage] = []
        self._ids = itertools.count(1)

    def _message(self, role: ChatRole, text: str) -> ChatMessage:
        return ChatMessage(id=str(next(self._ids)), role=role, text=text, timestamp=int(time.time() * 1000))

    async def send(self, message: str, structure: Optional[Structure] = None) -> Optional[ChatMessage]:
        """
        Invia un messaggio al tutor. Nello storico resta il testo originale;
        al modello arriva anche il contesto della molecola visualizzata.
        Un errore del modello diventa una risposta di scuse: la chat resta usabile.
        """
        if not (message or "").strip():
            return None

        async with self.gate.claim() as ticket:
            api_history = [(m.role.value, m.text) for m in self.history]
            self.history.append(self._message(ChatRole.USER, message))
            try:
                text = await self.oracle.chat(api_history, build_chat_message(message, structure))
            except ChemLabError as e:
                logger.warning("Chat fallita: %s", e)
                text = ERROR_REPLY
            if not ticket.is_current:
                logger.info("Risposta del tutor scartata: chat azzerata.")
                return None
            reply = self._message(ChatRole.MODEL, text)
            self.history.append(reply)
            return reply

    def clear(self) -> None:
        self.gate.invalidate()
        self.history = []
