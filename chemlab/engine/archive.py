# chemlab/engine/archive.py
from __future__ import annotations

import copy
import logging
import time
from typing import Callable, List, Optional, Tuple

from chemlab.domain.models import ArchiveItem, Structure

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


class Archive:
    """
    Molecole salvate dall'utente, dalla più recente.
    L'archivio possiede copie profonde: la struttura "viva" non le tocca.
    """

    def __init__(self, clock: Callable[[], int] = _now_ms):
        self._clock = clock
        self._items: List[ArchiveItem] = []
        self._last_ms = -1
        self._seq = 0

    def _next_id(self) -> Tuple[str, int]:
        ms = self._clock()
        if ms > self._last_ms:
            self._last_ms = ms
            self._seq = 0
        else:
            # stesso millisecondo (o orologio tornato indietro): resta sull'ultimo ms
            self._seq += 1
        return f"{self._last_ms}-{self._seq}", self._last_ms

    def save(self, structure: Structure) -> ArchiveItem:
        item_id, ts = self._next_id()
        item = ArchiveItem(id=item_id, name=structure.name, timestamp=ts, data=copy.deepcopy(structure))
        self._items.insert(0, item)
        logger.info("Salvata in archivio: %s (%s)", item.name, item.id)
        return item

    def remove(self, item_id: str) -> None:
        # assente = già rimossa (click ripetuti): non è un errore
        before = len(self._items)
        self._items = [i for i in self._items if i.id != item_id]
        if len(self._items) != before:
            logger.info("Rimossa dall'archivio: %s", item_id)

    def get(self, item_id: str) -> Optional[ArchiveItem]:
        for item in self._items:
            if item.id == item_id:
                return item
        return None

    def list(self) -> List[ArchiveItem]:
        return list(self._items)

    def recent(self, n: int = 3) -> List[ArchiveItem]:
        return self._items[:n]

    def __len__(self) -> int:
        return len(self._items)
