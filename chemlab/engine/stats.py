# chemlab/engine/stats.py
from __future__ import annotations

import dataclasses

from chemlab.domain.models import UserStats
from chemlab.domain.rules import average_score


class StatsTracker:
    """Contatori di processo: crescono soltanto, nessuna persistenza."""

    def __init__(self):
        self.stats = UserStats()

    def record_quiz(self, percentage: int) -> UserStats:
        s = self.stats
        self.stats = dataclasses.replace(
            s, quizzes_taken=s.quizzes_taken + 1, total_score=s.total_score + percentage
        )
        return self.stats

    def record_reaction(self) -> UserStats:
        self.stats = dataclasses.replace(self.stats, reactions_mastered=self.stats.reactions_mastered + 1)
        return self.stats

    def record_molecule(self) -> UserStats:
        self.stats = dataclasses.replace(self.stats, molecules_generated=self.stats.molecules_generated + 1)
        return self.stats

    @property
    def average_score(self) -> int:
        return average_score(self.stats.total_score, self.stats.quizzes_taken)
