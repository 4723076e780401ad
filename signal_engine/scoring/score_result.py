"""
ScoreResult - immutable per-category score with its rationale.

Scorers build a result by chaining `add`/`note`; every call returns a new
instance, so partially built results can be shared and compared freely.
"""

from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Any, Dict, Tuple

INSUFFICIENT_DATA = "Insufficient data"


@dataclass(frozen=True)
class ScoreResult:
    """Bounded score for one analytical category."""
    title: str
    max_score: int
    score: int = 0
    details: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if self.score < 0:
            object.__setattr__(self, 'score', 0)
        if not isinstance(self.details, tuple):
            object.__setattr__(self, 'details', tuple(self.details))

    @classmethod
    def start(cls, title: str, max_score: int) -> "ScoreResult":
        return cls(title=title, max_score=max_score)

    @classmethod
    def insufficient(cls, title: str, max_score: int, reason: str) -> "ScoreResult":
        """Zero score carrying a recognizable insufficient-data detail."""
        return cls(title=title, max_score=max_score,
                   details=(f"{INSUFFICIENT_DATA}: {reason}",))

    def add(self, points: int, detail: str) -> "ScoreResult":
        """Add points together with the detail line explaining them."""
        return replace(self, score=self.score + points, details=self.details + (detail,))

    def note(self, detail: str) -> "ScoreResult":
        """Append a detail line without changing the score."""
        return replace(self, details=self.details + (detail,))

    def with_score(self, score: int) -> "ScoreResult":
        return replace(self, score=score)

    def capped(self) -> "ScoreResult":
        """Clamp the score into [0, max_score]."""
        return replace(self, score=max(0, min(self.score, self.max_score)))

    @property
    def is_insufficient(self) -> bool:
        return any(d.startswith(INSUFFICIENT_DATA) for d in self.details)

    @property
    def ratio(self) -> Decimal:
        if self.max_score <= 0:
            return Decimal(0)
        return Decimal(self.score) / Decimal(self.max_score)

    def summary(self) -> str:
        return f"{self.title} {self.score}/{self.max_score}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "score": self.score,
            "max_score": self.max_score,
            "details": list(self.details),
        }
