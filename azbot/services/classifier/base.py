from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional


class ClassificationError(Exception):
    """Classifier unreachable, non-success response or unreadable payload."""


@dataclass(frozen=True)
class IntentScore:
    label: str
    score: float = 0.0


@dataclass(frozen=True)
class Entity:
    text: str
    type: str = ""
    score: float = 0.0
    start_index: Optional[int] = None
    end_index: Optional[int] = None


@dataclass(frozen=True)
class Intent:
    """Ranked classification of one utterance. Only the top label is acted upon."""

    query: str = ""
    intents: List[IntentScore] = field(default_factory=list)
    entities: List[Entity] = field(default_factory=list)

    @property
    def label(self) -> Optional[str]:
        return self.intents[0].label if self.intents else None

    @property
    def first_entity(self) -> Optional[Entity]:
        return self.entities[0] if self.entities else None

    @classmethod
    def unrecognized(cls, query: str = "") -> "Intent":
        return cls(query=query)


class IntentClassifier(ABC):
    """Abstract base class for intent classifiers."""

    @abstractmethod
    async def classify(self, text: str) -> Intent:
        """Classify text. Raises ClassificationError on failure."""
        pass
