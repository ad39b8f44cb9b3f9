from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Optional

from azbot.services.credentials import CredentialTuple


class DialogPhase(str, Enum):
    IDLE = "idle"
    AWAITING_ANSWER = "awaiting_answer"


class QuestionId(str, Enum):
    AWAITING_CREDENTIALS = "awaiting_credentials"


VALID_TRANSITIONS = {
    DialogPhase.IDLE: [DialogPhase.AWAITING_ANSWER],
    DialogPhase.AWAITING_ANSWER: [DialogPhase.IDLE, DialogPhase.AWAITING_ANSWER],
}


class InvalidTransitionError(Exception):
    def __init__(self, from_phase: DialogPhase, to_phase: DialogPhase):
        self.from_phase = from_phase
        self.to_phase = to_phase
        super().__init__(f"Invalid transition: {from_phase.value} -> {to_phase.value}")


@dataclass(frozen=True)
class ConversationState:
    """Dialog variables kept per (channel, conversation, user)."""

    pending_question: Optional[QuestionId] = None
    credentials: Optional[CredentialTuple] = None
    default_subscription: Optional[str] = None

    @property
    def phase(self) -> DialogPhase:
        if self.pending_question is None:
            return DialogPhase.IDLE
        return DialogPhase.AWAITING_ANSWER

    def to_dict(self) -> dict[str, Any]:
        return {
            "pending_question": self.pending_question.value if self.pending_question else None,
            "credentials": self.credentials.as_list() if self.credentials else None,
            "default_subscription": self.default_subscription,
        }

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "ConversationState":
        if not isinstance(data, dict):
            return cls()

        pending_question = None
        raw_question = data.get("pending_question")
        if raw_question:
            try:
                pending_question = QuestionId(raw_question)
            except ValueError:
                pending_question = None

        default_subscription = data.get("default_subscription")
        if not isinstance(default_subscription, str) or not default_subscription.strip():
            default_subscription = None

        return cls(
            pending_question=pending_question,
            credentials=CredentialTuple.from_list(data.get("credentials")),
            default_subscription=default_subscription,
        )


def can_transition(from_phase: DialogPhase, to_phase: DialogPhase) -> bool:
    """Check if transition is valid."""
    allowed = VALID_TRANSITIONS.get(from_phase, [])
    return to_phase in allowed


def transition(from_phase: DialogPhase, to_phase: DialogPhase) -> DialogPhase:
    """Perform phase transition. Raises InvalidTransitionError if not allowed."""
    if not can_transition(from_phase, to_phase):
        raise InvalidTransitionError(from_phase, to_phase)
    return to_phase


def open_question(state: ConversationState, question: QuestionId) -> ConversationState:
    """Idle -> AwaitingAnswer(question)."""
    transition(state.phase, DialogPhase.AWAITING_ANSWER)
    return replace(state, pending_question=question)


def answer_credentials(state: ConversationState, credentials: CredentialTuple) -> ConversationState:
    """AwaitingAnswer(credentials) -> Idle, caching the parsed credentials."""
    if state.pending_question != QuestionId.AWAITING_CREDENTIALS:
        raise InvalidTransitionError(state.phase, DialogPhase.IDLE)
    transition(state.phase, DialogPhase.IDLE)
    return replace(state, pending_question=None, credentials=credentials)


def set_default_subscription(state: ConversationState, subscription_id: str) -> ConversationState:
    return replace(state, default_subscription=subscription_id)
