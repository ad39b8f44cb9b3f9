from azbot.services.credentials import CredentialParseError, CredentialTuple, parse_credentials
from azbot.services.dialog_service import DialogOutcome, DialogStateMachine
from azbot.services.intent_service import resolve_intent
from azbot.services.query_formatter import RemoteQueryFormatter
from azbot.services.state_machine import (
    ConversationState,
    DialogPhase,
    InvalidTransitionError,
    QuestionId,
    can_transition,
    transition,
)
from azbot.services.state_store import ConversationStateStore, StaleStateError
