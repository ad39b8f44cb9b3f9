from dataclasses import dataclass, replace

from azbot.logging_config import get_logger
from azbot.services.classifier import IntentClassifier, classify_or_unrecognized
from azbot.services.credentials import CredentialParseError, parse_credentials
from azbot.services.intent_service import (
    CREDENTIALS_PROMPT,
    UNRECOGNIZED_RESPONSE,
    OpenQuestion,
    RemoteLookup,
    RemoteQuery,
    Reply,
    SetDefaultSubscription,
    resolve_intent,
)
from azbot.services.query_formatter import RemoteQueryFormatter
from azbot.services.result import AUTH_ERROR, Result
from azbot.services.state_machine import (
    ConversationState,
    QuestionId,
    answer_credentials,
    open_question,
    set_default_subscription,
)

logger = get_logger("dialog_service")

MSG_AUTH_FAILED = "I could not sign in with those credentials. Please check them and try again."
MSG_REMOTE_FAILED = "Sorry, I could not complete the lookup right now. Please try again later."


@dataclass(frozen=True)
class DialogOutcome:
    state: ConversationState
    reply: str
    changed: bool = False


def lookup_reply(result: Result[str]) -> str:
    if result.ok:
        return result.value
    if result.error_code == AUTH_ERROR:
        return MSG_AUTH_FAILED
    return MSG_REMOTE_FAILED


class DialogStateMachine:
    """Routes each message to the open question's resume handler or to intent resolution."""

    def __init__(self, classifier: IntentClassifier, formatter: RemoteQueryFormatter):
        self.classifier = classifier
        self.formatter = formatter

    async def handle(self, state: ConversationState, text: str) -> DialogOutcome:
        if state.pending_question is not None:
            return await self._resume(state, text)
        return await self._resolve(state, text)

    async def _resume(self, state: ConversationState, text: str) -> DialogOutcome:
        if state.pending_question == QuestionId.AWAITING_CREDENTIALS:
            return await self._resume_credentials(state, text)

        # Unknown stored question: drop it and answer as unrecognized.
        logger.warning(f"No resume handler for question {state.pending_question}")
        return DialogOutcome(replace(state, pending_question=None), UNRECOGNIZED_RESPONSE, changed=True)

    async def _resume_credentials(self, state: ConversationState, text: str) -> DialogOutcome:
        try:
            credentials = parse_credentials(text)
        except CredentialParseError as e:
            logger.info(f"Credentials answer rejected: {e}")
            return DialogOutcome(state, CREDENTIALS_PROMPT, changed=False)

        result = await self.formatter.list_subscriptions(credentials)
        # Credentials are cached and the question closed even when the lookup fails.
        new_state = answer_credentials(state, credentials)
        return DialogOutcome(new_state, lookup_reply(result), changed=True)

    async def _resolve(self, state: ConversationState, text: str) -> DialogOutcome:
        intent = await classify_or_unrecognized(self.classifier, text)
        action = resolve_intent(intent, state)
        logger.info(f"Intent {intent.label} -> {type(action).__name__}")

        if isinstance(action, Reply):
            return DialogOutcome(state, action.text, changed=False)

        if isinstance(action, OpenQuestion):
            return DialogOutcome(open_question(state, action.question), action.prompt, changed=True)

        if isinstance(action, SetDefaultSubscription):
            new_state = set_default_subscription(state, action.subscription_id)
            return DialogOutcome(new_state, action.text, changed=True)

        if isinstance(action, RemoteLookup):
            return DialogOutcome(state, await self._run_lookup(action), changed=False)

        raise TypeError(f"Unhandled action: {action!r}")

    async def _run_lookup(self, action: RemoteLookup) -> str:
        if action.query == RemoteQuery.LIST_SUBSCRIPTIONS:
            result = await self.formatter.list_subscriptions(action.credentials)
        else:
            result = await self.formatter.list_resource_groups(action.credentials, action.subscription_id)
        return lookup_reply(result)
