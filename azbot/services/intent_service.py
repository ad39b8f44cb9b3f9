from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from azbot.services.classifier import Intent
from azbot.services.credentials import CredentialTuple
from azbot.services.state_machine import ConversationState, QuestionId


class IntentLabel(str, Enum):
    GREET = "Greet"
    THANKS = "Thanks"
    LIST_SUBSCRIPTIONS = "ListSubscriptions"
    DEFAULT_SUBSCRIPTION = "DefaultSubscription"
    LIST_RESOURCE_GROUPS = "ListResourceGroups"


class RemoteQuery(str, Enum):
    LIST_SUBSCRIPTIONS = "list_subscriptions"
    LIST_RESOURCE_GROUPS = "list_resource_groups"


GREETING_RESPONSE = "Hi there. How can I help you today?"
THANKS_RESPONSE = "My pleasure."
UNRECOGNIZED_RESPONSE = "I'm sorry. I did not understand you."
NO_DEFAULT_SUBSCRIPTION_RESPONSE = "Please set a default subscription."
CREDENTIALS_PROMPT = (
    "Sure. Please enter your AD application client id, service principal password and tenant id "
    "separated by commas."
)


@dataclass(frozen=True)
class Reply:
    text: str


@dataclass(frozen=True)
class RemoteLookup:
    query: RemoteQuery
    credentials: CredentialTuple
    subscription_id: Optional[str] = None


@dataclass(frozen=True)
class OpenQuestion:
    question: QuestionId
    prompt: str


@dataclass(frozen=True)
class SetDefaultSubscription:
    subscription_id: str
    text: str


Action = Union[Reply, RemoteLookup, OpenQuestion, SetDefaultSubscription]


def default_subscription_confirmation(subscription_id: str) -> str:
    return f"Subscription [{subscription_id}] is set as the default subscription."


def parse_label(label: Optional[str]) -> Optional[IntentLabel]:
    if not label:
        return None
    try:
        return IntentLabel(label)
    except ValueError:
        return None


def resolve_intent(intent: Intent, state: ConversationState) -> Action:
    """Map the top-ranked intent to an action. Never mutates state."""
    label = parse_label(intent.label)

    if label == IntentLabel.GREET:
        return Reply(GREETING_RESPONSE)

    if label == IntentLabel.THANKS:
        return Reply(THANKS_RESPONSE)

    if label == IntentLabel.LIST_SUBSCRIPTIONS:
        if state.credentials is not None:
            return RemoteLookup(RemoteQuery.LIST_SUBSCRIPTIONS, state.credentials)
        return OpenQuestion(QuestionId.AWAITING_CREDENTIALS, CREDENTIALS_PROMPT)

    if label == IntentLabel.DEFAULT_SUBSCRIPTION:
        entity = intent.first_entity
        subscription_id = entity.text.replace(" ", "") if entity else ""
        if not subscription_id.strip():
            return Reply(UNRECOGNIZED_RESPONSE)
        return SetDefaultSubscription(subscription_id, default_subscription_confirmation(subscription_id))

    if label == IntentLabel.LIST_RESOURCE_GROUPS:
        if not state.default_subscription or state.credentials is None:
            return Reply(NO_DEFAULT_SUBSCRIPTION_RESPONSE)
        return RemoteLookup(RemoteQuery.LIST_RESOURCE_GROUPS, state.credentials, state.default_subscription)

    return Reply(UNRECOGNIZED_RESPONSE)
