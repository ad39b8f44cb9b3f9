from typing import List, Optional

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from azbot.database import Base
from azbot.services.classifier import ClassificationError, Entity, Intent, IntentClassifier, IntentScore
from azbot.services.credentials import CredentialTuple
from azbot.services.query_formatter import RemoteQueryFormatter
from azbot.services.remote import (
    AccessToken,
    AuthError,
    RemoteEnumerationService,
    ResourceGroup,
    Subscription,
)


class FakeClassifier(IntentClassifier):
    def __init__(self):
        self.intent = Intent.unrecognized()
        self.error: Optional[Exception] = None
        self.calls: List[str] = []

    def returns(self, label: Optional[str], *entities: str) -> "FakeClassifier":
        self.intent = Intent(
            query="",
            intents=[IntentScore(label, 0.9)] if label else [],
            entities=[Entity(text=text, type="SubscriptionId", score=0.8) for text in entities],
        )
        return self

    async def classify(self, text: str) -> Intent:
        self.calls.append(text)
        if self.error is not None:
            raise self.error
        return self.intent


class FakeRemoteService(RemoteEnumerationService):
    def __init__(self):
        super().__init__()
        self.subscriptions = [Subscription(id="sub-1", display_name="Production")]
        self.resource_groups = [ResourceGroup(name="rg-web"), ResourceGroup(name="rg-data")]
        self.authorize_error: Optional[Exception] = None
        self.list_error: Optional[Exception] = None
        self.calls: list = []

    async def authorize(self, credentials: CredentialTuple) -> AccessToken:
        self.calls.append(("authorize", credentials))
        if self.authorize_error is not None:
            raise self.authorize_error
        return AccessToken(value="token", credentials=credentials)

    async def list_subscriptions(self, token: AccessToken) -> List[Subscription]:
        self.calls.append(("list_subscriptions",))
        if self.list_error is not None:
            raise self.list_error
        return self.subscriptions

    async def list_resource_groups(self, token: AccessToken, subscription_id: str) -> List[ResourceGroup]:
        self.calls.append(("list_resource_groups", subscription_id))
        if self.list_error is not None:
            raise self.list_error
        return self.resource_groups


@pytest.fixture
def db_session():
    """In-memory SQLite session with all tables created."""
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(bind=engine, autoflush=False)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def classifier():
    return FakeClassifier()


@pytest.fixture
def remote_service():
    return FakeRemoteService()


@pytest.fixture
def formatter(remote_service):
    return RemoteQueryFormatter(remote_service)


@pytest.fixture
def credentials():
    return CredentialTuple("abc", "def", "ghi")


@pytest.fixture
def auth_error():
    return AuthError("rejected")


@pytest.fixture
def classification_error():
    return ClassificationError("down")
