import asyncio

import httpx
import pytest

from azbot.services.classifier import ClassificationError, LuisClassifier, classify_or_unrecognized
from azbot.services.classifier.luis_provider import parse_luis_response

LUIS_PAYLOAD = {
    "query": "set sub 123 as default",
    "intents": [
        {"intent": "None", "score": 0.05},
        {"intent": "DefaultSubscription", "score": 0.92},
    ],
    "entities": [
        {"entity": "sub 123", "type": "SubscriptionId", "startIndex": 4, "endIndex": 10, "score": 0.88},
    ],
}


def make_classifier(handler):
    return LuisClassifier(
        app_id="app-id",
        subscription_key="key",
        endpoint="https://luis.test/application",
        transport=httpx.MockTransport(handler),
    )


class TestLuisClassifier:
    def test_parses_intents_and_entities(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["params"] = dict(request.url.params)
            return httpx.Response(200, json=LUIS_PAYLOAD)

        intent = asyncio.run(make_classifier(handler).classify("set sub 123 as default"))

        assert seen["params"] == {"id": "app-id", "subscription-key": "key", "q": "set sub 123 as default"}
        assert intent.label == "DefaultSubscription"
        assert intent.first_entity.text == "sub 123"
        assert intent.first_entity.type == "SubscriptionId"
        assert intent.first_entity.start_index == 4

    def test_non_success_raises(self):
        classifier = make_classifier(lambda request: httpx.Response(503, text="unavailable"))
        with pytest.raises(ClassificationError):
            asyncio.run(classifier.classify("hello"))

    def test_transport_error_raises(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(ClassificationError):
            asyncio.run(make_classifier(handler).classify("hello"))

    def test_timeout_raises(self):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(ClassificationError):
            asyncio.run(make_classifier(handler).classify("hello"))

    def test_invalid_json_raises(self):
        classifier = make_classifier(lambda request: httpx.Response(200, text="<html>"))
        with pytest.raises(ClassificationError):
            asyncio.run(classifier.classify("hello"))


class TestParseLuisResponse:
    def test_empty_intents_has_no_label(self):
        intent = parse_luis_response({"query": "x", "intents": [], "entities": []})
        assert intent.label is None
        assert intent.first_entity is None

    def test_missing_intent_key_raises(self):
        with pytest.raises(ClassificationError):
            parse_luis_response({"intents": [{"score": 0.5}]})

    def test_non_object_raises(self):
        with pytest.raises(ClassificationError):
            parse_luis_response(["Greet"])


class TestClassifyOrUnrecognized:
    def test_failure_becomes_unrecognized(self, classifier, classification_error):
        classifier.error = classification_error
        intent = asyncio.run(classify_or_unrecognized(classifier, "hello"))
        assert intent.label is None

    def test_success_passes_through(self, classifier):
        classifier.returns("Greet")
        intent = asyncio.run(classify_or_unrecognized(classifier, "hello"))
        assert intent.label == "Greet"
