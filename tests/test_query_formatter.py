import asyncio

from azbot.services.query_formatter import render_resource_groups, render_subscriptions
from azbot.services.remote import RemoteError, ResourceGroup, Subscription


class TestRendering:
    def test_subscriptions(self):
        text = render_subscriptions([Subscription("sub-1", "Prod"), Subscription("sub-2", "Dev")])
        assert text.splitlines() == [
            "Your subscriptions:",
            "SubscriptionId: sub-1, DisplayName: Prod",
            "SubscriptionId: sub-2, DisplayName: Dev",
        ]

    def test_empty_subscriptions_is_header_only(self):
        assert render_subscriptions([]) == "Your subscriptions:"

    def test_resource_groups(self):
        text = render_resource_groups([ResourceGroup("rg-web")])
        assert text.splitlines() == ["Your resource groups:", "Name: rg-web"]

    def test_empty_resource_groups_is_header_only(self):
        assert render_resource_groups([]) == "Your resource groups:"


class TestRemoteQueryFormatter:
    def test_list_subscriptions(self, formatter, remote_service, credentials):
        result = asyncio.run(formatter.list_subscriptions(credentials))
        assert result.ok is True
        assert result.value.startswith("Your subscriptions:")
        assert "SubscriptionId: sub-1, DisplayName: Production" in result.value
        assert remote_service.calls[0] == ("authorize", credentials)

    def test_list_resource_groups(self, formatter, remote_service, credentials):
        result = asyncio.run(formatter.list_resource_groups(credentials, "sub-1"))
        assert result.ok is True
        assert result.value == "Your resource groups:\nName: rg-web\nName: rg-data"
        assert ("list_resource_groups", "sub-1") in remote_service.calls

    def test_auth_error(self, formatter, remote_service, credentials, auth_error):
        remote_service.authorize_error = auth_error
        result = asyncio.run(formatter.list_subscriptions(credentials))
        assert result.ok is False
        assert result.error_code == "auth_error"
        assert ("list_subscriptions",) not in remote_service.calls

    def test_remote_error(self, formatter, remote_service, credentials):
        remote_service.list_error = RemoteError("boom")
        result = asyncio.run(formatter.list_resource_groups(credentials, "sub-1"))
        assert result.ok is False
        assert result.error_code == "remote_error"

    def test_no_retry_on_failure(self, formatter, remote_service, credentials):
        remote_service.list_error = RemoteError("boom")
        asyncio.run(formatter.list_subscriptions(credentials))
        assert remote_service.calls.count(("list_subscriptions",)) == 1
