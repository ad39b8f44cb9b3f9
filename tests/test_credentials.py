import pytest

from azbot.services.credentials import CredentialParseError, CredentialTuple, parse_credentials


class TestParseCredentials:
    def test_three_segments(self):
        assert parse_credentials("abc,def,ghi") == CredentialTuple("abc", "def", "ghi")

    def test_positional_mapping(self):
        creds = parse_credentials("client,secret,tenant")
        assert creds.client_id == "client"
        assert creds.client_secret == "secret"
        assert creds.tenant_id == "tenant"

    def test_empty_segments_are_dropped(self):
        assert parse_credentials(",abc,,def,ghi,") == CredentialTuple("abc", "def", "ghi")

    def test_whitespace_is_kept(self):
        assert parse_credentials("abc, def, ghi") == CredentialTuple("abc", " def", " ghi")

    @pytest.mark.parametrize("text", ["onlyonevalue", "a,b", "a,b,c,d", "", ",,,"])
    def test_wrong_segment_count(self, text):
        with pytest.raises(CredentialParseError):
            parse_credentials(text)

    def test_error_reports_segment_count(self):
        with pytest.raises(CredentialParseError) as exc_info:
            parse_credentials("a,b,c,d")
        assert exc_info.value.segment_count == 4

    def test_parse_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_credentials("a")


class TestCredentialTuple:
    def test_immutable(self):
        creds = CredentialTuple("a", "b", "c")
        with pytest.raises(AttributeError):
            creds.client_id = "x"

    def test_list_round_trip(self):
        creds = CredentialTuple("a", "b", "c")
        assert CredentialTuple.from_list(creds.as_list()) == creds

    @pytest.mark.parametrize("value", [None, "abc", ["a", "b"], ["a", "", "c"], ["a", 1, "c"]])
    def test_from_list_rejects_malformed(self, value):
        assert CredentialTuple.from_list(value) is None

    def test_repr_hides_secret(self):
        assert "def" not in repr(CredentialTuple("abc", "def", "ghi"))
