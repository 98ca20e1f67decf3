"""Unit tests for authorization header selection."""

from unittest.mock import MagicMock

import pytest

from .auth import Authenticator
from .errors import ClickUpApiError, ErrorKind


def describe_Authenticator():
    def it_uses_bearer_scheme_for_oauth_token():
        auth = Authenticator(oauth_access_token="oauth_test_token")
        assert auth.authorization == "Bearer oauth_test_token"

    def it_sends_personal_token_without_scheme():
        auth = Authenticator(personal_access_token="pk_test_pat_key")
        assert auth.authorization == "pk_test_pat_key"

    def it_prefers_oauth_when_both_are_configured():
        auth = Authenticator(personal_access_token="pk_test_pat_key", oauth_access_token="oauth_test_token")
        assert auth.authorization == "Bearer oauth_test_token"

    def it_falls_back_to_personal_token_when_oauth_is_empty():
        auth = Authenticator(personal_access_token="pk_test_pat_key", oauth_access_token="")
        assert auth.authorization == "pk_test_pat_key"

    def it_raises_configuration_error_without_credentials():
        with pytest.raises(ClickUpApiError) as excinfo:
            Authenticator()
        assert excinfo.value.kind is ErrorKind.CONFIGURATION

    def it_treats_empty_strings_as_missing():
        with pytest.raises(ClickUpApiError) as excinfo:
            Authenticator(personal_access_token="", oauth_access_token="")
        assert excinfo.value.kind is ErrorKind.CONFIGURATION

    def it_reads_tokens_from_settings():
        settings = MagicMock(personal_access_token="pk_1", oauth_access_token=None)
        assert Authenticator.from_settings(settings).authorization == "pk_1"

    def it_keeps_tokens_out_of_repr():
        auth = Authenticator(personal_access_token="pk_secret")
        assert "pk_secret" not in repr(auth)
