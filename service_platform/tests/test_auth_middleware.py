"""
Unit tests for API key authentication.
"""

import pytest
from unittest.mock import MagicMock

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from service_platform.app.domain.auth_middleware import ApiKeyAuthenticator
from shared.errors import AuthenticationError


def make_request(headers=None, query=None):
    request = MagicMock()
    request.headers = headers or {}
    request.query_params = query or {}
    request.url.path = "/player/1"
    request.client.host = "127.0.0.1"
    return request


class TestApiKeyAuthenticator:
    """Test cases for ApiKeyAuthenticator."""

    @pytest.fixture
    def authenticator(self):
        return ApiKeyAuthenticator("s3cret")

    @pytest.mark.asyncio
    async def test_disabled_without_key(self):
        authenticator = ApiKeyAuthenticator(None)

        assert authenticator.enabled is False
        await authenticator.authenticate_request(make_request())

    def test_empty_key_disables_auth(self):
        assert ApiKeyAuthenticator("").enabled is False

    @pytest.mark.asyncio
    async def test_header_key_accepted(self, authenticator):
        await authenticator.authenticate_request(make_request(headers={"X-API-Key": "s3cret"}))

    @pytest.mark.asyncio
    async def test_query_key_accepted(self, authenticator):
        await authenticator.authenticate_request(make_request(query={"apiKey": "s3cret"}))

    @pytest.mark.asyncio
    async def test_missing_key_rejected(self, authenticator):
        with pytest.raises(AuthenticationError) as exc_info:
            await authenticator.authenticate_request(make_request())

        assert exc_info.value.code == "INVALID_API_KEY"
        assert exc_info.value.status_code == 401
        assert exc_info.value.message == "Invalid or missing API key"

    @pytest.mark.asyncio
    async def test_wrong_key_rejected(self, authenticator):
        with pytest.raises(AuthenticationError):
            await authenticator.authenticate_request(make_request(headers={"X-API-Key": "nope"}))

    def test_header_takes_precedence(self, authenticator):
        request = make_request(headers={"X-API-Key": "s3cret"}, query={"apiKey": "other"})

        assert authenticator.extract_key(request) == "s3cret"
