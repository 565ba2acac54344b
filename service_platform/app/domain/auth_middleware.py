"""
API key authentication for the platform service.
"""

import secrets
from typing import Optional

from fastapi import Request

from shared.errors import AuthenticationError
from shared.logging import get_logger


API_KEY_HEADER = "X-API-Key"
API_KEY_QUERY_PARAM = "apiKey"


class ApiKeyAuthenticator:
    """Static API key check.

    With no key configured every request is let through. Otherwise the key
    must arrive in the ``X-API-Key`` header or the ``apiKey`` query parameter.
    """

    def __init__(self, required_key: Optional[str] = None):
        self.required_key = required_key or None
        self.logger = get_logger("platform.auth_middleware")

    @property
    def enabled(self) -> bool:
        return self.required_key is not None

    def extract_key(self, request: Request) -> Optional[str]:
        return request.headers.get(API_KEY_HEADER) or request.query_params.get(API_KEY_QUERY_PARAM)

    def is_valid(self, provided_key: Optional[str]) -> bool:
        if not self.enabled:
            return True
        if not provided_key:
            return False
        return secrets.compare_digest(provided_key.encode("utf-8"), self.required_key.encode("utf-8"))

    async def authenticate_request(self, request: Request) -> None:
        """FastAPI dependency; raises AuthenticationError on a bad or missing key."""
        if not self.enabled:
            return

        if not self.is_valid(self.extract_key(request)):
            self.logger.warning(
                "API key authentication failed",
                path=request.url.path,
                client=request.client.host if request.client else "unknown",
            )
            raise AuthenticationError()
