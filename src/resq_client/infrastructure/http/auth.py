"""Explicit auth context passed to the incident API client."""

from __future__ import annotations

from dataclasses import dataclass

import structlog
from pydantic import SecretStr

logger = structlog.get_logger(__name__)


@dataclass
class AuthContext:
    """Holds the session token for one client instance."""

    token: SecretStr | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None and bool(self.token.get_secret_value())

    def authorization_header(self) -> dict[str, str]:
        if not self.is_authenticated:
            return {}
        return {"Authorization": f"Token {self.token.get_secret_value()}"}

    def clear(self) -> None:
        """Forget the token after the server rejected it."""
        if self.token is not None:
            logger.warning("Auth token rejected by server, clearing it")
        self.token = None
