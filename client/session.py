"""Explicit login session handed to every component that talks to the store."""
from dataclasses import dataclass
from typing import Dict, Optional

from loguru import logger

from client.models import User


@dataclass
class Session:
    token: Optional[str] = None
    user: Optional[User] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def start(self, token: str, user: Optional[User] = None) -> None:
        self.token = token
        self.user = user

    def clear(self) -> bool:
        """Drop the credentials. Returns whether a session was active."""
        was_active = self.is_authenticated
        self.token = None
        self.user = None
        if was_active:
            logger.info("Session cleared")
        return was_active

    def auth_headers(self) -> Dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}
