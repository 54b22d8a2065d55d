"""
Identity collaborator: who is signed in.

Authentication itself happens elsewhere; the server only needs the signed-in
user's name and email and a way to end the session.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class UserIdentity(BaseModel):
    """Signed-in user."""

    name: str
    email: str = ""


class IdentityProvider(ABC):
    """Abstract identity provider."""

    @abstractmethod
    def current_user(self) -> Optional[UserIdentity]:
        """Get the signed-in user, or None when signed out."""

    @abstractmethod
    def sign_out(self) -> None:
        """End the current session."""


class StaticIdentityProvider(IdentityProvider):
    """Identity fixed at startup, e.g. from command-line flags."""

    def __init__(self, user: Optional[UserIdentity] = None):
        self._user = user

    def current_user(self) -> Optional[UserIdentity]:
        return self._user

    def sign_out(self) -> None:
        if self._user is not None:
            logger.info("Signing out %s", self._user.email or self._user.name)
        self._user = None
