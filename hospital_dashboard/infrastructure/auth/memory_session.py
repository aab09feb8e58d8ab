import logging
from typing import Optional

from ...application.ports.session_provider import SessionProvider, SessionUser

logger = logging.getLogger(__name__)


class InMemorySessionProvider(SessionProvider):
    """Holds a session established elsewhere; signing out just forgets it"""

    def __init__(self, user: Optional[SessionUser] = None) -> None:
        self._user = user

    def current_user(self) -> Optional[SessionUser]:
        return self._user

    async def sign_out(self) -> None:
        if self._user is not None:
            logger.info(f"Session ended for user {self._user.id}")
        self._user = None
