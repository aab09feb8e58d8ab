from dataclasses import dataclass
from typing import Optional, Protocol


@dataclass(frozen=True)
class SessionUser:
    id: str
    email: str


class SessionProvider(Protocol):
    def current_user(self) -> Optional[SessionUser]:
        ...

    async def sign_out(self) -> None:
        ...
