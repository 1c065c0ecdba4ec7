"""Observable sign-in state provided by the identity service"""

from dataclasses import dataclass
from typing import Callable, Optional


@dataclass(frozen=True)
class AuthSnapshot:
    """Point-in-time view of the shopper's authentication"""
    is_loaded: bool = False
    is_signed_in: bool = False
    user_id: Optional[str] = None
    session_token: Optional[str] = None


AuthListener = Callable[[AuthSnapshot], None]


class AuthState:
    """
    Holds the identity collaborator's state and notifies listeners.

    ``is_loaded`` stays False until the identity service has reported in, so
    consumers can tell "not yet known" apart from "signed out".
    """

    def __init__(self):
        self._snapshot = AuthSnapshot()
        self._listeners: list[AuthListener] = []

    def snapshot(self) -> AuthSnapshot:
        return self._snapshot

    @property
    def session_token(self) -> Optional[str]:
        return self._snapshot.session_token

    def mark_loaded(self) -> None:
        """Identity state resolved with no signed-in user"""
        self._update(AuthSnapshot(is_loaded=True))

    def sign_in(self, user_id: str, session_token: str) -> None:
        self._update(AuthSnapshot(
            is_loaded=True,
            is_signed_in=True,
            user_id=user_id,
            session_token=session_token,
        ))

    def sign_out(self) -> None:
        self._update(AuthSnapshot(is_loaded=True))

    def subscribe(self, listener: AuthListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _update(self, snapshot: AuthSnapshot) -> None:
        self._snapshot = snapshot
        for listener in list(self._listeners):
            listener(snapshot)
