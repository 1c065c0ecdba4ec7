# Request authentication

from .session_auth import (
    AuthContext,
    SessionAuthMiddleware,
    SessionVerifier,
    get_session_verifier,
    optional_user,
    require_user,
)

__all__ = [
    "AuthContext",
    "SessionAuthMiddleware",
    "SessionVerifier",
    "get_session_verifier",
    "optional_user",
    "require_user",
]
