"""
Session Authentication Middleware

Verifies identity-provider session tokens (RS256 JWTs) on incoming requests.
Requests without a token proceed as guests; routes decide whether a
signed-in user is required.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

import jwt
from fastapi import HTTPException, Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from ..config import settings

logger = logging.getLogger(__name__)


@dataclass
class AuthContext:
    """Identity of the caller"""
    user_id: Optional[str] = None

    @property
    def is_signed_in(self) -> bool:
        return self.user_id is not None


class SessionVerifier:
    """Decodes and validates session tokens"""

    def __init__(self, public_key: Optional[str] = None, algorithm: str = "RS256"):
        self.public_key = public_key
        self.algorithm = algorithm

    @property
    def enabled(self) -> bool:
        return bool(self.public_key)

    def verify(self, token: str) -> Optional[str]:
        """
        Validate a session token.

        Returns:
            The user id (``sub`` claim), or None if the token is not valid
        """
        if not self.public_key:
            return None

        try:
            claims = jwt.decode(
                token,
                self.public_key,
                algorithms=[self.algorithm],
                options={"require": ["sub", "exp"]},
            )
        except jwt.PyJWTError as e:
            logger.warning(f"Session token rejected: {e}")
            return None

        return claims["sub"]


def extract_token(request: Request) -> Optional[str]:
    """Bearer token from the Authorization header, else the session cookie"""
    authorization = request.headers.get("Authorization")
    if authorization and authorization.lower().startswith("bearer "):
        return authorization[7:].strip() or None
    return request.cookies.get(settings.session_cookie_name)


class SessionAuthMiddleware(BaseHTTPMiddleware):
    """
    Middleware that resolves the signed-in user for each request.

    The result is stored on ``request.state.user_id`` (None for guests and
    for invalid or expired tokens).
    """

    def __init__(self, app, verifier: SessionVerifier):
        super().__init__(app)
        self.verifier = verifier

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        token = extract_token(request)
        request.state.user_id = self.verifier.verify(token) if token else None

        if request.state.user_id:
            logger.debug(f"Session verified: user={request.state.user_id}")

        return await call_next(request)


class SessionDependency:
    """
    FastAPI dependency exposing the caller's AuthContext.

    With ``require_user`` set, guests get a 401.
    """

    def __init__(self, require_user: bool = False):
        self.require_user = require_user

    async def __call__(self, request: Request) -> AuthContext:
        user_id = getattr(request.state, "user_id", None)

        if self.require_user and not user_id:
            raise HTTPException(status_code=401, detail="Unauthorized")

        return AuthContext(user_id=user_id)


def get_session_verifier() -> SessionVerifier:
    """Create the verifier from configured key material"""
    public_key = settings.get_session_public_key()
    if public_key:
        logger.info(f"Session verification enabled ({settings.session_algorithm})")
    else:
        logger.warning("No session public key configured - every request is a guest")
    return SessionVerifier(public_key=public_key, algorithm=settings.session_algorithm)


# Dependency instances
require_user = SessionDependency(require_user=True)
optional_user = SessionDependency(require_user=False)
