import logging
from typing import Any, Optional

import jwt
from jwt import PyJWKClient

from ticketpoint.core.config import settings
from ticketpoint.core.errors import Forbidden, Unauthorized

logger = logging.getLogger(__name__)


class FirebaseTokenVerifier:
    """Verify Firebase Authentication ID tokens and return the caller's email.

    Signing keys are fetched from Google's JWKS endpoint; PyJWKClient keeps
    them cached between calls.
    """

    def __init__(self, project_id: str, jwks_url: str, jwks_client: Optional[Any] = None) -> None:
        self.project_id = project_id
        self.issuer = f"https://securetoken.google.com/{project_id}"
        self._jwks_client = jwks_client or PyJWKClient(jwks_url)

    def decode(self, token: str) -> dict[str, Any]:
        signing_key = self._jwks_client.get_signing_key_from_jwt(token)
        return jwt.decode(
            token,
            signing_key.key,
            algorithms=["RS256"],
            audience=self.project_id,
            issuer=self.issuer,
        )

    def verify(self, token: str) -> str:
        try:
            payload = self.decode(token)
        except jwt.PyJWTError as e:
            logger.info("Rejected ID token: %s", e)
            raise Unauthorized("Unauthorized access") from e
        email = payload.get("email")
        if not email:
            raise Unauthorized("Token has no email claim")
        return email.lower()


_verifier: FirebaseTokenVerifier | None = None


def get_token_verifier() -> FirebaseTokenVerifier:
    global _verifier
    if _verifier is None:
        _verifier = FirebaseTokenVerifier(settings.firebase_project_id, settings.firebase_jwks_url)
    return _verifier


def extract_bearer(authorization: str | None) -> str:
    """Return the token from an ``Authorization: Bearer <token>`` header value."""
    if not authorization:
        raise Unauthorized("Unauthorized access")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise Unauthorized("Unauthorized access")
    return token.strip()


def ensure_owner(owner_email: str | None, email: str, what: str = "resource") -> None:
    """Raise Forbidden unless ``email`` owns the resource."""
    if not owner_email or owner_email.lower() != email.lower():
        raise Forbidden(f"Forbidden: not your {what}")
