"""Firebase ID token verification."""
import logging
from typing import Any, Optional

from fastapi import Request
from google.auth import exceptions as google_auth_exceptions
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token

from pixcraft.core.errors import Unauthenticated

logger = logging.getLogger(__name__)


class FirebaseTokenVerifier:
    """Verifies Firebase Authentication ID tokens issued for one project."""

    def __init__(self, project_id: str, request: Optional[Any] = None) -> None:
        self.project_id = project_id
        # Caches Google's public signing certificates between calls.
        self._request = request or google_requests.Request()

    def verify(self, token: str) -> str:
        """Return the uid encoded in a valid ID token.

        Raises:
            Unauthenticated: Token is missing or not valid for this project.
        """
        if not token:
            raise Unauthenticated("User must be authenticated")
        try:
            claims = id_token.verify_firebase_token(token, self._request, audience=self.project_id)
        except (ValueError, google_auth_exceptions.GoogleAuthError) as exc:
            logger.warning(
                "ID token rejected: %s",
                exc,
                extra={"service": "auth", "error_type": type(exc).__name__},
            )
            raise Unauthenticated("User must be authenticated") from exc
        uid = (claims or {}).get("user_id") or (claims or {}).get("sub")
        if not uid:
            raise Unauthenticated("User must be authenticated")
        return uid


def bearer_token(request: Request) -> str:
    """Extract the bearer token from the Authorization header ('' when absent)."""
    header = request.headers.get("authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer":
        return ""
    return token.strip()
