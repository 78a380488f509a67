import httpx

from pdfhub.exceptions import InvalidTokenError
from pdfhub.identity.models import VerifiedIdentity
from pdfhub.identity.providers.base import BaseIdentityProvider


class GoogleIdentityProvider(BaseIdentityProvider):
    """Verifies Google ID tokens through the token-info endpoint."""

    def __init__(self, *, client_id: str, tokeninfo_url: str, timeout_seconds: int) -> None:
        self._client_id = client_id
        self._tokeninfo_url = tokeninfo_url
        self._timeout = timeout_seconds

    def verify(self, assertion: str) -> VerifiedIdentity:
        if not assertion:
            raise InvalidTokenError("Missing Google ID token")
        try:
            response = httpx.get(
                self._tokeninfo_url,
                params={"id_token": assertion},
                timeout=self._timeout,
            )
        except httpx.HTTPError as exc:
            raise InvalidTokenError(f"Google verification failed: {exc}") from exc
        if response.status_code != 200:
            raise InvalidTokenError("Google rejected the ID token")

        payload = response.json()
        if self._client_id and payload.get("aud") != self._client_id:
            raise InvalidTokenError("Google ID token was issued for another client")
        email = payload.get("email")
        if not email or str(payload.get("email_verified", "false")).lower() != "true":
            raise InvalidTokenError("Google account has no verified email")
        return VerifiedIdentity(email=email, full_name=payload.get("name") or "")
