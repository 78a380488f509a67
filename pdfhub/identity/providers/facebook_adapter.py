import httpx

from pdfhub.exceptions import InvalidTokenError
from pdfhub.identity.models import VerifiedIdentity
from pdfhub.identity.providers.base import BaseIdentityProvider


class FacebookIdentityProvider(BaseIdentityProvider):
    """Resolves a Facebook access token to the profile it belongs to."""

    def __init__(self, *, graph_url: str, timeout_seconds: int) -> None:
        self._graph_url = graph_url
        self._timeout = timeout_seconds

    def verify(self, assertion: str) -> VerifiedIdentity:
        if not assertion:
            raise InvalidTokenError("Missing Facebook access token")
        try:
            response = httpx.get(
                self._graph_url,
                params={"fields": "id,name,email", "access_token": assertion},
                timeout=self._timeout,
            )
        except httpx.HTTPError as exc:
            raise InvalidTokenError(f"Facebook verification failed: {exc}") from exc
        if response.status_code != 200:
            raise InvalidTokenError("Facebook rejected the access token")

        payload = response.json()
        email = payload.get("email")
        if not email:
            raise InvalidTokenError("Facebook account did not share an email")
        return VerifiedIdentity(email=email, full_name=payload.get("name") or "")
