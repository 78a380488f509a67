"""Example identity provider adapter.

Use this module as a reference when implementing new provider adapters.
Implement BaseIdentityProvider and register the provider in IdentityProviderFactory.
"""

from pdfhub.exceptions import InvalidTokenError
from pdfhub.identity.models import VerifiedIdentity
from pdfhub.identity.providers.base import BaseIdentityProvider


class ExampleIdentityProvider(BaseIdentityProvider):
    """Accepts assertions of the form "email" or "email|Full Name".

    No network calls. Useful for local development and tests.
    """

    def verify(self, assertion: str) -> VerifiedIdentity:
        email, _, name = (assertion or "").partition("|")
        if "@" not in email:
            raise InvalidTokenError("Example assertion must contain an email")
        return VerifiedIdentity(email=email.strip(), full_name=name.strip())
