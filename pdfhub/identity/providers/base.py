from abc import ABC, abstractmethod

from pdfhub.identity.models import VerifiedIdentity


class BaseIdentityProvider(ABC):
    """Contract for external identity providers used by federated login."""

    @abstractmethod
    def verify(self, assertion: str) -> VerifiedIdentity:
        """Verify a provider-issued assertion and return the identity it vouches for.

        Raises:
            InvalidTokenError: if the assertion is rejected, carries no email,
                or the provider cannot be reached.
        """
