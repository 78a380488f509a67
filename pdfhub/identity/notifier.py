from abc import ABC, abstractmethod

from pdfhub.database.models import Account
from pdfhub.logging.logger import Log


class BaseResetTokenNotifier(ABC):
    """Delivers a raw password-reset token to the account holder out of band."""

    @abstractmethod
    def send(self, account: Account, raw_token: str) -> None:
        """Deliver the token. Must never log or persist it."""


class LoggingResetTokenNotifier(BaseResetTokenNotifier):
    """Records that a token was issued without revealing it.

    Stand-in until an email delivery service is configured.
    """

    def send(self, account: Account, raw_token: str) -> None:
        _ = raw_token
        Log.info(f"Password reset token issued for account {account.id}")
