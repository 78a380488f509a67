from dataclasses import dataclass

from pdfhub.database.models import Account


@dataclass(frozen=True)
class VerifiedIdentity:
    """What an external identity provider vouches for."""

    email: str
    full_name: str


@dataclass(frozen=True)
class AuthResult:
    token: str
    account: Account

    def to_response(self) -> dict[str, object]:
        return {
            "success": True,
            "token": self.token,
            "user": {
                "id": self.account.id,
                "fullName": self.account.full_name,
                "email": self.account.email,
            },
        }
