import re
import uuid
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from pdfhub.database.models import ROLE_USER, Account
from pdfhub.database.repositories.account_repository import AccountRepository
from pdfhub.exceptions import (
    AccountDeactivatedError,
    DuplicateEmailError,
    InvalidCredentialsError,
    InvalidResetTokenError,
    InvalidTokenError,
    NotFoundError,
    ValidationError,
)
from pdfhub.identity.models import AuthResult
from pdfhub.identity.notifier import BaseResetTokenNotifier
from pdfhub.identity.passwords import (
    MIN_PASSWORD_LENGTH,
    generate_reset_token,
    hash_password,
    hash_reset_token,
    unusable_password,
    verify_password,
    verify_password_for_unknown_account,
)
from pdfhub.identity.providers.base import BaseIdentityProvider
from pdfhub.identity.tokens import SessionTokens
from pdfhub.logging.logger import Log

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]{2,}$")


def normalize_email(email: str) -> str:
    return email.strip().lower()


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class IdentityService:
    """Registration, login, session verification, and password lifecycle."""

    def __init__(
        self,
        account_repo: AccountRepository,
        tokens: SessionTokens,
        notifier: BaseResetTokenNotifier,
        providers: dict[str, BaseIdentityProvider] | None = None,
        reset_token_ttl: timedelta = timedelta(minutes=10),
        default_storage_limit_bytes: int | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._accounts = account_repo
        self._tokens = tokens
        self._notifier = notifier
        self._providers = providers or {}
        self._reset_token_ttl = reset_token_ttl
        self._default_storage_limit = default_storage_limit_bytes
        self._clock = clock

    def register(self, full_name: str, email: str, password: str) -> AuthResult:
        """Create an account and sign it in.

        Raises:
            DuplicateEmailError: if the email already has an account.
            ValidationError: for a malformed email or a short password.
        """
        email = normalize_email(email)
        _check_email(email)
        _check_password(password)
        if self._accounts.find_by_email(email) is not None:
            raise DuplicateEmailError()
        account = self._accounts.create(
            Account(
                id=str(uuid.uuid4()),
                full_name=full_name.strip(),
                email=email,
                password_hash=hash_password(password),
                role=ROLE_USER,
                storage_limit_bytes=self._default_storage_limit,
            )
        )
        Log.info(f"Registered account {account.id}")
        return AuthResult(token=self._tokens.issue(account.id), account=account)

    def authenticate(self, email: str, password: str) -> AuthResult:
        """Verify credentials and issue a session token.

        Unknown email and wrong password raise the same InvalidCredentialsError.
        """
        account = self._accounts.find_by_email(normalize_email(email))
        if account is None:
            verify_password_for_unknown_account(password)
            raise InvalidCredentialsError()
        if not verify_password(account.password_hash, password):
            raise InvalidCredentialsError()
        if not account.is_active:
            raise AccountDeactivatedError()
        account.last_login_at = self._clock()
        self._accounts.touch_last_login(account.id, account.last_login_at)
        Log.info(f"Account {account.id} logged in")
        return AuthResult(token=self._tokens.issue(account.id), account=account)

    def verify_session(self, token: str) -> Account:
        """Resolve the account behind a session token.

        Raises:
            InvalidTokenError: bad or expired token, or unknown account.
            AccountDeactivatedError: the account has been deactivated.
        """
        account_id = self._tokens.verify(token)
        account = self._accounts.find_by_id(account_id)
        if account is None:
            raise InvalidTokenError("User not found")
        if not account.is_active:
            raise AccountDeactivatedError()
        return account

    def update_profile(self, account: Account, full_name: str) -> Account:
        full_name = full_name.strip()
        if not full_name:
            raise ValidationError("Please provide your full name")
        updated = self._accounts.update_full_name(account.id, full_name)
        if updated is None:
            raise NotFoundError("User not found")
        return updated

    def change_password(self, account: Account, current_password: str, new_password: str) -> None:
        """Replace the password after re-verifying the current one.

        The swap only applies if the stored hash is still the one verified here,
        so a password reset that lands in between is not overwritten.
        """
        if not verify_password(account.password_hash, current_password):
            raise InvalidCredentialsError("Current password is incorrect")
        _check_password(new_password)
        new_hash = hash_password(new_password)
        if not self._accounts.replace_password(account.id, account.password_hash, new_hash):
            raise InvalidCredentialsError("Current password is incorrect")
        account.password_hash = new_hash
        Log.info(f"Password changed for account {account.id}")

    def begin_password_reset(self, email: str) -> str:
        """Issue a reset token; only its hash is stored.

        Returns the raw token, which is also handed to the notifier.

        Raises:
            NotFoundError: if no account uses this email.
        """
        account = self._accounts.find_by_email(normalize_email(email))
        if account is None:
            raise NotFoundError("User not found")
        raw_token, token_hash = generate_reset_token()
        account.reset_token_hash = token_hash
        account.reset_token_expires_at = self._clock() + self._reset_token_ttl
        self._accounts.set_reset_token(account.id, token_hash, account.reset_token_expires_at)
        self._notifier.send(account, raw_token)
        return raw_token

    def complete_password_reset(self, raw_token: str, new_password: str) -> None:
        """Consume a reset token and set a new password.

        The token is matched and cleared in a single write, so of two requests
        racing with the same token only one succeeds.

        Raises:
            InvalidResetTokenError: unknown, expired, or already used token.
            ValidationError: the new password is too short; the token stays usable.
        """
        if not raw_token:
            raise InvalidResetTokenError()
        _check_password(new_password)
        account_id = self._accounts.consume_reset_token(
            hash_reset_token(raw_token), self._clock(), hash_password(new_password)
        )
        if account_id is None:
            raise InvalidResetTokenError()
        Log.info(f"Password reset completed for account {account_id}")

    def federated_login(self, provider_name: str, assertion: str) -> AuthResult:
        """Sign in with an external identity assertion, creating the account on first use."""
        provider = self._providers.get(provider_name)
        if provider is None:
            raise NotFoundError(f"Identity provider '{provider_name}' is not enabled")
        identity = provider.verify(assertion)
        email = normalize_email(identity.email)
        account = self._accounts.find_by_email(email)
        if account is None:
            try:
                account = self._accounts.create(
                    Account(
                        id=str(uuid.uuid4()),
                        full_name=identity.full_name.strip() or email,
                        email=email,
                        password_hash=hash_password(unusable_password()),
                        role=ROLE_USER,
                        storage_limit_bytes=self._default_storage_limit,
                    )
                )
                Log.info(f"Created account {account.id} from {provider_name} login")
            except DuplicateEmailError:
                # created by a concurrent request for the same identity
                account = self._accounts.find_by_email(email)
                if account is None:
                    raise
        if not account.is_active:
            raise AccountDeactivatedError()
        account.last_login_at = self._clock()
        self._accounts.touch_last_login(account.id, account.last_login_at)
        return AuthResult(token=self._tokens.issue(account.id), account=account)

    def deactivate(self, account_id: str) -> Account:
        account = self._accounts.deactivate(account_id)
        if account is None:
            raise NotFoundError("User not found")
        Log.info(f"Account {account_id} deactivated")
        return account


def _check_email(email: str) -> None:
    if not EMAIL_PATTERN.match(email):
        raise ValidationError("Please provide a valid email")


def _check_password(password: str) -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
        )
