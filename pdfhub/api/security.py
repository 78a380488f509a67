from collections.abc import Callable
from functools import wraps
from typing import Any, TypeVar, cast

from flask import current_app, g, request

from pdfhub.container import Services
from pdfhub.database.models import Account
from pdfhub.exceptions import AuthenticationError, AuthorizationError

F = TypeVar("F", bound=Callable[..., Any])


def get_services() -> Services:
    return cast(Services, current_app.extensions["pdfhub"])


def current_account() -> Account:
    return cast(Account, g.account)


def auth_required(view: F) -> F:
    """Resolve the bearer token to an active account and expose it as g.account."""

    @wraps(view)
    def decorated(*args: Any, **kwargs: Any) -> Any:
        scheme, _, token = request.headers.get("Authorization", "").partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            raise AuthenticationError()
        g.account = get_services().identity.verify_session(token.strip())
        return view(*args, **kwargs)

    return cast(F, decorated)


def role_required(*roles: str) -> Callable[[F], F]:
    """Allow only accounts with one of the given roles. Apply below auth_required."""

    def decorator(view: F) -> F:
        @wraps(view)
        def decorated(*args: Any, **kwargs: Any) -> Any:
            if current_account().role not in roles:
                raise AuthorizationError()
            return view(*args, **kwargs)

        return cast(F, decorated)

    return decorator
