from datetime import timedelta

from flask_jwt_extended import create_access_token, decode_token
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError

from pdfhub.exceptions import InvalidTokenError


class SessionTokens:
    """Issues and verifies signed, time-bounded session tokens.

    The account id is the only claim. Needs an active Flask app context
    configured with JWTManager.
    """

    def __init__(self, ttl: timedelta) -> None:
        self._ttl = ttl

    def issue(self, account_id: str) -> str:
        return create_access_token(identity=account_id, expires_delta=self._ttl)

    def verify(self, token: str) -> str:
        """Return the account id carried by a valid token.

        Raises:
            InvalidTokenError: bad signature, expired, or malformed token.
        """
        try:
            claims = decode_token(token)
        except (PyJWTError, JWTExtendedException) as exc:
            raise InvalidTokenError() from exc
        subject = claims.get("sub")
        if not isinstance(subject, str) or not subject:
            raise InvalidTokenError()
        return subject
