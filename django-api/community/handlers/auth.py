"""Acting-user resolution from the ``Authorization: Bearer <token>`` header.

Tokens are the user id signed with Django's signing framework. Whether the
id still names a user is decided by the services, not here.
"""

from dataclasses import dataclass
from uuid import UUID

from django.core import signing
from rest_framework import exceptions
from rest_framework.authentication import BaseAuthentication, get_authorization_header
from rest_framework.request import Request

from community.conf import get_setting

KEYWORD = "Bearer"


@dataclass(frozen=True)
class ActingUser:
    """The authenticated principal attached to ``request.user``."""

    id: UUID
    is_authenticated: bool = True


def issue_token(user_id: UUID) -> str:
    return signing.dumps(str(user_id), salt=get_setting("TOKEN_SALT"))


def read_token(token: str) -> UUID:
    """Return the user id carried by ``token``.

    Raises:
        signing.BadSignature: If the token is forged, malformed or expired.
    """
    value = signing.loads(token, salt=get_setting("TOKEN_SALT"), max_age=get_setting("TOKEN_MAX_AGE"))
    try:
        return UUID(value)
    except (TypeError, ValueError) as exc:
        raise signing.BadSignature("Token does not carry a user id") from exc


class BearerTokenAuthentication(BaseAuthentication):
    """Resolves the acting user id; anonymous when no header is sent."""

    def authenticate(self, request: Request) -> tuple[ActingUser, str] | None:
        parts = get_authorization_header(request).split()
        if not parts or parts[0].lower() != KEYWORD.lower().encode():
            return None
        if len(parts) != 2:
            raise exceptions.AuthenticationFailed("Invalid bearer header")

        token = parts[1].decode()
        try:
            user_id = read_token(token)
        except signing.BadSignature as exc:
            raise exceptions.AuthenticationFailed("Invalid or expired token") from exc
        return ActingUser(id=user_id), token

    def authenticate_header(self, request: Request) -> str:
        return KEYWORD


def acting_user_id(request: Request) -> UUID | None:
    user = request.user
    return user.id if user is not None else None
