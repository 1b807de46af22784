"""User service - member lookups."""

from uuid import UUID

from community.domain import User, UserId
from community.services.base import BaseService


class UserService(BaseService):
    """Service for user lookups."""

    def get_user(self, user_id: UserId | UUID) -> User:
        """Return any user. Admins only.

        Raises:
            UserUnauthorizedError: If the acting user is not an admin.
            EntityNotFoundError: If the user does not exist.
        """
        self.allow_only_admins()

        return self.uow.repository(User).get_or_raise(user_id)

    def get_me(self) -> User:
        """Return the acting user."""
        return self.allow_signed_in_users()
