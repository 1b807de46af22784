"""Acting-user bound base service.

Every domain service is constructed for one request with the acting user
fixed at construction. Operations call exactly one ``allow_*`` guard before
they touch the unit of work.
"""

import logging
from typing import Self
from uuid import UUID

from community.domain import User, UserId, UserUnauthorizedError
from community.domain.value_objects import as_uuid
from community.stores.interfaces import UnitOfWork

logger = logging.getLogger(__name__)


class BaseService:
    """Authorization guard shared by all domain services."""

    def __init__(self, uow: UnitOfWork, acting_user: User | None = None) -> None:
        self._uow = uow
        self._acting_user = acting_user

    @classmethod
    def as_user(cls, uow: UnitOfWork, user_id: UserId | UUID | None) -> Self:
        """Return a service bound to ``user_id``, or to the anonymous context for None.

        Raises:
            EntityNotFoundError: If ``user_id`` does not identify a User.
        """
        if user_id is None:
            return cls(uow, None)
        return cls(uow, uow.repository(User).get_or_raise(user_id))

    @property
    def acting_user(self) -> User | None:
        return self._acting_user

    @property
    def is_anonymous(self) -> bool:
        return self._acting_user is None

    @property
    def uow(self) -> UnitOfWork:
        return self._uow

    # ------------------------------------------------------------------ #
    # Guards
    # ------------------------------------------------------------------ #

    def allow_all_users(self) -> User | None:
        return self._acting_user

    def allow_signed_in_users(self) -> User:
        if self._acting_user is None:
            self._deny("sign-in required")
        return self._acting_user

    def allow_only_admins(self) -> User:
        user = self.allow_signed_in_users()
        if not user.is_admin:
            self._deny("admin role required")
        return user

    def allow_only_organizers(self) -> User:
        user = self.allow_signed_in_users()
        if not (user.is_organizer or user.is_admin):
            self._deny("organizer role required")
        return user

    def allow_only_user(self, target: User | UserId | UUID | None) -> User:
        """Admit the target user or any admin."""
        user = self.allow_signed_in_users()
        if user.is_admin:
            return user
        if isinstance(target, User):
            target = target.id
        if target is None or as_uuid(target) != as_uuid(user.id):
            self._deny("not the owner")
        return user

    def _deny(self, reason: str) -> None:
        who = "anonymous" if self._acting_user is None else str(self._acting_user.id)
        logger.info("%s denied for %s: %s", type(self).__name__, who, reason)
        raise UserUnauthorizedError(f"Operation not permitted: {reason}")
