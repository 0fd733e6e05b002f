"""Request dependencies: the current user and role gates."""
import logging
from typing import Callable, Optional

from fastapi import Cookie, Depends

from nightguard import config
from nightguard.models.domain import User
from nightguard.models.enums import UserRole
from nightguard.services.auth import AuthService
from nightguard.services.documents import DocumentStore
from nightguard.services.errors import Forbidden
from nightguard.services.permissions import has_permission
from nightguard.storage.base import Storage
from nightguard.storage.factory import get_storage

logger = logging.getLogger(__name__)


def get_current_user(
    session_token: Optional[str] = Cookie(None, alias=config.SESSION_COOKIE_NAME),
    storage: Storage = Depends(get_storage)
) -> User:
    """The user behind the session cookie. Raises NotAuthenticated (401)."""
    return AuthService(storage).user_for_token(session_token)


def require_role(minimum: UserRole) -> Callable[..., User]:
    """
    Dependency factory: the current user, provided their role ranks at
    least `minimum`. Otherwise 403.
    """
    def dependency(user: User = Depends(get_current_user)) -> User:
        if not has_permission(user.role, minimum):
            logger.warning(
                "User %s (%s) refused: requires %s",
                user.id, UserRole(user.role).value, minimum.value
            )
            raise Forbidden("Not authorized")
        return user

    return dependency


require_staff = require_role(UserRole.STAFF)
require_security = require_role(UserRole.SECURITY)
require_manager = require_role(UserRole.MANAGER)
require_admin = require_role(UserRole.ADMIN)


def get_document_store() -> DocumentStore:
    return DocumentStore()
