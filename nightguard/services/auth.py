"""Session-cookie authentication backed by the configured storage."""
import logging
import secrets
from datetime import datetime, timedelta
from typing import Optional, Tuple

from nightguard import config
from nightguard.models.domain import User
from nightguard.models.enums import UserRole
from nightguard.services.errors import NotAuthenticated, ValidationError
from nightguard.services.passwords import hash_password, verify_password
from nightguard.storage.base import Storage

logger = logging.getLogger(__name__)

# Roles open to self-registration. Managers and admins are promoted by an admin.
SELF_REGISTER_ROLES = (UserRole.STAFF, UserRole.SECURITY)


class AuthService:

    def __init__(self, storage: Storage):
        self.storage = storage

    def register(self, username: str, password: str, name: str, email: str, role: UserRole) -> User:
        if UserRole(role) not in SELF_REGISTER_ROLES:
            raise ValidationError(
                "Only staff or security accounts can be registered",
                errors=[{"field": "role", "message": "Must be 'staff' or 'security'"}]
            )
        if self.storage.get_user_by_username(username) is not None:
            raise ValidationError(
                "Username already exists",
                errors=[{"field": "username", "message": "Username already exists"}]
            )
        user = self.storage.create_user({
            "username": username,
            "password": hash_password(password),
            "name": name,
            "email": email,
            "role": UserRole(role),
            "document_verified": False,
        })
        logger.info("Registered user %s (%s)", user.id, UserRole(role).value)
        return user

    def login(self, username: str, password: str) -> Tuple[User, str]:
        """Verify credentials and open a session. Returns the user and session token."""
        user = self.storage.get_user_by_username(username)
        if user is None or not verify_password(password, user.password):
            logger.warning("Failed login for username %r", username)
            raise NotAuthenticated("Invalid username or password")
        return user, self.start_session(user)

    def start_session(self, user: User) -> str:
        token = secrets.token_urlsafe(32)
        expires_at = datetime.utcnow() + timedelta(hours=config.SESSION_TTL_HOURS)
        self.storage.create_session(token, user.id, expires_at)
        logger.info("User %s logged in", user.id)
        return token

    def logout(self, token: Optional[str]) -> None:
        if token:
            self.storage.delete_session(token)

    def user_for_token(self, token: Optional[str]) -> User:
        """The user owning a live session, or NotAuthenticated."""
        if not token:
            raise NotAuthenticated("Not authenticated")
        session = self.storage.get_session(token)
        if session is None:
            raise NotAuthenticated("Not authenticated")
        if session.expires_at <= datetime.utcnow():
            self.storage.delete_session(token)
            raise NotAuthenticated("Session expired")
        user = self.storage.get_user(session.user_id)
        if user is None:
            raise NotAuthenticated("Not authenticated")
        return user


def ensure_default_admin(storage: Storage) -> Optional[User]:
    """Create the configured admin when the register has no users yet."""
    if storage.get_users():
        return None
    admin = storage.create_user({
        "username": config.ADMIN_USERNAME,
        "password": hash_password(config.ADMIN_PASSWORD),
        "name": "Admin User",
        "email": "admin@nightguard.local",
        "role": UserRole.ADMIN,
        "document_verified": False,
    })
    logger.warning("Created default admin account %r; change its password", config.ADMIN_USERNAME)
    return admin
