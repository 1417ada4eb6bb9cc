"""
CamManager - Session/Auth Gateway
Login, current-user context and account management

Passwords are compared as stored; credential security is out of scope.
The user collection is written to the key-value store after every change.
"""
import json
import logging
import re
import uuid
from typing import Dict, List, Optional

from pydantic import TypeAdapter, ValidationError as PydanticValidationError

from cammanager.errors import (
    DuplicateUsernameError,
    InvalidCredentialsError,
    StorageError,
    ValidationError,
)
from cammanager.models.audit import LogAction, TargetType
from cammanager.models.settings import USERS_KEY
from cammanager.models.taxonomy import TaxonomyKind
from cammanager.models.user import User, UserRole
from cammanager.schemas.user import UserSave
from cammanager.services.audit import AuditLog
from cammanager.services.storage import KeyValueStore
from cammanager.services.taxonomy import TaxonomyRegistry

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 3

_users_adapter = TypeAdapter(List[User])


def default_users() -> List[User]:
    """Built-in accounts used when nothing usable is stored."""
    return [
        User(
            id="usr_1",
            username="admin",
            password="123",
            full_name="Administrator",
            role=UserRole.ADMIN,
            allowed_locations=[],  # Admin sees all
        ),
        User(
            id="usr_2",
            username="staff",
            password="123",
            full_name="Warehouse Staff",
            role=UserRole.USER,
            allowed_locations=["Technical Warehouse", "Yard"],
        ),
    ]


class SessionGateway:
    """
    Owns the user collection and the single active session.

    Persistence failures are logged and swallowed: the in-memory
    collection stays authoritative until the process exits.
    """

    def __init__(
        self,
        store: KeyValueStore,
        audit: AuditLog,
        taxonomy: Optional[TaxonomyRegistry] = None,
    ) -> None:
        self._store = store
        self._audit = audit
        self._taxonomy = taxonomy
        self._users: Dict[str, User] = {u.id: u for u in self._load()}
        self._current_id: Optional[str] = None

    # ============================================================
    # Persistence
    # ============================================================

    def _load(self) -> List[User]:
        try:
            raw = self._store.get(USERS_KEY)
        except StorageError as e:
            logger.warning(f"User store unavailable, using default accounts: {e}")
            return default_users()

        if not raw:
            logger.info("No stored users, creating default accounts (admin / staff)")
            return default_users()

        try:
            users = _users_adapter.validate_json(raw)
        except PydanticValidationError as e:
            logger.warning(f"Stored users are corrupt, using default accounts: {e.error_count()} errors")
            return default_users()

        if not users:
            logger.warning("Stored user list is empty, using default accounts")
            return default_users()

        logger.info(f"Loaded {len(users)} users")
        return users

    def _persist(self) -> None:
        payload = json.dumps([u.model_dump(mode="json") for u in self._users.values()], ensure_ascii=False)
        try:
            self._store.set(USERS_KEY, payload)
        except StorageError as e:
            logger.warning(f"Failed to persist users, changes will not survive a restart: {e}")

    # ============================================================
    # Session
    # ============================================================

    @property
    def current_user(self) -> Optional[User]:
        if self._current_id is None:
            return None
        return self._users.get(self._current_id)

    def users(self) -> List[User]:
        return list(self._users.values())

    def find_user(self, user_id: str) -> Optional[User]:
        return self._users.get(user_id)

    def login(self, username: str, password: str) -> User:
        """
        Authenticate and make the account current. An account that was
        already active is logged out first.

        Raises:
            InvalidCredentialsError: no account matches both fields exactly
        """
        user = next(
            (u for u in self._users.values() if u.username == username and u.password == password),
            None,
        )
        if user is None:
            logger.warning(f"Invalid login for username: {username}")
            raise InvalidCredentialsError("Incorrect username or password")

        if self._current_id is not None:
            self.logout()
        self._current_id = user.id
        self._audit.append(LogAction.ADD, TargetType.ACCOUNT, user.username, "login", user.username)
        return user

    def logout(self) -> None:
        user = self.current_user
        if user is not None:
            self._audit.append(LogAction.ADD, TargetType.ACCOUNT, user.username, "logout", user.username)
        self._current_id = None

    def change_password(self, new_password: str, confirm_password: Optional[str] = None) -> User:
        user = self.current_user
        if user is None:
            raise ValidationError("No active session")
        if not new_password or not new_password.strip():
            raise ValidationError("Password cannot be empty")
        if len(new_password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        if confirm_password is not None and confirm_password != new_password:
            raise ValidationError("Password confirmation does not match")

        updated = user.model_copy(update={"password": new_password})
        self._users[user.id] = updated
        self._persist()
        self._audit.append(LogAction.EDIT, TargetType.ACCOUNT, user.username, "Changed password", user.username)
        return updated

    # ============================================================
    # Account management (admin)
    # ============================================================

    def save_user(self, data: UserSave, actor: Optional[str]) -> User:
        """
        Insert or update an account.

        Raises:
            ValidationError: blank username/full name, missing password on a
                new account, whitespace in the username, unknown allowed location
            DuplicateUsernameError: username taken by another account
        """
        existing = self._users.get(data.id) if data.id else None
        username = data.username.strip()

        if not username or not data.full_name.strip():
            raise ValidationError("Username and full name are required")
        if existing is None and not (data.password or "").strip():
            raise ValidationError("A password is required for new users")
        if re.search(r"\s", data.username):
            raise ValidationError("Username cannot contain whitespace")

        for other in self._users.values():
            if other.username.lower() == username.lower() and (existing is None or other.id != existing.id):
                raise DuplicateUsernameError(f"Username '{username}' already exists")

        password = data.password if (data.password or "").strip() else (existing.password if existing else "")
        user = User(
            id=existing.id if existing else (data.id or f"usr_{uuid.uuid4().hex[:8]}"),
            username=username,
            password=password,
            full_name=data.full_name.strip(),
            role=data.role,
            avatar=data.avatar,
            allowed_locations=self._canonical_locations(data.allowed_locations),
        )
        self._users[user.id] = user
        self._persist()

        if existing is None:
            self._audit.append(
                LogAction.ADD, TargetType.ACCOUNT, user.username, f"Created {user.role} account", actor
            )
        else:
            self._audit.append(
                LogAction.EDIT, TargetType.ACCOUNT, user.username, _describe_user_change(existing, user), actor
            )
        return user

    def _canonical_locations(self, locations: List[str]) -> List[str]:
        """Stored spelling of every granted location. Without a registry the values are only trimmed."""
        cleaned = _dedupe(locations)
        if self._taxonomy is None:
            return cleaned
        canonical = []
        for location in cleaned:
            stored = self._taxonomy.canonical(TaxonomyKind.LOCATION, location)
            if stored is None:
                raise ValidationError(f"Unknown location: '{location}'")
            canonical.append(stored)
        return _dedupe(canonical)

    def delete_user(self, user_id: str, actor: Optional[str]) -> bool:
        """Delete an account. The active account cannot delete itself (returns False)."""
        if user_id == self._current_id:
            logger.warning(f"Refused to delete the active account {user_id}")
            return False

        user = self._users.pop(user_id, None)
        if user is None:
            return False

        self._persist()
        self._audit.append(LogAction.DELETE, TargetType.ACCOUNT, user.username, "Deleted account", actor)
        return True

    # ============================================================
    # Taxonomy cascades (allowed locations follow location renames)
    # ============================================================

    def count_references(self, kind: TaxonomyKind, value: str) -> Dict[str, int]:
        if kind != TaxonomyKind.LOCATION:
            return {}
        return {"users": sum(1 for u in self._users.values() if _holds(u, value))}

    def rename_references(self, kind: TaxonomyKind, old: str, new: str) -> Dict[str, int]:
        if kind != TaxonomyKind.LOCATION:
            return {}
        touched = 0
        for user_id, user in list(self._users.items()):
            if _holds(user, old):
                locations = _dedupe(new if loc.lower() == old.lower() else loc for loc in user.allowed_locations)
                self._users[user_id] = user.model_copy(update={"allowed_locations": locations})
                touched += 1
        if touched:
            self._persist()
        return {"users": touched}


def _holds(user: User, location: str) -> bool:
    key = location.lower()
    return any(loc.lower() == key for loc in user.allowed_locations)


def _dedupe(values) -> List[str]:
    seen = []
    for value in values:
        value = value.strip()
        if value and value not in seen:
            seen.append(value)
    return seen


def _describe_user_change(before: User, after: User) -> str:
    changes = []
    if before.username != after.username:
        changes.append(f"username: '{before.username}' -> '{after.username}'")
    if before.full_name != after.full_name:
        changes.append(f"full name: '{before.full_name}' -> '{after.full_name}'")
    if before.role != after.role:
        changes.append(f"role: {before.role} -> {after.role}")
    if before.password != after.password:
        changes.append("password reset")
    if before.allowed_locations != after.allowed_locations:
        changes.append(f"locations: {', '.join(after.allowed_locations) or '(none)'}")
    if not changes:
        return "updated, no data changed"
    return "Changed " + "; ".join(changes)
