"""Account administration: create/update, soft delete, unblock, and self-service changes."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.security import hash_password, verify_password
from app.models import ROLE_COLLABORATOR, User
from app.schemas.user import (
    PasswordChangeRequest,
    ProfileUpdateRequest,
    UserCreate,
    UserUpdate,
)

logger = logging.getLogger(__name__)


class UserServiceError(Exception):
    """Raised when an account operation cannot be completed."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class UserNotFoundError(UserServiceError):
    """No account with the given id."""

    def __init__(self, user_id: int) -> None:
        self.user_id = user_id
        super().__init__("Usuario no encontrado")


class UsernameTakenError(UserServiceError):
    """Another account already uses the username."""

    def __init__(self, username: str) -> None:
        self.username = username
        super().__init__("El nombre de usuario ya existe")


class IncorrectPasswordError(UserServiceError):
    """The current password supplied for a password change did not match."""

    def __init__(self) -> None:
        super().__init__("La contraseña actual es incorrecta")


def _get_user(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise UserNotFoundError(user_id)
    return user


USERNAME_UNIQUE_INDEX = "ix_users_username"


def _is_username_conflict(e: IntegrityError) -> bool:
    """True if e is the unique violation on users.username, not a check constraint."""
    # psycopg2 names the violated constraint; SQLite only reports "UNIQUE constraint failed: users.username".
    constraint = getattr(getattr(e.orig, "diag", None), "constraint_name", None)
    if constraint is not None:
        return constraint == USERNAME_UNIQUE_INDEX
    return "users.username" in str(e.orig)


def _commit_unique(db: Session, username: str) -> None:
    """
    Commit, translating a unique-username violation into UsernameTakenError.

    Other integrity errors (role or counter check constraints) are re-raised as-is.
    """
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if _is_username_conflict(e):
            raise UsernameTakenError(username) from e
        raise


def list_users(db: Session) -> list[User]:
    return db.query(User).order_by(User.id).all()


def list_technicians(db: Session) -> list[User]:
    """Collaborator accounts, which are the ones assignable as technicians."""
    return (
        db.query(User)
        .filter(User.role == ROLE_COLLABORATOR)
        .order_by(User.name)
        .all()
    )


def create_user(db: Session, data: UserCreate) -> User:
    """Create an account with a hashed password. Raises UsernameTakenError on duplicates."""
    if db.query(User.id).filter(User.username == data.username).first() is not None:
        raise UsernameTakenError(data.username)
    user = User(
        username=data.username,
        password_hash=hash_password(data.password),
        name=data.name,
        email=data.email,
        role=data.role,
        phone=data.phone,
    )
    db.add(user)
    _commit_unique(db, data.username)
    db.refresh(user)
    logger.info("User created: user_id=%s username=%s role=%s", user.id, user.username, user.role)
    return user


def update_user(db: Session, user_id: int, data: UserUpdate) -> User:
    """Apply the fields set in data; a new password is hashed before storage."""
    user = _get_user(db, user_id)
    changes = data.model_dump(exclude_unset=True)
    password = changes.pop("password", None)
    for field, value in changes.items():
        if value is None and field != "phone":
            continue
        setattr(user, field, value)
    if password:
        user.password_hash = hash_password(password)
    _commit_unique(db, user.username)
    db.refresh(user)
    logger.info("User updated: user_id=%s fields=%s", user.id, sorted(data.model_fields_set))
    return user


def disable_user(db: Session, user_id: int) -> None:
    """Soft delete: the account remains but can no longer log in."""
    user = _get_user(db, user_id)
    user.is_disabled = True
    db.commit()
    logger.info("User disabled: user_id=%s", user_id)


def enable_user(db: Session, user_id: int) -> None:
    user = _get_user(db, user_id)
    user.is_disabled = False
    db.commit()
    logger.info("User enabled: user_id=%s", user_id)


def unblock_user(db: Session, user_id: int) -> None:
    """Clear a login lockout: unblock and reset the failed-attempt counter."""
    user = _get_user(db, user_id)
    user.is_blocked = False
    user.failed_login_attempts = 0
    db.commit()
    logger.info("User unblocked: user_id=%s", user_id)


def change_password(db: Session, user: User, data: PasswordChangeRequest) -> None:
    """Replace user's password after checking the current one."""
    if not verify_password(data.current_password, user.password_hash):
        raise IncorrectPasswordError()
    user.password_hash = hash_password(data.new_password)
    db.commit()
    logger.info("Password changed: user_id=%s", user.id)


def update_profile(db: Session, user: User, data: ProfileUpdateRequest) -> User:
    user.name = data.name
    user.email = data.email
    user.phone = data.phone
    db.commit()
    db.refresh(user)
    return user
