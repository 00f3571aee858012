"""Credential validation with failed-login lockout."""

import logging
from enum import Enum

from sqlalchemy import case, update
from sqlalchemy.orm import Session

from app.core.security import verify_dummy_password, verify_password
from app.models import User
from app.schemas.auth import UserIdentity

logger = logging.getLogger(__name__)

# Consecutive failed logins after which an account is blocked until an admin clears it.
FAILED_ATTEMPTS_THRESHOLD = 5


class LoginFailure(Enum):
    """Why a login was refused. The value is the message shown to the user."""

    INCOMPLETE_CREDENTIALS = "Credenciales incompletas"
    INVALID_CREDENTIALS = "Credenciales inválidas"
    ACCOUNT_DISABLED = "Cuenta deshabilitada"
    ACCOUNT_BLOCKED = "Cuenta bloqueada temporalmente"

    @property
    def message(self) -> str:
        return self.value


def _record_failed_attempt(db: Session, user_id: int, threshold: int) -> bool:
    """
    Increment the failed-login counter in a single UPDATE and block at the threshold.

    Returns the resulting blocked flag. The increment is computed by the database so
    concurrent failures against the same account are never lost.
    """
    next_count = User.failed_login_attempts + 1
    stmt = (
        update(User)
        .where(User.id == user_id)
        .values(
            failed_login_attempts=next_count,
            is_blocked=case((next_count >= threshold, True), else_=User.is_blocked),
        )
        .returning(User.failed_login_attempts, User.is_blocked)
        .execution_options(synchronize_session=False)
    )
    attempts, blocked = db.execute(stmt).one()
    db.commit()
    if blocked:
        logger.warning(
            "Account blocked after failed logins: user_id=%s failed_login_attempts=%s",
            user_id,
            attempts,
        )
    return bool(blocked)


def _reset_failed_attempts(db: Session, user_id: int) -> None:
    db.query(User).filter(User.id == user_id).update(
        {User.failed_login_attempts: 0, User.is_blocked: False},
        synchronize_session=False,
    )
    db.commit()


def validate_credentials(
    db: Session,
    username: str,
    password: str,
    *,
    max_failed_attempts: int = FAILED_ATTEMPTS_THRESHOLD,
) -> UserIdentity | LoginFailure:
    """
    Check username/password against the stored account.

    Returns the account's UserIdentity on success, otherwise the LoginFailure that
    applies. Disabled and blocked accounts are refused before the password is
    checked. A wrong password increments the failed-attempt counter and blocks the
    account once it reaches max_failed_attempts; a correct one resets both.
    """
    if not username or not password:
        return LoginFailure.INCOMPLETE_CREDENTIALS

    user = db.query(User).filter(User.username == username).first()
    if user is None:
        verify_dummy_password(password)
        logger.info("Login failed: username=%s reason=unknown_user", username)
        return LoginFailure.INVALID_CREDENTIALS

    if user.is_disabled:
        logger.info("Login refused: username=%s reason=disabled", username)
        return LoginFailure.ACCOUNT_DISABLED
    if user.is_blocked:
        logger.info("Login refused: username=%s reason=blocked", username)
        return LoginFailure.ACCOUNT_BLOCKED

    if not verify_password(password, user.password_hash):
        user_id = user.id
        blocked = _record_failed_attempt(db, user_id, max_failed_attempts)
        logger.info("Login failed: username=%s reason=bad_password", username)
        if blocked:
            return LoginFailure.ACCOUNT_BLOCKED
        return LoginFailure.INVALID_CREDENTIALS

    identity = UserIdentity.model_validate(user)
    _reset_failed_attempts(db, identity.id)
    logger.info("Login succeeded: user_id=%s username=%s", identity.id, identity.username)
    return identity
