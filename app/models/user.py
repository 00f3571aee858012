"""ORM model for staff accounts (login, lockout state, and role)."""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Integer,
    String,
    false,
    func,
)

from app.models.base import Base

ROLE_ADMIN = "ADMIN"
ROLE_COLLABORATOR = "COLABORADOR"


class User(Base):
    """
    Staff account for cookie-session authentication and admin-only operations.

    role: 'ADMIN' or 'COLABORADOR'.
    Accounts are never deleted; is_disabled is the soft delete. is_blocked is set
    by the login lockout and cleared only by an administrator.
    """

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("failed_login_attempts >= 0", name="ck_users_failed_login_attempts_nonneg"),
        CheckConstraint("role IN ('ADMIN', 'COLABORADOR')", name="ck_users_role"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False, default=ROLE_COLLABORATOR)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(64), nullable=True)
    failed_login_attempts = Column(Integer, nullable=False, default=0, server_default="0")
    is_blocked = Column(Boolean, nullable=False, default=False, server_default=false())
    is_disabled = Column(Boolean, nullable=False, default=False, server_default=false())
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
