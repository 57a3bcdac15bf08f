"""
halloffame/orm/user.py
Committee and admin accounts (Credential Store)
"""
from enum import Enum

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, String
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import relationship

from halloffame.orm.base import Base, utcnow


class UserRole(str, Enum):
    """Only two roles exist: admin and committee"""
    admin = "admin"
    committee = "committee"


class User(Base):
    """
    User account.

    Immutable apart from password_hash (rotated) and deletion.
    Deleting a user cascades to their ballot selections at the
    database level; nominations they authored keep a NULL author.
    """
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("role IN ('admin', 'committee')", name="ck_users_role"),
    )

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    username = Column(String(100), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(
        SQLEnum(UserRole, native_enum=False, create_constraint=False, length=20),
        nullable=False,
        default=UserRole.committee,
        index=True,
    )
    created_at = Column(DateTime, default=utcnow, nullable=False)

    selections = relationship(
        "BallotSelection",
        back_populates="user",
        passive_deletes=True,
    )

    def __repr__(self):
        return f"<User(id={self.id}, username='{self.username}', role={self.role})>"