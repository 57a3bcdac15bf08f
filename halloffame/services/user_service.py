"""
halloffame/services/user_service.py
Credential Store: user accounts, password rotation, account provisioning
"""
import logging
import secrets
from typing import Iterable, List, Optional, Tuple

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from halloffame.errors import (
    ConflictError,
    ErrorCode,
    ForbiddenError,
    InvalidCredentials,
    NotFoundError,
    ValidationError,
)
from halloffame.orm.user import User, UserRole
from halloffame.schemas.auth import CommitteeMember, IssuedCredential
from halloffame.security.rbac import (
    Identity,
    create_access_token,
    dummy_verify_async,
    hash_password_async,
    verify_password_async,
)

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8
GENERATED_PASSWORD_LENGTH = 12
# No 0/O/1/l/I so credentials can be read aloud or copied by hand
PASSWORD_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnpqrstuvwxyz23456789!@#$%^&*"


def generate_password(length: int = GENERATED_PASSWORD_LENGTH) -> str:
    return "".join(secrets.choice(PASSWORD_ALPHABET) for _ in range(length))


class UserService:
    """Operations on user accounts"""

    @classmethod
    async def get_by_username(cls, db: AsyncSession, username: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    @classmethod
    async def login(cls, db: AsyncSession, username: str, password: str) -> Tuple[str, Identity]:
        """
        Verify credentials and issue a token.

        Raises InvalidCredentials when the username is unknown or the
        password does not match; no token is issued in either case.
        """
        user = await cls.get_by_username(db, username)

        password_valid = False
        if user:
            password_valid = await verify_password_async(password, user.password_hash)
        else:
            # Unknown usernames take as long as wrong passwords
            await dummy_verify_async()

        if not user or not password_valid:
            logger.warning(f"Invalid credentials for username: {username}")
            raise InvalidCredentials()

        identity = Identity.from_user(user)
        token = create_access_token(identity)
        logger.info(f"User logged in: {user.username} as {identity.role.value}")
        return token, identity

    @classmethod
    async def create_user(
        cls,
        db: AsyncSession,
        username: str,
        password: str,
        role: UserRole,
    ) -> User:
        """Create an account. Duplicate usernames raise ConflictError."""
        username = (username or "").strip()
        if not username or not password:
            raise ValidationError(
                "Username, password, and role are required",
                ErrorCode.MISSING_FIELD,
            )

        user = User(
            username=username,
            password_hash=await hash_password_async(password),
            role=role,
        )
        db.add(user)
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            logger.warning(f"Username already exists: {username}")
            raise ConflictError("Username already exists", ErrorCode.USERNAME_TAKEN)

        await db.refresh(user)
        logger.info(f"User created: {user.username} ({role.value})")
        return user

    @classmethod
    async def list_users(cls, db: AsyncSession) -> List[User]:
        result = await db.execute(select(User).order_by(User.created_at.desc(), User.id.desc()))
        return list(result.scalars().all())

    @classmethod
    async def delete_user(cls, db: AsyncSession, actor: Identity, user_id: int) -> None:
        """
        Delete an account. The database cascades the user's ballot
        selections and nulls the author of their nominations.
        """
        if user_id == actor.id:
            raise ForbiddenError("Cannot delete your own account", ErrorCode.SELF_DELETION)

        result = await db.execute(delete(User).where(User.id == user_id))
        if result.rowcount == 0:
            await db.rollback()
            raise NotFoundError("User not found", ErrorCode.USER_NOT_FOUND)

        await db.commit()
        logger.info(f"User {user_id} deleted by {actor.username}")

    @classmethod
    async def change_password(
        cls,
        db: AsyncSession,
        identity: Identity,
        current_password: str,
        new_password: str,
    ) -> None:
        if len(new_password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"New password must be at least {MIN_PASSWORD_LENGTH} characters",
                details={"field": "newPassword"},
            )

        result = await db.execute(select(User).where(User.id == identity.id))
        user = result.scalar_one_or_none()
        if user is None:
            raise NotFoundError("User not found", ErrorCode.USER_NOT_FOUND)

        if not await verify_password_async(current_password, user.password_hash):
            logger.warning(f"Password change rejected for {identity.username}: wrong current password")
            raise InvalidCredentials()

        user.password_hash = await hash_password_async(new_password)
        await db.commit()
        logger.info(f"Password changed for {identity.username}")

    @classmethod
    async def count_by_role(cls, db: AsyncSession, role: UserRole) -> int:
        result = await db.execute(
            select(func.count()).select_from(User).where(User.role == role)
        )
        return result.scalar() or 0

    @classmethod
    async def first_admin(cls, db: AsyncSession) -> Optional[User]:
        result = await db.execute(
            select(User).where(User.role == UserRole.admin).order_by(User.id).limit(1)
        )
        return result.scalar_one_or_none()

    @classmethod
    async def set_admin(cls, db: AsyncSession, username: str, password: str) -> User:
        """
        Create an admin, or rotate the password of an existing account
        and promote it to admin.
        """
        user = await cls.get_by_username(db, username)
        if user is None:
            return await cls.create_user(db, username, password, UserRole.admin)

        user.password_hash = await hash_password_async(password)
        user.role = UserRole.admin
        await db.commit()
        logger.info(f"Existing account {username} updated to admin")
        return user

    @classmethod
    async def provision_accounts(
        cls,
        db: AsyncSession,
        members: Iterable[CommitteeMember],
        commit: bool = True,
    ) -> List[IssuedCredential]:
        """
        Create committee accounts with generated passwords.

        Existing usernames are skipped. The returned plaintext passwords
        are never stored and cannot be recovered later.
        """
        issued: List[IssuedCredential] = []
        seen = set()

        for member in members:
            username = member.username.strip()
            if not username or username in seen:
                continue
            seen.add(username)

            if await cls.get_by_username(db, username) is not None:
                logger.info(f"Skipped: {username} (already exists)")
                continue

            password = generate_password()
            db.add(User(
                username=username,
                password_hash=await hash_password_async(password),
                role=UserRole.committee,
            ))
            issued.append(IssuedCredential(
                name=member.name,
                username=username,
                password=password,
                email=member.email,
                role=UserRole.committee,
            ))
            logger.info(f"Created committee account: {username}")

        if commit:
            try:
                await db.commit()
            except IntegrityError:
                await db.rollback()
                raise ConflictError("Username already exists", ErrorCode.USERNAME_TAKEN)
        return issued

    @classmethod
    async def run_setup(
        cls,
        db: AsyncSession,
        setup_key: str,
        expected_key: str,
        admin_username: str,
        admin_password: str,
        members: Iterable[CommitteeMember],
    ) -> List[IssuedCredential]:
        """
        One-time bootstrap: create the first admin plus committee accounts
        in a single transaction.
        """
        if not secrets.compare_digest(setup_key.encode("utf-8"), expected_key.encode("utf-8")):
            logger.warning("Setup attempted with invalid setup key")
            raise ForbiddenError("Invalid setup key")

        if await cls.count_by_role(db, UserRole.admin) > 0:
            raise ValidationError(
                "Admin already exists. Setup already completed.",
                ErrorCode.SETUP_COMPLETED,
            )

        admin_username = admin_username.strip()
        db.add(User(
            username=admin_username,
            password_hash=await hash_password_async(admin_password),
            role=UserRole.admin,
        ))
        credentials = [IssuedCredential(
            name="Admin",
            username=admin_username,
            password=admin_password,
            role=UserRole.admin,
        )]
        try:
            await db.flush()
            credentials.extend(await cls.provision_accounts(db, members, commit=False))
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise ConflictError("Username already exists", ErrorCode.USERNAME_TAKEN)

        logger.info(f"Setup completed: admin {admin_username}, {len(credentials) - 1} committee accounts")
        return credentials
