"""
halloffame/security/rbac.py
Authenticator and role gate

Stateless bearer tokens: a signed JWT carries {sub, username, role, exp}.
There is no server-side session table. Only two roles exist:
"admin" and "committee".

Route files use the dependencies at the bottom of this module.
No manual role checks in handlers.
"""
import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from slowapi import Limiter
from slowapi.util import get_remote_address
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from halloffame.config.settings import get_settings
from halloffame.database import get_db
from halloffame.errors import AuthError, ErrorCode, ForbiddenError
from halloffame.orm.user import User, UserRole

logger = logging.getLogger(__name__)

settings = get_settings()

# ================= CONFIG =================

ALGORITHM = settings.JWT_ALGORITHM

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)
bearer_scheme = HTTPBearer(auto_error=False)

limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)

# bcrypt blocks the event loop; hash in a small thread pool instead
_executor: Optional[ThreadPoolExecutor] = None


def get_executor() -> ThreadPoolExecutor:
    global _executor
    if _executor is None:
        _executor = ThreadPoolExecutor(max_workers=4)
    return _executor


# ================= IDENTITY =================

@dataclass(frozen=True)
class Identity:
    """Claims carried by a verified token."""
    id: int
    username: str
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.admin

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "username": self.username, "role": self.role.value}

    @classmethod
    def from_user(cls, user: User) -> "Identity":
        return cls(id=user.id, username=user.username, role=UserRole(user.role))


# ================= PASSWORDS =================

def normalize_password(password: str) -> str:
    """
    bcrypt only supports 72 bytes.
    Truncate AFTER UTF-8 encoding so multi-byte input stays consistent.
    """
    encoded = password.encode("utf-8")
    if len(encoded) > 72:
        encoded = encoded[:72]
    return encoded.decode("utf-8", errors="ignore")


def hash_password(password: str) -> str:
    return pwd_context.hash(normalize_password(password))


def verify_password(plain: str, hashed: str) -> bool:
    """Constant-time bcrypt comparison."""
    try:
        return pwd_context.verify(normalize_password(plain), hashed)
    except (ValueError, TypeError):
        # Unrecognised hash format is a mismatch, not a server error
        logger.warning("Stored password hash could not be parsed")
        return False


async def hash_password_async(password: str) -> str:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(get_executor(), hash_password, password)


async def verify_password_async(plain: str, hashed: str) -> bool:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(get_executor(), verify_password, plain, hashed)


async def dummy_verify_async() -> None:
    """Spend one bcrypt verify when there is no stored hash to check."""
    loop = asyncio.get_running_loop()
    await loop.run_in_executor(get_executor(), pwd_context.dummy_verify)


# ================= TOKENS =================

def create_access_token(
    identity: Identity,
    secret: Optional[str] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Sign a token for identity, expiring after ACCESS_TOKEN_EXPIRE_HOURS by default."""
    secret = secret or settings.JWT_SECRET_KEY
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(hours=settings.ACCESS_TOKEN_EXPIRE_HOURS)
    )
    to_encode = {
        "sub": str(identity.id),
        "username": identity.username,
        "role": identity.role.value,
        "exp": expire,
    }
    return jwt.encode(to_encode, secret, algorithm=ALGORITHM)


def verify_token(token: Optional[str], secret: Optional[str] = None) -> Identity:
    """
    Decode and validate a token.

    Pure function of (token, secret): no store access.
    Raises AuthError for missing, malformed, expired or badly signed tokens.
    """
    if not token:
        raise AuthError("Access token required", ErrorCode.AUTH_REQUIRED)

    secret = secret or settings.JWT_SECRET_KEY
    try:
        payload = jwt.decode(token, secret, algorithms=[ALGORITHM])
    except ExpiredSignatureError:
        raise AuthError("Token has expired", ErrorCode.AUTH_EXPIRED)
    except JWTError:
        raise AuthError("Invalid token", ErrorCode.AUTH_INVALID)

    try:
        return Identity(
            id=int(payload["sub"]),
            username=str(payload["username"]),
            role=UserRole(payload["role"]),
        )
    except (KeyError, TypeError, ValueError):
        raise AuthError("Invalid token payload", ErrorCode.AUTH_INVALID)


def require_role(identity: Identity, role: UserRole) -> Identity:
    """Authorization gate used before role-restricted mutations."""
    if identity.role != role:
        logger.warning(
            f"Access denied: user {identity.id} has role {identity.role.value}, expected {role.value}"
        )
        raise ForbiddenError(f"{role.value.capitalize()} access required")
    return identity


# ================= AUTH DEPENDENCIES =================

async def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> Identity:
    """
    Verify the bearer token, then confirm the account still exists
    with the role the token claims.
    """
    token = credentials.credentials if credentials else None
    identity = verify_token(token)

    result = await db.execute(select(User).where(User.id == identity.id))
    user = result.scalar_one_or_none()

    if user is None:
        raise AuthError("User no longer exists", ErrorCode.AUTH_INVALID)

    if UserRole(user.role) != identity.role:
        logger.warning(f"Role mismatch: token={identity.role.value}, db={user.role}")
        raise AuthError("Token role is out of date", ErrorCode.AUTH_INVALID)

    return identity


def require_admin(identity: Identity = Depends(get_current_identity)) -> Identity:
    """
    Require admin role.
    Use as: Depends(require_admin)
    """
    return require_role(identity, UserRole.admin)
