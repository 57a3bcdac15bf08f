from halloffame.security.rbac import (
    Identity,
    create_access_token,
    get_current_identity,
    hash_password,
    hash_password_async,
    limiter,
    require_admin,
    require_role,
    verify_password,
    verify_password_async,
    verify_token,
)

__all__ = [
    "Identity",
    "create_access_token",
    "get_current_identity",
    "hash_password",
    "hash_password_async",
    "limiter",
    "require_admin",
    "require_role",
    "verify_password",
    "verify_password_async",
    "verify_token",
]
