"""
Test helpers shared across modules.
"""
from typing import Dict

from halloffame.database import Database
from halloffame.orm.user import UserRole
from halloffame.security.rbac import Identity, create_access_token
from halloffame.services.user_service import UserService

TEST_PASSWORD = "password123"


async def make_user(
    database: Database,
    username: str,
    role: UserRole = UserRole.committee,
    password: str = TEST_PASSWORD,
) -> Identity:
    async with database.session() as session:
        user = await UserService.create_user(session, username, password, role)
        return Identity.from_user(user)


def auth_headers(identity: Identity) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(identity)}"}
