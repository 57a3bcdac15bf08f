"""
User CLI commands: create-admin, create-committee

Generated passwords are printed once. Store them somewhere safe; only
their hashes are kept in the database.
"""
import csv
from typing import List, Sequence

from halloffame.cli.base import Command
from halloffame.schemas.auth import CommitteeMember, IssuedCredential
from halloffame.services.user_service import UserService, generate_password


def parse_member_spec(spec: str) -> CommitteeMember:
    """
    Parse NAME:USERNAME[:EMAIL].

    >>> parse_member_spec("Jane Doe:jdoe:jane@example.com").username
    'jdoe'
    """
    parts = [part.strip() for part in spec.split(":")]
    if len(parts) not in (2, 3) or not parts[1]:
        raise ValueError(f"Expected NAME:USERNAME[:EMAIL], got {spec!r}")
    return CommitteeMember(
        name=parts[0] or None,
        username=parts[1],
        email=parts[2] if len(parts) == 3 and parts[2] else None,
    )


def read_members_csv(path: str) -> List[CommitteeMember]:
    """Read committee members from a CSV with name, username and email columns."""
    members = []
    with open(path, newline="", encoding="utf-8-sig") as f:
        for row in csv.DictReader(f):
            row = {(key or "").strip().lower(): (value or "").strip() for key, value in row.items()}
            if not row.get("username"):
                continue
            members.append(CommitteeMember(
                name=row.get("name") or None,
                username=row["username"],
                email=row.get("email") or None,
            ))
    return members


def print_credentials(credentials: Sequence[IssuedCredential]) -> None:
    print("═══════════════════════════════════════════════════════════")
    print("⚠️  IMPORTANT: Save these credentials securely!")
    print("   Each member should change their password after first login.")
    print("═══════════════════════════════════════════════════════════")
    for credential in credentials:
        label = f"{credential.name} " if credential.name else ""
        print(f"\n{label}({credential.role.value})")
        print(f"  Username: {credential.username}")
        print(f"  Password: {credential.password}")
        if credential.email:
            print(f"  Email:    {credential.email}")


class UserCommand(Command):
    """User account CLI command handler."""

    def execute(self, args) -> int:
        if args.users_action == "create-admin":
            return self._create_admin(args)
        elif args.users_action == "create-committee":
            return self._create_committee(args)
        print("Error: Unknown users action")
        return 1

    def _create_admin(self, args) -> int:
        password = args.password or generate_password()

        if self.dry_run:
            print(f"[DRY RUN] Would create or update admin account {args.username}")
            return 0

        async def handler(db) -> int:
            user = await UserService.set_admin(db, args.username, password)
            print(f"✓ Admin account ready: {user.username}")
            if not args.password:
                print(f"  Generated password: {password}")
            return 0

        return self.run(handler)

    def _create_committee(self, args) -> int:
        try:
            members = [parse_member_spec(spec) for spec in args.member or []]
            if args.file:
                members.extend(read_members_csv(args.file))
        except (OSError, ValueError) as e:
            print(f"Error: {e}")
            return 1

        if not members:
            print("Error: No committee members given (--member or --file required)")
            return 1

        if self.dry_run:
            print(f"[DRY RUN] Would create {len(members)} committee accounts:")
            for member in members:
                print(f"  - {member.username}")
            return 0

        async def handler(db) -> int:
            credentials = await UserService.provision_accounts(db, members)
            skipped = len(members) - len(credentials)
            if credentials:
                print_credentials(credentials)
            print(f"\n✓ Created {len(credentials)} accounts, skipped {skipped}")
            return 0

        return self.run(handler)
