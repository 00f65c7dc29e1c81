"""Domain entity representing a user known to the notification service."""

from dataclasses import dataclass

ROLE_ADMIN = "admin"
ROLE_LEADER = "leader"
ROLE_MEMBER = "member"
ROLES = (ROLE_ADMIN, ROLE_LEADER, ROLE_MEMBER)


@dataclass
class User:
    """Identity attributes used to scope and address notifications."""

    id: str
    name: str
    email: str
    role: str = ROLE_MEMBER
    leader_id: str | None = None
    is_active: bool = True

    def has_role(self, alias: str) -> bool:
        """Return ``True`` when the user's role matches ``alias``."""

        return self.role.lower() == alias.lower()

    def is_admin(self) -> bool:
        return self.has_role(ROLE_ADMIN)

    def is_leader(self) -> bool:
        return self.has_role(ROLE_LEADER)


__all__ = ["User", "ROLE_ADMIN", "ROLE_LEADER", "ROLE_MEMBER", "ROLES"]
