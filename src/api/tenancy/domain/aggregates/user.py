"""Tenant user aggregate."""

from __future__ import annotations

from dataclasses import dataclass, field

from tenancy.domain.value_objects import UserId


@dataclass
class User:
    """A person with access to one company's data.

    Users live in the tenant database, so the same email may exist in
    several companies without conflict.
    """

    id: UserId
    name: str
    email: str
    phone: str | None = None
    is_active: bool = True
    roles: list[str] = field(default_factory=list)

    @classmethod
    def create(cls, name: str, email: str, phone: str | None = None) -> User:
        """Factory method for creating a new tenant user."""
        return cls(
            id=UserId.generate(),
            name=name,
            email=email.strip().lower(),
            phone=phone,
        )

    def has_role(self, role: str) -> bool:
        return role in self.roles

    def __eq__(self, other: object) -> bool:
        """Users are equal if they have the same ID (identity-based equality)."""
        if not isinstance(other, User):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        """Hash based on ID for use in sets and dicts."""
        return hash(self.id)
