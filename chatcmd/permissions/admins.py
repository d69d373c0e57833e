from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class AdminRoster:
    """Immutable set of bot administrators, built once before dispatch starts.

    The owner is always an administrator.
    """

    owner_id: int | None = None
    admin_ids: frozenset[int] = field(default_factory=frozenset)

    @classmethod
    def create(cls, owner_id: int | None = None, admin_ids: Iterable[int] = ()) -> AdminRoster:
        ids = set(admin_ids)
        if owner_id is not None:
            ids.add(owner_id)
        return cls(owner_id=owner_id, admin_ids=frozenset(ids))

    @classmethod
    def from_settings(cls, settings: Any) -> AdminRoster:
        return cls.create(settings.owner_id, settings.admin_ids)

    def is_owner(self, user_id: int) -> bool:
        return self.owner_id is not None and user_id == self.owner_id

    def is_admin(self, user_id: int) -> bool:
        return user_id in self.admin_ids
