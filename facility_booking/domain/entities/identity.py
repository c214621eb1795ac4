from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Role(str, Enum):
    requester = "Requester"
    approver = "Approver"


@dataclass(frozen=True)
class Identity:
    user_id: str
    email: str
    name: str
    role: Role = Role.requester

    @property
    def is_approver(self) -> bool:
        return self.role == Role.approver
