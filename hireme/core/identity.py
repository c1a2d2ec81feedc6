"""
Caller identity as seen by the services.

Authentication happens elsewhere; by the time a request reaches a service
the caller is reduced to a user id and at most one marketplace role.
"""

import enum
from dataclasses import dataclass
from typing import Iterable, Optional


class Role(str, enum.Enum):
    WORKER = "Worker"
    EMPLOYER = "Employer"


@dataclass(frozen=True)
class CallerContext:
    user_id: str
    role: Optional[Role]


def resolve_role(role_claims: Iterable[str]) -> Optional[Role]:
    """
    Map raw role claims to a marketplace role.

    Worker takes precedence when a caller holds both. Returns None when the
    caller holds neither.
    """
    claims = set(role_claims)
    if Role.WORKER.value in claims:
        return Role.WORKER
    if Role.EMPLOYER.value in claims:
        return Role.EMPLOYER
    return None


def caller_from_claims(user_id: str, role_claims: Iterable[str]) -> CallerContext:
    return CallerContext(user_id=user_id, role=resolve_role(role_claims))
